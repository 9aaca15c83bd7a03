"""Chat-completion client for channel reviews.

Thin wrapper over ``openai.AsyncOpenAI`` that sends the fixed prompt pair in
JSON-object mode and returns the raw message text. There is no retry: a
provider failure surfaces as ``InfrastructureError``.
"""

from __future__ import annotations

import logging
import time

import openai
from openai import AsyncOpenAI

from tubevault.config.loader import get_config
from tubevault.config.models.api_settings import OpenAISettings
from tubevault.shared.constants import ReviewConfig
from tubevault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_missing_api_key_error,
)
from tubevault.shared.logging import log_api_call, log_operation_error

logger = logging.getLogger(__name__)


class ReviewClient:
    """Generates channel reviews through the OpenAI chat-completions API.

    Args:
        settings: Provider settings (defaults to the global configuration)
        client: Pre-built AsyncOpenAI client, mainly for tests

    Raises:
        SecurityError: If no API key is configured and no client is given
    """

    def __init__(
        self,
        settings: OpenAISettings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.settings = settings or get_config().api.openai

        if client is None:
            if not self.settings.api_key:
                raise create_missing_api_key_error(
                    ReviewConfig.API_KEY_ENV,
                    operation="review_client_init",
                )
            client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                max_retries=0,
            )

        self._client = client

    async def complete(self, messages: list[dict[str, str]], channel_id: str | None = None) -> str:
        """Send one chat completion and return the message content.

        Args:
            messages: System/user message pair
            channel_id: Channel being reviewed, for logging only

        Returns:
            Raw response text (may be wrapped in a code fence)

        Raises:
            InfrastructureError: If the provider call fails
        """
        started = time.monotonic()

        try:
            response = await self._client.chat.completions.create(
                model=self.settings.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            code = (
                ErrorCode.API_TIMEOUT
                if isinstance(e, openai.APITimeoutError)
                else ErrorCode.API_AUTHENTICATION_FAILED
                if isinstance(e, openai.AuthenticationError)
                else ErrorCode.API_REQUEST_FAILED
            )
            error = InfrastructureError(
                code=code,
                message=f"Channel review request failed: {e}",
                context=ErrorContext(
                    operation="review_completion",
                    additional_data={"model": self.settings.model, "channel_id": channel_id or ""},
                ),
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

        log_api_call(
            logger,
            endpoint="chat.completions",
            method="POST",
            status_code=200,
            duration_ms=(time.monotonic() - started) * 1000,
            context={"model": self.settings.model, "channel_id": channel_id or ""},
        )

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()


__all__ = ["ReviewClient"]
