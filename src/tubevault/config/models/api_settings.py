"""API configuration models (YouTube, OpenAI).

Configuration for the two upstream services: the YouTube Data API used by
the catalog client and the chat-completion provider used by channel reviews.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tubevault.shared.constants import ReviewConfig, VideoSearchParams, YouTubeConfig


class YouTubeSettings(BaseModel):
    """YouTube Data API configuration.

    Security: api_key is masked in __repr__.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="YouTube Data API key",
    )
    base_url: str = Field(
        default=YouTubeConfig.BASE_URL,
        description="YouTube Data API base URL",
    )
    timeout: int = Field(
        default=YouTubeConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    region_code: str = Field(
        default=VideoSearchParams.REGION_CODE,
        description="regionCode bias applied to video searches",
    )
    relevance_language: str = Field(
        default=VideoSearchParams.RELEVANCE_LANGUAGE,
        description="relevanceLanguage bias applied to video searches",
    )

    def __repr__(self) -> str:
        """Custom repr that masks the API key."""
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"YouTubeSettings("
            f"api_key={masked_key}, "
            f"base_url={self.base_url}, "
            f"timeout={self.timeout})"
        )


class OpenAISettings(BaseModel):
    """Chat-completion provider configuration for channel reviews.

    Security: api_key is masked in __repr__.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="OpenAI API key",
    )
    base_url: str | None = Field(
        default=None,
        description="Optional OpenAI-compatible endpoint",
    )
    model: str = Field(default=ReviewConfig.MODEL, description="Chat model name")
    temperature: float = Field(
        default=ReviewConfig.TEMPERATURE,
        ge=0,
        le=2,
        description="Sampling temperature",
    )
    max_tokens: int = Field(
        default=ReviewConfig.MAX_TOKENS,
        gt=0,
        description="Completion token limit",
    )
    timeout: float = Field(
        default=ReviewConfig.TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    cost_per_call: float = Field(
        default=ReviewConfig.COST_PER_CALL,
        ge=0,
        description="Estimated USD cost of one review call",
    )

    def __repr__(self) -> str:
        """Custom repr that masks the API key."""
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"OpenAISettings("
            f"api_key={masked_key}, "
            f"model={self.model}, "
            f"temperature={self.temperature}, "
            f"max_tokens={self.max_tokens})"
        )


class APISettings(BaseModel):
    """API configuration container."""

    youtube: YouTubeSettings = Field(
        default_factory=YouTubeSettings,
        description="YouTube Data API configuration",
    )
    openai: OpenAISettings = Field(
        default_factory=OpenAISettings,
        description="Channel review provider configuration",
    )


__all__ = [
    "APISettings",
    "OpenAISettings",
    "YouTubeSettings",
]
