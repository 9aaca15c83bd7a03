"""
JSON Output Formatter for TubeVault CLI

Envelope used by every command when ``--json`` is given:
``{success, timestamp, command, data, errors, warnings}``.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import orjson
import typer
from pydantic import BaseModel


def safe_json_serialize(obj: Any) -> Any:  # noqa: PLR0911
    """Convert command results into JSON-serializable values.

    Pydantic models are dumped by alias, dataclasses field by field.

    Example:
        >>> safe_json_serialize({"key": ("a", 1)})
        {'key': ['a', 1]}
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: safe_json_serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, (list, tuple, set)):
        return [safe_json_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): safe_json_serialize(v) for k, v in obj.items()}
    return str(obj)


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """Format command output as JSON.

    Args:
        success: Whether the command executed successfully
        command: The command name (e.g., "search videos")
        data: The command's output data
        errors: List of error messages
        warnings: List of warning messages

    Returns:
        JSON-encoded bytes ready for output
    """
    errors = errors or []
    warnings = warnings or []

    if errors:
        success = False

    json_data = {
        "success": success,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": safe_json_serialize(data),
        "errors": errors,
        "warnings": warnings,
    }

    return orjson.dumps(json_data, option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2)


def write_json_output(output: bytes) -> None:
    """Write an encoded envelope plus newline to stdout."""
    typer.echo(output.decode("utf-8"))
