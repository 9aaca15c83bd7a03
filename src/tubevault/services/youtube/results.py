"""Typed outcomes of catalog client calls.

Transient upstream failures never raise: every client call returns a
``CatalogResult`` so the orchestrator can degrade gracefully.

Example:
    >>> result = await client.search_videos("dinosaurs", 20)
    >>> if isinstance(result, CatalogSuccess):
    ...     stubs = result.value
    ... else:
    ...     print(result.message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class CatalogSuccess(Generic[T]):
    """Successful upstream call carrying its value."""

    value: T


@dataclass(frozen=True)
class QuotaExceeded:
    """The upstream rejected the call because the daily quota is spent."""

    message: str


@dataclass(frozen=True)
class UpstreamError:
    """Any other non-success upstream response or transport failure."""

    message: str
    status_code: int | None = None


CatalogError = Union[QuotaExceeded, UpstreamError]
CatalogResult = Union[CatalogSuccess[T], QuotaExceeded, UpstreamError]


__all__ = [
    "CatalogError",
    "CatalogResult",
    "CatalogSuccess",
    "QuotaExceeded",
    "UpstreamError",
]
