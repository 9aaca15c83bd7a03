"""Channel review payload and outcome models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class ReviewConcern(BaseModel):
    """One content concern raised by a review."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    category: str
    severity: str
    description: str = ""


class ChannelReview(BaseModel):
    """Structured review returned by the provider.

    The provider answers in camelCase JSON; fields accept both the camelCase
    aliases and their snake_case names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary: str
    content_categories: list[str] = Field(default_factory=list, alias="contentCategories")
    concerns: list[ReviewConcern] = Field(default_factory=list)
    recommendation: str
    age_recommendation: str = Field(default="", alias="ageRecommendation")


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of ``ChannelReviewService.review_channel``.

    ``cache_hit_count`` is the entry's reuse count including this hit, or 0
    when the review was freshly generated.
    """

    review: ChannelReview
    from_cache: bool
    cache_hit_count: int


__all__ = ["ChannelReview", "ReviewConcern", "ReviewOutcome"]
