"""
Channel Review Constants

Model parameters, prompt text and cost accounting for the LLM channel review.
"""

from __future__ import annotations


class ReviewConfig:
    """Chat-completion parameters."""

    API_KEY_ENV = "OPENAI_API_KEY"
    MODEL = "gpt-4o-mini"
    TEMPERATURE = 0.3
    MAX_TOKENS = 1500
    COST_PER_CALL = 0.003
    MAX_RECENT_TITLES = 20
    TIMEOUT = 60.0


class ReviewPrompts:
    """Fixed prompt pair sent to the provider."""

    SYSTEM = (
        "You are a content advisor helping parents make informed decisions about "
        "YouTube channels for their children. Be thorough but fair - not all "
        "entertainment is harmful, but parents deserve to know about any "
        "potentially concerning content. Always return valid JSON only, no "
        "markdown formatting."
    )

    NO_DESCRIPTION = "No description available"
    UNKNOWN_SUBSCRIBERS = "Unknown"
    NO_RECENT_VIDEOS = "No recent videos available"


class ReviewValues:
    """Allowed values inside a review payload."""

    CONCERN_CATEGORIES: tuple[str, ...] = (
        "violence",
        "language",
        "scary-content",
        "mature-themes",
        "commercialism",
        "screen-addiction",
        "other",
    )
    SEVERITIES: tuple[str, ...] = ("mild", "moderate", "significant")
