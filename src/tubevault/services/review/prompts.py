"""Prompt construction and response cleanup for channel reviews."""

from __future__ import annotations

from collections.abc import Sequence

from tubevault.shared.constants import ReviewConfig, ReviewPrompts, ReviewValues

_USER_PROMPT_TEMPLATE = """You are a content advisor helping parents evaluate YouTube channels for their children.

**Channel:** {channel_title}
**Subscribers:** {subscribers}
**Description:** {description}

**Recent Videos:**
{video_list}

Analyze this YouTube channel and provide a comprehensive assessment for parents:

1. **Summary** (2-3 sentences): What is this channel about? What type of content does it typically create?

2. **Content Categories**: List the main content types (e.g., "Gaming", "Educational", "Vlogs", "Music", "Comedy", etc.)

3. **Potential Concerns**: Identify any content that might concern parents. For each concern:
   - Category: ({categories})
   - Severity: ({severities})
   - Description: Brief explanation

   Look for:
   - Violence or aggression (even cartoon/game violence)
   - Inappropriate language or themes
   - Scary or disturbing content
   - Commercialism (excessive product promotion, gambling elements like loot boxes)
   - Content that may be addictive or encourage excessive screen time
   - Age-inappropriate relationship themes
   - Risky behavior encouragement

4. **Recommendation**:
   - "Recommended" - Clearly kid-friendly content (educational channels, PBS Kids, etc.)
   - "Review Videos First" - Mixed content, parent should preview before approving
   - "Not Recommended" - Contains significant mature content

5. **Age Recommendation**: Suggest an appropriate minimum age (e.g., "3+", "7+", "10+", "13+", "16+")

Return ONLY valid JSON (no markdown) in this format:
{{
  "summary": "This channel is about...",
  "contentCategories": ["Gaming", "Entertainment"],
  "concerns": [
    {{
      "category": "violence",
      "severity": "mild",
      "description": "Contains cartoon violence in gameplay"
    }}
  ],
  "recommendation": "Review Videos First",
  "ageRecommendation": "7+"
}}

If the channel appears to be clearly kid-friendly with no concerns, return an empty array for concerns."""


def format_video_list(titles: Sequence[str], limit: int = ReviewConfig.MAX_RECENT_TITLES) -> str:
    """Number at most ``limit`` titles, one per line."""
    lines = [f"{idx}. {title}" for idx, title in enumerate(titles[:limit], start=1)]
    return "\n".join(lines) if lines else ReviewPrompts.NO_RECENT_VIDEOS


def build_review_prompt(
    channel_title: str,
    description: str | None = None,
    subscriber_count: int | None = None,
    recent_video_titles: Sequence[str] = (),
) -> str:
    """Render the user prompt for one channel."""
    return _USER_PROMPT_TEMPLATE.format(
        channel_title=channel_title,
        subscribers=subscriber_count if subscriber_count is not None else ReviewPrompts.UNKNOWN_SUBSCRIBERS,
        description=description or ReviewPrompts.NO_DESCRIPTION,
        video_list=format_video_list(list(recent_video_titles)),
        categories=", ".join(ReviewValues.CONCERN_CATEGORIES),
        severities=", ".join(ReviewValues.SEVERITIES),
    )


def build_messages(user_prompt: str) -> list[dict[str, str]]:
    """System/user message pair for the chat-completion call."""
    return [
        {"role": "system", "content": ReviewPrompts.SYSTEM},
        {"role": "user", "content": user_prompt},
    ]


def strip_code_fence(content: str) -> str:
    """Remove a leading ```json or ``` fence and the matching trailing fence.

    Example:
        >>> strip_code_fence('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
    """
    cleaned = content.strip()
    for fence in ("```json", "```"):
        if cleaned.startswith(fence):
            cleaned = cleaned[len(fence) :].lstrip("\r\n")
            if cleaned.endswith("```"):
                cleaned = cleaned[:-3]
            return cleaned.strip()
    return cleaned


__all__ = [
    "build_messages",
    "build_review_prompt",
    "format_video_list",
    "strip_code_fence",
]
