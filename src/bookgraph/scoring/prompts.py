"""
Prompt construction and reply parsing for the sentiment scoring model.
"""

from __future__ import annotations

import json
from typing import Any

from ..core.errors import InvalidEntityError
from ..core.models import Entity, SentimentVector
from ..core.types import DIMENSION_GUIDES, SENTIMENT_DIMENSIONS

MAX_PROMPT_SUBJECTS = 5
MAX_DESCRIPTION_CHARS = 500

SYSTEM_PROMPT = (
    "You score books on five sentiment dimensions. "
    "Reply with a single JSON object whose keys are "
    + ", ".join(SENTIMENT_DIMENSIONS)
    + " and whose values are decimals between 0 and 1."
)


def build_prompt(entity: Entity) -> str:
    """Build the user prompt asking for one book's scores."""
    lines = [
        "Analyze the following book and provide sentiment/mood scores from 0 to 1 for each dimension.",
        "",
        f'Book: "{entity.title}" by {entity.author}',
        f"Genre: {entity.category}",
    ]

    if entity.subjects:
        lines.append(f"Subjects/Themes: {', '.join(entity.subjects[:MAX_PROMPT_SUBJECTS])}")

    if entity.description:
        lines.append(f"Description: {entity.description[:MAX_DESCRIPTION_CHARS]}")

    lines.append("")
    lines.append(
        "Based on your knowledge of this book (or similar books if unfamiliar), score each dimension:"
    )
    lines.extend(f"- {name}: {DIMENSION_GUIDES[name]}" for name in SENTIMENT_DIMENSIONS)
    lines.append("")
    lines.append("Provide scores as decimals between 0 and 1.")

    return "\n".join(lines)


def parse_scores(content: str | dict[str, Any]) -> SentimentVector:
    """
    Parse a model reply into a sentiment vector.

    Args:
        content: JSON text (optionally wrapped in a markdown fence) or an
            already-decoded object

    Raises:
        InvalidEntityError: If the reply is not valid JSON or holds
            invalid scores
    """
    if isinstance(content, str):
        text = content.strip()
        if text.startswith("```"):
            text = text.strip("`")
            if text.startswith("json"):
                text = text[4:]
        try:
            content = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidEntityError(f"Scoring reply is not valid JSON: {e}") from e

    return SentimentVector.from_mapping(content)
