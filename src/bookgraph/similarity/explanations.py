"""
Human-readable reasons for why two books are connected.

The rule is deterministic: rank the five dimensions so that ones where both
books agree AND score high come first, then name the top two when their
shared average is above the midpoint.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.models import Entity
from ..core.types import DIMENSION_LABELS, SENTIMENT_DIMENSIONS

# Weight of the shared average when ranking dimensions
AVERAGE_WEIGHT = 0.5
# A dimension is only worth mentioning above this shared average
MENTION_THRESHOLD = 0.5
MAX_MENTIONED = 2


@dataclass(frozen=True)
class DimensionMatch:
    """How two books compare on a single dimension."""

    dimension: str
    difference: float
    average: float

    @property
    def rank_score(self) -> float:
        """Lower is a stronger shared trait."""
        return self.difference - AVERAGE_WEIGHT * self.average

    @property
    def label(self) -> str:
        return DIMENSION_LABELS[self.dimension]


def format_percent(score: float) -> int:
    """Similarity as a whole percentage, rounding halves up."""
    return int(math.floor(score * 100 + 0.5))


def rank_dimensions(a: Entity, b: Entity) -> list[DimensionMatch]:
    """
    Order dimensions by shared strength.

    Args:
        a: First entity
        b: Second entity

    Returns:
        All five dimensions, strongest shared trait first. Ties keep the
        canonical dimension order.
    """
    matches = []
    for name in SENTIMENT_DIMENSIONS:
        val1 = getattr(a.vector, name)
        val2 = getattr(b.vector, name)
        matches.append(
            DimensionMatch(
                dimension=name,
                difference=abs(val1 - val2),
                average=(val1 + val2) / 2,
            )
        )

    matches.sort(key=lambda m: m.rank_score)
    return matches


def shared_traits(a: Entity, b: Entity) -> list[DimensionMatch]:
    """Top-ranked dimensions whose shared average is worth mentioning."""
    top = rank_dimensions(a, b)[:MAX_MENTIONED]
    return [m for m in top if m.average > MENTION_THRESHOLD]


def explain(a: Entity, b: Entity, similarity: float) -> str:
    """
    Explain the connection between two books.

    Args:
        a: First entity
        b: Second entity
        similarity: Their similarity score

    Returns:
        One or two clauses naming shared strengths plus the overall match,
        or a generic sentence citing the score when nothing stands out.
    """
    percent = format_percent(similarity)
    if not shared_traits(a, b):
        return (
            f"These works share a {percent}% thematic similarity "
            "based on their emotional and intellectual profiles."
        )

    # The top-ranked slot names a strength, the runner-up a resemblance
    top = rank_dimensions(a, b)[:MAX_MENTIONED]
    clauses = [
        f"Both share strong {m.label}" if rank == 0 else f"similar {m.label}"
        for rank, m in enumerate(top)
        if m.average > MENTION_THRESHOLD
    ]

    return f"{' and '.join(clauses)}. Overall {percent}% thematic match."
