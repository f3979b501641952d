"""
Cosine similarity between sentiment vectors.

Scores range over [-1, 1]. Sentiment components are non-negative, so in
practice scores fall in [0, 1], but nothing here relies on that.
"""

from __future__ import annotations

import math

from ..core.models import SentimentVector


def similarity(a: SentimentVector, b: SentimentVector) -> float:
    """
    Compute cosine similarity between two sentiment vectors.

    A zero-magnitude vector is a valid input and scores 0.0 against
    anything, including itself.

    Args:
        a: First sentiment vector
        b: Second sentiment vector

    Returns:
        Cosine similarity score (-1.0 to 1.0)
    """
    values_a = a.as_tuple()
    values_b = b.as_tuple()

    dot_product = sum(v1 * v2 for v1, v2 in zip(values_a, values_b))

    magnitude_a = math.sqrt(sum(v * v for v in values_a))
    magnitude_b = math.sqrt(sum(v * v for v in values_b))

    # Avoid division by zero
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    score = dot_product / (magnitude_a * magnitude_b)

    # Floating point error can push identical vectors slightly past 1
    return max(-1.0, min(1.0, score))


def similarity_label(score: float) -> str:
    """Convert similarity score to human-readable label."""
    if score >= 0.95:
        return "Nearly Identical"
    elif score >= 0.90:
        return "Very Similar"
    elif score >= 0.85:
        return "Similar"
    elif score >= 0.80:
        return "Somewhat Similar"
    elif score >= 0.70:
        return "Moderately Similar"
    else:
        return "Different"
