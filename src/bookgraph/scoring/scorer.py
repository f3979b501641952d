"""
Batch sentiment scoring with per-book fallback.

A failed score never aborts the batch: the book gets a fallback vector so
the graph builder always receives a fully scored list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Protocol, Sequence

from ..core.models import Entity, SentimentVector
from ..core.types import Category

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5

# Typical profiles used when the model cannot score a book
CATEGORY_FALLBACKS: dict[str, SentimentVector] = {
    Category.SCI_FI.value: SentimentVector(0.5, 0.9, 0.5, 0.7, 0.7),
    Category.NON_FICTION.value: SentimentVector(0.3, 0.8, 0.6, 0.6, 0.3),
    Category.LITERARY_FICTION.value: SentimentVector(0.6, 0.2, 0.4, 0.8, 0.3),
    Category.FANTASY.value: SentimentVector(0.5, 0.1, 0.6, 0.4, 0.9),
    Category.MYSTERY.value: SentimentVector(0.7, 0.4, 0.4, 0.3, 0.6),
    Category.PHILOSOPHY.value: SentimentVector(0.4, 0.3, 0.5, 1.0, 0.1),
}


class ScoringBackend(Protocol):
    """Anything that can score a single book."""

    async def score(self, entity: Entity) -> SentimentVector: ...


def category_fallback_vector(category: str) -> SentimentVector:
    """Fallback profile for a category, neutral when none is defined."""
    return CATEGORY_FALLBACKS.get(category) or SentimentVector.neutral()


def resolve_entities(
    entities: Iterable[Entity],
    scores: dict[str, SentimentVector],
) -> list[Entity]:
    """
    Attach scores to entities.

    Entities without a score get the neutral vector, so every returned
    entity is safe to hand to the graph builder.
    """
    resolved = []
    missing = 0
    for entity in entities:
        vector = scores.get(entity.id)
        if vector is None:
            missing += 1
            vector = SentimentVector.neutral()
        resolved.append(entity.with_vector(vector))

    if missing:
        logger.info("%d book(s) had no score, using neutral vector", missing)
    return resolved


class SentimentScorer:
    """
    Scores books concurrently in bounded batches.

    Features:
    - At most batch_size requests in flight at once
    - Per-book fallback when the backend raises
    """

    def __init__(
        self,
        backend: ScoringBackend,
        batch_size: int = DEFAULT_BATCH_SIZE,
        fallback: Callable[[str], SentimentVector] = category_fallback_vector,
    ):
        """
        Initialize the scorer.

        Args:
            backend: Scoring backend (usually LLMScoringClient)
            batch_size: Books scored concurrently per batch
            fallback: Maps a category to the vector used on failure
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._backend = backend
        self._batch_size = batch_size
        self._fallback = fallback

    async def _score_one(self, entity: Entity) -> tuple[str, SentimentVector]:
        try:
            return entity.id, await self._backend.score(entity)
        except Exception as e:
            logger.warning("Scoring failed for %s (%s), using fallback: %s", entity.id, entity.title, e)
            return entity.id, self._fallback(entity.category)

    async def score_all(self, entities: Sequence[Entity]) -> dict[str, SentimentVector]:
        """
        Score every book.

        Args:
            entities: Books to score

        Returns:
            Mapping of book id to vector, one entry per input book
        """
        results: dict[str, SentimentVector] = {}

        for start in range(0, len(entities), self._batch_size):
            batch = entities[start : start + self._batch_size]
            batch_results = await asyncio.gather(*(self._score_one(e) for e in batch))
            results.update(batch_results)

        logger.info("Scored %d book(s) in batches of %d", len(results), self._batch_size)
        return results
