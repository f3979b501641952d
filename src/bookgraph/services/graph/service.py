"""
Graph Service implementation.

Provides a clean interface over GraphBuilder, the category table and the
scoring layer.
"""

import logging
from typing import Any, Sequence

from ...core.config import Settings, get_settings
from ...core.models import BookGraph, Entity, SentimentVector
from ...graph import GraphBuilder, GraphSettings, build_category_graph
from ...scoring import (
    LLMScoringClient,
    ScoreCache,
    SentimentScorer,
    category_fallback_vector,
    resolve_entities,
)
from ...scoring.scorer import ScoringBackend

logger = logging.getLogger(__name__)


class GraphService:
    """
    Book graph service.

    Features:
    - Book graphs from pre-scored entities
    - Score-then-build for a category, with per-category score caching
    - Static category overview graph
    """

    def __init__(
        self,
        settings: Settings | None = None,
        backend: ScoringBackend | None = None,
        cache: ScoreCache | None = None,
    ):
        """
        Initialize graph service.

        Args:
            settings: Application settings (defaults to cached settings)
            backend: Scoring backend (LLMScoringClient if not provided)
            cache: Score cache (created if not provided)
        """
        self.settings = settings or get_settings()
        self._builder = GraphBuilder(GraphSettings.from_settings(self.settings))
        self._backend = backend or LLMScoringClient(self.settings)
        self._scorer = SentimentScorer(self._backend, batch_size=self.settings.scoring_batch_size)
        self._cache = cache or ScoreCache(default_ttl=self.settings.score_cache_ttl)

    @property
    def scoring_available(self) -> bool:
        """Check if the scoring backend can be called."""
        is_configured = getattr(self._backend, "is_configured", None)
        return is_configured() if callable(is_configured) else True

    def build_book_graph(
        self,
        entities: Sequence[Entity],
        anchor_id: str | None = None,
    ) -> BookGraph:
        """
        Build a graph from books that already carry vectors.

        Raises:
            InvalidEntityError: If the books are malformed
        """
        return self._builder.build(entities, anchor_id)

    def build_category_graph(self) -> dict[str, Any]:
        """Build the category overview graph."""
        return build_category_graph(threshold=self.settings.category_link_threshold)

    async def score_and_build(
        self,
        category: str,
        entities: Sequence[Entity],
        anchor_id: str | None = None,
    ) -> BookGraph:
        """
        Score a category's books (cached) and build their graph.

        Scores are cached per category and book: only books the cache has
        not seen are sent to the model. Without a configured backend every
        book gets its category fallback, and nothing is cached.
        """
        books = list(entities)

        if not self.scoring_available:
            logger.warning(
                "Scoring model not configured, using %s fallback profiles for %d book(s)",
                category,
                len(books),
            )
            scores = {book.id: category_fallback_vector(book.category) for book in books}
        else:
            by_id = {book.id: book for book in books}

            async def score_missing(ids: list[str]) -> dict[str, SentimentVector]:
                return await self._scorer.score_all([by_id[book_id] for book_id in ids])

            scores = await self._cache.get_or_score(category, list(by_id), score_missing)

        resolved = resolve_entities(books, scores)

        logger.info("Building graph for %d %s book(s)", len(resolved), category)
        return self._builder.build(resolved, anchor_id)

    def get_status(self) -> dict:
        """Get service status."""
        return {
            "service": "graph",
            "scoring_configured": self.scoring_available,
            "llm_configured": self.settings.llm_configured,
            "cached_categories": self._cache.size(),
            "methodology": {
                "algorithm": "Cosine similarity on 5-dimensional sentiment vectors",
                "selection": f"Greedy, max degree {self._builder.settings.max_degree}",
                "pruning": f"Keep top {self._builder.settings.keep_ratio:.0%} of selected edges",
                "repair": "Union-find, one edge per detached component to the anchor",
            },
        }

    async def close(self) -> None:
        close = getattr(self._backend, "close", None)
        if callable(close):
            await close()


# Singleton instance
_graph_service: GraphService | None = None


def get_graph_service() -> GraphService:
    """Get or create the singleton graph service."""
    global _graph_service
    if _graph_service is None:
        _graph_service = GraphService()
    return _graph_service


def set_graph_service(service: GraphService | None) -> None:
    """Replace the singleton (used by tests)."""
    global _graph_service
    _graph_service = service
