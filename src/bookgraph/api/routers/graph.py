"""
Graph router - serves book and category similarity graphs.

Endpoints:
- GET  /categories              - Category overview graph
- GET  /categories/{category}   - Display data for one category
- POST /books                   - Graph from pre-scored books
- POST /books/score             - Score a category's books, then build the graph
- POST /explain                 - Similarity and explanation for two books
- GET  /status                  - Service status
"""

import logging
from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..dependencies import GraphServiceDependency
from ..errors import NotFoundError
from ...core.models import BookGraph, Entity
from ...core.types import get_category_config
from ...similarity import explain, similarity, similarity_label

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================


class BookIn(BaseModel):
    """A book as supplied by the metadata source."""

    id: str = Field(min_length=1)
    title: str = ""
    author: str = "Unknown Author"
    category: str = ""
    year: int = 0
    cover_url: Optional[str] = None
    description: Optional[str] = None
    subjects: list[str] = []
    # Scores are validated by SentimentVector, not here, so malformed
    # values surface as VALIDATION_ERROR rather than 422
    sentiment: Optional[dict[str, Any]] = None

    def to_entity(self) -> Entity:
        return Entity.from_dict(self.model_dump())


class BookGraphRequest(BaseModel):
    """Pre-scored books to connect."""

    books: list[BookIn] = Field(max_length=500)
    anchor_id: Optional[str] = None


class ScoreGraphRequest(BaseModel):
    """Unscored books from one category."""

    category: str = Field(min_length=1)
    books: list[BookIn] = Field(min_length=1, max_length=100)
    anchor_id: Optional[str] = None


class ExplainRequest(BaseModel):
    """Two scored books to compare."""

    a: BookIn
    b: BookIn


# =============================================================================
# Helper Functions
# =============================================================================


def _graph_response(graph: BookGraph) -> dict[str, Any]:
    payload = graph.to_dict()
    payload["stats"] = asdict(graph.stats)
    return payload


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/categories")
async def get_category_graph(service: GraphServiceDependency) -> dict[str, Any]:
    """
    Get the category overview graph.

    Links connect categories whose hand-authored affinity exceeds the
    configured threshold.
    """
    return service.build_category_graph()


@router.get("/categories/{category}")
async def get_category(category: str) -> dict[str, Any]:
    """Get display data for a single category."""
    try:
        config = get_category_config(category)
    except KeyError:
        raise NotFoundError(resource="Category", identifier=category)
    return asdict(config)


@router.post("/books")
async def build_book_graph(
    request: BookGraphRequest,
    service: GraphServiceDependency,
) -> dict[str, Any]:
    """
    Build a similarity graph from pre-scored books.

    Books without sentiment scores get the neutral vector. Every book is
    reachable from the anchor (first book when anchor_id is omitted).
    """
    entities = [book.to_entity() for book in request.books]
    graph = service.build_book_graph(entities, request.anchor_id)
    return _graph_response(graph)


@router.post("/books/score")
async def score_book_graph(
    request: ScoreGraphRequest,
    service: GraphServiceDependency,
) -> dict[str, Any]:
    """
    Score a category's books with the language model, then build the graph.

    Scores are cached per category. Books the model fails to score get the
    category's fallback profile.
    """
    entities = [book.to_entity() for book in request.books]
    graph = await service.score_and_build(request.category, entities, request.anchor_id)
    return _graph_response(graph)


@router.post("/explain")
async def explain_connection(request: ExplainRequest) -> dict[str, Any]:
    """Compare two scored books."""
    a = request.a.to_entity()
    b = request.b.to_entity()
    score = similarity(a.vector, b.vector)
    return {
        "source": a.id,
        "target": b.id,
        "similarity": round(score, 4),
        "similarity_label": similarity_label(score),
        "reason": explain(a, b, score),
    }


@router.get("/status")
async def get_status(service: GraphServiceDependency) -> dict[str, Any]:
    """Get graph service status."""
    return service.get_status()
