"""
Data models for the book similarity graph.

These models are used for:
- Validating sentiment scores before they reach the graph builder
- Carrying book display attributes through the graph untouched
- Serializing the node/edge payload handed to the rendering layer
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import InvalidEntityError
from .types import SENTIMENT_DIMENSIONS, category_color

# Value every dimension receives when a book could not be scored
NEUTRAL_SCORE = 0.5


# =============================================================================
# Sentiment Vectors
# =============================================================================


@dataclass(frozen=True)
class SentimentVector:
    """
    Five-dimensional sentiment profile of a book.

    Every component must be a finite number in [0, 1]. Invalid values raise
    InvalidEntityError instead of being clamped. An all-zero vector is valid.
    """

    moody: float
    scientific: float
    optimistic: float
    philosophical: float
    adventurous: float

    def __post_init__(self) -> None:
        for name in SENTIMENT_DIMENSIONS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidEntityError(f"Sentiment '{name}' must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidEntityError(f"Sentiment '{name}' must be finite, got {value!r}")
            if not 0.0 <= value <= 1.0:
                raise InvalidEntityError(f"Sentiment '{name}' must be within [0, 1], got {value!r}")
            object.__setattr__(self, name, float(value))

    @classmethod
    def neutral(cls) -> SentimentVector:
        """Fallback vector for books without a score."""
        return cls(*([NEUTRAL_SCORE] * len(SENTIMENT_DIMENSIONS)))

    @classmethod
    def from_mapping(cls, data: Any) -> SentimentVector:
        """
        Build a vector from a {dimension: score} mapping.

        Raises:
            InvalidEntityError: If the mapping is missing a dimension or
                holds an invalid score
        """
        if not isinstance(data, dict):
            raise InvalidEntityError(f"Sentiment scores must be an object, got {type(data).__name__}")
        missing = [name for name in SENTIMENT_DIMENSIONS if name not in data]
        if missing:
            raise InvalidEntityError(f"Sentiment scores missing dimensions: {', '.join(missing)}")
        return cls(**{name: data[name] for name in SENTIMENT_DIMENSIONS})

    def as_tuple(self) -> tuple[float, ...]:
        """Components in canonical dimension order."""
        return tuple(getattr(self, name) for name in SENTIMENT_DIMENSIONS)

    def to_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in SENTIMENT_DIMENSIONS}


# =============================================================================
# Entities
# =============================================================================


@dataclass(frozen=True)
class Entity:
    """A scored book. Display attributes are opaque to the graph algorithm."""

    id: str
    title: str
    author: str
    category: str
    year: int
    vector: SentimentVector
    cover_url: Optional[str] = None
    description: Optional[str] = None
    subjects: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise InvalidEntityError(f"Entity id must be a non-empty string, got {self.id!r}")
        if not isinstance(self.vector, SentimentVector):
            raise InvalidEntityError(
                f"Entity {self.id} has no sentiment vector",
                entity_id=self.id,
            )

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        vector: SentimentVector | None = None,
    ) -> Entity:
        """
        Build an entity from a book record.

        Accepts either "category" or "genre" and either "sentiment" or
        "sentimentScores" for the scores. An explicit vector wins over the
        record's scores; a record with neither gets the neutral vector.

        Raises:
            InvalidEntityError: If the record or its scores are malformed
        """
        if not isinstance(data, dict):
            raise InvalidEntityError(f"Book record must be an object, got {type(data).__name__}")

        entity_id = data.get("id")
        if not isinstance(entity_id, str) or not entity_id:
            raise InvalidEntityError(f"Book record needs a string id, got {entity_id!r}")

        if vector is None:
            scores = data.get("sentiment", data.get("sentimentScores"))
            try:
                vector = SentimentVector.from_mapping(scores) if scores is not None else SentimentVector.neutral()
            except InvalidEntityError as e:
                raise InvalidEntityError(f"Book {entity_id}: {e.message}", entity_id=entity_id) from e

        try:
            year = int(data.get("year") or 0)
        except (TypeError, ValueError) as e:
            raise InvalidEntityError(
                f"Book {entity_id}: year must be an integer, got {data.get('year')!r}",
                entity_id=entity_id,
            ) from e

        return cls(
            id=entity_id,
            title=str(data.get("title") or ""),
            author=str(data.get("author") or "Unknown Author"),
            category=str(data.get("category") or data.get("genre") or ""),
            year=year,
            vector=vector,
            cover_url=data.get("cover_url") or data.get("coverUrl"),
            description=data.get("description"),
            subjects=tuple(data.get("subjects") or ()),
        )

    def with_vector(self, vector: SentimentVector) -> Entity:
        """Copy of this entity carrying a different vector."""
        return Entity(
            id=self.id,
            title=self.title,
            author=self.author,
            category=self.category,
            year=self.year,
            vector=vector,
            cover_url=self.cover_url,
            description=self.description,
            subjects=self.subjects,
        )

    def to_node(self) -> dict[str, Any]:
        """Node payload for the rendering layer."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "category": self.category,
            "year": self.year,
            "cover_url": self.cover_url,
            "color": category_color(self.category),
            "sentiment": self.vector.to_dict(),
        }


# =============================================================================
# Graph Output
# =============================================================================


@dataclass(frozen=True)
class SimilarityEdge:
    """Undirected edge between two entities."""

    source: str
    target: str
    weight: float
    reason: str
    # True when added by connectivity repair rather than greedy selection
    repair: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "weight": round(self.weight, 4),
            "reason": self.reason,
            "repair": self.repair,
        }


@dataclass(frozen=True)
class BuildStats:
    """Counters recorded while building a graph."""

    entity_count: int = 0
    candidate_count: int = 0
    selected_count: int = 0
    retained_count: int = 0
    components_after_pruning: int = 0
    repair_count: int = 0


@dataclass
class BookGraph:
    """Nodes and edges produced by GraphBuilder."""

    nodes: list[Entity] = field(default_factory=list)
    edges: list[SimilarityEdge] = field(default_factory=list)
    anchor_id: Optional[str] = None
    stats: BuildStats = field(default_factory=BuildStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "anchor_id": self.anchor_id,
            "nodes": [node.to_node() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
