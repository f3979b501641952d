"""
Category-level similarity graph.

Category affinities are hand-authored, not computed. The category set is
small and fully enumerable, so the graph links every pair above a threshold
with no degree cap, pruning or repair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from ..core.types import CATEGORY_REGISTRY, Category

SAME_CATEGORY = (1.0, "Same category")
DEFAULT_AFFINITY = (0.3, "Shared heritage")

# Symmetric lookup; each pair is listed once
CATEGORY_AFFINITY: dict[tuple[str, str], tuple[float, str]] = {
    (Category.SCI_FI.value, Category.NON_FICTION.value): (0.7, "Scientific exploration and intellectual curiosity"),
    (Category.SCI_FI.value, Category.LITERARY_FICTION.value): (0.6, "Dystopian themes and social commentary"),
    (Category.SCI_FI.value, Category.FANTASY.value): (0.5, "World-building and speculative elements"),
    (Category.SCI_FI.value, Category.MYSTERY.value): (0.4, "Problem-solving and discovery"),
    (Category.SCI_FI.value, Category.PHILOSOPHY.value): (0.75, "Existential questions and human nature"),
    (Category.NON_FICTION.value, Category.PHILOSOPHY.value): (0.85, "Pursuit of knowledge and understanding"),
    (Category.NON_FICTION.value, Category.LITERARY_FICTION.value): (0.5, "Human condition and historical context"),
    (Category.NON_FICTION.value, Category.MYSTERY.value): (0.45, "Investigation and analysis"),
    (Category.NON_FICTION.value, Category.FANTASY.value): (0.3, "Cultural mythology and archetypes"),
    (Category.LITERARY_FICTION.value, Category.PHILOSOPHY.value): (0.8, "Deep character study and moral questions"),
    (Category.LITERARY_FICTION.value, Category.MYSTERY.value): (0.55, "Psychological exploration"),
    (Category.LITERARY_FICTION.value, Category.FANTASY.value): (0.45, "Narrative storytelling traditions"),
    (Category.FANTASY.value, Category.MYSTERY.value): (0.5, "Quest narratives and hidden truths"),
    (Category.FANTASY.value, Category.PHILOSOPHY.value): (0.55, "Mythological wisdom and hero journeys"),
    (Category.MYSTERY.value, Category.PHILOSOPHY.value): (0.5, "Search for truth and meaning"),
}


@dataclass(frozen=True)
class CategoryLink:
    """Edge between two category nodes."""

    source: str
    target: str
    weight: float
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "reason": self.reason,
        }


def category_similarity(a: str, b: str) -> tuple[float, str]:
    """
    Look up the affinity between two categories.

    Returns:
        (weight, reason). Identical categories score 1.0; pairs missing
        from the table get the default heritage link.
    """
    if a == b:
        return SAME_CATEGORY
    return CATEGORY_AFFINITY.get((a, b)) or CATEGORY_AFFINITY.get((b, a)) or DEFAULT_AFFINITY


def build_category_graph(
    categories: Iterable[str] | None = None,
    threshold: float = 0.4,
) -> dict[str, Any]:
    """
    Build the category overview graph.

    Args:
        categories: Categories to include (defaults to the full registry)
        threshold: Links need a weight strictly above this value

    Returns:
        Dictionary with nodes and links for the rendering layer
    """
    names = list(categories) if categories is not None else list(CATEGORY_REGISTRY)

    nodes = []
    for name in names:
        config = CATEGORY_REGISTRY.get(name)
        nodes.append(
            {
                "id": name,
                "name": name,
                "color": config.color if config else None,
                "description": config.description if config else None,
                "book_count": config.estimated_book_count if config else 0,
            }
        )

    links = []
    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            weight, reason = category_similarity(names[i], names[j])
            if weight > threshold:
                links.append(CategoryLink(names[i], names[j], weight, reason))

    return {"nodes": nodes, "links": [link.to_dict() for link in links]}
