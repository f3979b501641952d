"""
Core types and constants for bookgraph.

This module provides:
- Category enum for the twelve book genres
- SentimentDimension enum for the five scoring axes
- CategoryConfig dataclass and CATEGORY_REGISTRY for per-genre display data
"""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Supported book categories."""

    SCI_FI = "Sci-Fi"
    NON_FICTION = "Non-Fiction"
    LITERARY_FICTION = "Literary Fiction"
    FANTASY = "Fantasy"
    MYSTERY = "Mystery"
    PHILOSOPHY = "Philosophy"
    ROMANCE = "Romance"
    HORROR = "Horror"
    HISTORICAL_FICTION = "Historical Fiction"
    BIOGRAPHY = "Biography"
    SELF_HELP = "Self-Help"
    POETRY = "Poetry"


class SentimentDimension(str, Enum):
    """The five sentiment axes, in canonical vector order."""

    moody = "moody"
    scientific = "scientific"
    optimistic = "optimistic"
    philosophical = "philosophical"
    adventurous = "adventurous"


# Canonical component order for SentimentVector
SENTIMENT_DIMENSIONS: tuple[str, ...] = tuple(d.value for d in SentimentDimension)

# Phrases used when an explanation names a dimension
DIMENSION_LABELS: dict[str, str] = {
    SentimentDimension.moody.value: "moody atmosphere",
    SentimentDimension.scientific.value: "scientific rigor",
    SentimentDimension.optimistic.value: "optimistic outlook",
    SentimentDimension.philosophical.value: "philosophical depth",
    SentimentDimension.adventurous.value: "adventurous spirit",
}

# What each score means, shown to the scoring model
DIMENSION_GUIDES: dict[str, str] = {
    SentimentDimension.moody.value: "emotional darkness, atmosphere, melancholy (0 = light/cheerful, 1 = dark/brooding)",
    SentimentDimension.scientific.value: "science, technology, factual content (0 = no science, 1 = highly scientific)",
    SentimentDimension.optimistic.value: "hope, positivity, uplifting tone (0 = bleak/pessimistic, 1 = very hopeful)",
    SentimentDimension.philosophical.value: "existential/ethical depth (0 = surface-level, 1 = deeply philosophical)",
    SentimentDimension.adventurous.value: "action, exploration, excitement (0 = slow/contemplative, 1 = high adventure)",
}


@dataclass(frozen=True)
class CategoryConfig:
    """Display configuration for a category node."""

    id: str
    color: str
    description: str
    # Shown on the category graph before any books are loaded
    estimated_book_count: int


# =============================================================================
# CATEGORY REGISTRY - display data for the category-level graph
# =============================================================================

CATEGORY_REGISTRY: dict[str, CategoryConfig] = {
    Category.SCI_FI.value: CategoryConfig(
        id="Sci-Fi",
        color="#06b6d4",
        description="Explores future technology, space exploration, and speculative science",
        estimated_book_count=1000,
    ),
    Category.NON_FICTION.value: CategoryConfig(
        id="Non-Fiction",
        color="#8b5cf6",
        description="Real-world knowledge, history, science, and human understanding",
        estimated_book_count=5000,
    ),
    Category.LITERARY_FICTION.value: CategoryConfig(
        id="Literary Fiction",
        color="#ec4899",
        description="Character-driven narratives exploring the human condition",
        estimated_book_count=3000,
    ),
    Category.FANTASY.value: CategoryConfig(
        id="Fantasy",
        color="#f59e0b",
        description="Magical worlds, epic quests, and mythological adventures",
        estimated_book_count=2000,
    ),
    Category.MYSTERY.value: CategoryConfig(
        id="Mystery",
        color="#10b981",
        description="Suspenseful puzzles, crime solving, and psychological tension",
        estimated_book_count=1500,
    ),
    Category.PHILOSOPHY.value: CategoryConfig(
        id="Philosophy",
        color="#6366f1",
        description="Fundamental questions about existence, ethics, and meaning",
        estimated_book_count=800,
    ),
    Category.ROMANCE.value: CategoryConfig(
        id="Romance",
        color="#f43f5e",
        description="Love stories, relationships, and emotional connections",
        estimated_book_count=4000,
    ),
    Category.HORROR.value: CategoryConfig(
        id="Horror",
        color="#dc2626",
        description="Fear, supernatural terror, and psychological dread",
        estimated_book_count=1200,
    ),
    Category.HISTORICAL_FICTION.value: CategoryConfig(
        id="Historical Fiction",
        color="#a16207",
        description="Stories set in past eras with historical authenticity",
        estimated_book_count=2500,
    ),
    Category.BIOGRAPHY.value: CategoryConfig(
        id="Biography",
        color="#0891b2",
        description="True stories of remarkable lives and achievements",
        estimated_book_count=3500,
    ),
    Category.SELF_HELP.value: CategoryConfig(
        id="Self-Help",
        color="#84cc16",
        description="Personal growth, motivation, and life improvement",
        estimated_book_count=2800,
    ),
    Category.POETRY.value: CategoryConfig(
        id="Poetry",
        color="#d946ef",
        description="Lyrical expression, verse, and emotional artistry",
        estimated_book_count=1800,
    ),
}

# Node color for books whose category is not in the registry
DEFAULT_NODE_COLOR = "#94a3b8"


def get_category_config(category: str | Category) -> CategoryConfig:
    """
    Get configuration for a category.

    Args:
        category: Category name or Category enum

    Returns:
        CategoryConfig for the requested category

    Raises:
        KeyError: If category is not in registry
    """
    category_id = category.value if isinstance(category, Category) else category
    return CATEGORY_REGISTRY[category_id]


def category_color(category: str) -> str:
    """Node color for a category, falling back to a neutral grey."""
    config = CATEGORY_REGISTRY.get(category)
    return config.color if config else DEFAULT_NODE_COLOR
