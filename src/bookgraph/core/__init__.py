"""
Core module for bookgraph.

This module provides the foundational components:
- Configuration management (config.py)
- Data models (models.py)
- Category registry and sentiment dimensions (types.py)
- Exceptions (errors.py)
- Shared HTTP client infrastructure (http.py)

Usage:
    from bookgraph.core import Settings, get_settings
    from bookgraph.core import Category, get_category_config
    from bookgraph.core import Entity, SentimentVector
    from bookgraph.core.http import BaseApiClient
"""

# Configuration
from .config import Settings, get_settings

# Errors
from .errors import ExternalAPIError, GraphError, InvalidEntityError, RateLimitError

# Types
from .types import (
    Category,
    CategoryConfig,
    CATEGORY_REGISTRY,
    DIMENSION_LABELS,
    SENTIMENT_DIMENSIONS,
    SentimentDimension,
    get_category_config,
)

# Models
from .models import (
    BookGraph,
    BuildStats,
    Entity,
    NEUTRAL_SCORE,
    SentimentVector,
    SimilarityEdge,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ExternalAPIError",
    "GraphError",
    "InvalidEntityError",
    "RateLimitError",
    # Types
    "Category",
    "CategoryConfig",
    "CATEGORY_REGISTRY",
    "DIMENSION_LABELS",
    "SENTIMENT_DIMENSIONS",
    "SentimentDimension",
    "get_category_config",
    # Models
    "BookGraph",
    "BuildStats",
    "Entity",
    "NEUTRAL_SCORE",
    "SentimentVector",
    "SimilarityEdge",
]
