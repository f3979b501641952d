"""
Bookgraph

Visualizes thematic relationships between books. Each book is scored on
five sentiment dimensions (moody, scientific, optimistic, philosophical,
adventurous); books with similar profiles are connected in a sparse graph
that stays fully reachable from a chosen anchor book.

Key Features:
- Cosine similarity over sentiment vectors
- Degree-capped greedy edge selection (no hub-and-spoke graphs)
- Pruning of the weakest selected edges
- Union-find connectivity repair anchored at the focus book
- Plain-language explanation for every edge

Usage:
    from bookgraph import Entity, GraphBuilder, SentimentVector

    books = [Entity(id="a", title="Dune", author="Frank Herbert",
                    category="Sci-Fi", year=1965,
                    vector=SentimentVector(0.5, 0.7, 0.4, 0.8, 0.9)), ...]
    graph = GraphBuilder().build(books, anchor_id="a")
    payload = graph.to_dict()
"""

from .core.errors import GraphError, InvalidEntityError
from .core.models import BookGraph, Entity, SentimentVector, SimilarityEdge
from .graph import GraphBuilder, GraphSettings, build_category_graph, build_graph
from .similarity.explanations import explain

__version__ = "1.0.0"

__all__ = [
    # Models
    "BookGraph",
    "Entity",
    "SentimentVector",
    "SimilarityEdge",
    # Errors
    "GraphError",
    "InvalidEntityError",
    # Graph
    "GraphBuilder",
    "GraphSettings",
    "build_category_graph",
    "build_graph",
    # Similarity
    "explain",
]
