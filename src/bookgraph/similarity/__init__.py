"""
Similarity module.

Scores books against each other using cosine similarity on their sentiment
vectors and explains each connection in plain language.
"""

from .calculator import similarity, similarity_label
from .explanations import explain, rank_dimensions, shared_traits

__all__ = [
    "explain",
    "rank_dimensions",
    "shared_traits",
    "similarity",
    "similarity_label",
]
