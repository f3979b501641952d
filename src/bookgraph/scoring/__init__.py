"""
Sentiment scoring layer.

Wraps the external scoring model: batches requests, substitutes fallback
vectors for books that fail, and caches results per category.

    from bookgraph.scoring import LLMScoringClient, SentimentScorer

    scorer = SentimentScorer(LLMScoringClient(), batch_size=5)
    scores = await scorer.score_all(entities)
"""

from .cache import ScoreCache
from .client import LLMScoringClient
from .prompts import build_prompt, parse_scores
from .scorer import (
    ScoringBackend,
    SentimentScorer,
    category_fallback_vector,
    resolve_entities,
)

__all__ = [
    "LLMScoringClient",
    "ScoreCache",
    "ScoringBackend",
    "SentimentScorer",
    "build_prompt",
    "category_fallback_vector",
    "parse_scores",
    "resolve_entities",
]
