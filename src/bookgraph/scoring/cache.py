"""In-memory score cache keyed by category, with TTL and single-flight loads."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence

from ..core.models import SentimentVector

logger = logging.getLogger(__name__)

Scores = dict[str, SentimentVector]


class ScoreCache:
    """
    Per-category score cache.

    Entries grow book by book: a caller asking for books the entry lacks
    scores only those and merges them in. At most one scoring run is in
    flight per key, so concurrent callers for the same category wait on
    the first run and reuse its result. A cancelled run leaves nothing
    behind, so the next caller starts fresh.
    """

    def __init__(self, default_ttl: int = 3600):
        """
        Initialize cache with default TTL.

        Args:
            default_ttl: Default time-to-live in seconds (default: 1 hour)
        """
        self._cache: dict[str, tuple[Scores, float]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self.default_ttl = default_ttl

    def get(self, key: str) -> Optional[Scores]:
        """Get cached scores if present and not expired."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        scores, expiry = entry
        if time.monotonic() >= expiry:
            del self._cache[key]
            return None
        return scores

    def set(self, key: str, scores: Scores, ttl: Optional[int] = None) -> None:
        """Store scores with TTL."""
        ttl = ttl or self.default_ttl
        self._cache[key] = (dict(scores), time.monotonic() + ttl)

    async def get_or_score(
        self,
        key: str,
        ids: Sequence[str],
        loader: Callable[[list[str]], Awaitable[Scores]],
        ttl: Optional[int] = None,
    ) -> Scores:
        """
        Return scores covering ids, loading only the ones not yet cached.

        New scores are merged into the existing entry, which keeps its
        original expiry. Loads for the same key run one at a time.

        Args:
            key: Cache key (category name)
            ids: Book ids the caller needs scores for
            loader: Coroutine factory scoring the given missing ids
            ttl: TTL for a fresh entry
        """
        cached = self.get(key) or {}
        if all(book_id in cached for book_id in ids):
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another caller may have filled some of these while we waited
            cached = self.get(key) or {}
            missing = [book_id for book_id in dict.fromkeys(ids) if book_id not in cached]
            if not missing:
                return cached

            logger.debug("Scoring %d uncached book(s) for %s", len(missing), key)
            loaded = await loader(missing)
            merged = {**cached, **loaded}

            entry = self._cache.get(key)
            if entry is not None and cached:
                self._cache[key] = (merged, entry[1])
            else:
                self.set(key, merged, ttl)
            return merged

    def invalidate(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    def size(self) -> int:
        return len(self._cache)
