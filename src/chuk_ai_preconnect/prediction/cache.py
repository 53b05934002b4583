# chuk_ai_preconnect/prediction/cache.py
"""
Prediction Cache - reuses ranked prediction lists for repeated contexts.

Ranking is cheap, but it needs a history fetch from the store, and the
same context (same page, same hour, same query) tends to be asked about
several times in a row while the user reads a page.

Cache is keyed by a normalized signature of the context and the options:
(domain, hour of day, search query, intent, current url)
+ (max results, sorted categories, min confidence, time window)
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterator

from chuk_ai_preconnect.clock import Clock, hour_of_day, now_ms
from chuk_ai_preconnect.config import PREDICTION_CACHE_MAX_ENTRIES, PREDICTION_CACHE_TTL_MS
from chuk_ai_preconnect.eviction import PurgeResult, is_expired, purge_entries

from .models import (
    NavigationPrediction,
    PredictionCacheEntry,
    PredictionCacheStats,
    PredictionContext,
    PredictionOptions,
)

logger = logging.getLogger(__name__)


class PredictionCache:
    """
    TTL- and size-bounded store of prediction lists.

    Expired entries are never served: the age check happens on every read.
    Every write also purges expired entries and trims the oldest ones when
    the cache is over capacity.
    """

    def __init__(
        self,
        max_entries: int = PREDICTION_CACHE_MAX_ENTRIES,
        ttl_ms: float = PREDICTION_CACHE_TTL_MS,
        clock: Clock = now_ms,
    ):
        self.max_entries = max_entries
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: dict[str, PredictionCacheEntry] = {}
        self._stats = {
            "hits": 0,
            "misses": 0,
            "expirations": 0,
            "evictions": 0,
        }

    @staticmethod
    def make_key(context: PredictionContext, options: PredictionOptions, now: float) -> str:
        """Create cache key from the normalized context and options."""
        reference_time = context.current_time if context.current_time is not None else now
        context_part = {
            "domain": context.domain,
            "hour": hour_of_day(reference_time),
            "search_query": context.search_query,
            "intent": context.user_intent.value if context.user_intent else None,
            "url": context.current_url,
        }
        options_part = {
            "max": options.max_predictions,
            "categories": sorted(c.value for c in options.categories) if options.categories is not None else None,
            "min_confidence": options.min_confidence,
            "window": options.time_window_ms,
        }
        key_str = json.dumps(context_part, sort_keys=True) + ":" + json.dumps(options_part, sort_keys=True)
        return hashlib.sha256(key_str.encode()).hexdigest()[:16]

    def get(self, key: str) -> list[NavigationPrediction] | None:
        """
        Cached predictions for ``key``, as a fresh list.

        Returns None if not found or expired.
        """
        entry = self._entries.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if is_expired(entry.created_at, self._clock(), self.ttl_ms):
            del self._entries[key]
            self._stats["expirations"] += 1
            self._stats["misses"] += 1
            return None

        self._stats["hits"] += 1
        return list(entry.predictions)

    def put(self, key: str, predictions: list[NavigationPrediction]) -> None:
        """Store predictions, then purge expired and over-capacity entries."""
        self._entries[key] = PredictionCacheEntry(
            predictions=list(predictions),
            created_at=self._clock(),
            key=key,
        )
        self.purge()

    def purge(self) -> PurgeResult:
        result = purge_entries(
            self._entries,
            lambda entry: entry.created_at,
            now=self._clock(),
            ttl_ms=self.ttl_ms,
            max_entries=self.max_entries,
        )
        self._stats["expirations"] += result.expired
        self._stats["evictions"] += result.evicted
        if result.removed:
            logger.debug("Prediction cache purged %d expired, %d evicted", result.expired, result.evicted)
        return result

    def clear(self) -> int:
        """Clear entire cache. Returns number of entries removed."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def entries(self) -> Iterator[PredictionCacheEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    @property
    def size(self) -> int:
        """Current number of cached entries."""
        return len(self._entries)

    def get_stats(self) -> PredictionCacheStats:
        """Get cache statistics."""
        return PredictionCacheStats(
            size=len(self._entries),
            max_size=self.max_entries,
            hits=self._stats["hits"],
            misses=self._stats["misses"],
            expirations=self._stats["expirations"],
            evictions=self._stats["evictions"],
        )
