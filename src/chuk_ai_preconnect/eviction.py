# chuk_ai_preconnect/eviction.py
"""
Age- and size-bounded eviction shared by the prediction and connection caches.

Policy, applied deterministically on every write:
1. Drop every entry whose age has reached the TTL.
2. If still over capacity, drop the oldest entries (by timestamp) until
   the cache is back at capacity.

Cost is O(n log n) in the cache size, and the cache size is capped.
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from typing import TypeVar

from pydantic import BaseModel

V = TypeVar("V")


class PurgeResult(BaseModel):
    expired: int = 0
    evicted: int = 0

    @property
    def removed(self) -> int:
        return self.expired + self.evicted


def is_expired(created_at: float, now: float, ttl_ms: float) -> bool:
    return now - created_at >= ttl_ms


def purge_entries(
    entries: MutableMapping[str, V],
    timestamp_of: Callable[[V], float],
    now: float,
    ttl_ms: float,
    max_entries: int | None = None,
) -> PurgeResult:
    """Apply the TTL-then-oldest-first policy to ``entries`` in place."""
    expired_keys = [key for key, value in entries.items() if is_expired(timestamp_of(value), now, ttl_ms)]
    for key in expired_keys:
        del entries[key]

    evicted = 0
    if max_entries is not None and len(entries) > max_entries:
        by_age = sorted(entries.items(), key=lambda item: timestamp_of(item[1]))
        for key, _ in by_age[: len(entries) - max_entries]:
            del entries[key]
            evicted += 1

    return PurgeResult(expired=len(expired_keys), evicted=evicted)
