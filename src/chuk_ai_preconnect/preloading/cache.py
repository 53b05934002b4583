# chuk_ai_preconnect/preloading/cache.py
"""
Preload Connection Cache.

Two independent stores:
- connection records, keyed by URL (TTL 5 min, capped at 20 entries)
- successful name resolutions, keyed by host (TTL 10 min, uncapped)

Both follow the same TTL-then-oldest-first eviction as the prediction cache.
"""

from __future__ import annotations

import logging

from chuk_ai_preconnect.clock import Clock, now_ms
from chuk_ai_preconnect.config import (
    CONNECTION_CACHE_MAX_ENTRIES,
    CONNECTION_CACHE_TTL_MS,
    RESOLUTION_CACHE_TTL_MS,
)
from chuk_ai_preconnect.eviction import PurgeResult, is_expired, purge_entries

from .models import ConnectionStatus, PreloadCacheStats, PreloadedConnection, ResolutionEntry

logger = logging.getLogger(__name__)


class PreloadConnectionCache:
    """TTL- and size-bounded store of warm-up outcomes plus a resolution cache."""

    def __init__(
        self,
        max_entries: int = CONNECTION_CACHE_MAX_ENTRIES,
        ttl_ms: float = CONNECTION_CACHE_TTL_MS,
        resolution_ttl_ms: float = RESOLUTION_CACHE_TTL_MS,
        clock: Clock = now_ms,
    ):
        self.max_entries = max_entries
        self.ttl_ms = ttl_ms
        self.resolution_ttl_ms = resolution_ttl_ms
        self._clock = clock
        self._connections: dict[str, PreloadedConnection] = {}
        self._resolutions: dict[str, ResolutionEntry] = {}
        self._expirations = 0
        self._evictions = 0

    # --- Connections ---

    def get(self, url: str) -> PreloadedConnection | None:
        """Cached record for ``url`` if it is still within TTL."""
        connection = self._connections.get(url)
        if connection is None:
            return None
        if is_expired(connection.preloaded_at, self._clock(), self.ttl_ms):
            return None
        return connection

    def put(self, connection: PreloadedConnection) -> None:
        """Store a record, then purge expired and over-capacity entries."""
        self._connections[connection.url] = connection
        self._purge_connections()

    def is_warm(self, url: str) -> bool:
        """True if ``url`` has an unexpired, successful warm-up."""
        connection = self.get(url)
        return connection is not None and connection.status == ConnectionStatus.SUCCESS

    def connections(self) -> list[PreloadedConnection]:
        return list(self._connections.values())

    # --- Name resolution ---

    def is_resolved(self, host: str) -> bool:
        entry = self._resolutions.get(host)
        return entry is not None and not is_expired(entry.resolved_at, self._clock(), self.resolution_ttl_ms)

    def mark_resolved(self, host: str) -> None:
        self._resolutions[host] = ResolutionEntry(host=host, resolved_at=self._clock())

    # --- Maintenance ---

    def _purge_connections(self) -> PurgeResult:
        result = purge_entries(
            self._connections,
            lambda connection: connection.preloaded_at,
            now=self._clock(),
            ttl_ms=self.ttl_ms,
            max_entries=self.max_entries,
        )
        self._expirations += result.expired
        self._evictions += result.evicted
        return result

    def purge(self) -> PurgeResult:
        """Purge both stores by TTL; the connection store also by capacity."""
        connections = self._purge_connections()
        resolutions = purge_entries(
            self._resolutions,
            lambda entry: entry.resolved_at,
            now=self._clock(),
            ttl_ms=self.resolution_ttl_ms,
        )
        self._expirations += resolutions.expired
        if connections.removed or resolutions.removed:
            logger.debug(
                "Preload cache purged %d connections, %d resolutions",
                connections.removed,
                resolutions.removed,
            )
        return PurgeResult(
            expired=connections.expired + resolutions.expired,
            evicted=connections.evicted,
        )

    def clear(self) -> int:
        """Drop every connection record and resolution. Returns connections cleared."""
        count = len(self._connections)
        self._connections.clear()
        self._resolutions.clear()
        return count

    def __len__(self) -> int:
        return len(self._connections)

    def get_stats(self) -> PreloadCacheStats:
        return PreloadCacheStats(
            connections=len(self._connections),
            max_connections=self.max_entries,
            resolutions=len(self._resolutions),
            expirations=self._expirations,
            evictions=self._evictions,
        )
