# chuk_ai_preconnect/preloading/models.py
"""Models for connection preloading: connection records, settings, stats."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from chuk_ai_preconnect.config import DEFAULT_PRELOAD_MIN_CONFIDENCE, MAX_CONCURRENT_PRELOADS

# =============================================================================
# Enums
# =============================================================================


class ConnectionStatus(str, Enum):
    """Lifecycle of a warm-up attempt: pending -> success | failed | timeout."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"


class ProbeMethod(str, Enum):
    """How a network probe touches its target."""

    HEAD = "HEAD"  # existence check, headers only


# =============================================================================
# Connection Records
# =============================================================================


class PreloadedConnection(BaseModel):
    """
    Outcome of warming one URL.

    Mutated only by its own warm-up task; settled once status leaves PENDING.
    """

    url: str
    domain: str
    preloaded_at: float = Field(..., description="Warm-up start, epoch ms")
    status: ConnectionStatus = Field(default=ConnectionStatus.PENDING)
    connection_time: float | None = Field(default=None, description="Elapsed milliseconds")

    name_resolved: bool | None = None
    transport_connected: bool | None = None
    secure_handshake: bool | None = None

    @property
    def settled(self) -> bool:
        return self.status != ConnectionStatus.PENDING


class ResolutionEntry(BaseModel):
    """A host whose name resolution probe succeeded."""

    host: str
    resolved_at: float


class ProbeResult(BaseModel):
    """Successful network probe."""

    target: str
    status_code: int | None = None
    elapsed_ms: float = 0.0


# =============================================================================
# Settings
# =============================================================================


class PreloadSettings(BaseModel):
    """
    Read-only view of the user's preloading preferences.

    Passed into every call; the preloader never caches it.
    """

    model_config = {"frozen": True}

    preloading_enabled: bool = False
    preloading_consent: bool = False
    preloading_only_on_wifi: bool = True
    preloading_min_confidence: float = Field(default=DEFAULT_PRELOAD_MIN_CONFIDENCE, ge=0.0, le=1.0)
    preloading_max_connections: int = Field(
        default=MAX_CONCURRENT_PRELOADS, ge=1, description="Warm-ups per call, further capped by the preloader"
    )


# =============================================================================
# Stats Models
# =============================================================================


class PreloadingStats(BaseModel):
    """
    Running preload counters.

    Counters only grow; averages are updated incrementally rather than
    recomputed from history.
    """

    total_preloads: int = Field(default=0)
    successful_preloads: int = Field(default=0)
    failed_preloads: int = Field(default=0, description="Includes timeouts")
    timed_out_preloads: int = Field(default=0)
    average_preload_time: float = Field(default=0.0, description="Mean ms over successful preloads")

    cache_lookups: int = Field(default=0)
    cache_hits: int = Field(default=0)
    cache_hit_rate: float = Field(default=0.0)

    def record_attempt(self) -> None:
        self.total_preloads += 1

    def record_success(self, connection_time: float) -> None:
        self.successful_preloads += 1
        self.average_preload_time += (connection_time - self.average_preload_time) / self.successful_preloads

    def record_failure(self, timed_out: bool = False) -> None:
        self.failed_preloads += 1
        if timed_out:
            self.timed_out_preloads += 1

    def record_lookup(self, hit: bool) -> None:
        """Fold one is-preloaded lookup into the running hit rate."""
        self.cache_lookups += 1
        if hit:
            self.cache_hits += 1
        self.cache_hit_rate += ((1.0 if hit else 0.0) - self.cache_hit_rate) / self.cache_lookups


class PreloadCacheStats(BaseModel):
    connections: int = 0
    max_connections: int = 0
    resolutions: int = 0
    expirations: int = 0
    evictions: int = 0


class PreloadingRecommendation(BaseModel):
    """Suggested settings change."""

    recommendation: str
    reason: str
    settings: dict[str, Any] = Field(default_factory=dict)
