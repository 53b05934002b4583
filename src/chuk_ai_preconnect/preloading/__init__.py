# chuk_ai_preconnect/preloading/__init__.py
"""
Connection preloading.

Consumes navigation predictions and warms connections ahead of time:
- Policy gate (consent, metered network, wifi-only)
- Concurrency-limited, deadline-bound warm-up tasks
- TTL-bounded cache of outcomes and name resolutions
- Running statistics and settings advice
"""

from .cache import PreloadConnectionCache
from .cancellation import CancellationToken
from .models import (
    ConnectionStatus,
    PreloadCacheStats,
    PreloadedConnection,
    PreloadingRecommendation,
    PreloadingStats,
    PreloadSettings,
    ProbeMethod,
    ProbeResult,
    ResolutionEntry,
)
from .network import HttpxProbe, NetworkProbe, NetworkQualitySensor, StaticNetworkQuality
from .preloader import ConnectionPreloader, PreloaderConfig
from .recommendations import get_preloading_recommendations
from .task_group import OutcomeGroup, TaskOutcome

__all__ = [
    "CancellationToken",
    "ConnectionPreloader",
    "ConnectionStatus",
    "HttpxProbe",
    "NetworkProbe",
    "NetworkQualitySensor",
    "OutcomeGroup",
    "PreloadCacheStats",
    "PreloadConnectionCache",
    "PreloadSettings",
    "PreloadedConnection",
    "PreloaderConfig",
    "PreloadingRecommendation",
    "PreloadingStats",
    "ProbeMethod",
    "ProbeResult",
    "ResolutionEntry",
    "StaticNetworkQuality",
    "TaskOutcome",
    "get_preloading_recommendations",
]
