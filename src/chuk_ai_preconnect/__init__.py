# chuk_ai_preconnect/__init__.py
"""
chuk_ai_preconnect - predictive navigation and connection preloading.

Predicts which page a user will open next from their visit history and
warms connections to it before they navigate:

    history store -> PredictionEngine -> ConnectionPreloader -> network

Quick start::

    from chuk_ai_preconnect import InMemoryHistoryStore, PreconnectPipeline, PreloadSettings

    pipeline = PreconnectPipeline.create(InMemoryHistoryStore())
    settings = PreloadSettings(preloading_enabled=True, preloading_consent=True)
    await pipeline.on_navigation("https://example.com/docs", [], settings)
"""

from chuk_ai_preconnect.exceptions import PreconnectError, ProbeError, ProbeTimeoutError
from chuk_ai_preconnect.history import HistoryRecord, HistoryStore, InMemoryHistoryStore, TimeRange
from chuk_ai_preconnect.pipeline import PreconnectPipeline
from chuk_ai_preconnect.prediction import (
    NavigationPrediction,
    PredictionCategory,
    PredictionContext,
    PredictionEngine,
    PredictionOptions,
)
from chuk_ai_preconnect.preloading import (
    ConnectionPreloader,
    ConnectionStatus,
    HttpxProbe,
    PreloadedConnection,
    PreloadingStats,
    PreloadSettings,
    StaticNetworkQuality,
)

__version__ = "0.1.0"

__all__ = [
    "ConnectionPreloader",
    "ConnectionStatus",
    "HistoryRecord",
    "HistoryStore",
    "HttpxProbe",
    "InMemoryHistoryStore",
    "NavigationPrediction",
    "PreconnectError",
    "PreconnectPipeline",
    "PredictionCategory",
    "PredictionContext",
    "PredictionEngine",
    "PredictionOptions",
    "PreloadSettings",
    "PreloadedConnection",
    "PreloadingStats",
    "ProbeError",
    "ProbeTimeoutError",
    "StaticNetworkQuality",
    "TimeRange",
    "__version__",
]
