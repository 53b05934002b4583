# chuk_ai_preconnect/pipeline.py
"""
Process-wide wiring of the prediction engine and the connection preloader.

Build one pipeline per process and pass it by reference; both engines
share the same clock, and the preloader reads predictions from the engine.
"""

from __future__ import annotations

import logging

from chuk_ai_preconnect.clock import Clock, now_ms
from chuk_ai_preconnect.history.store import HistoryStore
from chuk_ai_preconnect.prediction.engine import PredictionEngine, PredictionEngineConfig
from chuk_ai_preconnect.preloading.models import PreloadedConnection, PreloadSettings
from chuk_ai_preconnect.preloading.network import HttpxProbe, NetworkProbe, NetworkQualitySensor
from chuk_ai_preconnect.preloading.preloader import ConnectionPreloader, PreloaderConfig

logger = logging.getLogger(__name__)


class PreconnectPipeline:
    """history -> predictions -> warmed connections."""

    def __init__(self, engine: PredictionEngine, preloader: ConnectionPreloader):
        self.engine = engine
        self.preloader = preloader

    @classmethod
    def create(
        cls,
        history_store: HistoryStore,
        probe: NetworkProbe | None = None,
        sensor: NetworkQualitySensor | None = None,
        engine_config: PredictionEngineConfig | None = None,
        preloader_config: PreloaderConfig | None = None,
        clock: Clock = now_ms,
    ) -> PreconnectPipeline:
        engine = PredictionEngine(history_store, config=engine_config, clock=clock)
        preloader = ConnectionPreloader(
            probe if probe is not None else HttpxProbe(),
            engine=engine,
            sensor=sensor,
            config=preloader_config,
            clock=clock,
        )
        return cls(engine, preloader)

    async def on_navigation(
        self,
        current_url: str,
        recent_urls: list[str] | None,
        settings: PreloadSettings,
    ) -> list[PreloadedConnection]:
        """Called after each navigation: warm connections for the likely next pages."""
        return await self.preloader.auto_preload_for_context(current_url, recent_urls, settings)

    async def warm_up(self) -> int:
        """Precompute predictions for common contexts. Returns queries run."""
        return await self.engine.precompute_predictions()

    async def aclose(self) -> None:
        close = getattr(self.preloader.probe, "aclose", None)
        if close is not None:
            await close()
