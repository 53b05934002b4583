# chuk_ai_preconnect/preloading/preloader.py
"""
Connection Preloader - warms connections to predicted URLs.

Pipeline per call:
1. Policy gate: enabled + consent, not metered, wifi-only respected
2. Purge expired / over-capacity cache entries
3. Keep predictions at or above the confidence threshold
4. Pick up to min(max_connections, hard cap) URLs not already warm or in flight
5. Warm each URL in its own task: resolve name -> header-only probe
6. Join all tasks and return every record that was produced

Preloading is advisory: failures are recorded per URL and never raised.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, Field

from chuk_ai_preconnect.clock import Clock, now_ms
from chuk_ai_preconnect.config import (
    MAX_CONCURRENT_PRELOADS,
    PRELOAD_TIMEOUT_SECONDS,
    RESOLUTION_TIMEOUT_SECONDS,
)
from chuk_ai_preconnect.exceptions import ProbeError, ProbeTimeoutError
from chuk_ai_preconnect.prediction.engine import PredictionEngine
from chuk_ai_preconnect.prediction.models import (
    NavigationPrediction,
    PredictionContext,
    PredictionOptions,
    UserIntent,
)
from chuk_ai_preconnect.urls import hostname

from .cache import PreloadConnectionCache
from .cancellation import CancellationToken
from .models import (
    ConnectionStatus,
    PreloadedConnection,
    PreloadingRecommendation,
    PreloadingStats,
    PreloadSettings,
    ProbeMethod,
)
from .network import NetworkProbe, NetworkQualitySensor, StaticNetworkQuality
from .recommendations import get_preloading_recommendations
from .task_group import OutcomeGroup

logger = logging.getLogger(__name__)


class PreloaderConfig(BaseModel):
    """Configuration for ConnectionPreloader."""

    max_concurrent_preloads: int = Field(default=MAX_CONCURRENT_PRELOADS, ge=0, description="Hard cap per call")
    preload_timeout_seconds: float = Field(default=PRELOAD_TIMEOUT_SECONDS, gt=0)
    resolution_timeout_seconds: float = Field(default=RESOLUTION_TIMEOUT_SECONDS, gt=0)
    resolution_probe_path: str = Field(default="/favicon.ico")
    auto_preload_max_predictions: int = Field(default=6, ge=0)


class ConnectionPreloader:
    """
    Concurrency-limited, privacy-gated connection warm-up.

    Owns its cache, in-flight set and stats; callers only read them
    through the methods below.
    """

    def __init__(
        self,
        probe: NetworkProbe,
        engine: PredictionEngine | None = None,
        cache: PreloadConnectionCache | None = None,
        stats: PreloadingStats | None = None,
        sensor: NetworkQualitySensor | None = None,
        config: PreloaderConfig | None = None,
        clock: Clock = now_ms,
    ):
        self.probe = probe
        self.engine = engine
        self.cache = cache if cache is not None else PreloadConnectionCache(clock=clock)
        self.sensor = sensor if sensor is not None else StaticNetworkQuality()
        self.config = config or PreloaderConfig()
        self._stats = stats if stats is not None else PreloadingStats()
        self._in_flight: set[str] = set()
        self._clock = clock

    # --- Policy ---

    def _is_metered(self) -> bool:
        try:
            return bool(self.sensor.is_metered())
        except Exception:
            logger.debug("Network sensor failed, assuming unmetered", exc_info=True)
            return False

    def _is_unrestricted(self) -> bool:
        try:
            return bool(self.sensor.is_unrestricted())
        except Exception:
            logger.debug("Network sensor failed, assuming unrestricted", exc_info=True)
            return True

    def is_preloading_allowed(self, settings: PreloadSettings) -> bool:
        """Enabled, consented, and not on a metered network."""
        return settings.preloading_enabled and settings.preloading_consent and not self._is_metered()

    def _blocked_reason(self, settings: PreloadSettings) -> str | None:
        if not settings.preloading_enabled or not settings.preloading_consent:
            return "preloading disabled or no consent"
        if self._is_metered():
            return "metered network"
        if settings.preloading_only_on_wifi and not self._is_unrestricted():
            return "wifi-only mode and not on wifi"
        return None

    # --- Preloading ---

    def _select_urls(self, predictions: Sequence[NavigationPrediction], settings: PreloadSettings) -> list[str]:
        eligible = [p for p in predictions if p.confidence >= settings.preloading_min_confidence]
        eligible.sort(key=lambda p: p.confidence, reverse=True)

        max_connections = min(settings.preloading_max_connections, self.config.max_concurrent_preloads)

        urls: list[str] = []
        for prediction in eligible:
            if len(urls) >= max_connections:
                break
            url = prediction.url
            if url in urls or url in self._in_flight:
                continue
            # Any unexpired record, successful or not, means we tried recently
            if self.cache.get(url) is not None:
                continue
            urls.append(url)
        return urls

    async def preload_predicted_urls(
        self,
        predictions: Sequence[NavigationPrediction],
        settings: PreloadSettings,
    ) -> list[PreloadedConnection]:
        """
        Warm connections for the best predictions.

        Returns one record per warm-up task that ran, in no guaranteed
        order. Returns [] when policy blocks preloading.
        """
        blocked = self._blocked_reason(settings)
        if blocked:
            logger.debug("Preloading skipped: %s", blocked)
            return []

        self.cache.purge()

        urls = self._select_urls(predictions, settings)
        if not urls:
            logger.debug("No URLs to preload")
            return []

        logger.info("Preloading %d URLs: %s", len(urls), urls)

        self._in_flight.update(urls)
        group = OutcomeGroup()
        for url in urls:
            group.spawn(url, self._preload_connection(url))
        outcomes = await group.join()

        results: list[PreloadedConnection] = []
        for outcome in outcomes:
            if outcome.ok:
                results.append(outcome.value)
            else:
                self._in_flight.discard(outcome.key)
                logger.warning("Preload task for %s did not complete: %s", outcome.key, outcome.error)
        return results

    async def _preload_connection(self, url: str) -> PreloadedConnection:
        host = hostname(url)
        connection = PreloadedConnection(url=url, domain=host or "unknown", preloaded_at=self._clock())
        self.cache.put(connection)
        self._stats.record_attempt()
        start = time.perf_counter()

        try:
            logger.debug("Starting preload for %s", url)

            connection.name_resolved = host is not None and await self._resolve(host)
            if not connection.name_resolved:
                raise ProbeError(connection.domain, "name resolution failed")

            token = CancellationToken(self.config.preload_timeout_seconds, label=url)
            await token.run(self.probe.probe(url, method=ProbeMethod.HEAD, token=token))

            connection.transport_connected = True
            connection.secure_handshake = url.startswith("https://")
            connection.connection_time = (time.perf_counter() - start) * 1000
            connection.status = ConnectionStatus.SUCCESS
            self._stats.record_success(connection.connection_time)
            logger.debug("Preloaded %s in %.1fms", url, connection.connection_time)

        except ProbeTimeoutError as e:
            connection.status = ConnectionStatus.TIMEOUT
            connection.connection_time = (time.perf_counter() - start) * 1000
            self._stats.record_failure(timed_out=True)
            logger.debug("Preload timed out for %s: %s", url, e)

        except Exception as e:
            connection.status = ConnectionStatus.FAILED
            connection.connection_time = (time.perf_counter() - start) * 1000
            self._stats.record_failure()
            logger.debug("Preload failed for %s: %s", url, e)

        finally:
            self._in_flight.discard(url)

        return connection

    async def _resolve(self, host: str) -> bool:
        """Name resolution via an existence probe; only successes are cached."""
        if self.cache.is_resolved(host):
            return True

        target = f"https://{host}{self.config.resolution_probe_path}"
        token = CancellationToken(self.config.resolution_timeout_seconds, label=target)
        try:
            await token.run(self.probe.probe(target, method=ProbeMethod.HEAD, token=token))
        except Exception as e:
            logger.debug("Name resolution failed for %s: %s", host, e)
            return False

        self.cache.mark_resolved(host)
        return True

    def is_url_preloaded(self, url: str) -> bool:
        """
        True if ``url`` was successfully warmed within the cache TTL.

        Every call is folded into the running cache hit rate.
        """
        hit = self.cache.is_warm(url)
        self._stats.record_lookup(hit)
        return hit

    async def auto_preload_for_context(
        self,
        current_url: str | None = None,
        recent_urls: list[str] | None = None,
        settings: PreloadSettings | None = None,
    ) -> list[PreloadedConnection]:
        """Predict from the current page and warm the results; [] on any failure."""
        settings = settings or PreloadSettings()
        if not self.is_preloading_allowed(settings):
            return []
        if self.engine is None:
            logger.debug("No prediction engine attached, auto-preload skipped")
            return []

        try:
            predictions = await self.engine.generate_navigation_predictions(
                PredictionContext(
                    current_url=current_url,
                    current_time=self._clock(),
                    recent_urls=recent_urls or [],
                    user_intent=UserIntent.BROWSING,
                ),
                PredictionOptions(
                    max_predictions=self.config.auto_preload_max_predictions,
                    min_confidence=settings.preloading_min_confidence,
                ),
            )
            if not predictions:
                return []
            return await self.preload_predicted_urls(predictions, settings)
        except Exception:
            logger.error("Auto-preload failed", exc_info=True)
            return []

    # --- Settings & network changes ---

    def update_settings(self, updates: Mapping[str, Any]) -> None:
        """Apply a settings change notification; disabling preloading drops all caches."""
        logger.debug("Preloading settings updated: %s", dict(updates))
        if updates.get("preloading_enabled") is False:
            self.clear_preloading_cache()

    def handle_network_change(self) -> bool:
        """React to a network change. Returns True if caches were cleared."""
        if self._is_metered():
            logger.info("Network became metered, clearing preload cache")
            self.clear_preloading_cache()
            return True
        return False

    # --- Introspection ---

    def get_preloading_stats(self) -> PreloadingStats:
        return self._stats.model_copy()

    def get_preloaded_connections(self) -> list[PreloadedConnection]:
        return self.cache.connections()

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    def clear_preloading_cache(self) -> int:
        """Drop connection and resolution caches; cumulative stats are kept."""
        cleared = self.cache.clear()
        self._in_flight.clear()
        logger.info("Preload cache cleared: %d connections", cleared)
        return cleared

    def get_preloading_recommendations(self) -> list[PreloadingRecommendation]:
        return get_preloading_recommendations(self.get_preloading_stats(), self.sensor)
