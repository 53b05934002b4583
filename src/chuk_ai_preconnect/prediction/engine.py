# chuk_ai_preconnect/prediction/engine.py
"""
Prediction Engine - public entry point for navigation prediction.

Handles:
- Fetching a bounded slice of history from the store
- Ranking it against the current context
- Caching ranked lists per normalized context
- Preset queries (top sites, contextual, search-related, time-based)
- Cache warm-up from the behaviour summary
- Recording user feedback
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter

from pydantic import BaseModel, Field

from chuk_ai_preconnect.clock import Clock, now_ms
from chuk_ai_preconnect.config import HISTORY_FETCH_LIMIT, MS_PER_DAY
from chuk_ai_preconnect.history.models import TimeRange
from chuk_ai_preconnect.history.store import HistoryStore
from chuk_ai_preconnect.urls import extract_domain

from .cache import PredictionCache
from .feedback import FeedbackLog
from .models import (
    NavigationPrediction,
    PredictionCategory,
    PredictionContext,
    PredictionFeedback,
    PredictionOptions,
    PredictionStats,
    UserIntent,
)
from .ranker import PredictionRanker

logger = logging.getLogger(__name__)


class PredictionEngineConfig(BaseModel):
    """Configuration for PredictionEngine."""

    history_limit: int = Field(default=HISTORY_FETCH_LIMIT, gt=0)

    # Cache warm-up
    precompute_top_domains: int = Field(default=5, ge=0)
    precompute_pause_seconds: float = Field(default=0.0, ge=0.0, description="Pause between domain queries")


class PredictionEngine:
    """
    Converts visit history into ranked, explained navigation predictions.

    All state (cache, feedback) lives on the instance; construct one per
    process and share it with the preloader.
    """

    def __init__(
        self,
        history_store: HistoryStore,
        cache: PredictionCache | None = None,
        ranker: PredictionRanker | None = None,
        feedback_log: FeedbackLog | None = None,
        config: PredictionEngineConfig | None = None,
        clock: Clock = now_ms,
    ):
        self.history_store = history_store
        self.cache = cache if cache is not None else PredictionCache(clock=clock)
        self.ranker = ranker or PredictionRanker()
        self.feedback_log = feedback_log if feedback_log is not None else FeedbackLog()
        self.config = config or PredictionEngineConfig()
        self._clock = clock

    async def generate_navigation_predictions(
        self,
        context: PredictionContext | None = None,
        options: PredictionOptions | None = None,
    ) -> list[NavigationPrediction]:
        """
        Ranked predictions for ``context``.

        Returns the cached list when the same normalized context was ranked
        within the cache TTL. An empty or unavailable history yields [].
        """
        context = context or PredictionContext()
        options = options or PredictionOptions()
        now = context.current_time if context.current_time is not None else self._clock()

        key = PredictionCache.make_key(context, options, now)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Prediction cache hit for %s", key)
            return cached

        time_range = TimeRange(start=now - options.time_window_ms, end=now)
        try:
            history = await self.history_store.get_history(time_range, limit=self.config.history_limit)
        except Exception:
            logger.warning("History store unavailable, no predictions generated", exc_info=True)
            return []

        if not history:
            logger.info("No history available for predictions")
            return []

        predictions = self.ranker.rank(history, context, options, now)
        self.cache.put(key, predictions)

        logger.debug(
            "Generated %d predictions from %d history records (domain=%s)",
            len(predictions),
            len(history),
            context.domain,
        )
        return predictions

    # --- Presets ---

    async def get_top_sites_predictions(self, limit: int = 8) -> list[NavigationPrediction]:
        """Frequent and recent sites from the last week."""
        try:
            if await self.history_store.get_behavior_pattern_summary() is None:
                await self.history_store.recompute_behavior_patterns()
        except Exception:
            logger.warning("Could not refresh behavior patterns", exc_info=True)

        context = PredictionContext(current_time=self._clock(), user_intent=UserIntent.BROWSING)
        return await self.generate_navigation_predictions(
            context,
            PredictionOptions(
                max_predictions=limit,
                min_confidence=0.3,
                categories=[PredictionCategory.FREQUENT, PredictionCategory.RECENT],
                time_window_ms=7 * MS_PER_DAY,
            ),
        )

    async def get_contextual_predictions(
        self,
        current_url: str,
        recent_urls: list[str] | None = None,
        limit: int = 6,
    ) -> list[NavigationPrediction]:
        """Pages related to the one currently open."""
        context = PredictionContext(
            current_url=current_url,
            current_domain=extract_domain(current_url),
            current_time=self._clock(),
            recent_urls=recent_urls or [],
            user_intent=UserIntent.BROWSING,
        )
        return await self.generate_navigation_predictions(
            context,
            PredictionOptions(
                max_predictions=limit,
                min_confidence=0.2,
                categories=[
                    PredictionCategory.CONTEXTUAL,
                    PredictionCategory.SIMILAR_CONTENT,
                    PredictionCategory.FREQUENT,
                ],
                time_window_ms=14 * MS_PER_DAY,
            ),
        )

    async def get_search_related_predictions(self, search_query: str, limit: int = 5) -> list[NavigationPrediction]:
        context = PredictionContext(
            current_time=self._clock(),
            search_query=search_query,
            user_intent=UserIntent.SEARCHING,
        )
        return await self.generate_navigation_predictions(
            context,
            PredictionOptions(
                max_predictions=limit,
                min_confidence=0.15,
                categories=[PredictionCategory.SEARCH_RELATED, PredictionCategory.CONTEXTUAL],
                time_window_ms=30 * MS_PER_DAY,
            ),
        )

    async def get_time_based_predictions(self, limit: int = 5) -> list[NavigationPrediction]:
        """Sites usually visited at this hour and weekday."""
        context = PredictionContext(current_time=self._clock(), user_intent=UserIntent.BROWSING)
        return await self.generate_navigation_predictions(
            context,
            PredictionOptions(
                max_predictions=limit,
                min_confidence=0.25,
                categories=[PredictionCategory.TIME_BASED, PredictionCategory.FREQUENT],
                time_window_ms=30 * MS_PER_DAY,
            ),
        )

    async def precompute_predictions(self) -> int:
        """
        Warm the cache for common contexts.

        Runs top-sites, time-based and one query per top domain. Does nothing
        if the store has no behaviour summary. Returns the number of queries run.
        """
        try:
            summary = await self.history_store.get_behavior_pattern_summary()
        except Exception:
            logger.warning("Behavior summary unavailable, skipping precompute", exc_info=True)
            return 0

        if summary is None:
            logger.info("No behavior patterns available, skipping precompute")
            return 0

        await self.get_top_sites_predictions(10)
        await self.get_time_based_predictions(8)
        runs = 2

        for domain_info in summary.top_domains[: self.config.precompute_top_domains]:
            if self.config.precompute_pause_seconds:
                await asyncio.sleep(self.config.precompute_pause_seconds)
            context = PredictionContext(
                current_domain=domain_info.domain,
                current_time=self._clock(),
                user_intent=UserIntent.BROWSING,
            )
            await self.generate_navigation_predictions(
                context,
                PredictionOptions(max_predictions=5, min_confidence=0.2),
            )
            runs += 1

        logger.info("Precomputed predictions for %d contexts", runs)
        return runs

    # --- Feedback ---

    def update_prediction_feedback(
        self,
        url: str,
        was_useful: bool,
        context: PredictionContext | None = None,
    ) -> PredictionFeedback:
        """
        Record whether a prediction for ``url`` helped.

        Feedback is stored for later weight tuning; it does not change
        the current weights.
        """
        event = PredictionFeedback(
            url=url,
            was_useful=was_useful,
            context=(context.domain if context else None) or "unknown",
            timestamp=self._clock(),
        )
        self.feedback_log.record(event)
        logger.debug("Prediction feedback for %s: useful=%s", url, was_useful)
        return event

    # --- Stats ---

    def get_prediction_stats(self) -> PredictionStats:
        all_predictions = [p for entry in self.cache.entries() for p in entry.predictions]
        distribution = Counter(p.category for p in all_predictions)
        average = sum(p.confidence for p in all_predictions) / len(all_predictions) if all_predictions else 0.0
        return PredictionStats(
            cache_size=self.cache.size,
            total_predictions=len(all_predictions),
            average_confidence=average,
            category_distribution=dict(distribution),
        )

    def clear_prediction_cache(self) -> int:
        cleared = self.cache.clear()
        logger.info("Prediction cache cleared: %d entries", cleared)
        return cleared
