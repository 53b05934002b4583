# chuk_ai_preconnect/prediction/ranker.py
"""
Prediction ranker: turns scored history into a sorted, filtered list.

Category assignment is a fixed-priority cascade; the first rule that
matches labels the prediction even when several thresholds are exceeded:

    recency > 0.8          -> recent
    contextual > 0.6       -> contextual
    time_pattern > 0.7     -> time-based
    both queries present   -> search-related
    similarity > 0.5       -> similar-content
    otherwise              -> frequent
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field

from chuk_ai_preconnect.history.models import HistoryRecord

from .models import (
    CATEGORY_REASONS,
    NavigationPrediction,
    PredictionCategory,
    PredictionContext,
    PredictionMetadata,
    PredictionOptions,
)
from .scoring import ScoreBreakdown, ScoringWeights, score_record

logger = logging.getLogger(__name__)


class CategoryThresholds(BaseModel):
    recent: float = 0.8
    contextual: float = 0.6
    time_based: float = 0.7
    similar_content: float = 0.5


class PredictionRanker(BaseModel):
    """Scores, labels, filters and orders history records."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: CategoryThresholds = Field(default_factory=CategoryThresholds)

    def categorize(
        self,
        scores: ScoreBreakdown,
        record: HistoryRecord,
        context: PredictionContext,
    ) -> PredictionCategory:
        t = self.thresholds
        if scores.recency > t.recent:
            return PredictionCategory.RECENT
        if scores.contextual > t.contextual:
            return PredictionCategory.CONTEXTUAL
        if scores.time_pattern > t.time_based:
            return PredictionCategory.TIME_BASED
        if context.search_query and record.search_query:
            return PredictionCategory.SEARCH_RELATED
        if scores.similarity > t.similar_content:
            return PredictionCategory.SIMILAR_CONTENT
        return PredictionCategory.FREQUENT

    def rank(
        self,
        history: Sequence[HistoryRecord],
        context: PredictionContext,
        options: PredictionOptions,
        now: float,
    ) -> list[NavigationPrediction]:
        """
        Build predictions for ``history``.

        The current URL is excluded, records under ``options.min_confidence``
        or outside ``options.categories`` are dropped, and the rest are
        sorted by confidence (stable, so history order breaks ties) and
        truncated to ``options.max_predictions``.
        """
        if not history:
            return []

        max_visit_count = max(record.visit_count for record in history)
        allowed = set(options.categories) if options.categories is not None else None

        predictions: list[NavigationPrediction] = []
        for record in history:
            if context.current_url and record.url == context.current_url:
                continue

            scores = score_record(record, context, now, max_visit_count)
            confidence = min(1.0, max(0.0, scores.confidence(self.weights)))
            if confidence < options.min_confidence:
                continue

            category = self.categorize(scores, record, context)
            if allowed is not None and category not in allowed:
                continue

            predictions.append(self._build(record, scores, confidence, category, options))

        predictions.sort(key=lambda p: p.confidence, reverse=True)
        return predictions[: options.max_predictions]

    @staticmethod
    def _build(
        record: HistoryRecord,
        scores: ScoreBreakdown,
        confidence: float,
        category: PredictionCategory,
        options: PredictionOptions,
    ) -> NavigationPrediction:
        metadata = None
        if options.include_metadata:
            metadata = PredictionMetadata(
                visit_count=record.visit_count,
                last_visited=record.visited_at,
                average_time_spent=record.time_spent,
                engagement_score=record.engagement_score,
                time_of_day_match=scores.hour_match,
                day_of_week_match=scores.day_match,
                contextual_relevance=scores.contextual,
            )

        return NavigationPrediction(
            url=record.url,
            title=record.title,
            domain=record.domain or "unknown",
            confidence=confidence,
            reason=CATEGORY_REASONS[category],
            category=category,
            metadata=metadata,
        )
