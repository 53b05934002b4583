# chuk_ai_preconnect/prediction/scoring.py
"""
Scoring functions for navigation prediction.

Each factor maps one history record (plus the prediction context) to a
value in [0, 1]. They are pure and total: malformed input yields 0 or a
neutral default, never an exception or NaN.

    confidence = frequency * w1 + recency * w2 + engagement * w3
               + time_pattern * w4 + contextual * w5 + similarity * w6
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, model_validator

from chuk_ai_preconnect.clock import day_of_week, hour_of_day
from chuk_ai_preconnect.config import MS_PER_DAY
from chuk_ai_preconnect.history.models import HistoryRecord
from chuk_ai_preconnect.urls import hostname, path_segments

from .models import PredictionContext

RECENCY_DECAY_DAYS = 7.0
NEUTRAL_SCORE = 0.5
HOUR_TOLERANCE = 2
MANY_TABS = 5


class ScoringWeights(BaseModel):
    """Factor weights (must sum to 1.0 so confidence stays in [0, 1])."""

    frequency: float = 0.25
    recency: float = 0.20
    engagement: float = 0.15
    time_pattern: float = 0.15
    contextual: float = 0.15
    similarity: float = 0.10

    @model_validator(mode="after")
    def _check_sum(self) -> ScoringWeights:
        total = (
            self.frequency + self.recency + self.engagement + self.time_pattern + self.contextual + self.similarity
        )
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"weights must sum to 1.0, got {total}")
        return self


class ScoreBreakdown(BaseModel):
    """Per-factor scores for one record."""

    frequency: float = Field(default=0.0, ge=0.0, le=1.0)
    recency: float = Field(default=0.0, ge=0.0, le=1.0)
    engagement: float = Field(default=NEUTRAL_SCORE, ge=0.0, le=1.0)
    time_pattern: float = Field(default=NEUTRAL_SCORE, ge=0.0, le=1.0)
    contextual: float = Field(default=0.0, ge=0.0, le=1.0)
    similarity: float = Field(default=0.0, ge=0.0, le=1.0)

    hour_match: bool = False
    day_match: bool = False

    def confidence(self, weights: ScoringWeights) -> float:
        return (
            self.frequency * weights.frequency
            + self.recency * weights.recency
            + self.engagement * weights.engagement
            + self.time_pattern * weights.time_pattern
            + self.contextual * weights.contextual
            + self.similarity * weights.similarity
        )


# =============================================================================
# Factors
# =============================================================================


def frequency_score(record: HistoryRecord, max_visit_count: int) -> float:
    if max_visit_count <= 0:
        return 0.0
    return min(1.0, record.visit_count / max_visit_count)


def recency_score(record: HistoryRecord, now: float) -> float:
    """Exponential decay with a 7-day time constant; future visits count as now."""
    days_since_visit = max(0.0, (now - record.visited_at) / MS_PER_DAY)
    return math.exp(-days_since_visit / RECENCY_DECAY_DAYS)


def engagement_score(record: HistoryRecord) -> float:
    if record.engagement_score is None:
        return NEUTRAL_SCORE
    return record.engagement_score / 100


def time_pattern_matches(record: HistoryRecord, now: float) -> tuple[bool, bool]:
    """(hour within tolerance, same weekday) for a record with a visit pattern."""
    if record.visit_patterns is None:
        return False, False

    hour_diff = abs(hour_of_day(now) - record.visit_patterns.hour_of_day)
    # 23:00 and 01:00 are two hours apart
    hour_match = hour_diff <= HOUR_TOLERANCE or hour_diff >= 24 - HOUR_TOLERANCE
    day_match = day_of_week(now) == record.visit_patterns.day_of_week
    return hour_match, day_match


def time_pattern_score(record: HistoryRecord, now: float) -> float:
    if record.visit_patterns is None:
        return NEUTRAL_SCORE

    hour_match, day_match = time_pattern_matches(record, now)
    score = 0.0
    if hour_match:
        score += 0.6
    if day_match:
        score += 0.4
    return min(score, 1.0)


def _query_overlap(query: str, recorded: str) -> float:
    query_words = query.lower().split()
    recorded_words = recorded.lower().split()
    if not query_words or not recorded_words:
        return 0.0
    common = [word for word in query_words if word in recorded_words]
    return len(common) / max(len(query_words), len(recorded_words))


def contextual_score(record: HistoryRecord, context: PredictionContext) -> float:
    score = 0.0

    current_domain = context.domain
    if current_domain and record.domain == current_domain:
        score += 0.3

    if context.search_query and record.search_query:
        score += _query_overlap(context.search_query, record.search_query) * 0.4

    if context.recent_urls and record.domain:
        recent_domains = {hostname(url) for url in context.recent_urls} - {None}
        if record.domain in recent_domains:
            score += 0.2

    if (context.tab_count or 0) > MANY_TABS and (record.tab_count or 0) > MANY_TABS:
        score += 0.1

    return min(score, 1.0)


def similarity_score(record: HistoryRecord, context: PredictionContext) -> float:
    current_host = hostname(context.current_url)
    record_host = hostname(record.url)
    if current_host is None or record_host is None:
        return 0.0
    if current_host != record_host:
        return 0.0

    score = 0.5

    current_parts = path_segments(context.current_url or "")
    record_parts = path_segments(record.url)
    if current_parts and record_parts:
        common = [part for part in current_parts if part in record_parts]
        score += (len(common) / max(len(current_parts), len(record_parts))) * 0.3

    # Same host is taken as a proxy for shared topics
    if record.topic_tags:
        score += 0.2

    return min(score, 1.0)


def score_record(
    record: HistoryRecord,
    context: PredictionContext,
    now: float,
    max_visit_count: int,
) -> ScoreBreakdown:
    """Compute every factor for one record."""
    hour_match, day_match = time_pattern_matches(record, now)
    return ScoreBreakdown(
        frequency=frequency_score(record, max_visit_count),
        recency=recency_score(record, now),
        engagement=engagement_score(record),
        time_pattern=time_pattern_score(record, now),
        contextual=contextual_score(record, context),
        similarity=similarity_score(record, context),
        hour_match=hour_match,
        day_match=day_match,
    )
