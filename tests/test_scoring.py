# tests/test_scoring.py
"""
Tests for the prediction scoring factors.

Covers:
- Frequency normalization and the zero-maximum case
- Recency decay (7-day constant, monotonic, bounded)
- Engagement default and normalization
- Time-pattern hour tolerance with midnight wrap-around and weekday match
- Contextual relevance components and clamping
- URL similarity (host, path overlap, topic tags, unparsable URLs)
- ScoringWeights validation and bounds over varied records
"""

import math

import pytest
from pydantic import ValidationError

from chuk_ai_preconnect.clock import day_of_week, hour_of_day
from chuk_ai_preconnect.config import MS_PER_DAY
from chuk_ai_preconnect.history.models import HistoryRecord, VisitContext, VisitPattern
from chuk_ai_preconnect.prediction.models import PredictionContext
from chuk_ai_preconnect.prediction.scoring import (
    ScoreBreakdown,
    ScoringWeights,
    contextual_score,
    engagement_score,
    frequency_score,
    recency_score,
    score_record,
    similarity_score,
    time_pattern_matches,
    time_pattern_score,
)

from .conftest import BASE_TIME_MS

NOW = BASE_TIME_MS


def _record(
    url: str = "https://example.com/",
    visit_count: int = 1,
    days_ago: float = 0.0,
    **kwargs,
) -> HistoryRecord:
    return HistoryRecord(
        url=url,
        visit_count=visit_count,
        visited_at=NOW - days_ago * MS_PER_DAY,
        **kwargs,
    )


# =============================================================================
# Frequency
# =============================================================================


class TestFrequencyScore:
    def test_ratio_to_batch_maximum(self):
        assert frequency_score(_record(visit_count=5), 10) == pytest.approx(0.5)
        assert frequency_score(_record(visit_count=10), 10) == pytest.approx(1.0)

    def test_zero_maximum_is_zero(self):
        assert frequency_score(_record(visit_count=0), 0) == 0.0

    def test_negative_visit_count_rejected(self):
        with pytest.raises(ValidationError):
            _record(visit_count=-1)


# =============================================================================
# Recency
# =============================================================================


class TestRecencyScore:
    def test_visit_now_scores_one(self):
        assert recency_score(_record(days_ago=0), NOW) == pytest.approx(1.0)

    def test_seven_days_is_one_over_e(self):
        assert recency_score(_record(days_ago=7), NOW) == pytest.approx(math.exp(-1))

    def test_one_day_is_above_recent_threshold(self):
        assert recency_score(_record(days_ago=1), NOW) > 0.8

    def test_monotonically_non_increasing(self):
        scores = [recency_score(_record(days_ago=d), NOW) for d in (0, 0.5, 1, 2, 7, 30, 365)]
        assert scores == sorted(scores, reverse=True)
        assert all(0.0 <= s <= 1.0 for s in scores)

    def test_future_visit_capped_at_one(self):
        assert recency_score(_record(days_ago=-3), NOW) == pytest.approx(1.0)

    def test_very_old_visit_approaches_zero(self):
        score = recency_score(_record(days_ago=10_000), NOW)
        assert 0.0 <= score < 1e-6


# =============================================================================
# Engagement
# =============================================================================


class TestEngagementScore:
    def test_missing_is_neutral(self):
        assert engagement_score(_record()) == 0.5

    def test_normalized_to_unit_range(self):
        assert engagement_score(_record(engagement_score=80)) == pytest.approx(0.8)
        assert engagement_score(_record(engagement_score=0)) == 0.0

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            _record(engagement_score=150)


# =============================================================================
# Time pattern
# =============================================================================


class TestTimePatternScore:
    def test_no_pattern_is_neutral(self):
        assert time_pattern_score(_record(), NOW) == 0.5
        assert time_pattern_matches(_record(), NOW) == (False, False)

    def test_same_hour_and_day(self):
        pattern = VisitPattern(hour_of_day=hour_of_day(NOW), day_of_week=day_of_week(NOW))
        assert time_pattern_score(_record(visit_patterns=pattern), NOW) == pytest.approx(1.0)

    def test_hour_within_tolerance_other_day(self):
        pattern = VisitPattern(
            hour_of_day=(hour_of_day(NOW) + 2) % 24,
            day_of_week=(day_of_week(NOW) + 1) % 7,
        )
        assert time_pattern_score(_record(visit_patterns=pattern), NOW) == pytest.approx(0.6)

    def test_hour_outside_tolerance_same_day(self):
        pattern = VisitPattern(hour_of_day=(hour_of_day(NOW) + 6) % 24, day_of_week=day_of_week(NOW))
        assert time_pattern_score(_record(visit_patterns=pattern), NOW) == pytest.approx(0.4)

    def test_wraps_around_midnight(self):
        # Find a reference time at 23:xx local, then a pattern at 01:00
        late = NOW
        while hour_of_day(late) != 23:
            late += 60 * 60 * 1000
        pattern = VisitPattern(hour_of_day=1, day_of_week=(day_of_week(late) + 3) % 7)
        hour_match, day_match = time_pattern_matches(_record(visit_patterns=pattern), late)
        assert hour_match is True
        assert day_match is False
        assert time_pattern_score(_record(visit_patterns=pattern), late) == pytest.approx(0.6)

    def test_no_match_scores_zero(self):
        pattern = VisitPattern(
            hour_of_day=(hour_of_day(NOW) + 12) % 24,
            day_of_week=(day_of_week(NOW) + 3) % 7,
        )
        assert time_pattern_score(_record(visit_patterns=pattern), NOW) == 0.0


# =============================================================================
# Contextual
# =============================================================================


class TestContextualScore:
    def test_empty_context_scores_zero(self):
        assert contextual_score(_record(), PredictionContext()) == 0.0

    def test_same_domain(self):
        context = PredictionContext(current_domain="example.com")
        assert contextual_score(_record(), context) == pytest.approx(0.3)

    def test_domain_derived_from_current_url(self):
        context = PredictionContext(current_url="https://example.com/other")
        assert contextual_score(_record(), context) == pytest.approx(0.3)

    def test_search_query_overlap(self):
        record = _record(url="https://docs.python.org/", context=VisitContext(search_query="asyncio tutorial"))
        context = PredictionContext(search_query="Python asyncio tutorial")
        # 2 shared words out of max(3, 2)
        assert contextual_score(record, context) == pytest.approx(2 / 3 * 0.4)

    def test_recent_url_domain(self):
        context = PredictionContext(recent_urls=["https://example.com/a", "not a url"])
        assert contextual_score(_record(), context) == pytest.approx(0.2)

    def test_many_tabs_on_both_sides(self):
        record = _record(context=VisitContext(tab_count=8))
        assert contextual_score(record, PredictionContext(tab_count=6)) == pytest.approx(0.1)
        assert contextual_score(record, PredictionContext(tab_count=3)) == 0.0

    def test_all_components_clamped(self):
        record = _record(context=VisitContext(search_query="rust book", tab_count=9))
        context = PredictionContext(
            current_domain="example.com",
            search_query="rust book",
            recent_urls=["https://example.com/x"],
            tab_count=12,
        )
        score = contextual_score(record, context)
        assert score == pytest.approx(1.0)
        assert score <= 1.0


# =============================================================================
# Similarity
# =============================================================================


class TestSimilarityScore:
    def test_no_current_url(self):
        assert similarity_score(_record(), PredictionContext()) == 0.0

    def test_different_host(self):
        context = PredictionContext(current_url="https://other.org/docs")
        assert similarity_score(_record(url="https://example.com/docs"), context) == 0.0

    def test_same_host_with_path_overlap(self):
        context = PredictionContext(current_url="https://example.com/docs/api")
        record = _record(url="https://example.com/docs/guide")
        assert similarity_score(record, context) == pytest.approx(0.5 + 0.5 * 0.3)

    def test_topic_tags_on_same_host(self):
        context = PredictionContext(current_url="https://example.com/docs/api")
        record = _record(url="https://example.com/docs/api", topic_tags=["python"])
        assert similarity_score(record, context) == pytest.approx(1.0)

    def test_unparsable_current_url(self):
        context = PredictionContext(current_url="not a url")
        assert similarity_score(_record(), context) == 0.0


# =============================================================================
# Weights and combined breakdown
# =============================================================================


class TestScoringWeights:
    def test_defaults_sum_to_one(self):
        w = ScoringWeights()
        assert w.frequency == 0.25
        assert w.similarity == 0.10
        total = w.frequency + w.recency + w.engagement + w.time_pattern + w.contextual + w.similarity
        assert total == pytest.approx(1.0)

    def test_rejects_weights_not_summing_to_one(self):
        with pytest.raises(ValidationError):
            ScoringWeights(frequency=0.9)

    def test_confidence_is_weighted_sum(self):
        scores = ScoreBreakdown(
            frequency=1.0, recency=0.5, engagement=0.5, time_pattern=0.5, contextual=0.0, similarity=0.0
        )
        expected = 0.25 + 0.5 * 0.20 + 0.5 * 0.15 + 0.5 * 0.15
        assert scores.confidence(ScoringWeights()) == pytest.approx(expected)


class TestScoreBounds:
    def test_every_factor_in_unit_range(self):
        records = [
            _record(visit_count=0, days_ago=400),
            _record(visit_count=50, days_ago=-1, engagement_score=100),
            _record(
                url="https://example.com/a/b/c",
                visit_count=7,
                days_ago=2,
                visit_patterns=VisitPattern(hour_of_day=0, day_of_week=6),
                context=VisitContext(search_query="a b c", tab_count=20),
                topic_tags=["x"],
            ),
            _record(url="mailto:someone", visit_count=3),
        ]
        context = PredictionContext(
            current_url="https://example.com/a/b",
            search_query="a b c d",
            tab_count=10,
            recent_urls=["https://example.com/"],
        )
        max_visits = max(r.visit_count for r in records)
        for record in records:
            scores = score_record(record, context, NOW, max_visits)
            for value in (
                scores.frequency,
                scores.recency,
                scores.engagement,
                scores.time_pattern,
                scores.contextual,
                scores.similarity,
            ):
                assert 0.0 <= value <= 1.0
            confidence = scores.confidence(ScoringWeights())
            assert not math.isnan(confidence)
            assert 0.0 <= confidence <= 1.0 + 1e-9
