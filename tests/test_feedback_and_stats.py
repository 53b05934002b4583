# tests/test_feedback_and_stats.py
"""Tests for FeedbackLog and the running statistics models."""

import pytest
from pydantic import ValidationError

from chuk_ai_preconnect.prediction.feedback import FeedbackLog
from chuk_ai_preconnect.prediction.models import PredictionCacheStats, PredictionFeedback
from chuk_ai_preconnect.preloading.models import PreloadingStats, PreloadSettings


def _event(url: str, useful: bool, ts: float = 0.0) -> PredictionFeedback:
    return PredictionFeedback(url=url, was_useful=useful, timestamp=ts)


class TestFeedbackLog:
    def test_record_and_query(self):
        log = FeedbackLog()
        log.record(_event("https://a.com", True))
        log.record(_event("https://a.com", False))
        log.record(_event("https://b.com", True))

        assert len(log) == 3
        assert len(log.for_url("https://a.com")) == 2
        assert log.usefulness("https://a.com") == 0.5
        assert log.usefulness("https://b.com") == 1.0
        assert log.usefulness("https://c.com") is None

    def test_bounded(self):
        log = FeedbackLog(max_entries=3)
        for i in range(5):
            log.record(_event(f"https://s{i}.com", True, ts=i))

        assert len(log) == 3
        assert [e.url for e in log.events()] == ["https://s2.com", "https://s3.com", "https://s4.com"]

    def test_export(self):
        log = FeedbackLog()
        log.record(_event("https://a.com", True, ts=5))
        assert log.export() == [{"url": "https://a.com", "was_useful": True, "context": "unknown", "timestamp": 5.0}]


class TestPreloadingStats:
    def test_incremental_average(self):
        stats = PreloadingStats()
        stats.record_success(100)
        stats.record_success(200)
        assert stats.successful_preloads == 2
        assert stats.average_preload_time == pytest.approx(150)

    def test_failures_do_not_move_average(self):
        stats = PreloadingStats()
        stats.record_success(100)
        stats.record_failure()
        stats.record_failure(timed_out=True)
        assert stats.average_preload_time == pytest.approx(100)
        assert stats.failed_preloads == 2
        assert stats.timed_out_preloads == 1

    def test_hit_rate(self):
        stats = PreloadingStats()
        for hit in (True, False, False, True):
            stats.record_lookup(hit)
        assert stats.cache_hit_rate == pytest.approx(0.5)
        assert stats.cache_hits == 2


class TestPredictionCacheStats:
    def test_hit_rate(self):
        assert PredictionCacheStats().hit_rate == 0.0
        assert PredictionCacheStats(hits=3, misses=1).hit_rate == 0.75


class TestPreloadSettings:
    def test_privacy_defaults(self):
        settings = PreloadSettings()
        assert settings.preloading_enabled is False
        assert settings.preloading_consent is False
        assert settings.preloading_only_on_wifi is True
        assert settings.preloading_min_confidence == 0.3
        assert settings.preloading_max_connections == 3

    def test_max_connections_must_be_positive(self):
        with pytest.raises(ValidationError):
            PreloadSettings(preloading_max_connections=0)
