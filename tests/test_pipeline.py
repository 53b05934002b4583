# tests/test_pipeline.py
"""End-to-end tests for PreconnectPipeline."""

import pytest

from chuk_ai_preconnect import InMemoryHistoryStore, PreconnectPipeline, PreloadSettings
from chuk_ai_preconnect.history.models import HistoryRecord
from chuk_ai_preconnect.preloading.models import ConnectionStatus
from chuk_ai_preconnect.preloading.network import HttpxProbe

ENABLED = PreloadSettings(preloading_enabled=True, preloading_consent=True)


@pytest.fixture
def store(clock):
    return InMemoryHistoryStore(
        records=[
            HistoryRecord(url="https://mail.example.com/", visited_at=clock(), visit_count=40, engagement_score=90),
            HistoryRecord(url="https://wiki.example.com/", visited_at=clock() - 60_000, visit_count=12),
        ]
    )


class TestPipeline:
    @pytest.mark.asyncio
    async def test_navigation_warms_predictions(self, store, fake_probe, clock):
        pipeline = PreconnectPipeline.create(store, probe=fake_probe, clock=clock)

        connections = await pipeline.on_navigation("https://start.example.com/", [], ENABLED)

        assert {c.url for c in connections} == {"https://mail.example.com/", "https://wiki.example.com/"}
        assert all(c.status == ConnectionStatus.SUCCESS for c in connections)
        assert pipeline.preloader.is_url_preloaded("https://mail.example.com/")

    @pytest.mark.asyncio
    async def test_navigation_respects_settings(self, store, fake_probe, clock):
        pipeline = PreconnectPipeline.create(store, probe=fake_probe, clock=clock)
        assert await pipeline.on_navigation("https://start.example.com/", [], PreloadSettings()) == []
        assert fake_probe.calls == []

    @pytest.mark.asyncio
    async def test_warm_up(self, store, fake_probe, clock):
        pipeline = PreconnectPipeline.create(store, probe=fake_probe, clock=clock)
        assert await pipeline.warm_up() == 0

        await store.recompute_behavior_patterns()
        # top sites + time based + one per top domain
        assert await pipeline.warm_up() == 4

    @pytest.mark.asyncio
    async def test_default_probe_is_httpx(self, store):
        pipeline = PreconnectPipeline.create(store)
        assert isinstance(pipeline.preloader.probe, HttpxProbe)
        await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_aclose_without_close_method(self, store, fake_probe, clock):
        pipeline = PreconnectPipeline.create(store, probe=fake_probe, clock=clock)
        await pipeline.aclose()
