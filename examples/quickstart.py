#!/usr/bin/env python3
# examples/quickstart.py
"""
Quickstart: predict the next page and warm connections to it

Builds a small in-memory history, asks for predictions for the page the
user is on, and preloads the best ones over the real network.

Run with: python quickstart.py
"""

import asyncio
import logging
import time

from dotenv import load_dotenv

from chuk_ai_preconnect import HistoryRecord, InMemoryHistoryStore, PreconnectPipeline, PreloadSettings
from chuk_ai_preconnect.history.models import VisitContext, VisitPattern

# Load environment variables (CHUK_PRECONNECT_* overrides)
load_dotenv()

logging.basicConfig(level=logging.INFO)

DAY_MS = 24 * 60 * 60 * 1000


def build_history() -> InMemoryHistoryStore:
    now = time.time() * 1000
    local = time.localtime()
    pattern = VisitPattern(hour_of_day=local.tm_hour, day_of_week=(local.tm_wday + 1) % 7)

    store = InMemoryHistoryStore()
    store.add(HistoryRecord(url="https://www.python.org/", visited_at=now - 2 * DAY_MS, visit_count=25))
    store.add(
        HistoryRecord(
            url="https://docs.python.org/3/library/asyncio.html",
            visited_at=now - DAY_MS,
            visit_count=12,
            engagement_score=85,
            visit_patterns=pattern,
        )
    )
    store.add(
        HistoryRecord(
            url="https://pypi.org/project/httpx/",
            visited_at=now - 3 * DAY_MS,
            visit_count=4,
            context=VisitContext(search_query="async http client"),
        )
    )
    store.add(HistoryRecord(url="https://news.ycombinator.com/", visited_at=now - 6 * 60 * 60 * 1000, visit_count=30))
    return store


async def quickstart_demo():
    print("🔮 Preconnect Quickstart")
    print("=" * 40)

    store = build_history()
    pipeline = PreconnectPipeline.create(store)

    try:
        # Step 1: predictions for the current page
        current_url = "https://docs.python.org/3/library/index.html"
        predictions = await pipeline.engine.get_contextual_predictions(current_url)
        print(f"\n📊 Predictions for {current_url}:")
        for prediction in predictions:
            print(f"   {prediction.confidence:.2f}  {prediction.url}  ({prediction.reason})")

        # Step 2: preload (requires explicit opt-in)
        settings = PreloadSettings(preloading_enabled=True, preloading_consent=True)
        connections = await pipeline.on_navigation(current_url, [], settings)
        print(f"\n🔌 Preloaded {len(connections)} connections:")
        for connection in connections:
            elapsed = f"{connection.connection_time:.0f}ms" if connection.connection_time is not None else "-"
            print(f"   {connection.status.value:<8} {elapsed:>7}  {connection.url}")

        # Step 3: stats
        stats = pipeline.preloader.get_preloading_stats()
        print(f"\n📈 {stats.successful_preloads}/{stats.total_preloads} successful, "
              f"avg {stats.average_preload_time:.0f}ms")

        for recommendation in pipeline.preloader.get_preloading_recommendations():
            print(f"💡 {recommendation.recommendation}: {recommendation.reason}")
    finally:
        await pipeline.aclose()


if __name__ == "__main__":
    asyncio.run(quickstart_demo())
