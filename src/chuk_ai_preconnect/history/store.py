# chuk_ai_preconnect/history/store.py
"""
History store contract and an in-memory implementation.

The prediction engine never writes history; it only asks for a bounded
slice of it and, for cache warm-up, for the behaviour summary.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field, PrivateAttr

from .models import (
    BehaviorPatternSummary,
    DomainVisits,
    HistoryRecord,
    SearchPattern,
    TimeRange,
)

logger = logging.getLogger(__name__)

TOP_HOURS = 6
TOP_DAYS = 4
TOP_DOMAINS = 10


@runtime_checkable
class HistoryStore(Protocol):
    """Protocol for visit history backends."""

    async def get_history(
        self,
        time_range: TimeRange,
        limit: int,
    ) -> list[HistoryRecord]:
        """Records visited inside ``time_range``, most recent first."""
        ...

    async def get_behavior_pattern_summary(self) -> BehaviorPatternSummary | None:
        """Last computed summary, or None if never computed."""
        ...

    async def recompute_behavior_patterns(self) -> BehaviorPatternSummary:
        """Rebuild the summary from the current history."""
        ...


class InMemoryHistoryStore(BaseModel):
    """
    Simple in-memory history store for testing/development.

    Not persistent - records are lost when process exits.
    """

    records: list[HistoryRecord] = Field(default_factory=list)

    _summary: BehaviorPatternSummary | None = PrivateAttr(default=None)

    def add(self, record: HistoryRecord) -> None:
        self.records.append(record)

    async def get_history(
        self,
        time_range: TimeRange,
        limit: int,
    ) -> list[HistoryRecord]:
        matching = [r for r in self.records if time_range.contains(r.visited_at)]
        matching.sort(key=lambda r: r.visited_at, reverse=True)
        return matching[:limit]

    async def get_behavior_pattern_summary(self) -> BehaviorPatternSummary | None:
        return self._summary

    async def recompute_behavior_patterns(self) -> BehaviorPatternSummary:
        hour_counts: Counter[int] = Counter()
        day_counts: Counter[int] = Counter()
        domains: dict[str, DomainVisits] = {}
        searches: dict[str, SearchPattern] = {}

        for record in self.records:
            if record.visit_patterns is not None:
                hour_counts[record.visit_patterns.hour_of_day] += 1
                day_counts[record.visit_patterns.day_of_week] += 1

            if record.domain:
                stats = domains.setdefault(record.domain, DomainVisits(domain=record.domain))
                stats.visits += record.visit_count
                stats.time_spent += record.time_spent or 0

            query = record.search_query
            if query:
                pattern = searches.setdefault(query, SearchPattern(query=query))
                pattern.frequency += 1
                pattern.last_used = max(pattern.last_used, record.visited_at)

        top_domains = sorted(domains.values(), key=lambda d: d.visits, reverse=True)

        self._summary = BehaviorPatternSummary(
            most_active_hours=[hour for hour, _ in hour_counts.most_common(TOP_HOURS)],
            most_active_days=[day for day, _ in day_counts.most_common(TOP_DAYS)],
            top_domains=top_domains[:TOP_DOMAINS],
            search_patterns=sorted(searches.values(), key=lambda s: s.frequency, reverse=True),
        )
        logger.debug(
            "Behavior patterns recomputed from %d records (%d domains)",
            len(self.records),
            len(domains),
        )
        return self._summary
