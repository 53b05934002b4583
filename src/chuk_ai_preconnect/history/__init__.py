# chuk_ai_preconnect/history/__init__.py
"""Visit history records and store contract."""

from .models import (
    BehaviorPatternSummary,
    DomainVisits,
    HistoryRecord,
    SearchPattern,
    TimeRange,
    VisitContext,
    VisitPattern,
)
from .store import HistoryStore, InMemoryHistoryStore

__all__ = [
    "BehaviorPatternSummary",
    "DomainVisits",
    "HistoryRecord",
    "HistoryStore",
    "InMemoryHistoryStore",
    "SearchPattern",
    "TimeRange",
    "VisitContext",
    "VisitPattern",
]
