# chuk_ai_preconnect/history/models.py
"""Visit history records and the behaviour summary derived from them."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from chuk_ai_preconnect.urls import hostname

# =============================================================================
# History Records
# =============================================================================


class VisitPattern(BaseModel):
    """When a page tends to be visited."""

    hour_of_day: int = Field(..., ge=0, le=23, description="Local hour of the visit")
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")


class VisitContext(BaseModel):
    """Browsing context captured at visit time."""

    search_query: str | None = Field(default=None, description="Query that led to the visit")
    tab_count: int | None = Field(default=None, ge=0, description="Open tabs at visit time")


class HistoryRecord(BaseModel):
    """
    One entry of the visit history.

    Owned by the history store; the prediction engine only reads it.
    """

    url: str
    title: str | None = None
    domain: str | None = Field(default=None, description="Hostname; derived from url when omitted")
    visited_at: float = Field(..., description="Last visit, epoch milliseconds")
    visit_count: int = Field(default=1, ge=0)

    engagement_score: float | None = Field(default=None, ge=0, le=100)
    visit_patterns: VisitPattern | None = None
    time_spent: float | None = Field(default=None, ge=0, description="Milliseconds on page")
    context: VisitContext | None = None
    topic_tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _fill_domain(self) -> HistoryRecord:
        if self.domain is None:
            self.domain = hostname(self.url)
        return self

    @property
    def search_query(self) -> str | None:
        return self.context.search_query if self.context else None

    @property
    def tab_count(self) -> int | None:
        return self.context.tab_count if self.context else None


class TimeRange(BaseModel):
    """Inclusive range of epoch-ms timestamps."""

    start: float
    end: float

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end


# =============================================================================
# Behaviour Summary
# =============================================================================


class DomainVisits(BaseModel):
    domain: str
    visits: int = 0
    time_spent: float = 0.0


class SearchPattern(BaseModel):
    query: str
    frequency: int = 0
    last_used: float = 0.0


class BehaviorPatternSummary(BaseModel):
    """Aggregate browsing habits, recomputed on demand by the history store."""

    most_active_hours: list[int] = Field(default_factory=list)
    most_active_days: list[int] = Field(default_factory=list)
    top_domains: list[DomainVisits] = Field(default_factory=list)
    search_patterns: list[SearchPattern] = Field(default_factory=list)
