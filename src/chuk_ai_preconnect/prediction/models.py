# chuk_ai_preconnect/prediction/models.py
"""
Models for navigation prediction.

Design principles:
- Pydantic-native: All models are BaseModel subclasses
- No magic strings: Enums for categories and intents
- Predictions are immutable once built
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from chuk_ai_preconnect.config import DEFAULT_TIME_WINDOW_MS
from chuk_ai_preconnect.urls import hostname

# =============================================================================
# Enums
# =============================================================================


class PredictionCategory(str, Enum):
    """Single label explaining why a URL was predicted."""

    FREQUENT = "frequent"
    RECENT = "recent"
    CONTEXTUAL = "contextual"
    TIME_BASED = "time-based"
    SEARCH_RELATED = "search-related"
    SIMILAR_CONTENT = "similar-content"


class UserIntent(str, Enum):
    BROWSING = "browsing"
    SEARCHING = "searching"
    WORKING = "working"
    ENTERTAINMENT = "entertainment"


# Human-readable reason per category
CATEGORY_REASONS: dict[PredictionCategory, str] = {
    PredictionCategory.FREQUENT: "Frequently visited",
    PredictionCategory.RECENT: "Recently visited",
    PredictionCategory.CONTEXTUAL: "Related to current context",
    PredictionCategory.TIME_BASED: "Usually visited at this time",
    PredictionCategory.SEARCH_RELATED: "Related to your search",
    PredictionCategory.SIMILAR_CONTENT: "Similar to current page",
}

# =============================================================================
# Request Models
# =============================================================================


class PredictionContext(BaseModel):
    """Where the user is right now. Immutable for the duration of a call."""

    model_config = {"frozen": True}

    current_url: str | None = None
    current_domain: str | None = None
    current_time: float | None = Field(default=None, description="Reference time, epoch ms (default: now)")
    search_query: str | None = None
    tab_count: int | None = Field(default=None, ge=0)
    recent_urls: list[str] = Field(default_factory=list)
    user_intent: UserIntent | None = None

    @property
    def domain(self) -> str | None:
        """Explicit current domain, falling back to the current URL's hostname."""
        return self.current_domain or hostname(self.current_url)


class PredictionOptions(BaseModel):
    """Result shaping for a prediction call."""

    max_predictions: int = Field(default=10, ge=0)
    min_confidence: float = Field(default=0.1, ge=0.0, le=1.0)
    categories: list[PredictionCategory] | None = Field(
        default=None, description="Allow-list of categories; None allows all"
    )
    time_window_ms: float = Field(default=DEFAULT_TIME_WINDOW_MS, gt=0)
    include_metadata: bool = True


# =============================================================================
# Result Models
# =============================================================================


class PredictionMetadata(BaseModel):
    """Evidence behind a prediction."""

    model_config = {"frozen": True}

    visit_count: int
    last_visited: float
    average_time_spent: float | None = None
    engagement_score: float | None = None
    time_of_day_match: bool = False
    day_of_week_match: bool = False
    contextual_relevance: float = 0.0


class NavigationPrediction(BaseModel):
    """A ranked guess at the next URL the user will open."""

    model_config = {"frozen": True}

    url: str
    title: str | None = None
    domain: str
    confidence: float
    reason: str
    category: PredictionCategory
    metadata: PredictionMetadata | None = None

    @field_validator("confidence")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("confidence must be finite")
        return value


class PredictionCacheEntry(BaseModel):
    """A cached prediction list."""

    predictions: list[NavigationPrediction]
    created_at: float = Field(..., description="Epoch ms when the list was computed")
    key: str


class PredictionFeedback(BaseModel):
    """User-reported usefulness of a prediction."""

    url: str
    was_useful: bool
    context: str = Field(default="unknown", description="Domain the prediction was made from")
    timestamp: float


# =============================================================================
# Stats Models
# =============================================================================


class PredictionCacheStats(BaseModel):
    """Statistics for the prediction cache."""

    size: int = Field(default=0, description="Current number of entries")
    max_size: int = Field(default=50, description="Maximum entries")
    hits: int = Field(default=0)
    misses: int = Field(default=0)
    expirations: int = Field(default=0, description="Entries dropped for age")
    evictions: int = Field(default=0, description="Entries dropped for capacity")

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class PredictionStats(BaseModel):
    """Summary of what is currently cached."""

    cache_size: int = 0
    total_predictions: int = 0
    average_confidence: float = 0.0
    category_distribution: dict[PredictionCategory, int] = Field(default_factory=dict)
