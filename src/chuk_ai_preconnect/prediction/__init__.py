# chuk_ai_preconnect/prediction/__init__.py
"""
Navigation prediction.

Converts visit history into ranked predictions:
- Scoring: six independent factors in [0, 1]
- Ranking: weighted confidence, single-label category, filtering
- Caching: TTL- and size-bounded reuse per normalized context
"""

from .cache import PredictionCache
from .engine import PredictionEngine, PredictionEngineConfig
from .feedback import FeedbackLog
from .models import (
    CATEGORY_REASONS,
    NavigationPrediction,
    PredictionCacheEntry,
    PredictionCacheStats,
    PredictionCategory,
    PredictionContext,
    PredictionFeedback,
    PredictionMetadata,
    PredictionOptions,
    PredictionStats,
    UserIntent,
)
from .ranker import CategoryThresholds, PredictionRanker
from .scoring import ScoreBreakdown, ScoringWeights, score_record

__all__ = [
    "CATEGORY_REASONS",
    "CategoryThresholds",
    "FeedbackLog",
    "NavigationPrediction",
    "PredictionCache",
    "PredictionCacheEntry",
    "PredictionCacheStats",
    "PredictionCategory",
    "PredictionContext",
    "PredictionEngine",
    "PredictionEngineConfig",
    "PredictionFeedback",
    "PredictionMetadata",
    "PredictionOptions",
    "PredictionRanker",
    "PredictionStats",
    "ScoreBreakdown",
    "ScoringWeights",
    "UserIntent",
    "score_record",
]
