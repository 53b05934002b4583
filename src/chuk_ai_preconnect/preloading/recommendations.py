# chuk_ai_preconnect/preloading/recommendations.py
"""Settings advice derived from preload statistics. Read-only."""

from __future__ import annotations

import logging

from .models import PreloadingRecommendation, PreloadingStats
from .network import NetworkQualitySensor

logger = logging.getLogger(__name__)

MIN_ATTEMPTS_FOR_HIT_RATE = 10
LOW_HIT_RATE = 0.2
RAISED_MIN_CONFIDENCE = 0.5


def _sensor_flag(sensor: NetworkQualitySensor, name: str) -> bool:
    """Read one boolean sensor flag; a failing sensor reads as False."""
    try:
        return bool(getattr(sensor, name)())
    except Exception:
        logger.debug("Network sensor %s failed, assuming False", name, exc_info=True)
        return False


def get_preloading_recommendations(
    stats: PreloadingStats,
    sensor: NetworkQualitySensor,
) -> list[PreloadingRecommendation]:
    """Propose settings changes; never mutates ``stats``."""
    recommendations: list[PreloadingRecommendation] = []

    if _sensor_flag(sensor, "is_metered"):
        recommendations.append(
            PreloadingRecommendation(
                recommendation="Disable preloading on metered connections",
                reason="You appear to be on a limited data connection",
                settings={"preloading_enabled": False},
            )
        )

    if _sensor_flag(sensor, "is_mobile"):
        recommendations.append(
            PreloadingRecommendation(
                recommendation="Enable WiFi-only preloading",
                reason="Mobile devices benefit from WiFi-only preloading to save data",
                settings={"preloading_only_on_wifi": True},
            )
        )

    if stats.total_preloads > MIN_ATTEMPTS_FOR_HIT_RATE and stats.cache_hit_rate < LOW_HIT_RATE:
        recommendations.append(
            PreloadingRecommendation(
                recommendation="Increase minimum confidence threshold",
                reason="Low cache hit rate suggests predictions are not accurate enough",
                settings={"preloading_min_confidence": RAISED_MIN_CONFIDENCE},
            )
        )

    return recommendations
