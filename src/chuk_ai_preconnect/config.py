# chuk_ai_preconnect/config.py
"""
Central tunables for prediction and preloading.

Every value can be overridden with a ``CHUK_PRECONNECT_*`` environment
variable (a ``.env`` file in the working directory is honoured).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


MS_PER_DAY = 24 * 60 * 60 * 1000

# Prediction cache
PREDICTION_CACHE_TTL_MS = _env_int("CHUK_PRECONNECT_PREDICTION_CACHE_TTL_MS", 5 * 60 * 1000)
PREDICTION_CACHE_MAX_ENTRIES = _env_int("CHUK_PRECONNECT_PREDICTION_CACHE_MAX_ENTRIES", 50)

# History retrieval
HISTORY_FETCH_LIMIT = _env_int("CHUK_PRECONNECT_HISTORY_FETCH_LIMIT", 1000)
DEFAULT_TIME_WINDOW_MS = _env_int("CHUK_PRECONNECT_DEFAULT_TIME_WINDOW_MS", 30 * MS_PER_DAY)

# Feedback log
FEEDBACK_LOG_MAX_ENTRIES = _env_int("CHUK_PRECONNECT_FEEDBACK_LOG_MAX_ENTRIES", 1000)

# Connection preloading
MAX_CONCURRENT_PRELOADS = _env_int("CHUK_PRECONNECT_MAX_CONCURRENT_PRELOADS", 3)
PRELOAD_TIMEOUT_SECONDS = _env_float("CHUK_PRECONNECT_PRELOAD_TIMEOUT_SECONDS", 5.0)
RESOLUTION_TIMEOUT_SECONDS = _env_float("CHUK_PRECONNECT_RESOLUTION_TIMEOUT_SECONDS", 2.0)
CONNECTION_CACHE_TTL_MS = _env_int("CHUK_PRECONNECT_CONNECTION_CACHE_TTL_MS", 5 * 60 * 1000)
CONNECTION_CACHE_MAX_ENTRIES = _env_int("CHUK_PRECONNECT_CONNECTION_CACHE_MAX_ENTRIES", 20)
RESOLUTION_CACHE_TTL_MS = _env_int("CHUK_PRECONNECT_RESOLUTION_CACHE_TTL_MS", 10 * 60 * 1000)
DEFAULT_PRELOAD_MIN_CONFIDENCE = _env_float("CHUK_PRECONNECT_DEFAULT_MIN_CONFIDENCE", 0.3)
