# chuk_ai_preconnect/clock.py
"""Wall-clock helpers. All timestamps in this package are epoch milliseconds."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime

Clock = Callable[[], float]


def now_ms() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * 1000


def local_datetime(timestamp_ms: float) -> datetime:
    """Local datetime for an epoch-ms timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000)


def hour_of_day(timestamp_ms: float) -> int:
    return local_datetime(timestamp_ms).hour


def day_of_week(timestamp_ms: float) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return local_datetime(timestamp_ms).isoweekday() % 7
