# tests/conftest.py
"""
Shared pytest fixtures and configuration for chuk_ai_preconnect tests.
"""

import asyncio
import logging

import pytest

from chuk_ai_preconnect.exceptions import ProbeError
from chuk_ai_preconnect.preloading.models import ProbeResult

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logging.getLogger("chuk_ai_preconnect").setLevel(logging.DEBUG)

# Fixed reference time: 2026-10-19 12:00:00 UTC, in epoch ms
BASE_TIME_MS = 1_792_411_200_000.0


class ManualClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, start: float = BASE_TIME_MS):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeProbe:
    """
    In-process network probe.

    - ``fail``: targets that raise ProbeError
    - ``hang``: targets that never answer (until cancelled)
    - ``delay``: seconds every probe takes
    Tracks the peak number of concurrent warm-up (non-resolution) probes.
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.fail: set[str] = set()
        self.hang: set[str] = set()
        self.calls: list[str] = []
        self.cancelled: list[str] = []
        self.active = 0
        self.max_active = 0

    @staticmethod
    def is_resolution(target: str) -> bool:
        return target.endswith("/favicon.ico")

    def warmup_calls(self) -> list[str]:
        return [c for c in self.calls if not self.is_resolution(c)]

    def resolution_calls(self) -> list[str]:
        return [c for c in self.calls if self.is_resolution(c)]

    async def probe(self, target, *, method, token):
        self.calls.append(target)
        resolution = self.is_resolution(target)
        if not resolution:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if target in self.hang:
                await asyncio.sleep(3600)
            if self.delay:
                await asyncio.sleep(self.delay)
            if target in self.fail:
                raise ProbeError(target, "connection refused")
            return ProbeResult(target=target, status_code=200, elapsed_ms=self.delay * 1000)
        except asyncio.CancelledError:
            self.cancelled.append(target)
            raise
        finally:
            if not resolution:
                self.active -= 1


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def fake_probe():
    return FakeProbe()
