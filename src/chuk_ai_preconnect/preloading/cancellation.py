# chuk_ai_preconnect/preloading/cancellation.py
"""
Deadline-bound cancellation for network probes.

Every probe gets a token. The token fires either when its deadline
passes or when someone calls ``cancel()``; whatever the token is guarding
is then cancelled and ``ProbeTimeoutError`` is raised in its place.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable
from typing import TypeVar

from chuk_ai_preconnect.exceptions import ProbeTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Deadline plus a cooperative cancellation signal."""

    def __init__(self, timeout: float, label: str = ""):
        self.timeout = timeout
        self.label = label
        self.deadline = time.monotonic() + timeout
        self.reason: str | None = None
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.remaining() <= 0

    def remaining(self) -> float:
        """Seconds left before the deadline (never negative)."""
        return max(0.0, self.deadline - time.monotonic())

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` until it finishes or the token fires.

        Raises ProbeTimeoutError if the token fires first.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise ProbeTimeoutError(self.label, self.reason or "deadline exceeded")

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        self.cancel("deadline exceeded")
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            try:
                await task
            except Exception:
                logger.debug("Probe for %s failed while being cancelled", self.label, exc_info=True)
        raise ProbeTimeoutError(self.label, self.reason or "deadline exceeded")
