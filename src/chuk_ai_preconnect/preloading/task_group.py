# chuk_ai_preconnect/preloading/task_group.py
"""
Join-all task group.

Spawns keyed coroutines and waits for every one of them. Each task's
result or exception is collected on its own: a failing task never
cancels its siblings.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from pydantic import BaseModel


class TaskOutcome(BaseModel):
    """Result of one task in an OutcomeGroup."""

    model_config = {"arbitrary_types_allowed": True}

    key: str
    ok: bool
    value: Any = None
    error: str | None = None


class OutcomeGroup:
    """Spawn N tasks, then join them all and report each outcome."""

    def __init__(self) -> None:
        self._keys: list[str] = []
        self._tasks: list[asyncio.Task] = []

    def spawn(self, key: str, coro: Coroutine[Any, Any, Any]) -> None:
        self._keys.append(key)
        self._tasks.append(asyncio.ensure_future(coro))

    def __len__(self) -> int:
        return len(self._tasks)

    async def join(self) -> list[TaskOutcome]:
        """Wait for every task; outcomes are returned in spawn order."""
        if not self._tasks:
            return []

        results = await asyncio.gather(*self._tasks, return_exceptions=True)

        outcomes: list[TaskOutcome] = []
        for key, result in zip(self._keys, results, strict=True):
            if isinstance(result, BaseException):
                outcomes.append(TaskOutcome(key=key, ok=False, error=f"{type(result).__name__}: {result}"))
            else:
                outcomes.append(TaskOutcome(key=key, ok=True, value=result))
        return outcomes
