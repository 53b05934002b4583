# chuk_ai_preconnect/prediction/feedback.py
"""Bounded log of user feedback on predictions (kept for offline weight tuning)."""

from __future__ import annotations

from collections import deque

from pydantic import BaseModel, Field, PrivateAttr

from chuk_ai_preconnect.config import FEEDBACK_LOG_MAX_ENTRIES

from .models import PredictionFeedback


class FeedbackLog(BaseModel):
    """Keeps the most recent feedback events; older ones fall off the front."""

    max_entries: int = Field(default=FEEDBACK_LOG_MAX_ENTRIES, gt=0)

    _events: deque[PredictionFeedback] = PrivateAttr(default=None)

    def model_post_init(self, __context: object) -> None:
        self._events = deque(maxlen=self.max_entries)

    def record(self, event: PredictionFeedback) -> None:
        self._events.append(event)

    def events(self) -> list[PredictionFeedback]:
        return list(self._events)

    def for_url(self, url: str) -> list[PredictionFeedback]:
        return [event for event in self._events if event.url == url]

    def usefulness(self, url: str) -> float | None:
        """Share of feedback for ``url`` that was positive, or None without feedback."""
        events = self.for_url(url)
        if not events:
            return None
        return sum(1 for event in events if event.was_useful) / len(events)

    def export(self) -> list[dict]:
        return [event.model_dump(mode="json") for event in self._events]

    def __len__(self) -> int:
        return len(self._events)
