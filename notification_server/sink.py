# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import time
import typing as t
from collections import deque

logger = logging.getLogger(__name__)

# Seconds a notification stays on display
DISPLAY_SECONDS = 3.0

# Recent notifications kept for display surfaces that poll the sink
SENT_HISTORY = 50


class NotificationSink:
    """Receives notifications and tracks the one currently on display.

    The displayed message clears itself ``display_seconds`` after it was
    shown; a newer notification replaces it and restarts the window.
    """

    def __init__(
        self,
        display_seconds: float = DISPLAY_SECONDS,
        clock: t.Callable[[], float] = time.monotonic,
        history: int = SENT_HISTORY,
    ) -> None:
        self.display_seconds = display_seconds
        self._clock = clock
        self._current: t.Optional[str] = None
        self._shown_at = 0.0
        self.sent: t.Deque[str] = deque(maxlen=history)
        self.total_sent = 0

    def notify(self, message: str) -> None:
        """Shows ``message``. Fire-and-forget."""
        logger.info("Notification: %s", message)
        self.sent.append(message)
        self.total_sent += 1
        self._current = message
        self._shown_at = self._clock()

    def sent_since(self, seen: int) -> list[str]:
        """Messages sent after the first ``seen``, limited to the retained history."""
        missed = self.total_sent - seen
        if missed <= 0:
            return []
        return list(self.sent)[-missed:]

    @property
    def current_message(self) -> t.Optional[str]:
        """The message on display, or None once its window has elapsed."""
        if self._current is not None and self._clock() - self._shown_at >= self.display_seconds:
            self._current = None
        return self._current
