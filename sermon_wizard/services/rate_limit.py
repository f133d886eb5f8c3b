"""Per-client fixed-window rate limit for wizard requests."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """Allow at most ``limit`` hits per ``window_seconds`` for each caller key.

    Disabled when limit is 0 or negative. Counters are independent of
    conversation state. Only the current window's counters are kept: all of
    them are dropped when the window moves forward, so the map never holds
    more keys than were seen in one window.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._current_window: int | None = None
        self._counts: dict[str, int] = {}

    @property
    def enabled(self) -> bool:
        return self.limit > 0

    def __len__(self) -> int:
        return len(self._counts)

    def hit(self, key: str) -> bool:
        """Record one request for key. Return True if within limit, False if exceeded."""
        if not self.enabled:
            return True

        window = int(self._clock() // self.window_seconds)
        if window != self._current_window:
            self._current_window = window
            self._counts = {}

        count = self._counts.get(key, 0)
        if count >= self.limit:
            logger.warning(
                "Rate limit exceeded: client=%s count=%d limit=%d",
                key,
                count,
                self.limit,
            )
            return False
        self._counts[key] = count + 1
        return True
