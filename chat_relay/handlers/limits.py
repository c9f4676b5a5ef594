"""Per-connection sliding-window rate limiting for chat messages and stop requests."""

from __future__ import annotations

import time
import collections
from collections.abc import Callable

from chat_relay.errors import RateLimitError

TimeFn = Callable[[], float]


class SlidingWindowRateLimiter:
    """Admit at most `limit` events per rolling `window_seconds`.

    A limit or window of zero disables the limiter.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._stamps: collections.deque[float] = collections.deque()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def _evict(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._stamps and self._stamps[0] <= cutoff:
            self._stamps.popleft()

    def consume(self) -> None:
        """Record one event or raise `RateLimitError` with the time until a slot frees."""
        if not self.enabled:
            return
        now = self._now()
        self._evict(now)
        if len(self._stamps) >= self.limit:
            raise RateLimitError(
                retry_in=max(0.0, self._stamps[0] + self.window_seconds - now),
                limit=self.limit,
                window_seconds=self.window_seconds,
            )
        self._stamps.append(now)


__all__ = ["RateLimitError", "SlidingWindowRateLimiter"]
