"""Per-user fixed window admission control for voice turns."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger("voice")

DEFAULT_MAX_REQUESTS = 10
DEFAULT_WINDOW_SECONDS = 60.0


@dataclass
class RateLimitWindow:
    """Request count for one user and the time its window closes."""

    count: int
    reset_time: float


class RateLimiter:
    """Counts voice turns per user inside a fixed window.

    The window opens with the first counted request and lasts
    ``window_seconds``. Once ``max_requests`` requests have been counted,
    further checks are denied until the window closes; denied checks do not
    extend the window or change the count.

    Usage:
        limiter = RateLimiter(max_requests=10, window_seconds=60)
        if not limiter.check(user_id):
            ...  # short-circuit the turn
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()

    def check(self, user_id: str) -> bool:
        """Count a request for ``user_id`` and report whether it is admitted."""
        now = self._clock()

        with self._lock:
            window = self._windows.get(user_id)

            if window is None or now > window.reset_time:
                self._windows[user_id] = RateLimitWindow(
                    count=1,
                    reset_time=now + self.window_seconds,
                )
                return True

            if window.count >= self.max_requests:
                denied_for = window.reset_time - now
            else:
                window.count += 1
                return True

        logger.info(
            "Voice rate limit exceeded",
            extra={
                "service": "voice",
                "user_id": user_id,
                "metadata": {
                    "limit": self.max_requests,
                    "retry_after_seconds": round(max(0.0, denied_for), 3),
                },
            },
        )
        return False

    def get_window(self, user_id: str) -> RateLimitWindow | None:
        with self._lock:
            window = self._windows.get(user_id)
            return RateLimitWindow(window.count, window.reset_time) if window else None

    def reset(self, user_id: str) -> None:
        with self._lock:
            self._windows.pop(user_id, None)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()
