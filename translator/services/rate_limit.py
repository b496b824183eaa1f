"""In-memory fixed-window rate limiter.

Used for per-user and per-IP throttling on POST /api/translate. The store is
per process, so limits are best-effort when several workers run side by side.
"""

import threading
import time
from typing import NamedTuple

# Tracked keys at which expired windows are swept
DEFAULT_HIGH_WATER_MARK = 5_000


def now_ms() -> int:
    return int(time.time() * 1000)


class RateLimitResult(NamedTuple):
    allowed: bool
    remaining: int
    reset_at: int  # epoch ms


class _Window:
    __slots__ = ('count', 'reset_at')

    def __init__(self, count, reset_at):
        self.count = count
        self.reset_at = reset_at


class FixedWindowRateLimiter:
    """Fixed-window counter keyed by an opaque identity string."""

    def __init__(self, high_water_mark: int = DEFAULT_HIGH_WATER_MARK, clock=now_ms):
        self._high_water_mark = high_water_mark
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._windows)

    def _maybe_prune(self, now: int):
        if len(self._windows) < self._high_water_mark:
            return
        expired = [key for key, w in self._windows.items() if w.reset_at <= now]
        for key in expired:
            del self._windows[key]

    def check(self, key: str, window_ms: int, max_requests: int) -> RateLimitResult:
        """Count one request for key and report whether it is allowed.

        Rejected requests do not consume budget.
        """
        with self._lock:
            now = self._clock()
            self._maybe_prune(now)
            window = self._windows.get(key)

            if window is None or window.reset_at <= now:
                reset_at = now + window_ms
                self._windows[key] = _Window(1, reset_at)
                return RateLimitResult(True, max(0, max_requests - 1), reset_at)

            if window.count >= max_requests:
                return RateLimitResult(False, 0, window.reset_at)

            window.count += 1
            return RateLimitResult(True, max(0, max_requests - window.count), window.reset_at)
