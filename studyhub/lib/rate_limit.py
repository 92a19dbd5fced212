"""
Fixed-window request budgets for AI invocations.

Each key owns a window that starts with its first request. A request that
arrives once the window length has elapsed first resets the window to start
now, and only then is checked against the (now empty) budget.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Hashable

# Key used by the limiter that tracks all users together
GLOBAL_KEY = "__global__"


@dataclass
class RateLimitWindow:
    count: int
    started_at: float


class RateLimiter:
    def __init__(
        self,
        budget: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if budget < 0:
            raise ValueError("budget must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.budget = budget
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[Hashable, RateLimitWindow] = {}

    def try_consume(self, key: Hashable = GLOBAL_KEY) -> bool:
        now = self._clock()
        window = self._windows.get(key)
        if window is None:
            window = self._windows[key] = RateLimitWindow(count=0, started_at=now)
        elif now - window.started_at >= self.window_seconds:
            window.count = 0
            window.started_at = now

        if window.count >= self.budget:
            return False
        window.count += 1
        return True

    def window(self, key: Hashable = GLOBAL_KEY) -> RateLimitWindow | None:
        return self._windows.get(key)

    def forget(self, key: Hashable) -> None:
        self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._windows)


class AIRequestBudget:
    """Per-user and global limiters; a request needs both to allow it.

    The global budget is only charged once the user's own budget allowed the
    request, so a user who is over their limit cannot drain the shared pool.
    """

    def __init__(self, per_user: RateLimiter, global_: RateLimiter) -> None:
        self.per_user = per_user
        self.global_ = global_

    @classmethod
    def from_config(cls, config, clock: Callable[[], float] = time.monotonic) -> "AIRequestBudget":
        window = float(config["AI_RATE_WINDOW_SECONDS"])
        return cls(
            RateLimiter(int(config["AI_USER_BUDGET"]), window, clock),
            RateLimiter(int(config["AI_GLOBAL_BUDGET"]), window, clock),
        )

    def try_consume(self, user_key: Hashable) -> bool:
        return self.per_user.try_consume(user_key) and self.global_.try_consume(GLOBAL_KEY)

    def release(self, user_key: Hashable) -> None:
        """Drop the per-user window of a key that will never be seen again."""
        self.per_user.forget(user_key)
