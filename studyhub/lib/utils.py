from __future__ import annotations

import time
from datetime import datetime, timezone


def now_ms() -> int:
    return int(time.time() * 1000)


def iso_now() -> str:
    """UTC timestamp in the ISO-8601 form browsers parse (millisecond precision, Z suffix)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MonotonicIds:
    """Timestamp-like integer ids that strictly increase, even within one millisecond."""

    def __init__(self, clock=now_ms):
        self._clock = clock
        self._last = 0

    def next(self) -> int:
        self._last = max(int(self._clock()), self._last + 1)
        return self._last
