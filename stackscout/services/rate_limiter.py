"""In-memory fixed-window rate limiter.

State lives in process memory and resets on restart; a multi-instance
deployment needs a shared store instead.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int
    window_seconds: float


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float

    def retry_after(self, now: float) -> int:
        return max(math.ceil(self.reset_at - now), 1)


RATE_LIMITS: dict[str, RateLimitConfig] = {
    "api_standard": RateLimitConfig(max_requests=60, window_seconds=60),
    "api_ai": RateLimitConfig(max_requests=20, window_seconds=60),
    "api_anonymous": RateLimitConfig(max_requests=10, window_seconds=60),
}


class RateLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.reset_at <= now]
        for key in expired:
            del self._entries[key]

    def check(self, identifier: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request for ``identifier`` and report whether it is allowed."""
        now = self._clock()
        self._purge_expired(now)

        entry = self._entries.get(identifier)
        if entry is None:
            entry = RateLimitEntry(count=1, reset_at=now + config.window_seconds)
            self._entries[identifier] = entry
            return RateLimitResult(True, config.max_requests - 1, entry.reset_at)

        if entry.count >= config.max_requests:
            return RateLimitResult(False, 0, entry.reset_at)

        entry.count += 1
        return RateLimitResult(True, config.max_requests - entry.count, entry.reset_at)

    def now(self) -> float:
        return self._clock()

    def reset(self) -> None:
        self._entries.clear()


rate_limiter = RateLimiter()
