"""Asyncio token bucket limiter used to pace outbound requests."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from duckweb.errors import RateLimitCancelled


class RateLimiter:
    """
    Token bucket admitting `burst` calls at once, then one every `interval` seconds.

    Each `wait()` reserves a token up front and sleeps until the reservation
    matures, so concurrent callers are admitted in arrival order. Instances
    share no state; give each operation its own limiter.
    """

    def __init__(
        self,
        interval: float,
        burst: int = 1,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        if burst < 1:
            raise ValueError("burst must be >= 1")
        self.interval = interval
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._last = clock()

    @classmethod
    def per_minute(cls, count: int, burst: int = 1) -> "RateLimiter":
        return cls(60.0 / count, burst)

    def _tokens_at(self, now: float) -> float:
        elapsed = max(0.0, now - self._last)
        return min(float(self.burst), self._tokens + elapsed / self.interval)

    def reserve(self) -> float:
        """Take a token now and return the delay in seconds before it may be used."""
        now = self._clock()
        tokens = self._tokens_at(now) - 1.0
        self._tokens = tokens
        self._last = now
        return 0.0 if tokens >= 0 else -tokens * self.interval

    def _release(self) -> None:
        now = self._clock()
        self._tokens = min(float(self.burst), self._tokens_at(now) + 1.0)
        self._last = now

    async def wait(self, timeout: float | None = None) -> None:
        """
        Block until a token is available.

        Raises RateLimitCancelled without consuming a token when `timeout` is
        already expired or shorter than the required wait.
        """
        if timeout is not None and timeout <= 0:
            raise RateLimitCancelled("rate limit: deadline already expired")

        now = self._clock()
        deficit = 1.0 - self._tokens_at(now)
        delay = max(0.0, deficit * self.interval)
        if timeout is not None and delay > timeout:
            raise RateLimitCancelled(
                f"rate limit: would wait {delay:.2f}s, exceeding deadline of {timeout:.2f}s"
            )

        delay = self.reserve()
        if delay <= 0:
            return
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self._release()
            raise
