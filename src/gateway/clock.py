# src/gateway/clock.py — v1
"""Injectable time source and cooperative cancellation for the retry loop."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Monotonic millisecond clock with an awaitable sleep."""

    @abstractmethod
    def now_ms(self) -> int:
        """Current monotonic time in milliseconds."""

    @abstractmethod
    async def sleep_ms(self, delay_ms: int) -> None:
        """Suspend the calling task for delay_ms."""


class SystemClock(Clock):
    """Wall-clock implementation backed by time.monotonic and asyncio.sleep."""

    def now_ms(self) -> int:
        return int(time.monotonic() * 1000)

    async def sleep_ms(self, delay_ms: int) -> None:
        await asyncio.sleep(max(delay_ms, 0) / 1000)


class CancellationToken:
    """Caller-owned flag that stops further retries of an invocation.

    Setting the token wakes any backoff sleep waiting on it. A transport call
    already in flight is not interrupted.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


async def cancellable_sleep(
    clock: Clock, delay_ms: int, token: CancellationToken | None = None,
) -> bool:
    """Sleep on clock, returning early if token is cancelled.

    Returns:
        True if the full delay elapsed, False if cancellation woke the sleep.
    """
    if token is None:
        await clock.sleep_ms(delay_ms)
        return True
    if token.cancelled:
        return False

    sleeper = asyncio.ensure_future(clock.sleep_ms(delay_ms))
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (sleeper, waiter):
            if not task.done():
                task.cancel()
        await asyncio.gather(sleeper, waiter, return_exceptions=True)
    if sleeper in done:
        # Surface errors raised by the clock itself
        sleeper.result()
    return not token.cancelled
