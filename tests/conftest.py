# tests/conftest.py — v1
"""Shared test fixtures: a fake clock and a scripted transport.

The fake clock advances only when the gateway sleeps or a transport call
reports latency, so retry schedules are checked exactly and no test waits
on real time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Union

import pytest

from infergate.gateway.clock import Clock
from infergate.transport.base_transport import BaseTransport, TransportError, TransportResponse


class FakeClock(Clock):
    """Deterministic clock; sleep_ms advances time instantly."""

    def __init__(self, start_ms: int = 0, advance_on_sleep: bool = True):
        self.now = start_ms
        self.advance_on_sleep = advance_on_sleep
        self.sleeps: list[int] = []

    def now_ms(self) -> int:
        return self.now

    async def sleep_ms(self, delay_ms: int) -> None:
        self.sleeps.append(delay_ms)
        if self.advance_on_sleep:
            self.now += delay_ms
        await asyncio.sleep(0)

    def advance(self, delay_ms: int) -> None:
        self.now += delay_ms


class BlockingClock(FakeClock):
    """Clock whose sleeps never finish on their own."""

    def __init__(self) -> None:
        super().__init__()
        self.sleeping = asyncio.Event()

    async def sleep_ms(self, delay_ms: int) -> None:
        self.sleeps.append(delay_ms)
        self.sleeping.set()
        await asyncio.Event().wait()


Step = Union[TransportResponse, Exception, Callable[[], Any]]


class ScriptedTransport(BaseTransport):
    """Replays a list of responses; the last step repeats once exhausted.

    Each step is a TransportResponse to return, an Exception to raise, or a
    zero-argument callable whose return value is the response.
    """

    def __init__(
        self,
        steps: list[Step],
        clock: FakeClock | None = None,
        latency_ms: int = 0,
    ):
        self._steps = list(steps)
        self._clock = clock
        self._latency_ms = latency_ms
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    async def send(self, endpoint: str, payload: Any) -> TransportResponse:
        index = min(len(self.calls), len(self._steps) - 1)
        self.calls.append((endpoint, payload))
        if self._clock is not None and self._latency_ms:
            self._clock.advance(self._latency_ms)
        await asyncio.sleep(0)
        step = self._steps[index]
        if isinstance(step, Exception):
            raise step
        if callable(step) and not isinstance(step, TransportResponse):
            return step()
        return step

    async def aclose(self) -> None:
        self.closed = True

    @property
    def transport_name(self) -> str:
        return "scripted"


def loading(estimated_time: float | None = None, status: int = 503) -> TransportResponse:
    """Cold-start response shaped like the Hugging Face API's."""
    body: dict[str, Any] = {"error": "Model org/model is currently loading"}
    if estimated_time is not None:
        body["estimated_time"] = estimated_time
    return TransportResponse(status_code=status, body=body, content_type="application/json")


def ok(body: Any = None) -> TransportResponse:
    return TransportResponse(
        status_code=200,
        body=body if body is not None else [{"generated_text": "hello"}],
        content_type="application/json",
    )


def http_error(status: int, message: str = "error") -> TransportResponse:
    return TransportResponse(
        status_code=status, body={"error": message}, content_type="application/json",
    )


def network_error(message: str = "connection reset by peer") -> TransportError:
    return TransportError(message)


# === FIXTURES ===


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def always_transient(fake_clock: FakeClock) -> ScriptedTransport:
    """Transport that answers 503 without an estimated time, forever."""
    return ScriptedTransport([http_error(503, "Service Unavailable")], clock=fake_clock)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers added by setup_logging() so they never outlive a test."""
    root = logging.getLogger("infergate")
    level = root.level
    yield
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    root.setLevel(level)
