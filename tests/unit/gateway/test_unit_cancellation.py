# tests/unit/gateway/test_unit_cancellation.py — v1
"""Tests for gateway/clock.py: cancellable sleep and gateway cancellation."""

from __future__ import annotations

import asyncio

import pytest

from conftest import BlockingClock, FakeClock, ScriptedTransport, http_error, ok
from infergate.gateway.clock import CancellationToken, SystemClock, cancellable_sleep
from infergate.gateway.gateway import ERROR_CANCELLED, InferenceGateway


class TestCancellationToken:
    @pytest.mark.asyncio
    async def test_initial_state(self):
        token = CancellationToken()
        assert token.cancelled is False
        assert token.reason is None

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        token = CancellationToken()
        token.cancel("user left")
        token.cancel("again")
        assert token.cancelled is True
        assert token.reason == "user left"


class TestCancellableSleep:
    @pytest.mark.asyncio
    async def test_without_token(self):
        clock = FakeClock()
        assert await cancellable_sleep(clock, 500) is True
        assert clock.now == 500

    @pytest.mark.asyncio
    async def test_completes(self):
        clock = FakeClock()
        assert await cancellable_sleep(clock, 500, CancellationToken()) is True

    @pytest.mark.asyncio
    async def test_already_cancelled_skips_sleep(self):
        clock = FakeClock()
        token = CancellationToken()
        token.cancel()
        assert await cancellable_sleep(clock, 500, token) is False
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_cancel_wakes_pending_sleep(self):
        clock = BlockingClock()
        token = CancellationToken()
        task = asyncio.create_task(cancellable_sleep(clock, 60_000, token))
        await clock.sleeping.wait()

        token.cancel()

        assert await asyncio.wait_for(task, timeout=1) is False

    @pytest.mark.asyncio
    async def test_system_clock_short_sleep(self):
        clock = SystemClock()
        before = clock.now_ms()
        await clock.sleep_ms(1)
        assert clock.now_ms() >= before


class TestGatewayCancellation:
    @pytest.mark.asyncio
    async def test_cancel_during_backoff(self):
        clock = BlockingClock()
        transport = ScriptedTransport([http_error(503)], clock=clock)
        gateway = InferenceGateway(transport, clock=clock)
        token = CancellationToken()

        task = asyncio.create_task(gateway.invoke("phi", "text", {"inputs": "x"}, cancel_token=token))
        await clock.sleeping.wait()
        token.cancel()
        result = await asyncio.wait_for(task, timeout=1)

        assert result.success is False
        assert result.error == ERROR_CANCELLED
        assert result.attempts_made == 1
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_cancelled_before_start(self, fake_clock):
        transport = ScriptedTransport([ok()], clock=fake_clock)
        gateway = InferenceGateway(transport, clock=fake_clock)
        token = CancellationToken()
        token.cancel()

        result = await gateway.invoke("phi", "text", {"inputs": "x"}, cancel_token=token)

        assert result.error == ERROR_CANCELLED
        assert result.attempts_made == 0
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_in_flight_result_discarded(self, fake_clock):
        token = CancellationToken()

        def answer_after_cancel():
            token.cancel()
            return ok({"late": True})

        transport = ScriptedTransport([answer_after_cancel], clock=fake_clock)
        gateway = InferenceGateway(transport, clock=fake_clock)

        result = await gateway.invoke("phi", "text", {"inputs": "x"}, cancel_token=token)

        assert result.success is False
        assert result.error == ERROR_CANCELLED
        assert result.data is None
        assert result.attempts_made == 1
        assert result.attempts[0].outcome == "discarded"

    @pytest.mark.asyncio
    async def test_task_cancel_propagates(self):
        clock = BlockingClock()
        transport = ScriptedTransport([http_error(503)], clock=clock)
        gateway = InferenceGateway(transport, clock=clock)

        task = asyncio.create_task(gateway.invoke("phi", "text", {"inputs": "x"}))
        await clock.sleeping.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
