# src/gateway/gateway.py — v1
"""Inference gateway: one logical request against a slow, cold-start-prone
endpoint, retried under a per-category budget.

The retry loop checks the time budget before starting each new attempt,
never in the middle of one. Every exit path returns an InvocationResult.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from infergate.gateway.catalog import resolve_model_id
from infergate.gateway.classifier import classify_error, classify_response
from infergate.gateway.clock import CancellationToken, Clock, SystemClock, cancellable_sleep
from infergate.gateway.models import (
    AttemptOutcome,
    AttemptRecord,
    FatalFailure,
    InvocationResult,
    ModelCategory,
    RetryPolicy,
    Success,
    outcome_kind,
)
from infergate.gateway.policies import get_expected_wait, get_retry_policy
from infergate.gateway.retry import next_delay
from infergate.logging.context import (
    clear_context,
    set_attempt_context,
    set_invocation_context,
)
from infergate.transport.base_transport import BaseTransport, TransportError

logger = logging.getLogger(__name__)

ERROR_TIMEOUT = "timeout"
ERROR_MAX_RETRIES = "max retries exceeded"
ERROR_CANCELLED = "cancelled"


class InferenceGateway:
    """Retrying front for a BaseTransport.

    Holds no per-invocation state, so one instance serves any number of
    concurrent ``invoke`` calls.
    """

    def __init__(
        self,
        transport: BaseTransport,
        clock: Clock | None = None,
        policy_overrides: Mapping[ModelCategory | str, RetryPolicy] | None = None,
    ):
        self._transport = transport
        self._clock = clock or SystemClock()
        self._overrides: dict[str, RetryPolicy] = {}
        for key, policy in (policy_overrides or {}).items():
            self._overrides[_category_name(key)] = policy

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    def policy_for(self, category: ModelCategory | str | None) -> RetryPolicy:
        """Retry policy in effect for a category."""
        override = self._overrides.get(_category_name(category))
        return override or get_retry_policy(category)

    async def invoke(
        self,
        model_key: str,
        category: ModelCategory | str | None,
        payload: Any,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> InvocationResult:
        """Run one inference request with retries.

        Args:
            model_key: Catalog key or raw model id. Selects the advisory wait
                window and the remote model, never the retry policy.
            category: Model category; selects the retry policy.
            payload: JSON-able value or bytes, forwarded untouched.
            cancel_token: Optional token that stops further retries.

        Returns:
            InvocationResult; failures are reported, not raised.
        """
        category_name = _category_name(category)
        set_invocation_context(uuid.uuid4().hex[:12], model_key, category_name)
        try:
            return await self._run(model_key, category_name, payload, cancel_token)
        finally:
            clear_context()

    async def _run(
        self,
        model_key: str,
        category_name: str,
        payload: Any,
        cancel_token: CancellationToken | None,
    ) -> InvocationResult:
        policy = self.policy_for(category_name)
        window = get_expected_wait(model_key)
        model_id = resolve_model_id(model_key) if model_key else ""
        records: list[AttemptRecord] = []
        t0 = self._clock.now_ms()

        def finish(**fields: Any) -> InvocationResult:
            return InvocationResult(
                model_key=model_key,
                model_id=model_id,
                category=category_name,
                expected_wait=(window.min_seconds, window.max_seconds),
                attempts=records,
                elapsed_ms=self._clock.now_ms() - t0,
                **fields,
            )

        if not model_key or not model_key.strip():
            return finish(success=False, error="model_key must be non-empty", attempts_made=0)

        logger.debug(
            "Invoking %s (%s) with policy %s, expected wait %s",
            model_id, category_name, policy, window.describe(),
        )

        attempt = 0
        while True:
            if attempt > 0:
                elapsed = self._clock.now_ms() - t0
                if elapsed >= policy.total_timeout_ms:
                    logger.warning(
                        "Model '%s' timed out after %dms and %d attempts",
                        model_key, elapsed, attempt,
                    )
                    return finish(success=False, error=ERROR_TIMEOUT, attempts_made=attempt)

            if cancel_token is not None and cancel_token.cancelled:
                return finish(success=False, error=ERROR_CANCELLED, attempts_made=attempt)

            set_attempt_context(attempt + 1)
            started = self._clock.now_ms()
            outcome = await self._attempt(model_id, payload)
            record = AttemptRecord(
                attempt=attempt + 1,
                outcome=outcome_kind(outcome),
                reason=getattr(outcome, "reason", None),
                latency_ms=self._clock.now_ms() - started,
            )
            records.append(record)

            if cancel_token is not None and cancel_token.cancelled:
                record.outcome = "discarded"
                logger.info("Model '%s' cancelled; discarding attempt %d", model_key, attempt + 1)
                return finish(success=False, error=ERROR_CANCELLED, attempts_made=attempt + 1)

            if isinstance(outcome, Success):
                logger.info("Model '%s' succeeded on attempt %d", model_key, attempt + 1)
                return finish(success=True, data=outcome.payload, attempts_made=attempt + 1)

            if isinstance(outcome, FatalFailure):
                logger.error("Model '%s' failed: %s", model_key, outcome.reason)
                return finish(
                    success=False,
                    error=outcome.reason,
                    status_code=outcome.status_code,
                    attempts_made=attempt + 1,
                )

            if attempt + 1 > policy.max_retries:
                logger.warning(
                    "Model '%s' gave up after %d attempts: %s",
                    model_key, attempt + 1, outcome.reason,
                )
                return finish(success=False, error=ERROR_MAX_RETRIES, attempts_made=attempt + 1)

            delay = next_delay(policy, attempt, outcome)
            record.delay_ms = delay
            logger.warning(
                "Model '%s' - %s (attempt %d/%d), retrying in %.1fs",
                model_key, outcome.reason, attempt + 1, policy.max_attempts, delay / 1000,
            )
            if not await cancellable_sleep(self._clock, delay, cancel_token):
                return finish(success=False, error=ERROR_CANCELLED, attempts_made=attempt + 1)
            attempt += 1

    async def _attempt(self, model_id: str, payload: Any) -> AttemptOutcome:
        """One transport call, classified. Never raises Exception."""
        try:
            response = await self._transport.send(model_id, payload)
        except TransportError as exc:
            return classify_error(exc)
        except Exception as exc:
            logger.exception("Unexpected transport failure calling %s", model_id)
            return FatalFailure(reason=f"unexpected error: {exc}")
        return classify_response(response)


def _category_name(category: ModelCategory | str | None) -> str:
    parsed = ModelCategory.parse(category)
    if parsed is not None:
        return parsed.value
    return str(category).strip().lower() if category else "default"
