# src/gateway/retry.py — v1
"""Backoff schedule between attempts.

Exponential delay doubles from the policy's initial delay and is capped at its
max delay. A server-suggested delay, when present, replaces the computed one.
"""

from __future__ import annotations

from infergate.gateway.classifier import MAX_SUGGESTED_DELAY_MS
from infergate.gateway.models import RetryPolicy, TransientFailure


def compute_backoff_delay(policy: RetryPolicy, attempt: int) -> int:
    """Exponential delay in ms after the given 0-based attempt."""
    if attempt < 0:
        raise ValueError("attempt must be >= 0")
    # Cap the exponent; any value past the crossover is clamped anyway.
    exponent = min(attempt, 32)
    return min(policy.initial_delay_ms * (2 ** exponent), policy.max_delay_ms)


def next_delay(policy: RetryPolicy, attempt: int, failure: TransientFailure) -> int:
    """Delay in ms before the attempt following ``attempt``."""
    suggested = failure.suggested_delay_ms
    if suggested is not None and 0 < suggested <= MAX_SUGGESTED_DELAY_MS:
        return suggested
    return compute_backoff_delay(policy, attempt)


def backoff_schedule(policy: RetryPolicy) -> list[int]:
    """Full computed delay sequence for a policy, one entry per retry."""
    return [compute_backoff_delay(policy, i) for i in range(policy.max_retries)]
