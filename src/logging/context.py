# src/logging/context.py — v1
"""Contextual logging support: attach invocation_id, model_key, category and
attempt to every log record emitted while an invocation runs.

Context variables are per-task, so concurrent invocations never see each
other's values.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_invocation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "invocation_id", default=None
)
_model_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model_key", default=None
)
_category: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "category", default=None
)
_attempt: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "attempt", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    invocation_id: str | None = None
    model_key: str | None = None
    category: str | None = None
    attempt: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    return LogContext(
        invocation_id=_invocation_id.get(),
        model_key=_model_key.get(),
        category=_category.get(),
        attempt=_attempt.get(),
    )


def set_invocation_context(invocation_id: str, model_key: str, category: str) -> None:
    """Set invocation-level context (once per invoke call)."""
    _invocation_id.set(invocation_id)
    _model_key.set(model_key)
    _category.set(category)
    _attempt.set(None)


def set_attempt_context(attempt: int) -> None:
    """Set the 1-based attempt number of the call about to be made."""
    _attempt.set(attempt)


def clear_context() -> None:
    _invocation_id.set(None)
    _model_key.set(None)
    _category.set(None)
    _attempt.set(None)
