# src/gateway/models.py — v1
"""Gateway types: categories, retry policies, attempt outcomes, results.

Configuration types (RetryPolicy, ExpectedWaitWindow) are frozen dataclasses
shared process-wide. The caller-facing InvocationResult is a pydantic model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class ModelCategory(str, Enum):
    """Model family; selects the retry policy."""

    IMAGE = "image"
    AUDIO = "audio"
    TEXT = "text"
    VISION = "vision"
    MULTIMODAL = "multimodal"
    VIDEO = "video"

    @classmethod
    def parse(cls, value: ModelCategory | str | None) -> ModelCategory | None:
        """Return the matching category, or None when unrecognised."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget for one model category. All durations in milliseconds."""

    max_retries: int
    initial_delay_ms: int
    max_delay_ms: int
    total_timeout_ms: int

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay_ms <= 0:
            raise ValueError("initial_delay_ms must be > 0")
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError("max_delay_ms must be >= initial_delay_ms")
        if self.total_timeout_ms <= self.initial_delay_ms:
            raise ValueError("total_timeout_ms must be > initial_delay_ms")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


@dataclass(frozen=True)
class ExpectedWaitWindow:
    """Advisory cold-start wait range, in seconds."""

    min_seconds: int
    max_seconds: int

    def describe(self) -> str:
        return f"{self.min_seconds}-{self.max_seconds}s"


# === Attempt outcomes ===


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class TransientFailure:
    """Retryable failure. suggested_delay_ms comes from the server, if any."""

    reason: str
    suggested_delay_ms: int | None = None


@dataclass(frozen=True)
class FatalFailure:
    """Non-retryable failure."""

    reason: str
    status_code: int | None = None


AttemptOutcome = Union[Success, TransientFailure, FatalFailure]


def outcome_kind(outcome: AttemptOutcome) -> str:
    if isinstance(outcome, Success):
        return "success"
    if isinstance(outcome, TransientFailure):
        return "transient"
    return "fatal"


# === Results ===


class AttemptRecord(BaseModel):
    """Bookkeeping for a single transport call within an invocation."""

    attempt: int
    outcome: Literal["success", "transient", "fatal", "discarded"]
    reason: str | None = None
    latency_ms: int = 0
    delay_ms: int = 0  # backoff slept after this attempt


class InvocationResult(BaseModel):
    """Outcome of one logical inference request."""

    success: bool
    data: Any = None
    error: str | None = None
    attempts_made: int = 0
    elapsed_ms: int = 0
    model_key: str = ""
    model_id: str = ""
    category: str = ""
    status_code: int | None = None
    expected_wait: tuple[int, int] | None = None
    attempts: list[AttemptRecord] = Field(default_factory=list)
    models_tried: list[str] = Field(default_factory=list)

    @property
    def delays_ms(self) -> list[int]:
        """Backoff delays slept between attempts, in order."""
        return [a.delay_ms for a in self.attempts if a.delay_ms > 0]
