# src/gateway/classifier.py — v1
"""Classify transport responses and errors into attempt outcomes.

Cold-start hints from the upstream provider are parsed best-effort: when the
error text carries an ``estimated_time`` field the number of seconds is turned
into a suggested delay. Anything unparsable falls back to computed backoff.
"""

from __future__ import annotations

import re
from typing import Any

from infergate.gateway.models import (
    AttemptOutcome,
    FatalFailure,
    Success,
    TransientFailure,
)
from infergate.transport.base_transport import TransportResponse

MAX_SUGGESTED_DELAY_MS = 60_000

_ESTIMATED_TIME_RE = re.compile(r"estimated_time['\":\s]+(\d+(?:\.\d+)?)")
_LOADING_MARKERS = ("currently loading", "is loading", "model loading")


def parse_estimated_time(detail: str) -> int | None:
    """Extract a suggested delay (ms) from an error detail.

    Returns None when no usable value is present. Values are capped at
    MAX_SUGGESTED_DELAY_MS; a zero estimate counts as unusable.
    """
    if not detail:
        return None
    match = _ESTIMATED_TIME_RE.search(detail)
    if not match:
        return None
    try:
        delay_ms = int(float(match.group(1)) * 1000)
    except ValueError:
        return None
    if delay_ms <= 0:
        return None
    return min(delay_ms, MAX_SUGGESTED_DELAY_MS)


def error_detail(response: TransportResponse) -> str:
    """Human-readable error text from a response body."""
    body: Any = response.body
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, list):
            err = "; ".join(str(e) for e in err)
        if err:
            detail = str(err)
            if "estimated_time" in body and "estimated_time" not in detail:
                detail += f" (estimated_time: {body['estimated_time']})"
            return detail
    if response.text:
        return response.text.strip()
    if isinstance(body, str):
        return body.strip()
    return ""


def _is_loading(detail: str) -> bool:
    lowered = detail.lower()
    return any(marker in lowered for marker in _LOADING_MARKERS)


def classify_response(response: TransportResponse) -> AttemptOutcome:
    """Map a transport response to Success, TransientFailure or FatalFailure."""
    status = response.status_code

    if response.ok:
        detail = error_detail(response) if isinstance(response.body, dict) else ""
        # Some endpoints answer 200 with a loading notice instead of a 503.
        if isinstance(response.body, dict) and response.body.get("error") and _is_loading(detail):
            return TransientFailure(
                reason=f"model loading: {detail}",
                suggested_delay_ms=parse_estimated_time(detail),
            )
        return Success(payload=response.body)

    detail = error_detail(response)
    reason = f"HTTP {status}: {detail}" if detail else f"HTTP {status}"

    if status >= 500 or status == 429 or _is_loading(detail):
        return TransientFailure(reason=reason, suggested_delay_ms=parse_estimated_time(detail))
    if 400 <= status < 500:
        return FatalFailure(reason=reason, status_code=status)
    return FatalFailure(reason=f"unexpected status {status}", status_code=status)


def classify_error(error: Exception) -> AttemptOutcome:
    """Map a network-level error to a retryable failure (no suggested delay)."""
    return TransientFailure(reason=f"network error: {error}")
