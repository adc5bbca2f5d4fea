# src/gateway/fallback.py — v1
"""Try a preferred model, then the category's fallback models in order."""

from __future__ import annotations

import logging
from typing import Any

from infergate.gateway.catalog import fallback_chain
from infergate.gateway.clock import CancellationToken
from infergate.gateway.gateway import ERROR_CANCELLED, InferenceGateway
from infergate.gateway.models import InvocationResult, ModelCategory

logger = logging.getLogger(__name__)


async def invoke_with_fallback(
    gateway: InferenceGateway,
    preferred_key: str,
    category: ModelCategory | str | None,
    payload: Any,
    *,
    cancel_token: CancellationToken | None = None,
) -> InvocationResult:
    """Invoke models of one category until one succeeds.

    Each model gets its own full retry budget. Returns the first successful
    result, or the last failure when every model failed. The returned result
    lists the keys tried and sums attempts and elapsed time across the chain.
    """
    first, *rest = fallback_chain(preferred_key, category)
    result = await gateway.invoke(first, category, payload, cancel_token=cancel_token)
    tried = [first]
    total_attempts = result.attempts_made
    total_elapsed = result.elapsed_ms

    for model_key in rest:
        if result.success or result.error == ERROR_CANCELLED:
            break
        logger.warning(
            "Model '%s' failed (%s); falling back to %s", tried[-1], result.error, model_key,
        )
        result = await gateway.invoke(model_key, category, payload, cancel_token=cancel_token)
        tried.append(model_key)
        total_attempts += result.attempts_made
        total_elapsed += result.elapsed_ms

    if not result.success and len(tried) > 1 and result.error != ERROR_CANCELLED:
        logger.error("All models failed for category %s: %s", category, ", ".join(tried))
    return result.model_copy(
        update={
            "models_tried": tried,
            "attempts_made": total_attempts,
            "elapsed_ms": total_elapsed,
        }
    )
