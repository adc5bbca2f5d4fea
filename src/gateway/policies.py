# src/gateway/policies.py — v1
"""Static retry-policy and expected-wait tables.

Both tables are read-only mappings built at import time. Lookups are total:
unknown keys resolve to the default entry.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from infergate.gateway.models import ExpectedWaitWindow, ModelCategory, RetryPolicy

DEFAULT_RETRY_POLICY = RetryPolicy(
    max_retries=5, initial_delay_ms=8_000, max_delay_ms=30_000, total_timeout_ms=120_000,
)

RETRY_POLICIES: Mapping[ModelCategory, RetryPolicy] = MappingProxyType({
    ModelCategory.IMAGE: RetryPolicy(
        max_retries=8, initial_delay_ms=10_000, max_delay_ms=60_000, total_timeout_ms=300_000,
    ),
    ModelCategory.AUDIO: RetryPolicy(
        max_retries=6, initial_delay_ms=10_000, max_delay_ms=45_000, total_timeout_ms=180_000,
    ),
    ModelCategory.TEXT: RetryPolicy(
        max_retries=5, initial_delay_ms=8_000, max_delay_ms=30_000, total_timeout_ms=120_000,
    ),
    ModelCategory.VISION: RetryPolicy(
        max_retries=5, initial_delay_ms=5_000, max_delay_ms=30_000, total_timeout_ms=120_000,
    ),
    ModelCategory.MULTIMODAL: RetryPolicy(
        max_retries=5, initial_delay_ms=8_000, max_delay_ms=45_000, total_timeout_ms=180_000,
    ),
    ModelCategory.VIDEO: RetryPolicy(
        max_retries=10, initial_delay_ms=15_000, max_delay_ms=120_000, total_timeout_ms=600_000,
    ),
})

DEFAULT_WAIT_WINDOW = ExpectedWaitWindow(min_seconds=5, max_seconds=30)

EXPECTED_WAIT_WINDOWS: Mapping[str, ExpectedWaitWindow] = MappingProxyType({
    # Image generation
    "flux-schnell": ExpectedWaitWindow(5, 30),
    "sdxl": ExpectedWaitWindow(10, 60),
    "sd-3.5-turbo": ExpectedWaitWindow(10, 45),
    # Speech-to-text
    "whisper-large": ExpectedWaitWindow(15, 60),
    "whisper-turbo": ExpectedWaitWindow(5, 30),
    # Text-to-speech
    "mms-tts": ExpectedWaitWindow(3, 15),
    "parler-tts": ExpectedWaitWindow(5, 30),
    "bark": ExpectedWaitWindow(10, 45),
    # Text generation
    "llama": ExpectedWaitWindow(3, 20),
    "mistral": ExpectedWaitWindow(3, 20),
    "phi": ExpectedWaitWindow(2, 15),
    "qwen": ExpectedWaitWindow(3, 20),
    "gemma": ExpectedWaitWindow(3, 20),
    # Vision
    "vit": ExpectedWaitWindow(2, 10),
    "detr": ExpectedWaitWindow(3, 15),
    "dpt": ExpectedWaitWindow(5, 20),
    "segformer": ExpectedWaitWindow(5, 25),
    # Multimodal
    "blip": ExpectedWaitWindow(3, 20),
    "vilt": ExpectedWaitWindow(3, 15),
    "llava": ExpectedWaitWindow(10, 45),
})


def get_retry_policy(category: ModelCategory | str | None) -> RetryPolicy:
    """Return the retry policy for a category (default when unknown)."""
    parsed = ModelCategory.parse(category)
    if parsed is None:
        return DEFAULT_RETRY_POLICY
    return RETRY_POLICIES.get(parsed, DEFAULT_RETRY_POLICY)


def get_expected_wait(model_key: str) -> ExpectedWaitWindow:
    """Return the advisory wait window for a model key (default when unknown)."""
    return EXPECTED_WAIT_WINDOWS.get(model_key, DEFAULT_WAIT_WINDOW)
