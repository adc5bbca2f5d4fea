# src/transport/huggingface_transport.py — v1
"""Hugging Face Inference API transport over a pooled httpx.AsyncClient."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from infergate.transport.base_transport import BaseTransport, TransportError, TransportResponse

logger = logging.getLogger(__name__)

_BINARY_PREFIXES = ("image/", "audio/", "video/", "application/octet-stream")


class HuggingFaceTransport(BaseTransport):
    """POSTs payloads to ``{base_url}/{model_id}``.

    Dict/list payloads are sent as JSON, bytes as the raw request body.
    JSON responses are decoded; media responses are returned as bytes.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api-inference.huggingface.co/models",
        timeout_s: float = 120.0,
        max_connections: int = 20,
        wait_for_model: bool = False,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._wait_for_model = wait_for_model
        self._headers: dict[str, str] = {"Accept": "application/json, */*"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"
        if wait_for_model:
            self._headers["x-wait-for-model"] = "true"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_connections),
        )

    async def send(self, endpoint: str, payload: Any) -> TransportResponse:
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        request_kwargs: dict[str, Any]
        if isinstance(payload, (bytes, bytearray)):
            request_kwargs = {"content": bytes(payload)}
        elif isinstance(payload, str):
            request_kwargs = {"json": {"inputs": payload}}
        else:
            request_kwargs = {"json": payload}

        t0 = time.monotonic()
        try:
            resp = await self._client.post(url, headers=self._headers, **request_kwargs)
        except httpx.TransportError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        latency = int((time.monotonic() - t0) * 1000)
        logger.debug("POST %s -> %d in %dms", url, resp.status_code, latency)

        return _to_response(resp)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def transport_name(self) -> str:
        return "huggingface"


def _to_response(resp: httpx.Response) -> TransportResponse:
    content_type = resp.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type.startswith(_BINARY_PREFIXES):
        return TransportResponse(
            status_code=resp.status_code, body=resp.content, content_type=content_type,
        )

    text = resp.text
    body: Any = text
    if content_type == "application/json" or content_type.endswith("+json"):
        try:
            body = resp.json()
        except ValueError:
            logger.debug("Response declared JSON but did not parse; keeping text")
    return TransportResponse(
        status_code=resp.status_code, body=body, text=text, content_type=content_type,
    )
