# src/transport/base_transport.py — v1
"""Abstract transport interface: one request/response exchange per call."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class TransportError(Exception):
    """Network-level failure (connection reset, DNS, socket timeout)."""


class TransportResponse(BaseModel):
    """Status and decoded body of one remote call."""

    status_code: int
    body: Any = None
    text: str = ""
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class BaseTransport(ABC):
    """Unified interface for inference endpoints."""

    @abstractmethod
    async def send(self, endpoint: str, payload: Any) -> TransportResponse:
        """Send payload to endpoint and return the raw response.

        Raises:
            TransportError: If no response could be obtained.
        """

    async def aclose(self) -> None:
        """Release pooled connections. No-op by default."""

    async def __aenter__(self) -> BaseTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    @abstractmethod
    def transport_name(self) -> str:
        """Transport identifier (huggingface, ...)."""
