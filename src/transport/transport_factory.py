# src/transport/transport_factory.py — v1
"""Factory: instantiate a transport from its registered name."""

from __future__ import annotations

import importlib
import logging

from infergate.config.settings import Settings
from infergate.transport.base_transport import BaseTransport

logger = logging.getLogger(__name__)

# Registry of transport name → class path (lazy import).
_TRANSPORT_REGISTRY: dict[str, str] = {
    "huggingface": "infergate.transport.huggingface_transport.HuggingFaceTransport",
}


class UnsupportedTransportError(ValueError):
    """Raised when a transport name is not registered."""


def create_transport(
    name: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseTransport:
    """Instantiate the transport registered under ``name``.

    Args:
        name: Transport identifier (e.g. "huggingface").
        settings: Application settings (credentials, HTTP limits).
        **kwargs: Extra constructor arguments; take precedence over settings.

    Raises:
        UnsupportedTransportError: If name is not registered.
    """
    if name not in _TRANSPORT_REGISTRY:
        raise UnsupportedTransportError(
            f"Unsupported transport: {name!r}. "
            f"Available: {', '.join(sorted(_TRANSPORT_REGISTRY))}"
        )

    transport_cls = _import_class(_TRANSPORT_REGISTRY[name])

    init_kwargs = dict(kwargs)
    if settings is not None and name == "huggingface":
        init_kwargs.setdefault("api_key", settings.hf_api_key)
        init_kwargs.setdefault("base_url", settings.hf_base_url)
        init_kwargs.setdefault("timeout_s", settings.http_timeout_s)
        init_kwargs.setdefault("max_connections", settings.http_max_connections)
        init_kwargs.setdefault("wait_for_model", settings.wait_for_model)

    logger.debug("Creating transport: %s", name)
    return transport_cls(**init_kwargs)


def register_transport(name: str, class_path: str) -> None:
    """Register a custom transport implementing BaseTransport."""
    _TRANSPORT_REGISTRY[name] = class_path
    logger.info("Registered transport: %s -> %s", name, class_path)


def available_transports() -> list[str]:
    return sorted(_TRANSPORT_REGISTRY)


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
