# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Holds deployment-specific values only: endpoint, credentials, HTTP client
limits and logging. Retry policies are code constants, not settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Transport ===
    transport: str = "huggingface"
    hf_api_key: str = ""
    hf_base_url: str = "https://api-inference.huggingface.co/models"
    http_timeout_s: float = 120.0
    http_max_connections: int = 20
    wait_for_model: bool = False

    # === Gateway ===
    fallback_enabled: bool = True

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    @field_validator("hf_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("hf_base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field checks; all problems are reported together."""
        errors: list[str] = []

        if self.http_timeout_s <= 0:
            errors.append("HTTP_TIMEOUT_S must be > 0")
        if self.http_max_connections < 1:
            errors.append("HTTP_MAX_CONNECTIONS must be >= 1")
        if not self.transport.strip():
            errors.append("TRANSPORT must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
