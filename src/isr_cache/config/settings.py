# src/isr_cache/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

The codec and the cache directory are the only knobs of the cache itself;
the rest configures logging. There is no default cache directory: it must be
given explicitly (CACHE_ROOT or the CLI's --cache-dir).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from isr_cache.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent or incomplete."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    cache_root: Path | None = None
    cache_codec: Literal["json", "msgpack", "pickle"] = "json"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_root", "log_file")
    @classmethod
    def expand_user(cls, v: Path | None) -> Path | None:  # noqa: N805
        return v.expanduser() if v is not None else None

    @field_validator("log_retention")
    @classmethod
    def validate_retention(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field checks."""
        errors: list[str] = []

        try:
            parse_size(self.log_rotation)
        except ValueError as e:
            errors.append(f"LOG_ROTATION: {e}")

        if (
            self.log_file is not None
            and self.cache_root is not None
            and self.log_file.parent == self.cache_root
        ):
            errors.append("LOG_FILE must not live inside CACHE_ROOT")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
