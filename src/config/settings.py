# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Transform ===
    crop_max_size: int = 2000
    overlay_size: int = 200
    overlay_offset: int = 35
    overlay_background: str = "#ff6600"
    dedupe_inflight: bool = False

    # === Result cache ===
    cache_backend: Literal["memory", "json", "sqlite", "redis"] = "memory"
    cache_root: Path = Path("~/.imgresizer/cache")
    cache_redis_url: str = ""
    cache_redis_ttl_s: int = 0
    cache_memory_max_entries: int = 1000

    # === Source adapters ===
    source_adapter: Literal["local", "s3", "http"] = "local"
    source_local_root: Path = Path("./images")
    source_s3_bucket: str = ""
    source_s3_prefix: str = ""
    source_s3_region: str = ""
    source_s3_endpoint_url: str = ""
    source_http_base_url: str = ""
    source_http_timeout_s: float = 10.0

    # === Source fetchers ===
    source_cache_max_entries: int = 100
    overlay_cache_max_entries: int = 50
    fetch_max_retries: int = 2
    fetch_retry_base_delay_s: float = 0.5

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("crop_max_size", "overlay_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("overlay_offset", "fetch_max_retries", "cache_redis_ttl_s")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("overlay_background")
    @classmethod
    def validate_overlay_background(cls, v: str) -> str:  # noqa: N805
        """Background is flattened as an opaque RGB color."""
        if not _HEX_COLOR.match(v):
            raise ValueError("overlay_background must be a #rrggbb color")
        return v.lower()

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.source_adapter == "s3" and not self.source_s3_bucket:
            errors.append("SOURCE_ADAPTER=s3 requires SOURCE_S3_BUCKET")

        if self.source_adapter == "http" and not self.source_http_base_url:
            errors.append("SOURCE_ADAPTER=http requires SOURCE_HTTP_BASE_URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def overlay_background_rgb(self) -> tuple[int, int, int]:
        """Parse overlay_background into an RGB tuple."""
        value = self.overlay_background.lstrip("#")
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-process config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
