"""Environment-based configuration for CaptureX."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Session settings, optionally overridden by CAPTUREX_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CAPTUREX_",
        case_sensitive=False,
    )

    # Remote analysis service
    endpoint_url: str = "http://localhost:3000/upload"
    asset_base_url: str = "http://localhost:3000"
    upload_field: str = Field(default="image", min_length=1)
    request_timeout: float = Field(default=60.0, gt=0)

    # Preview artifacts (None = system temp dir)
    preview_dir: str | None = None

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def get_settings() -> Settings:
    """Create and return session settings."""
    return Settings()
