# liveref/core/config.py
"""
Central configuration for the reference resolution service.

Environment variables (or a ``.env`` file) override the defaults below.
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_json: bool = Field(default=True, description="JSON log lines; false for plain text")

    # Catalog backend
    catalog_api_url: str = Field(
        default="http://localhost:8001/api",
        description="Base URL of the catalog products API",
    )
    catalog_api_key: str = Field(default="", description="API key sent as X-API-Key (empty to omit)")
    catalog_timeout: float = Field(default=10.0, description="Per-request HTTP timeout in seconds")

    # Resolution cache
    resolution_ttl_seconds: float = Field(default=60.0, gt=0)

    # Extra projectable fields (glob patterns)
    fields_config_paths: list[str] = Field(
        default_factory=lambda: ["config/fields.yaml"]
    )

    # Render the stored snapshot when live resolution fails
    snapshot_fallback: bool = False


settings = Settings()
