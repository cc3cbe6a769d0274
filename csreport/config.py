"""Application configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CSR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Data store
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "csreport"

    # Lookup code allocation
    max_code_attempts: int = 10

    # Client transport
    primary_base_url: str = "http://localhost:8000"
    fallback_base_url: str = "http://127.0.0.1:8000"
    request_timeout_seconds: float = 10.0

    # HTTP layer
    cors_allow_origins: list[str] = ["*"]

    logging_config_path: Path = Path("config/logging.yaml")

    @model_validator(mode="after")
    def validate_runtime_configuration(self) -> "Settings":
        """Validate cross-field configuration constraints."""
        if self.max_code_attempts <= 0:
            raise ValueError("CSR_MAX_CODE_ATTEMPTS must be > 0")

        if self.request_timeout_seconds <= 0:
            raise ValueError("CSR_REQUEST_TIMEOUT_SECONDS must be > 0")

        if self.primary_base_url.rstrip("/") == self.fallback_base_url.rstrip("/"):
            raise ValueError("CSR_FALLBACK_BASE_URL must differ from CSR_PRIMARY_BASE_URL")

        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
