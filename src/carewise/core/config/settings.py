"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """CareWise Health server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; there is no auth layer in front of the tools.
    carewise_host: str = "127.0.0.1"
    carewise_port: int = 8011
    carewise_log_level: str = "info"
    carewise_allow_insecure_bind: bool = False

    # Storage
    db_path: str = "~/.carewise/health.db"
    profile_key: str = "health_data"

    # Encryption (profiles are only persisted when set)
    encryption_key: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
