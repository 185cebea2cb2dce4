"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every credential is optional; a missing one switches the matching
    feature to its degraded mode instead of failing startup.
    """

    jsonbin_api_key: str | None = None
    jsonbin_bin_id: str | None = None
    jsonbin_collection_id: str | None = None
    jsonbin_bin_name: str = "morfi-plan-data"
    jsonbin_base_url: str = "https://api.jsonbin.io/v3"
    resend_api_key: str | None = None
    email_sender: str = "Morfi-Plan <noreply@morfi-plan.resend.dev>"
    cron_secret: str | None = None
    local_cache_path: str | None = None
    timezone: str = "America/Argentina/Buenos_Aires"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def is_cron_request(authorization: str | None, cron_secret: str | None) -> bool:
    """Return True when the header carries the scheduler's bearer secret."""
    if not cron_secret or not authorization:
        return False
    return authorization == f"Bearer {cron_secret}"
