"""Settings for the analytics dashboard.

Values are read from the environment (prefix ``DASHBOARD_``) and from a local
``.env`` file when present.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USERS_URL = "https://backend-nm1z.onrender.com/api/admin/auth/users"


class DashboardSettings(BaseSettings):
    """Settings for the analytics dashboard application."""

    users_url: str = Field(
        default=DEFAULT_USERS_URL, description="Admin endpoint listing all users"
    )
    token_key: str = Field(
        default="token", description="Storage key holding the bearer token"
    )
    token_backend: Literal["env", "file", "memory", "secretsmanager"] = "env"
    token_env_prefix: str = "DASHBOARD_STORAGE_"
    token_file: str = ".dashboard_storage.json"
    token_secret_name: str = ""
    aws_region: str = "us-east-1"
    # None leaves the timeout to the transport
    request_timeout: float | None = None

    log_level: str = "INFO"
    flask_secret_key: str = "dev-secret"

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> DashboardSettings:
    """Return the process-wide settings instance."""
    return DashboardSettings()
