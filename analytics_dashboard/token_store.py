"""Passive key-value storage for the bearer token.

The dashboard never authenticates on its own. It only reads a token that some
other party placed into storage under a fixed key. Each backend implements the
small ``TokenStore`` protocol so the fetcher can receive it as a dependency:

- ``InMemoryTokenStore``: plain dict, used by tests and embedding callers
- ``EnvTokenStore``: one environment variable per key
- ``JsonFileTokenStore``: a local JSON object file
- ``SecretsManagerTokenStore``: a JSON secret in AWS Secrets Manager
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

import boto3

from .config import DashboardSettings


class TokenStore(Protocol):
    """Read-only view over passive key-value storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value for ``key`` or ``None`` when absent."""
        ...


@dataclass(slots=True)
class InMemoryTokenStore:
    """Dict-backed store."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key) or None

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass(slots=True)
class EnvTokenStore:
    """Reads ``<prefix><KEY>`` from the environment at lookup time."""

    prefix: str = "DASHBOARD_STORAGE_"

    def get(self, key: str) -> str | None:
        value = os.environ.get(f"{self.prefix}{key.upper()}", "").strip()
        return value or None


@dataclass(slots=True)
class JsonFileTokenStore:
    """Stores values in a flat JSON object on disk.

    A missing or unreadable file behaves like empty storage.
    """

    path: Path

    def _load(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        if value is None or value == "":
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@lru_cache(maxsize=8)
def _get_secrets_client(region: str) -> Any:
    """Return a cached boto3 Secrets Manager client for ``region``."""
    return boto3.client("secretsmanager", region_name=region)


@dataclass(slots=True)
class SecretsManagerTokenStore:
    """Reads keys from a JSON-formatted secret.

    A secret that is not a JSON object is exposed under the configured
    fallback key so a bare token string can be stored directly.
    """

    secret_name: str
    region_name: str = "us-east-1"
    fallback_key: str = "token"

    def _load(self) -> dict[str, Any]:
        client = _get_secrets_client(self.region_name)
        response = client.get_secret_value(SecretId=self.secret_name)
        if "SecretString" in response:
            raw = str(response["SecretString"])
        else:
            raw = response.get("SecretBinary", b"").decode("utf-8")
        try:
            data = json.loads(raw)
        except ValueError:
            return {self.fallback_key: raw}
        return data if isinstance(data, dict) else {self.fallback_key: raw}

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        if value is None or value == "":
            return None
        return str(value)


def build_token_store(settings: DashboardSettings) -> TokenStore:
    """Construct the token store selected by ``settings.token_backend``.

    Raises:
        ValueError: if the Secrets Manager backend is selected without a
            secret name.
    """

    backend = settings.token_backend
    if backend == "memory":
        return InMemoryTokenStore()
    if backend == "file":
        return JsonFileTokenStore(Path(settings.token_file).expanduser())
    if backend == "secretsmanager":
        name = settings.token_secret_name.strip()
        if not name:
            raise ValueError(
                "DASHBOARD_TOKEN_SECRET_NAME is required for the secretsmanager backend"
            )
        return SecretsManagerTokenStore(
            secret_name=name,
            region_name=settings.aws_region,
            fallback_key=settings.token_key,
        )
    return EnvTokenStore(prefix=settings.token_env_prefix)
