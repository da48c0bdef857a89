"""Record store backend configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .env import env_choice, require_env_vars

DEFAULT_STORE_TIMEOUT_SECONDS = 30.0


class StoreBackend(StrEnum):
    SQLALCHEMY = "sqlalchemy"
    HTTP = "http"


@dataclass(frozen=True, slots=True)
class StoreApiConfig:
    """Connection settings for the remote record service."""

    base_url: str
    token: str = field(repr=False)
    timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}", "Accept": "application/json"}


def get_store_backend() -> StoreBackend:
    return env_choice("KEYRECON_STORE_BACKEND", StoreBackend, StoreBackend.SQLALCHEMY)


def get_store_api_config() -> StoreApiConfig:
    values = require_env_vars(("KEYRECON_STORE_URL", "KEYRECON_STORE_TOKEN"))
    return StoreApiConfig(
        base_url=values["KEYRECON_STORE_URL"].rstrip("/"),
        token=values["KEYRECON_STORE_TOKEN"],
    )
