"""Unit of work for the remote record service."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from keyrecon.adapters.http_resilience import ResilienceConfig, ResilientClient
from keyrecon.config.store import StoreApiConfig, get_store_api_config

from .gateway import HttpStoreGateway

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

log = getLogger(__name__)


def resilience_config_for(config: StoreApiConfig) -> ResilienceConfig:
    return ResilienceConfig(
        base_url=config.base_url,
        timeout_seconds=config.timeout_seconds,
        default_headers=config.headers,
    )


class HttpStoreUnitOfWork:
    """Owns one ``ResilientClient`` for the duration of a ``with`` block.

    The service commits each call as it is made, so ``commit`` and
    ``rollback`` have nothing to do. A failed block leaves earlier calls
    applied.
    """

    def __init__(
        self,
        config: StoreApiConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or get_store_api_config()
        self._transport = transport
        self._client: ResilientClient | None = None
        self._store: HttpStoreGateway | None = None

    def __enter__(self) -> HttpStoreUnitOfWork:
        self._client = ResilientClient(
            resilience_config_for(self.config),
            transport=self._transport,
        )
        self._store = HttpStoreGateway(self._client)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            log.warning("Record service calls before the failure were already applied")
        if self._client is not None:
            self._client.close()
        self._client = None
        self._store = None
        return False

    def commit(self) -> None:
        return None

    def rollback(self) -> None:
        return None

    @property
    def store(self) -> HttpStoreGateway:
        if self._store is None:
            raise RuntimeError("Unit of work client not initialised")
        return self._store


if TYPE_CHECKING:
    from keyrecon.domain.ports import StoreUnitOfWork

    _uow_check: StoreUnitOfWork = HttpStoreUnitOfWork()
