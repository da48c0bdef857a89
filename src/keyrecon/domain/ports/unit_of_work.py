"""Unit-of-work abstraction around a store gateway."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from keyrecon.domain.ports.store import StoreGateway


@runtime_checkable
class StoreUnitOfWork(Protocol):
    """Transaction boundary around one gateway instance."""

    @property
    def store(self) -> StoreGateway: ...

    def __enter__(self) -> StoreUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
