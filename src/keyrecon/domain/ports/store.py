"""Port for the backing record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from keyrecon.domain.model import Record


@runtime_checkable
class StoreGateway(Protocol):
    """Batched, synchronous access to a schema-enforced record store.

    Every method raises a ``StoreError`` subclass on failure. Writes succeed or
    fail as a unit per call; nothing spans calls.
    """

    def query[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        field: str,
        keys: Collection[object],
    ) -> list[TRecord]:
        """Return all records of ``entity_cls`` whose ``field`` is in ``keys``.

        An empty ``keys`` returns ``[]`` without touching the store.
        """
        ...

    def create(self, entities: Sequence[Record]) -> None:
        """Insert records without ids and assign their ids in place."""
        ...

    def update(self, entities: Sequence[Record]) -> None:
        """Write the fields of records that already carry an id."""
        ...

    def upsert(self, entities: Sequence[Record]) -> None:
        """Update records with an id, create the rest (ids assigned in place)."""
        ...

    def delete(self, entities: Sequence[Record]) -> None:
        """Delete records by id."""
        ...
