"""Transient record lifecycle: batch create, re-read, batch delete."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from keyrecon.domain.errors import ReadAfterWriteError

if TYPE_CHECKING:
    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TransientBatch[TRecord: Record]:
    """Records sharing ``filter_field == filter_value``, built by index."""

    entity_cls: type[TRecord]
    filter_field: str
    filter_value: object
    build: Callable[[int], TRecord]


def create_then_delete[TRecord: Record](
    store: StoreGateway,
    batch: TransientBatch[TRecord],
    count: int,
) -> int:
    """Create ``count`` records, re-read them by the shared filter, delete the re-read set.

    Deletion targets what the store returned, not the in-memory records, so any
    store-assigned fields are honoured. Returns the number of records deleted.
    """

    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count == 0:
        return 0

    created: list[TRecord] = []
    for position in range(count):
        record = batch.build(position)
        setattr(record, batch.filter_field, batch.filter_value)
        created.append(record)
    store.create(created)

    reread = store.query(batch.entity_cls, batch.filter_field, {batch.filter_value})
    observed = {record.id for record in reread}
    unseen = [record.id for record in created if record.id not in observed]
    if unseen:
        raise ReadAfterWriteError(
            f"Re-read of {batch.entity_cls.ENTITY_TYPE} by {batch.filter_field}="
            f"{batch.filter_value!r} missed created ids {unseen}"
        )

    store.delete(reread)
    log.info(
        "Deleted %s transient %s records (%s=%r)",
        len(reread),
        batch.entity_cls.ENTITY_TYPE,
        batch.filter_field,
        batch.filter_value,
    )
    return len(reread)
