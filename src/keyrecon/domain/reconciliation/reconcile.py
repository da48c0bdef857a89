"""Batch reconciler.

Classifies every desired item as "update existing" or "create new" against a
key index, applies the transform, and issues one upsert for the whole batch.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import IntraBatchPolicy, ReconcileResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

    from .contracts import DesiredEntity, Transform

log = getLogger(__name__)


def reconcile[TRecord: Record](
    store: StoreGateway,
    entity_cls: type[TRecord],
    desired: Sequence[DesiredEntity],
    index: Mapping[str, TRecord],
    transform: Transform[TRecord] | None = None,
    *,
    policy: IntraBatchPolicy = IntraBatchPolicy.MERGE,
) -> ReconcileResult[TRecord]:
    """Upsert ``desired`` by natural key, reusing records found in ``index``.

    The transform runs on every record, matched or new, so every matched record
    is written whether or not its values changed. ``index`` is only read.
    """

    result: ReconcileResult[TRecord] = ReconcileResult()
    fresh_by_key: dict[str, TRecord] = {}

    for item in desired:
        entity = index.get(item.key)
        if entity is None and policy is IntraBatchPolicy.MERGE:
            entity = fresh_by_key.get(item.key)
        if entity is None:
            entity = entity_cls(**{entity_cls.KEY_FIELD: item.key})
            fresh_by_key.setdefault(item.key, entity)
            result.created.append(entity)
        elif entity.is_persisted and not _contains(result.updated, entity):
            result.updated.append(entity)

        for name, value in item.attributes.items():
            setattr(entity, name, value)
        if transform is not None:
            transform(entity)
        result.entities.append(entity)

    batch = unique_records(result.entities)
    if batch:
        store.upsert(batch)
    log.info(
        "Reconciled %s %s records: created=%s, updated=%s",
        len(desired),
        entity_cls.ENTITY_TYPE,
        len(result.created),
        len(result.updated),
    )
    return result


def unique_records[TRecord: Record](records: Iterable[TRecord]) -> list[TRecord]:
    """Drop repeated occurrences of the same record object, keeping order."""

    seen: set[int] = set()
    unique: list[TRecord] = []
    for record in records:
        if id(record) in seen:
            continue
        seen.add(id(record))
        unique.append(record)
    return unique


def _contains[TRecord: Record](records: list[TRecord], record: TRecord) -> bool:
    return any(candidate is record for candidate in records)
