"""In-memory record store.

Stores clones of written records, so callers observe store state only through
``query``, as they would with a remote store. Every call is atomic: a batch is
validated in full before any record is written.
"""

from __future__ import annotations

import itertools
from collections import Counter
from logging import getLogger
from typing import TYPE_CHECKING

from keyrecon.adapters.validation import reject_ids, require_fields, require_ids
from keyrecon.domain.errors import NotFoundError, StorePermissionError, StoreValidationError

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence

    from keyrecon.domain.model import EntityType, Record

log = getLogger(__name__)


class InMemoryStoreGateway:
    """``StoreGateway`` backed by dictionaries, with per-verb call counts."""

    def __init__(self, *, read_only_types: Iterable[EntityType] = ()) -> None:
        self._rows: dict[EntityType, dict[int, Record]] = {}
        self._ids = itertools.count(1)
        self.read_only_types = frozenset(read_only_types)
        self.calls: Counter[str] = Counter()

    def query[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        field: str,
        keys: Collection[object],
    ) -> list[TRecord]:
        if not keys:
            return []
        self.calls["query"] += 1
        if field != "id" and field not in entity_cls.field_names():
            raise StoreValidationError(
                f"Unknown field {field!r} on {entity_cls.ENTITY_TYPE}",
                entity_type=entity_cls.ENTITY_TYPE,
            )
        rows = self._rows.get(entity_cls.ENTITY_TYPE, {})
        matches = [row for row in rows.values() if getattr(row, field) in keys]
        return [row.clone() for row in matches]  # pyright: ignore[reportReturnType]

    def create(self, entities: Sequence[Record]) -> None:
        self.calls["create"] += 1
        self._check_writable(entities)
        reject_ids(entities)
        require_fields(entities)
        self._insert(entities)

    def update(self, entities: Sequence[Record]) -> None:
        self.calls["update"] += 1
        self._check_writable(entities)
        self._check_existing(entities)
        require_fields(entities)
        self._replace(entities)

    def upsert(self, entities: Sequence[Record]) -> None:
        self.calls["upsert"] += 1
        self._check_writable(entities)
        existing = [entity for entity in entities if entity.id is not None]
        fresh = [entity for entity in entities if entity.id is None]
        self._check_existing(existing)
        require_fields(entities)
        self._replace(existing)
        self._insert(fresh)

    def delete(self, entities: Sequence[Record]) -> None:
        self.calls["delete"] += 1
        self._check_writable(entities)
        self._check_existing(entities)
        for entity in entities:
            self._rows[entity.entity_type].pop(entity.id, None)  # pyright: ignore[reportArgumentType]
        log.debug("Deleted %s records", len(entities))

    def count(self, entity_type: EntityType) -> int:
        return len(self._rows.get(entity_type, {}))

    def _insert(self, entities: Sequence[Record]) -> None:
        for entity in entities:
            entity.id = next(self._ids)
            self._rows.setdefault(entity.entity_type, {})[entity.id] = entity.clone()

    def _replace(self, entities: Sequence[Record]) -> None:
        for entity in entities:
            self._rows[entity.entity_type][entity.id] = entity.clone()  # pyright: ignore[reportArgumentType]

    def _check_writable(self, entities: Sequence[Record]) -> None:
        for entity in entities:
            if entity.entity_type in self.read_only_types:
                raise StorePermissionError(
                    f"Write access to {entity.entity_type} denied",
                    entity_type=entity.entity_type,
                )

    def _check_existing(self, entities: Sequence[Record]) -> None:
        require_ids(entities)
        for entity in entities:
            if entity.id not in self._rows.get(entity.entity_type, {}):
                raise NotFoundError(
                    f"No {entity.entity_type} with id {entity.id}",
                    entity_type=entity.entity_type,
                )


if TYPE_CHECKING:
    from keyrecon.domain.ports import StoreGateway

    _store_check: StoreGateway = InMemoryStoreGateway()
