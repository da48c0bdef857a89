"""SQLAlchemy implementation of the store gateway."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from keyrecon.adapters.sqlalchemy.mappings import table_for
from keyrecon.adapters.validation import reject_ids, require_fields, require_ids
from keyrecon.domain.errors import NotFoundError, StoreValidationError

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from sqlalchemy.orm import Session

    from keyrecon.domain.model import Record

log = getLogger(__name__)


class SqlAlchemyStoreGateway:
    """Store gateway over a single session.

    Writes are flushed, never committed; the owning unit of work commits.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def query[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        field: str,
        keys: Collection[object],
    ) -> list[TRecord]:
        if not keys:
            return []
        table = table_for(entity_cls)
        if field not in table.c:
            raise StoreValidationError(
                f"Unknown field {field!r} on {entity_cls.ENTITY_TYPE}",
                entity_type=entity_cls.ENTITY_TYPE,
            )
        stmt = select(entity_cls).where(table.c[field].in_(list(keys))).order_by(table.c.id)
        return list(self.session.scalars(stmt).all())

    def create(self, entities: Sequence[Record]) -> None:
        reject_ids(entities)
        require_fields(entities)
        self.session.add_all(entities)
        self._flush()

    def update(self, entities: Sequence[Record]) -> None:
        require_fields(entities)
        for entity in entities:
            self._merge_into_persistent(entity)
        self._flush()

    def upsert(self, entities: Sequence[Record]) -> None:
        require_fields(entities)
        for entity in entities:
            if entity.id is None:
                self.session.add(entity)
            else:
                self._merge_into_persistent(entity)
        self._flush()

    def delete(self, entities: Sequence[Record]) -> None:
        for entity in entities:
            self.session.delete(self._persistent(entity))
        self._flush()
        log.debug("Deleted %s records", len(entities))

    def _persistent(self, entity: Record) -> Record:
        require_ids([entity])
        if entity in self.session:
            return entity
        persistent = self.session.get(type(entity), entity.id)
        if persistent is None:
            raise NotFoundError(
                f"No {entity.entity_type} with id {entity.id}",
                entity_type=entity.entity_type,
            )
        return persistent

    def _merge_into_persistent(self, entity: Record) -> None:
        persistent = self._persistent(entity)
        if persistent is entity:
            return
        for name, value in entity.field_values().items():
            setattr(persistent, name, value)

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            raise StoreValidationError(f"Store rejected write: {exc.orig}") from exc


if TYPE_CHECKING:
    from keyrecon.domain.ports import StoreGateway

    _store_check: StoreGateway = SqlAlchemyStoreGateway(session=None)  # type: ignore[arg-type]
