"""Write preconditions shared by the store gateways."""

from __future__ import annotations

from typing import TYPE_CHECKING

from keyrecon.domain.errors import StoreValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from keyrecon.domain.model import Record


def reject_ids(entities: Iterable[Record]) -> None:
    for entity in entities:
        if entity.id is not None:
            raise StoreValidationError(
                f"Cannot create {entity.entity_type} that already has id {entity.id}",
                entity_type=entity.entity_type,
            )


def require_ids(entities: Iterable[Record]) -> None:
    for entity in entities:
        if entity.id is None:
            raise StoreValidationError(
                f"{entity.entity_type} record has no id",
                entity_type=entity.entity_type,
            )


def require_fields(entities: Iterable[Record]) -> None:
    for entity in entities:
        missing = entity.missing_required_fields()
        if missing:
            raise StoreValidationError(
                f"{entity.entity_type} is missing required fields: {', '.join(missing)}",
                entity_type=entity.entity_type,
            )
