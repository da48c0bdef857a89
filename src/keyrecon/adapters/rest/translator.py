"""Translate between record service payloads and domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from keyrecon.domain.model import EntityType

from .schema import AccountPayload, ContactPayload, OpportunityPayload

if TYPE_CHECKING:
    from collections.abc import Mapping

    from keyrecon.domain.model import Record

    from .schema import RecordPayload


PAYLOAD_BY_ENTITY_TYPE: dict[EntityType, type[RecordPayload]] = {
    EntityType.ACCOUNT: AccountPayload,
    EntityType.CONTACT: ContactPayload,
    EntityType.OPPORTUNITY: OpportunityPayload,
}


def record_to_payload(record: Record) -> dict[str, object]:
    """Serialise ``record`` to the wire shape, omitting ``id`` until it has one."""

    payload_cls = PAYLOAD_BY_ENTITY_TYPE[record.entity_type]
    payload = payload_cls.model_validate({"id": record.id, **record.field_values()})
    return payload.model_dump(mode="json", by_alias=True, exclude_none=record.id is None)


def payload_to_record[TRecord: Record](
    entity_cls: type[TRecord],
    data: Mapping[str, object],
) -> TRecord:
    payload_cls = PAYLOAD_BY_ENTITY_TYPE[entity_cls.ENTITY_TYPE]
    payload = payload_cls.model_validate(data)
    values = payload.model_dump()
    record_id = values.pop("id")
    return entity_cls(id=record_id, **values)


def wire_field(entity_cls: type[Record], field: str) -> str | None:
    """Return the wire name for ``field``, or ``None`` when the payload has no such field."""

    payload_cls = PAYLOAD_BY_ENTITY_TYPE[entity_cls.ENTITY_TYPE]
    info = payload_cls.model_fields.get(field)
    if info is None:
        return None
    return info.alias or field
