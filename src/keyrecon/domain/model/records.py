"""Concrete record types stored by the backing record store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from keyrecon.domain.model.entity import Record
from keyrecon.domain.model.enums import EntityType, OpportunityStage

if TYPE_CHECKING:
    from datetime import date
    from decimal import Decimal


@dataclass(eq=False, kw_only=True)
class Account(Record):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ACCOUNT
    KEY_FIELD: ClassVar[str] = "name"
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("name",)

    name: str
    description: str | None = None
    industry: str | None = None
    website: str | None = None


@dataclass(eq=False, kw_only=True)
class Contact(Record):
    """A person, optionally attached to an account through ``account_id``.

    ``company`` is the account name as supplied by the source; linking resolves
    it to ``account_id``.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CONTACT
    KEY_FIELD: ClassVar[str] = "last_name"
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("last_name",)

    last_name: str
    first_name: str | None = None
    email: str | None = None
    company: str | None = None
    account_id: int | None = None


@dataclass(eq=False, kw_only=True)
class Opportunity(Record):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.OPPORTUNITY
    KEY_FIELD: ClassVar[str] = "name"
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("name", "stage")

    name: str
    stage: OpportunityStage = OpportunityStage.PROSPECTING
    close_date: date | None = None
    amount: Decimal | None = None
    account_id: int | None = None


RECORD_CLASSES: tuple[type[Record], ...] = (Account, Contact, Opportunity)
CLASS_BY_ENTITY_TYPE: dict[EntityType, type[Record]] = {
    record_cls.ENTITY_TYPE: record_cls for record_cls in RECORD_CLASSES
}
