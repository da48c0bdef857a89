"""SQLAlchemy mapping metadata for the keyrecon record types."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    orm,
)
from sqlalchemy.orm import configure_mappers

from keyrecon.domain.model import Account, Contact, EntityType, Opportunity, OpportunityStage

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from keyrecon.domain.model import Record

log = logging.getLogger(__name__)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Record tables ----------------------------------------------------------------

account_table = Table(
    "account",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("description", String, nullable=True),
    Column("industry", String, nullable=True),
    Column("website", String, nullable=True),
    Index(None, "name"),
)

contact_table = Table(
    "contact",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("last_name", String, nullable=False),
    Column("first_name", String, nullable=True),
    Column("email", String, nullable=True),
    Column("company", String, nullable=True),
    Column("account_id", Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True),
    Index(None, "last_name"),
    Index(None, "account_id"),
)

opportunity_table = Table(
    "opportunity",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column(
        "stage",
        Enum(OpportunityStage, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    ),
    Column("close_date", Date, nullable=True),
    Column("amount", Numeric(14, 2, asdecimal=True), nullable=True),
    Column("account_id", Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=True),
    Index(None, "name"),
)

TABLE_BY_ENTITY_TYPE: dict[EntityType, Table] = {
    EntityType.ACCOUNT: account_table,
    EntityType.CONTACT: contact_table,
    EntityType.OPPORTUNITY: opportunity_table,
}


def table_for(entity_cls: type[Record]) -> Table:
    return TABLE_BY_ENTITY_TYPE[entity_cls.ENTITY_TYPE]


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the record types."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Account, account_table)
    mapper_registry.map_imperatively(Contact, contact_table)
    mapper_registry.map_imperatively(Opportunity, opportunity_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
