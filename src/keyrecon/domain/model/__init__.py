"""Public domain model surface."""

from __future__ import annotations

from keyrecon.domain.model.entity import Record
from keyrecon.domain.model.enums import AccountMarker, EntityType, OpportunityStage
from keyrecon.domain.model.records import (
    CLASS_BY_ENTITY_TYPE,
    RECORD_CLASSES,
    Account,
    Contact,
    Opportunity,
)

__all__ = [  # noqa: RUF022
    # base
    "Record",
    # records
    "Account",
    "Contact",
    "Opportunity",
    "RECORD_CLASSES",
    "CLASS_BY_ENTITY_TYPE",
    # enums
    "AccountMarker",
    "EntityType",
    "OpportunityStage",
]
