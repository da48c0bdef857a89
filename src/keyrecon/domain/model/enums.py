"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for record collections in the store."""

    ACCOUNT = "account"
    CONTACT = "contact"
    OPPORTUNITY = "opportunity"


class AccountMarker(StrEnum):
    """Literal written to ``Account.description`` by get-or-create by name."""

    UPDATED = "Updated Account"
    NEW = "New Account"


class OpportunityStage(StrEnum):
    PROSPECTING = "Prospecting"
    QUALIFICATION = "Qualification"
    NEEDS_ANALYSIS = "Needs Analysis"
    PROPOSAL = "Proposal"
    CLOSED_WON = "Closed Won"
    CLOSED_LOST = "Closed Lost"
