"""Pydantic models describing the record service payloads."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from decimal import Decimal  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keyrecon.domain.model import OpportunityStage


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class StoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# Record payloads ---------------------------------------------------------------


class AccountPayload(StoreBaseModel):
    id: int | None = None
    name: str
    description: str | None = None
    industry: str | None = None
    website: str | None = None

    _normalize_optional = field_validator("industry", "website", mode="before")(_blank_to_none)


class ContactPayload(StoreBaseModel):
    id: int | None = None
    last_name: str = Field(alias="lastName")
    first_name: str | None = Field(default=None, alias="firstName")
    email: str | None = None
    company: str | None = None
    account_id: int | None = Field(default=None, alias="accountId")

    _normalize_optional = field_validator("email", "company", mode="before")(_blank_to_none)


class OpportunityPayload(StoreBaseModel):
    id: int | None = None
    name: str
    stage: OpportunityStage
    close_date: date | None = Field(default=None, alias="closeDate")
    amount: Decimal | None = None
    account_id: int | None = Field(default=None, alias="accountId")


type RecordPayload = AccountPayload | ContactPayload | OpportunityPayload


# Envelopes ---------------------------------------------------------------------


class QueryResponse(StoreBaseModel):
    records: list[dict[str, object]]


class StoreErrorDetail(StoreBaseModel):
    code: str | None = None
    message: str
    fields: list[str] = Field(default_factory=list)


class WriteResult(StoreBaseModel):
    id: int | None = None
    success: bool = True
    created: bool = False
    errors: list[StoreErrorDetail] = Field(default_factory=list)


class WriteResponse(StoreBaseModel):
    results: list[WriteResult]


class ErrorResponse(StoreBaseModel):
    errors: list[StoreErrorDetail]

    def describe(self) -> str:
        return "; ".join(
            f"{error.code}: {error.message}" if error.code else error.message
            for error in self.errors
        )
