"""Store gateway backed by the record service REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from keyrecon.adapters.validation import reject_ids, require_fields, require_ids
from keyrecon.domain.errors import (
    NotFoundError,
    StoreError,
    StorePermissionError,
    StoreValidationError,
)

from .schema import ErrorResponse, QueryResponse, WriteResponse
from .translator import payload_to_record, record_to_payload, wire_field

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from keyrecon.adapters.http_resilience import ResilientClient
    from keyrecon.domain.model import EntityType, Record

    from .schema import WriteResult

log = getLogger(__name__)

_VALIDATION_STATUSES = frozenset({400, 409, 422})
_PERMISSION_STATUSES = frozenset({401, 403})


class HttpStoreGateway:
    """``StoreGateway`` over ``/records/{type}`` routes.

    The service commits every call on its own. A batch mixing record types is
    sent as one request per type, in first-seen order.
    """

    def __init__(self, client: ResilientClient) -> None:
        self._client = client

    def query[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        field: str,
        keys: Collection[object],
    ) -> list[TRecord]:
        if not keys:
            return []
        entity_type = entity_cls.ENTITY_TYPE
        wire_name = wire_field(entity_cls, field)
        if wire_name is None:
            raise StoreValidationError(
                f"Unknown field {field!r} on {entity_type}",
                entity_type=entity_type,
            )
        response = self._send(
            "GET",
            f"/records/{entity_type}",
            entity_type,
            params={"field": wire_name, "in": sorted(str(key) for key in keys)},
        )
        body = _parse(QueryResponse, response, entity_type)
        try:
            return [payload_to_record(entity_cls, row) for row in body.records]
        except ValidationError as exc:
            raise StoreError(
                f"Unexpected {entity_type} record from record service: "
                f"{exc.error_count()} validation errors",
                entity_type=entity_type,
            ) from exc

    def create(self, entities: Sequence[Record]) -> None:
        reject_ids(entities)
        require_fields(entities)
        for entity_type, group in _group_by_type(entities).items():
            results = self._write("POST", f"/records/{entity_type}", entity_type, group)
            for entity, result in zip(group, results, strict=True):
                entity.id = result.id

    def update(self, entities: Sequence[Record]) -> None:
        require_ids(entities)
        require_fields(entities)
        for entity_type, group in _group_by_type(entities).items():
            self._write("PATCH", f"/records/{entity_type}", entity_type, group)

    def upsert(self, entities: Sequence[Record]) -> None:
        require_fields(entities)
        for entity_type, group in _group_by_type(entities).items():
            results = self._write("POST", f"/records/{entity_type}/upsert", entity_type, group)
            for entity, result in zip(group, results, strict=True):
                if entity.id is None:
                    entity.id = result.id

    def delete(self, entities: Sequence[Record]) -> None:
        require_ids(entities)
        for entity_type, group in _group_by_type(entities).items():
            self._send(
                "DELETE",
                f"/records/{entity_type}",
                entity_type,
                params={"id": [str(entity.id) for entity in group]},
            )
        log.debug("Deleted %s records", len(entities))

    def _write(
        self,
        method: str,
        url: str,
        entity_type: EntityType,
        group: Sequence[Record],
    ) -> list[WriteResult]:
        try:
            payloads = [record_to_payload(entity) for entity in group]
        except ValidationError as exc:
            raise StoreValidationError(
                f"Cannot serialise {entity_type} records: {exc.error_count()} validation errors",
                entity_type=entity_type,
            ) from exc
        response = self._send(method, url, entity_type, json={"records": payloads})
        body = _parse(WriteResponse, response, entity_type)
        if len(body.results) != len(group):
            raise StoreError(
                f"Record service returned {len(body.results)} results for {len(group)} records",
                entity_type=entity_type,
            )
        failures = [error.message for result in body.results for error in result.errors]
        if not all(result.success for result in body.results):
            raise StoreValidationError(
                f"Record service rejected {entity_type} write: {'; '.join(failures)}",
                entity_type=entity_type,
            )
        return body.results

    def _send(
        self,
        method: str,
        url: str,
        entity_type: EntityType,
        *,
        params: dict[str, object] | None = None,
        json: object = None,
    ) -> httpx.Response:
        log.debug("%s %s", method, url)
        try:
            if json is None:
                response = self._client.request(method, url, params=params)
            else:
                response = self._client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            raise StoreError(
                f"Record service request {method} {url} failed: {exc}",
                entity_type=entity_type,
            ) from exc
        _raise_for_status(response, entity_type)
        return response


def _raise_for_status(response: httpx.Response, entity_type: EntityType) -> None:
    if response.status_code < 400:
        return
    message = _error_message(response)
    status = response.status_code
    if status == 404:
        raise NotFoundError(message, entity_type=entity_type)
    if status in _PERMISSION_STATUSES:
        raise StorePermissionError(message, entity_type=entity_type)
    if status in _VALIDATION_STATUSES:
        raise StoreValidationError(message, entity_type=entity_type)
    raise StoreError(message, entity_type=entity_type)


def _error_message(response: httpx.Response) -> str:
    prefix = f"Record service returned {response.status_code}"
    try:
        body = ErrorResponse.model_validate_json(response.content)
    except ValidationError:
        return f"{prefix}: {response.text[:200]}" if response.text else prefix
    return f"{prefix}: {body.describe()}"


def _parse[TModel: (QueryResponse, WriteResponse)](
    model: type[TModel],
    response: httpx.Response,
    entity_type: EntityType,
) -> TModel:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise StoreError(
            f"Unexpected record service payload: {exc.error_count()} validation errors",
            entity_type=entity_type,
        ) from exc


def _group_by_type(entities: Sequence[Record]) -> dict[EntityType, list[Record]]:
    groups: dict[EntityType, list[Record]] = {}
    for entity in entities:
        groups.setdefault(entity.entity_type, []).append(entity)
    return groups


if TYPE_CHECKING:
    from keyrecon.domain.ports import StoreGateway

    _store_check: StoreGateway = HttpStoreGateway(client=None)  # type: ignore[arg-type]
