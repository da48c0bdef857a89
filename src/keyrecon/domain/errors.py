"""Error taxonomy shared by the engine and the store adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from keyrecon.domain.model import EntityType, Record


class StoreError(RuntimeError):
    """Raised by a store gateway when a read or write fails."""

    def __init__(self, message: str, *, entity_type: EntityType | None = None) -> None:
        super().__init__(message)
        self.entity_type = entity_type


class NotFoundError(StoreError):
    """A key or identifier does not resolve in the store."""


class StoreValidationError(StoreError):
    """The store rejected a write (missing required field, id misuse, constraint)."""


class StorePermissionError(StoreError):
    """The store denied access to the requested records."""


class ReconciliationError(RuntimeError):
    """Raised when the engine cannot classify or bind records safely."""


class AmbiguousMatchError(ReconciliationError):
    """More than one stored record shares a natural key expected to be unique."""

    def __init__(self, entity_type: EntityType, key: str, matches: Sequence[Record]) -> None:
        ids = ", ".join(str(match.id) for match in matches)
        super().__init__(f"{len(matches)} {entity_type} records match key {key!r} (ids: {ids})")
        self.entity_type = entity_type
        self.key = key
        self.matches = tuple(matches)


class UnresolvedParentError(ReconciliationError):
    """A child would be bound to a parent that has no store identifier yet."""


class ReadAfterWriteError(ReconciliationError):
    """A re-read did not observe records that were just created."""
