"""
Base building blocks:
store identity and natural-key semantics.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, ClassVar, Self

if TYPE_CHECKING:
    from keyrecon.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Record:
    """A mutable store record.

    ``id`` is assigned by the store and is present iff the record is persisted.
    Reconciliation matches records by ``natural_key``, never by ``id``.
    """

    id: int | None = None

    # class-level discriminators; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]
    KEY_FIELD: ClassVar[str]
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ()

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    @property
    def natural_key(self) -> str | None:
        return getattr(self, self.KEY_FIELD)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Names of the data fields, ``id`` excluded."""
        return tuple(f.name for f in fields(cls) if f.name != "id")

    def field_values(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in self.field_names()}

    def missing_required_fields(self) -> tuple[str, ...]:
        missing: list[str] = []
        for name in self.REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return tuple(missing)

    def clone(self) -> Self:
        """Return an independent copy built through ``__init__``."""
        return type(self)(id=self.id, **self.field_values())
