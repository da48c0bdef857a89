"""Single-entity get-or-create by natural key.

The batch reconciler with a batch of one: a single-key index read, the same
classification, and one upsert. Branch hooks let callers record which path
fired in persisted state.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import DuplicateKeyPolicy, GetOrCreateResult
from .index import build_index

if TYPE_CHECKING:
    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

    from .contracts import Transform

log = getLogger(__name__)


def get_or_create[TRecord: Record](
    store: StoreGateway,
    entity_cls: type[TRecord],
    key: str,
    *,
    on_existing: Transform[TRecord] | None = None,
    on_new: Transform[TRecord] | None = None,
    transform: Transform[TRecord] | None = None,
    policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE,
) -> GetOrCreateResult[TRecord]:
    """Fetch the record keyed by ``key`` or build it, then upsert it.

    ``on_existing`` runs only on the update path, ``on_new`` only on the create
    path, ``transform`` on both (after the branch hook).
    """

    if not key or not key.strip():
        raise ValueError(f"{entity_cls.ENTITY_TYPE} natural key must not be blank")

    index = build_index(store, entity_cls, (key,), policy=policy)
    entity = index.get(key)
    created = entity is None
    if entity is None:
        entity = entity_cls(**{entity_cls.KEY_FIELD: key})
        if on_new is not None:
            on_new(entity)
    elif on_existing is not None:
        on_existing(entity)

    if transform is not None:
        transform(entity)

    store.upsert([entity])
    log.info(
        "%s %s %r (id=%s)",
        "Created" if created else "Updated",
        entity_cls.ENTITY_TYPE,
        key,
        entity.id,
    )
    return GetOrCreateResult(entity=entity, created=created)
