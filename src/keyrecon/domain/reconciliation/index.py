"""Key index builder.

Responsibilities of this stage:
- issue exactly one filtered read for a set of natural keys
- map each natural key to the stored record carrying it
- apply the duplicate-key policy when the store returns a key twice

Out of scope for this stage:
- classification of desired items (see ``reconcile``)
- any write
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from keyrecon.domain.errors import AmbiguousMatchError

from .contracts import DuplicateKeyPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable

    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

    from .contracts import KeyIndex

log = getLogger(__name__)


def build_index[TRecord: Record](
    store: StoreGateway,
    entity_cls: type[TRecord],
    keys: Iterable[str | None],
    *,
    policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE,
) -> KeyIndex[TRecord]:
    """Return a call-scoped mapping from natural key to existing record.

    An empty key set returns an empty mapping without reading the store.
    """

    key_set = {key for key in keys if key is not None}
    if not key_set:
        return {}

    records = store.query(entity_cls, entity_cls.KEY_FIELD, key_set)
    log.debug(
        "Indexed %s: %s keys requested, %s records returned",
        entity_cls.ENTITY_TYPE,
        len(key_set),
        len(records),
    )

    index: KeyIndex[TRecord] = {}
    duplicates: dict[str, list[TRecord]] = {}
    for record in records:
        key = record.natural_key
        if key is None:
            continue
        previous = index.get(key)
        if previous is not None and previous is not record:
            duplicates.setdefault(key, [previous]).append(record)
        index[key] = record

    if duplicates:
        if policy is DuplicateKeyPolicy.RAISE:
            key, matches = next(iter(duplicates.items()))
            raise AmbiguousMatchError(entity_cls.ENTITY_TYPE, key, matches)
        log.warning(
            "Duplicate %s keys resolved last-wins: %s",
            entity_cls.ENTITY_TYPE,
            sorted(duplicates),
        )
    return index
