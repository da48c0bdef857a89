"""Association linker.

Binds child records to parent records whose natural key equals a value derived
from the child (for example ``Contact.company`` to ``Account.name``).

The work is a two-stage pipeline because parent ids only exist after a write:

1) resolve parents: index the derived keys, build the missing parents, create
   them in one batch
2) bind children: copy each parent's post-commit id onto its children, then
   upsert all children in one batch

The stages never interleave.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from keyrecon.domain.errors import UnresolvedParentError

from .contracts import DuplicateKeyPolicy, LinkResult
from .index import build_index
from .reconcile import unique_records

if TYPE_CHECKING:
    from collections.abc import Iterable, MutableMapping, Sequence

    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

log = getLogger(__name__)

type ParentKeyFn[TChild: Record] = Callable[[TChild], str | None]


def is_blank(key: str | None) -> bool:
    return key is None or not key.strip()


@dataclass(slots=True, frozen=True)
class AssociationLinker[TChild: Record, TParent: Record]:
    """Resolve and assign a child's foreign key by natural-key match."""

    parent_cls: type[TParent]
    parent_key: ParentKeyFn[TChild]
    foreign_key_field: str

    def parent_keys(self, children: Iterable[TChild]) -> set[str]:
        keys: set[str] = set()
        for child in children:
            key = self.parent_key(child)
            if key is not None and not is_blank(key):
                keys.add(key)
        return keys

    def collect_missing_parents(
        self,
        children: Iterable[TChild],
        parent_index: MutableMapping[str, TParent],
    ) -> list[TParent]:
        """Pass 1: build parents absent from ``parent_index``.

        New parents are registered in the index straight away, so later
        children that share a key reuse the same parent.
        """

        parents_to_create: list[TParent] = []
        for child in children:
            key = self.parent_key(child)
            if key is None or is_blank(key) or key in parent_index:
                continue
            parent = self.parent_cls(**{self.parent_cls.KEY_FIELD: key})
            parent_index[key] = parent
            parents_to_create.append(parent)
        return parents_to_create

    def assign_parent_ids(
        self,
        children: Iterable[TChild],
        parent_index: MutableMapping[str, TParent],
    ) -> int:
        """Pass 2: copy parent ids onto children. Returns the number linked."""

        linked = 0
        for child in children:
            key = self.parent_key(child)
            if key is None or is_blank(key):
                continue
            parent = parent_index.get(key)
            if parent is None or parent.id is None:
                raise UnresolvedParentError(
                    f"{self.parent_cls.ENTITY_TYPE} {key!r} has no id; "
                    "persist missing parents before binding children"
                )
            setattr(child, self.foreign_key_field, parent.id)
            linked += 1
        return linked

    def link(
        self,
        store: StoreGateway,
        children: Sequence[TChild],
        *,
        policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE,
    ) -> LinkResult[TChild, TParent]:
        """Run both stages and upsert every child in one batch."""

        parent_index = build_index(
            store,
            self.parent_cls,
            self.parent_keys(children),
            policy=policy,
        )

        parents_to_create = self.collect_missing_parents(children, parent_index)
        if parents_to_create:
            store.create(parents_to_create)
        log.debug(
            "Resolved %s parents: %s existing, %s created",
            self.parent_cls.ENTITY_TYPE,
            len(parent_index) - len(parents_to_create),
            len(parents_to_create),
        )

        linked = self.assign_parent_ids(children, parent_index)
        if children:
            store.upsert(unique_records(children))

        result: LinkResult[TChild, TParent] = LinkResult(
            children=list(children),
            created_parents=parents_to_create,
            linked=linked,
            skipped=len(children) - linked,
        )
        log.info(
            "Linked %s of %s children to %s (created %s parents, skipped %s)",
            result.linked,
            len(children),
            self.parent_cls.ENTITY_TYPE,
            len(result.created_parents),
            result.skipped,
        )
        return result
