"""Facade for the reconciliation subsystem.

The engine binds one store gateway and the configured policies. It does not
prescribe concrete adapters: any ``StoreGateway`` works, so the SQL, REST and
in-memory stores share one reconciliation core.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .contracts import DuplicateKeyPolicy, IntraBatchPolicy
from .index import build_index
from .lifecycle import create_then_delete
from .reconcile import reconcile
from .single import get_or_create

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

    from .contracts import (
        DesiredEntity,
        GetOrCreateResult,
        KeyIndex,
        LinkResult,
        ReconcileResult,
        Transform,
    )
    from .lifecycle import TransientBatch
    from .link import AssociationLinker


@dataclass(slots=True)
class ReconciliationEngine:
    """Run reconciliation stages against one store."""

    store: StoreGateway
    duplicate_key_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE
    intra_batch_policy: IntraBatchPolicy = IntraBatchPolicy.MERGE

    def build_index[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        keys: Iterable[str | None],
    ) -> KeyIndex[TRecord]:
        return build_index(self.store, entity_cls, keys, policy=self.duplicate_key_policy)

    def reconcile[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        desired: Sequence[DesiredEntity],
        transform: Transform[TRecord] | None = None,
    ) -> ReconcileResult[TRecord]:
        """Index the desired keys, then reconcile; the read always precedes the write."""

        index = self.build_index(entity_cls, (item.key for item in desired))
        return reconcile(
            self.store,
            entity_cls,
            desired,
            index,
            transform,
            policy=self.intra_batch_policy,
        )

    def get_or_create[TRecord: Record](
        self,
        entity_cls: type[TRecord],
        key: str,
        *,
        on_existing: Transform[TRecord] | None = None,
        on_new: Transform[TRecord] | None = None,
        transform: Transform[TRecord] | None = None,
    ) -> GetOrCreateResult[TRecord]:
        return get_or_create(
            self.store,
            entity_cls,
            key,
            on_existing=on_existing,
            on_new=on_new,
            transform=transform,
            policy=self.duplicate_key_policy,
        )

    def link[TChild: Record, TParent: Record](
        self,
        linker: AssociationLinker[TChild, TParent],
        children: Sequence[TChild],
    ) -> LinkResult[TChild, TParent]:
        return linker.link(self.store, children, policy=self.duplicate_key_policy)

    def create_then_delete[TRecord: Record](
        self,
        batch: TransientBatch[TRecord],
        count: int,
    ) -> int:
        return create_then_delete(self.store, batch, count)
