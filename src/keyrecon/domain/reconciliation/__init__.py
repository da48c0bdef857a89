"""Reconciliation core: upsert records by natural key against a store.

Layered flow for one call:
1) build a key index with one filtered read
2) classify desired items as update-existing or create-new
3) apply field transforms
4) write the whole batch in one upsert

Associations run as a separate two-stage pipeline (``link``): parents are
resolved and committed before children are bound to their ids.
"""

from __future__ import annotations

from .contracts import (
    DesiredEntity,
    DuplicateKeyPolicy,
    GetOrCreateResult,
    IntraBatchPolicy,
    LinkResult,
    ReconcileResult,
)
from .engine import ReconciliationEngine
from .index import build_index
from .lifecycle import TransientBatch, create_then_delete
from .link import AssociationLinker
from .reconcile import reconcile
from .single import get_or_create

__all__ = [
    "AssociationLinker",
    "DesiredEntity",
    "DuplicateKeyPolicy",
    "GetOrCreateResult",
    "IntraBatchPolicy",
    "LinkResult",
    "ReconcileResult",
    "ReconciliationEngine",
    "TransientBatch",
    "build_index",
    "create_then_delete",
    "get_or_create",
    "reconcile",
]
