"""Reconciliation policy defaults."""

from __future__ import annotations

from dataclasses import dataclass

from keyrecon.domain.reconciliation import DuplicateKeyPolicy, IntraBatchPolicy

from .env import env_choice


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    duplicate_key_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE
    intra_batch_policy: IntraBatchPolicy = IntraBatchPolicy.MERGE


def get_reconcile_config() -> ReconcileConfig:
    return ReconcileConfig(
        duplicate_key_policy=env_choice(
            "KEYRECON_DUPLICATE_KEYS",
            DuplicateKeyPolicy,
            DuplicateKeyPolicy.RAISE,
        ),
        intra_batch_policy=env_choice(
            "KEYRECON_INTRA_BATCH",
            IntraBatchPolicy,
            IntraBatchPolicy.MERGE,
        ),
    )
