from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from keyrecon.domain.errors import AmbiguousMatchError
from keyrecon.domain.model import Account, Contact
from keyrecon.domain.reconciliation import (
    AssociationLinker,
    DesiredEntity,
    DuplicateKeyPolicy,
    IntraBatchPolicy,
    ReconciliationEngine,
    TransientBatch,
)
from tests.helpers.records import seed_accounts

if TYPE_CHECKING:
    from keyrecon.adapters.memory import InMemoryStoreGateway


def test_engine_reconcile_reads_once_then_writes_once(
    memory_store: InMemoryStoreGateway,
) -> None:
    seed_accounts(memory_store, "Acme")
    memory_store.calls.clear()
    engine = ReconciliationEngine(memory_store)

    result = engine.reconcile(
        Account,
        [DesiredEntity(key="Acme"), DesiredEntity(key="Globex"), DesiredEntity(key="Globex")],
    )

    assert memory_store.calls == {"query": 1, "upsert": 1}
    assert len(result.created) == 1
    assert len(result.updated) == 1


def test_engine_applies_configured_policies(memory_store: InMemoryStoreGateway) -> None:
    seed_accounts(memory_store, "Acme", "Acme")
    strict = ReconciliationEngine(memory_store)
    lenient = ReconciliationEngine(
        memory_store,
        duplicate_key_policy=DuplicateKeyPolicy.LAST_WINS,
        intra_batch_policy=IntraBatchPolicy.INDEPENDENT,
    )

    with pytest.raises(AmbiguousMatchError):
        strict.reconcile(Account, [DesiredEntity(key="Acme")])

    result = lenient.reconcile(Account, [DesiredEntity(key="New"), DesiredEntity(key="New")])
    assert len(result.created) == 2


def test_engine_delegates_get_or_create_link_and_lifecycle(
    memory_store: InMemoryStoreGateway,
) -> None:
    engine = ReconciliationEngine(memory_store)

    account = engine.get_or_create(Account, "Acme").entity
    linker: AssociationLinker[Contact, Account] = AssociationLinker(
        parent_cls=Account,
        parent_key=lambda contact: contact.company,
        foreign_key_field="account_id",
    )
    linked = engine.link(linker, [Contact(last_name="Doe", company="Acme")])
    deleted = engine.create_then_delete(
        TransientBatch(
            entity_cls=Contact,
            filter_field="account_id",
            filter_value=account.id,
            build=lambda position: Contact(last_name=f"Temp {position}"),
        ),
        2,
    )

    assert linked.children[0].account_id == account.id
    assert deleted == 3
    assert engine.build_index(Contact, ["Doe"]) == {}
