from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from keyrecon.domain.errors import AmbiguousMatchError
from keyrecon.domain.model import Account
from keyrecon.domain.reconciliation import DuplicateKeyPolicy, get_or_create
from tests.helpers.records import seed_accounts

if TYPE_CHECKING:
    from collections.abc import Callable

    from keyrecon.adapters.memory import InMemoryStoreGateway


def _label(text: str) -> Callable[[Account], None]:
    def apply(account: Account) -> None:
        account.description = text

    return apply


def test_get_or_create_creates_missing_record(memory_store: InMemoryStoreGateway) -> None:
    result = get_or_create(
        memory_store,
        Account,
        "Umbrella",
        on_existing=_label("old"),
        on_new=_label("new"),
    )

    assert result.created is True
    assert result.entity.id is not None
    assert result.entity.description == "new"
    assert memory_store.calls == {"query": 1, "upsert": 1}


def test_get_or_create_updates_existing_record(memory_store: InMemoryStoreGateway) -> None:
    (umbrella,) = seed_accounts(memory_store, "Umbrella")

    result = get_or_create(
        memory_store,
        Account,
        "Umbrella",
        on_existing=_label("old"),
        on_new=_label("new"),
    )

    assert result.created is False
    assert result.entity.id == umbrella.id
    (stored,) = memory_store.query(Account, "id", {umbrella.id})
    assert stored.description == "old"


def test_get_or_create_runs_transform_after_branch_hook(
    memory_store: InMemoryStoreGateway,
) -> None:
    calls: list[str] = []

    def on_new(account: Account) -> None:
        calls.append(f"new:{account.name}")

    def transform(account: Account) -> None:
        calls.append(f"transform:{account.name}")

    get_or_create(memory_store, Account, "Umbrella", on_new=on_new, transform=transform)

    assert calls == ["new:Umbrella", "transform:Umbrella"]


def test_get_or_create_rejects_blank_key(memory_store: InMemoryStoreGateway) -> None:
    with pytest.raises(ValueError, match="must not be blank"):
        get_or_create(memory_store, Account, "   ")

    assert memory_store.calls["query"] == 0


def test_get_or_create_honours_duplicate_policy(memory_store: InMemoryStoreGateway) -> None:
    _first, second = seed_accounts(memory_store, "Umbrella", "Umbrella")

    with pytest.raises(AmbiguousMatchError):
        get_or_create(memory_store, Account, "Umbrella")

    result = get_or_create(
        memory_store,
        Account,
        "Umbrella",
        policy=DuplicateKeyPolicy.LAST_WINS,
    )
    assert result.entity.id == second.id
