from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from keyrecon import app
from keyrecon.adapters.rest import HttpStoreUnitOfWork
from keyrecon.adapters.sqlalchemy import SqlAlchemyUnitOfWork, is_started, shutdown
from keyrecon.config import ReconcileConfig, StoreBackend
from keyrecon.domain.errors import AmbiguousMatchError, NotFoundError
from keyrecon.domain.model import Account, AccountMarker, Contact
from keyrecon.domain.reconciliation import DuplicateKeyPolicy, IntraBatchPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def reset_adapter() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


@pytest.mark.usefixtures("reset_adapter")
def test_default_factory_starts_sqlalchemy_adapter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.delenv("KEYRECON_STORE_BACKEND", raising=False)

    factory = app.default_unit_of_work_factory()

    assert factory is SqlAlchemyUnitOfWork
    assert is_started()


def test_default_factory_selects_http_backend() -> None:
    assert app.default_unit_of_work_factory(StoreBackend.HTTP) is HttpStoreUnitOfWork


def test_upsert_account_commits_marker(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    first = app.upsert_account("Umbrella", unit_of_work_factory=sqlite_unit_of_work)
    second = app.upsert_account("Umbrella", unit_of_work_factory=sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        (stored,) = uow.store.query(Account, "name", {"Umbrella"})

    assert first.created is True
    assert second.created is False
    assert stored.id == first.entity.id
    assert stored.description == AccountMarker.UPDATED


def test_reconcile_account_names_uses_configured_policies(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    config = ReconcileConfig(intra_batch_policy=IntraBatchPolicy.INDEPENDENT)

    result = app.reconcile_account_names(
        ["Initech", "Initech"],
        description="batch",
        unit_of_work_factory=sqlite_unit_of_work,
        config=config,
    )

    assert len(result.created) == 2
    with pytest.raises(AmbiguousMatchError):
        app.reconcile_account_names(
            ["Initech"],
            unit_of_work_factory=sqlite_unit_of_work,
            config=ReconcileConfig(),
        )

    relaxed = ReconcileConfig(duplicate_key_policy=DuplicateKeyPolicy.LAST_WINS)
    rerun = app.reconcile_account_names(
        ["Initech"],
        unit_of_work_factory=sqlite_unit_of_work,
        config=relaxed,
    )
    assert rerun.entities[0].id == result.entities[1].id


def test_reconcile_account_names_logs_summary_lazily(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level("INFO", logger="keyrecon.app")

    app.reconcile_account_names(["Hooli"], unit_of_work_factory=sqlite_unit_of_work)

    (record,) = [r for r in caplog.records if r.msg.startswith("Reconciled accounts")]
    assert record.args == (1, 1, 0)
    assert record.getMessage() == "Reconciled accounts: total=1, created=1, updated=0"


def test_link_contacts_persists_children_and_parents(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    result = app.link_contacts(
        [("Doe", "Doe"), ("Doe", "Doe"), ("Jane", "Jane"), ("Solo", None)],
        unit_of_work_factory=sqlite_unit_of_work,
        config=ReconcileConfig(),
    )

    with sqlite_unit_of_work() as uow:
        accounts = uow.store.query(Account, "name", {"Doe", "Jane"})
        contacts = uow.store.query(Contact, "last_name", {"Doe", "Jane", "Solo"})

    assert len(accounts) == 2
    assert len(contacts) == 4
    assert result.skipped == 1
    ids = {contact.last_name: contact.account_id for contact in contacts}
    assert ids["Solo"] is None
    assert {ids["Doe"], ids["Jane"]} == {account.id for account in accounts}


def test_purge_contacts_rolls_back_on_unknown_account(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with pytest.raises(NotFoundError):
        app.purge_contacts(404, 2, unit_of_work_factory=sqlite_unit_of_work)


def test_purge_contacts_deletes_everything_it_created(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    account = app.upsert_account("Acme", unit_of_work_factory=sqlite_unit_of_work).entity

    deleted = app.purge_contacts(
        account.id,  # type: ignore[arg-type]
        3,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    with sqlite_unit_of_work() as uow:
        remaining = uow.store.query(Contact, "account_id", {account.id})
    assert deleted == 3
    assert remaining == []
