"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from keyrecon.adapters.rest import HttpStoreUnitOfWork
from keyrecon.adapters.sqlalchemy import SqlAlchemyUnitOfWork, is_started, startup
from keyrecon.config import ReconcileConfig, StoreBackend, get_reconcile_config, get_store_backend
from keyrecon.domain.model import Contact
from keyrecon.domain.operations import (
    create_then_delete_contacts,
    link_contacts_to_accounts,
    reconcile_accounts,
    upsert_account_by_name,
)
from keyrecon.domain.ports import StoreUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from keyrecon.domain.model import Account
    from keyrecon.domain.reconciliation import GetOrCreateResult, LinkResult, ReconcileResult

UnitOfWorkFactory = Callable[[], StoreUnitOfWork]


log = getLogger(__name__)


def default_unit_of_work_factory(backend: StoreBackend | None = None) -> UnitOfWorkFactory:
    """Return the unit-of-work factory for the configured store backend."""

    resolved = backend or get_store_backend()
    if resolved is StoreBackend.HTTP:
        return HttpStoreUnitOfWork
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def upsert_account(
    name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconcileConfig | None = None,
) -> GetOrCreateResult[Account]:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    policy = (config or get_reconcile_config()).duplicate_key_policy
    with effective_uow() as uow:
        result = upsert_account_by_name(uow.store, name, policy=policy)
        uow.commit()
    log.info(
        "Upserted account %r: id=%s, created=%s",
        name,
        result.entity.id,
        result.created,
    )
    return result


def reconcile_account_names(
    names: Iterable[str],
    *,
    description: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconcileConfig | None = None,
) -> ReconcileResult[Account]:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    effective_config = config or get_reconcile_config()
    with effective_uow() as uow:
        result = reconcile_accounts(
            uow.store,
            names,
            description=description,
            duplicate_key_policy=effective_config.duplicate_key_policy,
            intra_batch_policy=effective_config.intra_batch_policy,
        )
        uow.commit()
    log.info(
        "Reconciled accounts: total=%s, created=%s, updated=%s",
        len(result.entities),
        len(result.created),
        len(result.updated),
    )
    return result


def link_contacts(
    contacts: Sequence[tuple[str, str | None]],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconcileConfig | None = None,
) -> LinkResult[Contact, Account]:
    """Create contacts from ``(last_name, company)`` pairs, linked to their accounts."""

    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    policy = (config or get_reconcile_config()).duplicate_key_policy
    records = [Contact(last_name=last_name, company=company) for last_name, company in contacts]
    with effective_uow() as uow:
        result = link_contacts_to_accounts(uow.store, records, policy=policy)
        uow.commit()
    log.info(
        "Linked contacts: linked=%s, skipped=%s, new accounts=%s",
        result.linked,
        result.skipped,
        len(result.created_parents),
    )
    return result


def purge_contacts(
    account_id: int,
    count: int,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    with effective_uow() as uow:
        deleted = create_then_delete_contacts(uow.store, account_id, count)
        uow.commit()
    log.info("Created and deleted %s contacts on account %s", deleted, account_id)
    return deleted
