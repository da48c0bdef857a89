"""Single-record operations on accounts, contacts and opportunities.

Each operation takes the store gateway explicitly; none of them commits.
Commit boundaries belong to the caller's unit of work (see ``keyrecon.app``).
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from keyrecon.domain.errors import NotFoundError
from keyrecon.domain.model import Account, AccountMarker, Contact, Opportunity, OpportunityStage
from keyrecon.domain.reconciliation import (
    AssociationLinker,
    DesiredEntity,
    DuplicateKeyPolicy,
    GetOrCreateResult,
    IntraBatchPolicy,
    LinkResult,
    ReconcileResult,
    ReconciliationEngine,
    TransientBatch,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import date
    from decimal import Decimal

    from keyrecon.domain.model import Record
    from keyrecon.domain.ports import StoreGateway

log = getLogger(__name__)


def get_record[TRecord: Record](
    store: StoreGateway,
    entity_cls: type[TRecord],
    record_id: int,
) -> TRecord:
    """Return the record with ``record_id`` or raise ``NotFoundError``."""

    matches = store.query(entity_cls, "id", {record_id})
    if not matches:
        raise NotFoundError(
            f"No {entity_cls.ENTITY_TYPE} with id {record_id}",
            entity_type=entity_cls.ENTITY_TYPE,
        )
    return matches[0]


def create_account(store: StoreGateway, name: str, **fields: object) -> Account:
    account = Account(name=name, **fields)  # pyright: ignore[reportArgumentType]
    store.create([account])
    log.info("Created account %r (id=%s)", name, account.id)
    return account


def update_account(store: StoreGateway, account_id: int, **fields: object) -> Account:
    account = get_record(store, Account, account_id)
    for name, value in fields.items():
        setattr(account, name, value)
    store.update([account])
    return account


def create_account_with_opportunity(
    store: StoreGateway,
    account_name: str,
    opportunity_name: str,
    *,
    close_date: date | None = None,
    amount: Decimal | None = None,
) -> tuple[Account, Opportunity]:
    """Create an account, then an opportunity in qualification bound to it."""

    account = create_account(store, account_name)
    opportunity = Opportunity(
        name=opportunity_name,
        stage=OpportunityStage.QUALIFICATION,
        close_date=close_date,
        amount=amount,
        account_id=account.id,
    )
    store.create([opportunity])
    return account, opportunity


def upsert_account_by_name(
    store: StoreGateway,
    name: str,
    *,
    policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE,
) -> GetOrCreateResult[Account]:
    """Get or create one account by name.

    The description records which branch ran: ``AccountMarker.UPDATED`` when
    the account already existed, ``AccountMarker.NEW`` when it was created.
    """

    engine = ReconciliationEngine(store, duplicate_key_policy=policy)
    return engine.get_or_create(
        Account,
        name,
        on_existing=_mark(AccountMarker.UPDATED),
        on_new=_mark(AccountMarker.NEW),
    )


def reconcile_accounts(
    store: StoreGateway,
    names: Iterable[str],
    *,
    description: str | None = None,
    duplicate_key_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE,
    intra_batch_policy: IntraBatchPolicy = IntraBatchPolicy.MERGE,
) -> ReconcileResult[Account]:
    """Upsert accounts by name in one read and one write."""

    engine = ReconciliationEngine(
        store,
        duplicate_key_policy=duplicate_key_policy,
        intra_batch_policy=intra_batch_policy,
    )
    desired = [DesiredEntity(key=name) for name in names]
    transform = None if description is None else _describe(description)
    return engine.reconcile(Account, desired, transform)


def find_contacts_by_last_name(store: StoreGateway, last_names: Iterable[str]) -> list[Contact]:
    return store.query(Contact, Contact.KEY_FIELD, set(last_names))


CONTACT_ACCOUNT_LINKER: AssociationLinker[Contact, Account] = AssociationLinker(
    parent_cls=Account,
    parent_key=lambda contact: contact.company,
    foreign_key_field="account_id",
)


def link_contacts_to_accounts(
    store: StoreGateway,
    contacts: Sequence[Contact],
    *,
    policy: DuplicateKeyPolicy = DuplicateKeyPolicy.RAISE,
) -> LinkResult[Contact, Account]:
    """Attach each contact to the account named by its ``company`` field.

    Missing accounts are created; contacts with a blank company are left
    unassociated.
    """

    return CONTACT_ACCOUNT_LINKER.link(store, contacts, policy=policy)


def create_then_delete_contacts(store: StoreGateway, account_id: int, count: int) -> int:
    """Create ``count`` contacts on an account, then delete every contact it holds."""

    account = get_record(store, Account, account_id)
    batch = TransientBatch(
        entity_cls=Contact,
        filter_field="account_id",
        filter_value=account.id,
        build=lambda position: Contact(last_name=f"{account.name} contact {position + 1}"),
    )
    engine = ReconciliationEngine(store)
    return engine.create_then_delete(batch, count)


def _mark(marker: AccountMarker) -> Callable[[Account], None]:
    def apply(account: Account) -> None:
        account.description = marker

    return apply


def _describe(description: str) -> Callable[[Account], None]:
    def apply(account: Account) -> None:
        account.description = description

    return apply
