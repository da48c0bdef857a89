from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from keyrecon.app import link_contacts, purge_contacts, reconcile_account_names, upsert_account
from keyrecon.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile records against the record store")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upsert = subparsers.add_parser("upsert-account", help="Get or create one account by name")
    upsert.add_argument("name", type=str, help="Account name")

    reconcile = subparsers.add_parser(
        "reconcile-accounts",
        help="Upsert a batch of accounts by name",
    )
    reconcile.add_argument("names", nargs="+", type=str, help="Account names")
    reconcile.add_argument(
        "--description",
        type=str,
        help="Description written to every account in the batch",
    )

    link = subparsers.add_parser(
        "link-contacts",
        help="Create contacts and attach them to accounts, creating missing accounts",
    )
    link.add_argument(
        "contacts",
        nargs="+",
        type=_parse_contact,
        metavar="LAST:COMPANY",
        help="Contact last name and account name; leave COMPANY empty to skip linking",
    )

    purge = subparsers.add_parser(
        "purge-contacts",
        help="Create contacts on an account, then delete every contact it holds",
    )
    purge.add_argument("account_id", type=int, help="Account id")
    purge.add_argument(
        "--count",
        type=int,
        required=True,
        help="Number of contacts to create before deleting",
    )

    return parser.parse_args(list(argv))


def _parse_contact(value: str) -> tuple[str, str | None]:
    last_name, separator, company = value.partition(":")
    if not separator or not last_name.strip():
        raise argparse.ArgumentTypeError(f"Expected LAST:COMPANY, got {value!r}")
    return last_name.strip(), company.strip() or None


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    if parsed_args.command == "purge-contacts" and parsed_args.count < 0:
        log.error("--count must be non-negative")
        sys.exit(2)

    try:
        if parsed_args.command == "upsert-account":
            result = upsert_account(parsed_args.name)
            account = result.entity
            print(f"{account.id}\t{account.name}\t{account.description}")  # noqa: T201
        elif parsed_args.command == "reconcile-accounts":
            reconciled = reconcile_account_names(
                parsed_args.names,
                description=parsed_args.description,
            )
            for account in reconciled.entities:
                print(f"{account.id}\t{account.name}")  # noqa: T201
        elif parsed_args.command == "link-contacts":
            linked = link_contacts(parsed_args.contacts)
            for contact in linked.children:
                account_id = contact.account_id or ""
                print(f"{contact.id}\t{contact.last_name}\t{account_id}")  # noqa: T201
        elif parsed_args.command == "purge-contacts":
            deleted = purge_contacts(parsed_args.account_id, parsed_args.count)
            print(deleted)  # noqa: T201
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
