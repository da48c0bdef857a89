from __future__ import annotations

import pytest

from keyrecon import main as main_module
from keyrecon.config import ConfigurationError
from keyrecon.domain.model import Account, Contact
from keyrecon.domain.reconciliation import GetOrCreateResult, LinkResult, ReconcileResult


def test_upsert_account_command_prints_result(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: list[str] = []

    def fake_upsert(name: str) -> GetOrCreateResult[Account]:
        captured.append(name)
        return GetOrCreateResult(Account(id=3, name=name, description="New Account"), created=True)

    monkeypatch.setattr(main_module, "upsert_account", fake_upsert)

    main_module.main(["upsert-account", "Umbrella"])

    assert captured == ["Umbrella"]
    assert capsys.readouterr().out == "3\tUmbrella\tNew Account\n"


def test_reconcile_accounts_command_passes_description(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_reconcile(names: list[str], *, description: str | None) -> ReconcileResult[Account]:
        captured.update(names=names, description=description)
        return ReconcileResult()

    monkeypatch.setattr(main_module, "reconcile_account_names", fake_reconcile)

    main_module.main(["reconcile-accounts", "Acme", "Globex", "--description", "synced"])

    assert captured == {"names": ["Acme", "Globex"], "description": "synced"}


def test_link_contacts_command_parses_pairs(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[tuple[str, str | None]] = []

    def fake_link(pairs: list[tuple[str, str | None]]) -> LinkResult[Contact, Account]:
        captured.extend(pairs)
        return LinkResult()

    monkeypatch.setattr(main_module, "link_contacts", fake_link)

    main_module.main(["link-contacts", "Doe:Acme", " Solo : "])

    assert captured == [("Doe", "Acme"), ("Solo", None)]


def test_link_contacts_command_rejects_malformed_pair() -> None:
    with pytest.raises(SystemExit) as exc:
        main_module.main(["link-contacts", "Doe"])

    assert exc.value.code == 2


def test_purge_contacts_command_rejects_negative_count(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_purge(*_: object) -> int:
        raise AssertionError("should not be called")

    monkeypatch.setattr(main_module, "purge_contacts", fake_purge)

    with pytest.raises(SystemExit) as exc:
        main_module.main(["purge-contacts", "1", "--count", "-1"])

    assert exc.value.code == 2


def test_configuration_errors_exit_with_usage_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_upsert(_name: str) -> GetOrCreateResult[Account]:
        raise ConfigurationError("KEYRECON_STORE_BACKEND='mongo' is not valid")

    monkeypatch.setattr(main_module, "upsert_account", fake_upsert)

    with pytest.raises(SystemExit) as exc:
        main_module.main(["upsert-account", "Acme"])

    assert exc.value.code == 2


def test_runtime_errors_exit_with_failure_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_purge(_account_id: int, _count: int) -> int:
        raise RuntimeError("store down")

    monkeypatch.setattr(main_module, "purge_contacts", fake_purge)

    with pytest.raises(SystemExit) as exc:
        main_module.main(["purge-contacts", "1", "--count", "2"])

    assert exc.value.code == 1
