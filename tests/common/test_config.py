from __future__ import annotations

import pytest

from keyrecon.config import (
    ConfigurationError,
    MissingConfigurationError,
    StoreBackend,
    env_choice,
    get_reconcile_config,
    get_store_api_config,
    get_store_backend,
    require_env_var,
    require_env_vars,
)
from keyrecon.domain.reconciliation import DuplicateKeyPolicy, IntraBatchPolicy


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_reports_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert exc.value.variables == ("MISSING_A", "MISSING_B")
    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_env_choice_defaults_and_normalises_case(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KEYRECON_STORE_BACKEND", raising=False)
    assert env_choice("KEYRECON_STORE_BACKEND", StoreBackend, StoreBackend.SQLALCHEMY) is (
        StoreBackend.SQLALCHEMY
    )

    monkeypatch.setenv("KEYRECON_STORE_BACKEND", " HTTP ")
    assert get_store_backend() is StoreBackend.HTTP


def test_env_choice_rejects_unknown_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYRECON_STORE_BACKEND", "mongo")

    with pytest.raises(ConfigurationError, match="sqlalchemy, http") as exc:
        get_store_backend()

    assert not isinstance(exc.value, MissingConfigurationError)
    assert exc.value.variables == ("KEYRECON_STORE_BACKEND",)


def test_reconcile_config_reads_policies(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KEYRECON_DUPLICATE_KEYS", raising=False)
    monkeypatch.delenv("KEYRECON_INTRA_BATCH", raising=False)
    defaults = get_reconcile_config()

    monkeypatch.setenv("KEYRECON_DUPLICATE_KEYS", "last_wins")
    monkeypatch.setenv("KEYRECON_INTRA_BATCH", "independent")
    configured = get_reconcile_config()

    assert defaults.duplicate_key_policy is DuplicateKeyPolicy.RAISE
    assert defaults.intra_batch_policy is IntraBatchPolicy.MERGE
    assert configured.duplicate_key_policy is DuplicateKeyPolicy.LAST_WINS
    assert configured.intra_batch_policy is IntraBatchPolicy.INDEPENDENT


def test_store_api_config_requires_url_and_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYRECON_STORE_URL", "https://records.test/api/")
    monkeypatch.delenv("KEYRECON_STORE_TOKEN", raising=False)

    with pytest.raises(MissingConfigurationError, match="KEYRECON_STORE_TOKEN"):
        get_store_api_config()

    monkeypatch.setenv("KEYRECON_STORE_TOKEN", "secret")
    config = get_store_api_config()

    assert config.base_url == "https://records.test/api"
    assert config.headers["Authorization"] == "Bearer secret"
    assert "secret" not in repr(config)
