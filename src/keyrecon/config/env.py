"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(
            f"Missing configuration for: {missing_list}",
            variables=tuple(sorted(missing)),
        )

    return values


def require_env_var(name: str) -> str:
    return require_env_vars((name,))[name]


def env_choice[TChoice: StrEnum](name: str, choices: type[TChoice], default: TChoice) -> TChoice:
    """Parse an optional enum-valued variable; blank or unset yields ``default``."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return choices(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(choice.value for choice in choices)
        raise ConfigurationError(
            f"{name}={raw!r} is not one of: {allowed}",
            variables=(name,),
        ) from exc
