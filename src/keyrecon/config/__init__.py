"""Application configuration helpers."""

from __future__ import annotations

from .env import env_choice, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .storage import DatabaseConfig, data_dir, get_database_config
from .store import StoreApiConfig, StoreBackend, get_store_api_config, get_store_backend

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ReconcileConfig",
    "StoreApiConfig",
    "StoreBackend",
    "configure_logging",
    "data_dir",
    "env_choice",
    "get_database_config",
    "get_reconcile_config",
    "get_store_api_config",
    "get_store_backend",
    "require_env_var",
    "require_env_vars",
]
