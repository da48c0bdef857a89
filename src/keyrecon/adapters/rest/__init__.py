from __future__ import annotations

from .gateway import HttpStoreGateway
from .unit_of_work import HttpStoreUnitOfWork, resilience_config_for

__all__ = ["HttpStoreGateway", "HttpStoreUnitOfWork", "resilience_config_for"]
