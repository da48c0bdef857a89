"""Domain port definitions for adapters."""

from __future__ import annotations

from .store import StoreGateway
from .unit_of_work import StoreUnitOfWork

__all__ = [
    "StoreGateway",
    "StoreUnitOfWork",
]
