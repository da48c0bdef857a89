"""Shared reconciliation contract components.

This module holds only:
- the desired-item input type and the callable aliases the stages accept
- policy enums that turn inherited ambiguities into explicit choices
- result dataclasses returned by the stages
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from keyrecon.domain.model import Record


type Transform[TRecord: Record] = Callable[[TRecord], None]
type KeyIndex[TRecord: Record] = dict[str, TRecord]


@dataclass(slots=True, frozen=True)
class DesiredEntity:
    """One item of a reconcile batch: a natural key plus fields to set."""

    key: str
    attributes: Mapping[str, object] = field(default_factory=dict[str, object])


class DuplicateKeyPolicy(StrEnum):
    """What an index build does when the store returns one key more than once."""

    RAISE = "raise"
    LAST_WINS = "last_wins"


class IntraBatchPolicy(StrEnum):
    """How a batch treats repeated natural keys that are absent from the index."""

    MERGE = "merge"
    INDEPENDENT = "independent"


@dataclass(slots=True)
class ReconcileResult[TRecord: Record]:
    """Records produced by one reconcile call.

    ``entities`` is aligned with the desired batch; the same record may appear
    more than once when the batch repeats a key.
    """

    entities: list[TRecord] = field(default_factory=list)
    created: list[TRecord] = field(default_factory=list)
    updated: list[TRecord] = field(default_factory=list)


@dataclass(slots=True)
class GetOrCreateResult[TRecord: Record]:
    entity: TRecord
    created: bool


@dataclass(slots=True)
class LinkResult[TChild: Record, TParent: Record]:
    """Summary of one association-linking run."""

    children: list[TChild] = field(default_factory=list)
    created_parents: list[TParent] = field(default_factory=list)
    linked: int = 0
    skipped: int = 0
