"""Core service interfaces and shared data structures.

This module defines the store protocols consumed by the core services and the
simple dataclasses returned by the aggregation layer.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from core.models import VisitRecord


@dataclass(frozen=True)
class MonthlyCount:
    """Number of visits in one calendar month.

    Attributes:
        month: Month key formatted as ``YYYY-MM``.
        count: Number of records dated in that month.
    """

    month: str
    count: int


@dataclass(frozen=True)
class StationStats:
    """Visit count and flattened average score for one station.

    Attributes:
        station: Station name.
        count: Number of records at the station.
        average: Mean of every individual score of those records, 0.0 if none.
    """

    station: str
    count: int
    average: float


class RecordStore(Protocol):
    """Durable collection of visit records.

    Failures raise `core.exceptions.StoreError`.
    """

    def list_all(self, descending: bool = True) -> list[VisitRecord]:
        """Return every record sorted by date."""
        raise NotImplementedError

    def get(self, record_id: str) -> VisitRecord:
        """Return the record with `record_id` or raise RecordNotFoundError."""
        raise NotImplementedError

    def upsert(self, record: VisitRecord) -> None:
        """Insert or replace `record`."""
        raise NotImplementedError

    def upsert_many(self, records: Iterable[VisitRecord]) -> None:
        """Insert or replace all `records` in a single write."""
        raise NotImplementedError

    def delete(self, record_id: str) -> None:
        """Remove the record with `record_id`."""
        raise NotImplementedError


class CategoryStore(Protocol):
    """Durable ordered list of rating category names."""

    def load(self) -> list[str]:
        """Return persisted names, or the built-in defaults if none were saved."""
        raise NotImplementedError

    def save(self, names: list[str]) -> None:
        """Persist `names` in order."""
        raise NotImplementedError


@dataclass(frozen=True)
class CategoryRename:
    """Outcome of a rating category rename.

    Attributes:
        old_name: Name before the rename.
        new_name: Name after the rename.
        record_ids: Ids of stored records whose ratings were moved.
    """

    old_name: str
    new_name: str
    record_ids: list[str]
