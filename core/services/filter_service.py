"""Filtering service for `VisitRecord` collections.

Filters combine a free-text search, an optional date constraint and a
revisit flag. All operations are pure and keep the input order. Callers must
not mutate the record list while a filter is running; the service takes no
locks.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Union

from core.models import VisitRecord


def _as_start(value: date | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _as_end(value: date | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; either bound may be open.

    A plain `date` bound covers the whole day.
    """

    start: date | datetime | None = None
    end: date | datetime | None = None

    def matches(self, when: datetime) -> bool:
        start = _as_start(self.start)
        end = _as_end(self.end)
        if start is not None and when < start:
            return False
        if end is not None and when > end:
            return False
        return True


@dataclass(frozen=True)
class YearFilter:
    """Calendar year membership."""

    year: int

    def matches(self, when: datetime) -> bool:
        return when.year == self.year


@dataclass(frozen=True)
class MonthFilter:
    """Calendar month membership."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be within 1..12, got {self.month}")

    def matches(self, when: datetime) -> bool:
        return when.year == self.year and when.month == self.month


DateFilter = Union[DateRange, YearFilter, MonthFilter]


@dataclass(frozen=True)
class FilterSpec:
    """Criteria applied by `FilterService.filter`.

    Attributes:
        text: Case-insensitive search over shop name, memo and station name.
        date_filter: Optional range/year/month constraint on the record date.
        revisit_only: Keep only records flagged for a revisit.
    """

    text: str | None = None
    date_filter: DateFilter | None = None
    revisit_only: bool = False

    @property
    def is_empty(self) -> bool:
        """True when no criterion is active."""
        has_text = bool((self.text or "").strip())
        return not has_text and self.date_filter is None and not self.revisit_only


class FilterService:
    """Provides filtering utilities for `VisitRecord` lists."""

    def filter(self, records: Iterable[VisitRecord], spec: FilterSpec) -> list[VisitRecord]:
        """Return records matching every active criterion of `spec`, in input order."""
        text = spec.text or ""
        # Blank queries match everything; others match as typed, spaces included
        needle = text.casefold() if text.strip() else ""
        return [
            r
            for r in records
            if self._matches_text(r, needle)
            and self._matches_date(r, spec.date_filter)
            and (r.revisit or not spec.revisit_only)
        ]

    def year_range(self, records: Iterable[VisitRecord], today: date | None = None) -> list[int]:
        """Return every year from the oldest to the newest dated record.

        Falls back to the current year when no record has a date.
        """
        years = [r.date.year for r in records if r.date is not None]
        if not years:
            return [(today or date.today()).year]
        return list(range(min(years), max(years) + 1))

    @staticmethod
    def _matches_text(record: VisitRecord, needle: str) -> bool:
        if not needle:
            return True
        for value in (record.shop_name, record.memo, record.station_name):
            if value and needle in value.casefold():
                return True
        return False

    @staticmethod
    def _matches_date(record: VisitRecord, date_filter: DateFilter | None) -> bool:
        if date_filter is None:
            return True
        # Undated records never satisfy an active date filter
        if record.date is None:
            return False
        return date_filter.matches(record.date)
