"""Aggregation service producing monthly and per-station statistics.

Station averages are flattened means: every score of every rating category of
every record in the group counts once, so visits rated on more categories
weigh more than visits rated on few.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from core.models import VisitRecord
from core.services.interfaces import MonthlyCount, StationStats

MONTH_KEY_FMT = "{:04d}-{:02d}"


@dataclass
class _StationBucket:
    count: int = 0
    scores: list[int] = field(default_factory=list)

    @property
    def average(self) -> float:
        if not self.scores:
            return 0.0
        return sum(self.scores) / len(self.scores)


class AggregationService:
    """Pure aggregations over visit records."""

    def monthly_counts(self, records: Iterable[VisitRecord]) -> list[MonthlyCount]:
        """Count dated records per month, ascending by ``YYYY-MM`` key."""
        counts: dict[str, int] = {}
        for r in records:
            if r.date is None:
                continue
            key = MONTH_KEY_FMT.format(r.date.year, r.date.month)
            counts[key] = counts.get(key, 0) + 1
        return [MonthlyCount(month=k, count=v) for k, v in sorted(counts.items())]

    def station_stats(
        self, records: Iterable[VisitRecord], limit: int | None = None
    ) -> list[StationStats]:
        """Per-station count and average, most visited first.

        Ties keep the order in which stations were first seen.
        """
        stats = [
            StationStats(station=name, count=b.count, average=b.average)
            for name, b in self._group_by_station(records).items()
        ]
        # sort is stable, so first-seen order survives equal counts
        stats.sort(key=lambda s: s.count, reverse=True)
        return stats[:limit] if limit is not None else stats

    def station_averages(
        self, records: Iterable[VisitRecord], limit: int | None = None
    ) -> list[StationStats]:
        """Per-station stats for stations with at least one score, best average first."""
        stats = [
            StationStats(station=name, count=b.count, average=b.average)
            for name, b in self._group_by_station(records).items()
            if b.scores
        ]
        stats.sort(key=lambda s: s.average, reverse=True)
        return stats[:limit] if limit is not None else stats

    def station_counts(
        self, records: Iterable[VisitRecord], limit: int | None = None
    ) -> list[tuple[str, int]]:
        """`(station, count)` pairs, most visited first."""
        return [(s.station, s.count) for s in self.station_stats(records, limit=limit)]

    @staticmethod
    def _group_by_station(records: Iterable[VisitRecord]) -> dict[str, _StationBucket]:
        buckets: dict[str, _StationBucket] = {}
        for r in records:
            if not r.station_name:
                continue
            bucket = buckets.setdefault(r.station_name, _StationBucket())
            bucket.count += 1
            bucket.scores.extend(r.scores)
        return buckets
