"""ViewModel for the analysis charts."""

from __future__ import annotations

from core.models import VisitRecord
from core.services.aggregation_service import AggregationService
from core.services.interfaces import MonthlyCount, RecordStore, StationStats

DEFAULT_TOP_STATIONS = 10


class AnalysisVM:
    """Expose monthly and per-station aggregates over the stored records."""

    def __init__(
        self,
        repo: RecordStore,
        aggregator: AggregationService | None = None,
        top_stations: int = DEFAULT_TOP_STATIONS,
    ) -> None:
        self._repo = repo
        self._agg = aggregator or AggregationService()
        self._top = top_stations
        self.records: list[VisitRecord] = []

    def load(self) -> None:
        """Load records oldest first, the order the charts read."""
        self.records = self._repo.list_all(descending=False)

    @property
    def monthly_counts(self) -> list[MonthlyCount]:
        return self._agg.monthly_counts(self.records)

    @property
    def top_stations(self) -> list[StationStats]:
        """Most visited stations, truncated to `top_stations`."""
        return self._agg.station_stats(self.records, limit=self._top)

    @property
    def station_averages(self) -> list[StationStats]:
        """Best-rated stations, truncated to `top_stations`."""
        return self._agg.station_averages(self.records, limit=self._top)

    def rows(self) -> list[tuple[str, int, str]]:
        """`(station, count, average)` rows for the station table."""
        return [(s.station, s.count, f"{s.average:.2f}") for s in self.top_stations]
