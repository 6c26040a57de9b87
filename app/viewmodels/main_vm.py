"""ViewModel for orchestrating record IO, filtering and category edits."""

from __future__ import annotations

from typing import Any

from loguru import logger

from app.viewmodels.record_vm import RecordVM
from core.exceptions import RecordNotFoundError, StoreError
from core.models import DEFAULT_SCORE, EDITABLE_FIELDS, VisitRecord, validate_ratings
from core.services.category_service import RatingCategoryService
from core.services.filter_service import FilterService, FilterSpec
from core.services.interfaces import RecordStore
from core.stations import resolve_station
from infrastructure.photo_service import PhotoService

STATION_FIELDS = frozenset({"station_name", "station_line", "custom_station"})


class MainVM:
    """Main application view-model.

    Mediates between a record store and list/form views. All methods are
    expected to run on a single interaction thread.
    """

    def __init__(
        self,
        repo: RecordStore,
        categories: RatingCategoryService,
        filter_service: FilterService | None = None,
        photo_service: PhotoService | None = None,
        default_score: int = DEFAULT_SCORE,
    ) -> None:
        """Create a MainVM.

        Args:
            repo: Record store providing `list_all`, `upsert` and `delete`.
            categories: Rating category service shared with the forms.
            filter_service: Filtering service (defaults to `FilterService`).
            photo_service: Normalizes attached photos; photos are stored as-is when None.
            default_score: Score pre-filled for every category of a new record.
        """
        self._repo = repo
        self.categories = categories
        self._filter = filter_service or FilterService()
        self._photos = photo_service
        self._default_score = default_score
        self.records: list[VisitRecord] = []
        self.filter_spec = FilterSpec()

    def load(self) -> None:
        """Load records newest first and the category list."""
        self.records = self._repo.list_all(descending=True)
        self.categories.load()
        logger.info(
            "Loaded {} records, {} categories", len(self.records), len(self.categories.items)
        )

    @property
    def record_count(self) -> int:
        """Number of records currently loaded."""
        return len(self.records)

    @property
    def filtered_records(self) -> list[VisitRecord]:
        """Records matching the current `filter_spec`, newest first."""
        return self._filter.filter(self.records, self.filter_spec)

    @property
    def filtered_rows(self) -> list[RecordVM]:
        """Display wrappers for `filtered_records`."""
        return [RecordVM(r, photos=self._photos) for r in self.filtered_records]

    @property
    def available_years(self) -> list[int]:
        """Selectable years for the year/month filters."""
        return self._filter.year_range(self.records)

    def set_filter(self, spec: FilterSpec) -> None:
        """Replace the active filter."""
        self.filter_spec = spec

    def clear_filter(self) -> None:
        """Reset to an empty filter."""
        self.filter_spec = FilterSpec()

    def find(self, record_id: str) -> VisitRecord:
        """Return the loaded record with `record_id`."""
        for r in self.records:
            if r.id == record_id:
                return r
        raise RecordNotFoundError(f"Record not found: {record_id}")

    def new_ratings(self) -> dict[str, int]:
        """Initial ratings for the add form."""
        return self.categories.default_ratings(self._default_score)

    def add_record(
        self,
        shop_name: str | None = None,
        station_name: str | None = None,
        station_line: str | None = None,
        custom_station: str | None = None,
        memo: str | None = None,
        photo: bytes | None = None,
        revisit: bool = False,
        ratings: dict[str, int] | None = None,
    ) -> VisitRecord:
        """Create, keep and persist a new record dated now.

        Unrated categories get the default score. The station is either
        `station_name` on `station_line` or free text in `custom_station`. A
        failed save is logged and the record stays in the in-memory list.

        Raises:
            ValueError: If `station_name` is not on `station_line`.
        """
        station_name, station_line = resolve_station(station_line, station_name, custom_station)
        merged = self.new_ratings()
        merged.update(ratings or {})
        record = VisitRecord(
            shop_name=shop_name,
            station_name=station_name,
            station_line=station_line,
            memo=memo,
            photo=self._prepare_photo(photo),
            revisit=revisit,
            ratings=merged,
        )
        self.records.append(record)
        self._resort()
        self._persist(record)
        return record

    def update_record(self, record_id: str, **changes: Any) -> bool:
        """Apply `changes` to a loaded record in place and persist it.

        Station changes go through the same registered-or-free-text rule as
        `add_record`; pass `custom_station` for a free-text entry.

        Returns:
            True if the save succeeded.

        Raises:
            ValueError: If `changes` names `id`, `date` or an unknown field, or
                a station that is not on its line.
            RatingError: If new ratings are invalid.
        """
        unknown = set(changes) - EDITABLE_FIELDS - {"custom_station"}
        if unknown:
            raise ValueError(f"Fields not editable: {sorted(unknown)}")
        record = self.find(record_id)
        if STATION_FIELDS & set(changes):
            changes["station_name"], changes["station_line"] = resolve_station(
                changes.get("station_line", record.station_line),
                changes.get("station_name", record.station_name),
                changes.pop("custom_station", None),
            )
        if "ratings" in changes:
            changes["ratings"] = validate_ratings(changes["ratings"])
        if "photo" in changes:
            changes["photo"] = self._prepare_photo(changes["photo"])
        for name, value in changes.items():
            setattr(record, name, value)
        return self._persist(record)

    def delete_record(self, record_id: str) -> bool:
        """Remove a record from the list and the store.

        Returns:
            True if the store delete succeeded.
        """
        self.records = [r for r in self.records if r.id != record_id]
        try:
            self._repo.delete(record_id)
        except StoreError as ex:
            logger.error("Delete failed for {}: {}", record_id, ex)
            return False
        return True

    def add_category(self, name: str) -> bool:
        """Add a rating category."""
        return self.categories.add(name)

    def rename_category(self, index: int, new_name: str) -> bool:
        """Rename a rating category in the store and in the loaded records.

        Loaded records holding the old key are renamed in place, including
        ones whose last save failed.
        """
        result = self.categories.rename(index, new_name)
        if result is None:
            return False
        for r in self.records:
            r.rename_rating(result.old_name, result.new_name)
        return True

    def remove_category(self, index: int) -> str:
        """Remove a rating category; existing records keep their scores."""
        return self.categories.remove(index)

    def _prepare_photo(self, photo: bytes | None) -> bytes | None:
        if photo is None or self._photos is None:
            return photo
        return self._photos.normalize(photo)

    def _persist(self, record: VisitRecord) -> bool:
        try:
            self._repo.upsert(record)
        except StoreError as ex:
            logger.error("Save failed for {}: {}", record.id, ex)
            return False
        return True

    def _resort(self) -> None:
        dated = sorted((r for r in self.records if r.date), key=lambda r: r.date, reverse=True)
        self.records = dated + [r for r in self.records if r.date is None]
