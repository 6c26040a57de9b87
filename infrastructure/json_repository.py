"""JSON persistence for visit records.

Records live in a single ``records.json`` document; photos are stored next to
it as ``photos/<id>.jpg``. Every write replaces the document atomically, and
photo changes are staged in temp files that are only moved into place once
the document is written, so a failed write leaves the previous state on disk
and in memory. Photos that are cleared or belong to deleted records are moved
to the system trash rather than unlinked.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
import os
from pathlib import Path
from typing import Any

from loguru import logger
from send2trash import send2trash

from core.exceptions import RecordNotFoundError, StoreError
from core.models import VisitRecord
from infrastructure.utils import (
    format_iso_datetime,
    parse_iso_datetime,
    read_json,
    write_json_atomic,
    write_temp_bytes,
)

RECORDS_FILE = "records.json"
PHOTOS_DIR = "photos"
FORMAT_VERSION = 1


def _copy(record: VisitRecord) -> VisitRecord:
    return replace(record, ratings=dict(record.ratings))


class JsonRecordStore:
    """Load and save visit records under a data directory."""

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir)
        self._path = self._dir / RECORDS_FILE
        self._photos = self._dir / PHOTOS_DIR
        self._records: dict[str, VisitRecord] | None = None

    @property
    def path(self) -> Path:
        """Location of the records document."""
        return self._path

    def list_all(self, descending: bool = True) -> list[VisitRecord]:
        """Return copies of every record sorted by date."""
        records = [_copy(r) for r in self._loaded().values()]
        # Undated records go last in either direction
        dated = sorted(
            (r for r in records if r.date is not None), key=lambda r: r.date, reverse=descending
        )
        return dated + [r for r in records if r.date is None]

    def get(self, record_id: str) -> VisitRecord:
        """Return a copy of the record with `record_id`."""
        try:
            return _copy(self._loaded()[record_id])
        except KeyError as ex:
            raise RecordNotFoundError(f"Record not found: {record_id}") from ex

    def upsert(self, record: VisitRecord) -> None:
        """Insert or replace `record`."""
        self.upsert_many([record])

    def upsert_many(self, records: Iterable[VisitRecord]) -> None:
        """Insert or replace all `records` with a single document write."""
        current = self._loaded()
        staged = dict(current)
        incoming = [_copy(r) for r in records]
        for r in incoming:
            staged[r.id] = r
        # record id -> staged temp file, or None to drop the photo
        pending: dict[str, Path | None] = {}
        try:
            for r in incoming:
                if self._photo_changed(r):
                    pending[r.id] = self._stage_photo(r)
        except OSError as ex:
            self._discard(pending)
            raise StoreError(f"Photo write failed: {ex}") from ex
        try:
            self._commit(staged)
        except StoreError:
            self._discard(pending)
            raise
        for record_id, tmp in pending.items():
            self._publish_photo(record_id, tmp)
        logger.info("Saved {} record(s) to {}", len(incoming), self._path)

    def delete(self, record_id: str) -> None:
        """Remove the record with `record_id` and trash its photo."""
        current = self._loaded()
        if record_id not in current:
            raise RecordNotFoundError(f"Record not found: {record_id}")
        staged = {k: v for k, v in current.items() if k != record_id}
        self._commit(staged)
        self._trash_photo(record_id)
        logger.info("Deleted record {}", record_id)

    def reload(self) -> None:
        """Drop the in-memory copy so the next access re-reads the document."""
        self._records = None

    def _loaded(self) -> dict[str, VisitRecord]:
        if self._records is None:
            self._records = self._load()
        return self._records

    def _load(self) -> dict[str, VisitRecord]:
        try:
            doc = read_json(self._path)
        except (OSError, ValueError) as ex:
            raise StoreError(f"Cannot read {self._path}: {ex}") from ex
        if doc is None:
            return {}
        rows = doc.get("records", []) if isinstance(doc, dict) else []
        records: dict[str, VisitRecord] = {}
        for row in rows:
            try:
                record = self._from_row(row)
            except (ValueError, TypeError, KeyError, OSError) as ex:
                logger.error("Record row error: {} | row={} ", ex, row)
                continue
            records[record.id] = record
        logger.info("Loaded {} record(s) from {}", len(records), self._path)
        return records

    def _commit(self, staged: dict[str, VisitRecord]) -> None:
        doc = {
            "version": FORMAT_VERSION,
            "records": [self._to_row(r) for r in staged.values()],
        }
        try:
            write_json_atomic(self._path, doc)
        except (OSError, TypeError, ValueError) as ex:
            raise StoreError(f"Cannot write {self._path}: {ex}") from ex
        self._records = staged

    def _photo_path(self, record_id: str) -> Path:
        return self._photos / f"{record_id}.jpg"

    def _photo_changed(self, record: VisitRecord) -> bool:
        path = self._photo_path(record.id)
        if record.photo is None:
            return path.exists()
        return not (path.exists() and path.read_bytes() == record.photo)

    def _stage_photo(self, record: VisitRecord) -> Path | None:
        if record.photo is None:
            return None
        return write_temp_bytes(self._photos, f".{record.id}.", record.photo)

    def _publish_photo(self, record_id: str, tmp: Path | None) -> None:
        if tmp is None:
            self._trash_photo(record_id)
            return
        try:
            os.replace(tmp, self._photo_path(record_id))
        except OSError as ex:
            logger.error("Photo move failed for {}: {}", record_id, ex)
            tmp.unlink(missing_ok=True)

    @staticmethod
    def _discard(pending: dict[str, Path | None]) -> None:
        for tmp in pending.values():
            if tmp is not None:
                tmp.unlink(missing_ok=True)

    def _trash_photo(self, record_id: str) -> None:
        path = self._photo_path(record_id)
        if not path.exists():
            return
        try:
            send2trash(str(path))
        except OSError as ex:
            logger.warning("Failed to trash photo {}: {}", path, ex)

    def _to_row(self, record: VisitRecord) -> dict[str, Any]:
        return {
            "id": record.id,
            "date": format_iso_datetime(record.date),
            "shop_name": record.shop_name,
            "station_name": record.station_name,
            "station_line": record.station_line,
            "memo": record.memo,
            "photo": f"{PHOTOS_DIR}/{record.id}.jpg" if record.photo is not None else None,
            "revisit": bool(record.revisit),
            "ratings": dict(record.ratings),
        }

    def _from_row(self, row: dict[str, Any]) -> VisitRecord:
        record_id = str(row["id"])
        photo: bytes | None = None
        if row.get("photo"):
            photo_path = self._dir / str(row["photo"])
            if photo_path.exists():
                photo = photo_path.read_bytes()
            else:
                logger.warning("Photo missing for record {}: {}", record_id, photo_path)
        return VisitRecord(
            id=record_id,
            date=parse_iso_datetime(row.get("date")),
            shop_name=row.get("shop_name"),
            station_name=row.get("station_name"),
            station_line=row.get("station_line"),
            memo=row.get("memo"),
            photo=photo,
            revisit=self._revisit_flag(record_id, row.get("revisit", False)),
            ratings=dict(row.get("ratings") or {}),
        )

    @staticmethod
    def _revisit_flag(record_id: str, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        logger.warning("Non-boolean revisit for record {}: {!r}, using False", record_id, value)
        return False
