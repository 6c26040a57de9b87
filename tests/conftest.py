from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

import pytest

from core.exceptions import RecordNotFoundError, StoreError
from core.models import VisitRecord
from core.services.category_service import RatingCategoryService
from infrastructure.category_repository import JsonCategoryStore
from infrastructure.json_repository import JsonRecordStore


class FakeRecordStore:
    """In-memory record store; set `fail_writes` to simulate a broken disk."""

    def __init__(self, records: Iterable[VisitRecord] = ()) -> None:
        self.records = {r.id: r for r in records}
        self.fail_writes = False
        self.write_calls = 0

    def list_all(self, descending: bool = True) -> list[VisitRecord]:
        copies = [replace(r, ratings=dict(r.ratings)) for r in self.records.values()]
        dated = sorted((r for r in copies if r.date), key=lambda r: r.date, reverse=descending)
        return dated + [r for r in copies if r.date is None]

    def get(self, record_id: str) -> VisitRecord:
        if record_id not in self.records:
            raise RecordNotFoundError(record_id)
        return self.records[record_id]

    def upsert(self, record: VisitRecord) -> None:
        self.upsert_many([record])

    def upsert_many(self, records: Iterable[VisitRecord]) -> None:
        self.write_calls += 1
        if self.fail_writes:
            raise StoreError("disk full")
        for r in records:
            self.records[r.id] = replace(r, ratings=dict(r.ratings))

    def delete(self, record_id: str) -> None:
        self.write_calls += 1
        if self.fail_writes:
            raise StoreError("disk full")
        if record_id not in self.records:
            raise RecordNotFoundError(record_id)
        del self.records[record_id]


class FakeCategoryStore:
    def __init__(self, names: list[str] | None = None) -> None:
        self.names = names
        self.fail_writes = False
        self.saved: list[list[str]] = []

    def load(self) -> list[str]:
        return list(self.names) if self.names is not None else ["taste", "cost", "quietness"]

    def save(self, names: list[str]) -> None:
        if self.fail_writes:
            raise StoreError("read-only")
        self.saved.append(list(names))
        self.names = list(names)


def make_record(
    when: datetime | None,
    station: str | None = None,
    ratings: dict[str, int] | None = None,
    **kwargs,
) -> VisitRecord:
    return VisitRecord(date=when, station_name=station, ratings=ratings or {}, **kwargs)


@pytest.fixture
def sample_records() -> list[VisitRecord]:
    # Newest first, as the list view reads them
    return [
        make_record(datetime(2025, 8, 1, 19, 0), "新宿", {"taste": 4}, shop_name="Ramen Ichi"),
        make_record(
            datetime(2025, 7, 15, 12, 30),
            "渋谷",
            {"taste": 3},
            shop_name="Curry House",
            memo="spicy, come back in winter",
            revisit=True,
        ),
        make_record(
            datetime(2025, 7, 1, 18, 0),
            "渋谷",
            {"taste": 5, "cost": 3},
            shop_name="Sushi Hana",
        ),
        make_record(datetime(2024, 12, 24, 20, 0), None, {"taste": 2}, shop_name="Bistro"),
        make_record(None, "池袋", {"taste": 4}, shop_name="Undated Diner", revisit=True),
    ]


@pytest.fixture
def fake_store(sample_records) -> FakeRecordStore:
    return FakeRecordStore(sample_records)


@pytest.fixture
def fake_categories() -> FakeCategoryStore:
    return FakeCategoryStore()


@pytest.fixture
def category_service(fake_categories, fake_store) -> RatingCategoryService:
    service = RatingCategoryService(fake_categories, fake_store)
    service.load()
    return service


@pytest.fixture
def trashed(monkeypatch) -> list[str]:
    paths: list[str] = []
    monkeypatch.setattr("infrastructure.json_repository.send2trash", paths.append)
    return paths


@pytest.fixture
def json_store(tmp_path, trashed) -> JsonRecordStore:
    return JsonRecordStore(tmp_path / "data")


@pytest.fixture
def json_categories(tmp_path) -> JsonCategoryStore:
    return JsonCategoryStore(tmp_path / "data")
