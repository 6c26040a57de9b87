import json
from datetime import datetime

import pytest

from conftest import make_record
from core.exceptions import RecordNotFoundError, StoreError
from infrastructure.json_repository import JsonRecordStore


def test_empty_store_lists_nothing(json_store) -> None:
    assert json_store.list_all() == []


def test_roundtrip_through_disk(json_store, sample_records, trashed) -> None:
    json_store.upsert_many(sample_records)
    reopened = JsonRecordStore(json_store.path.parent)
    loaded = {r.id: r for r in reopened.list_all()}
    assert set(loaded) == {r.id for r in sample_records}
    original = sample_records[2]
    assert loaded[original.id] == original


def test_list_all_sorted_by_date_with_undated_last(json_store, sample_records) -> None:
    json_store.upsert_many(reversed(sample_records))
    newest_first = [r.shop_name for r in json_store.list_all()]
    assert newest_first == [r.shop_name for r in sample_records]
    oldest_first = [r.shop_name for r in json_store.list_all(descending=False)]
    assert oldest_first[:4] == ["Bistro", "Sushi Hana", "Curry House", "Ramen Ichi"]
    assert oldest_first[-1] == "Undated Diner"


def test_list_all_returns_copies(json_store, sample_records) -> None:
    json_store.upsert(sample_records[0])
    copy = json_store.list_all()[0]
    copy.ratings["taste"] = 1
    assert json_store.get(copy.id).ratings["taste"] == 4


def test_upsert_replaces_existing(json_store, sample_records) -> None:
    record = sample_records[0]
    json_store.upsert(record)
    record.memo = "second visit was better"
    json_store.upsert(record)
    assert len(json_store.list_all()) == 1
    assert json_store.get(record.id).memo == "second visit was better"


def test_delete_removes_record_and_trashes_photo(json_store, trashed) -> None:
    record = make_record(datetime(2025, 7, 1), photo=b"jpeg-bytes")
    json_store.upsert(record)
    photo_path = json_store.path.parent / "photos" / f"{record.id}.jpg"
    assert photo_path.read_bytes() == b"jpeg-bytes"

    json_store.delete(record.id)

    assert json_store.list_all() == []
    assert trashed == [str(photo_path)]


def test_delete_unknown_raises(json_store) -> None:
    with pytest.raises(RecordNotFoundError):
        json_store.delete("nope")
    with pytest.raises(RecordNotFoundError):
        json_store.get("nope")


def test_clearing_photo_trashes_file(json_store, trashed) -> None:
    record = make_record(datetime(2025, 7, 1), photo=b"img")
    json_store.upsert(record)
    record.photo = None
    json_store.upsert(record)
    assert len(trashed) == 1
    assert json_store.get(record.id).photo is None


def test_malformed_rows_are_skipped(tmp_path, trashed) -> None:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "records.json").write_text(
        json.dumps(
            {
                "version": 1,
                "records": [
                    {"id": "ok", "date": "2025-07-01T12:00:00", "ratings": {"taste": 4}},
                    {"id": "bad-score", "date": "2025-07-01T12:00:00", "ratings": {"taste": 9}},
                    {"date": "2025-07-01T12:00:00"},
                    {"id": "no-date", "date": "not a date"},
                ],
            }
        ),
        encoding="utf-8",
    )
    store = JsonRecordStore(data_dir)
    records = {r.id: r for r in store.list_all()}
    assert set(records) == {"ok", "no-date"}
    assert records["no-date"].date is None


def test_corrupt_document_raises_store_error(tmp_path) -> None:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "records.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonRecordStore(data_dir).list_all()


def test_failed_write_keeps_previous_state(json_store, sample_records, monkeypatch) -> None:
    json_store.upsert(sample_records[0])

    def boom(path, data):
        raise OSError("disk full")

    monkeypatch.setattr("infrastructure.json_repository.write_json_atomic", boom)
    with pytest.raises(StoreError):
        json_store.upsert_many(sample_records[1:])
    assert [r.id for r in json_store.list_all()] == [sample_records[0].id]


def test_failed_write_keeps_previous_photo(json_store, trashed, monkeypatch) -> None:
    record = make_record(datetime(2025, 7, 1), photo=b"OLD")
    json_store.upsert(record)
    photos_dir = json_store.path.parent / "photos"

    def boom(path, data):
        raise OSError("disk full")

    monkeypatch.setattr("infrastructure.json_repository.write_json_atomic", boom)
    record.photo = b"NEW"
    with pytest.raises(StoreError):
        json_store.upsert(record)

    assert (photos_dir / f"{record.id}.jpg").read_bytes() == b"OLD"
    assert list(photos_dir.glob("*.tmp")) == []
    assert json_store.get(record.id).photo == b"OLD"
    assert JsonRecordStore(json_store.path.parent).get(record.id).photo == b"OLD"


def test_failed_write_does_not_trash_cleared_photo(json_store, trashed, monkeypatch) -> None:
    record = make_record(datetime(2025, 7, 1), photo=b"OLD")
    json_store.upsert(record)

    def boom(path, data):
        raise OSError("disk full")

    monkeypatch.setattr("infrastructure.json_repository.write_json_atomic", boom)
    record.photo = None
    with pytest.raises(StoreError):
        json_store.upsert(record)

    assert trashed == []
    assert JsonRecordStore(json_store.path.parent).get(record.id).photo == b"OLD"


def test_document_layout(json_store, sample_records) -> None:
    json_store.upsert(sample_records[0])
    doc = json.loads(json_store.path.read_text(encoding="utf-8"))
    assert doc["version"] == 1
    row = doc["records"][0]
    assert row["date"] == "2025-08-01T19:00:00"
    assert row["station_name"] == "新宿"
    assert row["photo"] is None


@pytest.mark.parametrize(
    ("stored", "expected"),
    [(True, True), (False, False), ("false", False), ("yes", False), (1, False)],
)
def test_revisit_must_be_boolean(tmp_path, stored, expected) -> None:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    row = {"id": "r1", "date": "2025-07-01T12:00:00", "revisit": stored}
    (data_dir / "records.json").write_text(
        json.dumps({"version": 1, "records": [row]}), encoding="utf-8"
    )
    assert JsonRecordStore(data_dir).get("r1").revisit is expected
