import pytest

from core.exceptions import StoreError
from infrastructure.category_repository import JsonCategoryStore


def test_defaults_when_nothing_saved(json_categories) -> None:
    assert json_categories.load() == ["taste", "cost", "quietness"]


def test_save_and_load(json_categories, tmp_path) -> None:
    json_categories.save(["味", "コスパ"])
    assert JsonCategoryStore(tmp_path / "data").load() == ["味", "コスパ"]


def test_empty_list_is_persisted(json_categories) -> None:
    json_categories.save([])
    assert json_categories.load() == []


def test_corrupt_file_raises(tmp_path) -> None:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "categories.json").write_text("[", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonCategoryStore(data_dir).load()
