"""JSON persistence for the rating category list."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from core.exceptions import StoreError
from core.models import DEFAULT_CATEGORIES
from infrastructure.utils import read_json, write_json_atomic

CATEGORIES_FILE = "categories.json"


class JsonCategoryStore:
    """Load and save category names as ``{"items": [...]}``."""

    def __init__(
        self, data_dir: str | Path, defaults: tuple[str, ...] = DEFAULT_CATEGORIES
    ) -> None:
        self._path = Path(data_dir) / CATEGORIES_FILE
        self._defaults = defaults

    def load(self) -> list[str]:
        """Return saved names, or the defaults when nothing has been saved."""
        try:
            doc = read_json(self._path)
        except (OSError, ValueError) as ex:
            raise StoreError(f"Cannot read {self._path}: {ex}") from ex
        items = doc.get("items") if isinstance(doc, dict) else None
        if not isinstance(items, list):
            logger.info("No saved categories at {}, using defaults", self._path)
            return list(self._defaults)
        return [str(name) for name in items]

    def save(self, names: list[str]) -> None:
        """Persist `names` in order."""
        try:
            write_json_atomic(self._path, {"items": list(names)})
        except (OSError, TypeError, ValueError) as ex:
            raise StoreError(f"Cannot write {self._path}: {ex}") from ex
