"""Rating category list management with rename propagation.

The service owns the ordered, duplicate-free list of rating category names
used to pre-populate new records. Persistence goes through injected stores;
the service keeps no global state. Operations assume a single writer.
"""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from core.exceptions import StoreError
from core.models import DEFAULT_CATEGORIES, DEFAULT_SCORE
from core.services.interfaces import CategoryRename, CategoryStore, RecordStore


class RatingCategoryService:
    """Add, rename and remove rating categories."""

    def __init__(self, category_store: CategoryStore, record_store: RecordStore) -> None:
        self._categories = category_store
        self._records = record_store
        self._items: list[str] = []

    @property
    def items(self) -> list[str]:
        """Copy of the current category names in order."""
        return list(self._items)

    def load(self) -> list[str]:
        """Load names from the category store, falling back to the built-ins."""
        try:
            names = self._categories.load()
        except StoreError as ex:
            logger.error("Category load failed, using defaults: {}", ex)
            names = list(DEFAULT_CATEGORIES)
        self._items = []
        for name in names:
            trimmed = str(name).strip()
            if trimmed and trimmed not in self._items:
                self._items.append(trimmed)
        return self.items

    def add(self, name: str) -> bool:
        """Append `name`; no-op when it is blank or already present."""
        trimmed = (name or "").strip()
        if not trimmed or trimmed in self._items:
            return False
        self._items.append(trimmed)
        self._save()
        return True

    def rename(self, index: int, new_name: str) -> CategoryRename | None:
        """Rename the category at `index` and move the key in every record.

        Records are updated first; the list changes only once they are saved.

        Returns:
            The applied rename, or None when `new_name` is blank, unchanged or
            names another category, or when the records could not be saved.

        Raises:
            IndexError: If `index` is out of range.
        """
        old_name = self._items[index]
        trimmed = (new_name or "").strip()
        if not trimmed or trimmed == old_name or trimmed in self._items:
            return None
        try:
            record_ids = self.propagate_rename(old_name, trimmed)
        except StoreError as ex:
            logger.error("Rename {} -> {} not applied: {}", old_name, trimmed, ex)
            return None
        self._items[index] = trimmed
        self._save()
        return CategoryRename(old_name=old_name, new_name=trimmed, record_ids=record_ids)

    def remove(self, index: int) -> str:
        """Remove and return the category at `index`.

        Records keep their existing scores for the removed name.
        """
        name = self._items.pop(index)
        self._save()
        return name

    def propagate_rename(self, old_name: str, new_name: str) -> list[str]:
        """Move `old_name` to `new_name` in every stored record holding it.

        All affected records are written in one call; if that write fails
        nothing is renamed.

        Returns:
            Ids of the updated records.

        Raises:
            StoreError: If the record store cannot be read or written.
        """
        updated = []
        for record in self._records.list_all():
            if old_name not in record.ratings:
                continue
            renamed = replace(record, ratings=dict(record.ratings))
            renamed.rename_rating(old_name, new_name)
            updated.append(renamed)
        if updated:
            self._records.upsert_many(updated)
        logger.info("Renamed category {} -> {} in {} records", old_name, new_name, len(updated))
        return [r.id for r in updated]

    def default_ratings(self, score: int = DEFAULT_SCORE) -> dict[str, int]:
        """Initial ratings for a new record: every category at `score`."""
        return {name: score for name in self._items}

    def _save(self) -> None:
        try:
            self._categories.save(self.items)
        except StoreError as ex:
            logger.error("Category save failed: {}", ex)
