"""Lightweight view model wrapper around `VisitRecord`."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from core.exceptions import PhotoError
from core.models import OVERALL_CATEGORY, VisitRecord, ordered_ratings
from infrastructure.photo_service import DEFAULT_THUMB_SIDE, PhotoService
from infrastructure.utils import format_display_datetime

NO_SHOP_NAME = "(no shop name)"


@dataclass
class RecordVM:
    """Expose convenient properties for bindings/templates."""

    record: VisitRecord
    photos: PhotoService | None = None

    @property
    def title(self) -> str:
        """Shop name, or a placeholder when blank."""
        return (self.record.shop_name or "").strip() or NO_SHOP_NAME

    @property
    def date_text(self) -> str:
        """Visit date for display; empty when missing."""
        return format_display_datetime(self.record.date)

    @property
    def station_label(self) -> str:
        """Station with its line in parentheses when known."""
        station = self.record.station_name or ""
        if station and self.record.station_line:
            return f"{station} ({self.record.station_line})"
        return station

    @property
    def rating_items(self) -> list[tuple[str, int]]:
        """Ratings with the overall category first, the rest by name."""
        return ordered_ratings(self.record.ratings)

    @property
    def overall(self) -> int | None:
        """Overall score if the record has one."""
        return self.record.ratings.get(OVERALL_CATEGORY)

    @property
    def has_photo(self) -> bool:
        """True if a photo is attached."""
        return bool(self.record.photo)

    @property
    def is_revisit(self) -> bool:
        """True if the record is flagged for a revisit."""
        return bool(self.record.revisit)

    def thumbnail(self, side: int = DEFAULT_THUMB_SIDE) -> bytes | None:
        """Small JPEG of the photo for list rows; None without a photo or decoder."""
        if not self.record.photo or self.photos is None:
            return None
        try:
            return self.photos.thumbnail(self.record.photo, side)
        except PhotoError as ex:
            logger.warning("Thumbnail failed for {}: {}", self.record.id, ex)
            return None
