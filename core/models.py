"""Core domain models for restaurant visit records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
import uuid

from core.exceptions import RatingError

MIN_SCORE = 1
MAX_SCORE = 5
DEFAULT_SCORE = 3

# Rendered first wherever ratings are listed
OVERALL_CATEGORY = "overall"

DEFAULT_CATEGORIES: tuple[str, ...] = ("taste", "cost", "quietness")


def validate_ratings(ratings: Mapping[str, int] | None) -> dict[str, int]:
    """Return a validated copy of `ratings`, preserving key order.

    Raises:
        RatingError: If a key is blank or a score is not an int in [1, 5].
    """
    result: dict[str, int] = {}
    for name, score in (ratings or {}).items():
        if not isinstance(name, str) or not name.strip():
            raise RatingError(f"Invalid rating category: {name!r}")
        if isinstance(score, bool) or not isinstance(score, int):
            raise RatingError(f"Score for {name!r} must be an int, got {score!r}")
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise RatingError(
                f"Score for {name!r} must be within {MIN_SCORE}..{MAX_SCORE}, got {score}"
            )
        result[name] = score
    return result


def ordered_ratings(ratings: Mapping[str, int]) -> list[tuple[str, int]]:
    """Return rating entries with the overall category first, the rest by name."""
    items = sorted((k, v) for k, v in ratings.items() if k != OVERALL_CATEGORY)
    if OVERALL_CATEGORY in ratings:
        items.insert(0, (OVERALL_CATEGORY, ratings[OVERALL_CATEGORY]))
    return items


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class VisitRecord:
    """A single logged restaurant visit."""

    id: str = field(default_factory=_new_id)
    date: datetime | None = field(default_factory=datetime.now)
    shop_name: str | None = None
    station_name: str | None = None
    station_line: str | None = None
    memo: str | None = None
    photo: bytes | None = None
    revisit: bool = False
    ratings: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.ratings = validate_ratings(self.ratings)

    @property
    def scores(self) -> list[int]:
        """All individual scores of this record."""
        return list(self.ratings.values())

    def rename_rating(self, old_name: str, new_name: str) -> bool:
        """Move the `old_name` entry to `new_name`; return True if it existed."""
        if old_name not in self.ratings:
            return False
        value = self.ratings.pop(old_name)
        self.ratings[new_name] = value
        return True


# Fields the edit flow may change; `id` and `date` are fixed at creation
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"shop_name", "station_name", "station_line", "memo", "photo", "revisit", "ratings"}
)
