from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from app.viewmodels.analysis_vm import DEFAULT_TOP_STATIONS, AnalysisVM
from app.viewmodels.main_vm import MainVM
from core.models import DEFAULT_SCORE
from core.services.category_service import RatingCategoryService
from infrastructure.category_repository import JsonCategoryStore
from infrastructure.json_repository import JsonRecordStore
from infrastructure.logging import DEFAULT_LOG_DIR, init_logging
from infrastructure.photo_service import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_SIDE, PhotoService
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent
DEFAULT_DATA_DIR = Path.home() / ".gohan_log" / "data"


@dataclass
class Application:
    """Wired services and view-models handed to a presentation layer."""

    settings: JsonSettings
    main_vm: MainVM
    analysis_vm: AnalysisVM


def build_app(settings: JsonSettings) -> Application:
    """Create stores, services and view-models from `settings`."""
    data_dir = settings.get_path("storage.data_dir", DEFAULT_DATA_DIR)
    records = JsonRecordStore(data_dir)
    categories = RatingCategoryService(JsonCategoryStore(data_dir), records)
    photos = PhotoService(
        max_side=settings.get_int("photos.max_side", DEFAULT_MAX_SIDE),
        jpeg_quality=settings.get_int("photos.jpeg_quality", DEFAULT_JPEG_QUALITY),
    )
    main_vm = MainVM(
        records,
        categories,
        photo_service=photos,
        default_score=settings.get_int("ratings.default_score", DEFAULT_SCORE),
    )
    analysis_vm = AnalysisVM(
        records, top_stations=settings.get_int("analysis.top_stations", DEFAULT_TOP_STATIONS)
    )
    return Application(settings=settings, main_vm=main_vm, analysis_vm=analysis_vm)


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    init_logging(
        settings.get_path("logging.dir", DEFAULT_LOG_DIR),
        level=str(settings.get("logging.level", "INFO")),
    )

    app = build_app(settings)
    app.main_vm.load()
    app.analysis_vm.load()

    logger.info(
        "Ready: {} records, years {}, categories {}",
        app.main_vm.record_count,
        app.main_vm.available_years,
        app.main_vm.categories.items,
    )
    for row in app.analysis_vm.monthly_counts:
        logger.info("Month {}: {} visits", row.month, row.count)
    for station, count, average in app.analysis_vm.rows():
        logger.info("Station {}: {} visits, average {}", station, count, average)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
