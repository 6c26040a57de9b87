"""Utilities for date parsing/formatting and atomic JSON file writes.

Parsing is best-effort and does not raise: callers should expect `None` when a
value is missing or malformed.
"""

from __future__ import annotations

from datetime import datetime
import json
import os
from pathlib import Path
import tempfile
from typing import Any

from loguru import logger

DISPLAY_DT_FMT = "%Y-%m-%d %H:%M"


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; return None on failure."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).strip())
    except (ValueError, TypeError):
        logger.warning("Invalid datetime: {}", value)
        return None


def format_iso_datetime(dt: datetime | None) -> str | None:
    """Format `dt` as ISO-8601; None when absent."""
    return dt.isoformat() if dt else None


def format_display_datetime(dt: datetime | None) -> str:
    """Format `dt` for list rows; empty string when absent."""
    return dt.strftime(DISPLAY_DT_FMT) if dt else ""


def write_json_atomic(path: Path, data: Any) -> None:
    """Write `data` as JSON to `path` via a temp file and `os.replace`.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError):
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(path: Path) -> Any | None:
    """Return the JSON document at `path`, or None if the file does not exist.

    Raises:
        OSError: If the file exists but cannot be read.
        ValueError: If the content is not valid JSON.
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_temp_bytes(directory: Path, prefix: str, data: bytes) -> Path:
    """Write `data` to a new temp file in `directory` and return its path.

    Callers move the file into place with `os.replace` or unlink it.
    """
    directory.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=prefix, suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return Path(tmp_name)
