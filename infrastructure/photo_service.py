"""Photo decoding and normalization utilities.

Photos arrive as raw bytes from a picker (JPEG, PNG, HEIC, ...). They are
stored as EXIF-oriented RGB JPEGs bounded by a maximum side length.
"""

from __future__ import annotations

import io

from loguru import logger
from PIL import Image, ImageOps, UnidentifiedImageError
from pillow_heif import register_heif_opener

from core.exceptions import PhotoError

register_heif_opener()

DEFAULT_MAX_SIDE = 1600
DEFAULT_JPEG_QUALITY = 80
DEFAULT_THUMB_SIDE = 256


class PhotoService:
    """Normalize photo bytes for storage and produce thumbnails."""

    def __init__(
        self, max_side: int = DEFAULT_MAX_SIDE, jpeg_quality: int = DEFAULT_JPEG_QUALITY
    ) -> None:
        self._max_side = max(1, int(max_side))
        self._quality = min(95, max(1, int(jpeg_quality)))

    def normalize(self, data: bytes) -> bytes:
        """Return `data` re-encoded as an oriented JPEG no larger than `max_side`.

        Raises:
            PhotoError: If `data` is not a decodable image.
        """
        return self._encode(data, self._max_side)

    def thumbnail(self, data: bytes, side: int = DEFAULT_THUMB_SIDE) -> bytes:
        """Return a small JPEG of `data` bounded by `side`."""
        return self._encode(data, side)

    def _encode(self, data: bytes, side: int) -> bytes:
        with self._open(data) as im:
            try:
                im = ImageOps.exif_transpose(im)
                if im.mode != "RGB":
                    im = im.convert("RGB")
                im.thumbnail((side, side))
                out = io.BytesIO()
                im.save(out, format="JPEG", quality=self._quality, optimize=True)
            except OSError as ex:
                logger.error("Photo encode failed: {}", ex)
                raise PhotoError(f"Cannot encode photo: {ex}") from ex
        return out.getvalue()

    @staticmethod
    def _open(data: bytes) -> Image.Image:
        if not data:
            raise PhotoError("Empty photo data")
        try:
            im = Image.open(io.BytesIO(data))
            im.load()
        except (UnidentifiedImageError, OSError) as ex:
            logger.warning("Photo decode failed: {}", ex)
            raise PhotoError(f"Cannot decode photo: {ex}") from ex
        return im
