import io

from PIL import Image
import pytest

from core.exceptions import PhotoError
from infrastructure.photo_service import PhotoService


def _png(width: int, height: int, mode: str = "RGBA") -> bytes:
    out = io.BytesIO()
    Image.new(mode, (width, height), (200, 100, 50, 255)[: len(mode)]).save(out, format="PNG")
    return out.getvalue()


def _size(data: bytes) -> tuple[int, int]:
    with Image.open(io.BytesIO(data)) as im:
        return im.size


def test_normalize_produces_bounded_jpeg() -> None:
    service = PhotoService(max_side=100)
    data = service.normalize(_png(400, 200))
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "JPEG"
        assert im.mode == "RGB"
        assert im.size == (100, 50)


def test_small_images_are_not_upscaled() -> None:
    service = PhotoService(max_side=1600)
    assert _size(service.normalize(_png(40, 30, "RGB"))) == (40, 30)


def test_thumbnail() -> None:
    service = PhotoService()
    assert max(_size(service.thumbnail(_png(1000, 500), side=64))) == 64


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_undecodable_data_raises(data) -> None:
    with pytest.raises(PhotoError):
        PhotoService().normalize(data)
