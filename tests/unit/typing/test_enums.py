from __future__ import annotations

import pytest

from pagesmith.typing.enums import CompressionLevel, ImageEncoding, MoveDirection, RasterFormat


def test_enum_from_str_normalizes_case_and_spaces() -> None:
    assert RasterFormat.from_str(" WEBP ") is RasterFormat.WEBP
    assert MoveDirection.from_str("Down") is MoveDirection.DOWN
    assert CompressionLevel.HIGH.to_str() == "high"


def test_enum_from_str_lists_supported_values() -> None:
    with pytest.raises(ValueError, match="Expected one of: png, jpeg, webp"):
        RasterFormat.from_str("gif")


def test_raster_format_metadata() -> None:
    assert RasterFormat.JPEG.mime_type == "image/jpeg"
    assert RasterFormat.JPEG.extension == "jpg"
    assert RasterFormat.WEBP.extension == "webp"
    assert RasterFormat.PNG.is_lossless
    assert not RasterFormat.WEBP.is_lossless


@pytest.mark.parametrize(
    ("mime_type", "expected"),
    [
        ("image/jpeg", ImageEncoding.JPEG),
        ("image/jpg", ImageEncoding.JPEG),
        ("IMAGE/PNG", ImageEncoding.PNG),
        ("image/gif", ImageEncoding.OTHER),
        ("image/webp", ImageEncoding.OTHER),
    ],
)
def test_image_encoding_from_mime_type(mime_type: str, expected: ImageEncoding) -> None:
    assert ImageEncoding.from_mime_type(mime_type) is expected
