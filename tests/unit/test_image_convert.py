from __future__ import annotations

import io
import threading
from typing import TYPE_CHECKING

import fitz
import pytest
from PIL import Image

from pagesmith.exceptions import ConvertError, OperationCancelledError, UsageError
from pagesmith.image_convert import convert_images_to_document, normalize_to_png, prepare_image
from pagesmith.ordering import FileOrderList
from pagesmith.typing.enums import ImageEncoding, MoveDirection, Orientation, PageSizeName
from pagesmith.typing.models import ImageInput, PageSetup

if TYPE_CHECKING:
    from collections.abc import Callable


def _image_boxes(data: bytes) -> list[tuple[float, float, float, float, int, int]]:
    boxes = []
    with fitz.open(stream=data, filetype="pdf") as document:
        for page in document:
            info = page.get_image_info()[0]
            boxes.append((*info["bbox"], info["width"], info["height"]))
    return boxes


def test_prepare_image_keeps_native_encodings(make_image: Callable[..., bytes]) -> None:
    png = make_image(40, 20)

    prepared = prepare_image(ImageInput(name="a.png", data=png, mime_type="image/png"))

    assert prepared.stream == png
    assert (prepared.width, prepared.height) == (40, 20)
    assert prepared.encoding is ImageEncoding.PNG


def test_prepare_image_normalizes_other_encodings_losslessly(make_image: Callable[..., bytes]) -> None:
    gif = make_image(30, 10, image_format="GIF", mode="P")

    prepared = prepare_image(ImageInput(name="a.gif", data=gif, mime_type="image/gif"))

    assert prepared.encoding is ImageEncoding.OTHER
    assert prepared.stream.startswith(b"\x89PNG")
    with Image.open(io.BytesIO(gif)) as original, Image.open(io.BytesIO(prepared.stream)) as normalized:
        assert list(original.convert("RGB").getdata()) == list(normalized.convert("RGB").getdata())


def test_normalize_to_png_converts_unsupported_modes() -> None:
    cmyk = Image.new("CMYK", (4, 4), color=(0, 0, 0, 0))

    with Image.open(io.BytesIO(normalize_to_png(cmyk))) as normalized:
        assert normalized.mode == "RGB"
        assert normalized.size == (4, 4)


def test_prepare_image_rejects_undecodable_bytes() -> None:
    with pytest.raises(ConvertError, match="unsupported image encoding: broken.webp"):
        prepare_image(ImageInput(name="broken.webp", data=b"not an image", mime_type="image/webp"))


def test_convert_images_places_image_on_page(make_image: Callable[..., bytes]) -> None:
    setup = PageSetup(page_size=PageSizeName.A4, orientation=Orientation.LANDSCAPE, margin_mm=0)
    image = ImageInput(name="wide.png", data=make_image(200, 100), mime_type="image/png")

    data = convert_images_to_document([image], setup)

    with fitz.open(stream=data, filetype="pdf") as document:
        assert document.page_count == 1
        assert (document[0].rect.width, document[0].rect.height) == (842, 595)
    x0, y0, x1, y1, _, _ = _image_boxes(data)[0]
    assert (x0, x1) == pytest.approx((0, 842), abs=0.5)
    assert (y0, y1) == pytest.approx((87, 508), abs=0.5)


def test_convert_images_follows_ordered_list(make_image: Callable[..., bytes]) -> None:
    images = FileOrderList(
        [
            ("wide", ImageInput(name="wide.jpg", data=make_image(60, 30, image_format="JPEG"), mime_type="image/jpeg")),
            ("tall", ImageInput(name="tall.png", data=make_image(30, 60), mime_type="image/png")),
        ],
    )
    images.move_adjacent("tall", MoveDirection.UP)

    data = convert_images_to_document(images, PageSetup())

    assert [box[4:] for box in _image_boxes(data)] == [(30, 60), (60, 30)]


def test_convert_images_aborts_on_bad_image(make_image: Callable[..., bytes], mocker) -> None:
    new_doc = mocker.spy(fitz, "open")
    images = [
        ImageInput(name="ok.png", data=make_image(10, 10), mime_type="image/png"),
        ImageInput(name="bad.png", data=b"\x89PNG broken", mime_type="image/png"),
    ]

    with pytest.raises(ConvertError, match="bad.png"):
        convert_images_to_document(images, PageSetup())
    new_doc.assert_not_called()


def test_convert_images_requires_images() -> None:
    with pytest.raises(UsageError, match="At least one image"):
        convert_images_to_document([], PageSetup())


def test_convert_images_honours_cancellation(make_image: Callable[..., bytes]) -> None:
    cancel_event = threading.Event()
    images = [ImageInput(name=f"{index}.png", data=make_image(10, 10), mime_type="image/png") for index in range(3)]

    def _cancel_after_first(update) -> None:
        cancel_event.set()

    with pytest.raises(OperationCancelledError) as exc_info:
        convert_images_to_document(images, PageSetup(), cancel_event=cancel_event, progress=_cancel_after_first)
    assert exc_info.value.units_completed == 1
    assert exc_info.value.units_total == 3


def test_convert_images_wraps_save_failures(make_image: Callable[..., bytes], mocker) -> None:
    mocker.patch("pagesmith.image_convert.save_document", side_effect=RuntimeError("disk full"))
    images = [ImageInput(name="a.png", data=make_image(10, 10), mime_type="image/png")]

    with pytest.raises(ConvertError, match="Failed to save document"):
        convert_images_to_document(images, PageSetup())
