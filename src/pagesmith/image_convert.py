"""Conversion of raster images into a PDF, one page per image."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, NamedTuple

import fitz
from PIL import Image

from pagesmith.documents import save_document
from pagesmith.exceptions import ConvertError, OperationCancelledError, UsageError
from pagesmith.layout import layout_for_setup, resolve_page_dimensions
from pagesmith.logging import get_logger
from pagesmith.ordering import ordered_payloads
from pagesmith.typing.enums import CompressionLevel, ImageEncoding
from pagesmith.typing.models import ProgressUpdate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagesmith.ordering import FileOrderList
    from pagesmith.typing.models import ImageInput, PageSetup
    from pagesmith.typing.protocol import CancellationToken, ProgressCallback

logger = get_logger(__name__)

# Pillow modes the PNG encoder stores without conversion.
_PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})


class PreparedImage(NamedTuple):
    """Image bytes ready to embed, with their pixel size."""

    name: str
    stream: bytes
    width: int
    height: int
    encoding: ImageEncoding


def normalize_to_png(image: Image.Image) -> bytes:
    """Re-encode a decoded image as PNG without altering its pixels.

    Only the first frame of animated images is kept. Modes PNG cannot store
    are converted to RGB, or RGBA when the image carries transparency.

    Args:
        image (Image.Image): Decoded image.

    Returns:
        bytes: PNG bytes.
    """
    image.seek(0)
    frame = image
    if image.mode not in _PNG_MODES:
        has_alpha = "A" in image.getbands() or "transparency" in image.info
        frame = image.convert("RGBA" if has_alpha else "RGB")

    buffer = io.BytesIO()
    frame.save(buffer, format="PNG")
    return buffer.getvalue()


def prepare_image(image: ImageInput) -> PreparedImage:
    """Decode an image and pick its embedding path.

    JPEG and PNG bytes are embedded as they are; other encodings are
    normalized to PNG first.

    Args:
        image (ImageInput): Input image.

    Raises:
        ConvertError: If the bytes cannot be decoded as an image.

    Returns:
        PreparedImage: Embeddable bytes and pixel size.
    """
    encoding = ImageEncoding.from_mime_type(image.mime_type)
    try:
        with Image.open(io.BytesIO(image.data)) as decoded:
            decoded.load()
            width, height = decoded.size
            stream = image.data if encoding is not ImageEncoding.OTHER else normalize_to_png(decoded)
    except Exception as exc:
        raise ConvertError(message="unsupported image encoding", item=image.name) from exc

    return PreparedImage(name=image.name, stream=stream, width=width, height=height, encoding=encoding)


def convert_images_to_document(
    images: Sequence[ImageInput] | FileOrderList[ImageInput],
    page_setup: PageSetup,
    *,
    compression: CompressionLevel = CompressionLevel.MEDIUM,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> bytes:
    """Create a PDF with one page per image, in order.

    Every image is decoded before the first page is created, so an
    undecodable image aborts the conversion without output.

    Args:
        images: Images in page order, or an ordered list sorted by position.
        page_setup: Page size, orientation and margin.
        compression: Save-time compression hint.
        cancel_event: Checked between images.
        progress: Receives one update per embedded image.

    Raises:
        UsageError: If no image is given.
        ConvertError: If an image cannot be decoded or embedded, or the document cannot be saved.
        LayoutError: If the page setup leaves no room for the image.
        OperationCancelledError: If cancelled before all pages were created.

    Returns:
        bytes: The PDF document.
    """
    ordered = ordered_payloads(images)
    if not ordered:
        raise UsageError(message="At least one image is required")

    prepared = [prepare_image(image) for image in ordered]
    page_width, page_height = resolve_page_dimensions(page_setup)

    output = fitz.open()
    try:
        for done, item in enumerate(prepared):
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(units_completed=done, units_total=len(prepared))

            layout = layout_for_setup(item.width, item.height, page_setup)
            page = output.new_page(width=page_width, height=page_height)
            try:
                page.insert_image(fitz.Rect(*layout.as_rect()), stream=item.stream, keep_proportion=False)
            except Exception as exc:
                raise ConvertError(message="Failed to embed image", item=item.name) from exc

            if progress is not None:
                progress(ProgressUpdate(units_completed=done + 1, units_total=len(prepared)))

        try:
            data = save_document(output, compression)
        except Exception as exc:
            raise ConvertError(message="Failed to save document") from exc
    finally:
        output.close()

    logger.info(
        "Images converted",
        extra={
            "images": len(prepared),
            "normalized": sum(item.encoding is ImageEncoding.OTHER for item in prepared),
            "page_size": page_setup.page_size.to_str(),
            "orientation": page_setup.orientation.to_str(),
        },
    )
    return data
