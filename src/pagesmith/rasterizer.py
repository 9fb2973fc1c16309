"""PDF page rasterization."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, NamedTuple

import fitz

from pagesmith.documents import open_document
from pagesmith.exceptions import RasterizeError
from pagesmith.logging import get_logger
from pagesmith.typing.enums import RasterFormat
from pagesmith.typing.models import PageFailure, RasterizationResult, RasterizedPage, RasterSettings
from pagesmith.workers import run_units, runs_in_process

if TYPE_CHECKING:
    from pagesmith.documents import SourceDocument
    from pagesmith.typing.models import PageRange
    from pagesmith.typing.protocol import CancellationToken, ProgressCallback

logger = get_logger(__name__)

_PIL_FORMAT = {
    RasterFormat.JPEG: "JPEG",
    RasterFormat.WEBP: "WEBP",
}


class _RenderUnit(NamedTuple):
    data: bytes
    page_number: int
    settings: RasterSettings


class _RenderOutcome(NamedTuple):
    page_number: int
    image: bytes | None
    error: str | None


def encode_pixmap(pixmap: fitz.Pixmap, settings: RasterSettings) -> bytes:
    """Encode a rendered pixmap.

    PNG goes through PyMuPDF and ignores quality. JPEG and WEBP go through
    Pillow with the clamped 1-100 quality.

    Args:
        pixmap (fitz.Pixmap): Rendered page.
        settings (RasterSettings): Target encoding.

    Returns:
        bytes: Encoded image.
    """
    if settings.format.is_lossless:
        return pixmap.tobytes(output="png")
    return pixmap.pil_tobytes(format=_PIL_FORMAT[settings.format], quality=settings.quality)


def render_page(page: fitz.Page, settings: RasterSettings) -> bytes:
    """Render one page at ``settings.scale`` and encode it.

    The pixmap covers the scaled page rectangle rounded outward to whole pixels.

    Args:
        page (fitz.Page): Loaded page.
        settings (RasterSettings): Resolution and encoding.

    Returns:
        bytes: Encoded page image.
    """
    matrix = fitz.Matrix(settings.scale, settings.scale)
    pixmap = page.get_pixmap(matrix=matrix, alpha=False)
    return encode_pixmap(pixmap, settings)


def _failed(unit: _RenderUnit, exc: Exception) -> _RenderOutcome:
    return _RenderOutcome(page_number=unit.page_number, image=None, error=f"{type(exc).__name__}: {exc}")


def _render_from_source(source: SourceDocument, unit: _RenderUnit) -> _RenderOutcome:
    """Render one page from an already opened document.

    Errors are returned, not raised, so one page never aborts the others.
    """
    try:
        image = render_page(source.load_page(unit.page_number), unit.settings)
    except Exception as exc:  # noqa: BLE001
        return _failed(unit, exc)
    return _RenderOutcome(page_number=unit.page_number, image=image, error=None)


def _render_unit(unit: _RenderUnit) -> _RenderOutcome:
    """Render one page from its own copy of the document, inside a worker process."""
    try:
        source = open_document(unit.data)
    except Exception as exc:  # noqa: BLE001
        return _failed(unit, exc)
    with source:
        return _render_from_source(source, unit)


def rasterize_document(
    data: bytes,
    page_range: PageRange,
    settings: RasterSettings,
    *,
    name: str = "document.pdf",
    all_or_nothing: bool = False,
    max_workers: int = 1,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> RasterizationResult:
    """Render the pages of ``page_range`` to encoded images.

    Pages are rendered independently. A failing page is reported in
    ``failures`` while the others are returned, unless ``all_or_nothing`` is
    set. Results are sorted by page number whatever the completion order.

    Args:
        data: Source PDF bytes; never mutated.
        page_range: Pages to render.
        settings: Resolution and encoding.
        name: Identifier used in errors and logs.
        all_or_nothing: Raise on the first failed page instead of collecting it.
        max_workers: Worker processes; 1 renders in the calling thread.
        cancel_event: Checked between pages.
        progress: Receives one update per rendered page.

    Raises:
        DecodeError: If ``data`` is not a readable PDF.
        RasterizeError: If a page is out of range, or a page fails with ``all_or_nothing``.
        OperationCancelledError: If cancelled before all pages completed.

    Returns:
        RasterizationResult: Rendered pages and per-page failures.
    """
    units = [_RenderUnit(data=data, page_number=page_number, settings=settings) for page_number in page_range.pages]
    with open_document(data, name=name) as source:
        if page_range.pages[-1] > source.page_count:
            raise RasterizeError(
                message=f"Page out of range 1..{source.page_count}",
                page_number=page_range.pages[-1],
            )
        # Worker processes cannot share the open document and reopen it per page.
        worker = (
            partial(_render_from_source, source) if runs_in_process(max_workers, len(units)) else _render_unit
        )
        outcomes = run_units(
            worker,
            units,
            max_workers=max_workers,
            cancel_event=cancel_event,
            progress=progress,
        )

    result = RasterizationResult()
    for outcome in sorted(outcomes, key=lambda item: item.page_number):
        if outcome.image is None:
            if all_or_nothing:
                raise RasterizeError(message=outcome.error or "Render failed", page_number=outcome.page_number)
            logger.warning(
                "Page render failed",
                extra={"input": name, "page": outcome.page_number, "error": outcome.error},
            )
            result.failures.append(PageFailure(page_number=outcome.page_number, message=outcome.error or ""))
            continue
        result.pages.append(
            RasterizedPage(
                page_number=outcome.page_number,
                mime_type=settings.format.mime_type,
                data=outcome.image,
            ),
        )

    logger.info(
        "PDF rasterized",
        extra={
            "input": name,
            "pages": len(result.pages),
            "failures": len(result.failures),
            "dpi": settings.dpi,
            "format": settings.format.to_str(),
        },
    )
    return result
