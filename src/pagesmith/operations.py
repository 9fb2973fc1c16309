"""Feature-level flows: merge, split, extract, rearrange, compress and conversions."""

from __future__ import annotations

import re
from contextlib import ExitStack
from typing import TYPE_CHECKING, NamedTuple

from pagesmith.documents import assemble_document, count_pages, open_document
from pagesmith.exceptions import AssembleError, PackageError, UsageError
from pagesmith.image_convert import convert_images_to_document
from pagesmith.logging import get_logger, operation_context
from pagesmith.ordering import FileOrderList, ordered_payloads
from pagesmith.page_ranges import parse_page_range
from pagesmith.rasterizer import rasterize_document
from pagesmith.settings import Settings, get_settings
from pagesmith.typing.enums import CompressionLevel
from pagesmith.typing.models import (
    DocumentInput,
    ImageInput,
    NamedOutput,
    PageSetup,
    RasterExport,
    RasterSettings,
    SplitFailure,
    SplitResult,
    SplitSpec,
)
from pagesmith.workers import run_units

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagesmith.typing.protocol import CancellationToken, ProgressCallback

logger = get_logger(__name__)

MERGED_NAME = "merged.pdf"
IMAGES_NAME = "images.pdf"
_WHITESPACE = re.compile(r"\s+")


class _SplitUnit(NamedTuple):
    data: bytes
    source_name: str
    spec: SplitSpec
    compression: CompressionLevel


class _SplitOutcome(NamedTuple):
    data: bytes | None
    error: str | None


def split_output_name(document: DocumentInput, spec: SplitSpec) -> str:
    """Return the file name of one split output, e.g. ``report-Pages-1-3.pdf``."""
    return f"{document.base_name}-{_WHITESPACE.sub('-', spec.name)}.pdf"


def page_image_name(document: DocumentInput, page_number: int, settings: RasterSettings) -> str:
    """Return the file name of one rasterized page, e.g. ``report-page-2.png``."""
    return f"{document.base_name}-page-{page_number}.{settings.format.extension}"


def _split_unit(unit: _SplitUnit) -> _SplitOutcome:
    """Assemble one split from its own copy of the source.

    Errors are returned, not raised, so they cross process boundaries intact.
    """
    try:
        with open_document(unit.data, name=unit.source_name) as source:
            pages = range(unit.spec.start, unit.spec.end + 1)
            data = assemble_document([(source, pages)], compression=unit.compression)
    except PackageError as exc:
        return _SplitOutcome(data=None, error=str(exc))
    return _SplitOutcome(data=data, error=None)


def merge_documents(
    documents: Sequence[DocumentInput] | FileOrderList[DocumentInput],
    *,
    settings: Settings | None = None,
    compression: CompressionLevel | None = None,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> NamedOutput:
    """Concatenate every page of every document, in the given order.

    Args:
        documents: Inputs in merge order, or an ordered list sorted by position.
        settings: Defaults source; falls back to the cached settings.
        compression: Save-time compression hint.
        cancel_event: Checked between documents.
        progress: Receives one update per document copied.

    Raises:
        UsageError: If fewer than two documents are given.
        DecodeError: If one input cannot be opened; the whole merge fails.

    Returns:
        NamedOutput: ``merged.pdf``.
    """
    config = settings or get_settings()
    ordered = ordered_payloads(documents)
    if len(ordered) < 2:  # noqa: PLR2004
        raise UsageError(message="At least 2 PDF files are required to merge")

    with operation_context("merge", inputs=len(ordered)), ExitStack() as stack:
        sources = [stack.enter_context(open_document(item.data, name=item.name)) for item in ordered]
        data = assemble_document(
            [(source, None) for source in sources],
            compression=compression or config.default_compression,
            cancel_event=cancel_event,
            progress=progress,
        )
        logger.info("Merge completed", extra={"pages": sum(source.page_count for source in sources)})
    return NamedOutput(name=MERGED_NAME, data=data)


def split_document(
    document: DocumentInput,
    specs: Sequence[SplitSpec],
    *,
    settings: Settings | None = None,
    all_or_nothing: bool = False,
    max_workers: int | None = None,
    compression: CompressionLevel | None = None,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> SplitResult:
    """Produce one document per split spec.

    Specs are independent: a spec beyond the last page, or one that fails to
    assemble, becomes a failure entry while the others still produce output.
    With ``all_or_nothing`` the bounds of every spec are checked before any
    output is built and any failure raises.

    Args:
        document: Source document.
        specs: Split specs, in output order; they may overlap.
        settings: Defaults source; falls back to the cached settings.
        all_or_nothing: Raise instead of collecting failures.
        max_workers: Worker processes; defaults to ``settings.max_workers``.
        compression: Save-time compression hint.
        cancel_event: Checked between specs.
        progress: Receives one update per assembled spec.

    Raises:
        UsageError: If no spec is given.
        DecodeError: If the source cannot be opened.
        AssembleError: With ``all_or_nothing``, for the first failing spec.
        OperationCancelledError: If cancelled before all specs completed.

    Returns:
        SplitResult: Outputs in spec order and failed specs.
    """
    config = settings or get_settings()
    if not specs:
        raise UsageError(message="At least one split range is required")

    with operation_context("split", input=document.name, specs=len(specs)):
        total_pages = count_pages(document.data, name=document.name)
        result = SplitResult()

        out_of_bounds = [spec for spec in specs if not spec.fits(total_pages)]
        if out_of_bounds and all_or_nothing:
            spec = out_of_bounds[0]
            raise AssembleError(
                message=f"Invalid range {spec.name}: document has {total_pages} pages",
                source=document.name,
                page_number=spec.end,
            )

        valid = [spec for spec in specs if spec.fits(total_pages)]
        level = compression or config.default_compression
        outcomes = run_units(
            _split_unit,
            [_SplitUnit(data=document.data, source_name=document.name, spec=spec, compression=level) for spec in valid],
            max_workers=max_workers or config.max_workers,
            cancel_event=cancel_event,
            progress=progress,
        )
        pending = iter(outcomes)

        for spec in specs:
            if not spec.fits(total_pages):
                message = f"Invalid range {spec.name}: document has {total_pages} pages"
            else:
                outcome = next(pending)
                if outcome.data is not None:
                    result.outputs.append(NamedOutput(name=split_output_name(document, spec), data=outcome.data))
                    continue
                message = outcome.error or "Split failed"

            if all_or_nothing:
                raise AssembleError(message=message, source=document.name)
            logger.warning("Split range skipped", extra={"range": spec.name, "error": message})
            result.failures.append(SplitFailure(output_name=spec.name, message=message))

        logger.info(
            "Split completed",
            extra={"outputs": len(result.outputs), "failures": len(result.failures)},
        )
    return result


def extract_pages(
    document: DocumentInput,
    expression: str,
    *,
    settings: Settings | None = None,
    compression: CompressionLevel | None = None,
) -> NamedOutput:
    """Build a document holding the pages selected by ``expression``.

    Raises:
        DecodeError: If the source cannot be opened.
        ParseError: If the expression selects no page.
    """
    config = settings or get_settings()
    with operation_context("extract", input=document.name), open_document(document.data, name=document.name) as source:
        page_range = parse_page_range(expression, source.page_count)
        data = assemble_document([(source, page_range)], compression=compression or config.default_compression)
        logger.info("Pages extracted", extra={"pages": len(page_range)})
    return NamedOutput(name=f"{document.base_name}-pages.pdf", data=data)


def rearrange_pages(
    document: DocumentInput,
    order: Sequence[int],
    *,
    settings: Settings | None = None,
    compression: CompressionLevel | None = None,
) -> NamedOutput:
    """Build a document whose pages follow ``order`` (1-based, repeats allowed).

    Raises:
        UsageError: If ``order`` is empty.
        DecodeError: If the source cannot be opened.
        AssembleError: If a page number is out of range.
    """
    config = settings or get_settings()
    if not order:
        raise UsageError(message="A page order is required")

    with (
        operation_context("rearrange", input=document.name),
        open_document(document.data, name=document.name) as source,
    ):
        data = assemble_document([(source, list(order))], compression=compression or config.default_compression)
        logger.info("Pages rearranged", extra={"pages": len(order)})
    return NamedOutput(name=f"{document.base_name}-rearranged.pdf", data=data)


def compress_document(
    document: DocumentInput,
    level: CompressionLevel | None = None,
    *,
    settings: Settings | None = None,
) -> NamedOutput:
    """Rewrite a document with the save options of ``level``.

    The level is a hint; the output is not guaranteed to be smaller.

    Raises:
        DecodeError: If the source cannot be opened.
    """
    config = settings or get_settings()
    with operation_context("compress", input=document.name), open_document(document.data, name=document.name) as source:
        data = assemble_document([(source, None)], compression=level or config.default_compression)
        logger.info("Document compressed", extra={"input_bytes": document.size, "output_bytes": len(data)})
    return NamedOutput(name=f"{document.base_name}-compressed.pdf", data=data)


def images_to_document(
    images: Sequence[ImageInput] | FileOrderList[ImageInput],
    page_setup: PageSetup | None = None,
    *,
    settings: Settings | None = None,
    compression: CompressionLevel | None = None,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> NamedOutput:
    """Convert images to a PDF with one page per image.

    Raises:
        UsageError: If no image is given.
        ConvertError: If an image cannot be decoded or the document cannot be saved; no document is produced.
    """
    config = settings or get_settings()
    setup = page_setup or PageSetup(
        page_size=config.default_page_size,
        orientation=config.default_orientation,
        margin_mm=config.default_margin_mm,
    )
    with operation_context("images_to_pdf"):
        data = convert_images_to_document(
            images,
            setup,
            compression=compression or config.default_compression,
            cancel_event=cancel_event,
            progress=progress,
        )
    return NamedOutput(name=IMAGES_NAME, data=data)


def document_to_images(
    document: DocumentInput,
    expression: str = "all",
    raster_settings: RasterSettings | None = None,
    *,
    settings: Settings | None = None,
    all_or_nothing: bool = False,
    max_workers: int | None = None,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> RasterExport:
    """Rasterize the selected pages of a document into named images.

    Page tokens may come in any order; images are always returned in
    ascending page order.

    Raises:
        DecodeError: If the source cannot be opened.
        ParseError: If the expression selects no page.
        RasterizeError: With ``all_or_nothing``, for the first failing page.
        OperationCancelledError: If cancelled before all pages completed.
    """
    config = settings or get_settings()
    raster = raster_settings or RasterSettings(
        format=config.default_raster_format,
        dpi=config.default_dpi,
        quality=config.default_quality,
    )

    with operation_context("pdf_to_images", input=document.name):
        page_range = parse_page_range(expression, count_pages(document.data, name=document.name))
        result = rasterize_document(
            document.data,
            page_range,
            raster,
            name=document.name,
            all_or_nothing=all_or_nothing,
            max_workers=max_workers or config.max_workers,
            cancel_event=cancel_event,
            progress=progress,
        )

    images = [
        NamedOutput(
            name=page_image_name(document, page.page_number, raster),
            data=page.data,
            mime_type=page.mime_type,
        )
        for page in result.pages
    ]
    return RasterExport(images=images, failures=result.failures)
