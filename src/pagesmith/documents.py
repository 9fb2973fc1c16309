"""Source documents and page assembly."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Self

import fitz

from pagesmith.exceptions import AssembleError, DecodeError, OperationCancelledError
from pagesmith.logging import get_logger
from pagesmith.typing.enums import CompressionLevel
from pagesmith.typing.models import PageRange, ProgressUpdate

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from pagesmith.typing.protocol import CancellationToken, ProgressCallback

logger = get_logger(__name__)

_SAVE_OPTIONS: dict[CompressionLevel, dict[str, Any]] = {
    CompressionLevel.LOW: {"garbage": 1, "deflate": True},
    CompressionLevel.MEDIUM: {"garbage": 3, "deflate": True, "deflate_images": True},
    CompressionLevel.HIGH: {
        "garbage": 4,
        "deflate": True,
        "deflate_images": True,
        "deflate_fonts": True,
        "clean": True,
    },
}

PageSelection = PageRange | Sequence[int] | None
AssemblyPart = tuple["SourceDocument", PageSelection]


class SourceDocument:
    """An opened source document.

    The wrapped PyMuPDF document is owned by this object and released by
    ``close``. Callers only see page numbers and sizes.
    """

    def __init__(self, document: fitz.Document, name: str) -> None:
        self._document = document
        self.name = name

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SourceDocument(name={self.name!r}, page_count={self.page_count})"

    @property
    def page_count(self) -> int:
        """Number of pages in the document."""
        return self._document.page_count

    @property
    def closed(self) -> bool:
        """Whether the underlying document was released."""
        return self._document.is_closed

    def page_size(self, page_number: int) -> tuple[float, float]:
        """Return ``(width, height)`` in points of a 1-based page.

        Raises:
            AssembleError: If the page does not exist.
        """
        rect = self.load_page(page_number).rect
        return rect.width, rect.height

    def load_page(self, page_number: int) -> fitz.Page:
        """Return the PyMuPDF page for a 1-based page number.

        Raises:
            AssembleError: If the page does not exist.
        """
        self._check_page(page_number)
        return self._document.load_page(page_number - 1)

    def close(self) -> None:
        """Release the document."""
        if not self._document.is_closed:
            self._document.close()

    def resolve_pages(self, selection: PageSelection) -> list[int]:
        """Turn a selection into the list of 1-based pages to copy.

        Args:
            selection: A page range, explicit page numbers in copy order, or None for every page.

        Raises:
            AssembleError: If a page number falls outside the document.

        Returns:
            list[int]: Page numbers in copy order.
        """
        if selection is None:
            return list(range(1, self.page_count + 1))
        pages = list(selection.pages) if isinstance(selection, PageRange) else list(selection)
        for page_number in pages:
            self._check_page(page_number)
        return pages

    def copy_pages_into(self, target: fitz.Document, pages: Sequence[int]) -> None:
        """Append ``pages`` to ``target``, preserving their order."""
        for first, last in _consecutive_runs(pages):
            target.insert_pdf(self._document, from_page=first - 1, to_page=last - 1)

    def _check_page(self, page_number: int) -> None:
        if not 1 <= page_number <= self.page_count:
            raise AssembleError(
                message=f"Page out of range 1..{self.page_count}",
                source=self.name,
                page_number=page_number,
            )


def open_document(data: bytes, *, name: str = "document.pdf") -> SourceDocument:
    """Decode a PDF buffer.

    Args:
        data (bytes): Raw document bytes.
        name (str): Identifier reported in errors and logs.

    Raises:
        DecodeError: If the bytes are not a readable, unencrypted PDF.

    Returns:
        SourceDocument: The opened document.
    """
    if not data:
        raise DecodeError(source=name)
    try:
        document = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise DecodeError(source=name) from exc

    if document.needs_pass or not document.is_pdf or document.page_count == 0:
        reason = "encrypted document" if document.needs_pass else "corrupt or unsupported document"
        document.close()
        raise DecodeError(message=reason, source=name)
    return SourceDocument(document, name)


def save_document(document: fitz.Document, compression: CompressionLevel = CompressionLevel.MEDIUM) -> bytes:
    """Serialize a document with the save options of a compression level.

    Args:
        document (fitz.Document): Document to serialize.
        compression (CompressionLevel): Compression hint.

    Returns:
        bytes: PDF bytes.
    """
    return document.tobytes(**_SAVE_OPTIONS[compression])


def assemble_document(
    parts: Sequence[AssemblyPart],
    *,
    compression: CompressionLevel = CompressionLevel.MEDIUM,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> bytes:
    """Build a new document from pages of one or more sources.

    Sources are visited in the given order, and pages within a source in the
    order of their selection. Nothing is sorted or deduplicated across sources.

    Args:
        parts: ``(source, selection)`` pairs; a None selection copies every page.
        compression: Save-time compression hint.
        cancel_event: Checked between sources.
        progress: Receives one update per source copied.

    Raises:
        AssembleError: If a page is out of range, nothing is selected or copying fails.
        OperationCancelledError: If ``cancel_event`` is set before completion.

    Returns:
        bytes: The assembled document; no partial output is ever returned.
    """
    plan = [(source, source.resolve_pages(selection)) for source, selection in parts]
    total_pages = sum(len(pages) for _, pages in plan)
    if total_pages == 0:
        raise AssembleError(message="No pages selected")

    output = fitz.open()
    try:
        for done, (source, pages) in enumerate(plan):
            if cancel_event is not None and cancel_event.is_set():
                raise OperationCancelledError(units_completed=done, units_total=len(plan))
            try:
                source.copy_pages_into(output, pages)
            except Exception as exc:
                raise AssembleError(message="Failed to copy pages", source=source.name) from exc
            if progress is not None:
                progress(ProgressUpdate(units_completed=done + 1, units_total=len(plan)))

        try:
            data = save_document(output, compression)
        except Exception as exc:
            raise AssembleError(message="Failed to save document") from exc
    finally:
        output.close()

    logger.info(
        "Document assembled",
        extra={"sources": len(plan), "pages": total_pages, "bytes": len(data)},
    )
    return data


def count_pages(data: bytes, *, name: str = "document.pdf") -> int:
    """Return the page count of a PDF buffer.

    Raises:
        DecodeError: If the buffer cannot be opened.
    """
    with open_document(data, name=name) as document:
        return document.page_count


def _consecutive_runs(pages: Sequence[int]) -> Iterator[tuple[int, int]]:
    """Group pages into ascending consecutive runs without reordering them.

    ``[1, 2, 3, 7, 5, 6]`` yields ``(1, 3)``, ``(7, 7)``, ``(5, 6)``.
    """
    if not pages:
        return
    first = last = pages[0]
    for page in pages[1:]:
        if page == last + 1:
            last = page
            continue
        yield first, last
        first = last = page
    yield first, last
