from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import fitz
import pytest

from pagesmith.documents import _consecutive_runs, assemble_document, count_pages, open_document
from pagesmith.exceptions import AssembleError, DecodeError, OperationCancelledError
from pagesmith.typing.enums import CompressionLevel
from pagesmith.typing.models import PageRange, ProgressUpdate

if TYPE_CHECKING:
    from collections.abc import Callable


def test_open_document_rejects_empty_and_garbage_bytes() -> None:
    with pytest.raises(DecodeError, match=r"corrupt or unsupported document: empty\.pdf"):
        open_document(b"", name="empty.pdf")
    with pytest.raises(DecodeError, match="garbage.pdf"):
        open_document(b"definitely not a pdf", name="garbage.pdf")


def test_open_document_rejects_encrypted_pdf(make_pdf: Callable[..., bytes]) -> None:
    with fitz.open(stream=make_pdf(1), filetype="pdf") as document:
        encrypted = document.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="user")

    with pytest.raises(DecodeError, match="encrypted document"):
        open_document(encrypted, name="locked.pdf")


def test_source_document_reports_pages_and_closes(make_pdf: Callable[..., bytes]) -> None:
    with open_document(make_pdf(3, width=300, height=400), name="doc.pdf") as source:
        assert source.page_count == 3
        assert source.page_size(2) == (300, 400)
        assert "doc.pdf" in repr(source)
    assert source.closed


def test_resolve_pages_accepts_ranges_sequences_and_none(make_pdf: Callable[..., bytes]) -> None:
    with open_document(make_pdf(4)) as source:
        assert source.resolve_pages(None) == [1, 2, 3, 4]
        assert source.resolve_pages(PageRange(pages=(2, 4), total_pages=4)) == [2, 4]
        assert source.resolve_pages([4, 1, 1]) == [4, 1, 1]

        with pytest.raises(AssembleError, match="page=5") as exc_info:
            source.resolve_pages([1, 5])
    assert exc_info.value.source == "document.pdf"


def test_assemble_document_preserves_selection_order(
    make_pdf: Callable[..., bytes],
    page_labels: Callable[[bytes], list[str]],
) -> None:
    with open_document(make_pdf(4)) as source:
        data = assemble_document([(source, [3, 1, 2, 4])])

    assert page_labels(data) == ["Page 3", "Page 1", "Page 2", "Page 4"]


def test_assemble_document_concatenates_sources(
    make_pdf: Callable[..., bytes],
    page_labels: Callable[[bytes], list[str]],
) -> None:
    updates: list[ProgressUpdate] = []
    with open_document(make_pdf(2, label="A")) as first, open_document(make_pdf(2, label="B")) as second:
        data = assemble_document(
            [(second, None), (first, PageRange(pages=(2,), total_pages=2))],
            compression=CompressionLevel.HIGH,
            progress=updates.append,
        )

    assert page_labels(data) == ["B 1", "B 2", "A 2"]
    assert [(update.units_completed, update.units_total) for update in updates] == [(1, 2), (2, 2)]


def test_assemble_document_validates_before_copying(make_pdf: Callable[..., bytes], mocker) -> None:
    with open_document(make_pdf(2), name="short.pdf") as source:
        copy = mocker.spy(source, "copy_pages_into")

        with pytest.raises(AssembleError, match="source=short.pdf, page=3"):
            assemble_document([(source, None), (source, [3])])
    copy.assert_not_called()


def test_assemble_document_requires_pages(make_pdf: Callable[..., bytes]) -> None:
    with open_document(make_pdf(2)) as source, pytest.raises(AssembleError, match="No pages selected"):
        assemble_document([(source, [])])


def test_assemble_document_honours_cancellation(make_pdf: Callable[..., bytes]) -> None:
    cancel_event = threading.Event()
    cancel_event.set()

    with open_document(make_pdf(2)) as source, pytest.raises(OperationCancelledError) as exc_info:
        assemble_document([(source, None)], cancel_event=cancel_event)
    assert exc_info.value.units_completed == 0
    assert exc_info.value.units_total == 1


def test_assemble_document_wraps_save_failures(make_pdf: Callable[..., bytes], mocker) -> None:
    mocker.patch("pagesmith.documents.save_document", side_effect=RuntimeError("disk full"))

    with open_document(make_pdf(2)) as source:
        with pytest.raises(AssembleError, match="Failed to save document") as exc_info:
            assemble_document([(source, None)])
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_count_pages(make_pdf: Callable[..., bytes]) -> None:
    assert count_pages(make_pdf(7)) == 7


def test_consecutive_runs_keep_order() -> None:
    assert list(_consecutive_runs([1, 2, 3, 7, 5, 6, 6])) == [(1, 3), (7, 7), (5, 6), (6, 6)]
    assert list(_consecutive_runs([])) == []
