"""Pytest marker auto-assignment by folder and shared document fixtures."""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import fitz
import pytest
from PIL import Image

from pagesmith import logger

if TYPE_CHECKING:
    from collections.abc import Callable


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def _build_pdf(page_count: int, *, width: float = 595, height: float = 842, label: str = "Page") -> bytes:
    document = fitz.open()
    for page_number in range(1, page_count + 1):
        page = document.new_page(width=width, height=height)
        page.insert_text((72, 72), f"{label} {page_number}", fontsize=24)
    data = document.tobytes()
    document.close()
    return data


def _page_labels(data: bytes) -> list[str]:
    with fitz.open(stream=data, filetype="pdf") as document:
        return [page.get_text().strip() for page in document]


def _build_image(width: int, height: int, image_format: str = "PNG", mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color=128 if mode in {"L", "P"} else (200, 40, 40)).save(
        buffer,
        format=image_format,
    )
    return buffer.getvalue()


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Return a factory building PDFs whose pages read ``Page 1``, ``Page 2``..."""
    return _build_pdf


@pytest.fixture
def page_labels() -> Callable[[bytes], list[str]]:
    """Return a helper reading the label text of every page."""
    return _page_labels


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Return a factory building solid-color images with Pillow."""
    return _build_image
