from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pagesmith import cli
from pagesmith.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_cli_merge_writes_merged_document(
    tmp_path: Path,
    make_pdf: Callable[..., bytes],
    page_labels: Callable[[bytes], list[str]],
) -> None:
    first = tmp_path / "a.pdf"
    second = tmp_path / "b.pdf"
    first.write_bytes(make_pdf(1, label="A"))
    second.write_bytes(make_pdf(2, label="B"))
    out_dir = tmp_path / "out"

    exit_code = cli.main(["merge", str(first), str(second), "--output-dir", str(out_dir)])

    assert exit_code == 0
    assert page_labels((out_dir / "merged.pdf").read_bytes()) == ["A 1", "B 1", "B 2"]


def test_cli_split_reports_failed_range(tmp_path: Path, make_pdf: Callable[..., bytes]) -> None:
    source = tmp_path / "book.pdf"
    source.write_bytes(make_pdf(4))
    out_dir = tmp_path / "out"

    exit_code = cli.main(
        ["split", str(source), "--range", "1-2:Part one", "--range", "3-8", "--output-dir", str(out_dir)],
    )

    assert exit_code == 1
    assert sorted(path.name for path in out_dir.iterdir()) == ["book-Part-one.pdf"]


def test_cli_images_to_pdf_rejects_unknown_image_type(tmp_path: Path) -> None:
    image = tmp_path / "scan.tiff"
    image.write_bytes(b"II*\x00")

    exit_code = cli.main(["images-to-pdf", str(image), "--output-dir", str(tmp_path / "out")])

    assert exit_code == 1
    assert not (tmp_path / "out").exists()


def test_cli_images_to_pdf_writes_document(tmp_path: Path, make_image: Callable[..., bytes]) -> None:
    image = tmp_path / "photo.jpg"
    image.write_bytes(make_image(40, 30, image_format="JPEG"))
    out_dir = tmp_path / "out"

    exit_code = cli.main(
        ["images-to-pdf", str(image), "--page-size", "legal", "--orientation", "landscape", "--output-dir", str(out_dir)],
    )

    assert exit_code == 0
    assert (out_dir / "images.pdf").read_bytes().startswith(b"%PDF")


def test_cli_pdf_to_images_uses_results_dir(tmp_path: Path, make_pdf: Callable[..., bytes]) -> None:
    source = tmp_path / "scan.pdf"
    source.write_bytes(make_pdf(3))

    exit_code = cli.main(["pdf-to-images", str(source), "--pages", "2-3", "--dpi", "20"])

    assert exit_code == 0
    assert sorted(path.name for path in (tmp_path / "results").iterdir()) == ["scan-page-2.png", "scan-page-3.png"]
