from __future__ import annotations

import pytest

from pagesmith.exceptions import IntakeError
from pagesmith.intake import DOCUMENT_MIME_TYPES, IMAGE_MIME_TYPES, validate_batch
from pagesmith.settings import Settings
from pagesmith.typing.models import DocumentInput, ImageInput


def _settings(**overrides: int) -> Settings:
    return Settings(MAX_FILE_SIZE_MB=1, MAX_FILES_PER_BATCH=2, **overrides)


def test_validate_batch_accepts_valid_files() -> None:
    files = [DocumentInput(name="a.pdf", data=b"%PDF"), DocumentInput(name="b.pdf", data=b"%PDF")]

    validate_batch(files, DOCUMENT_MIME_TYPES, settings=_settings())


def test_validate_batch_rejects_empty_batch() -> None:
    with pytest.raises(IntakeError, match="No files uploaded"):
        validate_batch([], DOCUMENT_MIME_TYPES, settings=_settings())


def test_validate_batch_rejects_too_many_files() -> None:
    files = [DocumentInput(name=f"{index}.pdf", data=b"%PDF") for index in range(3)]

    with pytest.raises(IntakeError, match="maximum 2 allowed"):
        validate_batch(files, DOCUMENT_MIME_TYPES, settings=_settings())


def test_validate_batch_rejects_wrong_type() -> None:
    files = [ImageInput(name="scan.tiff", data=b"II*", mime_type="image/tiff")]

    with pytest.raises(IntakeError, match="Invalid file type image/tiff: scan.tiff"):
        validate_batch(files, IMAGE_MIME_TYPES, settings=_settings())


def test_validate_batch_rejects_empty_file() -> None:
    with pytest.raises(IntakeError, match="Empty file: a.png"):
        validate_batch([ImageInput(name="a.png", data=b"", mime_type="IMAGE/PNG")], IMAGE_MIME_TYPES, settings=_settings())


def test_validate_batch_rejects_oversized_file() -> None:
    big = DocumentInput(name="big.pdf", data=b"x" * (1024 * 1024 + 1))

    with pytest.raises(IntakeError, match="exceeds 1MB limit") as exc_info:
        validate_batch([big], DOCUMENT_MIME_TYPES, settings=_settings())
    assert exc_info.value.file_name == "big.pdf"
