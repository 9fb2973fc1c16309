"""File intake checks applied before bytes reach the engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pagesmith.exceptions import IntakeError
from pagesmith.settings import Settings, get_settings
from pagesmith.typing.models import PDF_MIME_TYPE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pagesmith.typing.models import DocumentInput, ImageInput

DOCUMENT_MIME_TYPES = frozenset({PDF_MIME_TYPE})
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"})


def validate_batch(
    files: Sequence[DocumentInput | ImageInput],
    allowed_mime_types: frozenset[str],
    *,
    settings: Settings | None = None,
) -> None:
    """Check MIME types, per-file size and batch size of incoming files.

    Args:
        files: Incoming files, in upload order.
        allowed_mime_types: Accepted MIME types for the feature.
        settings: Limits source; defaults to the cached settings.

    Raises:
        IntakeError: On the first violated constraint, naming the file.
    """
    config = settings or get_settings()
    if not files:
        raise IntakeError(message="No files uploaded")
    if len(files) > config.max_files_per_batch:
        raise IntakeError(message=f"Too many files: maximum {config.max_files_per_batch} allowed")

    for item in files:
        if item.mime_type.lower() not in allowed_mime_types:
            raise IntakeError(message=f"Invalid file type {item.mime_type}", file_name=item.name)
        if item.size == 0:
            raise IntakeError(message="Empty file", file_name=item.name)
        if item.size > config.max_file_size_bytes:
            raise IntakeError(
                message=f"File size exceeds {config.max_file_size_mb}MB limit",
                file_name=item.name,
            )
