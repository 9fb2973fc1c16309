"""Input and output buffer models."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

PDF_MIME_TYPE = "application/pdf"

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


class DocumentInput(BaseModel):
    """A source document handed to the engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    data: bytes
    mime_type: str = PDF_MIME_TYPE

    @property
    def size(self) -> int:
        """Buffer size in bytes."""
        return len(self.data)

    @property
    def base_name(self) -> str:
        """File name without its ``.pdf`` suffix, used to name outputs."""
        return _PDF_SUFFIX.sub("", self.name) or "document"


class ImageInput(BaseModel):
    """A raster image handed to the image-to-document converter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        """Buffer size in bytes."""
        return len(self.data)


class NamedOutput(BaseModel):
    """A produced buffer ready for download or storage."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    data: bytes
    mime_type: str = PDF_MIME_TYPE

    @property
    def size(self) -> int:
        """Buffer size in bytes."""
        return len(self.data)
