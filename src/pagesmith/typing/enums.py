"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class RasterFormat(_EnumMixin):
    """Image encodings produced by the rasterizer."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        """MIME type of the encoded pages."""
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        """File extension used when naming rasterized pages."""
        return "jpg" if self is RasterFormat.JPEG else self.value

    @property
    def is_lossless(self) -> bool:
        """Whether the encoder ignores the quality setting."""
        return self is RasterFormat.PNG


class ImageEncoding(_EnumMixin):
    """Embedding path for an input image."""

    JPEG = "jpeg"
    PNG = "png"
    OTHER = "other"

    @classmethod
    def from_mime_type(cls, mime_type: str) -> ImageEncoding:
        """Resolve the embedding path from a declared MIME type.

        Args:
            mime_type: Declared MIME type, e.g. ``image/jpeg``.

        Returns:
            ImageEncoding: ``JPEG`` and ``PNG`` embed natively, anything else is ``OTHER``.
        """
        normalized = mime_type.strip().lower()
        if normalized in {"image/jpeg", "image/jpg", "image/pjpeg"}:
            return cls.JPEG
        if normalized in {"image/png", "image/x-png"}:
            return cls.PNG
        return cls.OTHER


class PageSizeName(_EnumMixin):
    """Named output page sizes."""

    A4 = "a4"
    LETTER = "letter"
    LEGAL = "legal"
    CUSTOM = "custom"


class Orientation(_EnumMixin):
    """Output page orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class MoveDirection(_EnumMixin):
    """Direction of an adjacent swap in an ordered list."""

    UP = "up"
    DOWN = "down"


class CompressionLevel(_EnumMixin):
    """Save-time compression hint."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
