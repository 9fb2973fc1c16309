"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(eq=False)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(eq=False)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(eq=False)
class ParseError(PackageError):
    """Raised when a page-selection expression selects no page."""

    message: str = "empty selection"
    expression: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.expression is None:
            return self.message
        return f"{self.message}: {self.expression!r}"


@dataclass(eq=False)
class DecodeError(PackageError):
    """Raised when input bytes are not a valid or supported document."""

    message: str = "corrupt or unsupported document"
    source: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.source}" if self.source else self.message


@dataclass(eq=False)
class LayoutError(PackageError):
    """Raised when image placement geometry is degenerate."""

    message: str = "degenerate dimensions"

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(eq=False)
class ConvertError(PackageError):
    """Raised when an image cannot be turned into a document page."""

    message: str
    item: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.item}" if self.item else self.message


@dataclass(eq=False)
class AssembleError(PackageError):
    """Raised when an output document cannot be assembled."""

    message: str
    source: str | None = None
    page_number: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        parts = [self.message]
        if self.source:
            parts.append(f"source={self.source}")
        if self.page_number is not None:
            parts.append(f"page={self.page_number}")
        return ", ".join(parts)


@dataclass(eq=False)
class RasterizeError(PackageError):
    """Raised when a page cannot be rendered or encoded."""

    message: str
    page_number: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.page_number is None:
            return self.message
        return f"{self.message} (page {self.page_number})"


@dataclass(eq=False)
class OrderingError(PackageError):
    """Raised when an ordered list mutation references an invalid item."""

    message: str
    item_id: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.item_id}" if self.item_id else self.message


@dataclass(eq=False)
class UsageError(PackageError):
    """Raised when a feature is called with inputs it cannot work with."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(eq=False)
class IntakeError(PackageError):
    """Raised when an incoming file breaks the intake constraints."""

    message: str
    file_name: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.file_name}" if self.file_name else self.message


@dataclass(eq=False)
class OperationCancelledError(PackageError):
    """Raised when a long operation is cancelled between work units."""

    units_completed: int
    units_total: int

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Operation cancelled after {self.units_completed}/{self.units_total} units"
