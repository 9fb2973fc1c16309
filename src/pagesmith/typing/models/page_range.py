"""Page selection models."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


def default_split_name(start: int, end: int) -> str:
    """Return the display name of a split covering ``start..end``.

    Args:
        start (int): First page (1-based, inclusive).
        end (int): Last page (1-based, inclusive).

    Returns:
        str: ``Page N`` for a single page, ``Pages A-B`` otherwise.
    """
    return f"Page {start}" if start == end else f"Pages {start}-{end}"


class PageRange(BaseModel):
    """Validated, ascending and deduplicated selection of 1-based page numbers."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pages: tuple[int, ...]
    total_pages: int = Field(ge=0)

    @model_validator(mode="after")
    def _validate_pages(self) -> Self:
        """Enforce non-empty, ascending, unique pages within ``[1, total_pages]``.

        Raises:
            ValueError: If one of the invariants does not hold.

        Returns:
            Self: The validated range.
        """
        if not self.pages:
            raise ValueError("page range must not be empty")  # noqa: TRY003
        if any(later <= earlier for earlier, later in zip(self.pages, self.pages[1:], strict=False)):
            raise ValueError("page numbers must be strictly ascending")  # noqa: TRY003
        if self.pages[0] < 1 or self.pages[-1] > self.total_pages:
            raise ValueError(f"page numbers must be within 1..{self.total_pages}")  # noqa: TRY003
        return self

    @classmethod
    def full(cls, total_pages: int) -> PageRange:
        """Return every page of a ``total_pages`` document."""
        return cls(pages=tuple(range(1, total_pages + 1)), total_pages=total_pages)

    @classmethod
    def span(cls, start: int, end: int, total_pages: int) -> PageRange:
        """Return the pages ``start..end`` (inclusive, 1-based)."""
        return cls(pages=tuple(range(start, end + 1)), total_pages=total_pages)

    @property
    def indices(self) -> list[int]:
        """0-based page indices, in range order."""
        return [page - 1 for page in self.pages]

    def __len__(self) -> int:
        return len(self.pages)

    def __contains__(self, page_number: object) -> bool:
        return page_number in self.pages


class SplitSpec(BaseModel):
    """User-defined ``start..end`` slice of one source document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: int = Field(ge=1)
    end: int = Field(ge=1)
    output_name: str | None = None

    @model_validator(mode="after")
    def _validate_order(self) -> Self:
        """Ensure ``start <= end``.

        Raises:
            ValueError: If the range is reversed.

        Returns:
            Self: The validated spec.
        """
        if self.start > self.end:
            raise ValueError(f"split start {self.start} is after end {self.end}")  # noqa: TRY003
        return self

    @property
    def name(self) -> str:
        """Explicit output name, or the default ``Page``/``Pages`` label."""
        return self.output_name or default_split_name(self.start, self.end)

    @property
    def page_count(self) -> int:
        """Number of pages covered by the split."""
        return self.end - self.start + 1

    def fits(self, total_pages: int) -> bool:
        """Return whether the split lies within a ``total_pages`` document."""
        return self.end <= total_pages
