"""Rasterization settings and result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pagesmith.typing.enums import RasterFormat

# Units per inch of the PDF page coordinate space.
POINTS_PER_INCH = 72.0
MIN_RENDER_SCALE = 0.1


class RasterSettings(BaseModel):
    """Resolution and encoding of rasterized pages."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: RasterFormat = RasterFormat.PNG
    dpi: int = Field(default=150, gt=0)
    quality: int = 90

    @field_validator("quality", mode="before")
    @classmethod
    def _clamp_quality(cls, value: object) -> int:
        """Clamp quality into ``[1, 100]``.

        Args:
            value (object): Raw quality value.

        Raises:
            ValueError: If the value is not numeric.

        Returns:
            int: Clamped quality.
        """
        if isinstance(value, bool) or not isinstance(value, int | float | str):
            raise ValueError("quality must be a number")  # noqa: TRY003
        return min(100, max(1, int(float(value))))

    @property
    def scale(self) -> float:
        """Zoom factor from page units to pixels."""
        return max(MIN_RENDER_SCALE, self.dpi / POINTS_PER_INCH)

    @property
    def quality_ratio(self) -> float:
        """Quality normalized to ``[0.01, 1.0]``."""
        return self.quality / 100


class RasterizedPage(BaseModel):
    """One encoded page image."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_number: int = Field(ge=1)
    mime_type: str
    data: bytes


class PageFailure(BaseModel):
    """A page that could not be rendered or encoded."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_number: int = Field(ge=1)
    message: str


class RasterizationResult(BaseModel):
    """Rendered pages in ascending page order, plus per-page failures."""

    model_config = ConfigDict(extra="forbid")

    pages: list[RasterizedPage] = Field(default_factory=list)
    failures: list[PageFailure] = Field(default_factory=list)

    @property
    def page_numbers(self) -> list[int]:
        """Page numbers that rendered successfully."""
        return [page.page_number for page in self.pages]

    @property
    def complete(self) -> bool:
        """Whether every requested page rendered."""
        return not self.failures
