"""Image placement models."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pagesmith.typing.enums import Orientation, PageSizeName


class PageSetup(BaseModel):
    """Target page geometry for image conversion."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_size: PageSizeName = PageSizeName.A4
    orientation: Orientation = Orientation.PORTRAIT
    margin_mm: float = Field(default=10.0, ge=0.0)
    custom_width_pt: float | None = Field(default=None, gt=0)
    custom_height_pt: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _validate_custom_size(self) -> Self:
        """Require explicit dimensions for custom page sizes.

        Raises:
            ValueError: If a custom size is missing its width or height.

        Returns:
            Self: The validated setup.
        """
        if self.page_size is PageSizeName.CUSTOM and (
            self.custom_width_pt is None or self.custom_height_pt is None
        ):
            raise ValueError("custom page size requires custom_width_pt and custom_height_pt")  # noqa: TRY003
        return self


class LayoutResult(BaseModel):
    """Placement of one image on one page, in points."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float

    def as_rect(self) -> tuple[float, float, float, float]:
        """Return ``(x0, y0, x1, y1)`` of the drawing area."""
        return (
            self.offset_x,
            self.offset_y,
            self.offset_x + self.draw_width,
            self.offset_y + self.draw_height,
        )
