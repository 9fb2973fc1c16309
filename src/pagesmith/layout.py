"""Page geometry and contain/fit placement of images on pages."""

from __future__ import annotations

import fitz

from pagesmith.exceptions import LayoutError
from pagesmith.typing.enums import Orientation, PageSizeName
from pagesmith.typing.models import LayoutResult, PageSetup

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72.0


def mm_to_points(value_mm: float) -> float:
    """Convert millimetres to PDF points.

    Args:
        value_mm (float): Length in millimetres.

    Returns:
        float: Length in points (1/72 inch).
    """
    return value_mm * POINTS_PER_INCH / MM_PER_INCH


def resolve_page_dimensions(page_setup: PageSetup) -> tuple[float, float]:
    """Resolve the page width and height in points.

    Named sizes come from PyMuPDF's paper table. Portrait keeps the longer side
    vertical, landscape puts it horizontal.

    Args:
        page_setup (PageSetup): Requested size and orientation.

    Returns:
        tuple[float, float]: ``(width, height)`` in points.
    """
    if page_setup.page_size is PageSizeName.CUSTOM:
        # Both set, guaranteed by PageSetup validation.
        width = float(page_setup.custom_width_pt or 0)
        height = float(page_setup.custom_height_pt or 0)
    else:
        width, height = (float(side) for side in fitz.paper_size(page_setup.page_size.value))

    short_side, long_side = sorted((width, height))
    if page_setup.orientation is Orientation.LANDSCAPE:
        return long_side, short_side
    return short_side, long_side


def compute_layout(
    image_width: float,
    image_height: float,
    page_width: float,
    page_height: float,
    margin: float = 0.0,
) -> LayoutResult:
    """Fit an image inside the page content box and center it on the page.

    Args:
        image_width (float): Image width (any unit, only the ratio matters).
        image_height (float): Image height.
        page_width (float): Page width in points.
        page_height (float): Page height in points.
        margin (float): Margin on each side, in points.

    Raises:
        LayoutError: If the image or the content box has no area.

    Returns:
        LayoutResult: Draw size and offsets in points.
    """
    content_width = max(0.0, page_width - 2 * margin)
    content_height = max(0.0, page_height - 2 * margin)
    if image_height <= 0 or image_width <= 0 or content_height == 0 or content_width == 0:
        raise LayoutError

    image_ratio = image_width / image_height
    box_ratio = content_width / content_height
    if image_ratio > box_ratio:
        draw_width = content_width
        draw_height = draw_width / image_ratio
    else:
        draw_height = content_height
        draw_width = draw_height * image_ratio

    return LayoutResult(
        draw_width=draw_width,
        draw_height=draw_height,
        offset_x=(page_width - draw_width) / 2,
        offset_y=(page_height - draw_height) / 2,
    )


def layout_for_setup(image_width: int, image_height: int, page_setup: PageSetup) -> LayoutResult:
    """Compute the placement of an image on a page described by ``page_setup``.

    Args:
        image_width (int): Image width in pixels.
        image_height (int): Image height in pixels.
        page_setup (PageSetup): Target page geometry.

    Returns:
        LayoutResult: Placement in points.
    """
    page_width, page_height = resolve_page_dimensions(page_setup)
    return compute_layout(
        image_width,
        image_height,
        page_width,
        page_height,
        mm_to_points(page_setup.margin_mm),
    )
