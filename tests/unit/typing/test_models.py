from __future__ import annotations

import pytest
from pydantic import ValidationError

from pagesmith.typing.enums import PageSizeName
from pagesmith.typing.models import (
    DocumentInput,
    LayoutResult,
    OrderedItem,
    PageRange,
    PageSetup,
    ProgressUpdate,
    RasterizationResult,
    RasterizedPage,
    RasterSettings,
    SplitSpec,
    default_split_name,
)


def test_page_range_invariants() -> None:
    assert PageRange.full(3).pages == (1, 2, 3)
    assert PageRange.span(2, 4, 5).indices == [1, 2, 3]

    with pytest.raises(ValidationError, match="must not be empty"):
        PageRange(pages=(), total_pages=3)
    with pytest.raises(ValidationError, match="strictly ascending"):
        PageRange(pages=(2, 2), total_pages=3)
    with pytest.raises(ValidationError, match="within 1..3"):
        PageRange(pages=(1, 4), total_pages=3)


def test_split_spec_names_and_bounds() -> None:
    assert SplitSpec(start=2, end=2).name == "Page 2"
    assert SplitSpec(start=1, end=3).name == "Pages 1-3"
    assert SplitSpec(start=1, end=3, output_name="Intro").name == "Intro"
    assert SplitSpec(start=4, end=10).page_count == 7
    assert SplitSpec(start=4, end=10).fits(10)
    assert not SplitSpec(start=4, end=11).fits(10)
    assert default_split_name(5, 6) == "Pages 5-6"

    with pytest.raises(ValidationError, match="after end"):
        SplitSpec(start=3, end=2)


def test_page_setup_custom_requires_dimensions() -> None:
    with pytest.raises(ValidationError, match="custom page size requires"):
        PageSetup(page_size=PageSizeName.CUSTOM, custom_width_pt=100)


def test_layout_result_as_rect() -> None:
    layout = LayoutResult(draw_width=10, draw_height=20, offset_x=1, offset_y=2)
    assert layout.as_rect() == (1, 2, 11, 22)


def test_raster_settings_clamps_quality() -> None:
    assert RasterSettings(quality=0).quality == 1
    assert RasterSettings(quality=101).quality == 100
    assert RasterSettings(quality=75.9).quality == 75
    with pytest.raises(ValidationError, match="quality must be a number"):
        RasterSettings(quality=True)
    with pytest.raises(ValidationError):
        RasterSettings(dpi=0)


def test_document_input_base_name() -> None:
    assert DocumentInput(name="Report.PDF", data=b"").base_name == "Report"
    assert DocumentInput(name=".pdf", data=b"").base_name == "document"
    assert DocumentInput(name="scan", data=b"abc").size == 3


def test_rasterization_result_helpers() -> None:
    result = RasterizationResult(pages=[RasterizedPage(page_number=2, mime_type="image/png", data=b"x")])

    assert result.page_numbers == [2]
    assert result.complete


def test_progress_update_fraction() -> None:
    assert ProgressUpdate(units_completed=1, units_total=4).fraction == 0.25
    assert ProgressUpdate(units_completed=0, units_total=0).fraction == 1.0


def test_ordered_item_requires_id() -> None:
    with pytest.raises(ValidationError):
        OrderedItem(id="", payload=object(), position=0)
