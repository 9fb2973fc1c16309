"""Core domain model exports."""

from pagesmith.typing.models.io import PDF_MIME_TYPE, DocumentInput, ImageInput, NamedOutput
from pagesmith.typing.models.layout import LayoutResult, PageSetup
from pagesmith.typing.models.ordering import OrderedItem
from pagesmith.typing.models.page_range import PageRange, SplitSpec, default_split_name
from pagesmith.typing.models.raster import (
    PageFailure,
    RasterizationResult,
    RasterizedPage,
    RasterSettings,
)
from pagesmith.typing.models.results import (
    ProgressUpdate,
    RasterExport,
    SplitFailure,
    SplitResult,
)

__all__ = [
    "PDF_MIME_TYPE",
    "DocumentInput",
    "ImageInput",
    "LayoutResult",
    "NamedOutput",
    "OrderedItem",
    "PageFailure",
    "PageRange",
    "PageSetup",
    "ProgressUpdate",
    "RasterExport",
    "RasterSettings",
    "RasterizationResult",
    "RasterizedPage",
    "SplitFailure",
    "SplitResult",
    "SplitSpec",
    "default_split_name",
]
