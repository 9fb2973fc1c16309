"""Typing-centric domain modules."""

from pagesmith.typing.enums import (
    CompressionLevel,
    ImageEncoding,
    MoveDirection,
    Orientation,
    PageSizeName,
    RasterFormat,
)
from pagesmith.typing.models import (
    DocumentInput,
    ImageInput,
    LayoutResult,
    NamedOutput,
    OrderedItem,
    PageFailure,
    PageRange,
    PageSetup,
    ProgressUpdate,
    RasterExport,
    RasterizationResult,
    RasterizedPage,
    RasterSettings,
    SplitFailure,
    SplitResult,
    SplitSpec,
)
from pagesmith.typing.protocol import CancellationToken, ProgressCallback

__all__ = [
    "CancellationToken",
    "CompressionLevel",
    "DocumentInput",
    "ImageEncoding",
    "ImageInput",
    "LayoutResult",
    "MoveDirection",
    "NamedOutput",
    "OrderedItem",
    "Orientation",
    "PageFailure",
    "PageRange",
    "PageSetup",
    "PageSizeName",
    "ProgressCallback",
    "ProgressUpdate",
    "RasterExport",
    "RasterFormat",
    "RasterSettings",
    "RasterizationResult",
    "RasterizedPage",
    "SplitFailure",
    "SplitResult",
    "SplitSpec",
]
