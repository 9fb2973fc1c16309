"""Pagesmith: merge, split, convert and rasterize PDF documents.

The document engine lives in ``pagesmith.operations`` and imports PyMuPDF and
Pillow on first use; this module only exposes the dependency-free pieces.
"""

from pagesmith.exceptions import (
    AssembleError,
    ConvertError,
    DecodeError,
    DependencyError,
    IntakeError,
    LayoutError,
    OperationCancelledError,
    OrderingError,
    PackageError,
    ParseError,
    RasterizeError,
    SettingsError,
    UsageError,
)
from pagesmith.logging import configure_logging, get_logger
from pagesmith.ordering import FileOrderList
from pagesmith.page_ranges import parse_page_range
from pagesmith.settings import Settings, get_settings

__version__ = "0.1.0"

logger = get_logger("pagesmith")

__all__ = [
    "AssembleError",
    "ConvertError",
    "DecodeError",
    "DependencyError",
    "FileOrderList",
    "IntakeError",
    "LayoutError",
    "OperationCancelledError",
    "OrderingError",
    "PackageError",
    "ParseError",
    "RasterizeError",
    "Settings",
    "SettingsError",
    "UsageError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "parse_page_range",
]
