"""Import checks for the document libraries, run before any CLI command."""

from __future__ import annotations

import importlib.util
from typing import TYPE_CHECKING

from pagesmith.exceptions import DependencyError

if TYPE_CHECKING:
    from collections.abc import Mapping

# Distribution name -> top-level import name.
_DOCUMENT_MODULES = {
    "pymupdf": "fitz",
    "pillow": "PIL",
}


def _is_module_available(module_name: str) -> bool:
    return importlib.util.find_spec(module_name) is not None


def missing_distributions(modules: Mapping[str, str] = _DOCUMENT_MODULES) -> list[str]:
    """List distributions whose import name cannot be resolved.

    Args:
        modules (Mapping[str, str]): Distribution name -> import name.

    Returns:
        list[str]: Missing distribution names, in mapping order.
    """
    return [distribution for distribution, module in modules.items() if not _is_module_available(module)]


def ensure_cli_dependencies(command: str) -> None:
    """Fail fast when PyMuPDF or Pillow is not installed.

    Args:
        command (str): CLI sub-command name, reported in the error.

    Raises:
        DependencyError: If one or more distributions are missing.
    """
    missing = missing_distributions()
    if missing:
        raise DependencyError(missing_package=missing, message=command)
