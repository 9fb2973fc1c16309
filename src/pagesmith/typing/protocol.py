"""Callback interfaces shared by long-running operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pagesmith.typing.models import ProgressUpdate


class ProgressCallback(Protocol):
    """Receives progress between page-level work units."""

    def __call__(self, update: ProgressUpdate) -> None:
        """Handle one progress update.

        Args:
            update: Units completed so far and total units.
        """


class CancellationToken(Protocol):
    """External cancellation flag; ``threading.Event`` satisfies it."""

    def is_set(self) -> bool:
        """Return whether cancellation was requested.

        Returns:
            bool: True once the caller asked to stop.
        """
