"""Scheduling of independent page-level work units."""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import TYPE_CHECKING

from pagesmith.exceptions import OperationCancelledError
from pagesmith.typing.models import ProgressUpdate

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from concurrent.futures import Future

    from pagesmith.typing.protocol import CancellationToken, ProgressCallback


def _raise_if_cancelled(cancel_event: CancellationToken | None, completed: int, total: int) -> None:
    """Raise when the caller asked to stop.

    Args:
        cancel_event (CancellationToken | None): External cancellation flag.
        completed (int): Units finished so far.
        total (int): Units requested.

    Raises:
        OperationCancelledError: If ``cancel_event`` is set.
    """
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError(units_completed=completed, units_total=total)


def _report(progress: ProgressCallback | None, completed: int, total: int) -> None:
    if progress is not None:
        progress(ProgressUpdate(units_completed=completed, units_total=total))


def runs_in_process(max_workers: int, total: int) -> bool:
    """Whether ``run_units`` would run ``total`` units in the calling thread."""
    return max_workers <= 1 or total <= 1


def run_units[T, R](
    worker: Callable[[T], R],
    units: Sequence[T],
    *,
    max_workers: int = 1,
    cancel_event: CancellationToken | None = None,
    progress: ProgressCallback | None = None,
) -> list[R]:
    """Run independent units and return their results in input order.

    With ``max_workers <= 1`` units run one after another in the calling
    thread. Otherwise they run in a process pool; ``worker`` and every unit
    must then be picklable, and each unit must carry its own input buffers.

    Args:
        worker: Function applied to each unit.
        units: Work units, in output order.
        max_workers: Upper bound on worker processes.
        cancel_event: Checked before starting and after each completed unit.
        progress: Receives an update after each completed unit.

    Raises:
        OperationCancelledError: If cancellation is requested; partial results are dropped.

    Returns:
        list[R]: One result per unit, aligned with ``units``.
    """
    total = len(units)
    _raise_if_cancelled(cancel_event, 0, total)

    if runs_in_process(max_workers, total):
        results: list[R] = []
        for unit in units:
            _raise_if_cancelled(cancel_event, len(results), total)
            results.append(worker(unit))
            _report(progress, len(results), total)
        return results

    by_index: dict[int, R] = {}
    executor = ProcessPoolExecutor(max_workers=min(max_workers, total))
    try:
        futures: dict[Future[R], int] = {executor.submit(worker, unit): index for index, unit in enumerate(units)}
        for future in as_completed(futures):
            by_index[futures[future]] = future.result()
            _report(progress, len(by_index), total)
            if len(by_index) < total:
                _raise_if_cancelled(cancel_event, len(by_index), total)
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    # Completion order is arbitrary; output order follows the input.
    return [by_index[index] for index in range(total)]
