"""Ordered file collection with stable ids and dense positions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from pagesmith.exceptions import OrderingError
from pagesmith.typing.enums import MoveDirection
from pagesmith.typing.models import OrderedItem

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

PayloadT = TypeVar("PayloadT")


class FileOrderList(Generic[PayloadT]):
    """Ordered collection used to sequence merge inputs and images.

    Positions always form ``0..n-1``. Ids are supplied by the caller and never
    change; reordering only touches ``position``.
    """

    def __init__(self, items: Iterable[tuple[str, PayloadT]] = ()) -> None:
        self._items: list[OrderedItem[PayloadT]] = []
        self.append(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[OrderedItem[PayloadT]]:
        return iter(self.items())

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self._items)

    def items(self) -> list[OrderedItem[PayloadT]]:
        """Return copies of the items sorted by position.

        Mutating a returned item never changes the list; use ``move_adjacent``
        and ``remove`` instead.
        """
        return [item.model_copy() for item in self._sorted()]

    def payloads(self) -> list[PayloadT]:
        """Return payloads in position order."""
        return [item.payload for item in self._sorted()]

    def ids(self) -> list[str]:
        """Return ids in position order."""
        return [item.id for item in self._sorted()]

    def get(self, item_id: str) -> OrderedItem[PayloadT]:
        """Return a copy of the item with ``item_id``.

        Raises:
            OrderingError: If no item has this id.
        """
        return self._items[self._index_of(item_id)].model_copy()

    def append(self, items: Iterable[tuple[str, PayloadT]]) -> list[OrderedItem[PayloadT]]:
        """Append ``(id, payload)`` pairs at the trailing positions.

        Args:
            items: Pairs in the order they should be appended.

        Raises:
            OrderingError: If an id is already present or repeated in ``items``.

        Returns:
            list[OrderedItem]: Copies of the created items.
        """
        pending = list(items)
        known = {item.id for item in self._items}
        for item_id, _ in pending:
            if item_id in known:
                raise OrderingError(message="Duplicate item id", item_id=item_id)
            known.add(item_id)

        created = [
            OrderedItem(id=item_id, payload=payload, position=len(self._items) + offset)
            for offset, (item_id, payload) in enumerate(pending)
        ]
        self._items.extend(created)
        return [item.model_copy() for item in created]

    def remove(self, item_id: str) -> OrderedItem[PayloadT]:
        """Remove an item and shift every later position down by one.

        Args:
            item_id (str): Id of the item to remove.

        Raises:
            OrderingError: If no item has this id.

        Returns:
            OrderedItem: The removed item.
        """
        removed = self._items.pop(self._index_of(item_id))
        for item in self._items:
            if item.position > removed.position:
                item.position -= 1
        return removed

    def move_adjacent(self, item_id: str, direction: MoveDirection) -> None:
        """Swap an item with its predecessor (``UP``) or successor (``DOWN``).

        Moving the first item up or the last item down is a no-op.

        Args:
            item_id (str): Id of the item to move.
            direction (MoveDirection): Swap direction.

        Raises:
            OrderingError: If no item has this id.
        """
        item = self._items[self._index_of(item_id)]
        target = item.position - 1 if direction is MoveDirection.UP else item.position + 1
        if not 0 <= target < len(self._items):
            return

        neighbour = next(other for other in self._items if other.position == target)
        neighbour.position, item.position = item.position, target

    def _sorted(self) -> list[OrderedItem[PayloadT]]:
        return sorted(self._items, key=lambda item: item.position)

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise OrderingError(message="Unknown item id", item_id=item_id)


def ordered_payloads[T](items: Sequence[T] | FileOrderList[T]) -> list[T]:
    """Return payloads in position order for an ordered list, or the sequence as given."""
    if isinstance(items, FileOrderList):
        return items.payloads()
    return list(items)
