"""Layer: an ordered arena of drawable items.

Insertion order is draw order: later items are drawn on top of earlier ones.
Items are addressed by identity and their position is looked up again for
every mutation, so callers can keep a reference to an item while other items
are inserted or removed around it.
"""

from collections.abc import Iterable, Iterator

from pancakepath.domain.record import GroupRecord, LayerItem, PathRecord


class Layer:
    """Ordered collection of path and group records.

    Example:
        layer = Layer([bottom, top])
        for item in layer.children:   # snapshot, safe to mutate the layer
            layer.replace(item, item.with_shape(new_shape))
    """

    def __init__(self, items: Iterable[LayerItem] | None = None, name: str = "main") -> None:
        self.name = name
        self._items: list[LayerItem] = list(items) if items is not None else []

    @property
    def children(self) -> list[LayerItem]:
        """Snapshot of the current items, bottom first."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LayerItem]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> LayerItem:
        return self._items[index]

    def __contains__(self, item: object) -> bool:
        return self.index_of(item) is not None

    def index_of(self, item: object) -> int | None:
        """Current position of ``item`` (by identity), or None if absent."""
        for index, candidate in enumerate(self._items):
            if candidate is item:
                return index
        return None

    def append(self, item: LayerItem) -> None:
        """Add an item on top of everything else."""
        self._items.append(item)

    def extend(self, items: Iterable[LayerItem]) -> None:
        """Add several items on top, keeping their order."""
        self._items.extend(items)

    def insert(self, index: int, item: LayerItem) -> None:
        """Insert an item at the given position."""
        self._items.insert(index, item)

    def replace(self, old: LayerItem, new: LayerItem) -> int:
        """Swap ``old`` for ``new`` at the same position.

        Returns:
            Position of the replaced item

        Raises:
            ValueError: If ``old`` is not in the layer
        """
        index = self.index_of(old)
        if index is None:
            raise ValueError("Item is not part of this layer")
        self._items[index] = new
        return index

    def remove(self, item: LayerItem) -> bool:
        """Remove an item if present.

        Returns:
            True if the item was removed, False if it was not in the layer
        """
        index = self.index_of(item)
        if index is None:
            return False
        del self._items[index]
        return True

    def contains_groups(self) -> bool:
        """Check whether any top level item is a group."""
        return any(isinstance(item, GroupRecord) for item in self._items)

    def iter_records(self) -> Iterator[PathRecord]:
        """Iterate over every path record, descending into groups."""
        for item in list(self._items):
            if isinstance(item, GroupRecord):
                yield from item.children
            else:
                yield item
