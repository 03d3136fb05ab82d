"""Layer-wide geometry operations.

LayerResolver works on a whole Layer at once:

- resolve_overlaps carves everything drawn on top out of each item, so the
  layer ends up as a set of non-overlapping visible regions
- offset_path and destroy_thin_features replace items with offset copies
- recursive_length_cull and ungroup_all tidy up a freshly imported layer

Items are never edited in place. Every change builds a new record through
``with_shape`` (metadata copied) and swaps it into the layer, and positions
are looked up again after each mutation.
"""

from typing import TYPE_CHECKING

import structlog

from pancakepath.config import OffsetConfig
from pancakepath.core.boolean import subtract, union
from pancakepath.core.geometry import shape_length
from pancakepath.core.offset import PolygonOffsetter
from pancakepath.domain import GroupRecord, Layer, LayerItem, PathRecord
from pancakepath.exceptions import ContourError, ProcessingCancelledError

if TYPE_CHECKING:
    from pancakepath.core.processor import CancellationToken


class LayerResolver:
    """Resolves overlaps and offsets items within a layer.

    Example:
        resolver = LayerResolver()
        resolver.destroy_thin_features(layer, amount=2.0)
        resolver.resolve_overlaps(layer)
    """

    def __init__(
        self,
        config: OffsetConfig | None = None,
        offsetter: PolygonOffsetter | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            config: Offset and boolean parameters
            offsetter: Offsetter to use (built from ``config`` if None)
            logger: Logger (module logger if None)
        """
        self.config = config or OffsetConfig()
        self.logger = logger or structlog.get_logger(__name__)
        self.offsetter = offsetter or PolygonOffsetter(self.config, self.logger)
        self.removed_count = 0

    def resolve_overlaps(
        self,
        layer: Layer,
        cancel_token: "CancellationToken | None" = None,
    ) -> int:
        """Subtract everything above each item from that item.

        Items are visited bottom first. A group is replaced by its first
        child at the group's position before it takes part. Every visited
        item is marked processed; items reduced to nothing are removed.

        Args:
            layer: Layer to resolve, edited in place
            cancel_token: Optional token checked between items

        Returns:
            Number of items removed because nothing of them stayed visible

        Raises:
            ProcessingCancelledError: If the token was cancelled
        """
        resolution = self.config.boolean_resolution
        scale = self.config.scale
        snapshot = layer.children
        removed = 0

        for done, item in enumerate(snapshot):
            if cancel_token is not None and cancel_token.is_cancelled:
                raise ProcessingCancelledError(done, len(snapshot) - done)

            if item not in layer:
                continue

            current = self._ungroup_first(layer, item)
            if current is None:
                removed += 1
                continue
            current.metadata.processed = True

            index = layer.index_of(current)
            if index is None:
                continue
            for above in layer.children[index + 1 :]:
                if current.shape.is_empty():
                    break
                reduced = subtract(current.shape, above.shapes, resolution, scale)
                if reduced == current.shape:
                    continue
                replacement = current.with_shape(reduced)
                layer.replace(current, replacement)
                current = replacement

            if current.shape.is_empty():
                self.logger.debug("Item fully covered, removing", item=current.label)
                layer.remove(current)
                removed += 1

        self.removed_count += removed
        self.logger.info("Overlaps resolved", layer=layer.name, items=len(layer), removed=removed)
        return removed

    def offset_path(
        self,
        layer: Layer,
        item: LayerItem,
        amount: float,
        resolution: float,
        replace: bool = False,
    ) -> PathRecord | None:
        """Offset one item of a layer.

        Args:
            layer: Layer owning ``item``
            item: Item to offset
            amount: Positive grows, negative shrinks
            resolution: Flatten resolution
            replace: Put the result at the item's position instead of
                removing the item and leaving placement to the caller

        Returns:
            The new record, or None if the item vanished (it is removed)
        """
        if isinstance(item, GroupRecord):
            source = union(item.shapes, resolution, self.config.scale)
        else:
            source = item.shape
        shape = self.offsetter.offset(source, amount, resolution, item.label)
        if shape is None:
            self.logger.debug("Offset left nothing, removing", item=item.label, amount=amount)
            if layer.remove(item):
                self.removed_count += 1
            return None

        record = item.with_shape(shape)
        if replace and item in layer:
            layer.replace(item, record)
        else:
            layer.remove(item)
        return record

    def destroy_thin_features(
        self,
        layer: Layer,
        amount: float,
        clone: bool = False,
        resolution: float = 2.0,
    ) -> list[PathRecord]:
        """Remove features thinner than twice ``amount`` from every item.

        Each top level item is eroded then dilated by ``amount``. Survivors
        are added on top of the layer. With ``clone`` the originals stay and
        the cleaned copies are added alongside them.

        Returns:
            The surviving records that were added
        """
        survivors: list[PathRecord] = []
        for item in layer.children:
            target = item.clone() if clone else item

            eroded = self.offset_path(layer, target, -amount, resolution)
            if eroded is None:
                continue
            restored = self.offset_path(layer, eroded, amount, resolution)
            if restored is not None:
                layer.append(restored)
                survivors.append(restored)

        self.logger.info(
            "Thin features removed",
            layer=layer.name,
            amount=amount,
            survivors=len(survivors),
        )
        return survivors

    def recursive_length_cull(self, layer: Layer, min_length: float) -> int:
        """Remove records whose outline is shorter than ``min_length``.

        Groups are searched too; a group left without children is removed.

        Returns:
            Number of records removed
        """
        removed = 0
        for item in layer.children:
            if isinstance(item, GroupRecord):
                kept = [child for child in item.children if not self._is_short(child, min_length)]
                removed += len(item.children) - len(kept)
                item.children = kept
                if not kept:
                    layer.remove(item)
            elif self._is_short(item, min_length):
                layer.remove(item)
                removed += 1

        self.logger.debug("Short paths culled", min_length=min_length, removed=removed)
        return removed

    def ungroup_all(self, layer: Layer) -> int:
        """Replace every group with its children at the group's position.

        Returns:
            Number of groups dissolved
        """
        dissolved = 0
        while layer.contains_groups():
            for index, item in enumerate(layer.children):
                if isinstance(item, GroupRecord):
                    layer.remove(item)
                    for offset, child in enumerate(item.children):
                        layer.insert(index + offset, child)
                    dissolved += 1
                    break
        return dissolved

    def _ungroup_first(self, layer: Layer, item: LayerItem) -> PathRecord | None:
        if isinstance(item, PathRecord):
            return item
        if not item.children:
            layer.remove(item)
            return None
        child = item.children[0]
        layer.replace(item, child)
        return child

    def _is_short(self, record: PathRecord, min_length: float) -> bool:
        try:
            return shape_length(record.shape) < min_length
        except (ContourError, ValueError):
            self.logger.warning("Could not measure path, culling it", item=record.label)
            return True
