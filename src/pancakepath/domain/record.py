"""Drawable items held by a layer.

A PathRecord couples a shape with its styling and metadata. Geometry
operations never edit a record's shape in place; they build a replacement
record with ``with_shape`` so metadata is copied rather than shared.
"""

from dataclasses import dataclass, field, replace
from uuid import uuid4

from pancakepath.domain.shape import CompoundShape


def _new_identity() -> str:
    return uuid4().hex


@dataclass
class PathMetadata:
    """Metadata carried by a drawable item.

    Attributes:
        identity: Opaque identity that survives offset/subtract operations
        name: Optional label used when logging
        processed: Set once overlap resolution has handled the item
        color: Palette index assigned by color snapping
        fill: Whether the palette index refers to the fill color
    """

    identity: str = field(default_factory=_new_identity)
    name: str | None = None
    processed: bool = False
    color: int | None = None
    fill: bool = False

    def copy(self) -> "PathMetadata":
        """Return a copy of the metadata."""
        return replace(self)


@dataclass
class PathRecord:
    """A compound shape plus styling and metadata.

    Attributes:
        shape: Geometry of the item
        stroke_color: CSS color of the stroke (None = no stroke)
        fill_color: CSS color of the fill (None = no fill)
        stroke_width: Stroke width in drawing units
        metadata: Identity, processed flag and color assignment
    """

    shape: CompoundShape
    stroke_color: str | None = None
    fill_color: str | None = None
    stroke_width: float = 1.0
    metadata: PathMetadata = field(default_factory=PathMetadata)

    @property
    def label(self) -> str:
        """Human readable label for logs."""
        return self.metadata.name or self.metadata.identity

    @property
    def shapes(self) -> list[CompoundShape]:
        """Shapes whose filled areas make up the item."""
        return [self.shape]

    def with_shape(self, shape: CompoundShape) -> "PathRecord":
        """Build a record for a new shape inheriting styling and copied metadata."""
        return PathRecord(
            shape=shape,
            stroke_color=self.stroke_color,
            fill_color=self.fill_color,
            stroke_width=self.stroke_width,
            metadata=self.metadata.copy(),
        )

    def clone(self) -> "PathRecord":
        """Return an independent copy of the record."""
        return self.with_shape(self.shape.clone())


@dataclass
class GroupRecord:
    """A group of path records that moves and stacks as one item.

    Attributes:
        children: Grouped records, bottom first
        metadata: Metadata of the group itself
    """

    children: list[PathRecord] = field(default_factory=list)
    metadata: PathMetadata = field(default_factory=PathMetadata)

    @property
    def label(self) -> str:
        """Human readable label for logs."""
        return self.metadata.name or self.metadata.identity

    @property
    def shapes(self) -> list[CompoundShape]:
        """Child shapes, each filled under its own fill rule.

        The group covers the union of these regions.
        """
        return [child.shape for child in self.children]

    @property
    def stroke_color(self) -> str | None:
        return self.children[0].stroke_color if self.children else None

    @property
    def fill_color(self) -> str | None:
        return self.children[0].fill_color if self.children else None

    @property
    def stroke_width(self) -> float:
        return self.children[0].stroke_width if self.children else 1.0

    def with_shape(self, shape: CompoundShape) -> PathRecord:
        """Collapse the group into a single record carrying ``shape``."""
        return PathRecord(
            shape=shape,
            stroke_color=self.stroke_color,
            fill_color=self.fill_color,
            stroke_width=self.stroke_width,
            metadata=self.metadata.copy(),
        )

    def clone(self) -> "GroupRecord":
        """Return an independent copy of the group."""
        return GroupRecord(
            children=[child.clone() for child in self.children],
            metadata=self.metadata.copy(),
        )


LayerItem = PathRecord | GroupRecord
