"""Duplication layout types."""

from dataclasses import dataclass, field
from typing import Protocol

from pancakepath.domain.shape import Point


class HasSize(Protocol):
    """Anything with a width and a height, such as a bounds rectangle."""

    width: float
    height: float


@dataclass(frozen=True, slots=True)
class Size:
    """Width and height of a bounding box.

    Attributes:
        width: Horizontal extent
        height: Vertical extent
    """

    width: float
    height: float

    @classmethod
    def from_bbox(cls, bbox: tuple[float, float, float, float]) -> "Size":
        """Build from a (min_x, min_y, max_x, max_y) bounding box."""
        min_x, min_y, max_x, max_y = bbox
        return cls(width=max_x - min_x, height=max_y - min_y)


@dataclass
class LayoutResult:
    """Placement of duplicated copies inside an area.

    Attributes:
        scale: Uniform scale applied to every copy
        positions: Center point of each copy, relative to the area's origin
    """

    scale: float = 1.0
    positions: list[Point] = field(default_factory=list)
