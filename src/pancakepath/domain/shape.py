"""Core geometric types for shape representation.

This module defines the fundamental geometric types used throughout pancakepath:
- Point: A 2D point with curve type information
- Contour: A sequence of points forming one loop or polyline of a path
- FillRule: How overlapping contours of a shape combine into a fill
- CompoundShape: A set of contours forming one drawable unit
"""

from dataclasses import dataclass, field
from enum import Enum, auto


class PointType(Enum):
    """Point type on a contour.

    Points can be:
    - ON_CURVE: Point on the actual path
    - OFF_CURVE_QUAD: Quadratic Bezier control point
    - OFF_CURVE_CUBIC: Cubic Bezier control point
    """

    ON_CURVE = auto()
    OFF_CURVE_QUAD = auto()
    OFF_CURVE_CUBIC = auto()


class FillRule(str, Enum):
    """Fill rule used to decide which regions of a shape are inside."""

    NONZERO = "nonzero"
    EVEN_ODD = "evenodd"


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space with curve metadata.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in drawing units
        y: Y coordinate in drawing units
        point_type: Type of point (on-curve or control point)
    """

    x: float
    y: float
    point_type: PointType = PointType.ON_CURVE

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)


@dataclass
class Contour:
    """A single loop or polyline of a path.

    Closed contours are implicitly closed: the last point connects back to the
    first without repeating it. A flattened contour holds only on-curve points
    and is what the clipping code calls a polygon.

    Attributes:
        points: List of points forming the contour
        closed: Whether the contour is a closed loop
    """

    points: list[Point]
    closed: bool = True
    _cached_area: float | None = field(default=None, repr=False, init=False, compare=False)
    _cached_bbox: tuple[float, float, float, float] | None = field(
        default=None, repr=False, init=False, compare=False
    )

    def is_flat(self) -> bool:
        """Check whether the contour has no curve control points."""
        return all(p.point_type == PointType.ON_CURVE for p in self.points)

    def signed_area(self) -> float:
        """Calculate signed area of the control polygon using shoelace formula.

        The sign of the area indicates winding direction:
        - Positive area: counter-clockwise winding (y up)
        - Negative area: clockwise winding (y up)

        Result is cached for efficiency. Open contours have no area.

        Returns:
            Signed area of the contour
        """
        if self._cached_area is not None:
            return self._cached_area

        n = len(self.points)
        if n < 3 or not self.closed:
            self._cached_area = 0.0
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        self._cached_area = area / 2.0
        return self._cached_area

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the contour's points.

        Control points are included, so the box always encloses the curve.
        Result is cached for efficiency.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if self._cached_bbox is not None:
            return self._cached_bbox

        if not self.points:
            self._cached_bbox = (0.0, 0.0, 0.0, 0.0)
            return self._cached_bbox

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]

        self._cached_bbox = (min(xs), min(ys), max(xs), max(ys))
        return self._cached_bbox

    def winding_number(self, x: float, y: float) -> int:
        """Winding number of the control polygon around a point.

        Only meaningful for flattened, closed contours.
        """
        n = len(self.points)
        if n < 3 or not self.closed:
            return 0

        winding = 0
        for i in range(n):
            xi, yi = self.points[i].x, self.points[i].y
            xj, yj = self.points[(i + 1) % n].x, self.points[(i + 1) % n].y
            cross = (xj - xi) * (y - yi) - (x - xi) * (yj - yi)
            if yi <= y < yj and cross > 0:
                winding += 1
            elif yj <= y < yi and cross < 0:
                winding -= 1

        return winding

    def copy(self) -> "Contour":
        """Return an independent copy of the contour."""
        return Contour(points=list(self.points), closed=self.closed)


@dataclass
class CompoundShape:
    """A set of contours forming one logical drawable unit.

    A simple path has a single contour; compound paths carry several, where
    inner loops become holes according to the fill rule.

    Attributes:
        contours: Contours making up the shape
        fill_rule: Rule deciding which regions are filled
    """

    contours: list[Contour] = field(default_factory=list)
    fill_rule: FillRule = FillRule.NONZERO

    def clone(self) -> "CompoundShape":
        """Return a deep copy so the original stays untouched."""
        return CompoundShape(
            contours=[c.copy() for c in self.contours],
            fill_rule=self.fill_rule,
        )

    def is_empty(self) -> bool:
        """Check whether nothing drawable is left.

        A shape is empty when no contour has at least two points, i.e. there
        is neither a fill region nor a line segment to follow.
        """
        return not any(len(c.points) >= 2 for c in self.contours)

    def is_flat(self) -> bool:
        """Check whether every contour is already a polygon."""
        return all(c.is_flat() for c in self.contours)

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate the combined bounding box of all contours.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        boxes = [c.bounding_box() for c in self.contours if c.points]
        if not boxes:
            return (0.0, 0.0, 0.0, 0.0)

        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point lies inside the filled region.

        Uses the winding numbers of the closed contours and honors the fill
        rule. Curves should be flattened first for exact results.
        """
        winding = sum(c.winding_number(x, y) for c in self.contours)
        if self.fill_rule == FillRule.EVEN_ODD:
            return winding % 2 != 0
        return winding != 0

    def transformed(
        self,
        scale: float = 1.0,
        dx: float = 0.0,
        dy: float = 0.0,
        origin: tuple[float, float] = (0.0, 0.0),
    ) -> "CompoundShape":
        """Return a copy scaled about ``origin`` then translated by (dx, dy)."""
        ox, oy = origin
        contours = [
            Contour(
                points=[
                    Point(
                        ox + (p.x - ox) * scale + dx,
                        oy + (p.y - oy) * scale + dy,
                        p.point_type,
                    )
                    for p in c.points
                ],
                closed=c.closed,
            )
            for c in self.contours
        ]
        return CompoundShape(contours=contours, fill_rule=self.fill_rule)
