"""Duplication layout.

Places 1, 2, 4 or 8 copies of a traced shape on the griddle. The area is
divided into a 4x4 grid of quadrant units; copies are centered on fixed grid
points and scaled uniformly so each fits its share of the area.
"""

from collections.abc import Callable

from pancakepath.domain import HasSize, LayoutResult, PathMetadata, PathRecord, Point, Size
from pancakepath.exceptions import LayoutError

# Fill fraction of the area, per axis, that a single copy may take
FILL_PERCENT: dict[int, float] = {1: 0.80, 2: 0.50, 4: 0.35, 8: 0.25}


def _positions_1(q: Size, landscape: bool) -> list[tuple[float, float]]:
    return [(q.width * 2, q.height * 2)]


def _positions_2(q: Size, landscape: bool) -> list[tuple[float, float]]:
    if landscape:
        # Wide shapes stack top and bottom
        return [(q.width * 2, q.height), (q.width * 2, q.height * 3)]
    return [(q.width, q.height * 2), (q.width * 3, q.height * 2)]


def _positions_4(q: Size, landscape: bool) -> list[tuple[float, float]]:
    return [
        (q.width, q.height),
        (q.width * 3, q.height),
        (q.width, q.height * 3),
        (q.width * 3, q.height * 3),
    ]


def _positions_8(q: Size, landscape: bool) -> list[tuple[float, float]]:
    e = Size(q.width / 2, q.height / 2)
    if landscape:
        # Four rows of two
        return [(q.width * col, e.height * row) for row in (1, 3, 5, 7) for col in (1, 3)]
    # Two rows of four
    return [(e.width * col, q.height * row) for row in (1, 3) for col in (1, 3, 5, 7)]


_POSITIONS: dict[int, Callable[[Size, bool], list[tuple[float, float]]]] = {
    1: _positions_1,
    2: _positions_2,
    4: _positions_4,
    8: _positions_8,
}


def compute_layout(count: int, trace_bounds: HasSize, area_bounds: HasSize) -> LayoutResult:
    """Compute copy positions and a shared scale.

    Args:
        count: Number of copies (1, 2, 4 or 8)
        trace_bounds: Size of the traced shape
        area_bounds: Size of the area to place copies in

    Returns:
        LayoutResult with one center point per copy, relative to the area's
        top left corner. A trace without width yields scale 1 and no
        positions.

    Raises:
        LayoutError: If ``count`` is not 1, 2, 4 or 8

    Examples:
        >>> compute_layout(1, Size(100, 100), Size(1000, 500)).scale
        4.0
    """
    if not trace_bounds.width:
        return LayoutResult(scale=1.0, positions=[])

    if count not in _POSITIONS:
        raise LayoutError(count)

    area_aspect = area_bounds.height / area_bounds.width
    trace_aspect = trace_bounds.height / trace_bounds.width
    landscape = trace_aspect < area_aspect

    q = Size(area_bounds.width / 4, area_bounds.height / 4)
    positions = [Point(x, y) for x, y in _POSITIONS[count](q, landscape)]

    fill = FILL_PERCENT[count]
    scale = fit_scale(trace_bounds, area_bounds, fill, fill)
    return LayoutResult(scale=scale, positions=positions)


def fit_scale(
    object_bounds: HasSize,
    view_bounds: HasSize,
    fill_width: float = 0.8,
    fill_height: float = 0.8,
) -> float:
    """Uniform scale fitting an object inside a fraction of a view.

    Args:
        object_bounds: Size of the object to scale
        view_bounds: Size of the view to fit in
        fill_width: Fraction of the view width the object may take
        fill_height: Fraction of the view height the object may take

    Returns:
        The smaller of the two per-axis scales. An axis with no extent
        does not constrain the scale.
    """
    scales = []
    if object_bounds.width:
        scales.append(view_bounds.width * fill_width / object_bounds.width)
    if object_bounds.height:
        scales.append(view_bounds.height * fill_height / object_bounds.height)
    return min(scales) if scales else 1.0


def duplicate_for_layout(
    record: PathRecord,
    layout: LayoutResult,
    origin: tuple[float, float] = (0.0, 0.0),
) -> list[PathRecord]:
    """Scaled copies of a record centered on every layout position.

    Args:
        record: Record to duplicate
        layout: Result of ``compute_layout``
        origin: Top left corner of the layout area

    Returns:
        One new record per position, each with its own identity
    """
    min_x, min_y, max_x, max_y = record.shape.bounding_box()
    center = ((min_x + max_x) / 2, (min_y + max_y) / 2)

    copies: list[PathRecord] = []
    for index, position in enumerate(layout.positions):
        dx = origin[0] + position.x - center[0]
        dy = origin[1] + position.y - center[1]
        shape = record.shape.transformed(scale=layout.scale, dx=dx, dy=dy, origin=center)

        copy = record.with_shape(shape)
        copy.metadata = PathMetadata(
            name=f"{record.label}-{index + 1}",
            color=record.metadata.color,
            fill=record.metadata.fill,
        )
        copies.append(copy)
    return copies
