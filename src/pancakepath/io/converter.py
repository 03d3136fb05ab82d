"""Converters between SVG path data and domain shapes.

This module handles the conversion between SVG path description strings
("M 0,0 L 10,0 ... Z") and our domain models (CompoundShape, Contour, Point).
Parsing and serialization go through fontTools pens so curves, arcs and
transforms are handled the same way everywhere.
"""

from typing import Any

from fontTools.misc.transform import Transform
from fontTools.pens.recordingPen import RecordingPen
from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.pens.transformPen import TransformPen
from fontTools.svgLib.path import parse_path

from pancakepath.domain.shape import CompoundShape, Contour, FillRule, Point, PointType
from pancakepath.exceptions import PathDataError


def svg_path_to_shape(
    path_data: str,
    fill_rule: FillRule = FillRule.NONZERO,
    transform: Transform | None = None,
) -> CompoundShape:
    """Build a shape from an SVG path description string.

    Args:
        path_data: SVG path "d" attribute
        fill_rule: Fill rule of the resulting shape
        transform: Optional affine transform applied to every point

    Returns:
        CompoundShape with one contour per subpath

    Raises:
        PathDataError: If the path data cannot be parsed
    """
    recording = RecordingPen()
    pen: Any = recording if transform is None else TransformPen(recording, transform)

    try:
        parse_path(path_data, pen)
    except (ValueError, IndexError) as e:
        raise PathDataError(path_data, str(e) or type(e).__name__) from e

    return CompoundShape(contours=_recording_to_contours(recording.value), fill_rule=fill_rule)


def shape_to_svg_path(shape: CompoundShape, precision: int = 3) -> str:
    """Serialize a shape into an SVG path description string.

    Args:
        shape: Shape to serialize
        precision: Maximum number of decimals per coordinate

    Returns:
        SVG path "d" string
    """
    pen = SVGPathPen(None, ntos=lambda value: _format_number(value, precision))
    for contour in shape.contours:
        draw_contour(contour, pen)
    return pen.getCommands()


def polygons_to_svg_path(paths: list[list[Any]], scale: float = 1.0) -> str:
    """Convert fixed-point polygons into an SVG path description string.

    Each polygon becomes "M x,y L x,y ... Z" with coordinates divided by
    ``scale``.

    Args:
        paths: Polygons as sequences of (x, y) pairs
        scale: The amount to scale the values back down by

    Returns:
        Path "d" string, empty when there are no points
    """
    parts: list[str] = []
    for path in paths:
        if not path:
            continue
        commands = [
            f"{'L' if index else 'M'}{_format_number(x / scale)},{_format_number(y / scale)}"
            for index, (x, y) in enumerate(path)
        ]
        parts.append(" ".join(commands) + " Z")
    return " ".join(parts)


def draw_contour(contour: Contour, pen: Any) -> None:
    """Replay a contour onto a fontTools pen."""
    points = contour.points
    if not points:
        return

    first = points[0]
    pen.moveTo(first.to_tuple())

    pending: list[Point] = []
    for point in points[1:]:
        if point.point_type != PointType.ON_CURVE:
            pending.append(point)
            continue
        _emit_segment(pen, pending, point)
        pending = []

    if contour.closed:
        if pending:
            # Trailing control points curve back to the start
            _emit_segment(pen, pending, first)
        pen.closePath()
    else:
        pen.endPath()


def _emit_segment(pen: Any, controls: list[Point], end: Point) -> None:
    if not controls:
        pen.lineTo(end.to_tuple())
    elif controls[0].point_type == PointType.OFF_CURVE_CUBIC:
        pen.curveTo(*(p.to_tuple() for p in controls), end.to_tuple())
    else:
        pen.qCurveTo(*(p.to_tuple() for p in controls), end.to_tuple())


def _recording_to_contours(recording: list[tuple[str, tuple[Any, ...]]]) -> list[Contour]:
    """Convert RecordingPen recording to list of Contour objects.

    The RecordingPen records drawing commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), (x2, y2), ...))  # Quadratic
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ())
    - ('endPath', ())

    Args:
        recording: List of drawing commands from RecordingPen

    Returns:
        List of Contour objects
    """
    contours: list[Contour] = []
    current_points: list[Point] = []

    for command, args in recording:
        if command == "moveTo":
            if current_points:
                contours.append(Contour(points=current_points, closed=False))
                current_points = []

            x, y = args[0]
            current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "lineTo":
            x, y = args[0]
            current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "qCurveTo":
            for i, (x, y) in enumerate(args):
                if i < len(args) - 1:
                    current_points.append(Point(x, y, PointType.OFF_CURVE_QUAD))
                else:
                    current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "curveTo":
            for i, (x, y) in enumerate(args):
                if i < len(args) - 1:
                    current_points.append(Point(x, y, PointType.OFF_CURVE_CUBIC))
                else:
                    current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "closePath":
            if current_points:
                # "Z" lands back on the start point; keep the loop implicit
                if len(current_points) > 1 and current_points[-1].to_tuple() == current_points[0].to_tuple():
                    current_points.pop()
                contours.append(Contour(points=current_points, closed=True))
                current_points = []

        elif command == "endPath":
            if current_points:
                contours.append(Contour(points=current_points, closed=False))
                current_points = []

    if current_points:
        contours.append(Contour(points=current_points, closed=False))

    return contours


def _format_number(value: float, precision: int = 3) -> str:
    text = f"{value:.{precision}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
