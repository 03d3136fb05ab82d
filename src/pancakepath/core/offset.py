"""Polygon offsetting.

Shapes are flattened into polygons, moved into a fixed-point integer grid and
grown or shrunk with round joins through shapely's buffer. The result travels
back through an SVG path description so it is rebuilt by the same parser used
for imports.

Geometric degeneracy is not an error here: a shape that erodes away, or whose
geometry cannot be flattened, simply yields None.
"""

import math

import shapely
import structlog
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient

from pancakepath.config import OffsetConfig
from pancakepath.core.boolean import GRID, IntPath, filled_region, polygons_of, scale_up
from pancakepath.core.geometry import flatten_contour
from pancakepath.domain import CompoundShape, Contour
from pancakepath.exceptions import ContourError, FlattenError
from pancakepath.io.converter import polygons_to_svg_path, svg_path_to_shape


def paths_to_svg(paths: list[IntPath], scale: float) -> str:
    """Turn fixed-point polygons into "M x,y L x,y ... Z" path data.

    Args:
        paths: Polygons in fixed-point coordinates
        scale: The amount to scale the values back down by

    Returns:
        Path description in drawing units
    """
    return polygons_to_svg_path(paths, scale)


def arc_segments(delta: float, arc_tolerance: float) -> int:
    """Segments per quarter circle keeping round joins within ``arc_tolerance``.

    Both values are in fixed-point units.
    """
    delta = abs(delta)
    if delta <= arc_tolerance:
        return 1
    steps = math.pi / math.acos(1 - arc_tolerance / delta)
    return max(1, math.ceil(steps / 4))


class PolygonOffsetter:
    """Grows or shrinks shapes by a uniform distance.

    Example:
        offsetter = PolygonOffsetter()
        grown = offsetter.offset(shape, 2.5, flatten_resolution=0.5)
        cleaned = offsetter.erode_dilate_round_trip(shape, 3.0, resolution=2.0)
    """

    def __init__(
        self,
        config: OffsetConfig | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the offsetter.

        Args:
            config: Fixed-point scale and offset engine parameters
            logger: Logger for flatten failures (module logger if None)
        """
        self.config = config or OffsetConfig()
        self.logger = logger or structlog.get_logger(__name__)

    def offset(
        self,
        shape: CompoundShape,
        amount: float,
        flatten_resolution: float,
        name: str | None = None,
    ) -> CompoundShape | None:
        """Offset a shape by ``amount`` drawing units.

        Every contour is treated as a closed polygon, so open paths are offset
        as the area they would enclose.

        Args:
            shape: Shape to offset (left untouched)
            amount: Positive grows, negative shrinks
            flatten_resolution: Maximum deviation when flattening curves
            name: Label of the shape, used when logging failures

        Returns:
            The offset shape, or None when nothing is left or the shape's
            geometry could not be flattened
        """
        paths = self._to_polygons(shape, flatten_resolution, name)
        if paths is None:
            return None

        scale = self.config.scale
        region = filled_region(paths, shape.fill_rule)
        region = shapely.remove_repeated_points(region, self.config.clean_distance)
        if region.is_empty:
            return None

        delta = amount * scale
        grown = region.buffer(
            delta,
            quad_segs=arc_segments(delta, self.config.arc_tolerance),
            join_style="round",
            mitre_limit=self.config.miter_limit,
        )
        grown = shapely.set_precision(grown, GRID)

        path_data = paths_to_svg(_rings(grown), scale)
        if not path_data:
            return None

        offset_shape = svg_path_to_shape(path_data)
        if offset_shape.is_empty():
            return None
        return offset_shape

    def erode_dilate_round_trip(
        self,
        shape: CompoundShape,
        amount: float,
        resolution: float,
        name: str | None = None,
    ) -> CompoundShape | None:
        """Shrink then regrow a shape to drop features thinner than 2 * amount.

        Returns:
            The cleaned shape, or None if erosion removed everything
        """
        eroded = self.offset(shape, -amount, resolution, name)
        if eroded is None:
            return None
        return self.offset(eroded, amount, resolution, name)

    def _to_polygons(
        self,
        shape: CompoundShape,
        resolution: float,
        name: str | None,
    ) -> list[IntPath] | None:
        working = shape.clone()
        for index, contour in enumerate(working.contours):
            # A lone closed point would offset into a zero-area artifact
            if contour.closed and len(contour.points) == 1:
                working.contours[index] = Contour(points=contour.points, closed=False)

        try:
            flat = [flatten_contour(contour, resolution) for contour in working.contours]
        except (ContourError, ValueError) as e:
            error = FlattenError(name, str(e))
            self.logger.warning(
                "Flatten failed, dropping shape",
                shape=name,
                error=str(error),
                error_type=type(e).__name__,
            )
            return None

        return [scale_up(contour, self.config.scale) for contour in flat if contour.points]


def _rings(geometry: BaseGeometry) -> list[IntPath]:
    """Exterior and hole rings of every polygon, counter-clockwise outers."""
    rings: list[IntPath] = []
    for polygon in polygons_of(geometry):
        polygon = orient(polygon, sign=1.0)
        for ring in [polygon.exterior, *polygon.interiors]:
            coords = list(ring.coords)[:-1]
            if len(coords) >= 3:
                rings.append([(round(x), round(y)) for x, y in coords])
    return rings
