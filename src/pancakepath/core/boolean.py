"""Boolean operations between shapes using shapely.

Shapes are flattened into polygons and scaled into a fixed-point grid before
any clipping, so every operation snaps results to integer coordinates
(``grid_size=1``) and stays numerically stable. Results are scaled back into
drawing units.

Closed contours are clipped as filled regions; open contours are clipped as
polylines so the visible parts of a stroke survive.
"""

from shapely.geometry import LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.ops import polygonize, unary_union

from pancakepath.core.geometry import bounds_overlap, flatten_shape
from pancakepath.domain import CompoundShape, Contour, FillRule, Point

DEFAULT_SCALE = 100
GRID = 1

IntPath = list[tuple[int, int]]


def scale_up(contour: Contour, scale: float) -> IntPath:
    """Convert a flattened contour into fixed-point integer coordinates."""
    return [(round(p.x * scale), round(p.y * scale)) for p in contour.points]


def scale_down(path: list[tuple[float, float]], scale: float, closed: bool = True) -> Contour:
    """Convert a fixed-point path back into a contour in drawing units."""
    return Contour(points=[Point(x / scale, y / scale) for x, y in path], closed=closed)


def to_fixed_paths(
    shape: CompoundShape,
    resolution: float,
    scale: float = DEFAULT_SCALE,
) -> tuple[list[IntPath], list[IntPath]]:
    """Flatten and scale a shape for clipping.

    Returns:
        Tuple of (closed paths with at least 3 points, open paths with at
        least 2 points)
    """
    flat = flatten_shape(shape, resolution)
    closed: list[IntPath] = []
    opened: list[IntPath] = []
    for contour in flat.contours:
        path = scale_up(contour, scale)
        if contour.closed and len(path) >= 3:
            closed.append(path)
        elif not contour.closed and len(path) >= 2:
            opened.append(path)
    return closed, opened


def filled_region(rings: list[IntPath], fill_rule: FillRule = FillRule.NONZERO) -> BaseGeometry:
    """Area enclosed by a set of rings under a fill rule.

    The rings are noded against each other and split into faces; a face is
    kept when a point inside it is filled according to ``fill_rule``. This
    resolves self-intersections, holes and overlapping loops in one pass.

    Args:
        rings: Closed rings in fixed-point coordinates (implicitly closed)
        fill_rule: Rule deciding which faces are inside

    Returns:
        Valid (Multi)Polygon, empty if nothing is filled
    """
    rings = [ring for ring in rings if len(ring) >= 3]
    if not rings:
        return Polygon()

    noded = unary_union([LineString(ring + [ring[0]]) for ring in rings])
    test = CompoundShape(
        contours=[Contour(points=[Point(x, y) for x, y in ring]) for ring in rings],
        fill_rule=fill_rule,
    )

    faces = [
        face
        for face in polygonize(noded)
        if not face.is_empty and test.contains_point(*face.representative_point().coords[0])
    ]
    return unary_union(faces) if faces else Polygon()


def polygons_of(geometry: BaseGeometry) -> list[Polygon]:
    """Every non-empty polygon inside a geometry, collections included."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if hasattr(geometry, "geoms"):
        return [polygon for part in geometry.geoms for polygon in polygons_of(part)]
    return []


def lines_of(geometry: BaseGeometry) -> list[LineString]:
    """Every non-empty line string inside a geometry, collections included."""
    if geometry.is_empty:
        return []
    if isinstance(geometry, LineString):
        return [geometry]
    if hasattr(geometry, "geoms"):
        return [line for part in geometry.geoms for line in lines_of(part)]
    return []


def geometry_to_contours(geometry: BaseGeometry, scale: float) -> list[Contour]:
    """Convert fixed-point geometry back into contours in drawing units.

    Polygon exteriors wind counter-clockwise and holes clockwise, so the
    contours fill correctly under the nonzero rule.
    """
    contours: list[Contour] = []
    for polygon in polygons_of(geometry):
        polygon = orient(polygon, sign=1.0)
        for ring in [polygon.exterior, *polygon.interiors]:
            # Shapely repeats the first coordinate at the end of a ring
            contours.append(scale_down(list(ring.coords)[:-1], scale))
    for line in lines_of(geometry):
        contours.append(scale_down(list(line.coords), scale, closed=False))
    return contours


def silhouette(
    shape: CompoundShape,
    resolution: float,
    scale: float = DEFAULT_SCALE,
) -> BaseGeometry:
    """Filled outline of a shape in fixed-point coordinates.

    Only closed contours contribute; the shape's fill rule decides holes.
    """
    closed, _ = to_fixed_paths(shape, resolution, scale)
    return filled_region(closed, shape.fill_rule)


def union(
    shapes: list[CompoundShape],
    resolution: float,
    scale: float = DEFAULT_SCALE,
) -> CompoundShape:
    """Merge the filled areas of several shapes into one nonzero shape.

    Each shape is filled under its own fill rule before merging. Open
    contours do not contribute.
    """
    merged = unary_union([silhouette(shape, resolution, scale) for shape in shapes if not shape.is_empty()])
    return CompoundShape(contours=geometry_to_contours(merged, scale), fill_rule=FillRule.NONZERO)


def subtract(
    subject: CompoundShape,
    clips: CompoundShape | list[CompoundShape],
    resolution: float,
    scale: float = DEFAULT_SCALE,
) -> CompoundShape:
    """Remove the filled area of ``clips`` from ``subject``.

    Args:
        subject: Shape to carve
        clips: Shape or shapes drawn over the subject
        resolution: Flatten resolution for curves
        scale: Fixed-point scale factor

    Returns:
        New shape holding what remains of the subject. When no clip overlaps
        the subject's bounding box, an unchanged clone is returned so curves
        are preserved. An empty shape means nothing is left.
    """
    if isinstance(clips, CompoundShape):
        clips = [clips]

    subject_box = subject.bounding_box()
    overlapping = [
        clip
        for clip in clips
        if not clip.is_empty() and bounds_overlap(subject_box, clip.bounding_box())
    ]
    if not overlapping:
        return subject.clone()

    mask = unary_union([silhouette(clip, resolution, scale) for clip in overlapping])
    if mask.is_empty:
        return subject.clone()

    closed, opened = to_fixed_paths(subject, resolution, scale)

    remains: list[BaseGeometry] = []
    region = filled_region(closed, subject.fill_rule)
    if not region.is_empty:
        remains.append(region.difference(mask, grid_size=GRID))
    if opened:
        strokes = MultiLineString([LineString(path) for path in opened])
        remains.append(strokes.difference(mask, grid_size=GRID))

    contours = [c for part in remains for c in geometry_to_contours(part, scale)]
    return CompoundShape(contours=contours, fill_rule=FillRule.NONZERO)
