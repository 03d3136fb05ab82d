"""Raster export.

Renders records, groups or whole layers into Pillow images. Fills are drawn
from the shapely silhouette of each shape so holes are honored regardless
of the source fill rule; strokes are drawn as polylines.

PNG files are written on a single background worker so exports never
overlap; ``save_raster_image`` hands back a Future that resolves with the
destination path or fails with the underlying OSError.
"""

import base64
import io
import math
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

import structlog
from PIL import Image, ImageColor, ImageDraw

from pancakepath.core.boolean import DEFAULT_SCALE, polygons_of, silhouette
from pancakepath.core.geometry import flatten_contour
from pancakepath.domain import GroupRecord, Layer, PathRecord
from pancakepath.exceptions import ContourError, RasterExportError

logger = structlog.get_logger(__name__)

BASE_DPI = 72
FLATTEN_RESOLUTION = 0.25

Rasterizable = PathRecord | GroupRecord | Layer
RGBA = tuple[int, int, int, int]
ToPixel = Callable[[float, float], tuple[float, float]]

_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pancakepath-export")


def _records(item: Rasterizable) -> list[PathRecord]:
    if isinstance(item, Layer):
        return list(item.iter_records())
    if isinstance(item, GroupRecord):
        return list(item.children)
    if isinstance(item, PathRecord):
        return [item]
    raise RasterExportError(f"Cannot rasterize {type(item).__name__}")


def _rgba(color: str | None) -> RGBA | None:
    if not color or color == "none":
        return None
    try:
        channels = ImageColor.getrgb(color)
    except ValueError:
        logger.warning("Unknown color, skipping paint", color=color)
        return None
    if len(channels) == 4:
        return channels  # type: ignore[return-value]
    return (channels[0], channels[1], channels[2], 255)


def rasterize(item: Rasterizable, dpi: int = BASE_DPI) -> Image.Image:
    """Render an item into an RGBA image.

    Args:
        item: Record, group or layer to render
        dpi: Output resolution; 72 renders one pixel per drawing unit

    Returns:
        Image cropped to the item's bounds, padded by half the widest stroke.
        An item with nothing to draw gives a 1x1 transparent image.

    Raises:
        RasterExportError: If the item cannot be rasterized
    """
    if dpi <= 0:
        raise RasterExportError(f"dpi must be positive, got {dpi}")

    records = [r for r in _records(item) if not r.shape.is_empty()]
    if not records:
        return Image.new("RGBA", (1, 1), (0, 0, 0, 0))

    scale = dpi / BASE_DPI
    boxes = [r.shape.bounding_box() for r in records]
    pad = max((r.stroke_width for r in records if r.stroke_color), default=0.0) / 2 + 1
    min_x = min(b[0] for b in boxes) - pad
    min_y = min(b[1] for b in boxes) - pad
    max_x = max(b[2] for b in boxes) + pad
    max_y = max(b[3] for b in boxes) + pad

    size = (
        max(1, math.ceil((max_x - min_x) * scale)),
        max(1, math.ceil((max_y - min_y) * scale)),
    )
    image = Image.new("RGBA", size, (0, 0, 0, 0))

    def to_pixel(x: float, y: float) -> tuple[float, float]:
        return ((x - min_x) * scale, (y - min_y) * scale)

    for record in records:
        fill = _rgba(record.fill_color)
        if fill is not None:
            _paint_fill(image, record, fill, to_pixel)

        stroke = _rgba(record.stroke_color)
        if stroke is not None:
            width = max(1, round(record.stroke_width * scale))
            _paint_stroke(image, record, stroke, width, to_pixel)

    logger.debug("Rasterized", records=len(records), size=size, dpi=dpi)
    return image


def _paint_fill(image: Image.Image, record: PathRecord, color: RGBA, to_pixel: ToPixel) -> None:
    polygons = polygons_of(silhouette(record.shape, FLATTEN_RESOLUTION, DEFAULT_SCALE))
    if not polygons:
        return

    def ring_points(ring: Any) -> list[tuple[float, float]]:
        return [to_pixel(x / DEFAULT_SCALE, y / DEFAULT_SCALE) for x, y in ring.coords]

    mask = Image.new("L", image.size, 0)
    draw = ImageDraw.Draw(mask)
    # Larger polygons first so islands sitting in a hole are painted last
    for polygon in sorted(polygons, key=lambda p: p.area, reverse=True):
        draw.polygon(ring_points(polygon.exterior), fill=255)
        for hole in polygon.interiors:
            draw.polygon(ring_points(hole), fill=0)

    image.paste(color, (0, 0, image.width, image.height), mask)


def _paint_stroke(
    image: Image.Image,
    record: PathRecord,
    color: RGBA,
    width: int,
    to_pixel: ToPixel,
) -> None:
    draw = ImageDraw.Draw(image)
    for contour in record.shape.contours:
        try:
            flat = flatten_contour(contour, FLATTEN_RESOLUTION)
        except (ContourError, ValueError) as e:
            logger.warning("Cannot flatten stroke", item=record.label, error=str(e))
            continue
        points = [to_pixel(p.x, p.y) for p in flat.points]
        if len(points) < 2:
            continue
        if flat.closed:
            points.append(points[0])
        draw.line(points, fill=color, width=width, joint="curve")


def get_data_uri(item: Rasterizable, dpi: int = BASE_DPI) -> str:
    """Render an item into a base64 PNG data URI."""
    buffer = io.BytesIO()
    rasterize(item, dpi).save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def _write_png(image: Image.Image, dest: Path) -> Path:
    image.save(dest, format="PNG")
    logger.info("Raster image saved", path=str(dest), size=image.size)
    return dest


def save_raster_image(item: Rasterizable, dpi: int, dest: Path | str) -> "Future[Path]":
    """Render an item and write it as a PNG in the background.

    Rendering happens on the calling thread; only the file write is queued.
    Writes run one at a time in submission order.

    Args:
        item: Record, group or layer to render
        dpi: Output resolution
        dest: Destination file path

    Returns:
        Future resolving with the destination path, or failing with the
        OSError raised while writing
    """
    image = rasterize(item, dpi)
    return _executor.submit(_write_png, image, Path(dest))
