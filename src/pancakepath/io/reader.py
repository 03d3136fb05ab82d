"""SVG reader for loading drawings into layers.

This module provides the SVGReader class for loading SVG documents and
converting their shapes into domain records. Basic shapes (rect, circle,
ellipse, line, polygon, polyline) are rewritten as path data and parsed
with fontTools, so every element ends up as the same kind of CompoundShape.
"""

import math
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from pathlib import Path

import structlog
from fontTools.misc.transform import Identity, Transform
from PIL import ImageColor

from pancakepath.domain import FillRule, GroupRecord, Layer, PathMetadata, PathRecord
from pancakepath.exceptions import PathDataError, SVGLoadError
from pancakepath.io.converter import svg_path_to_shape

logger = structlog.get_logger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

# Presentation attributes inherited from parent groups
INHERITED = ("fill", "stroke", "stroke-width", "fill-rule")

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_TRANSFORM_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _numbers(text: str | None) -> list[float]:
    return [float(n) for n in _NUMBER_RE.findall(text or "")]


def _length(value: str | None, default: float = 0.0) -> float:
    numbers = _numbers(value)
    return numbers[0] if numbers else default


def parse_transform(text: str | None) -> Transform:
    """Parse an SVG transform attribute into a fontTools Transform.

    Transforms listed first are applied last, as in SVG.

    Examples:
        >>> parse_transform("translate(10, 5) scale(2)").transformPoint((1, 1))
        (12.0, 7.0)
    """
    transform = Identity
    for name, args in _TRANSFORM_RE.findall(text or ""):
        values = _numbers(args)
        if name == "matrix" and len(values) == 6:
            step = Transform(*values)
        elif name == "translate" and values:
            step = Identity.translate(values[0], values[1] if len(values) > 1 else 0)
        elif name == "scale" and values:
            step = Identity.scale(values[0], values[1] if len(values) > 1 else values[0])
        elif name == "rotate" and values:
            angle = math.radians(values[0])
            if len(values) == 3:
                cx, cy = values[1], values[2]
                step = Identity.translate(cx, cy).rotate(angle).translate(-cx, -cy)
            else:
                step = Identity.rotate(angle)
        elif name == "skewX" and values:
            step = Identity.skew(math.radians(values[0]), 0)
        elif name == "skewY" and values:
            step = Identity.skew(0, math.radians(values[0]))
        else:
            logger.warning("Ignoring malformed transform", transform=f"{name}({args})")
            continue
        transform = transform.transform(step)
    return transform


def normalize_color(value: str | None) -> str | None:
    """Convert a CSS color to "#rrggbb".

    Returns:
        Hex color, or None for "none", missing and unknown colors
    """
    if value is None:
        return None
    value = value.strip()
    if not value or value == "none":
        return None
    try:
        r, g, b = ImageColor.getrgb(value)[:3]
    except ValueError:
        logger.warning("Unknown color, treating as none", color=value)
        return None
    return f"#{r:02x}{g:02x}{b:02x}"


def element_path_data(element: ET.Element) -> str | None:
    """Path data for a drawable element, None if it is not one."""
    tag = _local_name(element.tag)
    get = element.attrib.get

    if tag == "path":
        return get("d") or None

    if tag == "rect":
        x, y = _length(get("x")), _length(get("y"))
        w, h = _length(get("width")), _length(get("height"))
        if w <= 0 or h <= 0:
            return None
        rx = _length(get("rx"), -1.0)
        ry = _length(get("ry"), -1.0)
        rx = ry if rx < 0 else rx
        ry = rx if ry < 0 else ry
        rx, ry = min(max(rx, 0.0), w / 2), min(max(ry, 0.0), h / 2)
        if not rx or not ry:
            return f"M{x},{y} H{x + w} V{y + h} H{x} Z"
        return (
            f"M{x + rx},{y} H{x + w - rx} A{rx},{ry} 0 0 1 {x + w},{y + ry} "
            f"V{y + h - ry} A{rx},{ry} 0 0 1 {x + w - rx},{y + h} "
            f"H{x + rx} A{rx},{ry} 0 0 1 {x},{y + h - ry} "
            f"V{y + ry} A{rx},{ry} 0 0 1 {x + rx},{y} Z"
        )

    if tag in ("circle", "ellipse"):
        cx, cy = _length(get("cx")), _length(get("cy"))
        if tag == "circle":
            rx = ry = _length(get("r"))
        else:
            rx, ry = _length(get("rx")), _length(get("ry"))
        if rx <= 0 or ry <= 0:
            return None
        return (
            f"M{cx - rx},{cy} A{rx},{ry} 0 1 0 {cx + rx},{cy} "
            f"A{rx},{ry} 0 1 0 {cx - rx},{cy} Z"
        )

    if tag == "line":
        return (
            f"M{_length(get('x1'))},{_length(get('y1'))} "
            f"L{_length(get('x2'))},{_length(get('y2'))}"
        )

    if tag in ("polygon", "polyline"):
        values = _numbers(get("points"))
        pairs = list(zip(values[0::2], values[1::2]))
        if len(pairs) < 2:
            return None
        data = "M" + " L".join(f"{px},{py}" for px, py in pairs)
        return data + " Z" if tag == "polygon" else data

    return None


def _presentation(element: ET.Element, inherited: dict[str, str]) -> dict[str, str]:
    """Presentation attributes of an element, style declarations winning."""
    style = dict(inherited)
    for name in INHERITED:
        if name in element.attrib:
            style[name] = element.attrib[name]
    for declaration in element.attrib.get("style", "").split(";"):
        if ":" in declaration:
            name, value = declaration.split(":", 1)
            if name.strip() in INHERITED:
                style[name.strip()] = value.strip()
    return style


class SVGReader:
    """Loads SVG documents into layers.

    Top level drawable elements become PathRecords; each top level group
    becomes a GroupRecord holding every drawable element beneath it.

    Example:
        reader = SVGReader(Path("drawing.svg"))
        layer = reader.load()
        for record in layer.iter_records():
            print(record.label, record.fill_color)
    """

    def __init__(self, svg_path: Path) -> None:
        """Initialize the SVG reader.

        Args:
            svg_path: Path to the SVG file
        """
        self._svg_path = svg_path
        self._root: ET.Element | None = None

    def load(self) -> Layer:
        """Load the document and convert it.

        Raises:
            FileNotFoundError: If the SVG file does not exist
            SVGLoadError: If the file is not a readable SVG document
        """
        if not self._svg_path.exists():
            raise FileNotFoundError(f"SVG file not found: {self._svg_path}")

        try:
            self._root = ET.parse(self._svg_path).getroot()
        except ET.ParseError as e:
            raise SVGLoadError(str(self._svg_path), str(e)) from e

        if _local_name(self._root.tag) != "svg":
            raise SVGLoadError(str(self._svg_path), "root element is not <svg>")

        return self.to_layer(self._root, name=self._svg_path.stem)

    @classmethod
    def from_string(cls, text: str, name: str = "main") -> Layer:
        """Convert an SVG document held in memory.

        Raises:
            SVGLoadError: If the text is not an SVG document
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise SVGLoadError("<string>", str(e)) from e
        return cls(Path(name)).to_layer(root, name=name)

    def to_layer(self, root: ET.Element, name: str = "main") -> Layer:
        """Convert a parsed <svg> element into a layer."""
        layer = Layer(name=name)
        base = _presentation(root, {"fill": "black"})
        transform = parse_transform(root.attrib.get("transform"))

        for child in root:
            tag = _local_name(child.tag)
            if tag == "g":
                children = list(self._iter_records(child, base, transform))
                if children:
                    layer.append(GroupRecord(children=children, metadata=self._metadata(child)))
            else:
                record = self._to_record(child, base, transform)
                if record is not None:
                    layer.append(record)

        logger.debug("SVG converted", layer=name, items=len(layer))
        return layer

    def _iter_records(
        self,
        element: ET.Element,
        inherited: dict[str, str],
        parent_transform: Transform,
    ) -> Iterator[PathRecord]:
        style = _presentation(element, inherited)
        transform = parent_transform.transform(parse_transform(element.attrib.get("transform")))
        for child in element:
            if _local_name(child.tag) == "g":
                yield from self._iter_records(child, style, transform)
            else:
                record = self._to_record(child, style, transform)
                if record is not None:
                    yield record

    def _to_record(
        self,
        element: ET.Element,
        inherited: dict[str, str],
        parent_transform: Transform,
    ) -> PathRecord | None:
        path_data = element_path_data(element)
        if path_data is None:
            return None

        style = _presentation(element, inherited)
        transform = parent_transform.transform(parse_transform(element.attrib.get("transform")))
        fill_rule = FillRule.EVEN_ODD if style.get("fill-rule") == "evenodd" else FillRule.NONZERO

        metadata = self._metadata(element)
        try:
            shape = svg_path_to_shape(
                path_data,
                fill_rule=fill_rule,
                transform=None if transform == Identity else transform,
            )
        except PathDataError as e:
            logger.warning("Skipping element with bad path data", item=metadata.name, error=str(e))
            return None

        if shape.is_empty():
            return None

        # Strokes scale with the element; use the mean axis scale
        width = _length(style.get("stroke-width"), 1.0)
        xx, xy, yx, yy = transform[:4]
        width *= math.sqrt(abs(xx * yy - xy * yx)) or 1.0

        return PathRecord(
            shape=shape,
            stroke_color=normalize_color(style.get("stroke")),
            fill_color=normalize_color(style.get("fill")),
            stroke_width=width,
            metadata=metadata,
        )

    @staticmethod
    def _metadata(element: ET.Element) -> PathMetadata:
        color = element.attrib.get("data-color")
        return PathMetadata(
            name=element.attrib.get("id"),
            color=int(color) if color and color.isdigit() else None,
        )


def read_svg(svg_path: Path | str) -> Layer:
    """Load an SVG file into a layer."""
    return SVGReader(Path(svg_path)).load()
