"""SVG writer for saving processed layers.

This module provides the SVGWriter class for writing layers back out as SVG
documents. Every record becomes a <path>; the palette index assigned by
color snapping is kept in a ``data-color`` attribute for toolpath export.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from pancakepath.domain import GroupRecord, Layer, PathRecord
from pancakepath.exceptions import SVGSaveError
from pancakepath.io.converter import shape_to_svg_path
from pancakepath.io.reader import SVG_NS


def _format_length(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


class SVGWriter:
    """Writes layers as SVG documents.

    Example:
        writer = SVGWriter(layer, Path("drawing-processed.svg"))
        writer.save()
    """

    def __init__(self, layer: Layer, output_path: Path, margin: float = 0.0) -> None:
        """Initialize the SVG writer.

        Args:
            layer: Layer to write
            output_path: Path where the document will be saved
            margin: Extra space around the drawing in the view box
        """
        self._layer = layer
        self._output_path = output_path
        self._margin = margin

    def to_element(self) -> ET.Element:
        """Build the <svg> element tree for the layer."""
        root = ET.Element("svg", {"xmlns": SVG_NS, "version": "1.1"})

        boxes = [r.shape.bounding_box() for r in self._layer.iter_records() if not r.shape.is_empty()]
        if boxes:
            m = self._margin
            min_x = min(b[0] for b in boxes) - m
            min_y = min(b[1] for b in boxes) - m
            width = max(b[2] for b in boxes) + m - min_x
            height = max(b[3] for b in boxes) + m - min_y
            root.set(
                "viewBox",
                " ".join(_format_length(v) for v in (min_x, min_y, width, height)),
            )
            root.set("width", _format_length(width))
            root.set("height", _format_length(height))

        root.set("id", self._layer.name)
        for item in self._layer:
            if isinstance(item, GroupRecord):
                parent = ET.SubElement(root, "g")
                if item.metadata.name:
                    parent.set("id", item.metadata.name)
                for child in item.children:
                    self._add_path(parent, child)
            else:
                self._add_path(root, item)

        return root

    def to_string(self) -> str:
        """Serialize the layer as SVG text."""
        root = self.to_element()
        ET.indent(root)
        return ET.tostring(root, encoding="unicode")

    def save(self) -> None:
        """Save the document to the output path.

        Raises:
            SVGSaveError: If the file cannot be written
        """
        try:
            self._output_path.write_text(self.to_string(), encoding="utf-8")
        except OSError as e:
            raise SVGSaveError(str(self._output_path), str(e)) from e

    def _add_path(self, parent: ET.Element, record: PathRecord) -> None:
        data = shape_to_svg_path(record.shape)
        if not data:
            return

        attrs = {
            "d": data,
            "fill": record.fill_color or "none",
            "stroke": record.stroke_color or "none",
        }
        if record.stroke_color:
            attrs["stroke-width"] = _format_length(record.stroke_width)
        if record.shape.fill_rule.value != "nonzero":
            attrs["fill-rule"] = record.shape.fill_rule.value
        if record.metadata.name:
            attrs["id"] = record.metadata.name
        if record.metadata.color is not None:
            attrs["data-color"] = str(record.metadata.color)
        ET.SubElement(parent, "path", attrs)

    @staticmethod
    def get_processed_path(input_path: Path) -> Path:
        """Generate output path with the processed naming convention.

        Converts: drawing.svg -> drawing-processed.svg

        Args:
            input_path: Original SVG file path

        Returns:
            Path with -processed suffix before extension
        """
        return input_path.parent / f"{input_path.stem}-processed{input_path.suffix}"


def write_svg(layer: Layer, output_path: Path | str) -> Path:
    """Save a layer as an SVG document and return the path written."""
    path = Path(output_path)
    SVGWriter(layer, path).save()
    return path
