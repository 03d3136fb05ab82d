"""Drawing I/O layer for pancakepath.

This module handles reading and writing drawings. It provides a clean
abstraction layer between fontTools pens, SVG documents, Pillow images and
the domain models.

Key responsibilities:
- Convert SVG path data to and from CompoundShapes
- Load SVG documents into layers
- Write processed layers as SVG documents
- Rasterize items into PNG images and data URIs

Key classes:
- SVGReader: Load SVG documents into layers
- SVGWriter: Save layers as SVG documents
"""

from pancakepath.io.converter import (
    polygons_to_svg_path,
    shape_to_svg_path,
    svg_path_to_shape,
)
from pancakepath.io.reader import SVGReader, read_svg
from pancakepath.io.writer import SVGWriter, write_svg
from pancakepath.io.raster import get_data_uri, rasterize, save_raster_image

__all__ = [
    "SVGReader",
    "SVGWriter",
    "get_data_uri",
    "polygons_to_svg_path",
    "rasterize",
    "read_svg",
    "save_raster_image",
    "shape_to_svg_path",
    "svg_path_to_shape",
    "write_svg",
]
