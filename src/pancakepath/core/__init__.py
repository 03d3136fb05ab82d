"""Core processing algorithms for pancakepath.

This module contains the core algorithms for:

- Geometry operations (curve flattening, path length, bounds tests)
- Color space conversions and palette matching
- Boolean subtraction and polygon offsetting via shapely
- Layer-wide overlap resolution and thin feature removal
- Duplication layout on the griddle

Key functions:
- bezier_flatten: Convert Bezier curves to line segments
- flatten_shape: Flatten every contour of a shape
- subtract: Remove the filled area of shapes from another shape
- compute_layout: Positions and scale for duplicated copies

Key classes:
- PaletteMatcher: Snaps colors onto the batter palette
- PolygonOffsetter: Grows and shrinks shapes
- LayerResolver: Resolves overlaps within a layer
- LayerProcessor: Runs the full preparation pipeline
"""

from pancakepath.core.boolean import silhouette, subtract, union
from pancakepath.core.color import (
    color_string_to_array,
    rgb_to_hex,
    rgb_to_hsl,
    rgb_to_yuv,
)
from pancakepath.core.geometry import (
    bezier_flatten,
    bounds_overlap,
    flatten_contour,
    flatten_shape,
    shape_area,
    shape_length,
)
from pancakepath.core.offset import PolygonOffsetter, paths_to_svg
from pancakepath.core.layer import LayerResolver
from pancakepath.core.layout import compute_layout, duplicate_for_layout, fit_scale
from pancakepath.core.palette import PaletteMatcher, render_color_data
from pancakepath.core.processor import CancellationToken, LayerProcessor

__all__ = [
    # Processor classes
    "CancellationToken",
    "LayerProcessor",
    # Layer operations
    "LayerResolver",
    # Color
    "PaletteMatcher",
    "color_string_to_array",
    "render_color_data",
    "rgb_to_hex",
    "rgb_to_hsl",
    "rgb_to_yuv",
    # Offset and boolean
    "PolygonOffsetter",
    "paths_to_svg",
    "silhouette",
    "subtract",
    "union",
    # Geometry functions
    "bezier_flatten",
    "bounds_overlap",
    "flatten_contour",
    "flatten_shape",
    "shape_area",
    "shape_length",
    # Layout
    "compute_layout",
    "duplicate_for_layout",
    "fit_scale",
]
