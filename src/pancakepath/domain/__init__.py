"""Domain models for pancakepath.

This module contains the core domain models representing vector shapes,
the records a drawing layer holds, palette colors and layout results.
All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Copied by value when metadata crosses a transformation
- Independent of clipping and SVG library details

Key classes:
- Point: A 2D point with curve metadata
- Contour: One loop or polyline of a path
- CompoundShape: Contours forming one drawable unit
- PathRecord / GroupRecord: Styled items stored in a layer
- Layer: Ordered arena of items in draw order
- PaletteEntry: A palette color with precomputed color spaces
- Size / LayoutResult: Duplication layout input and output
"""

from pancakepath.domain.layer import Layer
from pancakepath.domain.layout import HasSize, LayoutResult, Size
from pancakepath.domain.palette import HSL, RGB, YUV, PaletteEntry
from pancakepath.domain.record import GroupRecord, LayerItem, PathMetadata, PathRecord
from pancakepath.domain.shape import CompoundShape, Contour, FillRule, Point, PointType

__all__: list[str] = [
    # Enums
    "FillRule",
    "PointType",
    # Geometry
    "Point",
    "Contour",
    "CompoundShape",
    # Records
    "PathMetadata",
    "PathRecord",
    "GroupRecord",
    "LayerItem",
    "Layer",
    # Color
    "RGB",
    "HSL",
    "YUV",
    "PaletteEntry",
    # Layout
    "HasSize",
    "Size",
    "LayoutResult",
]
