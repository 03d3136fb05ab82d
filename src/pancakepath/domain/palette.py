"""Palette entry representation."""

from dataclasses import dataclass

RGB = tuple[int, int, int]
HSL = tuple[float, float, float]
YUV = tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class PaletteEntry:
    """A reference color with every representation precomputed.

    Attributes:
        key: Identifier of the color (e.g. "color0")
        hex: Hexadecimal color string as configured
        rgb: RGB triplet in [0, 255]
        hsl: HSL triplet in [0, 1]
        yuv: YUV triplet used for distance matching
    """

    key: str
    hex: str
    rgb: RGB
    hsl: HSL
    yuv: YUV
