"""Palette matching for color snapping.

The printer can only pour a handful of batter shades, so every stroke and
fill color of a drawing has to be snapped onto the nearest shade. Matching
happens in YUV space, which follows human color discrimination more closely
than raw RGB distance.
"""

import math
from collections.abc import Sequence

import structlog

from pancakepath.core.color import color_string_to_array, rgb_to_hsl, rgb_to_yuv
from pancakepath.domain import RGB, Layer, PaletteEntry, PathRecord
from pancakepath.exceptions import PaletteError

logger = structlog.get_logger(__name__)

WHITE_RGB: RGB = (255, 255, 255)
DEFAULT_OUTLINE_WIDTH = 5.0

ColorSource = str | Sequence[float] | None


def render_color_data(color_hex: str, key: str) -> PaletteEntry:
    """Build a palette entry from a hex color.

    Args:
        color_hex: Hexadecimal color such as "#ffea7e"
        key: Identifier for the color

    Returns:
        PaletteEntry with RGB, HSL and YUV precomputed

    Raises:
        PaletteError: If the color cannot be parsed
    """
    rgb = color_string_to_array(color_hex)
    if rgb is None:
        raise PaletteError(f"Invalid palette color '{color_hex}'")

    return PaletteEntry(
        key=key,
        hex=color_hex,
        rgb=rgb,
        hsl=rgb_to_hsl(rgb),
        yuv=rgb_to_yuv(rgb),
    )


class PaletteMatcher:
    """Finds the nearest palette color for arbitrary input colors.

    The palette is ordered: index 0 is the lightest shade and later indices
    are progressively darker, so ``index + 1`` is always a suitable outline
    shade for a fill matched at ``index``.

    Example:
        matcher = PaletteMatcher(["#ffea7e", "#e2bc15", "#a6720e", "#714a00"])
        matcher.nearest_index("rgb(200, 180, 20)")   # -> 1
        matcher.auto_color_layer(layer, want_outline=True)
    """

    def __init__(
        self,
        colors: Sequence[str] | None = None,
        outline_width: float = DEFAULT_OUTLINE_WIDTH,
    ) -> None:
        """Initialize the matcher.

        Args:
            colors: Palette hex colors, lightest first (build later if None)
            outline_width: Stroke width of generated outlines
        """
        self.outline_width = outline_width
        self._colors: list[str] = []
        self._entries: list[PaletteEntry] = []
        if colors is not None:
            self.build(colors)

    def build(self, colors: Sequence[str]) -> list[PaletteEntry]:
        """Reset and build the palette from hex colors.

        Args:
            colors: Hexadecimal colors, lightest first

        Returns:
            The new palette entries

        Raises:
            PaletteError: If any color cannot be parsed
        """
        entries = [render_color_data(color, f"color{index}") for index, color in enumerate(colors)]
        self._colors = list(colors)
        self._entries = entries
        logger.debug("Palette built", size=len(entries), colors=self._colors)
        return list(entries)

    def rebuild(self) -> list[PaletteEntry]:
        """Rebuild the palette from the colors it was last built with."""
        return self.build(self._colors)

    @property
    def entries(self) -> list[PaletteEntry]:
        """Current palette entries."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> PaletteEntry:
        return self._entries[index]

    def nearest_index(self, source: ColorSource, limit: int | None = None) -> int:
        """Find the palette index closest to a color.

        Args:
            source: RGB triplet or color string ("rgb(...)" or hex). None,
                unparseable strings and NaN channels are treated as white.
            limit: Only consider the first ``limit`` entries (falsy = all)

        Returns:
            Index of the nearest entry; ties go to the lowest index

        Raises:
            PaletteError: If the palette is empty
        """
        if not self._entries:
            raise PaletteError("Palette is empty; call build() first")

        colors = self._entries[:limit] if limit else self._entries

        rgb = _to_rgb(source)
        target = rgb_to_yuv(rgb)

        lowest_index = 0
        lowest_value = math.inf
        for index, entry in enumerate(colors):
            distance = math.dist(entry.yuv, target)

            # Strictly lower wins so earlier (lighter) shades take ties
            if distance < lowest_value:
                lowest_value = distance
                lowest_index = index

        return lowest_index

    def snap_color(self, source: ColorSource, limit: int | None = None) -> PaletteEntry:
        """Return the palette entry closest to a color."""
        return self._entries[self.nearest_index(source, limit)]

    def auto_color_layer(
        self,
        layer: Layer,
        limit: int | None = None,
        want_outline: bool = False,
    ) -> list[PathRecord]:
        """Snap stroke and fill colors for every record in a layer.

        Colors and palette indices are updated in place. With ``want_outline``
        the darkest shade is reserved for outlines: matching is limited to all
        but the last entry and each filled record gets a stroke-only copy in
        the next darker shade. Outlines are added on top of the layer once
        every original has been matched.

        Args:
            layer: Layer to recolor
            limit: Only match against the first ``limit`` shades
            want_outline: Outline every fill with a darker shade

        Returns:
            Outline records added to the layer
        """
        if want_outline:
            if len(self._entries) < 2:
                raise PaletteError("Outlines need a palette with at least two shades")
            limit = len(self._entries) - 1

        outlines: list[PathRecord] = []
        for record in layer.iter_records():
            if record.stroke_color:
                color_index = self.nearest_index(record.stroke_color, limit)
                record.stroke_color = self._entries[color_index].hex
                record.metadata.color = color_index

            if record.fill_color:
                color_index = self.nearest_index(record.fill_color, limit)
                record.fill_color = self._entries[color_index].hex
                record.metadata.color = color_index
                record.metadata.fill = True

                if want_outline:
                    outline = record.clone()
                    outline.stroke_color = self._entries[color_index + 1].hex
                    outline.stroke_width = self.outline_width
                    outline.fill_color = None
                    outline.metadata.fill = False
                    outline.metadata.color = color_index + 1
                    outlines.append(outline)

        if outlines:
            layer.extend(outlines)

        logger.debug(
            "Layer colored",
            layer=layer.name,
            limit=limit,
            outlines=len(outlines),
        )
        return outlines


def _to_rgb(source: ColorSource) -> RGB:
    """Normalize a color source, falling back to white."""
    rgb: RGB | None
    if isinstance(source, str):
        rgb = color_string_to_array(source)
    elif source is None:
        rgb = None
    else:
        try:
            channels = [float(c) for c in source]
        except (TypeError, ValueError):
            channels = []
        if len(channels) >= 3 and not any(math.isnan(c) for c in channels[:3]):
            rgb = (round(channels[0]), round(channels[1]), round(channels[2]))
        else:
            rgb = None

    return rgb if rgb is not None else WHITE_RGB
