"""Color space conversions.

Pure, stateless helpers converting between RGB, HSL and YUV and parsing
CSS color strings. Parsing failures return None instead of raising so that
callers can fall back to a default color.
"""

import math
import re

from pancakepath.domain import HSL, RGB, YUV

_RGB_RE = re.compile(
    r"^rgba?\(\s*([-+]?[\d.]+)\s*,\s*([-+]?[\d.]+)\s*,\s*([-+]?[\d.]+)\s*(?:,\s*[-+]?[\d.]+\s*)?\)$",
    re.IGNORECASE,
)
_RGB_HEX_RE = re.compile(r"^rgb\((\d+),\s*(\d+),\s*(\d+)\)$")
_SHORT_HEX_RE = re.compile(r"^#?([a-f\d])([a-f\d])([a-f\d])$", re.IGNORECASE)
_HEX_RE = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


def rgb_to_hsl(color: RGB) -> HSL:
    """Convert an RGB color to HSL.

    Conversion formula adapted from http://en.wikipedia.org/wiki/HSL_color_space.

    Args:
        color: RGB triplet with channels in [0, 255]

    Returns:
        (h, s, l) with every component in [0, 1]. Achromatic colors have
        hue and saturation 0.

    Examples:
        >>> rgb_to_hsl((255, 255, 255))
        (0.0, 0.0, 1.0)
    """
    r = color[0] / 255
    g = color[1] / 255
    b = color[2] / 255

    max_c = max(r, g, b)
    min_c = min(r, g, b)
    lightness = (max_c + min_c) / 2

    if max_c == min_c:
        return (0.0, 0.0, lightness)

    d = max_c - min_c
    if lightness > 0.5:
        saturation = d / (2 - max_c - min_c)
    else:
        saturation = d / (max_c + min_c)

    if max_c == r:
        hue = (g - b) / d + (6 if g < b else 0)
    elif max_c == g:
        hue = (b - r) / d + 2
    else:
        hue = (r - g) / d + 4

    return (hue / 6, saturation, lightness)


def rgb_to_yuv(color: RGB) -> YUV:
    """Convert an RGB color to YUV (BT.601).

    Chroma channels are offset by 128 and every channel is floored, matching
    the integer representation used for palette matching.

    Args:
        color: RGB triplet with channels in [0, 255]

    Returns:
        (y, u, v) integer triplet

    Examples:
        >>> rgb_to_yuv((0, 0, 0))
        (0, 128, 128)
    """
    r, g, b = color[0], color[1], color[2]

    y = r * 0.299000 + g * 0.587000 + b * 0.114000
    u = r * -0.168736 + g * -0.331264 + b * 0.500000 + 128
    v = r * 0.500000 + g * -0.418688 + b * -0.081312 + 128

    return (math.floor(y), math.floor(u), math.floor(v))


def rgb_to_hex(rgb: object) -> object:
    """Convert an "rgb(r, g, b)" string to "#rrggbb".

    Args:
        rgb: Color string such as "rgb(0,0,0)"

    Returns:
        Lowercase, zero padded hex string, or the input unchanged when it is
        not an rgb() string
    """
    if not isinstance(rgb, str):
        return rgb
    match = _RGB_HEX_RE.match(rgb)
    if not match:
        return rgb

    return "#" + "".join(f"{int(channel):02x}"[-2:] for channel in match.groups())


def color_string_to_array(value: object) -> RGB | None:
    """Parse a CSS color string into an RGB triplet.

    Accepts "rgb(r,g,b)" / "rgba(r,g,b,a)" and "#RGB" / "#RRGGBB" forms.
    Shorthand hex digits are doubled ("#03F" -> "#0033FF").

    Args:
        value: Color string

    Returns:
        RGB triplet, or None for anything else (including non-strings)
    """
    if not isinstance(value, str):
        return None

    text = value.strip()

    if "rgb" in text:
        match = _RGB_RE.match(text)
        if not match:
            return None
        try:
            r, g, b = (round(float(channel)) for channel in match.groups())
        except ValueError:
            return None
        return (r, g, b)

    if "#" in text:
        text = _SHORT_HEX_RE.sub(lambda m: "".join(d * 2 for d in m.groups()), text)
        match = _HEX_RE.match(text)
        if not match:
            return None
        r, g, b = (int(channel, 16) for channel in match.groups())
        return (r, g, b)

    return None
