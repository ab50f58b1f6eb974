"""Colour comparison functions used to drive colour clustering."""

from __future__ import annotations

import enum
import math

from visioncortex.color import Color, ColorI32


class ColorSpace(enum.Enum):
    """Colour space in which differences between clusters are measured."""

    RGB = "rgb"
    OKLAB = "oklab"


def color_diff(a: Color, b: Color) -> int:
    """Sum of absolute RGB channel differences."""
    return abs(a.r - b.r) + abs(a.g - b.g) + abs(a.b - b.b)


def _srgb_to_linear(channel: int) -> float:
    c = channel / 255.0
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def _to_oklab(color: Color) -> tuple[float, float, float]:
    r = _srgb_to_linear(color.r)
    g = _srgb_to_linear(color.g)
    b = _srgb_to_linear(color.b)
    l_ = math.copysign(abs(0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b) ** (1 / 3), 1.0)
    m_ = math.copysign(abs(0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b) ** (1 / 3), 1.0)
    s_ = math.copysign(abs(0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b) ** (1 / 3), 1.0)
    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )


def oklab_color_diff(a: Color, b: Color) -> int:
    """Squared Oklab distance scaled by 255 and truncated."""
    la, aa, ba = _to_oklab(a)
    lb, ab, bb = _to_oklab(b)
    dl, da, db = la - lb, aa - ab, ba - bb
    return int((dl * dl + da * da + db * db) * 255.0)


def color_same(a: Color, b: Color, shift: int, thres: int) -> bool:
    """True if every channel, shifted right by ``shift``, differs by at most ``thres``."""
    diff = ColorI32(a.r >> shift, a.g >> shift, a.b >> shift).diff(
        ColorI32(b.r >> shift, b.g >> shift, b.b >> shift)
    )
    return abs(diff.r) <= thres and abs(diff.g) <= thres and abs(diff.b) <= thres