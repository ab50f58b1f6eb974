"""Color types: RGBA bytes, integer and float RGB, HSV and running sums."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

_PALETTE = (
    (216, 51, 74),    # Ruby
    (255, 232, 96),   # Lemon
    (160, 212, 104),  # Grass
    (72, 207, 173),   # Mint
    (79, 193, 233),   # Aqua
    (93, 156, 236),   # Jeans
    (128, 103, 183),  # Plum
    (172, 146, 236),  # Lavender
)


class ColorName(enum.Enum):
    BLACK = "black"
    WHITE = "white"
    RED = "red"


def _format_float(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class ColorHsv:
    """HSV with each channel in [0, 1]."""

    h: float
    s: float
    v: float


@dataclass(frozen=True)
class Color:
    """RGBA with 8-bit channels."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        for value in (self.r, self.g, self.b, self.a):
            if not 0 <= value <= 255:
                raise ValueError(f"channel value {value} out of range 0..255")

    @classmethod
    def from_name(cls, name: ColorName) -> Color:
        return {
            ColorName.BLACK: cls(0, 0, 0),
            ColorName.WHITE: cls(255, 255, 255),
            ColorName.RED: cls(255, 0, 0),
        }[name]

    @classmethod
    def palette(cls, i: int) -> Color:
        """Return entry ``i`` of an eight-colour cycling palette."""
        return cls(*_PALETTE[i % len(_PALETTE)])

    def channel(self, c: int) -> int | None:
        """Return channel ``c`` (0=r, 1=g, 2=b, 3=a), or None."""
        return {0: self.r, 1: self.g, 2: self.b, 3: self.a}.get(c)

    def to_color_string(self) -> str:
        return f"rgba({self.r},{self.g},{self.b},{_format_float(self.a / 255.0)})"

    def to_hex_string(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_color_i32(self) -> ColorI32:
        return ColorI32.from_color(self)

    def to_hsv(self) -> ColorHsv:
        r, g, b = self.r / 255.0, self.g / 255.0, self.b / 255.0
        high = max(r, g, b)
        low = min(r, g, b)
        d = high - low
        s = 0.0 if high == 0.0 else d / high
        if high == low:
            h = 0.0
        else:
            if high == r:
                h = (g - b) / d + (6.0 if g < b else 0.0)
            elif high == g:
                h = (b - r) / d + 2.0
            else:
                h = (r - g) / d + 4.0
            h /= 6.0
        return ColorHsv(h, s, high)


@dataclass(frozen=True)
class ColorI32:
    """RGB with signed integer channels."""

    r: int = 0
    g: int = 0
    b: int = 0

    @classmethod
    def from_color(cls, color: Color) -> ColorI32:
        return cls(color.r, color.g, color.b)

    def __add__(self, other: ColorI32) -> ColorI32:
        return ColorI32(self.r + other.r, self.g + other.g, self.b + other.b)

    def diff(self, other: ColorI32) -> ColorI32:
        return ColorI32(self.r - other.r, self.g - other.g, self.b - other.b)

    def to_color(self) -> Color:
        """Convert to an opaque ``Color``; every channel must lie in 0..255."""
        return Color(self.r, self.g, self.b)

    def absolute(self) -> int:
        """Largest absolute channel value."""
        return max(abs(self.r), abs(self.g), abs(self.b))


@dataclass(frozen=True)
class ColorF64:
    """RGB with float channels."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @classmethod
    def from_color_i32(cls, color: ColorI32) -> ColorF64:
        return cls(float(color.r), float(color.g), float(color.b))

    def magnitude(self) -> float:
        return math.sqrt(self.r * self.r + self.g * self.g + self.b * self.b)


@dataclass
class ColorSum:
    """Running per-channel sums of RGBA colours."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0
    counter: int = 0

    def add(self, color: Color) -> None:
        self.r += color.r
        self.g += color.g
        self.b += color.b
        self.a += color.a
        self.counter += 1

    def merge(self, other: ColorSum) -> None:
        self.r += other.r
        self.g += other.g
        self.b += other.b
        self.a += other.a
        self.counter += other.counter

    def average(self) -> Color:
        """Mean colour; raises ZeroDivisionError when nothing was added."""
        n = self.counter
        return Color(self.r // n, self.g // n, self.b // n, self.a // n)

    def clear(self) -> None:
        self.r = self.g = self.b = self.a = self.counter = 0