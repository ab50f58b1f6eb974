"""Binary and RGBA raster images."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator

from visioncortex.bound import BoundingRect, Point
from visioncortex.color import Color, ColorName


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _to_u8(value: float) -> int:
    """Truncate a float into 0..255, saturating at both ends."""
    if math.isnan(value):
        return 0
    return max(0, min(255, int(value)))


class BinaryImage:
    """Image with one boolean per pixel, stored row by row."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self.pixels: list[bool] = [False] * (width * height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryImage):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.pixels == other.pixels
        )

    def __repr__(self) -> str:
        return f"BinaryImage(width={self.width}, height={self.height})"

    def _index(self, x: int, y: int) -> int:
        index = y * self.width + x
        if x < 0 or y < 0 or index >= len(self.pixels):
            raise IndexError(f"pixel ({x}, {y}) is outside the image")
        return index

    def get_pixel(self, x: int, y: int) -> bool:
        return self.pixels[self._index(x, y)]

    def get_pixel_at(self, p: Point) -> bool:
        return self.get_pixel(int(p.x), int(p.y))

    def get_pixel_safe(self, x: int, y: int) -> bool:
        """Pixel value, or False outside the image."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.get_pixel(x, y)
        return False

    def get_pixel_at_safe(self, p: Point) -> bool:
        return self.get_pixel_safe(int(p.x), int(p.y))

    def set_pixel(self, x: int, y: int, v: bool) -> None:
        self.pixels[self._index(x, y)] = bool(v)

    def set_pixel_at(self, p: Point, v: bool) -> None:
        self.set_pixel(int(p.x), int(p.y), v)

    def set_pixel_index(self, i: int, v: bool) -> None:
        if not 0 <= i < len(self.pixels):
            raise IndexError(f"pixel index {i} is outside the image")
        self.pixels[i] = bool(v)

    def set_pixel_safe(self, x: int, y: int, v: bool) -> bool:
        """Set the pixel if it lies inside the image; return whether it did."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.set_pixel(x, y, v)
            return True
        return False

    def set_pixel_at_safe(self, p: Point, v: bool) -> bool:
        return self.set_pixel_safe(int(p.x), int(p.y), v)

    def _positions(self) -> Iterator[tuple[int, int]]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def bounding_rect(self) -> BoundingRect:
        """The smallest rect enclosing every set pixel."""
        rect = BoundingRect()
        for x, y in self._positions():
            if self.get_pixel(x, y):
                rect.add_x_y(x, y)
        return rect

    def area(self) -> int:
        """Number of set pixels."""
        return sum(self.pixels)

    def crop(self) -> BinaryImage:
        """Crop the image to fit its content."""
        return self.crop_with_rect(self.bounding_rect())

    def crop_with_rect(self, rect: BoundingRect) -> BinaryImage:
        """Copy the area ``rect`` out of the image."""
        image = BinaryImage(rect.width(), rect.height())
        for y in range(rect.top, rect.bottom):
            for x in range(rect.left, rect.right):
                if self.get_pixel(x, y):
                    image.set_pixel(x - rect.left, y - rect.top, True)
        return image

    def uncrop(self, new_width: int, new_height: int) -> BinaryImage:
        """Enlarge the canvas, keeping the content centred."""
        if new_width < self.width or new_height < self.height:
            raise ValueError("new size must not be smaller than the image")
        xx = (new_width - self.width) >> 1
        yy = (new_height - self.height) >> 1
        image = BinaryImage(new_width, new_height)
        for x, y in self._positions():
            if self.get_pixel(x, y):
                image.set_pixel(x + xx, y + yy, True)
        return image

    @classmethod
    def from_string(cls, string: str) -> BinaryImage:
        """Parse rows of '*' (set) and other characters (clear)."""
        lines = string.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        lines = [line[:-1] if line.endswith("\r") else line for line in lines]
        width = len(lines[0].encode()) if lines else 0
        image = cls(width, len(lines))
        for y, line in enumerate(lines):
            for x, c in enumerate(line):
                image.set_pixel(x, y, c == "*")
        return image

    def rotate(self, angle: float) -> BinaryImage:
        """Rotate the image by ``angle`` radians about its centre, growing the canvas."""
        cos_abs = abs(math.cos(angle))
        sin_abs = abs(math.sin(angle))
        rotated_width = max(0, _round_half_away(self.width * cos_abs + self.height * sin_abs))
        rotated_height = max(0, _round_half_away(self.width * sin_abs + self.height * cos_abs))
        rotated = BinaryImage(rotated_width, rotated_height)
        origin_x = rotated_width / 2.0
        origin_y = rotated_height / 2.0
        offset_x = (rotated_width - self.width) / 2.0
        offset_y = (rotated_height - self.height) / 2.0
        cos_a = math.cos(-angle)
        sin_a = math.sin(-angle)
        for x, y in rotated._positions():
            dx = x - origin_x
            dy = y - origin_y
            src_x = cos_a * dx - sin_a * dy + origin_x - offset_x
            src_y = sin_a * dx + cos_a * dy + origin_y - offset_y
            rotated.set_pixel(
                x, y,
                self.get_pixel_safe(_round_half_away(src_x), _round_half_away(src_y)),
            )
        return rotated

    def paste_from(self, src: BinaryImage, offset: Point) -> None:
        """Set the pixels that are set in ``src``, shifted by ``offset``."""
        for x, y in src._positions():
            if src.get_pixel(x, y):
                self.set_pixel(x + int(offset.x), y + int(offset.y), True)

    def to_color_image(self) -> ColorImage:
        """Render set pixels black and clear pixels white."""
        image = ColorImage(self.width, self.height)
        black = Color.from_name(ColorName.BLACK)
        white = Color.from_name(ColorName.WHITE)
        for x, y in self._positions():
            image.set_pixel(x, y, black if self.get_pixel(x, y) else white)
        return image

    def __str__(self) -> str:
        return "".join(
            "".join("*" if self.get_pixel(x, y) else "-" for x in range(self.width)) + "\n"
            for y in range(self.height)
        )


class ColorImage:
    """Image with four bytes (RGBA) per pixel, stored row by row."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height * 4)

    def __repr__(self) -> str:
        return f"ColorImage(width={self.width}, height={self.height})"

    def __iter__(self) -> Iterator[Color]:
        for index in range(self.width * self.height):
            yield self.get_pixel_at(index)

    def get_pixel(self, x: int, y: int) -> Color:
        return self.get_pixel_at(y * self.width + x)

    def get_pixel_safe(self, x: int, y: int) -> Color | None:
        """Pixel colour, or None outside the image."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.get_pixel(x, y)
        return None

    def get_pixel_at_point_safe(self, p: Point) -> Color | None:
        return self.get_pixel_safe(int(p.x), int(p.y))

    def _offset(self, index: int) -> int:
        offset = index * 4
        if index < 0 or offset + 4 > len(self.pixels):
            raise IndexError(f"pixel index {index} is outside the image")
        return offset

    def get_pixel_at(self, index: int) -> Color:
        offset = self._offset(index)
        r, g, b, a = self.pixels[offset:offset + 4]
        return Color(r, g, b, a)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        self.set_pixel_at(y * self.width + x, color)

    def set_pixel_at(self, index: int, color: Color) -> None:
        offset = self._offset(index)
        self.pixels[offset:offset + 4] = bytes((color.r, color.g, color.b, color.a))

    def to_binary_image(self, predicate: Callable[[Color], bool]) -> BinaryImage:
        """Set each pixel for which ``predicate`` holds."""
        image = BinaryImage(self.width, self.height)
        for y in range(self.height):
            for x in range(self.width):
                image.set_pixel(x, y, predicate(self.get_pixel(x, y)))
        return image

    def sample_pixel_at(self, p: Point) -> Color:
        return bilinear_interpolate(self, p)

    def sample_pixel_at_safe(self, p: Point) -> Color | None:
        return bilinear_interpolate_safe(self, p)


def bilinear_interpolate_safe(im: ColorImage, p: Point) -> Color | None:
    """Interpolated colour at ``p``, or None if ``p`` is outside the pixel grid."""
    if (
        math.copysign(1.0, p.x) < 0
        or math.copysign(1.0, p.y) < 0
        or p.x > im.width - 1
        or p.y > im.height - 1
    ):
        return None
    return bilinear_interpolate(im, p)


def bilinear_interpolate(im: ColorImage, p: Point) -> Color:
    """Bilinearly interpolate the four pixels around ``p``."""
    x0, x1 = math.floor(p.x), math.ceil(p.x)
    y0, y1 = math.floor(p.y), math.ceil(p.y)
    c00 = im.get_pixel(x0, y0)
    c01 = im.get_pixel(x0, y1)
    c10 = im.get_pixel(x1, y0)
    c11 = im.get_pixel(x1, y1)
    fx = p.x - math.floor(p.x)
    fy = p.y - math.floor(p.y)

    def interpolate(channel: int) -> int:
        return _to_u8(
            c00.channel(channel) * (1.0 - fx) * (1.0 - fy)
            + c10.channel(channel) * fx * (1.0 - fy)
            + c01.channel(channel) * (1.0 - fx) * fy
            + c11.channel(channel) * fx * fy
        )

    return Color(interpolate(0), interpolate(1), interpolate(2), interpolate(3))