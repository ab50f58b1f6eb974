"""Points and bounding rectangles, and helpers over collections of bounded objects."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from visioncortex.disjoint_sets import group_by_cached_key

_F64_MAX = sys.float_info.max
_F64_MIN = -sys.float_info.max
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1

_FOUR_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _saturate_i32(value: float) -> int:
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


@dataclass(frozen=True)
class Point:
    """A 2D point or vector with integer or float coordinates."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def translate(self, other: Point) -> Point:
        """Return this point moved by ``other``."""
        return self + other

    def _rotate_90deg(self, origin: Point, clockwise: bool) -> Point:
        # Screen coordinates: y grows downwards.
        dx = self.x - origin.x
        dy = self.y - origin.y
        if clockwise:
            return Point(origin.x - dy, origin.y + dx)
        return Point(origin.x + dy, origin.y - dx)


class Bounded(Protocol):
    def bound(self) -> BoundingRect: ...


B = TypeVar("B", bound=Bounded)


@dataclass
class BoundingRect:
    """Integer rectangle with a top-left origin; right and bottom are exclusive."""

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0

    @classmethod
    def from_x_y_w_h(cls, x: int, y: int, w: int, h: int) -> BoundingRect:
        return cls(x, y, x + w, y + h)

    def width(self) -> int:
        return self.right - self.left

    def height(self) -> int:
        return self.bottom - self.top

    def is_empty(self) -> bool:
        return self.width() == 0 and self.height() == 0

    def center(self) -> Point:
        return Point((self.left + self.right) >> 1, (self.top + self.bottom) >> 1)

    def top_left(self) -> Point:
        return Point(self.left, self.top)

    def top_right(self) -> Point:
        return Point(self.right, self.top)

    def bottom_left(self) -> Point:
        return Point(self.left, self.bottom)

    def bottom_right(self) -> Point:
        return Point(self.right, self.bottom)

    def sq_dist(self, other: BoundingRect) -> int:
        """Squared distance between the centres of two rects."""
        diff = self.center() - other.center()
        return diff.dot(diff)

    def aspect_ratio(self) -> float:
        longer = max(self.width(), self.height())
        shorter = min(self.width(), self.height())
        if shorter == 0:
            return math.nan if longer == 0 else math.copysign(math.inf, longer)
        return longer / shorter

    def aspect_ratio_doubled(self) -> int:
        longer = max(self.width(), self.height())
        shorter = min(self.width(), self.height())
        return _trunc_div(2 * longer, shorter)

    def add_x_y(self, x: int, y: int) -> None:
        """Grow the rect to include the pixel at (x, y)."""
        if self.is_empty():
            self.left, self.right = x, x + 1
            self.top, self.bottom = y, y + 1
            return
        if x < self.left:
            self.left = x
        elif x + 1 > self.right:
            self.right = x + 1
        if y < self.top:
            self.top = y
        elif y + 1 > self.bottom:
            self.bottom = y + 1

    def merge(self, other: BoundingRect) -> None:
        if other.is_empty():
            return
        if self.is_empty():
            self.left, self.top, self.right, self.bottom = (
                other.left, other.top, other.right, other.bottom,
            )
            return
        self.left = min(self.left, other.left)
        self.right = max(self.right, other.right)
        self.top = min(self.top, other.top)
        self.bottom = max(self.bottom, other.bottom)

    def clear(self) -> None:
        self.left = self.top = self.right = self.bottom = 0

    def hit(self, other: BoundingRect) -> bool:
        return not (
            other.left > self.right
            or other.right < self.left
            or other.top > self.bottom
            or other.bottom < self.top
        )

    def clip(self, other: BoundingRect) -> None:
        self.left = max(self.left, other.left)
        self.top = max(self.top, other.top)
        self.right = min(self.right, other.right)
        self.bottom = min(self.bottom, other.bottom)

    def squared(self) -> BoundingRect:
        """Return the smallest square centred on this rect that contains it."""
        size = max(self.width(), self.height())
        return BoundingRect.from_x_y_w_h(
            self.left - ((size - self.width()) >> 1),
            self.top - ((size - self.height()) >> 1),
            size,
            size,
        )

    def translate(self, p: Point) -> None:
        self.left += p.x
        self.top += p.y
        self.right += p.x
        self.bottom += p.y

    def have_point_on_boundary(self, p: Point, tolerance: int = 0) -> bool:
        """True if ``p`` lies on a boundary extended by ``tolerance`` at both ends."""
        t = tolerance
        on_vertical = (p.x == self.left or p.x == self.right) and (
            self.top - t <= p.y <= self.bottom + t
        )
        on_horizontal = (p.y == self.top or p.y == self.bottom) and (
            self.left - t <= p.x <= self.right + t
        )
        return on_vertical or on_horizontal

    def have_point_inside(self, p: Point) -> bool:
        return self.left < p.x < self.right and self.top < p.y < self.bottom

    def have_point_on_boundary_or_inside(self, p: Point, boundary_tolerance: int = 0) -> bool:
        return self.have_point_on_boundary(p, boundary_tolerance) or self.have_point_inside(p)

    def _require_on_boundary(self, p: Point) -> None:
        if not self.have_point_on_boundary(p, 0):
            raise ValueError(f"{p} is not on the boundary of {self}")

    def get_closest_point_inside(self, p: Point) -> Point:
        """Closest point inside the rect to boundary point ``p``."""
        self._require_on_boundary(p)
        if self.width() * self.height() <= 1:
            raise ValueError("rect area must be larger than 1")
        dx = 1 if p.x == self.left else -1 if p.x == self.right else 0
        dy = 1 if p.y == self.top else -1 if p.y == self.bottom else 0
        return p + Point(dx, dy)

    def get_closest_point_outside(self, p: Point) -> Point:
        """Closest point outside the rect to boundary point ``p``; diagonal at corners."""
        self._require_on_boundary(p)
        dx = -1 if p.x == self.left else 1 if p.x == self.right else 0
        dy = -1 if p.y == self.top else 1 if p.y == self.bottom else 0
        return p + Point(dx, dy)

    def get_boundary_points_from(self, p: Point, clockwise: bool) -> list[Point]:
        """List every boundary point once, starting at ``p`` and walking around."""
        self._require_on_boundary(p)
        if p.x == self.left:
            offset = Point(0, -1)
        elif p.y == self.top:
            offset = Point(1, 0)
        elif p.x == self.right:
            offset = Point(0, 1)
        else:
            offset = Point(-1, 0)
        if not clockwise:
            offset = -offset
        current = p + offset
        if not self.have_point_on_boundary(current, 0):
            current = current._rotate_90deg(p, clockwise)

        points = [p]
        previous = p
        while current != p:
            points.append(current)
            step_from = current
            for dx, dy in _FOUR_NEIGHBOURS:
                candidate = current + Point(dx, dy)
                if candidate != previous and self.have_point_on_boundary(candidate, 0):
                    current = candidate
                    break
            if current == points[-1]:
                raise RuntimeError("boundary walk is stuck")
            previous = step_from
        return points

    def bound(self) -> BoundingRect:
        return BoundingRect(self.left, self.top, self.right, self.bottom)

    def overlaps(self, other: Bounded) -> bool:
        """True if the bounding rects of self and ``other`` touch or intersect."""
        return self.bound().hit(other.bound())


@dataclass
class BoundingRectF64:
    """Float rectangle given by its corners; the default is an empty rect."""

    left_top: Point = field(default_factory=lambda: Point(_F64_MAX, _F64_MAX))
    right_bottom: Point = field(default_factory=lambda: Point(_F64_MIN, _F64_MIN))

    @classmethod
    def from_x_y_w_h(cls, x: float, y: float, w: float, h: float) -> BoundingRectF64:
        return cls(Point(x, y), Point(x + w, y + h))

    def is_empty(self) -> bool:
        return (
            self.left_top.x == _F64_MAX
            and self.left_top.y == _F64_MAX
            and self.right_bottom.x == _F64_MIN
            and self.right_bottom.y == _F64_MIN
        )

    def right_top(self) -> Point:
        return Point(self.right_bottom.x, self.left_top.y)

    def left_bottom(self) -> Point:
        return Point(self.left_top.x, self.right_bottom.y)

    def width(self) -> float:
        return self.right_bottom.x - self.left_top.x

    def height(self) -> float:
        return self.right_bottom.y - self.left_top.y

    def merge(self, other: BoundingRectF64) -> None:
        if other.is_empty():
            return
        if self.is_empty():
            self.left_top = other.left_top
            self.right_bottom = other.right_bottom
            return
        self.left_top = Point(
            min(self.left_top.x, other.left_top.x), min(self.left_top.y, other.left_top.y)
        )
        self.right_bottom = Point(
            max(self.right_bottom.x, other.right_bottom.x),
            max(self.right_bottom.y, other.right_bottom.y),
        )

    def add_point(self, p: Point) -> None:
        self.left_top = Point(min(self.left_top.x, p.x), min(self.left_top.y, p.y))
        self.right_bottom = Point(max(self.right_bottom.x, p.x), max(self.right_bottom.y, p.y))

    def to_rect(self) -> BoundingRect:
        """The smallest integer rect enclosing this one."""
        return BoundingRect(
            _saturate_i32(math.floor(self.left_top.x)),
            _saturate_i32(math.floor(self.left_top.y)),
            _saturate_i32(math.ceil(self.right_bottom.x)),
            _saturate_i32(math.ceil(self.right_bottom.y)),
        )

    def bound(self) -> BoundingRect:
        return self.to_rect()

    def overlaps(self, other: Bounded) -> bool:
        """True if the bounding rects of self and ``other`` touch or intersect."""
        return self.bound().hit(other.bound())


@dataclass(frozen=True)
class BoundStat:
    """Size statistics over a collection of bounded objects."""

    average_area: int
    average_width: int
    average_height: int
    min_width: int
    min_height: int

    @classmethod
    def calculate(cls, items: Sequence[Bounded]) -> BoundStat:
        """Compute the statistics; raises ZeroDivisionError for no items."""
        rects = [item.bound() for item in items]
        n = len(rects)
        if n == 0:
            raise ZeroDivisionError("no items to compute statistics over")
        sum_area = sum(r.width() * r.height() for r in rects)
        sum_width = sum(r.width() for r in rects)
        sum_height = sum(r.height() for r in rects)
        return cls(
            average_area=_trunc_div(sum_area, n),
            average_width=_trunc_div(sum_width, n),
            average_height=_trunc_div(sum_height, n),
            min_width=min(r.width() for r in rects),
            min_height=min(r.height() for r in rects),
        )


def average_width(items: Sequence[Bounded]) -> int:
    if not items:
        raise ZeroDivisionError("no items to average")
    return _trunc_div(sum(item.bound().width() for item in items), len(items))


def average_height(items: Sequence[Bounded]) -> int:
    if not items:
        raise ZeroDivisionError("no items to average")
    return _trunc_div(sum(item.bound().height() for item in items), len(items))


def enclosing_bound(items: Sequence[Bounded]) -> BoundingRect:
    """The smallest rect enclosing the bounds of all items."""
    enclosing = BoundingRect()
    for item in items:
        enclosing.merge(item.bound())
    return enclosing


def expand(rect: BoundingRect, expand_x: int, expand_y: int) -> BoundingRect:
    """Return ``rect`` grown by ``expand_x`` and ``expand_y`` on each side."""
    return BoundingRect.from_x_y_w_h(
        rect.left - expand_x,
        rect.top - expand_y,
        rect.width() + 2 * expand_x,
        rect.height() + 2 * expand_y,
    )


def merge_expand(items: Sequence[B], expand_x: int, expand_y: int) -> list[list[B]]:
    """Group items whose expanded bounds overlap, transitively."""
    return group_by_cached_key(
        items,
        lambda item: expand(item.bound(), expand_x, expand_y),
        lambda a, b: a.overlaps(b),
    )