"""Perspective transforms between two quadrilaterals."""

from __future__ import annotations

import math
from collections.abc import Sequence

from visioncortex.bound import Point
from visioncortex.matrix import Matrix, SingularMatrixError

_FALLBACK = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0)


def _round_10(num: float) -> float:
    scaled = num * 10000000000.0
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / 10000000000.0


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        sign = "-" if exponent.startswith("-") else ""
        text = f"{mantissa}e{sign}{int(exponent.lstrip('+-'))}"
    return text


def _coefficients(src: Sequence[float], dst: Sequence[float]) -> list[float]:
    rows = []
    for k in range(4):
        sx, sy = src[2 * k], src[2 * k + 1]
        dx, dy = dst[2 * k], dst[2 * k + 1]
        rows.append([sx, sy, 1.0, 0.0, 0.0, 0.0, -dx * sx, -dx * sy])
        rows.append([0.0, 0.0, 0.0, sx, sy, 1.0, -dy * sx, -dy * sy])
    mat_a = Matrix(rows)
    mat_at = mat_a.transpose()
    try:
        mat_c = mat_at.dot(mat_a).inv()
    except SingularMatrixError:
        return list(_FALLBACK)
    return [_round_10(v) for v in mat_c.dot(mat_at).dot_mv(list(dst))]


class PerspectiveTransform:
    """Maps one quadrilateral onto another, given their four corners each.

    Without corners, every point maps to the origin.
    """

    def __init__(
        self,
        src_pts: Sequence[float] | None = None,
        dst_pts: Sequence[float] | None = None,
    ) -> None:
        if src_pts is None and dst_pts is None:
            self.coeffs = [0.0] * 8
            self.coeffs_inv = [0.0] * 8
            return
        if src_pts is None or dst_pts is None or len(src_pts) != 8 or len(dst_pts) != 8:
            raise ValueError("source and destination need eight coordinates each")
        src = [float(v) for v in src_pts]
        dst = [float(v) for v in dst_pts]
        self.coeffs = _coefficients(src, dst)
        self.coeffs_inv = _coefficients(dst, src)

    @classmethod
    def from_points(
        cls, src_pts: Sequence[Point], dst_pts: Sequence[Point]
    ) -> PerspectiveTransform:
        """Build a transform from four source and four destination points."""
        if len(src_pts) != 4 or len(dst_pts) != 4:
            raise ValueError("source and destination need four points each")
        return cls(
            [c for p in src_pts for c in (p.x, p.y)],
            [c for p in dst_pts for c in (p.x, p.y)],
        )

    @staticmethod
    def _apply(c: Sequence[float], point: Point) -> Point:
        x, y = point.x, point.y
        denominator = c[6] * x + c[7] * y + 1.0
        return Point(
            (c[0] * x + c[1] * y + c[2]) / denominator,
            (c[3] * x + c[4] * y + c[5]) / denominator,
        )

    def transform(self, point: Point) -> Point:
        return self._apply(self.coeffs, point)

    def transform_inverse(self, point: Point) -> Point:
        return self._apply(self.coeffs_inv, point)

    def format_coeffs(self) -> str:
        """The forward coefficients as a bracketed list."""
        return "[" + ", ".join(_format_float(v) for v in self.coeffs) + "]"