"""Small dense matrices of floats."""

from __future__ import annotations

from collections.abc import Sequence


class SingularMatrixError(ValueError):
    """Raised when a matrix has no inverse."""


def dot_vv(x: Sequence[float], y: Sequence[float]) -> float:
    """Dot product of two equal-length, non-empty vectors."""
    if len(x) != len(y):
        raise ValueError("vectors differ in length")
    if not x:
        raise ValueError("vectors must not be empty")
    # Terms are summed from the end in pairs; the grouping fixes the rounding.
    total = x[-1] * y[-1]
    i = len(x) - 2
    while i >= 1:
        total += x[i] * y[i] + x[i - 1] * y[i - 1]
        i -= 2
    if i == 0:
        total += x[0] * y[0]
    return total


class Matrix:
    """A rectangular matrix held as a list of rows."""

    def __init__(self, rows: Sequence[Sequence[float]]) -> None:
        self.rows = [[float(v) for v in row] for row in rows]
        if self.rows and any(len(row) != len(self.rows[0]) for row in self.rows):
            raise ValueError("all rows must have the same length")

    @classmethod
    def zeros(cls, rows: int, cols: int) -> Matrix:
        return cls([[0.0] * cols for _ in range(rows)])

    @classmethod
    def identity(cls, n: int) -> Matrix:
        return cls([[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)])

    def dim(self) -> tuple[int, int]:
        """(number of rows, number of columns)."""
        return len(self.rows), len(self.rows[0]) if self.rows else 0

    def transpose(self) -> Matrix:
        return Matrix([list(column) for column in zip(*self.rows)])

    def inv(self) -> Matrix:
        """Inverse by Gauss-Jordan elimination with partial pivoting."""
        n, cols = self.dim()
        if n != cols:
            raise ValueError("only square matrices can be inverted")
        mx = [list(row) for row in self.rows]
        ii = Matrix.identity(n).rows
        for j in range(n):
            pivot = max(range(j, n), key=lambda i: (abs(mx[i][j]), -i))
            mx[pivot], mx[j] = mx[j], mx[pivot]
            ii[pivot], ii[j] = ii[j], ii[pivot]
            x = mx[j][j]
            if x == 0.0:
                raise SingularMatrixError("matrix is singular")
            mx[j][j:] = [v / x for v in mx[j][j:]]
            ii[j] = [v / x for v in ii[j]]
            for i in range(n):
                if i == j:
                    continue
                x = mx[i][j]
                for k in range(j + 1, n):
                    mx[i][k] -= mx[j][k] * x
                ii[i] = [a - b * x for a, b in zip(ii[i], ii[j])]
        return Matrix(ii)

    def dot(self, other: Matrix) -> Matrix:
        """Matrix product ``self @ other``."""
        if self.dim()[1] != other.dim()[0]:
            raise ValueError("matrix dimensions do not match")
        columns = list(zip(*other.rows))
        return Matrix([[dot_vv(row, column) for column in columns] for row in self.rows])

    def __matmul__(self, other: Matrix) -> Matrix:
        return self.dot(other)

    def dot_mv(self, vector: Sequence[float]) -> list[float]:
        """Product of this matrix and a column vector."""
        return [dot_vv(row, vector) for row in self.rows]

    def approx_eq(self, other: Matrix, epsilon: float) -> bool:
        """True if every element differs by at most ``epsilon``."""
        if self.dim() != other.dim():
            return False
        return all(
            abs(a - b) <= epsilon
            for row_a, row_b in zip(self.rows, other.rows)
            for a, b in zip(row_a, row_b)
        )

    def scale(self, s: float) -> None:
        """Multiply every element by ``s`` in place."""
        self.rows = [[v * s for v in row] for row in self.rows]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.rows == other.rows

    def __repr__(self) -> str:
        lines = ["Matrix(["]
        lines.extend(
            "    [" + ", ".join(repr(v) for v in row) + "]," for row in self.rows
        )
        lines.append("])")
        return "\n".join(lines)