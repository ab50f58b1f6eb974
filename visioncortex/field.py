"""A flat list addressed as a two-dimensional field."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class Field(Generic[T]):
    """A ``width`` by ``height`` grid of values stored row by row."""

    def __init__(self, width: int = 0, height: int = 0, value: T | None = None) -> None:
        self.width = width
        self.height = height
        self._data: list[T] = [value] * (width * height)

    @classmethod
    def with_vec(cls, width: int, height: int, data: list[T]) -> Field[T]:
        """Build a field over ``data``; its length must be ``width * height``."""
        if len(data) != width * height:
            raise ValueError(
                f"data has {len(data)} elements, expected {width * height}"
            )
        field = cls(0, 0)
        field.width = width
        field.height = height
        field._data = list(data)
        return field

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self._data)

    def peek(self, index: int) -> T | None:
        """Return the element at ``index``, or None if out of range."""
        return self._data[index] if self._valid(index) else None

    def set(self, index: int, value: T) -> None:
        """Store ``value`` at ``index``; out-of-range indices are ignored."""
        if self._valid(index):
            self._data[index] = value

    def replace(self, index: int, value: T) -> T | None:
        """Store ``value`` at ``index`` and return the old element, or None if out of range."""
        if not self._valid(index):
            return None
        old = self._data[index]
        self._data[index] = value
        return old

    def locate(self, index: int) -> tuple[int, int]:
        """Return the (x, y) position of ``index``."""
        return index % self.width, index // self.width

    def index_at(self, x: int, y: int) -> int:
        """Return the index of position (x, y)."""
        return self.width * y + x

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)