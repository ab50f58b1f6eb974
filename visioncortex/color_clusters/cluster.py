"""A cluster of pixels grouped from a colour image."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from visioncortex.bound import BoundingRect
from visioncortex.color import Color, ColorSum
from visioncortex.image import BinaryImage, ColorImage

if TYPE_CHECKING:
    from collections.abc import Sequence

# Cluster index 0 is reserved and never counts as a neighbour.
_ZERO = 0


class _PixelGrid(Protocol):
    width: int
    height: int
    cluster_indices: Sequence[int]


@dataclass
class Cluster:
    """Pixels of one colour region, addressed by their index in the image."""

    indices: list[int] = field(default_factory=list)
    holes: list[int] = field(default_factory=list)
    num_holes: int = 0
    depth: int = 0
    sum: ColorSum = field(default_factory=ColorSum)
    residue_sum: ColorSum = field(default_factory=ColorSum)
    rect: BoundingRect = field(default_factory=BoundingRect)
    merged_into: int = 0

    def add(self, i: int, color: Color, x: int, y: int) -> None:
        """Add the pixel with index ``i`` at (x, y) of colour ``color``."""
        self.indices.append(i)
        self.sum.add(color)
        self.rect.add_x_y(x, y)

    def area(self) -> int:
        return len(self.indices)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def color(self) -> Color:
        """Average colour of the pixels added to the cluster."""
        return self.sum.average()

    def residue_color(self) -> Color:
        """Average colour of the pixels left after deeper clusters were split off."""
        return self.residue_sum.average()

    def to_image(self, parent: _PixelGrid) -> BinaryImage:
        """Render the cluster, holes cleared, into an image of its bounding rect."""
        return self.to_image_with_hole(parent.width, True)

    def to_image_with_hole(self, parent_width: int, hole: bool) -> BinaryImage:
        """Render the cluster into an image of its bounding rect.

        With ``hole`` set, the pixels of the cluster's holes are cleared.
        """
        image = BinaryImage(self.rect.width(), self.rect.height())
        for i in self.indices:
            image.set_pixel(
                i % parent_width - self.rect.left, i // parent_width - self.rect.top, True
            )
        if hole:
            for i in self.holes:
                image.set_pixel(
                    i % parent_width - self.rect.left, i // parent_width - self.rect.top, False
                )
        return image

    def render_to_binary_image(self, parent: _PixelGrid, image: BinaryImage) -> None:
        """Set the cluster's pixels in a full-size ``image``."""
        for i in self.indices:
            image.set_pixel(i % parent.width, i // parent.width, True)

    def render_to_color_image(self, parent: _PixelGrid, image: ColorImage) -> None:
        """Paint the cluster's pixels with its residue colour."""
        self.render_to_color_image_with_color(parent, image, self.residue_color())

    def render_to_color_image_with_color(
        self, parent: _PixelGrid, image: ColorImage, color: Color
    ) -> None:
        """Paint the cluster's pixels with ``color``."""
        for i in self.indices:
            image.set_pixel(i % parent.width, i // parent.width, color)

    def neighbours(self, parent: _PixelGrid) -> list[int]:
        """Sorted indices of the clusters that touch this one on four sides."""
        if not self.indices:
            raise ValueError("an empty cluster has no neighbours")
        width, height = parent.width, parent.height
        cells = parent.cluster_indices
        myself = cells[self.indices[0]]
        found: set[int] = set()
        for i in self.indices:
            x, y = i % width, i // width
            candidates = (
                cells[i - width] if y > 0 else _ZERO,
                cells[i + width] if y < height - 1 else _ZERO,
                cells[i - 1] if x > 0 else _ZERO,
                cells[i + 1] if x < width - 1 else _ZERO,
            )
            found.update(c for c in candidates if c != _ZERO and c != myself)
        return sorted(found)