"""Results of colour clustering and a view over them."""

from __future__ import annotations

from collections.abc import Iterator, MutableSequence, Sequence
from dataclasses import dataclass, field

from visioncortex.bound import Point
from visioncortex.color import Color
from visioncortex.color_clusters.cluster import Cluster
from visioncortex.image import ColorImage


@dataclass
class ClustersView:
    """Read access to clustered pixels; outputs are clusters with pixels."""

    width: int
    height: int
    pixels: Sequence[int]
    clusters: Sequence[Cluster]
    cluster_indices: Sequence[int]
    clusters_output: Sequence[int]

    def __iter__(self) -> Iterator[Cluster]:
        for index in self.clusters_output:
            yield self.clusters[index]

    def get_cluster(self, index: int) -> Cluster:
        return self.clusters[index]

    def get_cluster_at_point(self, point: Point) -> int:
        """Index of the cluster holding the pixel at ``point``."""
        return self.get_cluster_at(int(point.y) * self.width + int(point.x))

    def get_cluster_at(self, index: int) -> int:
        """Index of the cluster holding the pixel with image index ``index``."""
        return self.cluster_indices[index]

    def get_pixel(self, x: int, y: int) -> Color | None:
        """Colour of the pixel at (x, y), or None outside the image."""
        if x < 0 or y < 0 or x >= self.width:
            return None
        return self.get_pixel_at_index(y * self.width + x)

    def get_pixel_at_index(self, index: int) -> Color | None:
        offset = index * 4
        if offset + 4 > len(self.pixels):
            return None
        r, g, b, a = self.pixels[offset:offset + 4]
        return Color(r, g, b, a)

    def to_color_image(self) -> ColorImage:
        """Paint every output cluster with its residue colour, last output first."""
        image = ColorImage(self.width, self.height)
        for index in reversed(self.clusters_output):
            self.clusters[index].render_to_color_image(self, image)
        return image


@dataclass
class Clusters:
    """Clusters of a colour image together with the image itself."""

    width: int
    height: int
    pixels: bytearray
    clusters: MutableSequence[Cluster] = field(default_factory=list)
    cluster_indices: MutableSequence[int] = field(default_factory=list)
    clusters_output: MutableSequence[int] = field(default_factory=list)

    def output_len(self) -> int:
        """Number of output clusters."""
        return len(self.clusters_output)

    def view(self) -> ClustersView:
        return ClustersView(
            width=self.width,
            height=self.height,
            pixels=self.pixels,
            clusters=self.clusters,
            cluster_indices=self.cluster_indices,
            clusters_output=self.clusters_output,
        )

    def take_image(self) -> ColorImage:
        """The clustered image as a ``ColorImage``."""
        image = ColorImage(0, 0)
        image.width = self.width
        image.height = self.height
        image.pixels = bytearray(self.pixels)
        return image