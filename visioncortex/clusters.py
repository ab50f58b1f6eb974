"""Connected-component clustering of binary images."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from visioncortex.bound import BoundingRect, Point
from visioncortex.image import BinaryImage

_MAX_CLUSTERS = 2**16 - 1
_BREAK_AT_LEAST = 5


@dataclass
class Cluster:
    """A group of pixels in absolute coordinates, with their bounding rect."""

    points: list[Point] = field(default_factory=list)
    rect: BoundingRect = field(default_factory=BoundingRect)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def add(self, pos: Point) -> None:
        self.points.append(pos)
        self.rect.add_x_y(int(pos.x), int(pos.y))

    def size(self) -> int:
        return len(self.points)

    def to_binary_image(self) -> BinaryImage:
        """Render the cluster into an image the size of its bounding rect."""
        image = BinaryImage(self.rect.width(), self.rect.height())
        for p in self.points:
            image.set_pixel(int(p.x) - self.rect.left, int(p.y) - self.rect.top, True)
        return image

    def offset(self, o: Point) -> None:
        """Move every point and the rect by ``o``."""
        self.points = [p + o for p in self.points]
        self.rect.translate(o)

    @classmethod
    def break_cluster(cls, cluster: Cluster) -> Clusters:
        """Split a cluster at thin diagonal bridges into sizeable parts."""
        output = Clusters()
        _break_cluster_recursive(cluster, output)
        return output


@dataclass
class Clusters:
    """A collection of clusters and the rect enclosing them."""

    clusters: list[Cluster] = field(default_factory=list)
    rect: BoundingRect = field(default_factory=BoundingRect)

    def __iter__(self) -> Iterator[Cluster]:
        return iter(self.clusters)

    def __len__(self) -> int:
        return len(self.clusters)

    def __getitem__(self, index: int) -> Cluster:
        return self.clusters[index]

    def add_cluster(self, cluster: Cluster) -> None:
        self.rect.merge(cluster.rect)
        self.clusters.append(cluster)


def _find_bridge(image: BinaryImage) -> bool:
    """Clear one pixel of the first breakable bridge; return whether one was found."""
    w, h = 2, 3
    if image.width < w or image.height < h:
        return False
    px = image.get_pixel
    for y in range(image.height - h + 1):
        for x in range(image.width - w + 1):
            if (
                px(x, y) != px(x + 1, y)
                and px(x, y + 1)
                and px(x + 1, y + 1)
                and px(x, y + 2) != px(x + 1, y + 2)
                and px(x, y) == px(x + 1, y + 2)
            ):
                if x < image.width - 2 and px(x + 2, y + 1):
                    image.set_pixel(x + 1, y + 1, False)
                    return True
                if x > 0 and px(x - 1, y + 1):
                    image.set_pixel(x, y + 1, False)
                    return True
    return False


def _break_cluster_recursive(cluster: Cluster, output: Clusters) -> None:
    image = cluster.to_binary_image()
    broke = _find_bridge(image)
    parts = to_clusters(image, False)
    if broke and min(part.size() for part in parts) < _BREAK_AT_LEAST:
        broke = False
    if not broke:
        output.add_cluster(cluster)
        return
    origin = Point(cluster.rect.left, cluster.rect.top)
    for part in parts:
        part.offset(origin)
        _break_cluster_recursive(part, output)


def _combine(
    clusters: list[Cluster], cluster_map: list[int], width: int, source: int, target: int
) -> None:
    for p in clusters[source].points:
        cluster_map[int(p.y) * width + int(p.x)] = target
    clusters[target].points.extend(clusters[source].points)
    clusters[source].points = []
    clusters[target].rect.merge(clusters[source].rect)


def to_clusters(image: BinaryImage, diagonal: bool = False) -> Clusters:
    """Find the connected groups of set pixels, optionally joining diagonals."""
    width, height = image.width, image.height
    clusters: list[Cluster] = []
    rect = BoundingRect()
    cluster_map = [0] * (width * height)
    next_index = 0

    for y in range(height):
        for x in range(width):
            pos = Point(x, y)
            v = image.get_pixel_safe(x, y)
            v_up = image.get_pixel_safe(x, y - 1)
            v_left = image.get_pixel_safe(x - 1, y)
            v_up_left = image.get_pixel_safe(x - 1, y - 1)
            cluster_up = cluster_map[(y - 1) * width + x] if y > 0 else 0
            cluster_left = cluster_map[y * width + x - 1] if x > 0 else 0
            cluster_up_left = (
                cluster_map[(y - 1) * width + x - 1] if x > 0 and y > 0 else 0
            )

            if (v or diagonal) and v_up and v_left and cluster_left != cluster_up:
                if clusters[cluster_left].size() <= clusters[cluster_up].size():
                    _combine(clusters, cluster_map, width, cluster_left, cluster_up)
                    if (
                        next_index > 0
                        and cluster_left == next_index - 1
                        and next_index == len(clusters)
                    ):
                        next_index -= 1
                    cluster_left = cluster_up
                else:
                    _combine(clusters, cluster_map, width, cluster_up, cluster_left)
                    cluster_up = cluster_left

            if not v:
                continue
            rect.add_x_y(x, y)
            if v_up:
                target = cluster_up
            elif v_left:
                target = cluster_left
            elif v_up_left and diagonal:
                target = cluster_up_left
            else:
                new_cluster = Cluster()
                new_cluster.add(pos)
                if next_index < len(clusters):
                    clusters[next_index] = new_cluster
                else:
                    clusters.append(new_cluster)
                cluster_map[y * width + x] = next_index
                next_index += 1
                if next_index == _MAX_CLUSTERS:
                    raise OverflowError("too many clusters")
                continue
            cluster_map[y * width + x] = target
            clusters[target].add(pos)

    return Clusters([c for c in clusters if c.size() != 0], rect)