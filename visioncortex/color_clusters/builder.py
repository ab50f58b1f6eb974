"""Hierarchical clustering of a colour image, run in resumable steps."""

from __future__ import annotations

import bisect
import copy
import enum
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from visioncortex.color import Color
from visioncortex.color_clusters.cluster import Cluster
from visioncortex.color_clusters.container import Clusters, ClustersView
from visioncortex.image import ColorImage

# Cluster 0 is reserved for internal use: it collects kept key-coloured pixels.
ZERO = 0
HIERARCHICAL_MAX = 2**32 - 1

# A key equal to this colour means "no key".
_NO_KEY = Color(0, 0, 0, 0)


class KeyingAction(enum.Enum):
    """What to do with pixels that match the key colour."""

    KEEP = "keep"
    DISCARD = "discard"


@dataclass(frozen=True)
class BuilderConfig:
    """Settings of a clustering run."""

    diagonal: bool = True
    hierarchical: int = HIERARCHICAL_MAX
    batch_size: int = 10000
    key: Color = _NO_KEY
    keying_action: KeyingAction = KeyingAction.KEEP

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")

    @property
    def has_key(self) -> bool:
        return self.key != _NO_KEY


@dataclass(frozen=True)
class NeighbourInfo:
    """A neighbouring cluster and its colour difference to the cluster at hand."""

    index: int
    diff: int


SameFn = Callable[[Color, Color], bool]
DiffFn = Callable[[Color, Color], int]
DecideFn = Callable[["BuilderImpl", Cluster, Sequence[NeighbourInfo]], bool]


@dataclass
class _Area:
    area: int
    count: int


class Builder:
    """Collects an image, the colour tests and the settings of a clustering run."""

    def __init__(
        self,
        image: ColorImage,
        same: SameFn,
        diff: DiffFn,
        deepen: DecideFn,
        hollow: DecideFn,
        config: BuilderConfig | None = None,
    ) -> None:
        self.image = image
        self.same = same
        self.diff = diff
        self.deepen = deepen
        self.hollow = hollow
        self.config = config if config is not None else BuilderConfig()

    def run(self) -> Clusters:
        """Cluster the image to completion."""
        impl = BuilderImpl(self)
        while not impl.tick():
            pass
        return impl.result()

    def start(self) -> IncrementalBuilder:
        """Begin a run that advances one ``tick`` at a time."""
        return IncrementalBuilder(BuilderImpl(self))


class IncrementalBuilder:
    """A clustering run that is advanced step by step."""

    def __init__(self, builder_impl: BuilderImpl) -> None:
        self._impl: BuilderImpl | None = builder_impl

    def _require(self) -> BuilderImpl:
        if self._impl is None:
            raise RuntimeError("the result has already been taken")
        return self._impl

    def tick(self) -> bool:
        """Advance the run; True once it has finished."""
        return self._require().tick()

    def view(self) -> ClustersView:
        return self._require().view()

    def result(self) -> Clusters:
        """Take the result; the builder cannot be used afterwards."""
        impl = self._require()
        self._impl = None
        return impl.result()

    def progress(self) -> int:
        """Progress in percent, or 0 once the result was taken."""
        return 0 if self._impl is None else self._impl.progress()


class BuilderImpl:
    """State of a clustering run."""

    def __init__(self, builder: Builder) -> None:
        conf = builder.config
        image = builder.image
        self.diagonal = conf.diagonal
        self.hierarchical = conf.hierarchical
        self.batch_size = conf.batch_size
        self.key = conf.key
        self.keying_action = conf.keying_action
        self._has_key = conf.has_key
        self._same = builder.same
        self._diff = builder.diff
        self._deepen = builder.deepen
        self._hollow = builder.hollow
        self.width = image.width
        self.height = image.height
        self.pixels = bytearray(image.pixels)
        self.clusters: list[Cluster] = [Cluster()]
        self.cluster_indices: list[int] = [ZERO] * (len(self.pixels) // 4)
        self._areas: list[_Area] = []
        self.clusters_output: list[int] = []
        self._stage = 1
        self._iteration = 0
        self._next_index = 1

    def tick(self) -> bool:
        """Do one slice of work; True once the run has finished."""
        if self._stage == 1:
            if self._stage_1():
                if self.hierarchical != 0:
                    self._stage = 2
                    self._iteration = 0
                else:
                    self._stage_1_output()
                    self._stage = 3
            return False
        if self._stage == 2:
            for _ in range(max(1, self._iteration // 16)):
                if self._stage_2():
                    self._stage = 3
                    self._iteration = 0
                    break
            return False
        return True

    def get_cluster(self, index: int) -> Cluster:
        return self.clusters[index]

    def result(self) -> Clusters:
        return Clusters(
            width=self.width,
            height=self.height,
            pixels=self.pixels,
            clusters=self.clusters,
            cluster_indices=self.cluster_indices,
            clusters_output=self.clusters_output,
        )

    def view(self) -> ClustersView:
        return ClustersView(
            width=self.width,
            height=self.height,
            pixels=self.pixels,
            clusters=self.clusters,
            cluster_indices=self.cluster_indices,
            clusters_output=self.clusters_output,
        )

    def progress(self) -> int:
        """Progress in percent: stage one covers 0-50, stage two 50-100."""
        if self._stage == 1:
            return 50 * self._iteration // max(1, len(self.cluster_indices))
        if self._stage == 2:
            return 50 + 50 * self._iteration // max(1, len(self._areas))
        return 100

    def merge_cluster_into(
        self, from_index: int, to_index: int, deepen: bool, hollow: bool
    ) -> None:
        """Merge one cluster into another.

        When ``deepen`` is set, the source cluster keeps its pixels as a child of
        the target; with ``hollow`` too, its pixels become a hole of the target.
        """
        source = self.clusters[from_index]
        target = self.clusters[to_index]
        if not deepen:
            target.residue_sum.merge(source.residue_sum)
            self._combine(from_index, to_index)
            return
        self._combine_keeping_source(from_index, to_index)
        if hollow:
            target.holes.extend(source.indices)
            target.num_holes += 1
        source.merged_into = to_index
        target.depth += 1

    def _pixel(self, i: int) -> Color | None:
        offset = i * 4
        if offset + 4 > len(self.pixels):
            return None
        r, g, b, a = self.pixels[offset:offset + 4]
        return Color(r, g, b, a)

    def _pixel_at(self, x: int, y: int) -> Color | None:
        if x < 0 or y < 0:
            return None
        return self._pixel(y * self.width + x)

    def _is_same(self, left: Color | None, right: Color | None) -> bool:
        return left is not None and right is not None and self._same(left, right)

    def _new_cluster(self, i: int, color: Color, x: int, y: int) -> None:
        cluster = Cluster()
        cluster.add(i, color, x, y)
        if self._next_index < len(self.clusters):
            self.clusters[self._next_index] = cluster
        else:
            self.clusters.append(cluster)
        self.cluster_indices[i] = self._next_index
        self._next_index += 1

    def _assign(self, i: int, index: int, color: Color, x: int, y: int) -> None:
        self.cluster_indices[i] = index
        self.clusters[index].add(i, color, x, y)

    def _stage_1(self) -> bool:
        width = self.width
        total = len(self.cluster_indices)
        end = min(self._iteration + self.batch_size, total)
        for i in range(self._iteration, end):
            x, y = i % width, i // width
            color = self._pixel_at(x, y)
            up = self._pixel_at(x, y - 1)
            left = self._pixel_at(x - 1, y)
            upleft = self._pixel_at(x - 1, y - 1)

            cluster_up = self.cluster_indices[width * (y - 1) + x] if y > 0 else ZERO
            cluster_left = self.cluster_indices[width * y + x - 1] if x > 0 else ZERO
            cluster_upleft = (
                self.cluster_indices[width * (y - 1) + x - 1] if x > 0 and y > 0 else ZERO
            )

            if (
                cluster_left != cluster_up
                and self._is_same(left, up)
                and (
                    self.diagonal
                    or (self._is_same(color, left) and self._is_same(color, up))
                )
            ):
                if self.clusters[cluster_left].area() <= self.clusters[cluster_up].area():
                    self._combine(cluster_left, cluster_up)
                    if (
                        cluster_left == self._next_index - 1
                        and self._next_index == len(self.clusters)
                    ):
                        self._next_index -= 1
                    cluster_left = cluster_up
                else:
                    self._combine(cluster_up, cluster_left)
                    cluster_up = cluster_left

            if self._has_key and color == self.key:
                if self.keying_action is KeyingAction.KEEP:
                    self.clusters[ZERO].add(i, color, x, y)
            elif self._is_same(color, up) and self._is_same(color, upleft):
                self._assign(i, cluster_up, color, x, y)
            elif self._is_same(color, left) and self._is_same(color, upleft):
                self._assign(i, cluster_left, color, x, y)
            elif self.diagonal and self._is_same(color, upleft):
                self._assign(i, cluster_upleft, color, x, y)
            else:
                self._new_cluster(i, color, x, y)

        self._iteration += self.batch_size
        if self._iteration >= total:
            self._prepare_stage_2()
            return True
        return False

    def _stage_1_output(self) -> None:
        found = [
            (index, cluster.area())
            for index, cluster in enumerate(self.clusters)
            if cluster.area() > 0
        ]
        found.sort(key=lambda item: item[1] * 65535 + item[0])
        self.clusters_output.extend(index for index, _ in found)

    def _prepare_stage_2(self) -> None:
        for cluster in self.clusters:
            cluster.residue_sum = replace(cluster.sum)
        counts = Counter(c.area() for c in self.clusters if c.area() > 0)
        self._areas = [_Area(area, count) for area, count in sorted(counts.items())]

    def _find_area(self, area: int) -> int:
        return bisect.bisect_left(self._areas, area, key=lambda a: a.area)

    def _stage_2(self) -> bool:
        if self._iteration >= len(self._areas):
            return True
        if self._areas[self._iteration].count == 0:
            self._iteration += 1
            return self._iteration == len(self._areas)

        cur_area = self._areas[self._iteration].area
        can_discard_pixels = (
            self.keying_action is KeyingAction.DISCARD and self._has_key
        )

        for index in range(len(self.clusters)):
            cluster = self.clusters[index]
            if cluster.area() != cur_area:
                continue
            if cur_area > self.hierarchical:
                self.clusters_output.append(index)
                continue

            my_color = cluster.color()
            infos = [
                NeighbourInfo(other, self._diff(my_color, self.clusters[other].color()))
                for other in cluster.neighbours(self)
            ]
            if not infos:
                if self._iteration == len(self._areas) - 1 or can_discard_pixels:
                    # The final background, or a cluster isolated by discarded pixels.
                    self.clusters_output.append(index)
                continue

            infos.sort(key=lambda info: info.diff * 65535 + info.index)
            target = infos[0].index

            deepen = (
                self._deepen(self, cluster, infos)
                if self.hierarchical == HIERARCHICAL_MAX
                else False
            )
            hollow = self._hollow(self, cluster, infos)
            if deepen:
                self.clusters_output.append(index)

            target_area = self.clusters[target].area()
            position = self._find_area(target_area)
            if position >= len(self._areas) or self._areas[position].area != target_area:
                raise RuntimeError(f"no area entry for cluster size {target_area}")
            self._areas[position].count -= 1

            self.merge_cluster_into(index, target, deepen, hollow)

            updated_area = self.clusters[target].area()
            position = self._find_area(updated_area)
            if position < len(self._areas) and self._areas[position].area == updated_area:
                self._areas[position].count += 1
            else:
                self._areas.insert(position, _Area(updated_area, 1))

        self._iteration += 1
        return self._iteration == len(self._areas)

    def _combine_keeping_source(self, from_index: int, to_index: int) -> None:
        source = self.clusters[from_index]
        saved_sum = replace(source.sum)
        saved_rect = copy.copy(source.rect)
        saved_indices = list(source.indices)
        self._combine(from_index, to_index)
        source.sum = saved_sum
        source.rect = saved_rect
        source.indices = saved_indices

    def _combine(self, from_index: int, to_index: int) -> None:
        source = self.clusters[from_index]
        target = self.clusters[to_index]
        for i in source.indices:
            self.cluster_indices[i] = to_index
        target.indices.extend(source.indices)
        source.indices = []
        target.sum.merge(source.sum)
        target.rect.merge(source.rect)
        source.sum.clear()
        source.rect.clear()