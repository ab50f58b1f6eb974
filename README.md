# visioncortex

Computer-vision primitives in pure Python, with no third-party dependencies:
binary and RGBA images, bounding rectangles, connected-component clustering,
hierarchical color clustering, union-find grouping, small dense matrices and
perspective transforms.

## Installation

```
pip install visioncortex
```

## Modules

- `visioncortex.image` — `BinaryImage` (one boolean per pixel) and
  `ColorImage` (RGBA bytes). Binary images can be cropped, uncropped,
  rotated, pasted into one another, parsed from and printed as `*`/`-` text,
  and rendered to a `ColorImage`. Color images support pixel access, iteration,
  thresholding via `to_binary_image(predicate)` and bilinear sampling
  (`sample_pixel_at`, `bilinear_interpolate`, and their `_safe` variants that
  return `None` outside the pixel grid).
- `visioncortex.bound` — `Point`, `BoundingRect` (integer, right/bottom
  exclusive), `BoundingRectF64`, `BoundStat`, and the helpers
  `average_width`, `average_height`, `enclosing_bound`, `expand` and
  `merge_expand`. `BoundingRect` can also test points against its boundary
  and walk its boundary with `get_boundary_points_from`.
- `visioncortex.clusters` — `to_clusters(image, diagonal)` finds the
  connected groups of set pixels of a `BinaryImage`, returning a `Clusters`
  of `Cluster` objects; `Cluster.break_cluster` splits a cluster at thin
  diagonal bridges.
- `visioncortex.color` — `Color` (RGBA, 0–255), `ColorName`, `ColorI32`,
  `ColorF64`, `ColorHsv` and the running sum `ColorSum`. `Color` converts to
  `rgba(...)` and `#RRGGBB` strings and to HSV, and `Color.palette(i)` cycles
  through eight colors.
- `visioncortex.disjoint_sets` — `Forests` (union-find with union by rank and
  path compression), `group_by` and `group_by_cached_key`.
- `visioncortex.field` — `Field`, a flat list addressed as a 2D grid.
- `visioncortex.matrix` — `Matrix` with transpose, product (`dot` or the
  ` @ ` operator), matrix-vector product, inversion and approximate
  comparison; `dot_vv` for vectors. Inverting a singular matrix raises
  `SingularMatrixError`.
- `visioncortex.perspective` — `PerspectiveTransform`, mapping one
  quadrilateral onto another and back.
- `visioncortex.color_clusters` — hierarchical clustering of a `ColorImage`:
  - `builder`: `Builder`, `BuilderConfig`, `KeyingAction`, `NeighbourInfo`,
    `IncrementalBuilder` and `BuilderImpl`;
  - `container`: the result `Clusters` and its `ClustersView`;
  - `cluster`: the color `Cluster`;
  - `runner`: the color tests `color_same`, `color_diff`,
    `oklab_color_diff` and the `ColorSpace` enum.

## Examples

Connected components of a binary image:

```python
from visioncortex.image import BinaryImage
from visioncortex.clusters import to_clusters

image = BinaryImage.from_string("*--\n-*-\n--*\n")
print(len(to_clusters(image, False)))  # 3
print(len(to_clusters(image, True)))   # 1
```

Grouping values with a union-find:

```python
from visioncortex.disjoint_sets import group_by

groups = group_by([1, 1, 7, 9, 24, 1, 4, 7, 3, 8], lambda a, b: (a - b) ** 2 < 2)
# groups hold {1, 1, 1}, {3, 4}, {7, 7, 8, 9} and {24}
```

Grouping rectangles whose expanded bounds overlap:

```python
from visioncortex.bound import BoundingRect, merge_expand

a = BoundingRect.from_x_y_w_h(1, 1, 1, 1)
b = BoundingRect.from_x_y_w_h(3, 1, 1, 1)
print(len(merge_expand([a, b], 1, 0)))  # 1
print(len(merge_expand([a, b], 0, 1)))  # 2
```

Matrices:

```python
from visioncortex.matrix import Matrix

m = Matrix([[2, 0], [0, 4]])
print(m @ m.inv())  # the identity
```

Mapping points between quadrilaterals:

```python
from visioncortex.bound import Point
from visioncortex.perspective import PerspectiveTransform

t = PerspectiveTransform(
    [0, 0, 1, 0, 1, 1, 0, 1],
    [0, 0, 2, 0, 2, 2, 0, 2],
)
print(t.transform(Point(0.5, 0.5)))
print(t.transform_inverse(Point(1.0, 1.0)))
```

Clustering a color image. The caller supplies the color tests: `same`
decides whether two neighbouring pixels belong together, `diff` measures how
far apart two clusters are, and `deepen` and `hollow` decide, for a cluster
about to be merged into its closest neighbour, whether it is kept as a child
and whether it leaves a hole in its parent:

```python
from visioncortex.color import Color
from visioncortex.image import ColorImage
from visioncortex.color_clusters.builder import Builder, BuilderConfig
from visioncortex.color_clusters.runner import color_diff, color_same

image = ColorImage(4, 4)
for y in range(4):
    for x in range(4):
        image.set_pixel(x, y, Color(255, 0, 0) if x < 2 else Color(0, 0, 255))

builder = Builder(
    image,
    same=lambda a, b: color_same(a, b, 4, 1),
    diff=color_diff,
    deepen=lambda impl, cluster, neighbours: False,
    hollow=lambda impl, cluster, neighbours: len(neighbours) <= 1,
    config=BuilderConfig(diagonal=False),
)
clusters = builder.run()
for cluster in clusters.view():
    print(cluster.area(), cluster.residue_color())
```

The same run can be advanced step by step, reporting progress in percent:

```python
incremental = builder.start()
while not incremental.tick():
    print(incremental.progress())
clusters = incremental.result()
painted = clusters.view().to_color_image()
```

## What the package does not do

- It does not trace clusters into outlines: there are no paths, polygons or
  splines, and no SVG output.
- It does not read or write image files; images are built in memory from
  pixels or, for binary images, from `*`/`-` text.
- It has no command-line tool; it is used as a library.

## Running the tests

```
pip install -e ".[test]"
pytest
```