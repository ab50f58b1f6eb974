"""Partitioning items into groups with a disjoint-set forest."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")
K = TypeVar("K")
H = TypeVar("H", bound=Hashable)


class Forests(Generic[H]):
    """Disjoint-set forest with union by rank and path compression."""

    def __init__(self) -> None:
        self._parents: list[int] = []
        self._ranks: list[int] = []
        self._labels: dict[H, int] = {}

    def make_set(self, item: H) -> None:
        """Make a singleton set holding ``item``; no-op if it already exists."""
        if item in self._labels:
            return
        label = len(self._ranks)
        self._labels[item] = label
        self._parents.append(label)
        self._ranks.append(0)

    def find_set(self, item: H) -> int | None:
        """Return the label of the set containing ``item``, or None if unknown."""
        label = self._labels.get(item)
        if label is None:
            return None
        return self._find_and_compress_path(label)

    def union(self, item1: H, item2: H) -> None:
        """Join the sets of ``item1`` and ``item2``; no-op if either is unknown."""
        root1 = self.find_set(item1)
        root2 = self.find_set(item2)
        if root1 is not None and root2 is not None:
            self._link(root1, root2)

    def count_sets(self) -> int:
        """Count the distinct sets in the forest."""
        return len({self._find_and_compress_path(label) for label in range(len(self._parents))})

    def group_items(self, items: Iterable[H]) -> list[list[int]]:
        """Group the positions of ``items`` by the set each belongs to.

        Positions of items not in the forest form one extra group at the end.
        """
        groups: dict[int, list[int]] = {}
        missing: list[int] = []
        for position, item in enumerate(items):
            root = self.find_set(item)
            if root is None:
                missing.append(position)
            else:
                groups.setdefault(root, []).append(position)
        result = list(groups.values())
        if missing:
            result.append(missing)
        return result

    def _find_and_compress_path(self, label: int) -> int:
        visited = []
        current = label
        while (parent := self._parents[current]) != current:
            visited.append(current)
            current = parent
        for node in visited:
            self._parents[node] = current
        return current

    def _link(self, x: int, y: int) -> None:
        rank_x, rank_y = self._ranks[x], self._ranks[y]
        if rank_x > rank_y:
            self._parents[y] = x
        elif rank_x < rank_y:
            self._parents[x] = y
        elif x != y:
            self._parents[x] = y
            self._ranks[y] += 1


def group_by(items: Sequence[T], should_group: Callable[[T, T], bool]) -> list[list[T]]:
    """Group items under an equivalence test.

    Items are taken from the end of ``items``; groups appear in the order in
    which their first member is met that way.
    """
    items = list(items)
    forests: Forests[int] = Forests()
    for index in range(len(items)):
        forests.make_set(index)

    for i, first in enumerate(items):
        for j in range(i + 1, len(items)):
            if should_group(first, items[j]):
                forests.union(i, j)

    group_index: dict[int, int] = {}
    groups: list[list[T]] = []
    for index in reversed(range(len(items))):
        label = forests.find_set(index)
        slot = group_index.get(label)
        if slot is None:
            group_index[label] = len(groups)
            groups.append([items[index]])
        else:
            groups[slot].append(items[index])
    return groups


def group_by_cached_key(
    items: Sequence[T],
    extract_key: Callable[[T], K],
    should_group: Callable[[K, K], bool],
) -> list[list[T]]:
    """Group items by testing keys, computing each item's key only once."""
    keyed = [(item, extract_key(item)) for item in items]
    groups = group_by(keyed, lambda a, b: should_group(a[1], b[1]))
    return [[item for item, _ in group] for group in groups]