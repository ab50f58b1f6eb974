import pytest

from visioncortex.disjoint_sets import Forests, group_by, group_by_cached_key

POINTS = [1, 1, 7, 9, 24, 1, 4, 7, 3, 8]


def _close(x, y):
    return (x - y) * (x - y) < 2


def _check_point_groups(groups):
    assert sum(len(g) for g in groups) == len(POINTS)
    assert len(groups) == 4
    for group in groups:
        group = sorted(group)
        if len(group) == 4:
            assert group == [7, 7, 8, 9]
        elif len(group) == 3:
            assert group == [1, 1, 1]
        elif len(group) == 2:
            assert group == [3, 4]
        else:
            assert group == [24]


@pytest.fixture
def forests():
    f = Forests()
    for i in range(1, 11):
        f.make_set(i)
    for a, b in [(2, 4), (5, 7), (1, 3), (8, 9), (1, 2), (5, 6), (2, 3)]:
        f.union(a, b)
    return f


def test_union_find(forests):
    assert forests.find_set(1) == forests.find_set(2)
    assert forests.find_set(2) == forests.find_set(3)
    assert forests.find_set(3) == forests.find_set(4)
    assert forests.find_set(5) == forests.find_set(6)
    assert forests.find_set(6) == forests.find_set(7)
    assert forests.find_set(8) == forests.find_set(9)
    assert forests.find_set(10) != forests.find_set(1)
    assert forests.find_set(1) != forests.find_set(5)
    assert forests.find_set(6) != forests.find_set(8)
    assert forests.count_sets() == 4


def test_group_items(forests):
    groups = forests.group_items(list(range(1, 11)))
    assert len(groups) == 4
    for group in groups:
        if len(group) == 4:
            assert group == [0, 1, 2, 3]
        elif len(group) == 3:
            assert group == [4, 5, 6]
        elif len(group) == 2:
            assert group == [7, 8]
        else:
            assert group == [9]


def test_group_items_missing_go_last(forests):
    groups = forests.group_items([1, 100, 2, 200])
    assert groups == [[0, 2], [1, 3]]


def test_find_set_unknown_is_none():
    f = Forests()
    f.make_set("a")
    assert f.find_set("b") is None


def test_union_with_unknown_is_noop():
    f = Forests()
    f.make_set("a")
    f.make_set("b")
    f.union("a", "zzz")
    assert f.count_sets() == 2


def test_make_set_twice_keeps_one_set():
    f = Forests()
    f.make_set(1)
    f.make_set(1)
    assert f.count_sets() == 1


def test_group_by():
    _check_point_groups(group_by(POINTS, _close))


def test_group_by_cached_key():
    _check_point_groups(group_by_cached_key(POINTS, lambda x: x, _close))


def test_group_by_cached_key_calls_key_once_per_item():
    calls = []

    def key(x):
        calls.append(x)
        return x

    group_by_cached_key(POINTS, key, _close)
    assert sorted(calls) == sorted(POINTS)


def test_group_by_order_follows_reverse_input():
    assert group_by(["a", "b"], lambda x, y: False) == [["b"], ["a"]]
    assert group_by(["a", "b"], lambda x, y: True) == [["b", "a"]]


def test_group_by_empty():
    assert group_by([], _close) == []