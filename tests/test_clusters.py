import pytest

from visioncortex.bound import BoundingRect, Point
from visioncortex.clusters import Cluster, Clusters, to_clusters
from visioncortex.image import BinaryImage


def _diagonal_image():
    image = BinaryImage(3, 3)
    image.set_pixel(0, 0, True)
    image.set_pixel(1, 1, True)
    image.set_pixel(2, 2, True)
    return image


def _break(text):
    image = BinaryImage.from_string(text)
    return Cluster.break_cluster(to_clusters(image, False)[0])


def test_clusters_3x3():
    clusters = to_clusters(_diagonal_image(), False)
    assert len(clusters) == 3
    assert clusters[0].size() == 1
    assert clusters[0].points[0] == Point(0, 0)
    assert clusters[1].size() == 1
    assert clusters[1].points[0] == Point(1, 1)
    assert clusters[2].size() == 1
    assert clusters[2].points[0] == Point(2, 2)
    rect = BoundingRect()
    rect.add_x_y(2, 2)
    assert clusters[2].rect == rect
    binary = clusters[0].to_binary_image()
    assert binary.width == 1
    assert binary.height == 1
    assert binary.get_pixel(0, 0) is True


def test_clusters_3x3_diagonal():
    clusters = to_clusters(_diagonal_image(), True)
    assert len(clusters) == 1
    assert clusters[0].size() == 3
    assert clusters[0].points == [Point(0, 0), Point(1, 1), Point(2, 2)]


def test_clusters_4x4():
    image = BinaryImage(4, 4)
    for x, y in ((1, 1), (1, 2), (2, 1), (2, 2)):
        image.set_pixel(x, y, True)
    clusters = to_clusters(image, False)
    assert len(clusters) == 1
    cluster = clusters[0]
    assert cluster.size() == 4
    assert cluster.rect == BoundingRect(1, 1, 3, 3)
    assert cluster.rect.width() == 2
    assert cluster.rect.height() == 2
    binary = cluster.to_binary_image()
    assert (binary.width, binary.height) == (2, 2)
    assert all(binary.get_pixel(x, y) for x in range(2) for y in range(2))


def test_clusters_rect_encloses_all():
    clusters = to_clusters(_diagonal_image(), False)
    assert clusters.rect == BoundingRect(0, 0, 3, 3)


def test_empty_image_has_no_clusters():
    clusters = to_clusters(BinaryImage(3, 3), False)
    assert len(clusters) == 0
    assert list(clusters) == []


def test_u_shape_merges_into_one_cluster():
    image = BinaryImage.from_string("*-*\n*-*\n***\n")
    clusters = to_clusters(image, False)
    assert len(clusters) == 1
    assert clusters[0].size() == 7
    assert str(clusters[0].to_binary_image()) == "*-*\n*-*\n***\n"


def test_break_cluster_noop():
    text = "***\n***\n-*-\n"
    clusters = _break(text)
    assert len(clusters) == 1
    assert str(clusters[0].to_binary_image()) == text


def test_break_cluster():
    clusters = _break("***---\n******\n---***\n")
    assert len(clusters) == 2
    assert str(clusters[0].to_binary_image()) == "***\n***\n"
    assert (clusters[0].rect.left, clusters[0].rect.top) == (0, 0)
    assert str(clusters[1].to_binary_image()) == "-**\n***\n"
    assert (clusters[1].rect.left, clusters[1].rect.top) == (3, 1)


def test_break_cluster_alt():
    clusters = _break("---***\n******\n***---\n")
    assert len(clusters) == 2
    assert str(clusters[0].to_binary_image()) == "***\n-**\n"
    assert (clusters[0].rect.left, clusters[0].rect.top) == (3, 0)
    assert str(clusters[1].to_binary_image()) == "***\n***\n"
    assert (clusters[1].rect.left, clusters[1].rect.top) == (0, 1)


@pytest.mark.parametrize("text", ["*--\n**-\n-**\n", "*---\n****\n--**\n"])
def test_break_cluster_cant_break(text):
    clusters = _break(text)
    assert len(clusters) == 1
    assert str(clusters[0].to_binary_image()) == text


def test_break_cluster_big():
    clusters = _break("***---***\n*********\n---***---\n")
    assert len(clusters) == 3
    assert str(clusters[0].to_binary_image()) == "***\n***\n"
    assert (clusters[0].rect.left, clusters[0].rect.top) == (0, 0)
    assert str(clusters[1].to_binary_image()) == "***\n-**\n"
    assert (clusters[1].rect.left, clusters[1].rect.top) == (6, 0)
    assert str(clusters[2].to_binary_image()) == "-**\n***\n"
    assert (clusters[2].rect.left, clusters[2].rect.top) == (3, 1)


def test_cluster_add_and_iter():
    cluster = Cluster()
    cluster.add(Point(2, 3))
    cluster.add(Point(4, 5))
    assert len(cluster) == 2
    assert list(cluster) == [Point(2, 3), Point(4, 5)]
    assert cluster.rect == BoundingRect(2, 3, 5, 6)


def test_cluster_offset_moves_points_and_rect():
    cluster = Cluster()
    cluster.add(Point(1, 1))
    cluster.add(Point(2, 1))
    cluster.offset(Point(10, 20))
    assert cluster.points == [Point(11, 21), Point(12, 21)]
    assert cluster.rect == BoundingRect(11, 21, 13, 22)


def test_clusters_add_cluster_merges_rect():
    clusters = Clusters()
    first = Cluster()
    first.add(Point(0, 0))
    second = Cluster()
    second.add(Point(4, 2))
    clusters.add_cluster(first)
    clusters.add_cluster(second)
    assert len(clusters) == 2
    assert clusters[1] is second
    assert clusters.rect == BoundingRect(0, 0, 5, 3)


def test_to_binary_image_round_trip():
    text = "-**-\n**--\n-***\n"
    image = BinaryImage.from_string(text)
    clusters = to_clusters(image, False)
    assert len(clusters) == 1
    assert str(clusters[0].to_binary_image()) == text