import pytest

from visioncortex.bound import BoundingRect, Point
from visioncortex.color import Color
from visioncortex.image import (
    BinaryImage,
    ColorImage,
    bilinear_interpolate,
    bilinear_interpolate_safe,
)


def test_binary_image_crop():
    image = BinaryImage(4, 4)
    image.set_pixel(1, 1, True)
    image.set_pixel(2, 2, True)
    crop = image.crop()
    assert crop.width == 2
    assert crop.height == 2
    assert crop.get_pixel(0, 0) is True
    assert crop.get_pixel(0, 1) is False
    assert crop.get_pixel(1, 0) is False
    assert crop.get_pixel(1, 1) is True


def test_image_as_string():
    image = BinaryImage(2, 2)
    image.set_pixel(0, 0, True)
    image.set_pixel(1, 1, True)
    assert str(image) == "*-\n-*\n"
    recover = BinaryImage.from_string(str(image))
    assert recover.width == image.width
    assert recover.height == image.height
    assert recover == image


def test_rotate():
    source = (
        "-----------*************---------\n"
        "---------*****************-------\n"
        "-------*********************-----\n"
        "-----************************----\n"
        "----**************************---\n"
        "---****************************--\n"
        "--*****************************--\n"
        "--******************************-\n"
        "-*******************************-\n"
        "-********************************\n"
        "*********************************\n"
        "*********************************\n"
        "********************************-\n"
        "********************************-\n"
        "********************************-\n"
        "*******************************--\n"
        "-******************************--\n"
        "-*****************************---\n"
        "--***************************----\n"
        "---*************************-----\n"
        "----***********************------\n"
        "-----*********************-------\n"
        "-------*****************---------\n"
        "---------************------------\n"
    )
    expected = (
        "-----------------------------\n"
        "-----------------------------\n"
        "-----------****-*------------\n"
        "---------**********----------\n"
        "-------*************---------\n"
        "------***************--------\n"
        "-----*****************-------\n"
        "-----*******************-----\n"
        "-----*******************-----\n"
        "----*********************----\n"
        "----*********************----\n"
        "---***********************---\n"
        "---************************--\n"
        "--*************************--\n"
        "---************************--\n"
        "---************************--\n"
        "---************************--\n"
        "---************************--\n"
        "---*************************-\n"
        "---*************************-\n"
        "----************************-\n"
        "----************************-\n"
        "----************************-\n"
        "----************************-\n"
        "----************************-\n"
        "-----***********************-\n"
        "------*********************--\n"
        "------*********************--\n"
        "-------*******************---\n"
        "--------*****************----\n"
        "---------****************----\n"
        "-----------**************----\n"
        "------------***********------\n"
        "---------------******--------\n"
        "------------------*----------\n"
        "-----------------------------\n"
        "-----------------------------\n"
    )
    rotated = BinaryImage.from_string(source).rotate(1.3962634015954636)
    assert str(rotated) == expected


def test_rotate_zero_is_identity():
    image = BinaryImage.from_string("*--\n-**\n")
    assert image.rotate(0.0) == image


def test_from_string_empty():
    image = BinaryImage.from_string("")
    assert (image.width, image.height) == (0, 0)


def test_bounding_rect_and_area():
    image = BinaryImage.from_string("----\n-*--\n--*-\n----\n")
    assert image.bounding_rect() == BoundingRect(1, 1, 3, 3)
    assert image.area() == 2


def test_get_pixel_safe_outside_is_false():
    image = BinaryImage.from_string("**\n**\n")
    assert image.get_pixel_safe(-1, 0) is False
    assert image.get_pixel_safe(2, 0) is False
    assert image.get_pixel_at_safe(Point(1, 1)) is True


def test_get_pixel_out_of_range_raises():
    image = BinaryImage(2, 2)
    with pytest.raises(IndexError):
        image.get_pixel(0, 2)
    with pytest.raises(IndexError):
        image.get_pixel_at(Point(-1, 0))


def test_set_pixel_safe_reports_success():
    image = BinaryImage(2, 2)
    assert image.set_pixel_safe(1, 1, True) is True
    assert image.set_pixel_safe(2, 1, True) is False
    assert str(image) == "--\n-*\n"


def test_set_pixel_at_and_index():
    image = BinaryImage(3, 1)
    image.set_pixel_at(Point(0, 0), True)
    image.set_pixel_index(2, True)
    assert str(image) == "*-*\n"


def test_uncrop_centres_content():
    image = BinaryImage.from_string("*\n")
    assert str(image.uncrop(3, 3)) == "---\n-*-\n---\n"


def test_uncrop_smaller_raises():
    with pytest.raises(ValueError):
        BinaryImage(3, 3).uncrop(2, 3)


def test_crop_with_rect():
    image = BinaryImage.from_string("*-*\n-*-\n*-*\n")
    assert str(image.crop_with_rect(BoundingRect(1, 0, 3, 2))) == "-*\n*-\n"


def test_paste_from():
    target = BinaryImage(3, 3)
    target.paste_from(BinaryImage.from_string("**\n-*\n"), Point(1, 1))
    assert str(target) == "---\n-**\n--*\n"


def test_to_color_image():
    image = BinaryImage.from_string("*-\n")
    colors = image.to_color_image()
    assert colors.get_pixel(0, 0) == Color(0, 0, 0, 255)
    assert colors.get_pixel(1, 0) == Color(255, 255, 255, 255)


def test_color_image_set_get_and_iter():
    image = ColorImage(2, 2)
    image.set_pixel(1, 0, Color(10, 20, 30, 40))
    image.set_pixel_at(2, Color(1, 2, 3, 4))
    assert image.get_pixel(1, 0) == Color(10, 20, 30, 40)
    assert image.get_pixel_at(2) == Color(1, 2, 3, 4)
    assert list(image) == [
        Color(0, 0, 0, 0),
        Color(10, 20, 30, 40),
        Color(1, 2, 3, 4),
        Color(0, 0, 0, 0),
    ]


def test_color_image_safe_access():
    image = ColorImage(1, 1)
    assert image.get_pixel_safe(1, 0) is None
    assert image.get_pixel_at_point_safe(Point(0, -1)) is None
    assert image.get_pixel_safe(0, 0) == Color(0, 0, 0, 0)


def test_color_image_out_of_range_raises():
    with pytest.raises(IndexError):
        ColorImage(1, 1).get_pixel_at(1)


def test_color_image_to_binary_image():
    image = ColorImage(2, 1)
    image.set_pixel(0, 0, Color(255, 0, 0))
    binary = image.to_binary_image(lambda c: c.r > 128)
    assert str(binary) == "*-\n"


def _two_pixel_image():
    image = ColorImage(2, 1)
    image.set_pixel(0, 0, Color(0, 0, 0, 0))
    image.set_pixel(1, 0, Color(100, 200, 50, 255))
    return image


def test_bilinear_interpolate_midpoint():
    image = _two_pixel_image()
    assert bilinear_interpolate(image, Point(0.5, 0.0)) == Color(50, 100, 25, 127)
    assert image.sample_pixel_at(Point(1.0, 0.0)) == Color(100, 200, 50, 255)


def test_bilinear_interpolate_safe():
    image = _two_pixel_image()
    assert bilinear_interpolate_safe(image, Point(1.5, 0.0)) is None
    assert bilinear_interpolate_safe(image, Point(-0.0, 0.0)) is None
    assert image.sample_pixel_at_safe(Point(0.0, 0.0)) == Color(0, 0, 0, 0)