import pytest

from visioncortex.color import (
    Color,
    ColorF64,
    ColorI32,
    ColorName,
    ColorSum,
)


def test_palette_values_and_cycle():
    assert Color.palette(0) == Color(216, 51, 74)
    assert Color.palette(7) == Color(172, 146, 236)
    for i in range(8):
        assert Color.palette(i) == Color.palette(i + 8)


def test_from_name():
    assert Color.from_name(ColorName.BLACK) == Color(0, 0, 0)
    assert Color.from_name(ColorName.WHITE) == Color(255, 255, 255)
    assert Color.from_name(ColorName.RED) == Color(255, 0, 0)


def test_channel():
    c = Color(1, 2, 3, 4)
    assert [c.channel(i) for i in range(4)] == [1, 2, 3, 4]
    assert c.channel(4) is None


def test_hex_string_round_trip():
    c = Color(18, 171, 254)
    text = c.to_hex_string()
    assert text.startswith("#")
    assert len(text) == 7
    assert text == text.upper()
    assert Color(int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16)) == c


def test_color_string_opaque():
    assert Color(255, 0, 0).to_color_string() == "rgba(255,0,0,1)"


def test_color_string_alpha_fraction():
    text = Color(1, 2, 3, 51).to_color_string()
    assert text.startswith("rgba(1,2,3,")
    assert float(text[len("rgba(1,2,3,"):-1]) == pytest.approx(51 / 255)


def test_to_hsv_gray_is_achromatic():
    hsv = Color(100, 100, 100).to_hsv()
    assert hsv.h == 0.0
    assert hsv.s == 0.0
    assert hsv.v == pytest.approx(100 / 255)


def test_to_hsv_black_has_zero_saturation():
    hsv = Color(0, 0, 0).to_hsv()
    assert hsv.s == 0.0
    assert hsv.v == 0.0


def test_to_hsv_primaries_ordered():
    red = Color(255, 0, 0).to_hsv()
    green = Color(0, 255, 0).to_hsv()
    blue = Color(0, 0, 255).to_hsv()
    assert red.h == 0.0
    assert 0.0 < green.h < blue.h < 1.0
    for hsv in (red, green, blue):
        assert hsv.s == 1.0
        assert hsv.v == 1.0


def test_color_i32_round_trip():
    c = Color(10, 20, 30)
    assert c.to_color_i32().to_color() == c


def test_color_i32_add_and_diff_inverse():
    a = ColorI32(10, -5, 7)
    b = ColorI32(3, 4, -2)
    assert (a + b).diff(b) == a


def test_color_i32_absolute():
    assert ColorI32(3, -9, 4).absolute() == 9


def test_color_i32_to_color_out_of_range():
    with pytest.raises(ValueError):
        ColorI32(256, 0, 0).to_color()
    with pytest.raises(ValueError):
        ColorI32(0, -1, 0).to_color()


def test_color_rejects_bad_channel():
    with pytest.raises(ValueError):
        Color(0, 0, 300)


def test_color_f64_magnitude():
    f = ColorF64.from_color_i32(ColorI32(3, 4, 0))
    assert f.magnitude() == pytest.approx(5.0)


def test_color_sum_average_and_merge():
    s = ColorSum()
    s.add(Color(10, 20, 30, 40))
    s.add(Color(20, 40, 60, 80))
    assert s.counter == 2
    other = ColorSum()
    other.merge(s)
    assert other.average() == s.average()
    assert s.average() == Color(15, 30, 45, 60)


def test_color_sum_clear():
    s = ColorSum()
    s.add(Color(1, 1, 1))
    s.clear()
    assert s == ColorSum()
    with pytest.raises(ZeroDivisionError):
        s.average()