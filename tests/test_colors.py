import pytest

from dotswarm.utils.colors import clamp_channel, color_distance, lerp, lerp_rgb


def test_distance_known_value():
    assert color_distance((0, 0, 0), (3, 4, 0)) == pytest.approx(5.0)


@pytest.mark.parametrize("a,b", [
    ((0, 0, 0), (255, 255, 255)),
    ((12, 200, 7), (90, 3, 44)),
    ((255, 0, 0), (0, 255, 0)),
])
def test_distance_symmetric_and_non_negative(a, b):
    assert color_distance(a, b) == color_distance(b, a)
    assert color_distance(a, b) >= 0


def test_distance_to_self_is_zero():
    assert color_distance((17, 99, 250), (17, 99, 250)) == 0


def test_lerp_endpoints_and_midpoint():
    assert lerp(10, 20, 0) == 10
    assert lerp(10, 20, 1) == 20
    assert lerp(10, 20, 0.5) == 15


def test_lerp_rgb_per_channel():
    assert lerp_rgb((0, 100, 200), (100, 100, 0), 0.25) == pytest.approx((25, 100, 150))


@pytest.mark.parametrize("value,expected", [(-3, 0), (0, 0), (12.6, 13), (254.4, 254), (300, 255)])
def test_clamp_channel(value, expected):
    assert clamp_channel(value) == expected
