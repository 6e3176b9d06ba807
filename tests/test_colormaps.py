import pytest

from mandelgrid.colormaps import (
    NAMED_COLORS,
    SCHEME_CHEAP,
    SCHEME_EXPENSIVE,
    get_color_cheap,
    get_color_expensive,
    get_color_scheme,
    get_default_color_scheme,
    hsv_to_rgb,
    list_color_scheme_names,
    parse_color,
)
from mandelgrid.compute import evaluate


BACKGROUNDS = [(0, 255, 255), (12, 34, 56), (255, 255, 255)]
FOREGROUNDS = [(0, 0, 0), (255, 154, 0), (200, 10, 90)]
SENTINEL = (1, 2, 3)


@pytest.mark.parametrize("background", BACKGROUNDS)
@pytest.mark.parametrize("foreground", FOREGROUNDS)
def test_cheap_endpoints_are_exact(background, foreground):
    assert get_color_cheap(0, 1000, background, foreground) == background
    assert get_color_cheap(1000, 1000, background, foreground) == foreground


def test_cheap_rounds_half_up():
    assert get_color_cheap(1, 2, (0, 0, 0), (255, 255, 255)) == (128, 128, 128)


def test_cheap_midpoint_is_between_endpoints():
    r, g, b = get_color_cheap(5, 10, (0, 0, 0), (200, 100, 40))
    assert (r, g, b) == (100, 50, 20)


def test_expensive_converged_point_gets_sentinel():
    assert get_color_expensive(100, 0.1 + 0.2j, 100, SENTINEL) == SENTINEL


def test_expensive_small_magnitude_gets_sentinel():
    assert get_color_expensive(3, 0.5 + 0j, 100, SENTINEL) == SENTINEL
    assert get_color_expensive(3, 1 + 0j, 100, SENTINEL) == SENTINEL


def test_expensive_non_finite_gets_sentinel():
    assert get_color_expensive(3, complex(float("inf"), 0), 100, SENTINEL) == SENTINEL
    assert get_color_expensive(3, complex(float("nan"), 0), 100, SENTINEL) == SENTINEL


def test_expensive_escaped_points_use_full_value_and_saturation():
    # With S = 0.8 and V = 1 the chroma channel is 255 and the zero channel 50
    for c in (2, -2 - 2j, 0.5 + 0.5j, 1 + 1j, -2.1, 0.4, -0.5 + 1.5j):
        iteration, final_z = evaluate(c, 100)
        assert iteration < 100
        color = get_color_expensive(iteration, final_z, 100, SENTINEL)
        assert color != SENTINEL
        assert max(color) == 255
        assert min(color) == 50


@pytest.mark.parametrize("hue, expected", [
    (0.0, (255, 50, 50)),
    (60.0, (255, 255, 50)),
    (120.0, (50, 255, 50)),
    (180.0, (50, 255, 255)),
    (240.0, (50, 50, 255)),
    (300.0, (255, 50, 255)),
])
def test_hsv_sector_boundaries_are_inclusive_low(hue, expected):
    assert hsv_to_rgb(hue, 0.8, 1.0, SENTINEL) == expected


@pytest.mark.parametrize("hue", [360.0, 720.0, -360.0, -1080.0])
def test_hsv_wraps_full_turns_to_zero(hue):
    assert hsv_to_rgb(hue, 0.8, 1.0, SENTINEL) == hsv_to_rgb(0.0, 0.8, 1.0, SENTINEL)


def test_hsv_last_sector_just_below_full_turn():
    r, g, b = hsv_to_rgb(359.999, 0.8, 1.0, SENTINEL)
    assert r == 255 and g == 50


def test_hsv_non_finite_hue_gets_sentinel():
    assert hsv_to_rgb(float("nan"), 0.8, 1.0, SENTINEL) == SENTINEL
    assert hsv_to_rgb(float("inf"), 0.8, 1.0, SENTINEL) == SENTINEL


def test_parse_color_forms():
    assert parse_color("Cyan") == NAMED_COLORS["cyan"]
    assert parse_color("#ff9a00") == (255, 154, 0)
    assert parse_color([1, 2, 3]) == (1, 2, 3)


@pytest.mark.parametrize("value", ["nope", "#12345", "#gggggg", (1, 2), (0, 0, 256), None])
def test_parse_color_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_scheme_registry():
    assert list_color_scheme_names() == ["cheap", "expensive"]
    assert get_default_color_scheme().kind == SCHEME_CHEAP
    scheme = get_color_scheme("expensive", sentinel="white")
    assert scheme.kind == SCHEME_EXPENSIVE
    assert scheme.sentinel == (255, 255, 255)
    with pytest.raises(KeyError):
        get_color_scheme("plasma")
