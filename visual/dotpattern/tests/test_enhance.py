import math

import pytest

from visual.dotpattern.enhance import adjust_contrast, clamp_channel, enhance_color, luma

SAMPLE_COLORS = [
    (0, 0, 0),
    (255, 255, 255),
    (200, 100, 50),
    (12, 34, 56),
    (127, 128, 129),
    (255, 0, 0),
    (1, 254, 77),
]


@pytest.mark.parametrize("color", SAMPLE_COLORS)
def test_neutral_factors_are_identity(color):
    assert enhance_color(*color, contrast=1.0, saturation=1.0) == color


def test_fractional_averages_are_floored():
    assert enhance_color(10.7, 20.2, 30.99) == (10, 20, 30)


def test_contrast_pushes_away_from_mid_gray():
    assert enhance_color(200, 200, 200, contrast=2.0) == (255, 255, 255)
    assert enhance_color(50, 50, 50, contrast=2.0) == (0, 0, 0)


def test_zero_contrast_collapses_to_mid_gray():
    assert enhance_color(0, 90, 255, contrast=0.0) == (127, 127, 127)


def test_zero_saturation_gives_luma_gray():
    gray = math.floor(luma(200, 100, 50) + 1e-6)
    assert enhance_color(200, 100, 50, saturation=0.0) == (gray, gray, gray)


def test_saturation_boost_clamps_both_ends():
    r, g, b = enhance_color(200, 100, 50, saturation=2.0)

    assert r == 255
    assert g == 75
    # Below gray by more than gray itself; must clamp to 0, not go negative
    assert b == 0


def test_output_always_valid_pixels():
    for contrast in (0.0, 0.5, 1.0, 3.0, 10.0):
        for saturation in (0.0, 1.0, 2.5, 8.0):
            for color in SAMPLE_COLORS:
                out = enhance_color(*color, contrast=contrast, saturation=saturation)
                assert all(isinstance(c, int) and 0 <= c <= 255 for c in out)


def test_rejects_non_finite_input():
    with pytest.raises(ValueError):
        enhance_color(float("nan"), 0, 0)
    with pytest.raises(ValueError):
        enhance_color(0, 0, 0, contrast=float("inf"))


def test_helpers():
    assert clamp_channel(-3.0) == 0.0
    assert clamp_channel(300.0) == 255.0
    assert adjust_contrast(127.5, 5.0) == pytest.approx(127.5)
    assert luma(100, 100, 100) == pytest.approx(100)
