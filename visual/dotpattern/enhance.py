"""Contrast and saturation enhancement of cell colors."""

import math

from .types import RGB

# Perceptual luma weights
LUMA_R = 0.30
LUMA_G = 0.59
LUMA_B = 0.11

# Absorbs float error so that neutral factors floor back to the input value
FLOOR_EPSILON = 1e-6


def clamp_channel(value: float) -> float:
    """Clamp a channel value to [0, 255]."""
    return max(0.0, min(255.0, value))


def adjust_contrast(value: float, contrast: float) -> float:
    """
    Scale a channel's distance from mid-gray (127.5).

    Args:
        value: Channel value (0-255)
        contrast: Contrast factor, 1.0 leaves the value unchanged

    Returns:
        Adjusted value clamped to [0, 255]
    """
    return clamp_channel(((value / 255 - 0.5) * contrast + 0.5) * 255)


def luma(r: float, g: float, b: float) -> float:
    return LUMA_R * r + LUMA_G * g + LUMA_B * b


def enhance_color(r: float, g: float, b: float, contrast: float = 1.0, saturation: float = 1.0) -> RGB:
    """
    Apply contrast then saturation to an RGB color.

    Saturation scales each channel's deviation from the luma gray:
    0.0 collapses the color to gray, 1.0 is neutral and larger values
    push channels further from gray.

    Args:
        r, g, b: Channel values (0-255, may be fractional averages)
        contrast: Contrast factor (1.0 = neutral)
        saturation: Saturation factor (1.0 = neutral)

    Returns:
        Enhanced color as 0-255 integers

    Raises:
        ValueError: If any input is NaN or infinite
    """
    for value in (r, g, b, contrast, saturation):
        if not math.isfinite(value):
            raise ValueError(f"enhance_color requires finite input, got {value!r}")

    r = adjust_contrast(r, contrast)
    g = adjust_contrast(g, contrast)
    b = adjust_contrast(b, contrast)

    gray = luma(r, g, b)
    saturated = (clamp_channel(gray + saturation * (c - gray)) for c in (r, g, b))

    out_r, out_g, out_b = (min(255, math.floor(c + FLOOR_EPSILON)) for c in saturated)
    return (out_r, out_g, out_b)
