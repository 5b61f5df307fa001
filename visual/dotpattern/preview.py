"""Preview renders: parameter swatch and display-sized source copy."""

from PIL import Image

from .common import draw_dots, new_canvas
from .types import Dot, PreviewParameters

DEFAULT_DISPLAY_WIDTH = 1000


def plan_preview(params: PreviewParameters) -> list[Dot]:
    """
    Lay out the swatch circles.

    Circles of the preview radius are tiled from (radius, radius) in steps
    of 2*radius + padding, as many whole steps as fit in the swatch.
    """
    params.validate()
    radius = params.radius
    step = params.step
    count = params.size // step

    dots = []
    for j in range(count):
        for i in range(count):
            dots.append(
                Dot(center_x=radius + i * step, center_y=radius + j * step, radius=radius, color=params.accent)
            )
    return dots


def render_preview(params: PreviewParameters = PreviewParameters()) -> Image.Image:
    """
    Render the parameter-preview swatch.

    No source pixels are involved; circles use the accent color.

    Args:
        params: Preview parameters

    Returns:
        size x size RGB PIL Image
    """
    dots = plan_preview(params)
    canvas = new_canvas((params.size, params.size), params.background)
    return draw_dots(canvas, dots)


def scale_to_width(image: Image.Image, width: int = DEFAULT_DISPLAY_WIDTH) -> Image.Image:
    """
    Resize image to a display width while preserving aspect ratio.

    Args:
        image: Source PIL Image
        width: Target display width (at least 1)

    Returns:
        Resized RGB PIL Image
    """
    width = max(1, int(width))
    src_width, src_height = image.size
    height = max(1, round(width * src_height / src_width))

    return image.convert("RGB").resize((width, height), Image.Resampling.LANCZOS)
