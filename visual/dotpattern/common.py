"""Common utilities for dot pattern rendering."""

from PIL import Image, ImageDraw, ImageStat

from .types import RGB, Dot

Box = tuple[int, int, int, int]


def sample_region_rgb(image: Image.Image, box: Box) -> tuple[float, float, float]:
    """
    Average the R, G and B channels over a region of the image.

    The box is clipped to the image bounds before sampling; alpha is ignored.

    Args:
        image: PIL Image in RGB or RGBA mode
        box: (left, top, right, bottom) region

    Returns:
        Mean (r, g, b) over the in-bounds pixels

    Raises:
        ValueError: If no pixel of the box lies inside the image
    """
    width, height = image.size
    left, top, right, bottom = box
    left, top = max(0, left), max(0, top)
    right, bottom = min(right, width), min(bottom, height)
    if right <= left or bottom <= top:
        raise ValueError(f"Region {box} has no pixels inside a {width}x{height} image")

    region = image.crop((left, top, right, bottom))
    mean = ImageStat.Stat(region).mean
    return mean[0], mean[1], mean[2]


def new_canvas(size: tuple[int, int], background: RGB) -> Image.Image:
    """Allocate an opaque RGB buffer filled with the background color."""
    return Image.new("RGB", size, background)


def draw_dot(draw: ImageDraw.ImageDraw, dot: Dot):
    """
    Draw a filled circle on the ImageDraw object.

    Args:
        draw: PIL ImageDraw object
        dot: Circle to draw
    """
    if dot.radius > 0:
        draw.ellipse(dot.bbox, fill=dot.color)


def draw_dots(canvas: Image.Image, dots: list[Dot]) -> Image.Image:
    """Draw dots onto the canvas in list order and return it."""
    draw = ImageDraw.Draw(canvas)
    for dot in dots:
        draw_dot(draw, dot)
    return canvas
