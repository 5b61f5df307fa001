"""Full-resolution dot pattern rendering."""

from collections.abc import Iterator

from PIL import Image

from .common import Box, draw_dots, new_canvas, sample_region_rgb
from .enhance import enhance_color
from .types import Dot, GridParameters


def iter_cells(width: int, height: int, cell_size: int) -> Iterator[Box]:
    """
    Walk the cell grid in row-major order.

    Cells on the right and bottom edges are clipped to the image bounds
    when the dimensions are not multiples of cell_size.

    Yields:
        (left, top, right, bottom) of each non-empty cell
    """
    for y in range(0, height, cell_size):
        for x in range(0, width, cell_size):
            x_end = min(x + cell_size, width)
            y_end = min(y + cell_size, height)
            if x_end > x and y_end > y:
                yield (x, y, x_end, y_end)


def average_cell(image: Image.Image, box: Box) -> tuple[float, float, float]:
    """Mean RGB of a cell's in-bounds pixels."""
    return sample_region_rgb(image, box)


def plan_dots(image: Image.Image, params: GridParameters) -> list[Dot]:
    """
    Compute the dots for a full-resolution render.

    Each cell becomes one dot, centered on the regular grid position
    (x + cell_size/2, y + cell_size/2) even when the cell is clipped.

    Args:
        image: Source image (RGB or RGBA)
        params: Grid parameters

    Returns:
        Dots in draw order (row-major)
    """
    params.validate()
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")

    cell_size = params.cell_size
    radius = params.dot_radius
    half = cell_size / 2

    dots = []
    for box in iter_cells(image.width, image.height, cell_size):
        r, g, b = average_cell(image, box)
        color = enhance_color(r, g, b, params.contrast, params.saturation)
        dots.append(Dot(center_x=box[0] + half, center_y=box[1] + half, radius=radius, color=color))

    return dots


def render_dots(image: Image.Image, params: GridParameters) -> Image.Image:
    """
    Render the dot pattern at the source image's native resolution.

    Args:
        image: Source image
        params: Grid parameters

    Returns:
        RGB PIL Image with the same size as the source

    Raises:
        ValueError: If params are out of range
    """
    dots = plan_dots(image, params)
    canvas = new_canvas(image.size, params.background)
    return draw_dots(canvas, dots)
