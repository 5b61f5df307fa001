"""Dot pattern image rendering library."""

from typing import Any

from PIL import Image

from .dots import plan_dots, render_dots
from .enhance import enhance_color
from .preview import DEFAULT_DISPLAY_WIDTH, plan_preview, render_preview, scale_to_width
from .session import (
    DotPatternError,
    ImageDecodeError,
    NoSourceImageError,
    RenderResult,
    RenderSession,
    StaleRenderError,
    encode_png,
    load_image,
    to_data_url,
)
from .types import (
    Dot,
    GridParameters,
    PreviewParameters,
    RenderMode,
    all_mode_names,
    get_mode_name,
    parse_color,
    parse_mode_name,
)

__all__ = [
    "RenderMode",
    "GridParameters",
    "PreviewParameters",
    "Dot",
    "DotPatternError",
    "ImageDecodeError",
    "NoSourceImageError",
    "StaleRenderError",
    "RenderResult",
    "RenderSession",
    "DEFAULT_DISPLAY_WIDTH",
    "enhance_color",
    "plan_dots",
    "plan_preview",
    "render",
    "render_dots",
    "render_preview",
    "scale_to_width",
    "process",
    "load_image",
    "encode_png",
    "to_data_url",
    "parse_color",
    "get_mode_name",
    "parse_mode_name",
    "all_mode_names",
]


def render(image: Image.Image, params: GridParameters = GridParameters()) -> Image.Image:
    """Render the full-resolution dot pattern of an image."""
    return render_dots(image, params)


def process(image: Image.Image | None, mode: RenderMode, params: Any) -> Image.Image:
    """
    Render with the specified mode.

    Args:
        image: Source PIL Image (ignored in preview mode)
        mode: Render mode
        params: GridParameters for full renders, PreviewParameters for
            previews, a display width (int) for source previews

    Returns:
        Rendered PIL Image

    Raises:
        ValueError: If mode is invalid, params don't match the mode or a
            source image is required but missing
    """
    if mode == RenderMode.PREVIEW:
        if not isinstance(params, PreviewParameters):
            raise ValueError("Preview mode requires PreviewParameters")
        return render_preview(params)

    if image is None:
        raise ValueError(f"{get_mode_name(mode)} mode requires a source image")

    if mode == RenderMode.FULL:
        if not isinstance(params, GridParameters):
            raise ValueError("Full mode requires GridParameters")
        return render_dots(image, params)

    elif mode == RenderMode.SOURCE:
        if isinstance(params, bool) or not isinstance(params, int):
            raise ValueError("Source mode requires a display width")
        return scale_to_width(image, params)

    else:
        raise ValueError(f"Unknown render mode: {mode}")
