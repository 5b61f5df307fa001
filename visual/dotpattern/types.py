"""Type definitions for dot pattern rendering."""

import math
from dataclasses import dataclass
from enum import Enum, auto

from PIL import ImageColor

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
ACCENT_BLUE: RGB = (59, 130, 246)


class RenderMode(Enum):
    """Render targets."""

    FULL = auto()
    PREVIEW = auto()
    SOURCE = auto()


def _check_color(name: str, color: RGB) -> None:
    if len(color) != 3 or any(not isinstance(c, int) or not 0 <= c <= 255 for c in color):
        raise ValueError(f"{name} must be an RGB triple of 0-255 integers, got {color!r}")


def _check_factor(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite number >= 0, got {value!r}")


@dataclass(frozen=True)
class GridParameters:
    """Parameters for a full-resolution dot render."""

    cell_size: int = 10
    padding: int = 2
    contrast: float = 1.0  # 1.0 = neutral
    saturation: float = 1.0  # 0.0 = gray, 1.0 = neutral, >1.0 = boost
    background: RGB = BLACK

    @property
    def dot_radius(self) -> float:
        """Dot radius, clamped to 1 so that padding >= cell_size still draws."""
        return max(1.0, (self.cell_size - self.padding) / 2)

    def validate(self) -> "GridParameters":
        """
        Check parameter ranges.

        Returns:
            self, for chaining

        Raises:
            ValueError: If any parameter is out of range
        """
        if isinstance(self.cell_size, bool) or not isinstance(self.cell_size, int) or self.cell_size < 1:
            raise ValueError(f"cell_size must be an integer >= 1, got {self.cell_size!r}")
        if isinstance(self.padding, bool) or not isinstance(self.padding, int) or self.padding < 0:
            raise ValueError(f"padding must be an integer >= 0, got {self.padding!r}")
        _check_factor("contrast", self.contrast)
        _check_factor("saturation", self.saturation)
        _check_color("background", self.background)
        return self


@dataclass(frozen=True)
class PreviewParameters:
    """Parameters for the parameter-preview swatch.

    The grid size control is used directly as the circle radius here.
    """

    radius: int = 10
    padding: int = 2
    background: RGB = BLACK
    accent: RGB = ACCENT_BLUE
    size: int = 120

    @property
    def step(self) -> int:
        return 2 * self.radius + self.padding

    def validate(self) -> "PreviewParameters":
        if isinstance(self.radius, bool) or not isinstance(self.radius, int) or self.radius < 1:
            raise ValueError(f"radius must be an integer >= 1, got {self.radius!r}")
        if isinstance(self.padding, bool) or not isinstance(self.padding, int) or self.padding < 0:
            raise ValueError(f"padding must be an integer >= 0, got {self.padding!r}")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise ValueError(f"size must be an integer >= 1, got {self.size!r}")
        _check_color("background", self.background)
        _check_color("accent", self.accent)
        return self


@dataclass(frozen=True)
class Dot:
    """A filled circle to draw."""

    center_x: float
    center_y: float
    radius: float
    color: RGB

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        return (
            self.center_x - self.radius,
            self.center_y - self.radius,
            self.center_x + self.radius,
            self.center_y + self.radius,
        )


def parse_color(value: str) -> RGB:
    """
    Parse a color string into an RGB triple.

    Accepts anything PIL.ImageColor understands: "#rrggbb", "#rgb",
    "rgb(r, g, b)" and CSS color names.

    Raises:
        ValueError: If the string is not a color
    """
    try:
        color = ImageColor.getrgb(value.strip())
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid color: {value!r}") from e
    return (color[0], color[1], color[2])


# Mode name mapping
MODE_NAMES = {
    RenderMode.FULL: "full",
    RenderMode.PREVIEW: "preview",
    RenderMode.SOURCE: "source",
}

# Reverse mapping
NAME_TO_MODE = {v: k for k, v in MODE_NAMES.items()}


def get_mode_name(mode: RenderMode) -> str:
    """Get CLI-friendly mode name."""
    return MODE_NAMES[mode]


def parse_mode_name(name: str) -> RenderMode:
    """Parse mode name to RenderMode."""
    if name not in NAME_TO_MODE:
        valid_names = ", ".join(MODE_NAMES.values())
        raise ValueError(f"Invalid mode name: {name}. Valid names: {valid_names}")
    return NAME_TO_MODE[name]


def all_mode_names() -> list[str]:
    """List all available mode names."""
    return list(MODE_NAMES.values())
