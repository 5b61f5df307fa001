#!/usr/bin/env python3
"""Dot pattern image converter CLI."""

import sys
from pathlib import Path

import click

from visual.dotpattern import (
    DEFAULT_DISPLAY_WIDTH,
    DotPatternError,
    GridParameters,
    ImageDecodeError,
    PreviewParameters,
    RenderSession,
    all_mode_names,
    parse_color,
)

# Recommended UI ranges; values outside are allowed with a warning
CELL_SIZE_RANGE = (5, 50)
PADDING_RANGE = (2, 5)


def _parse_background(ctx, param, value):
    try:
        return parse_color(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _warn_range(name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        click.echo(f"Warning: {name}={value} is outside the recommended range {low}-{high}", err=True)


@click.command()
@click.argument('input', type=click.Path(exists=True, dir_okay=False), required=False)
@click.option('-o', '--output', type=click.Path(dir_okay=False), help='Output path (default: <input>_dots.png)')
@click.option('--cell-size', type=click.IntRange(min=1), default=10, help='Grid cell size in pixels')
@click.option('--padding', type=click.IntRange(min=0), default=2, help='Padding between dots in pixels')
@click.option('--background', type=str, default='black', callback=_parse_background,
              help='Background color (name, #rrggbb or rgb(r,g,b))')
@click.option('--contrast', type=click.FloatRange(min=0), default=1.0, help='Contrast factor (1.0 = neutral)')
@click.option('--saturation', type=click.FloatRange(min=0), default=1.0, help='Saturation factor (1.0 = neutral)')
@click.option('--preview-swatch', type=click.Path(dir_okay=False), help='Also write a parameter preview swatch')
@click.option('--preview-size', type=click.IntRange(min=1), default=120, help='Swatch size in pixels')
@click.option('--source-preview', type=click.Path(dir_okay=False), help='Also write a display-sized source copy')
@click.option('--display-width', type=click.IntRange(min=1), default=DEFAULT_DISPLAY_WIDTH,
              help='Width of the source preview')
@click.option('--list-modes', is_flag=True, help='List render modes')
def main(input, output, cell_size, padding, background, contrast, saturation,
         preview_swatch, preview_size, source_preview, display_width, list_modes):
    """Convert an image into a grid of colored dots."""

    if list_modes:
        click.echo("Available modes:")
        for name in all_mode_names():
            click.echo(f"  - {name}")
        return

    if not input:
        raise click.UsageError("INPUT argument is required (unless using --list-modes)")

    _warn_range("cell-size", cell_size, CELL_SIZE_RANGE)
    _warn_range("padding", padding, PADDING_RANGE)
    if padding >= cell_size:
        click.echo(f"Warning: padding {padding} >= cell size {cell_size}; dots use the minimum radius", err=True)

    params = GridParameters(
        cell_size=cell_size,
        padding=padding,
        contrast=contrast,
        saturation=saturation,
        background=background,
    )

    input_path = Path(input)
    output_path = Path(output) if output else input_path.parent / f"{input_path.stem}_dots.png"

    with RenderSession() as session:
        try:
            session.set_source(input_path)
        except ImageDecodeError as e:
            click.echo(f"Error loading image: {e}", err=True)
            sys.exit(1)

        try:
            result = session.render(params)
        except (DotPatternError, ValueError, OSError) as e:
            click.echo(f"Error processing image: {e}", err=True)
            sys.exit(1)

        try:
            output_path.write_bytes(result.png)
            click.echo(f"Saved: {output_path}")
        except OSError as e:
            click.echo(f"Error saving image: {e}", err=True)
            sys.exit(1)

        if preview_swatch:
            swatch_params = PreviewParameters(
                radius=cell_size,
                padding=padding,
                background=background,
                size=preview_size,
            )
            _save(session.preview(swatch_params), Path(preview_swatch))

        if source_preview:
            _save(session.source_preview(display_width), Path(source_preview))


def _save(image, path: Path) -> None:
    """Save an image as PNG, exiting on failure."""
    try:
        image.save(path, format="PNG")
        click.echo(f"Saved: {path}")
    except (OSError, ValueError) as e:
        click.echo(f"Error saving image: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
