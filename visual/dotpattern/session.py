"""Image loading, PNG export and single-flight render sessions."""

import base64
import io
import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from PIL import Image, ImageOps, UnidentifiedImageError

from .dots import render_dots
from .preview import DEFAULT_DISPLAY_WIDTH, render_preview, scale_to_width
from .types import GridParameters, PreviewParameters


class DotPatternError(Exception):
    pass


class ImageDecodeError(DotPatternError):
    pass


class NoSourceImageError(DotPatternError):
    pass


class StaleRenderError(DotPatternError):
    pass


def load_image(source: str | Path | bytes | BinaryIO) -> Image.Image:
    """
    Load and fully decode an image.

    Args:
        source: File path, raw bytes or a binary file object

    Returns:
        PIL Image in RGBA mode, EXIF orientation applied

    Raises:
        ImageDecodeError: If the data cannot be decoded
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        image = Image.open(source)
        image.load()
        image = ImageOps.exif_transpose(image)
        if image.mode != "RGBA":
            image = image.convert("RGBA")
    except (Image.DecompressionBombError, UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Failed to load image: {e}") from e

    return image


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(image: Image.Image) -> str:
    """Encode an image as a PNG data URL."""
    encoded = base64.b64encode(encode_png(image)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


@dataclass
class RenderResult:
    generation: int
    params: GridParameters
    image: Image.Image
    png: bytes

    @property
    def data_url(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.png).decode("ascii")


class RenderSession:
    """
    Holds a source image and renders it on a background worker.

    Renders follow a cancel-and-replace policy: every submit() bumps a
    generation counter and cancels the previous request if it has not
    started. A render that finishes after a newer request was made is
    discarded, so the last requested render wins.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dotpattern")
        self._source: Image.Image | None = None
        self._generation = 0
        self._pending: Future | None = None
        self._latest: RenderResult | None = None

    def __enter__(self) -> "RenderSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def source(self) -> Image.Image | None:
        return self._source

    @property
    def latest(self) -> RenderResult | None:
        return self._latest

    @property
    def generation(self) -> int:
        return self._generation

    def set_source(self, source: str | Path | bytes | BinaryIO | Image.Image) -> Image.Image:
        """
        Replace the source image.

        Any in-flight render becomes stale and the latest result is cleared.

        Raises:
            ImageDecodeError: If the source cannot be decoded
        """
        if isinstance(source, Image.Image):
            image = source if source.mode == "RGBA" else source.convert("RGBA")
        else:
            image = load_image(source)

        with self._lock:
            self._source = image
            self._generation += 1
            self._latest = None
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

        logging.info("Loaded source image %dx%d", image.width, image.height)
        return image

    def submit(self, params: GridParameters) -> "Future[RenderResult | None]":
        """
        Queue a full-resolution render of the current source.

        Returns:
            Future resolving to the RenderResult, or None if a newer
            request superseded this one

        Raises:
            NoSourceImageError: If no source image is loaded
            ValueError: If params are out of range
        """
        params.validate()

        with self._lock:
            if self._source is None:
                raise NoSourceImageError("No source image loaded; load an image before rendering")
            self._generation += 1
            generation = self._generation
            source = self._source
            if self._pending is not None:
                self._pending.cancel()
            future = self._executor.submit(self._run, generation, source, params)
            self._pending = future

        logging.debug("Submitted render generation=%d params=%s", generation, params)
        return future

    def render(self, params: GridParameters) -> RenderResult:
        """
        Render synchronously.

        Raises:
            NoSourceImageError: If no source image is loaded
            StaleRenderError: If a newer request superseded this one
        """
        future = self.submit(params)
        try:
            result = future.result()
        except CancelledError as e:
            raise StaleRenderError("Render was superseded before it started") from e
        if result is None:
            raise StaleRenderError("Render was superseded by a newer request")
        return result

    def _run(self, generation: int, source: Image.Image, params: GridParameters) -> RenderResult | None:
        with self._lock:
            stale = generation != self._generation
        if stale:
            logging.debug("Skipping stale render generation=%d", generation)
            return None

        image = render_dots(source, params)
        result = RenderResult(generation=generation, params=params, image=image, png=encode_png(image))

        with self._lock:
            if generation != self._generation:
                logging.debug("Discarding stale render generation=%d", generation)
                return None
            self._latest = result

        logging.info("Rendered %dx%d dot pattern (generation=%d)", image.width, image.height, generation)
        return result

    def preview(self, params: PreviewParameters = PreviewParameters()) -> Image.Image:
        return render_preview(params)

    def source_preview(self, width: int = DEFAULT_DISPLAY_WIDTH) -> Image.Image:
        """
        Display-sized copy of the source image.

        Raises:
            NoSourceImageError: If no source image is loaded
        """
        source = self._source
        if source is None:
            raise NoSourceImageError("No source image loaded")
        return scale_to_width(source, width)

    def close(self) -> None:
        self._executor.shutdown(wait=True, cancel_futures=True)
