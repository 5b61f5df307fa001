from __future__ import annotations

import io
import json
import logging
import mimetypes
from dataclasses import dataclass
from email.parser import BytesParser
from email.policy import default
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlparse

from visual.dotpattern import (
    DEFAULT_DISPLAY_WIDTH,
    GridParameters,
    ImageDecodeError,
    PreviewParameters,
    RenderMode,
    encode_png,
    load_image,
    parse_color,
    process,
    to_data_url,
)

WEBROOT = Path(__file__).parent / "webroot"

MAX_UPLOAD_BYTES = 20 * 1024 * 1024  # 20MB
MAX_PREVIEW_SIZE = 1024


@dataclass(frozen=True)
class Defaults:
    cell_size: int = 10
    padding: int = 2
    background: str = "#000000"
    contrast: float = 1.0
    saturation: float = 1.0
    preview_size: int = 120
    display_width: int = DEFAULT_DISPLAY_WIDTH
    host: str = "127.0.0.1"
    port: int = 8080


class ParamError(ValueError):
    pass


def _field(fields: dict[str, str], name: str, fallback: Any, convert: Any) -> Any:
    raw = fields.get(name)
    if raw is None or raw == "":
        return fallback
    try:
        return convert(raw)
    except ValueError as e:
        raise ParamError(f"Invalid {name}: {raw!r}") from e


def _grid_params(fields: dict[str, str], defaults: Defaults) -> GridParameters:
    params = GridParameters(
        cell_size=_field(fields, "cell_size", defaults.cell_size, int),
        padding=_field(fields, "padding", defaults.padding, int),
        contrast=_field(fields, "contrast", defaults.contrast, float),
        saturation=_field(fields, "saturation", defaults.saturation, float),
        background=_field(fields, "background", parse_color(defaults.background), parse_color),
    )
    try:
        return params.validate()
    except ValueError as e:
        raise ParamError(str(e)) from e


def _preview_params(fields: dict[str, str], defaults: Defaults) -> PreviewParameters:
    params = PreviewParameters(
        radius=_field(fields, "cell_size", defaults.cell_size, int),
        padding=_field(fields, "padding", defaults.padding, int),
        background=_field(fields, "background", parse_color(defaults.background), parse_color),
        size=_field(fields, "size", defaults.preview_size, int),
    )
    if params.size > MAX_PREVIEW_SIZE:
        raise ParamError(f"Preview size must be <= {MAX_PREVIEW_SIZE}")
    try:
        return params.validate()
    except ValueError as e:
        raise ParamError(str(e)) from e


def _read_exact(handler: BaseHTTPRequestHandler, length: int) -> bytes:
    remaining = length
    chunks: list[bytes] = []
    while remaining > 0:
        chunk = handler.rfile.read(min(remaining, 64 * 1024))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _extract_multipart_fields(body: bytes, content_type: str) -> dict[str, bytes]:
    header = f"Content-Type: {content_type}\r\nMIME-Version: 1.0\r\n\r\n".encode("utf-8")
    msg = BytesParser(policy=default).parsebytes(header + body)

    fields: dict[str, bytes] = {}
    if not msg.is_multipart():
        return fields

    for part in msg.iter_parts():
        disposition = part.get("Content-Disposition", "")
        if "form-data" not in disposition:
            continue
        name = part.get_param("name", header="content-disposition")
        if not name or name in fields:
            continue
        payload = part.get_payload(decode=True)
        if payload is not None:
            fields[name] = payload

    return fields


class DotPatternHandler(BaseHTTPRequestHandler):
    server_version = "DotPatternWeb/0.1"
    defaults = Defaults()

    def log_message(self, fmt: str, *args: Any) -> None:
        logging.info("%s - %s", self.address_string(), fmt % args)

    def _send_bytes(self, status: int, content_type: str, data: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.send_header("Cache-Control", "no-store")
        self.end_headers()
        self.wfile.write(data)

    def _send_json(self, status: int, payload: dict[str, Any]) -> None:
        data = json.dumps(payload).encode("utf-8")
        self._send_bytes(status, "application/json; charset=utf-8", data)

    def _send_file(self, path: Path) -> None:
        if not path.exists() or not path.is_file():
            self.send_error(HTTPStatus.NOT_FOUND)
            return

        base = WEBROOT.absolute()
        target = path.absolute()
        try:
            target.relative_to(base)
        except ValueError:
            self.send_error(HTTPStatus.FORBIDDEN)
            return

        ctype, _ = mimetypes.guess_type(str(target))
        content_type = ctype or "application/octet-stream"

        try:
            data = target.read_bytes()
        except OSError:
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR)
            return

        self._send_bytes(HTTPStatus.OK, content_type, data)

    def do_GET(self) -> None:  # noqa: N802 (stdlib naming)
        parsed = urlparse(self.path)
        path = parsed.path

        if path in ("/", "/dotpattern"):
            self._send_file(WEBROOT / "index.html")
            return
        if path == "/api/preview":
            self._handle_preview(parsed.query)
            return
        self.send_error(HTTPStatus.NOT_FOUND)

    def _handle_preview(self, query: str) -> None:
        fields = {k: v[-1] for k, v in parse_qs(query).items()}
        try:
            params = _preview_params(fields, self.defaults)
        except ParamError as e:
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": str(e)})
            return

        swatch = process(None, RenderMode.PREVIEW, params)
        self._send_bytes(HTTPStatus.OK, "image/png", encode_png(swatch))

    def do_POST(self) -> None:  # noqa: N802 (stdlib naming)
        parsed = urlparse(self.path)
        if parsed.path != "/api/dotpattern":
            self.send_error(HTTPStatus.NOT_FOUND)
            return

        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            length = 0

        if length <= 0:
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": "Missing Content-Length"})
            return
        if length > MAX_UPLOAD_BYTES:
            self._send_json(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, {"ok": False, "error": "Upload too large"})
            return

        content_type = self.headers.get("Content-Type", "")
        if not content_type.startswith("multipart/form-data"):
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": "Expected multipart/form-data"})
            return

        body = _read_exact(self, length)
        if len(body) != length:
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": "Incomplete request body"})
            return

        parts = _extract_multipart_fields(body, content_type)
        file_bytes = parts.pop("image", None)
        if not file_bytes:
            logging.warning("Render requested without an image")
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": "Please select an image first."})
            return

        fields = {k: v.decode("utf-8", errors="replace").strip() for k, v in parts.items()}
        try:
            params = _grid_params(fields, self.defaults)
            display_width = _field(fields, "display_width", self.defaults.display_width, int)
        except ParamError as e:
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": str(e)})
            return

        try:
            img = load_image(io.BytesIO(file_bytes))
        except ImageDecodeError as e:
            logging.warning("Invalid image upload: %s", e)
            self._send_json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": "Invalid or unsupported image format."})
            return

        try:
            out_img = process(img, RenderMode.FULL, params)
            source_img = process(img, RenderMode.SOURCE, min(max(1, display_width), img.width))
        except Exception:
            logging.exception("Dot pattern render failed for params=%s", params)
            self._send_json(HTTPStatus.INTERNAL_SERVER_ERROR, {"ok": False, "error": "Processing failed."})
            return

        self._send_json(
            HTTPStatus.OK,
            {
                "ok": True,
                "width": out_img.width,
                "height": out_img.height,
                "result": to_data_url(out_img),
                "source": to_data_url(source_img),
            },
        )


def make_server(host: str, port: int) -> ThreadingHTTPServer:
    return ThreadingHTTPServer((host, port), DotPatternHandler)


def run_server(*, host: str, port: int, debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    with make_server(host, port) as httpd:
        logging.info("Listening on http://%s:%d", host, port)
        try:
            httpd.serve_forever(poll_interval=0.2)
        except KeyboardInterrupt:
            logging.info("Shutting down")
