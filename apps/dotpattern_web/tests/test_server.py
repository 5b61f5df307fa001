import base64
import io
import threading

import pytest
import requests
from PIL import Image

from apps.dotpattern_web.main import _parse_args
from apps.dotpattern_web.server import MAX_PREVIEW_SIZE, Defaults, make_server


@pytest.fixture(scope="module")
def base_url():
    httpd = make_server("127.0.0.1", 0)
    thread = threading.Thread(target=httpd.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)
    thread.start()
    host, port = httpd.server_address[:2]
    yield f"http://{host}:{port}"
    httpd.shutdown()
    httpd.server_close()


def _png(size=(40, 20), color=(200, 100, 50)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def _decode_data_url(url):
    prefix = "data:image/png;base64,"
    assert url.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(url[len(prefix):])))


def test_index_page(base_url):
    resp = requests.get(base_url + "/")
    assert resp.status_code == 200
    assert "Dot Pattern" in resp.text


def test_unknown_path(base_url):
    assert requests.get(base_url + "/nope").status_code == 404
    assert requests.post(base_url + "/nope", data=b"x").status_code == 404


def test_preview_swatch(base_url):
    resp = requests.get(base_url + "/api/preview", params={"cell_size": 10, "padding": 2, "background": "#ffffff"})

    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "image/png"
    img = Image.open(io.BytesIO(resp.content))
    assert img.size == (120, 120)
    assert img.convert("RGB").getpixel((119, 119)) == (255, 255, 255)


def test_preview_rejects_bad_params(base_url):
    assert requests.get(base_url + "/api/preview", params={"cell_size": "abc"}).status_code == 400
    assert requests.get(base_url + "/api/preview", params={"size": MAX_PREVIEW_SIZE + 1}).status_code == 400


def test_render(base_url):
    resp = requests.post(
        base_url + "/api/dotpattern",
        files={"image": ("photo.png", _png(), "image/png")},
        data={"cell_size": "10", "padding": "2", "background": "#000000", "display_width": "20"},
    )

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["ok"] is True
    assert (payload["width"], payload["height"]) == (40, 20)

    result = _decode_data_url(payload["result"])
    assert result.size == (40, 20)
    assert result.convert("RGB").getpixel((5, 5)) == (200, 100, 50)
    assert _decode_data_url(payload["source"]).size == (20, 10)


def test_render_without_image(base_url):
    resp = requests.post(base_url + "/api/dotpattern", files={"cell_size": (None, "10")})

    assert resp.status_code == 400
    assert resp.json()["ok"] is False


def test_render_with_bad_image(base_url):
    resp = requests.post(base_url + "/api/dotpattern", files={"image": ("x.png", b"garbage", "image/png")})

    assert resp.status_code == 400
    assert "unsupported image" in resp.json()["error"]


def test_render_with_bad_params(base_url):
    resp = requests.post(
        base_url + "/api/dotpattern",
        files={"image": ("photo.png", _png(), "image/png")},
        data={"cell_size": "0"},
    )
    assert resp.status_code == 400


def test_render_requires_multipart(base_url):
    resp = requests.post(base_url + "/api/dotpattern", json={"image": "x"})
    assert resp.status_code == 400


def test_render_with_oversized_image(base_url):
    buf = io.BytesIO()
    Image.new("1", (14000, 14000)).save(buf, format="PNG")

    resp = requests.post(base_url + "/api/dotpattern", files={"image": ("big.png", buf.getvalue(), "image/png")})

    assert resp.status_code == 400
    assert resp.json()["ok"] is False


def test_entry_point_defaults():
    args = _parse_args(Defaults(), [])
    assert (args.host, args.port, args.debug) == ("127.0.0.1", 8080, False)

    args = _parse_args(Defaults(), ["--port", "9000", "--debug"])
    assert (args.port, args.debug) == (9000, True)
