import io

import pytest
from PIL import Image


@pytest.fixture
def uniform_image():
    return Image.new("RGBA", (100, 100), (200, 100, 50, 255))


@pytest.fixture
def gradient_image():
    width, height = 64, 48
    img = Image.new("RGB", (width, height))
    img.putdata([((x * 4) % 256, (y * 5) % 256, (x + y) % 256) for y in range(height) for x in range(width)])
    return img


@pytest.fixture
def png_bytes(gradient_image):
    buf = io.BytesIO()
    gradient_image.save(buf, format="PNG")
    return buf.getvalue()
