"""
Payment-proof image compression.
"""

from __future__ import annotations

import io

import pytest
from PIL import Image

from core.errors import ValidationError
from payments import imaging


def _open(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def test_large_image_is_downscaled_keeping_aspect_ratio(make_image):
    out = imaging.compress_image(make_image((2400, 1600)))

    img = _open(out)
    assert img.format == "WEBP"
    assert img.size == (1200, 800)


def test_tall_image_fits_bounding_box(make_image):
    img = _open(imaging.compress_image(make_image((1000, 3000))))

    assert img.size == (400, 1200)


def test_small_image_is_not_enlarged(make_image):
    img = _open(imaging.compress_image(make_image((300, 200))))

    assert img.size == (300, 200)


def test_transparent_image_keeps_alpha(make_image):
    raw = make_image((500, 500), mode="RGBA", color=(10, 20, 30, 128))

    img = _open(imaging.compress_image(raw))

    assert img.mode == "RGBA"


def test_grayscale_jpeg_is_accepted(make_image):
    raw = make_image((1600, 1600), mode="L", fmt="JPEG", color=128)

    img = _open(imaging.compress_image(raw))

    assert img.format == "WEBP"
    assert img.size == (1200, 1200)


def test_compression_shrinks_a_noisy_photo():
    noisy = Image.effect_noise((1600, 1200), 64).convert("RGB")
    buf = io.BytesIO()
    noisy.save(buf, format="PNG")
    raw = buf.getvalue()

    assert len(imaging.compress_image(raw)) < len(raw)


@pytest.mark.parametrize("raw", [b"", b"definitely not an image", b"\x89PNG\r\n\x1a\n\x00\x00"])
def test_unreadable_input_is_a_validation_error(raw):
    with pytest.raises(ValidationError):
        imaging.compress_image(raw)
