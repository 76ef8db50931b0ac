"""
Payment-proof image compression (Pillow).

Images are shrunk to fit a 1200x1200 box (never enlarged) and re-encoded
as WebP at quality 80 with the slowest/best encoder method.
"""

from __future__ import annotations

import io

from PIL import Image, ImageOps, UnidentifiedImageError

from core.errors import ValidationError

MAX_DIMENSION = 1200
WEBP_QUALITY = 80
WEBP_METHOD = 6  # 0 (fast) .. 6 (best)
OUTPUT_CONTENT_TYPE = "image/webp"


def _web_mode(img: Image.Image) -> Image.Image:
    if img.mode in ("RGB", "RGBA"):
        return img
    has_alpha = img.mode in ("LA", "PA") or (img.mode == "P" and "transparency" in img.info)
    return img.convert("RGBA" if has_alpha else "RGB")


def compress_image(raw: bytes) -> bytes:
    """
    Return WebP bytes for `raw`. Raises ValidationError on undecodable input.
    """
    if not raw:
        raise ValidationError("Uploaded image is empty.")

    try:
        with Image.open(io.BytesIO(raw)) as source:
            img = ImageOps.exif_transpose(source)
            img.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.Resampling.LANCZOS)
            img = _web_mode(img)

            out = io.BytesIO()
            img.save(out, format="WEBP", quality=WEBP_QUALITY, method=WEBP_METHOD)
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise ValidationError("Uploaded file is not a readable image.") from exc
    except (OSError, ValueError) as exc:
        raise ValidationError(f"Failed to process image: {exc}") from exc

    return out.getvalue()
