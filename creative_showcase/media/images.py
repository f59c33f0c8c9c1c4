"""
Image validation and transforms applied before media is stored.
"""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Literal, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import ValidationError

# Pillow format name -> file extension
ALLOWED_FORMATS = {"JPEG": "jpg", "PNG": "png", "GIF": "gif", "WEBP": "webp"}

CONTENT_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}


@dataclass(frozen=True)
class ImageTransform:
    """Target box for a stored image.

    crop="limit" shrinks the image to fit inside the box and never upscales.
    crop="fill" scales and centre-crops to exactly the box.
    """

    width: int
    height: int
    crop: Literal["limit", "fill"] = "limit"


ARTWORK_TRANSFORM = ImageTransform(1200, 1200, "limit")
AVATAR_TRANSFORM = ImageTransform(400, 400, "fill")
COVER_TRANSFORM = ImageTransform(1920, 640, "fill")


@dataclass(frozen=True)
class PreparedImage:
    content: bytes
    format: str
    width: int
    height: int

    @property
    def extension(self) -> str:
        return ALLOWED_FORMATS[self.format]

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES[self.format]


def apply_transform(img: Image.Image, transform: ImageTransform) -> Image.Image:
    if transform.crop == "fill":
        return ImageOps.fit(img, (transform.width, transform.height))
    limited = img.copy()
    limited.thumbnail((transform.width, transform.height))
    return limited


def prepare_image(
    content: bytes,
    transform: Optional[ImageTransform] = None,
    max_bytes: Optional[int] = None,
) -> PreparedImage:
    """Validate uploaded bytes as a supported image and apply the transform.

    Raises:
        ValidationError: empty or oversized upload, or not a JPEG/PNG/GIF/WEBP
    """
    if not content:
        raise ValidationError("No image uploaded")
    if max_bytes is not None and len(content) > max_bytes:
        raise ValidationError(
            f"Image exceeds the {max_bytes // (1024 * 1024)} MB upload limit"
        )

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            fmt = img.format
            if fmt not in ALLOWED_FORMATS:
                raise ValidationError(
                    "Unsupported image format; allowed: jpg, jpeg, png, gif, webp"
                )
            out = apply_transform(img, transform) if transform else img
            if fmt == "JPEG" and out.mode not in ("RGB", "L"):
                out = out.convert("RGB")
            buffer = io.BytesIO()
            out.save(buffer, format=fmt)
            return PreparedImage(
                content=buffer.getvalue(),
                format=fmt,
                width=out.width,
                height=out.height,
            )
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValidationError("Uploaded file is not a readable image") from e
