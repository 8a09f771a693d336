"""Prepare leaf photos for the base64 disease endpoint."""

import base64
import io
from pathlib import Path

from PIL import Image


def encode_image_base64(image_path: Path, max_size: int = 1024, quality: int = 85) -> str:
    """
    Load an image, shrink it to fit ``max_size`` and encode it as base64 JPEG.

    Args:
        image_path: Path to any format Pillow can open
        max_size: Longest side in pixels after resizing
        quality: JPEG quality

    Returns:
        Base64 text without a data: URI prefix
    """
    with Image.open(image_path) as img:
        img = img.convert("RGB")
        img.thumbnail((max_size, max_size))

        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", quality=quality)

    return base64.b64encode(buffer.getvalue()).decode("utf-8")
