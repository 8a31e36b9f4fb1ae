"""Screenshot post-processing with Pillow.

- png_size: dimensions of a captured PNG (full-page captures exceed the viewport)
- fit_inline: downscale a PNG until it fits the inline byte budget
"""

from __future__ import annotations

import io
import math

from PIL import Image

MIN_INLINE_WIDTH = 160


def png_size(data: bytes) -> tuple[int, int] | None:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (OSError, ValueError):
        return None


def fit_inline(data: bytes, max_bytes: int) -> tuple[bytes, tuple[int, int]] | None:
    """Return (png_bytes, (width, height)) within max_bytes, or None if it cannot fit.

    Images already within budget are returned untouched.
    """
    size = png_size(data)
    if size is None:
        return None
    if len(data) <= max_bytes:
        return data, size

    with Image.open(io.BytesIO(data)) as img:
        img.load()
        current = img.convert("RGBA") if img.mode not in {"RGB", "RGBA"} else img.copy()

    width, height = current.size
    encoded = data
    while len(encoded) > max_bytes:
        # Bytes scale roughly with area; shrink a bit more than the ratio suggests.
        factor = math.sqrt(max_bytes / len(encoded)) * 0.9
        width, height = int(width * factor), int(height * factor)
        if width < MIN_INLINE_WIDTH or height < 1:
            return None
        resized = current.resize((width, height), Image.Resampling.LANCZOS)
        buf = io.BytesIO()
        resized.save(buf, format="PNG", optimize=True)
        encoded = buf.getvalue()
    return encoded, (width, height)
