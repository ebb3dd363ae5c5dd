from __future__ import annotations

from io import BytesIO

from PIL import Image

THUMBNAIL_CONTENT_TYPE = "image/jpeg"
THUMBNAIL_EXTENSION = ".jpg"
# Raster formats only, no SVG or GIF.
THUMBNAIL_SOURCE_TYPES = frozenset({"image/png", "image/jpeg", "image/bmp", "image/tiff"})


def generate_thumbnail(image_bytes: bytes, width: int = 400, quality: int = 75) -> bytes:
    input_buffer = BytesIO(image_bytes)
    output_buffer = BytesIO()

    with Image.open(input_buffer) as image:
        height = max(1, round(image.height * width / image.width))
        resized = image.resize((width, height))
        resized.convert("RGB").save(output_buffer, format="JPEG", quality=quality)

    return output_buffer.getvalue()
