"""BMP codec backed by Pillow, plus the base64 wrapping of BMP bytes."""

from __future__ import annotations

import base64
import io

from PIL import Image

from .errors import EmptyPayloadError, InvalidBitmapError
from .pixels import PixelGrid


def decode_bitmap(data: bytes) -> PixelGrid:
    """Read BMP bytes into a grid with a top-left origin.

    Pillow flips bottom-up BMP storage on load, and palette, greyscale or
    alpha bitmaps are flattened to RGB.
    """

    if not data:
        raise InvalidBitmapError("Bitmap data is empty")
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format != "BMP":
                raise InvalidBitmapError(f"Expected BMP data, got {img.format or 'unknown'}")
            width, height = img.size
            if width == 0 or height == 0:
                raise InvalidBitmapError("Bitmap has invalid dimensions")
            raw = img.convert("RGB").tobytes()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise InvalidBitmapError(
            f"Error parsing bitmap data: the provided data does not represent a valid bitmap ({exc})"
        ) from exc

    pixels = tuple(zip(raw[0::3], raw[1::3], raw[2::3]))
    return PixelGrid(height, width, pixels)


def encode_bitmap(grid: PixelGrid) -> bytes:
    image = Image.new("RGB", (grid.width, grid.height))
    image.putdata(list(grid.pixels))
    buffer = io.BytesIO()
    image.save(buffer, format="BMP")
    return buffer.getvalue()


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(text: str | bytes) -> bytes:
    """Decode a base64 payload, ignoring whitespace such as line wrapping."""

    try:
        if isinstance(text, bytes):
            text = text.decode("ascii")
        data = base64.b64decode("".join(text.split()), validate=True)
    except ValueError as exc:
        raise InvalidBitmapError(f"Payload is not valid base64: {exc}") from exc
    if not data:
        raise EmptyPayloadError("Decoded image data is empty")
    return data


def encode_base64(grid: PixelGrid) -> str:
    return bytes_to_base64(encode_bitmap(grid))


def decode_base64(text: str | bytes) -> PixelGrid:
    return decode_bitmap(base64_to_bytes(text))
