"""Pixmap format converter.

Converts images between plain-text PBM/PGM/PPM (P1/P2/P3), XPM2, a simplified
Sixel-style palette row format, BMP and base64-encoded BMP. It can be invoked
through the CLI (``python -m pixmap_converter``) or imported to decode, encode
or convert documents in memory.
"""

from .converter import ConvertOptions, Format, convert, decode, encode, parse_color
from .errors import (
    ConversionError,
    EmptyPayloadError,
    FormatMismatchError,
    InvalidBitmapError,
    InvalidMaxColorError,
    MalformedHeaderError,
    PixelDataError,
    UnsupportedFormatError,
)
from .pixels import Color, PixelGrid, tokenize

__all__ = [
    "Color",
    "ConversionError",
    "ConvertOptions",
    "EmptyPayloadError",
    "Format",
    "FormatMismatchError",
    "InvalidBitmapError",
    "InvalidMaxColorError",
    "MalformedHeaderError",
    "PixelDataError",
    "PixelGrid",
    "UnsupportedFormatError",
    "convert",
    "decode",
    "encode",
    "parse_color",
    "tokenize",
]
