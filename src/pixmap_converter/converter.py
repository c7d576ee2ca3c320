"""Format dispatch: pick the codec pair for a conversion and run it."""

# Reference: supported formats
# Tag | Kind              | Layout
# ----|-------------------|-------------------------------------------------------
# p1  | text, 1-bit       | P1 / W H / rows of 0 and 1
# p2  | text, 8-bit grey  | P2 / W H / 255 / rows of grey values
# p3  | text, 8-bit color | P3 / W H / 255 / rows of "R G B"
# xpm | text, indexed     | XPM2 / W H / 256 / cpp / "code c #RRGGBB".. / rows..
# sxl | text, indexed     | "#i;R,G,B" lines, then "i;i;.." rows
# bmp | binary            | BMP container bytes
# b64 | text              | base64 of the BMP bytes

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Tuple

from . import bitmap, indexed, netpbm
from .errors import ConversionError, EmptyPayloadError, UnsupportedFormatError
from .pixels import BLACK, Color, PixelGrid


class Format(str, Enum):
    P1 = "p1"
    P2 = "p2"
    P3 = "p3"
    XPM = "xpm"
    SIXEL = "sxl"
    BMP = "bmp"
    BASE64 = "b64"

    @classmethod
    def parse(cls, name: str | Format) -> Format:
        if isinstance(name, Format):
            return name
        try:
            return cls(name.strip().lower())
        except (AttributeError, ValueError):
            raise UnsupportedFormatError(str(name)) from None


@dataclass
class ConvertOptions:
    """Options for the indexed text formats."""

    sixel_fill: Color = BLACK  # color for cells missing from short Sixel rows
    xpm_chars_per_pixel: int | None = None  # None derives the width from the palette size


def parse_color(text: str) -> Color:
    text = text.strip()
    if text.startswith("#"):
        text = text[1:]
    if "," in text:
        parts = text.split(",")
    else:
        parts = [text[i : i + 2] for i in range(0, len(text), 2)]
    if len(parts) != 3:
        raise ConversionError("Color must have exactly three components")
    base = 10 if "," in text else 16
    values = []
    for part in parts:
        part = part.strip()
        try:
            values.append(int(part, base))
        except ValueError as exc:
            raise ConversionError(f"Invalid color component: {part}") from exc
    if any(not (0 <= v <= 255) for v in values):
        raise ConversionError("Color components must be between 0 and 255")
    return tuple(values)  # type: ignore[return-value]


Decoder = Callable[[str | bytes, ConvertOptions], PixelGrid]
Encoder = Callable[[PixelGrid, ConvertOptions], str | bytes]


def _as_text(data: str | bytes) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConversionError(f"Input is not valid UTF-8 text: {exc}") from exc


def _as_bytes(data: str | bytes) -> bytes:
    if isinstance(data, str):
        raise TypeError("Bitmap input must be bytes, not str")
    return bytes(data)


_CODECS: Dict[Format, Tuple[Decoder, Encoder]] = {
    Format.P1: (
        lambda data, options: netpbm.decode_p1(_as_text(data)),
        lambda grid, options: netpbm.encode_p1(grid),
    ),
    Format.P2: (
        lambda data, options: netpbm.decode_p2(_as_text(data)),
        lambda grid, options: netpbm.encode_p2(grid),
    ),
    Format.P3: (
        lambda data, options: netpbm.decode_p3(_as_text(data)),
        lambda grid, options: netpbm.encode_p3(grid),
    ),
    Format.XPM: (
        lambda data, options: indexed.decode_xpm(_as_text(data)),
        lambda grid, options: indexed.encode_xpm(grid, options.xpm_chars_per_pixel),
    ),
    Format.SIXEL: (
        lambda data, options: indexed.decode_sixel(_as_text(data), options.sixel_fill),
        lambda grid, options: indexed.encode_sixel(grid),
    ),
    Format.BMP: (
        lambda data, options: bitmap.decode_bitmap(_as_bytes(data)),
        lambda grid, options: bitmap.encode_bitmap(grid),
    ),
    Format.BASE64: (
        lambda data, options: bitmap.decode_base64(data),
        lambda grid, options: bitmap.encode_base64(grid),
    ),
}


def decode(data: str | bytes, fmt: str | Format, options: ConvertOptions | None = None) -> PixelGrid:
    decoder, _ = _CODECS[Format.parse(fmt)]
    return decoder(data, options or ConvertOptions())


def encode(grid: PixelGrid, fmt: str | Format, options: ConvertOptions | None = None) -> str | bytes:
    """Encode ``grid``; only ``bmp`` produces bytes, every other format text."""

    _, encoder = _CODECS[Format.parse(fmt)]
    return encoder(grid, options or ConvertOptions())


def can_convert_directly(input_fmt: Format, output_fmt: Format) -> bool:
    return {input_fmt, output_fmt} == {Format.BASE64, Format.BMP}


def convert_directly(data: str | bytes, input_fmt: Format, output_fmt: Format) -> str | bytes:
    """Move between BMP bytes and their base64 text without building a grid."""

    if input_fmt is Format.BASE64 and output_fmt is Format.BMP:
        return bitmap.base64_to_bytes(data)
    if input_fmt is Format.BMP and output_fmt is Format.BASE64:
        payload = _as_bytes(data)
        if not payload:
            raise EmptyPayloadError("Bitmap data is empty")
        return bitmap.bytes_to_base64(payload)
    raise ConversionError(f"Unsupported direct conversion from {input_fmt.value} to {output_fmt.value}")


def convert(
    data: str | bytes,
    input_fmt: str | Format,
    output_fmt: str | Format,
    options: ConvertOptions | None = None,
) -> str | bytes:
    input_fmt = Format.parse(input_fmt)
    output_fmt = Format.parse(output_fmt)

    if can_convert_directly(input_fmt, output_fmt):
        return convert_directly(data, input_fmt, output_fmt)

    grid = decode(data, input_fmt, options)
    return encode(grid, output_fmt, options)
