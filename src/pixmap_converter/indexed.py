"""Palette-based text codecs: XPM2 and the simplified Sixel row format.

Both encoders build their palette by scanning the grid row-major and giving
each newly seen color the next sequential index, so the emitted color table
order is deterministic for a given image.
"""

from __future__ import annotations

import re
import warnings
from typing import Dict, Iterable, Iterator, List, Sequence

from .errors import ConversionError, MalformedHeaderError, PixelDataError
from .netpbm import header_int, parse_header
from .pixels import BLACK, Color, PixelGrid, parse_channel, parse_int, tokenize

XPM_COLOR_CAPACITY = 256

_LINE_BREAKS = re.compile(r"[\r\n]+")


class Palette:
    """First-occurrence ordered mapping from color to index."""

    def __init__(self, colors: Iterable[Color] = ()):
        self._indices: Dict[Color, int] = {}
        for color in colors:
            self.add(color)

    def add(self, color: Color) -> int:
        index = self._indices.get(color)
        if index is None:
            index = len(self._indices)
            self._indices[color] = index
        return index

    def index(self, color: Color) -> int:
        return self._indices[color]

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._indices)


def xpm_chars_per_pixel(palette_size: int) -> int:
    """Number of hex digits needed to write every index of the palette."""

    digits = 1
    while 16**digits < palette_size:
        digits += 1
    return digits


def encode_xpm(grid: PixelGrid, chars_per_pixel: int | None = None) -> str:
    palette = Palette(grid.pixels)
    required = xpm_chars_per_pixel(len(palette))
    if chars_per_pixel is None:
        chars_per_pixel = required
    elif chars_per_pixel < required:
        raise ConversionError(
            f"{chars_per_pixel} chars per pixel cannot index {len(palette)} colors "
            f"(need at least {required})"
        )

    codes = {color: f"{index:0{chars_per_pixel}X}" for index, color in enumerate(palette)}
    lines = [
        "XPM2",
        f"{grid.width} {grid.height}",
        str(max(XPM_COLOR_CAPACITY, len(palette))),
        str(chars_per_pixel),
    ]
    for color, code in codes.items():
        lines.append("{} c #{:02X}{:02X}{:02X}".format(code, *color))
    for row in grid.rows():
        lines.append("".join(codes[pixel] for pixel in row))
    return "\n".join(lines) + "\n"


def _is_color_entry(line: str, chars_per_pixel: int) -> bool:
    rest = line[chars_per_pixel:]
    return rest.startswith(" ") and rest.split()[:1] == ["c"]


def _parse_color_entry(line: str, chars_per_pixel: int) -> Color:
    parts = line[chars_per_pixel:].split()
    if len(parts) != 2 or not parts[1].startswith("#") or len(parts[1]) != 7:
        raise ValueError(f"malformed color table line {line!r}")
    r, g, b = bytes.fromhex(parts[1][1:])
    return (r, g, b)


def _split_header_lines(lines: Sequence[str], header_tokens: int) -> int:
    """Return how many lines the header occupies; it must end on a line break."""

    consumed = 0
    for count, line in enumerate(lines, start=1):
        consumed += len(tokenize(line))
        if consumed == header_tokens:
            return count
        if consumed > header_tokens:
            break
    raise MalformedHeaderError("XPM2 header must end at a line break")


def decode_xpm(text: str) -> PixelGrid:
    tokens = tokenize(text)
    header = parse_header(tokens, "XPM2")
    if header.max_color <= 0:
        raise MalformedHeaderError(f"Color table capacity must be positive, got {header.max_color}")
    chars_per_pixel = header_int(tokens, header.size, "chars per pixel")

    lines = [line.strip(" ") for line in _LINE_BREAKS.split(text)]
    lines = [line for line in lines if line]
    body = lines[_split_header_lines(lines, header.size + 1) :]

    colors: Dict[str, Color] = {}
    try:
        position = 0
        while (
            position < len(body)
            and len(colors) < header.max_color
            and _is_color_entry(body[position], chars_per_pixel)
        ):
            line = body[position]
            code = line[:chars_per_pixel]
            if code in colors:
                raise ValueError(f"duplicate color code {code!r}")
            colors[code] = _parse_color_entry(line, chars_per_pixel)
            position += 1

        rows = body[position:]
        if len(rows) != header.height:
            raise ValueError(f"expected {header.height} pixel rows, got {len(rows)}")

        row_length = header.width * chars_per_pixel
        pixels: List[Color] = []
        for y, row in enumerate(rows):
            if len(row) != row_length:
                raise ValueError(f"row {y} has {len(row)} characters, expected {row_length}")
            for offset in range(0, row_length, chars_per_pixel):
                code = row[offset : offset + chars_per_pixel]
                if code not in colors:
                    raise ValueError(f"unmapped pixel code {code!r} in row {y}")
                pixels.append(colors[code])
    except ValueError as exc:
        raise PixelDataError(f"Error parsing XPM2 data: {exc}") from exc

    return PixelGrid(header.height, header.width, tuple(pixels))


def encode_sixel(grid: PixelGrid) -> str:
    palette = Palette(grid.pixels)
    lines = ["#{};{},{},{}".format(index, *color) for index, color in enumerate(palette)]
    for row in grid.rows():
        lines.append(";".join(str(palette.index(pixel)) for pixel in row))
    return "\n".join(lines) + "\n"


def _parse_sixel_entry(token: str) -> tuple[int, Color]:
    parts = token[1:].split(";")
    if len(parts) != 2:
        raise ValueError(f"malformed palette entry {token!r}")
    channels = parts[1].split(",")
    if len(channels) != 3:
        raise ValueError(f"palette entry {token!r} needs three channels")
    r, g, b = (parse_channel(channel) for channel in channels)
    return parse_int(parts[0]), (r, g, b)


def decode_sixel(text: str, fill: Color = BLACK) -> PixelGrid:
    """Decode palette lines (``#i;R,G,B``) followed by ``i;i;...`` rows.

    Rows shorter than the widest row are padded with ``fill`` and reported
    through a ``RuntimeWarning``.
    """

    try:
        colors: Dict[int, Color] = {}
        rows: List[List[str]] = []
        for token in tokenize(text):
            if token.startswith("#"):
                index, color = _parse_sixel_entry(token)
                if index in colors:
                    raise ValueError(f"duplicate palette index {index}")
                colors[index] = color
            else:
                rows.append(token.split(";"))
        if not rows:
            raise ValueError("no pixel rows found")

        width = max(len(row) for row in rows)
        pixels: List[Color] = []
        short_rows = 0
        for y, row in enumerate(rows):
            for part in row:
                index = parse_int(part)
                if index not in colors:
                    raise ValueError(f"unknown palette index {index} in row {y}")
                pixels.append(colors[index])
            if len(row) < width:
                pixels.extend([fill] * (width - len(row)))
                short_rows += 1
    except ValueError as exc:
        raise PixelDataError(f"Error parsing Sixel data: {exc}") from exc

    if short_rows:
        warnings.warn(
            f"{short_rows} Sixel row(s) shorter than {width} pixels were padded with {fill}",
            RuntimeWarning,
            stacklevel=2,
        )
    return PixelGrid(len(rows), width, tuple(pixels))
