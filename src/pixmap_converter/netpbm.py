"""Plain-text PBM/PGM/PPM (P1/P2/P3) codecs and the shared header parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence

from .errors import FormatMismatchError, InvalidMaxColorError, MalformedHeaderError, PixelDataError
from .pixels import BLACK, WHITE, Color, PixelGrid, parse_channel, parse_int, tokenize

PixelParser = Callable[[Sequence[str]], List[Color]]


@dataclass(frozen=True)
class Header:
    tag: str
    width: int
    height: int
    max_color: int
    size: int  # number of tokens consumed


def header_int(tokens: Sequence[str], index: int, name: str, positive: bool = True) -> int:
    try:
        raw = tokens[index]
    except IndexError:
        raise MalformedHeaderError(f"Missing {name} in header") from None
    try:
        value = parse_int(raw)
    except ValueError as exc:
        raise MalformedHeaderError(f"Invalid {name} in header: {raw!r}") from exc
    if positive and value <= 0:
        raise MalformedHeaderError(f"{name.capitalize()} must be positive, got {value}")
    return value


def parse_header(tokens: Sequence[str], expected_tag: str) -> Header:
    """Validate the leading header tokens against ``expected_tag``.

    P1 has no max color token (implicit max 1); every other format carries one
    as its fourth token.
    """

    tag = expected_tag.upper()
    actual = tokens[0].strip().upper() if tokens else None
    if actual != tag:
        raise FormatMismatchError(tag, actual)

    width = header_int(tokens, 1, "width")
    height = header_int(tokens, 2, "height")
    if tag == "P1":
        return Header(tag, width, height, 1, 3)
    max_color = header_int(tokens, 3, "max color value", positive=False)
    return Header(tag, width, height, max_color, 4)


def _parse_bits(body: Sequence[str]) -> List[Color]:
    return [WHITE if c == "1" else BLACK for line in body for c in line]


def _parse_grey(body: Sequence[str]) -> List[Color]:
    pixels: List[Color] = []
    for token in body:
        value = parse_channel(token)
        pixels.append((value, value, value))
    return pixels


def _parse_rgb(body: Sequence[str]) -> List[Color]:
    if len(body) % 3:
        raise ValueError(f"{len(body)} values do not form complete RGB triples")
    return [
        (parse_channel(body[i]), parse_channel(body[i + 1]), parse_channel(body[i + 2]))
        for i in range(0, len(body), 3)
    ]


def _decode(text: str, tag: str, expected_max_color: int, pixel_parser: PixelParser) -> PixelGrid:
    tokens = tokenize(text)
    header = parse_header(tokens, tag)
    if header.max_color != expected_max_color:
        raise InvalidMaxColorError(expected_max_color, header.max_color)

    try:
        pixels = pixel_parser(tokens[header.size :])
        expected = header.width * header.height
        if len(pixels) != expected:
            raise ValueError(f"expected {expected} pixels, got {len(pixels)}")
    except ValueError as exc:
        raise PixelDataError(f"Error parsing {tag} data: {exc}") from exc

    return PixelGrid(header.height, header.width, tuple(pixels))


def decode_p1(text: str) -> PixelGrid:
    return _decode(text, "P1", 1, _parse_bits)


def decode_p2(text: str) -> PixelGrid:
    return _decode(text, "P2", 255, _parse_grey)


def decode_p3(text: str) -> PixelGrid:
    return _decode(text, "P3", 255, _parse_rgb)


def _header_text(grid: PixelGrid, tag: str, include_max_color: bool = True) -> str:
    lines = [tag, f"{grid.width} {grid.height}"]
    if include_max_color:
        lines.append("255")
    return "\n".join(lines) + "\n"


def _body_text(grid: PixelGrid, pixel_text: Callable[[Color], str]) -> str:
    return "\n".join(" ".join(pixel_text(pixel) for pixel in row) for row in grid.rows())


def encode_p1(grid: PixelGrid) -> str:
    # Anything but pure white becomes black.
    return _header_text(grid, "P1", include_max_color=False) + _body_text(
        grid, lambda pixel: "1" if pixel == WHITE else "0"
    )


def encode_p2(grid: PixelGrid) -> str:
    return _header_text(grid, "P2") + _body_text(grid, lambda pixel: str(sum(pixel) // 3))


def encode_p3(grid: PixelGrid) -> str:
    return _header_text(grid, "P3") + _body_text(grid, lambda pixel: "{} {} {}".format(*pixel))
