"""In-memory pixel model shared by every codec."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

_TOKEN_DELIMITERS = re.compile(r"[ \r\n]+")
_INTEGER = re.compile(r"-?[0-9]+")


def tokenize(text: str) -> List[str]:
    """Split ``text`` on spaces, carriage returns and line feeds.

    Runs of delimiters collapse and empty tokens are never returned, so an
    empty document yields an empty list.
    """

    return [token for token in _TOKEN_DELIMITERS.split(text) if token]


def parse_int(token: str) -> int:
    """Parse a plain decimal integer token, raising ``ValueError`` otherwise."""

    if not _INTEGER.fullmatch(token):
        raise ValueError(f"invalid integer token {token!r}")
    return int(token)


def is_channel(value: int) -> bool:
    return 0 <= value <= 255


def parse_channel(token: str) -> int:
    """Parse one 0-255 color channel, raising ``ValueError`` otherwise."""

    value = parse_int(token)
    if not is_channel(value):
        raise ValueError(f"value {value} is outside 0-255")
    return value


@dataclass(frozen=True)
class PixelGrid:
    """Immutable row-major image: pixel ``(x, y)`` lives at ``y * width + x``."""

    height: int
    width: int
    pixels: Tuple[Color, ...]

    def __post_init__(self) -> None:
        if self.height <= 0 or self.width <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        pixels = tuple(tuple(color) for color in self.pixels)
        if len(pixels) != self.height * self.width:
            raise ValueError(
                f"Expected {self.height * self.width} pixels for "
                f"{self.width}x{self.height}, got {len(pixels)}"
            )
        for color in pixels:
            if len(color) != 3 or not all(is_channel(c) for c in color):
                raise ValueError(f"Invalid color value: {color}")
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Color]]) -> "PixelGrid":
        width = len(rows[0]) if rows else 0
        if any(len(row) != width for row in rows):
            raise ValueError("All rows must have the same width")
        return cls(len(rows), width, tuple(color for row in rows for color in row))

    def pixel(self, x: int, y: int) -> Color:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside {self.width}x{self.height}")
        return self.pixels[y * self.width + x]

    def rows(self) -> Iterator[Tuple[Color, ...]]:
        for y in range(self.height):
            offset = y * self.width
            yield self.pixels[offset : offset + self.width]
