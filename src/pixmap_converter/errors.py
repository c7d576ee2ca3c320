"""Exceptions raised by the pixmap codecs and the dispatcher."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every conversion failure."""


class FormatMismatchError(ConversionError):
    """The document header names a different format than the one requested."""

    def __init__(self, expected: str, actual: str | None):
        self.expected = expected
        self.actual = actual
        shown = "<empty>" if actual is None else repr(actual)
        super().__init__(f"Invalid format: {shown} (expected '{expected}')")


class MalformedHeaderError(ConversionError):
    """A dimension, max color or chars-per-pixel token is missing or not a valid integer."""


class InvalidMaxColorError(ConversionError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid max color value {actual}, expected {expected}")


class PixelDataError(ConversionError):
    """The pixel body could not be parsed.

    Always raised with ``from`` so ``__cause__`` holds the underlying error.
    """


class InvalidBitmapError(ConversionError):
    """Bytes that do not form a readable, non-empty bitmap."""


class EmptyPayloadError(ConversionError):
    """A base64 payload (or raw bitmap input) decoded to zero bytes."""


class UnsupportedFormatError(ConversionError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unsupported format: {value}")
