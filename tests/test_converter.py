import base64

import pytest

from pixmap_converter import (
    ConversionError,
    ConvertOptions,
    EmptyPayloadError,
    Format,
    InvalidBitmapError,
    PixelGrid,
    UnsupportedFormatError,
    convert,
    decode,
    encode,
    parse_color,
)

RED = (255, 0, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


def _sample_grid() -> PixelGrid:
    return PixelGrid.from_rows(
        [
            [RED, WHITE, (12, 34, 56)],
            [BLUE, RED, (0, 0, 0)],
        ]
    )


def test_format_parse_is_case_insensitive():
    assert Format.parse("P3") is Format.P3
    assert Format.parse(" XPM ") is Format.XPM
    assert Format.parse("Sxl") is Format.SIXEL
    assert Format.parse(Format.BASE64) is Format.BASE64


def test_unknown_format_is_named_in_error():
    with pytest.raises(UnsupportedFormatError) as excinfo:
        Format.parse("foo")

    assert excinfo.value.value == "foo"
    assert "foo" in str(excinfo.value)


def test_dispatch_rejects_unknown_formats():
    with pytest.raises(UnsupportedFormatError):
        decode("P3 1 1 255 0 0 0", "foo")
    with pytest.raises(UnsupportedFormatError):
        encode(_sample_grid(), "png")
    with pytest.raises(UnsupportedFormatError) as excinfo:
        convert("P3 1 1 255 0 0 0", "p3", "foo")
    assert excinfo.value.value == "foo"


@pytest.mark.parametrize("fmt", ["p3", "xpm", "sxl", "bmp", "b64"])
def test_lossless_round_trips(fmt):
    grid = _sample_grid()

    assert decode(encode(grid, fmt), fmt) == grid


def test_p1_round_trip():
    decoded = decode(encode(_sample_grid(), "p1"), "p1")

    assert decoded.pixels == ((0, 0, 0), WHITE, (0, 0, 0), (0, 0, 0), (0, 0, 0), (0, 0, 0))


def test_p2_round_trip():
    decoded = decode(encode(_sample_grid(), "P2"), "P2")

    assert [pixel[0] for pixel in decoded.pixels] == [85, 255, 34, 85, 85, 0]
    assert all(r == g == b for r, g, b in decoded.pixels)


def test_encode_returns_bytes_only_for_bmp():
    grid = _sample_grid()

    assert isinstance(encode(grid, "bmp"), bytes)
    for fmt in ("p1", "p2", "p3", "xpm", "sxl", "b64"):
        assert isinstance(encode(grid, fmt), str)


def test_decode_accepts_utf8_bytes_for_text_formats():
    assert decode(b"P3 1 1 255 10 20 30", "p3").pixels == ((10, 20, 30),)


def test_decode_rejects_undecodable_text():
    with pytest.raises(ConversionError):
        decode(b"\xff\xfe", "p3")


def test_convert_between_text_formats():
    assert convert("P3\n1 1\n255\n10 20 30\n", "p3", "p2") == "P2\n1 1\n255\n20"


def test_convert_sixel_with_crlf_line_breaks():
    text = "#0;255,0,0\r\n#1;0,0,255\r\n0;1\r\n"

    assert convert(text, "sxl", "p3") == "P3\n2 1\n255\n255 0 0 0 0 255"


def test_convert_through_bitmap():
    p3 = encode(_sample_grid(), "p3")
    bmp = convert(p3, "p3", "bmp")

    assert bmp[:2] == b"BM"
    assert convert(bmp, "bmp", "p3") == p3


def test_direct_bitmap_base64_path_keeps_bytes():
    bmp = encode(_sample_grid(), "bmp")
    b64 = convert(bmp, "bmp", "b64")

    assert b64 == base64.b64encode(bmp).decode("ascii")
    assert convert(b64, "b64", "bmp") == bmp


def test_direct_path_does_not_parse_the_bitmap():
    payload = b"not really a bitmap"

    assert convert(convert(payload, "bmp", "b64"), "b64", "bmp") == payload


def test_empty_bitmap_inputs():
    with pytest.raises(InvalidBitmapError):
        decode(b"", "bmp")
    with pytest.raises(EmptyPayloadError):
        decode("", "b64")
    with pytest.raises(EmptyPayloadError):
        convert("", "b64", "bmp")
    with pytest.raises(EmptyPayloadError):
        convert(b"", "bmp", "b64")


def test_b64_to_text_format_validates_bitmap():
    with pytest.raises(InvalidBitmapError):
        convert(base64.b64encode(b"junk").decode("ascii"), "b64", "p3")


def test_bitmap_input_must_be_bytes():
    with pytest.raises(TypeError):
        decode("BM", "bmp")


def test_options_reach_the_codecs():
    options = ConvertOptions(sixel_fill=(9, 9, 9), xpm_chars_per_pixel=2)

    with pytest.warns(RuntimeWarning):
        grid = decode("#0;1,2,3\n0;0\n0\n", "sxl", options)
    assert grid.pixels == ((1, 2, 3), (1, 2, 3), (1, 2, 3), (9, 9, 9))

    xpm = encode(grid, "xpm", options)
    assert xpm.splitlines()[3] == "2"
    assert decode(xpm, "xpm") == grid


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0,0,0", (0, 0, 0)),
        ("10, 20, 30", (10, 20, 30)),
        ("#FF8000", (255, 128, 0)),
        ("ff8000", (255, 128, 0)),
    ],
)
def test_parse_color(text, expected):
    assert parse_color(text) == expected


@pytest.mark.parametrize("text", ["1,2", "300,0,0", "#GG0000", "#FFF"])
def test_parse_color_rejects_bad_values(text):
    with pytest.raises(ConversionError):
        parse_color(text)
