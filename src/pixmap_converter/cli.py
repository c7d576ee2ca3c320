"""Command line interface for the pixmap converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from datetime import datetime
from pathlib import Path

from .converter import ConvertOptions, Format, convert, parse_color
from .errors import ConversionError

FORMAT_NAMES = ", ".join(fmt.value for fmt in Format)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Convert images between plain-text PBM/PGM/PPM (p1, p2, p3), XPM2 (xpm),\n"
            "a Sixel-style palette row format (sxl), BMP (bmp) and base64 BMP (b64).\n"
            "Without --raw or --output the result is written to <from>-<to>-<timestamp>.<to>."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "input",
        nargs="?",
        help="Input file, or - to read from stdin",
    )
    parser.add_argument(
        "-s",
        "--string",
        help="Convert the given document text instead of reading a file",
    )
    parser.add_argument(
        "-f",
        "--from",
        dest="input_format",
        required=True,
        help=f"Input format ({FORMAT_NAMES})",
    )
    parser.add_argument(
        "-t",
        "--to",
        dest="output_format",
        required=True,
        help=f"Output format ({FORMAT_NAMES})",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Write the result to stdout instead of a file",
    )
    parser.add_argument("-o", "--output", type=Path, help="Explicit output file path")
    parser.add_argument(
        "-d",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for generated output file names (default: current directory)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing files without prompting",
    )
    parser.add_argument(
        "--sixel-fill",
        default="0,0,0",
        help="Color for cells missing from short Sixel rows (e.g., 0,0,0 or #000000)",
    )
    parser.add_argument(
        "--xpm-cpp",
        type=int,
        help="Force the XPM2 chars-per-pixel width (default: smallest width that fits the palette)",
    )
    return parser


def read_input(args: argparse.Namespace) -> bytes:
    if args.string is not None:
        if args.input is not None:
            raise ConversionError("Pass either an input file or --string, not both")
        return args.string.encode("utf-8")
    if args.input is None:
        raise ConversionError("No input given (pass a file path, - for stdin, or --string)")
    if args.input == "-":
        return sys.stdin.buffer.read()
    path = Path(args.input)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise ConversionError(f"Input file not found: {path}") from exc
    except OSError as exc:
        raise ConversionError(f"Failed to read input: {path}") from exc


def default_output_name(input_format: str, output_format: str, now: datetime | None = None) -> str:
    timestamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    return f"{input_format}-{output_format}-{timestamp}.{output_format}"


def write_output(result: str | bytes, target: Path, force: bool) -> None:
    if target.exists() and not force:
        raise ConversionError(f"Output file already exists (use --force to overwrite): {target}")
    target.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(result, bytes):
        target.write_bytes(result)
    else:
        target.write_text(result)
    print(f"wrote {target}")


def write_raw(result: str | bytes) -> None:
    if isinstance(result, bytes):
        sys.stdout.buffer.write(result)
        sys.stdout.buffer.flush()
    else:
        print(result)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        input_format = Format.parse(args.input_format)
        output_format = Format.parse(args.output_format)

        options = ConvertOptions()
        options.sixel_fill = parse_color(args.sixel_fill)
        options.xpm_chars_per_pixel = args.xpm_cpp
        if options.xpm_chars_per_pixel is not None and options.xpm_chars_per_pixel < 1:
            raise ConversionError("--xpm-cpp must be at least 1")

        data = read_input(args)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = convert(data, input_format, output_format, options)
        for warning in caught:
            print(f"Warning: {warning.message}", file=sys.stderr)

        if args.raw:
            write_raw(result)
        else:
            target = args.output or args.output_dir / default_output_name(
                input_format.value, output_format.value
            )
            write_output(result, target, args.force)
        return 0
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
