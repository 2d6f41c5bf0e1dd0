"""Main CLI entry point for shapedecode."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_file, load_module
from ..codec import from_json, to_json

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(verbose: bool) -> None:
    """Send library debug logs to stderr when ``verbose`` is set."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def decode_file(target_spec: str, input_path: str | None) -> str:
    """Decode JSON into ``FILE:TYPE`` and return it re-encoded.

    Args:
        target_spec: ``path/to/module.py:TypeName``
        input_path: JSON file to read; stdin when None

    Returns:
        The decoded value as indented JSON
    """
    file_name, sep, type_name = target_spec.rpartition(":")
    if not sep or not file_name or not type_name:
        raise ValueError(f"Expected FILE:TYPE, got {target_spec!r}")

    file_path = Path(file_name)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    module = load_module(file_path)
    try:
        target = getattr(module, type_name)
    except AttributeError:
        raise ValueError(f"{file_path} defines no {type_name!r}") from None

    if input_path is None:
        text = sys.stdin.read()
    else:
        text = Path(input_path).read_text(encoding="utf-8")

    value = from_json(target, text)
    return to_json(value, target, indent=2)


def main() -> int:
    """Main entry point for the shapedecode CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="shapedecode: structured decoding for Python types",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  shapedecode --analyze records.py                      Show record wire layouts
  shapedecode --decode records.py:User --input u.json   Decode a JSON document
  shapedecode --version                                 Show version
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Show the wire layout of every Record class in FILE",
    )

    parser.add_argument(
        "--decode",
        metavar="FILE:TYPE",
        type=str,
        help="Decode JSON into TYPE from FILE and print it re-encoded",
    )

    parser.add_argument(
        "--input",
        metavar="PATH",
        type=str,
        help="JSON input for --decode (default: stdin)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"shapedecode {__version__}",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    # Handle --analyze
    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except Exception as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    # Handle --decode
    if args.decode:
        try:
            print(decode_file(args.decode, args.input))
            return 0
        except Exception as e:
            print(f"Error decoding: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
