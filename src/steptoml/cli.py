"""Convert a step configuration file to TOML-style text.

Usage:
    steptoml settings.conf
    steptoml --input settings.conf --output settings.toml
    steptoml --tokens settings.conf
    cat settings.conf | steptoml -
"""

import argparse
import logging
import sys
from pathlib import Path

from .lexer import LexError, Token, tokenize
from .parser import ParseError, Parser
from .serializer import to_toml

logger = logging.getLogger("steptoml.cli")


def format_token(idx: int, token: Token) -> str:
    return f"[{idx}] {token.type.name} {token.value!r} {token.line}:{token.col}"


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="steptoml", description="Convert a step configuration file to TOML"
    )
    parser.add_argument("source", nargs="?", help="Path to input file ('-' for stdin)")
    parser.add_argument("-i", "--input", dest="input_file", help="Path to input file")
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Write output here instead of stdout"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Dump the token stream instead of converting"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    input_path = args.input_file or args.source
    if not input_path:
        print(f"Usage: {parser.prog} --input <file>", file=sys.stderr)
        return 1

    try:
        source = _read_source(input_path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1
    logger.debug("read %d characters from %s", len(source), input_path)

    try:
        tokens = tokenize(source)
    except LexError as e:
        print(f"Lexer error: {e}", file=sys.stderr)
        return 1

    if args.tokens:
        output = "".join(format_token(i, tok) + "\n" for i, tok in enumerate(tokens))
    else:
        try:
            document = Parser(tokens).parse_document()
        except ParseError as e:
            print(f"Parser error: {e}", file=sys.stderr)
            return 1
        output = to_toml(document)

    if args.output is not None:
        try:
            args.output.write_text(output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing file: {e}", file=sys.stderr)
            return 1
        logger.debug("wrote %s", args.output)
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
