"""steptoml — read step-style configuration files and render them as TOML.

Pipeline: lex source -> parse (with define constants) -> render.

Example:
    from steptoml import convert, parse

    doc = parse("(define PI 3); x := ![PI + 1];")
    assert doc["x"].value == 4
    print(convert(open("settings.conf").read()))
"""

__version__ = "0.1.0"

from .lexer import Lexer, LexError, Token, TokenType, tokenize
from .parser import ParseError, Parser, parse, parse_file
from .serializer import render_value, to_toml
from .values import (
    Array,
    Dictionary,
    Document,
    Float,
    Identifier,
    Integer,
    String,
    Value,
)


def convert(source: str) -> str:
    """Parse source text and render it as TOML-style text."""
    return to_toml(parse(source))


__all__ = [
    # Lex
    "tokenize",
    "Lexer",
    "LexError",
    "Token",
    "TokenType",
    # Parse
    "parse",
    "parse_file",
    "Parser",
    "ParseError",
    # Values
    "Value",
    "Integer",
    "Float",
    "String",
    "Identifier",
    "Array",
    "Dictionary",
    "Document",
    # Render
    "render_value",
    "to_toml",
    "convert",
]
