"""Recursive descent parser for step configuration files.

Grammar:
    document    = (define | binding)*
    define      = "(" "define" IDENT value ")" ";"
    binding     = IDENT ":=" value ";"
    value       = NUMBER | STRING | IDENT | array | dictionary | constexpr
    array       = "#" "(" value* ")"
    dictionary  = "begin" (IDENT ":=" value ";")* "end"
    constexpr   = "!" ["["] value (("+" | "*") value)* "]"

Constant expressions fold strictly left to right: ``!2 + 3 * 4]`` is 20.
"""

import logging
import math
from pathlib import Path

from . import values as v
from .lexer import Lexer, Token, TokenType

logger = logging.getLogger("steptoml.parser")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ParseError(Exception):
    def __init__(self, msg: str, line: int, col: int):
        super().__init__(f"line {line}, col {col}: {msg}")
        self.message = msg
        self.line = line
        self.col = col


class Parser:
    """Single-pass parser; defines only affect values read after them."""

    OPERATORS = {TokenType.PLUS: "+", TokenType.STAR: "*"}

    # Values nested deeper than this are a ParseError.
    MAX_DEPTH = 200

    def __init__(self, tokens: list[Token], constants: dict[str, v.Value] | None = None):
        self.tokens = tokens
        self.pos = 0
        self.constants: dict[str, v.Value] = dict(constants or {})
        self.depth = 0

    def peek(self) -> Token:
        if self.pos >= len(self.tokens):
            if not self.tokens:
                return Token(TokenType.EOF, "", 0, 0)
            return self.tokens[-1]
        return self.tokens[self.pos]

    def at(self, *types: TokenType) -> bool:
        return self.peek().type in types

    def advance(self) -> Token:
        tok = self.peek()
        self.pos += 1
        return tok

    def consume(self, ttype: TokenType) -> Token:
        tok = self.peek()
        if tok.type != ttype:
            raise ParseError(
                f"expected {ttype.name}, got {tok.type.name}", tok.line, tok.col
            )
        self.pos += 1
        return tok

    def parse_document(self) -> v.Document:
        """Parse every statement up to EOF."""
        entries: dict[str, v.Value] = {}

        while not self.at(TokenType.EOF):
            if self.at(TokenType.LPAREN):
                self.parse_define()
            elif self.at(TokenType.IDENT):
                key = self.advance().value
                self.consume(TokenType.ASSIGN)
                entries[key] = self.parse_value()
                self.consume(TokenType.SEMICOLON)
            else:
                tok = self.peek()
                raise ParseError(
                    f"unexpected token at top level: {_describe(tok)}", tok.line, tok.col
                )

        logger.debug(
            "parsed %d bindings using %d constants", len(entries), len(self.constants)
        )
        return v.Document(entries=entries)

    def parse_define(self) -> None:
        """Parse ``(define NAME value);`` into the constant table."""
        self.consume(TokenType.LPAREN)
        self.consume(TokenType.DEFINE)
        tok = self.peek()
        if tok.type != TokenType.IDENT:
            raise ParseError(
                f"expected identifier after define, got {tok.type.name}", tok.line, tok.col
            )
        name = self.advance().value
        self.constants[name] = self.parse_value()
        self.consume(TokenType.RPAREN)
        self.consume(TokenType.SEMICOLON)
        logger.debug("defined constant %s at line %d", name, tok.line)

    def parse_value(self) -> v.Value:
        if self.depth >= self.MAX_DEPTH:
            tok = self.peek()
            raise ParseError("nesting too deep", tok.line, tok.col)
        self.depth += 1
        try:
            return self._parse_value()
        finally:
            self.depth -= 1

    def _parse_value(self) -> v.Value:
        tok = self.peek()

        if tok.type == TokenType.NUMBER:
            self.advance()
            return _number(tok)
        if tok.type == TokenType.STRING:
            self.advance()
            return v.String(value=tok.value)
        if tok.type == TokenType.HASH:
            return self.parse_array()
        if tok.type == TokenType.BEGIN:
            return self.parse_dictionary()
        if tok.type == TokenType.BANG:
            return self.parse_constant_expression()
        if tok.type == TokenType.IDENT:
            self.advance()
            if tok.value in self.constants:
                return self.constants[tok.value]
            return v.Identifier(name=tok.value)

        raise ParseError(f"unexpected token in value: {_describe(tok)}", tok.line, tok.col)

    def parse_array(self) -> v.Array:
        self.consume(TokenType.HASH)
        self.consume(TokenType.LPAREN)

        items = []
        while not self.at(TokenType.RPAREN, TokenType.EOF):
            items.append(self.parse_value())
        self.consume(TokenType.RPAREN)

        return v.Array(items=items)

    def parse_dictionary(self) -> v.Dictionary:
        self.consume(TokenType.BEGIN)

        entries: dict[str, v.Value] = {}
        while not self.at(TokenType.END, TokenType.EOF):
            tok = self.peek()
            if tok.type != TokenType.IDENT:
                raise ParseError(
                    f"expected identifier in dictionary, got {_describe(tok)}",
                    tok.line,
                    tok.col,
                )
            self.advance()
            self.consume(TokenType.ASSIGN)
            entries[tok.value] = self.parse_value()
            self.consume(TokenType.SEMICOLON)
        self.consume(TokenType.END)

        return v.Dictionary(entries=entries)

    def parse_constant_expression(self) -> v.Value:
        """Parse ``![a + b * c]`` and fold it left to right."""
        self.consume(TokenType.BANG)
        if self.at(TokenType.LBRACKET):
            self.advance()

        acc = self.parse_value()
        while not self.at(TokenType.RBRACKET, TokenType.EOF):
            op_tok = self.peek()
            if op_tok.type in self.OPERATORS:
                op = self.OPERATORS[op_tok.type]
            elif op_tok.type == TokenType.IDENT and op_tok.value in ("+", "*"):
                op = op_tok.value
            elif op_tok.type == TokenType.IDENT:
                raise ParseError(
                    f"unexpected identifier in expression: {op_tok.value}",
                    op_tok.line,
                    op_tok.col,
                )
            else:
                raise ParseError(
                    f"unexpected token in expression: {_describe(op_tok)}",
                    op_tok.line,
                    op_tok.col,
                )
            self.advance()
            right = self.parse_value()
            acc = fold(op, acc, right, op_tok)
        self.consume(TokenType.RBRACKET)

        return acc


def fold(op: str, left: v.Value, right: v.Value, at: Token) -> v.Value:
    """Apply ``+`` or ``*`` to two numbers; ints stay ints unless mixed."""
    apply = (lambda a, b: a + b) if op == "+" else (lambda a, b: a * b)

    match (left, right):
        case (v.Integer(value=a), v.Integer(value=b)):
            result = apply(a, b)
            if not INT64_MIN <= result <= INT64_MAX:
                raise ParseError("integer overflow in constant expression", at.line, at.col)
            return v.Integer(value=result)
        case (v.Integer() | v.Float(), v.Integer() | v.Float()):
            return v.Float(value=apply(float(left.value), float(right.value)))
        case _:
            raise ParseError(f"invalid operands for {op} operation", at.line, at.col)


def _number(tok: Token) -> v.Integer | v.Float:
    text = tok.value
    if any(c in text for c in ".eE"):
        try:
            value = float(text)
        except ValueError:
            raise ParseError(f"invalid number format: {text}", tok.line, tok.col) from None
        # 1e999 and friends do not fit a double
        if math.isinf(value):
            raise ParseError(f"invalid number format: {text}", tok.line, tok.col)
        return v.Float(value=value)

    try:
        value = int(text)
    except ValueError:
        raise ParseError(f"invalid number format: {text}", tok.line, tok.col) from None
    if not INT64_MIN <= value <= INT64_MAX:
        raise ParseError(f"invalid number format: {text}", tok.line, tok.col)
    return v.Integer(value=value)


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of input"
    return f"{tok.type.name} {tok.value!r}"


def parse(source: str) -> v.Document:
    """Parse source text into a Document."""
    lexer = Lexer(source)
    parser = Parser(lexer.tokens)
    return parser.parse_document()


def parse_file(filepath: str | Path) -> v.Document:
    """Parse a configuration file."""
    filepath = Path(filepath)
    source = filepath.read_text()
    return parse(source)
