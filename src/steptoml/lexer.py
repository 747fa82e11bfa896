"""Line-oriented lexer for step configuration files.

Comments:
    -- full-line or trailing comment
    =begin ... =cut   block comment (skipped up to the first ``=cut`` line)

Tokens:
    IDENT, NUMBER, STRING ('...' with no escapes), the keywords ``define``,
    ``begin`` and ``end``, and the punctuation ``( ) [ ] ; := # ! + *``.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("steptoml.lexer")


class TokenType(Enum):
    EOF = "EOF"
    IDENT = "IDENT"
    NUMBER = "NUMBER"
    STRING = "STRING"

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    SEMICOLON = ";"
    ASSIGN = ":="
    HASH = "#"
    BANG = "!"
    PLUS = "+"
    STAR = "*"

    # Keywords
    DEFINE = "define"
    BEGIN = "begin"
    END = "end"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    col: int


class LexError(Exception):
    def __init__(self, msg: str, line: int, col: int):
        super().__init__(f"line {line}, col {col}: {msg}")
        self.message = msg
        self.line = line
        self.col = col


class Lexer:
    """Tokenise a whole source text up front.

    Lines are handled independently: a token never spans two lines.
    """

    KEYWORDS = {
        "define": TokenType.DEFINE,
        "begin": TokenType.BEGIN,
        "end": TokenType.END,
    }

    PUNCTUATION = {
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
        ";": TokenType.SEMICOLON,
        "#": TokenType.HASH,
        "!": TokenType.BANG,
        "+": TokenType.PLUS,
        "*": TokenType.STAR,
    }

    # Order matters: scientific notation must win over the plain form.
    TOKEN_PATTERNS = [
        (re.compile(r"\s+"), "WS"),
        (re.compile(r"--"), "COMMENT"),
        (re.compile(r"[+-]?[0-9]+(?:\.[0-9]*)?[eE][+-]?[0-9]+"), "NUMBER"),
        (re.compile(r"[+-]?[0-9]+(?:\.[0-9]*)?"), "NUMBER"),
        (re.compile(r"[A-Za-z_][A-Za-z0-9_]*"), "IDENT"),
        (re.compile(r":="), "ASSIGN"),
    ]

    def __init__(self, source: str):
        self.source = source
        self.lines = source.split("\n")
        self.tokens: list[Token] = []
        self._tokenise()

    def _tokenise(self) -> None:
        index = 0
        while index < len(self.lines):
            line = self.lines[index]
            stripped = line.strip()
            if stripped.startswith("=begin"):
                index = self._skip_block_comment(index)
                continue
            if stripped and not stripped.startswith("--"):
                self._tokenise_line(line, index + 1)
            index += 1

        self.tokens.append(Token(TokenType.EOF, "", len(self.lines) + 1, 1))
        logger.debug("lexed %d tokens from %d lines", len(self.tokens), len(self.lines))

    def _skip_block_comment(self, start: int) -> int:
        """Return the index of the first line after the closing ``=cut``."""
        for index in range(start + 1, len(self.lines)):
            if self.lines[index].strip() == "=cut":
                return index + 1
        logger.debug("=begin at line %d has no =cut, skipping to end of input", start + 1)
        return len(self.lines)

    def _tokenise_line(self, line: str, lineno: int) -> None:
        pos = 0
        while pos < len(line):
            ch = line[pos]

            if ch == "'":
                end = line.find("'", pos + 1)
                if end == -1:
                    raise LexError("unclosed string", lineno, pos + 1)
                self.tokens.append(
                    Token(TokenType.STRING, line[pos + 1 : end], lineno, pos + 1)
                )
                pos = end + 1
                continue

            for pattern, ttype in self.TOKEN_PATTERNS:
                m = pattern.match(line, pos)
                if m:
                    break
            else:
                m = None

            if m is None:
                if ch in self.PUNCTUATION:
                    self.tokens.append(Token(self.PUNCTUATION[ch], ch, lineno, pos + 1))
                    pos += 1
                    continue
                raise LexError(f"unexpected character {ch!r}", lineno, pos + 1)

            value = m.group(0)
            if ttype == "COMMENT":
                return
            if ttype == "NUMBER":
                self.tokens.append(Token(TokenType.NUMBER, value, lineno, pos + 1))
            elif ttype == "IDENT":
                kind = self.KEYWORDS.get(value, TokenType.IDENT)
                self.tokens.append(Token(kind, value, lineno, pos + 1))
            elif ttype == "ASSIGN":
                self.tokens.append(Token(TokenType.ASSIGN, value, lineno, pos + 1))
            pos += len(value)


def tokenize(source: str) -> list[Token]:
    """Tokenise source text; the last token is always EOF."""
    return Lexer(source).tokens
