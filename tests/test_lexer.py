"""Tests for the line-oriented lexer."""

import pytest

from steptoml import LexError, TokenType, tokenize


def kinds(source: str) -> list[TokenType]:
    return [tok.type for tok in tokenize(source)]


def values(source: str) -> list[str]:
    return [tok.value for tok in tokenize(source) if tok.type != TokenType.EOF]


class TestBasicTokens:
    def test_simple_bindings(self):
        assert kinds("server_name := 'test'; port := 8080;") == [
            TokenType.IDENT,
            TokenType.ASSIGN,
            TokenType.STRING,
            TokenType.SEMICOLON,
            TokenType.IDENT,
            TokenType.ASSIGN,
            TokenType.NUMBER,
            TokenType.SEMICOLON,
            TokenType.EOF,
        ]

    def test_punctuation(self):
        assert kinds("( ) [ ] ; # ! + *") == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACKET,
            TokenType.RBRACKET,
            TokenType.SEMICOLON,
            TokenType.HASH,
            TokenType.BANG,
            TokenType.PLUS,
            TokenType.STAR,
            TokenType.EOF,
        ]

    def test_keywords(self):
        assert kinds("define begin end defined _end") == [
            TokenType.DEFINE,
            TokenType.BEGIN,
            TokenType.END,
            TokenType.IDENT,
            TokenType.IDENT,
            TokenType.EOF,
        ]

    def test_string_is_verbatim(self):
        tokens = tokenize(r"""x := 'a \n "quoted" -- not a comment';""")
        assert tokens[2].type == TokenType.STRING
        assert tokens[2].value == r'a \n "quoted" -- not a comment'

    def test_empty_string(self):
        assert values("x := '';") == ["x", ":=", "", ";"]

    def test_always_ends_with_eof(self):
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF


class TestNumbers:
    @pytest.mark.parametrize(
        "text",
        ["42", "-7", "+3", "3.14", "3.", "1e10", "1.5e-3", "2E+4", "-6.02e23"],
    )
    def test_single_number_token(self, text):
        tokens = tokenize(text)
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == text
        assert tokens[1].type == TokenType.EOF

    def test_scientific_match_stops_at_exponent(self):
        assert values("1e5+2") == ["1e5", "+2"]

    def test_plus_without_digit_is_operator(self):
        assert kinds("+ 1") == [TokenType.PLUS, TokenType.NUMBER, TokenType.EOF]

    def test_minus_without_digit_is_error(self):
        with pytest.raises(LexError) as exc:
            tokenize("x := - 1;")
        assert "'-'" in str(exc.value)
        assert exc.value.col == 6

    def test_number_then_identifier(self):
        assert kinds("12abc") == [TokenType.NUMBER, TokenType.IDENT, TokenType.EOF]


class TestComments:
    def test_full_line_and_trailing_comments(self):
        source = "-- header\nx := 1; -- trailing ; 'x\n   -- indented\n"
        assert values(source) == ["x", ":=", "1", ";"]

    def test_blank_lines_are_skipped(self):
        assert values("\n\n   \n\tx := 1;\n\n") == ["x", ":=", "1", ";"]

    def test_block_comment(self):
        source = "a := 1;\n=begin\nb := 2;\n'unclosed\n=cut\nc := 3;"
        assert values(source) == ["a", ":=", "1", ";", "c", ":=", "3", ";"]

    def test_block_comment_without_cut_skips_to_end(self):
        source = "a := 1;\n=begin notes\nb := 2;\nc := 3;"
        assert values(source) == ["a", ":=", "1", ";"]

    def test_cut_must_stand_alone(self):
        source = "=begin\n=cut here\nb := 2;\n  =cut  \nc := 3;"
        assert values(source) == ["c", ":=", "3", ";"]


class TestPositions:
    def test_line_and_column(self):
        tokens = tokenize("a := 1;\n  bb := 'x';")
        bb = tokens[4]
        assert (bb.value, bb.line, bb.col) == ("bb", 2, 3)
        assert (tokens[6].line, tokens[6].col) == (2, 9)

    def test_eof_position(self):
        tokens = tokenize("a := 1;\nb := 2;")
        assert tokens[-1].line == 3

    def test_crlf_line_endings(self):
        assert values("a := 1;\r\nb := 2;\r\n") == ["a", ":=", "1", ";", "b", ":=", "2", ";"]


class TestErrors:
    def test_unclosed_string(self):
        with pytest.raises(LexError) as exc:
            tokenize("x := 'abc;")
        assert exc.value.line == 1
        assert exc.value.col == 6
        assert "unclosed string" in str(exc.value)

    def test_unclosed_string_reports_its_line(self):
        with pytest.raises(LexError) as exc:
            tokenize("a := 1;\n-- note\nx := 'abc;")
        assert exc.value.line == 3

    def test_string_does_not_span_lines(self):
        with pytest.raises(LexError):
            tokenize("x := 'abc\ndef';")

    def test_bare_colon(self):
        with pytest.raises(LexError) as exc:
            tokenize("x : 1;")
        assert "':'" in exc.value.message
        assert (exc.value.line, exc.value.col) == (1, 3)

    @pytest.mark.parametrize("char", ["@", "$", "%", "{", '"', "/"])
    def test_unexpected_character(self, char):
        with pytest.raises(LexError) as exc:
            tokenize(f"x := {char};")
        assert repr(char) in str(exc.value)
