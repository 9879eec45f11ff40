"""
Tests for the lark token grammar and the ScalaLexer wrapper.
"""

import pytest
from lark.exceptions import UnexpectedCharacters

from scalaindent.errors import LexerError
from scalaindent.scala_lark_lexer import ScalaLexer, TokenKind


def kinds(text):
    return [tok.kind for tok in ScalaLexer().tokenize(text)]


class TestTokenKinds:
    """Keywords, symbols and literals are told apart."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            (
                "val x = 1",
                [TokenKind.VAL, TokenKind.IDENT, TokenKind.EQUALS, TokenKind.NUMBER],
            ),
            (
                "def f(a: Int): Unit = {}",
                [
                    TokenKind.DEF,
                    TokenKind.IDENT,
                    TokenKind.LPAREN,
                    TokenKind.IDENT,
                    TokenKind.COLON,
                    TokenKind.IDENT,
                    TokenKind.RPAREN,
                    TokenKind.COLON,
                    TokenKind.IDENT,
                    TokenKind.EQUALS,
                    TokenKind.LBRACE,
                    TokenKind.RBRACE,
                ],
            ),
            ("x <- xs", [TokenKind.IDENT, TokenKind.LARROW, TokenKind.IDENT]),
            ("x ← xs", [TokenKind.IDENT, TokenKind.LARROW, TokenKind.IDENT]),
            ("x => y", [TokenKind.IDENT, TokenKind.ARROW, TokenKind.IDENT]),
            ("x ⇒ y", [TokenKind.IDENT, TokenKind.ARROW, TokenKind.IDENT]),
            (
                "T <: U >: V <% W",
                [
                    TokenKind.IDENT,
                    TokenKind.SUBTYPE,
                    TokenKind.IDENT,
                    TokenKind.SUPERTYPE,
                    TokenKind.IDENT,
                    TokenKind.VIEWBOUND,
                    TokenKind.IDENT,
                ],
            ),
            ("a#b", [TokenKind.IDENT, TokenKind.HASH, TokenKind.IDENT]),
            ("@inline", [TokenKind.AT, TokenKind.IDENT]),
            ("xs.map", [TokenKind.IDENT, TokenKind.DOT, TokenKind.IDENT]),
            ("a; b", [TokenKind.IDENT, TokenKind.SEMI, TokenKind.IDENT]),
            ("[A, B]", [
                TokenKind.LBRACKET,
                TokenKind.IDENT,
                TokenKind.COMMA,
                TokenKind.IDENT,
                TokenKind.RBRACKET,
            ]),
            ("forSome", [TokenKind.FORSOME]),
            ("sealed trait", [TokenKind.SEALED, TokenKind.TRAIT]),
        ],
    )
    def test_kinds(self, text, expected):
        assert kinds(text) == expected, f"Unexpected tokens for {text!r}"

    @pytest.mark.parametrize(
        "text", ["valx", "matches", "`type`", "classOf", "caseA"]
    )
    def test_identifiers_containing_keywords(self, text):
        assert kinds(text) == [TokenKind.IDENT]

    @pytest.mark.parametrize("text", ["++", "::", "==", "|", "<=", "=>>", "-"])
    def test_operators(self, text):
        tokens = ScalaLexer().tokenize(f"a {text} b")
        assert tokens[1].kind is TokenKind.OPERATOR
        assert tokens[1].text == text


class TestLiteralsAndComments:
    """Strings and comments are single tokens, whatever they contain."""

    @pytest.mark.parametrize(
        "text",
        [
            '"a // b { ("',
            's"hello $name"',
            '"""multi\n"line"\n{"""',
            '"unterminated',
            '"""unterminated\nstill open',
        ],
    )
    def test_strings(self, text):
        assert kinds(text) == [TokenKind.STRING]

    @pytest.mark.parametrize(
        "text",
        [
            "// line comment { (",
            "/* block\n comment */",
            "/** scaladoc\n  * more\n  */",
            "/* unterminated\n comment",
        ],
    )
    def test_comments(self, text):
        assert kinds(text) == [TokenKind.COMMENT]

    def test_char_and_symbol_literals(self):
        assert kinds("'a'") == [TokenKind.CHAR]
        assert kinds("'\\n'") == [TokenKind.CHAR]
        assert kinds("'sym") == [TokenKind.SYMBOL_LIT]

    @pytest.mark.parametrize("text", ["42", "0xFF", "1.5", "2e10", "10L", "3.0f"])
    def test_numbers(self, text):
        assert kinds(text) == [TokenKind.NUMBER]

    def test_comment_before_code(self):
        assert kinds("// note\nfoo") == [TokenKind.COMMENT, TokenKind.IDENT]


class TestTokenPositions:
    def test_offsets(self):
        tokens = ScalaLexer().tokenize("val x\n  = 1")
        assert [(t.start, t.end) for t in tokens] == [(0, 3), (4, 5), (8, 9), (10, 11)]
        assert [t.text for t in tokens] == ["val", "x", "=", "1"]

    def test_bracket_properties(self):
        tokens = ScalaLexer().tokenize("( } // c")
        assert tokens[0].is_opening and not tokens[0].is_closing
        assert tokens[1].is_closing and not tokens[1].is_opening
        assert tokens[2].is_comment

    def test_empty_text(self):
        assert ScalaLexer().tokenize("") == []
        assert ScalaLexer().tokenize("   \n\t\n") == []


class TestLexerErrors:
    def test_lark_errors_become_lexer_errors(self):
        class FailingLark:
            def lex(self, text):
                raise UnexpectedCharacters(text, 1, 1, 2)

        with pytest.raises(LexerError):
            ScalaLexer(FailingLark()).tokenize("abc")
