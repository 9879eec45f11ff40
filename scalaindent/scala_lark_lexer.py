"""
Lark-based Lexer for Scala Source

Turns Scala text into a flat list of tagged tokens. The token grammar lives in
grammars/scala.lark; lark does the matching and this module maps each lark
terminal onto a TokenKind.
"""

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import List

from lark import Lark
from lark.exceptions import UnexpectedInput

from scalaindent.errors import LexerError


class TokenKind(Enum):
    COMMENT = "comment"
    STRING = "string"
    CHAR = "char"
    SYMBOL_LIT = "symbol"
    NUMBER = "number"
    IDENT = "ident"
    OPERATOR = "operator"
    UNKNOWN = "unknown"

    ABSTRACT = "abstract"
    CASE = "case"
    CATCH = "catch"
    CLASS = "class"
    DEF = "def"
    DO = "do"
    ELSE = "else"
    EXTENDS = "extends"
    FINAL = "final"
    FINALLY = "finally"
    FOR = "for"
    FORSOME = "forSome"
    IF = "if"
    IMPLICIT = "implicit"
    IMPORT = "import"
    LAZY = "lazy"
    MATCH = "match"
    NEW = "new"
    OBJECT = "object"
    OVERRIDE = "override"
    PACKAGE = "package"
    PRIVATE = "private"
    PROTECTED = "protected"
    RETURN = "return"
    SEALED = "sealed"
    THROW = "throw"
    TRAIT = "trait"
    TRY = "try"
    TYPE = "type"
    VAL = "val"
    VAR = "var"
    WHILE = "while"
    WITH = "with"
    YIELD = "yield"

    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    SEMI = ";"
    DOT = "."
    COLON = ":"
    EQUALS = "="
    ARROW = "=>"
    LARROW = "<-"
    SUBTYPE = "<:"
    SUPERTYPE = ">:"
    VIEWBOUND = "<%"
    HASH = "#"
    AT = "@"


# Terminals that share a kind with another terminal
_TERMINAL_ALIASES = {
    "TRIPLE_STRING": TokenKind.STRING,
    "UARROW": TokenKind.ARROW,
    "ULARROW": TokenKind.LARROW,
}

OPENING_BRACKETS = frozenset({TokenKind.LPAREN, TokenKind.LBRACKET, TokenKind.LBRACE})
CLOSING_BRACKETS = frozenset({TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE})

# Tokens after which a statement always ends
MUST_TERMINATE = frozenset(
    {
        TokenKind.COMMA,
        TokenKind.SEMI,
        TokenKind.ARROW,
        TokenKind.EQUALS,
    }
) | OPENING_BRACKETS

# Keywords that can only begin a statement
START_STATEMENT = frozenset(
    {
        TokenKind.ABSTRACT,
        TokenKind.CATCH,
        TokenKind.CASE,
        TokenKind.CLASS,
        TokenKind.DEF,
        TokenKind.DO,
        TokenKind.ELSE,
        TokenKind.FINAL,
        TokenKind.FINALLY,
        TokenKind.FOR,
        TokenKind.IF,
        TokenKind.IMPLICIT,
        TokenKind.IMPORT,
        TokenKind.LAZY,
        TokenKind.NEW,
        TokenKind.OBJECT,
        TokenKind.OVERRIDE,
        TokenKind.PACKAGE,
        TokenKind.PRIVATE,
        TokenKind.PROTECTED,
        TokenKind.RETURN,
        TokenKind.SEALED,
        TokenKind.THROW,
        TokenKind.TRAIT,
        TokenKind.TRY,
        TokenKind.TYPE,
        TokenKind.VAL,
        TokenKind.VAR,
        TokenKind.WHILE,
        TokenKind.YIELD,
    }
)

# Reserved symbols that bind a type: `: T`, `<: T`, `>: T`, `<% T`
TYPE_BINDERS = frozenset(
    {TokenKind.COLON, TokenKind.SUBTYPE, TokenKind.SUPERTYPE, TokenKind.VIEWBOUND}
)

# A line starting with one of these continues the previous one
MUST_NOT_TERMINATE = (
    frozenset({TokenKind.EXTENDS, TokenKind.FORSOME, TokenKind.MATCH, TokenKind.WITH})
    | TYPE_BINDERS
)

# A line ending with one of these is continued on the next one
MUST_BE_CONTINUED = TYPE_BINDERS | frozenset(
    {
        TokenKind.LARROW,
        TokenKind.HASH,
        TokenKind.AT,
        TokenKind.WITH,
        TokenKind.EXTENDS,
        TokenKind.FORSOME,
        TokenKind.MATCH,
        TokenKind.NEW,
        TokenKind.YIELD,
    }
)

# Run-on lines starting with (or anchored at) these get a double step
DOUBLE_INDENT = (
    frozenset({TokenKind.WITH, TokenKind.EXTENDS, TokenKind.FORSOME}) | TYPE_BINDERS
)

# Definitions whose template or body is not a value expression
NON_VALUE_DEFINITIONS = frozenset(
    {
        TokenKind.CLASS,
        TokenKind.TRAIT,
        TokenKind.OBJECT,
        TokenKind.DEF,
        TokenKind.NEW,
        TokenKind.PACKAGE,
    }
)

MODIFIERS = frozenset(
    {
        TokenKind.ABSTRACT,
        TokenKind.CASE,
        TokenKind.FINAL,
        TokenKind.IMPLICIT,
        TokenKind.LAZY,
        TokenKind.OVERRIDE,
        TokenKind.PRIVATE,
        TokenKind.PROTECTED,
        TokenKind.SEALED,
    }
)


@dataclass(frozen=True)
class ScalaToken:
    kind: TokenKind
    text: str
    start: int
    end: int

    @property
    def is_comment(self) -> bool:
        return self.kind is TokenKind.COMMENT

    @property
    def is_opening(self) -> bool:
        return self.kind in OPENING_BRACKETS

    @property
    def is_closing(self) -> bool:
        return self.kind in CLOSING_BRACKETS


def _kind_of(terminal: str) -> TokenKind:
    alias = _TERMINAL_ALIASES.get(terminal)
    if alias is not None:
        return alias
    return TokenKind[terminal]


class ScalaLexer:
    """Tokenizer for Scala source text, comments included."""

    def __init__(self, lark: Lark = None):
        self._lark = lark or _load_lark_lexer()

    def tokenize(self, text: str) -> List[ScalaToken]:
        """
        Split text into tokens.

        Args:
            text: Scala source, possibly incomplete

        Returns:
            Tokens in buffer order; whitespace is dropped, comments are kept
        """
        try:
            return [
                ScalaToken(_kind_of(tok.type), str(tok), tok.start_pos, tok.end_pos)
                for tok in self._lark.lex(text)
            ]
        except UnexpectedInput as e:
            raise LexerError(f"Cannot lex Scala source: {e}") from e


@lru_cache(maxsize=None)
def _load_lark_lexer() -> Lark:
    """Load the Lark lexer from the grammar file."""
    grammar_path = os.path.join(os.path.dirname(__file__), "grammars", "scala.lark")

    with open(grammar_path, "r", encoding="utf-8") as f:
        grammar = f.read()

    return Lark(
        grammar,
        parser=None,
        lexer="basic",
        start="start",
    )
