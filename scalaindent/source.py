"""
Lexical view of a Scala buffer.

SourceText answers the questions the indentation rules ask about a buffer:
which line a position is on, what column it sits at, which bracket encloses
it, what the previous token is, and how to step over balanced groups. All of
it is derived once from the token list; only line indentation is mutable so
that a whole buffer can be reindented top to bottom without lexing again.
"""

from bisect import bisect_left, bisect_right
from typing import Iterator, List, Optional

from scalaindent.scala_lark_lexer import ScalaLexer, ScalaToken, TokenKind

TAB_WIDTH = 8


class SourceText:
    """Tokens, lines and bracket structure of one buffer."""

    def __init__(self, text: str, tokens: Optional[List[ScalaToken]] = None):
        self.text = text
        self.tokens = tokens if tokens is not None else ScalaLexer().tokenize(text)
        self.code = [t for t in self.tokens if not t.is_comment]
        self._code_starts = [t.start for t in self.code]
        self._token_starts = [t.start for t in self.tokens]

        self._line_starts = [0]
        for i, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(i + 1)

        self._first_nonblank = []
        self._indents = []
        for line in range(len(self._line_starts)):
            begin, end = self._line_starts[line], self.line_end(line)
            content = text[begin:end]
            stripped = content.lstrip(" \t")
            leading = content[: len(content) - len(stripped)]
            if stripped == "\r":
                stripped = ""
            self._first_nonblank.append(begin + len(content) - len(stripped))
            self._indents.append(len(leading.expandtabs(TAB_WIDTH)))

        self._match = [None] * len(self.code)
        self._open_after = [None] * len(self.code)
        stack = []
        for i, tok in enumerate(self.code):
            if tok.is_closing and stack:
                opener = stack.pop()
                self._match[opener] = i
                self._match[i] = opener
            elif tok.is_opening:
                stack.append(i)
            self._open_after[i] = stack[-1] if stack else None

    # Lines

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_of(self, pos: int) -> int:
        return bisect_right(self._line_starts, pos) - 1

    def line_start(self, line: int) -> int:
        return self._line_starts[line]

    def line_end(self, line: int) -> int:
        """Offset of the newline ending the line, or of the buffer end."""
        if line + 1 < len(self._line_starts):
            return self._line_starts[line + 1] - 1
        return len(self.text)

    def first_nonblank(self, line: int) -> int:
        return self._first_nonblank[line]

    def is_blank(self, line: int) -> bool:
        return self._first_nonblank[line] == self.line_end(line)

    def indentation(self, line: int) -> int:
        return self._indents[line]

    def set_indentation(self, line: int, width: int):
        """Record a new indentation width for a line without touching the text."""
        self._indents[line] = width

    def column(self, pos: int) -> int:
        line = self.line_of(pos)
        first = self._first_nonblank[line]
        if pos < first:
            return len(self.text[self._line_starts[line] : pos].expandtabs(TAB_WIDTH))
        return self._indents[line] + (pos - first)

    def blank_line_between(self, before: int, after: int) -> bool:
        """True if a blank line lies strictly between two positions."""
        for line in range(self.line_of(before) + 1, self.line_of(after)):
            if self.is_blank(line):
                return True
        return False

    # Tokens

    def index_at(self, pos: int) -> Optional[int]:
        """Index of the code token starting exactly at pos."""
        i = bisect_left(self._code_starts, pos)
        if i < len(self.code) and self._code_starts[i] == pos:
            return i
        return None

    def prev_index(self, pos: int) -> Optional[int]:
        """Index of the last code token starting before pos."""
        i = bisect_left(self._code_starts, pos) - 1
        return i if i >= 0 else None

    def next_index(self, pos: int) -> Optional[int]:
        """Index of the first code token starting at or after pos."""
        i = bisect_left(self._code_starts, pos)
        return i if i < len(self.code) else None

    def kind(self, i: Optional[int]) -> Optional[TokenKind]:
        if i is None or i < 0 or i >= len(self.code):
            return None
        return self.code[i].kind

    def token_covering(self, pos: int) -> Optional[ScalaToken]:
        """Token (comments included) that starts before pos and runs past it."""
        i = bisect_right(self._token_starts, pos) - 1
        if i >= 0:
            tok = self.tokens[i]
            if tok.start < pos < tok.end:
                return tok
        return None

    def line_code_start(self, line: int) -> Optional[int]:
        """Index of the first code token starting on the line."""
        i = self.next_index(self._line_starts[line])
        if i is not None and self.code[i].start <= self.line_end(line):
            return i
        return None

    def is_first_on_line(self, i: int) -> bool:
        if i == 0:
            return True
        prev_end_line = self.line_of(self.code[i - 1].end - 1)
        return prev_end_line < self.line_of(self.code[i].start)

    # Brackets

    def matching(self, i: int) -> Optional[int]:
        return self._match[i]

    def enclosing_opener(self, pos: int) -> Optional[int]:
        """Index of the innermost bracket opened before pos and still open at pos."""
        i = self.prev_index(pos)
        return self._open_after[i] if i is not None else None

    def depth(self, pos: int) -> int:
        depth = 0
        opener = self.enclosing_opener(pos)
        while opener is not None:
            depth += 1
            opener = self.enclosing_opener(self.code[opener].start)
        return depth

    def newlines_disabled(self, pos: int) -> bool:
        """True where a line break cannot end a statement.

        That is inside parentheses or brackets (unless a brace block is
        innermost) and inside string literals.
        """
        covering = self.token_covering(pos)
        if covering is not None and covering.kind is TokenKind.STRING:
            return True
        opener = self.enclosing_opener(pos)
        return opener is not None and self.code[opener].kind in (
            TokenKind.LPAREN,
            TokenKind.LBRACKET,
        )

    # Structural movement

    def sexp_start(self, i: int) -> Optional[int]:
        """Start of the balanced expression ending at token i.

        None when i closes a bracket that was never opened.
        """
        if self.code[i].is_closing:
            return self._match[i]
        return i

    def backward_sexp_to_line_start(self, i: int) -> int:
        """Step back over whole expressions until reaching the first one on a line.

        Never crosses an enclosing opening bracket; groups spanning several
        lines are stepped over as one unit, so the result may be on an
        earlier line than i.
        """
        while not self.is_first_on_line(i):
            j = i - 1
            if self.code[j].is_opening:
                break
            start = self.sexp_start(j)
            if start is None:
                break
            i = start
        return i

    def walk_backward(self, i: int) -> Iterator[int]:
        """Yield the expression starts before token i at i's nesting level."""
        j = i - 1
        while j >= 0:
            tok = self.code[j]
            if tok.is_opening:
                return
            start = self.sexp_start(j)
            if start is None:
                return
            yield start
            j = start - 1

    def walk_forward(self, i: int, stop: int) -> Iterator[int]:
        """Yield tokens from i up to (excluding) position stop, skipping groups.

        Ends early at a closing bracket, which leaves i's nesting level.
        """
        while i is not None and i < len(self.code) and self.code[i].start < stop:
            if self.code[i].is_closing:
                return
            yield i
            if self.code[i].is_opening:
                close = self._match[i]
                if close is None:
                    return
                i = close + 1
            else:
                i += 1

    def skip_groups_forward(self, i: int) -> Optional[int]:
        """Skip adjacent parameter/argument groups starting at token i.

        Returns the index just past the last group, or None when a group is
        left unclosed.
        """
        while i < len(self.code) and self.code[i].kind in (
            TokenKind.LPAREN,
            TokenKind.LBRACKET,
        ):
            close = self._match[i]
            if close is None:
                return None
            i = close + 1
        return i

    def is_case_clause(self, i: Optional[int]) -> bool:
        """True if token i begins a pattern-match clause (not `case class`)."""
        if i is None or self.kind(i) is not TokenKind.CASE:
            return False
        return self.kind(i + 1) not in (TokenKind.CLASS, TokenKind.OBJECT)
