"""
Run-on line detection.

A run-on line continues the statement of the line before it. Whether a line
is one cannot be decided without a parser, so the decision is a list of
lexical rules whose reach depends on the strategy in force: keywords-only
accepts only hard evidence (keywords and reserved symbols), reluctant adds
member selection, operators adds infix operators, and eager takes every line
as a run-on unless something proves otherwise.

The helpers here are shared by the resolvers: the run-on anchor walk, the
statement anchor used by blocks, bodies and forms, body detection and the
value-expression lead.
"""

from typing import Optional

from scalaindent.config import IndentConfig, RunOnStrategy
from scalaindent.scala_lark_lexer import (
    MUST_BE_CONTINUED,
    MUST_NOT_TERMINATE,
    MUST_TERMINATE,
    START_STATEMENT,
    TokenKind,
)
from scalaindent.source import SourceText


class RunOnClassifier:
    """Run-on rules evaluated against one buffer."""

    def __init__(self, source: SourceText, config: IndentConfig):
        self.source = source
        self.config = config

    def is_run_on(self, start: int, strategy: RunOnStrategy) -> bool:
        """Return True if the code at `start` continues the previous statement."""
        src = self.source
        i = src.index_at(start)
        if i is None:
            return False
        tok = src.code[i]
        if tok.is_closing:
            return False

        prev = i - 1
        if prev < 0 or src.blank_line_between(src.code[prev].end, start):
            return False
        prev_kind = src.kind(prev)
        if prev_kind in MUST_TERMINATE:
            return False

        if strategy is not RunOnStrategy.KEYWORDS_ONLY and src.newlines_disabled(start):
            return True
        if tok.kind in START_STATEMENT:
            return False
        if self.body_intro(start) is not None:
            return False
        if strategy is RunOnStrategy.EAGER:
            return True

        if tok.kind in MUST_NOT_TERMINATE:
            return True
        if prev_kind in MUST_BE_CONTINUED:
            return True
        if tok.kind is TokenKind.LBRACKET:
            return True
        if tok.kind is TokenKind.LPAREN and self._groups_continue(i, strategy):
            return True
        if strategy is RunOnStrategy.KEYWORDS_ONLY:
            return False

        if tok.kind is TokenKind.DOT or prev_kind is TokenKind.DOT:
            return True
        if strategy is RunOnStrategy.RELUCTANT:
            return False

        return tok.kind is TokenKind.OPERATOR or prev_kind is TokenKind.OPERATOR

    def _groups_continue(self, i: int, strategy: RunOnStrategy) -> bool:
        # `(a)(b) = ...`, `(a) {` or `(a): T` mark a curried parameter list
        src = self.source
        after = src.skip_groups_forward(i)
        if after is None or after >= len(src.code):
            return False
        if src.kind(after) in (TokenKind.EQUALS, TokenKind.LBRACE):
            return True
        return self.is_run_on(src.code[after].start, strategy)

    def body_intro(self, start: int) -> Optional[int]:
        """Index of the token introducing the body that starts at `start`.

        Bodies follow `=`, a `=>` other than a lambda's parameter arrow, or
        the closed condition of `if`. Returns None when `start` is not a body.
        """
        src = self.source
        prev = src.prev_index(start)
        if prev is None:
            return None
        kind = src.kind(prev)
        if kind is TokenKind.EQUALS:
            return prev
        if kind is TokenKind.ARROW:
            return None if self._is_lambda_arrow(prev) else prev
        if kind is TokenKind.RPAREN:
            opener = src.matching(prev)
            if opener is not None and src.kind(opener - 1) is TokenKind.IF:
                return opener - 1
        return None

    def _is_lambda_arrow(self, arrow: int) -> bool:
        # `{ x =>` binds the parameters of a block; the block rule handles it
        src = self.source
        opener = src.enclosing_opener(src.code[arrow].start)
        if opener is None or src.kind(opener) is not TokenKind.LBRACE:
            return False
        for j in src.walk_forward(opener + 1, src.code[arrow].start):
            if src.kind(j) in (TokenKind.CASE, TokenKind.ARROW, TokenKind.EQUALS):
                return False
        return True

    def run_on_anchor_index(self, i: int, strategy: RunOnStrategy) -> int:
        """Walk back from token i to the first line of its statement.

        Each step jumps to the previous token, skips whole expressions back to
        the first one on that line and tests again. Never leaves the
        enclosing bracket. Returns i unchanged when it is not a run-on.
        """
        src = self.source
        while self.is_run_on(src.code[i].start, strategy):
            j = i - 1
            if j < 0 or src.code[j].is_opening:
                break
            start = src.sexp_start(j)
            if start is None:
                break
            i = src.backward_sexp_to_line_start(start)
        return i

    def align_anchor(self, i: int) -> int:
        """Position to measure from when token i is an anchor.

        Stays on i when it is the first expression of its line, or the first
        inside a list opened on that line and parameters are aligned.
        Otherwise snaps to the indentation of i's line.
        """
        src = self.source
        if src.backward_sexp_to_line_start(i) != i or not self.config.align_parameters:
            return src.first_nonblank(src.line_of(src.code[i].start))
        return src.code[i].start

    def statement_anchor(self, i: int) -> int:
        """Anchor position of the statement that token i belongs to."""
        src = self.source
        start = src.sexp_start(i)
        start = src.backward_sexp_to_line_start(i if start is None else start)
        start = self.run_on_anchor_index(start, RunOnStrategy.KEYWORDS_ONLY)
        return self.align_anchor(start)

    def value_expression_lead(self, anchor: int, end: int) -> int:
        """One step when a `=` with code after it lies between anchor and end.

        This is the extra indentation of multi-line value expressions such as
        `val x = try {`; `def f = {` gets none.
        """
        if not self.config.indent_value_expression:
            return 0
        src = self.source
        seen_equals = False
        for j in src.walk_forward(src.next_index(anchor), end):
            if seen_equals:
                return self.config.step
            if src.kind(j) is TokenKind.EQUALS:
                seen_equals = True
        return 0
