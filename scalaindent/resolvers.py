"""
Anchor resolvers.

Each resolver recognises one construct. Given the start of the line being
indented it either returns an anchor position and a step function, or None to
let the next resolver try. The indentation is the anchor's column plus
step(start, anchor).
"""

from typing import Callable, List, Optional, Tuple

from scalaindent.config import IndentConfig, RunOnStrategy
from scalaindent.runon import RunOnClassifier
from scalaindent.scala_lark_lexer import (
    DOUBLE_INDENT,
    MODIFIERS,
    NON_VALUE_DEFINITIONS,
    TokenKind,
)
from scalaindent.source import SourceText

StepFunction = Callable[[int, int], int]
Resolution = Tuple[int, StepFunction]


def _no_step(start: int, anchor: int) -> int:
    return 0


class IndentContext:
    """Everything the resolvers share while indenting one line."""

    def __init__(
        self, source: SourceText, config: IndentConfig, strategy: RunOnStrategy
    ):
        self.source = source
        self.config = config
        self.strategy = strategy
        self.run_on = RunOnClassifier(source, config)

    def list_anchor(self, opener: int) -> Optional[int]:
        """Anchor for the elements of the list opened by token `opener`."""
        src = self.source
        if not self.config.align_parameters:
            return src.first_nonblank(src.line_of(src.code[opener].start))
        first = opener + 1
        if first >= len(src.code) or src.code[first].is_closing:
            return None
        return src.code[first].start

    def list_step(self, start: int, anchor: int) -> int:
        if self.config.align_parameters:
            return 0
        return self.block_step(start, anchor)

    def block_step(self, start: int, anchor: int) -> int:
        src = self.source
        step = self.config.step
        opener = src.enclosing_opener(start)
        block_beg = src.code[opener].start if opener is not None else start
        lead = self.run_on.value_expression_lead(anchor, block_beg)

        i = src.index_at(start)
        if start >= len(src.text):
            return step + 1 + lead
        if i is not None and src.code[i].is_closing:
            return lead
        if src.is_case_clause(i):
            return step + lead
        if opener is not None and self.in_case_body(opener, start):
            return 2 * step + lead
        return step + lead

    def in_case_body(self, opener: int, start: int) -> bool:
        """True if a case clause of the block `opener` is already open before start."""
        src = self.source
        if src.kind(opener) is not TokenKind.LBRACE:
            return False
        return any(
            src.is_case_clause(j) for j in src.walk_forward(opener + 1, start)
        )


class AnchorResolver:
    """Common shape of the resolvers."""

    name = "anchor"

    def __init__(self, context: IndentContext):
        self.context = context
        self.source = context.source
        self.config = context.config

    def resolve(self, start: int) -> Optional[Resolution]:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__}>"


class OpenParenResolver(AnchorResolver):
    """Lines starting with an opening bracket.

    A curried parameter group aligns with the group before it; a brace after
    a class, trait, object, def or new header lines up with the header.
    """

    name = "open-paren"

    def resolve(self, start):
        src = self.source
        i = src.index_at(start)
        if i is None or not src.code[i].is_opening or i == 0:
            return None
        kind = src.kind(i)
        prev = i - 1

        if (
            kind in (TokenKind.LPAREN, TokenKind.LBRACKET)
            and src.code[prev].is_closing
            and src.matching(prev) is not None
            and self.config.align_parameters
            and self.context.run_on.is_run_on(start, self.context.strategy)
        ):
            return src.code[src.matching(prev)].start, _no_step

        if src.kind(prev) is TokenKind.EQUALS:
            return None

        if kind is TokenKind.LBRACE:
            anchor = self.context.run_on.statement_anchor(prev)
            j = src.next_index(anchor)
            while src.kind(j) in MODIFIERS:
                j += 1
            if src.kind(j) in NON_VALUE_DEFINITIONS:
                return anchor, self._definition_step
        return None

    def _definition_step(self, start, anchor):
        src = self.source
        for j in src.walk_forward(src.next_index(anchor), start):
            if src.kind(j) is TokenKind.EQUALS:
                return self.config.step
        return 0


class ForEnumeratorsResolver(AnchorResolver):
    """Second and later enumerators of a for comprehension."""

    name = "for-enumerators"

    def resolve(self, start):
        src = self.source
        i = src.index_at(start)
        if i is not None and src.code[i].is_closing:
            return None
        opener = src.enclosing_opener(start)
        if opener is None or src.kind(opener - 1) is not TokenKind.FOR:
            return None
        first = opener + 1
        if first >= len(src.code) or src.code[first].start >= start:
            return None
        anchor = self.context.list_anchor(opener)
        if anchor is None:
            return None
        return anchor, self.context.list_step


class FormsAlignResolver(AnchorResolver):
    """else, catch, finally and yield lined up with what introduces them.

    Right after a closing brace the keyword continues the statement the
    block belongs to: with alignment on the later rules place it like any
    statement of that block, with alignment off it is one step past the
    statement.
    """

    name = "forms-align"

    def resolve(self, start):
        src = self.source
        i = src.index_at(start)
        kind = src.kind(i)
        after_brace = i is not None and src.kind(i - 1) is TokenKind.RBRACE
        if after_brace and self.config.align_forms:
            return None
        if kind is TokenKind.ELSE:
            match = self._find_if(i)
        elif kind in (TokenKind.CATCH, TokenKind.FINALLY):
            match = self._find_first(i, TokenKind.TRY)
        elif kind is TokenKind.YIELD:
            match = self._find_first(i, TokenKind.FOR)
        else:
            return None
        if match is None:
            return None

        if self.config.align_forms:
            return src.code[match].start, _no_step
        anchor = self.context.run_on.statement_anchor(match)
        if after_brace:
            return anchor, self._continued_step
        return anchor, _no_step

    def _continued_step(self, start, anchor):
        return self.config.step

    def _find_if(self, i):
        src = self.source
        pending = 0
        for j in src.walk_backward(i):
            kind = src.kind(j)
            if kind is TokenKind.ELSE:
                pending += 1
            elif kind is TokenKind.IF:
                if pending == 0:
                    # `else if` answers to its else
                    return j - 1 if src.kind(j - 1) is TokenKind.ELSE else j
                pending -= 1
        return None

    def _find_first(self, i, kind):
        for j in self.source.walk_backward(i):
            if self.source.kind(j) is kind:
                return j
        return None


class ListResolver(AnchorResolver):
    """Elements after the first one in a comma-separated group."""

    name = "list"

    def resolve(self, start):
        src = self.source
        prev = src.prev_index(start)
        if prev is None or src.kind(prev) is not TokenKind.COMMA:
            return None
        i = src.index_at(start)
        if i is not None and src.code[i].is_closing:
            return None
        opener = src.enclosing_opener(start)
        if opener is None:
            return None
        anchor = self.context.list_anchor(opener)
        if anchor is None:
            return None
        return anchor, self.context.list_step


class BodyResolver(AnchorResolver):
    """The body after `=`, `=>` or the condition of an if."""

    name = "body"

    def resolve(self, start):
        src = self.source
        run_on = self.context.run_on
        intro = run_on.body_intro(start)
        if intro is None:
            return None
        if src.kind(intro) is TokenKind.IF and self.config.align_forms:
            if src.kind(intro - 1) is TokenKind.ELSE:
                intro -= 1
            anchor = src.code[intro].start
        else:
            anchor = run_on.statement_anchor(intro)
        return anchor, self._step

    def _step(self, start, anchor):
        if self.source.kind(self.source.index_at(start)) is TokenKind.LBRACE:
            return 0
        return self.config.step


class RunOnResolver(AnchorResolver):
    """Lines continuing the statement of a previous line."""

    name = "run-on"

    def resolve(self, start):
        src = self.source
        run_on = self.context.run_on
        i = src.index_at(start)
        if i is None or not run_on.is_run_on(start, self.context.strategy):
            return None
        k = run_on.run_on_anchor_index(i, self.context.strategy)
        if k == i:
            return None
        return run_on.align_anchor(k), self._step

    def _step(self, start, anchor):
        src = self.source
        step = self.config.step
        first = src.next_index(anchor)
        tok = src.code[src.index_at(start)]
        if src.is_case_clause(first):
            if tok.kind is TokenKind.OPERATOR and set(tok.text) == {"|"}:
                return 2 * step - len(tok.text)
            return 2 * step
        if src.kind(first) in DOUBLE_INDENT or tok.kind in DOUBLE_INDENT:
            return 2 * step
        return step + self.context.run_on.value_expression_lead(anchor, start)


class BlockResolver(AnchorResolver):
    """Lines inside a bracketed block, measured from the block's opening line."""

    name = "block"

    def resolve(self, start):
        src = self.source
        opener = src.enclosing_opener(start)
        if opener is None:
            return None
        if src.is_first_on_line(opener):
            anchor = src.code[opener].start
        else:
            anchor = self.context.run_on.statement_anchor(opener)
        return anchor, self.context.block_step


RULE_CHAIN = (
    OpenParenResolver,
    ForEnumeratorsResolver,
    FormsAlignResolver,
    ListResolver,
    BodyResolver,
    RunOnResolver,
    BlockResolver,
)


def build_resolvers(context: IndentContext) -> List[AnchorResolver]:
    """Instantiate the rule chain, highest priority first."""
    return [resolver(context) for resolver in RULE_CHAIN]
