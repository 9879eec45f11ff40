import logging
from typing import Optional, Tuple

from scalaindent.config import IndentConfig, RunOnStrategy
from scalaindent.errors import AnchorConsistencyError, IndentError
from scalaindent.resolvers import IndentContext, build_resolvers
from scalaindent.scala_lark_lexer import ScalaLexer, TokenKind
from scalaindent.source import TAB_WIDTH, SourceText
from scalaindent.strategy import StrategySession

logger = logging.getLogger(__name__)

INDENT_COMMAND = "indent-line"


class Indenter:
    """Scala indentation engine."""

    def __init__(self, config=None, session=None, lexer=None):
        self.config = config or IndentConfig()
        self.session = session or StrategySession(self.config.run_on_strategy)
        self._lexer = lexer or ScalaLexer()

    def source(self, text: str) -> SourceText:
        return SourceText(text, self._lexer.tokenize(text))

    def calculate_indent(
        self, text: str, pos: int, strategy: Optional[RunOnStrategy] = None
    ) -> int:
        """Column the line containing `pos` should be indented to."""
        try:
            source = self.source(text)
        except IndentError as e:
            logger.warning("Cannot indent: %s", e)
            return _leading_width(text, pos)
        strategy = strategy if strategy is not None else self.session.effective
        return self.indent_for_line(source, source.line_of(pos), strategy)

    def indent_for_line(
        self, source: SourceText, line: int, strategy: RunOnStrategy
    ) -> int:
        """Run the rule chain for one line of an already lexed buffer."""
        first = source.first_nonblank(line)
        covering = source.token_covering(first)
        if covering is not None:
            # Line starts inside a block comment or a multi-line string
            if covering.is_comment and source.text.startswith("*", first):
                return source.column(covering.start) + 1
            return source.indentation(line)

        code_start = source.line_code_start(line)
        start = source.code[code_start].start if code_start is not None else first

        context = IndentContext(source, self.config, strategy)
        try:
            for resolver in build_resolvers(context):
                result = resolver.resolve(start)
                if result is None:
                    continue
                anchor, step = result
                if anchor >= start:
                    raise AnchorConsistencyError(resolver.name, anchor, start)
                column = source.column(anchor)
                offset = step(start, anchor)
                logger.debug(
                    "Line %d: %s anchor at column %d, step %d",
                    line + 1,
                    resolver.name,
                    column,
                    offset,
                )
                return max(column + offset, 0)
        except (IndentError, RecursionError) as e:
            logger.warning("Line %d left at its indentation: %s", line + 1, e)
            return source.indentation(line)
        return 0

    def indent_line(
        self,
        text: str,
        pos: int,
        strategy: Optional[RunOnStrategy] = None,
        command: str = INDENT_COMMAND,
    ) -> Tuple[str, int]:
        """
        Reindent the line containing `pos`.

        Args:
            text: Buffer contents
            pos: Cursor offset
            strategy: Run-on strategy to use instead of the session's
            command: Name of the editor command; repeating the same command
                toggles the session's strategy override

        Returns:
            The new buffer text and the new cursor offset
        """
        effective = self.session.begin_command(command)
        if strategy is None:
            strategy = effective
        try:
            source = self.source(text)
        except IndentError as e:
            logger.warning("Cannot indent: %s", e)
            return text, pos

        line = source.line_of(pos)
        covering = source.token_covering(source.line_start(line))
        if covering is not None and covering.kind is TokenKind.STRING:
            return text, pos

        width = self.indent_for_line(source, line, strategy)
        begin = source.line_start(line)
        first = source.first_nonblank(line)
        new_text = text[:begin] + " " * width + text[first:]
        if pos < first:
            return new_text, begin + width
        return new_text, pos + width - (first - begin)

    def reindent(self, text: str, strategy: Optional[RunOnStrategy] = None) -> str:
        """Indent every line of the buffer, top to bottom."""
        # a whole-buffer reindent is never a repeat of indent-line
        self.session.end_command()
        try:
            source = self.source(text)
        except IndentError as e:
            logger.warning("Cannot indent: %s", e)
            return text
        strategy = strategy if strategy is not None else self.session.effective

        lines = []
        for line in range(source.line_count):
            begin, end = source.line_start(line), source.line_end(line)
            covering = source.token_covering(begin)
            if covering is not None and covering.kind is TokenKind.STRING:
                lines.append(text[begin:end])
                continue
            if source.is_blank(line):
                source.set_indentation(line, 0)
                lines.append("\r" if text[begin:end].endswith("\r") else "")
                continue
            width = self.indent_for_line(source, line, strategy)
            source.set_indentation(line, width)
            lines.append(" " * width + text[source.first_nonblank(line) : end])
        return "\n".join(lines)

    def rotate_strategy(self) -> RunOnStrategy:
        """Switch the default run-on strategy to the next one."""
        return self.session.rotate()


def compute_indentation(
    text: str,
    pos: int,
    config: Optional[IndentConfig] = None,
    strategy: Optional[RunOnStrategy] = None,
) -> int:
    """Column for the line at `pos`, with a throwaway session."""
    return Indenter(config).calculate_indent(text, pos, strategy)


def _leading_width(text: str, pos: int) -> int:
    begin = text.rfind("\n", 0, pos) + 1
    width = 0
    for char in text[begin:]:
        if char == " ":
            width += 1
        elif char == "\t":
            width += TAB_WIDTH - width % TAB_WIDTH
        else:
            break
    return width
