"""
Exceptions raised inside the indenter.

None of these reach the editor: the engine logs them and falls back to the
line's current indentation.
"""


class IndentError(Exception):
    """Base class for indenter failures."""


class LexerError(IndentError):
    """The token grammar could not lex the buffer."""


class AnchorConsistencyError(IndentError):
    """A resolver produced an anchor that is not before the line it indents."""

    def __init__(self, resolver, anchor, start):
        super().__init__(
            f"{resolver} returned anchor {anchor} for line starting at {start}"
        )
        self.resolver = resolver
        self.anchor = anchor
        self.start = start
