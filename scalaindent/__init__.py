from scalaindent.config import IndentConfig, RunOnStrategy
from scalaindent.errors import AnchorConsistencyError, IndentError, LexerError
from scalaindent.main import Indenter, compute_indentation
from scalaindent.strategy import StrategySession

__all__ = [
    "AnchorConsistencyError",
    "IndentConfig",
    "IndentError",
    "Indenter",
    "LexerError",
    "RunOnStrategy",
    "StrategySession",
    "compute_indentation",
]
