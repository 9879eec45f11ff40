"""
Indentation settings and run-on strategies.
"""

from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Any, Mapping


class RunOnStrategy(IntEnum):
    """How eagerly a line is taken to continue the previous statement.

    Ordered from the most restrictive to the most permissive: a line that is a
    run-on under one strategy is a run-on under every later one.
    """

    KEYWORDS_ONLY = 0
    RELUCTANT = 1
    OPERATORS = 2
    EAGER = 3

    @classmethod
    def from_name(cls, name: str) -> "RunOnStrategy":
        """Look up a strategy by name, e.g. ``"keywords-only"`` or ``"eager"``."""
        key = name.strip().upper().replace("-", "_")
        if key == "OPERATOR":
            key = "OPERATORS"
        if key == "KEYWORDS":
            key = "KEYWORDS_ONLY"
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown run-on strategy: {name!r}") from None

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


@dataclass
class IndentConfig:
    """Read-only inputs of the indenter."""

    # Base indentation unit, in columns
    step: int = 2
    # Align else/catch/finally/yield under the keyword that introduces them
    align_forms: bool = True
    # One extra step for multi-line value expressions (`val x = try {`)
    indent_value_expression: bool = True
    # Align list elements under the first element
    align_parameters: bool = True
    run_on_strategy: RunOnStrategy = RunOnStrategy.EAGER

    def __post_init__(self):
        if isinstance(self.run_on_strategy, str):
            self.run_on_strategy = RunOnStrategy.from_name(self.run_on_strategy)
        if not isinstance(self.step, int) or self.step <= 0:
            raise ValueError(f"step must be a positive integer, got {self.step!r}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "IndentConfig":
        """Build a config from a plain mapping, ignoring unknown keys.

        Keys may use dashes instead of underscores, as on the command line.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.replace("-", "_")
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)
