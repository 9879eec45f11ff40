"""
Run-on strategy state for one editing session.
"""

import logging
from typing import Optional

from scalaindent.config import RunOnStrategy

logger = logging.getLogger(__name__)

_ROTATION = {
    RunOnStrategy.RELUCTANT: RunOnStrategy.OPERATORS,
    RunOnStrategy.OPERATORS: RunOnStrategy.EAGER,
    RunOnStrategy.EAGER: RunOnStrategy.RELUCTANT,
    RunOnStrategy.KEYWORDS_ONLY: RunOnStrategy.RELUCTANT,
}


class StrategySession:
    """Default strategy plus the override toggled by repeating a command.

    The override always wins over the default while it is set. Running a
    different command clears it; running the same command again flips it
    between unset and the opposite extreme of the default.
    """

    def __init__(self, default: Optional[RunOnStrategy] = None):
        self.default = default
        self.override: Optional[RunOnStrategy] = None
        self.last_command: Optional[str] = None

    @property
    def effective(self) -> RunOnStrategy:
        if self.override is not None:
            return self.override
        if self.default is not None:
            return self.default
        return RunOnStrategy.EAGER

    def opposite(self) -> RunOnStrategy:
        """The strategy a repeated command switches to."""
        default = self.default if self.default is not None else RunOnStrategy.EAGER
        if default >= RunOnStrategy.OPERATORS:
            return RunOnStrategy.RELUCTANT
        return RunOnStrategy.EAGER

    def begin_command(self, command: str) -> RunOnStrategy:
        """Update the override for a command about to run; return the effective strategy."""
        if command == self.last_command:
            self.override = None if self.override is not None else self.opposite()
            logger.debug(
                "Repeated %s, run-on strategy override: %s",
                command,
                self.override.label if self.override is not None else "unset",
            )
        else:
            self.override = None
        self.last_command = command
        return self.effective

    def end_command(self):
        """Forget the last command, so the next one starts without an override."""
        self.last_command = None
        self.override = None

    def rotate(self) -> RunOnStrategy:
        """Cycle the default strategy: reluctant -> operators -> eager -> reluctant."""
        current = self.default if self.default is not None else RunOnStrategy.EAGER
        self.default = _ROTATION[current]
        self.override = None
        self.last_command = "rotate"
        logger.info("Run-on strategy is now %s", self.default.label)
        return self.default
