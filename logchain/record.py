"""Immutable log record carried through every stage of a writer chain."""

from dataclasses import dataclass, replace
from typing import Optional

from logchain.levels import LogLevel


@dataclass(frozen=True)
class LogRecord:
    """One logging call, as seen by every stage of a chain.

    ``formatted`` starts out equal to ``message``. An empty message therefore
    reaches an unformatted sink as an empty line; format stages always add a
    level prefix, so formatted output is never empty.
    """

    message: str                     # raw text passed to the logging call
    level: LogLevel
    category: Optional[str]          # short subsystem tag, e.g. "CORE"
    file: str                        # call site of the original logging call
    line: int
    formatted: Optional[str] = None  # display text, rewritten by format stages

    def __post_init__(self):
        if self.formatted is None:
            object.__setattr__(self, "formatted", self.message)

    def with_formatted(self, text: str) -> "LogRecord":
        """Return a copy identical except for ``formatted``."""
        return replace(self, formatted=text)

    def copy(self, **changes) -> "LogRecord":
        return replace(self, **changes)
