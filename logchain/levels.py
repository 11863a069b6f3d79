"""Log levels — a closed set ranked by severity, not by name."""

from enum import Enum


class LogLevel(Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        """Position of this level in the canonical ascending order."""
        return _ORDER.index(self)

    @property
    def display_name(self) -> str:
        return self.value.upper()

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        """Look up a level by name, ignoring case and surrounding whitespace."""
        normalized = name.strip().lower()
        for level in cls:
            if level.value == normalized:
                return level
        raise ValueError(f"Unknown log level: {name!r}")

    def __str__(self) -> str:
        return self.display_name

    def __lt__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.rank >= other.rank


_ORDER = tuple(LogLevel)


def compare(a: LogLevel, b: LogLevel) -> int:
    """Return -1, 0 or 1 as a ranks below, equal to or above b."""
    return (a.rank > b.rank) - (a.rank < b.rank)
