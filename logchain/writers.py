"""Writer chain — the LogWriter contract and its filter/format/fan-out stages.

Chains are built bottom-up by wrapping a sink:

    writer = fan_out(
        FileWriter("app.log").filter_level(LogLevel.WARNING),
        ConsoleWriter().format(simple),
    )

Stages never mutate a record; a format stage forwards a derived copy, so
sibling branches of a fan-out are unaffected by each other.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol, runtime_checkable

from logchain.failures import report_failure
from logchain.formatters import LogFormatter, get_default_formatter
from logchain.levels import LogLevel
from logchain.record import LogRecord

Predicate = Callable[[LogRecord], bool]


@runtime_checkable
class LogWriter(Protocol):
    def log(self, record: LogRecord) -> None: ...


def by_level(threshold: LogLevel) -> Predicate:
    """Accept records at or above threshold."""
    def predicate(record: LogRecord) -> bool:
        return record.level >= threshold
    return predicate


def by_categories(*categories: str) -> Predicate:
    """Accept records whose category is in the allow-list. No category never matches."""
    allowed = frozenset(categories)

    def predicate(record: LogRecord) -> bool:
        return record.category is not None and record.category in allowed
    return predicate


class ChainableWriter(ABC):
    """Base for writers that can be wrapped with builder calls."""

    @abstractmethod
    def log(self, record: LogRecord) -> None:
        """Consume one record. Implementations must not raise."""

    def filter(self, predicate: Predicate) -> "FilterWriter":
        return FilterWriter(predicate, self)

    def filter_level(self, min_level: LogLevel) -> "FilterWriter":
        return FilterWriter(by_level(min_level), self)

    def filter_categories(self, *categories: str) -> "FilterWriter":
        return FilterWriter(by_categories(*categories), self)

    def format(self, formatter: Optional[LogFormatter] = None) -> "FormatWriter":
        return FormatWriter(formatter, self)


class FilterWriter(ChainableWriter):
    def __init__(self, predicate: Predicate, writer: LogWriter):
        self._predicate = predicate
        self._writer = writer

    def log(self, record: LogRecord) -> None:
        try:
            accepted = self._predicate(record)
        except Exception as exc:
            report_failure("filter predicate", exc)
            return
        if not accepted:
            return
        try:
            self._writer.log(record)
        except Exception as exc:
            report_failure(f"filter child {type(self._writer).__name__}", exc)


class FormatWriter(ChainableWriter):
    """Rewrites ``formatted`` before forwarding.

    With no formatter given, the process-wide default is looked up on every
    call so that swapping the default takes effect immediately.
    """

    def __init__(self, formatter: Optional[LogFormatter], writer: LogWriter):
        self._formatter = formatter
        self._writer = writer

    def log(self, record: LogRecord) -> None:
        formatter = self._formatter or get_default_formatter()
        try:
            derived = formatter(record)
        except Exception as exc:
            report_failure("formatter", exc)
            derived = record
        try:
            self._writer.log(derived)
        except Exception as exc:
            report_failure(f"format child {type(self._writer).__name__}", exc)


class FanOutWriter(ChainableWriter):
    """Forwards the same record to every child, in order."""

    def __init__(self, *writers: LogWriter):
        self._writers = tuple(writers)

    @property
    def writers(self) -> tuple:
        return self._writers

    def log(self, record: LogRecord) -> None:
        for writer in self._writers:
            try:
                writer.log(record)
            except Exception as exc:
                # One broken branch must not starve its siblings.
                report_failure(f"fan-out child {type(writer).__name__}", exc)


def fan_out(*writers: LogWriter) -> FanOutWriter:
    return FanOutWriter(*writers)


class MemoryWriter(ChainableWriter):
    """Terminal writer that keeps every record it receives."""

    def __init__(self):
        self._records: list[LogRecord] = []
        self._lock = threading.Lock()

    def log(self, record: LogRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> list[LogRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
