"""Record formatters — pure functions that rewrite a record's display text.

A formatter takes a LogRecord and returns a LogRecord whose ``formatted``
field holds the new display text. By convention no other field changes.
Formatters never raise: a failing clock degrades to a placeholder timestamp.

The ready-made ``medium`` and ``full`` are bound to the system clock; build
your own with ``medium_formatter(clock)`` or ``full_formatter(clock)`` to
stamp records from another clock.
"""

import threading
from datetime import datetime
from typing import Callable, Optional

from logchain.clock import Clock, system_clock
from logchain.record import LogRecord

LogFormatter = Callable[[LogRecord], LogRecord]

TIMESTAMP_PLACEHOLDER = "--:--:-- --.--.----"


def basename(path: str) -> str:
    """Return the last non-empty '/'-separated component of path."""
    parts = [p for p in path.split("/") if p]
    return parts[-1] if parts else path


def timestamp(clock: Optional[Clock] = None) -> str:
    """Render the clock's current time as 'H:MM:SS DD.MM.YYYY'."""
    try:
        now = (clock or system_clock)()
        if not isinstance(now, datetime):
            return TIMESTAMP_PLACEHOLDER
        return f"{now.hour}:{now:%M:%S %d.%m.%Y}"
    except Exception:
        return TIMESTAMP_PLACEHOLDER


def _prefix(record: LogRecord) -> str:
    if record.category is None:
        return f"{record.level.display_name}:"
    return f"{record.level.display_name}: [{record.category}]"


def simple(record: LogRecord) -> LogRecord:
    return record.with_formatted(f"{_prefix(record)} {record.message}")


def medium_formatter(clock: Optional[Clock] = None) -> LogFormatter:
    """Build a formatter that prefixes ``simple`` output with a timestamp."""

    def medium(record: LogRecord) -> LogRecord:
        return record.with_formatted(
            f"{timestamp(clock)} {_prefix(record)} {record.message}"
        )

    return medium


def full_formatter(clock: Optional[Clock] = None) -> LogFormatter:
    """Build a formatter like ``medium`` plus the call site before the message."""

    def full(record: LogRecord) -> LogRecord:
        location = f"[{basename(str(record.file))}:{record.line}]"
        return record.with_formatted(
            f"{timestamp(clock)} {_prefix(record)} {location} {record.message}"
        )

    return full


def text_formatter(fn: Callable[[LogRecord], str]) -> LogFormatter:
    """Adapt a function returning display text into a LogFormatter."""

    def formatter(record: LogRecord) -> LogRecord:
        return record.with_formatted(fn(record))

    return formatter


medium = medium_formatter()
full = full_formatter()

FORMATTERS = {
    "simple": simple,
    "medium": medium,
    "full": full,
}

_default_lock = threading.Lock()
_default_formatter: LogFormatter = medium


def get_default_formatter() -> LogFormatter:
    with _default_lock:
        return _default_formatter


def set_default_formatter(formatter: LogFormatter) -> None:
    """Swap the formatter used by format stages built without one."""
    global _default_formatter
    with _default_lock:
        _default_formatter = formatter


def reset_default_formatter() -> None:
    set_default_formatter(medium)
