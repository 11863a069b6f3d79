"""Terminal sinks — console, append-only file and stdlib system logger."""

import logging
import os
import threading
from typing import Callable, Optional

from logchain.failures import report_failure
from logchain.levels import LogLevel
from logchain.record import LogRecord
from logchain.writers import ChainableWriter

LINE_TERMINATOR = "\n\r"


class ConsoleWriter(ChainableWriter):
    """Prints ``record.formatted`` as one line on stdout."""

    def __init__(self, print_func: Optional[Callable[[str], None]] = None):
        self._print = print_func or print

    def log(self, record: LogRecord) -> None:
        try:
            self._print(record.formatted)
        except Exception:
            # Nowhere left to report a broken console.
            pass


class FileWriter(ChainableWriter):
    """Appends each record to a file, opening and closing it on every call.

    No handle is held between calls. Writers targeting the same path share a
    lock so concurrent lines never interleave.
    """

    _locks: dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, path: str, diagnostics=None):
        self._path = os.fspath(path)
        self._lock = self._lock_for(self._path)
        self._diagnostics = diagnostics

    @property
    def path(self) -> str:
        return self._path

    @classmethod
    def _lock_for(cls, path: str) -> threading.Lock:
        key = os.path.abspath(path)
        with cls._locks_guard:
            lock = cls._locks.get(key)
            if lock is None:
                lock = cls._locks[key] = threading.Lock()
            return lock

    def log(self, record: LogRecord) -> None:
        try:
            with self._lock:
                with open(self._path, "a", encoding="utf-8", newline="") as f:
                    f.write(record.formatted + LINE_TERMINATOR)
        except Exception as exc:
            report_failure(
                f"write to {self._path}",
                exc,
                console=self._diagnostics or ConsoleWriter(),
            )


# FATAL has no stdlib bucket of its own and is logged as ERROR.
_SYSTEM_LEVELS = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.ERROR,
}


class SystemWriter(ChainableWriter):
    """Forwards records to a stdlib ``logging.Logger``."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("logchain")

    @staticmethod
    def system_level(level: LogLevel) -> int:
        return _SYSTEM_LEVELS[level]

    def log(self, record: LogRecord) -> None:
        try:
            self._logger.log(_SYSTEM_LEVELS[record.level], "%s", record.formatted)
        except Exception as exc:
            report_failure("system logger", exc)
