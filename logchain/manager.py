"""Process-wide logging facility with per-level convenience calls.

A LogManager owns one root LogWriter and a default category. Each call
captures the caller's file and line, builds exactly one LogRecord and hands
it to the writer. Logging calls never raise.

The module keeps a single current manager, replaceable at any time:

    from logchain import manager as log

    log.set_writer(ConsoleWriter().format(simple).filter_level(LogLevel.INFO))
    log.info("service started", category="CORE")
"""

import sys
import threading
from typing import Callable, Optional, TypeVar

from logchain.clock import Clock, system_clock
from logchain.config import Config, build_writer
from logchain.failures import report_failure
from logchain.formatters import reset_default_formatter
from logchain.levels import LogLevel
from logchain.record import LogRecord
from logchain.sinks import ConsoleWriter

T = TypeVar("T")

_DEFAULT = object()


def _call_site(depth: int) -> tuple[str, int]:
    """File and line of the frame ``depth`` levels above the caller."""
    try:
        frame = sys._getframe(depth + 1)
        return frame.f_code.co_filename, frame.f_lineno
    except ValueError:
        return "<unknown>", 0


class LogManager:
    """Per-level logging front end over one root writer.

    ``clock`` only times ``time``/``timed`` blocks. Timestamps come from
    whichever formatter the chain uses: the module-level ``medium`` and
    ``full`` read the system clock, so a hand-built chain that should share
    this clock needs ``medium_formatter(clock)``/``full_formatter(clock)``.
    ``configure`` wires the same clock into both.
    """

    def __init__(self, writer=_DEFAULT, category: Optional[str] = None,
                 clock: Optional[Clock] = None):
        self._writer = ConsoleWriter() if writer is _DEFAULT else writer
        self._category = category
        self._clock = clock or system_clock
        self._lock = threading.Lock()

    @property
    def writer(self):
        with self._lock:
            return self._writer

    def set_writer(self, writer) -> None:
        """Replace the root writer. ``None`` disables logging."""
        with self._lock:
            self._writer = writer

    @property
    def category(self) -> Optional[str]:
        return self._category

    @property
    def clock(self) -> Clock:
        return self._clock

    def log(self, message: str, level: LogLevel, category: Optional[str] = None,
            *, file: Optional[str] = None, line: Optional[int] = None,
            stacklevel: int = 1) -> None:
        try:
            if file is None or line is None:
                site_file, site_line = _call_site(stacklevel)
                file = site_file if file is None else file
                line = site_line if line is None else line
            writer = self.writer
            if writer is None:
                return
            writer.log(LogRecord(
                message=message,
                level=level,
                category=category if category is not None else self._category,
                file=file,
                line=line,
            ))
        except Exception as exc:
            report_failure("log manager", exc)

    def trace(self, message: str, category: Optional[str] = None, *,
              file: Optional[str] = None, line: Optional[int] = None,
              stacklevel: int = 1) -> None:
        self.log(message, LogLevel.TRACE, category, file=file, line=line,
                 stacklevel=stacklevel + 1)

    def debug(self, message: str, category: Optional[str] = None, *,
              file: Optional[str] = None, line: Optional[int] = None,
              stacklevel: int = 1) -> None:
        self.log(message, LogLevel.DEBUG, category, file=file, line=line,
                 stacklevel=stacklevel + 1)

    def info(self, message: str, category: Optional[str] = None, *,
             file: Optional[str] = None, line: Optional[int] = None,
             stacklevel: int = 1) -> None:
        self.log(message, LogLevel.INFO, category, file=file, line=line,
                 stacklevel=stacklevel + 1)

    def warning(self, message: str, category: Optional[str] = None, *,
                file: Optional[str] = None, line: Optional[int] = None,
                stacklevel: int = 1) -> None:
        self.log(message, LogLevel.WARNING, category, file=file, line=line,
                 stacklevel=stacklevel + 1)

    def error(self, message: str, category: Optional[str] = None, *,
              file: Optional[str] = None, line: Optional[int] = None,
              stacklevel: int = 1) -> None:
        self.log(message, LogLevel.ERROR, category, file=file, line=line,
                 stacklevel=stacklevel + 1)

    def fatal(self, message: str, category: Optional[str] = None, *,
              file: Optional[str] = None, line: Optional[int] = None,
              stacklevel: int = 1) -> None:
        """Log at FATAL. The process keeps running."""
        self.log(message, LogLevel.FATAL, category, file=file, line=line,
                 stacklevel=stacklevel + 1)

    def timed(self, message: str, *, category: Optional[str] = None,
              level: LogLevel = LogLevel.TRACE, file: Optional[str] = None,
              line: Optional[int] = None, stacklevel: int = 1) -> "Timing":
        """Context manager logging entry and elapsed time around its body."""
        if file is None or line is None:
            site_file, site_line = _call_site(stacklevel)
            file = site_file if file is None else file
            line = site_line if line is None else line
        return Timing(self, message, category, level, file, line)

    def time(self, message: str, block: Callable[[], T], *,
             category: Optional[str] = None, level: LogLevel = LogLevel.TRACE,
             file: Optional[str] = None, line: Optional[int] = None,
             stacklevel: int = 1) -> T:
        """Run block between an 'Enter' and an 'Elapsed' record; return its result."""
        with self.timed(message, category=category, level=level, file=file,
                        line=line, stacklevel=stacklevel + 1):
            return block()

    def _now(self):
        try:
            return self._clock()
        except Exception as exc:
            report_failure("clock", exc)
            return None


class Timing:
    """Entry/exit records for ``LogManager.timed``. Exceptions from the body propagate."""

    def __init__(self, manager: LogManager, message: str, category: Optional[str],
                 level: LogLevel, file: str, line: int):
        self._manager = manager
        self._message = message
        self._category = category
        self._level = level
        self._file = file
        self._line = line
        self._start = None
        self.elapsed: Optional[float] = None

    def __enter__(self) -> "Timing":
        self._start = self._manager._now()
        self._emit(f"Enter {self._message}")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        end = self._manager._now()
        try:
            self.elapsed = (end - self._start).total_seconds()
        except Exception:
            self.elapsed = None
        shown = "?" if self.elapsed is None else self.elapsed
        self._emit(f"Elapsed {shown}: {self._message}")
        return False

    def _emit(self, text: str) -> None:
        self._manager.log(text, self._level, self._category,
                          file=self._file, line=self._line)


_manager_lock = threading.Lock()
_manager = LogManager()


def get_manager() -> LogManager:
    with _manager_lock:
        return _manager


def set_manager(manager: LogManager) -> None:
    global _manager
    with _manager_lock:
        _manager = manager


def set_writer(writer) -> None:
    get_manager().set_writer(writer)


def reset() -> None:
    """Restore a console-backed manager and the default formatter."""
    set_manager(LogManager())
    reset_default_formatter()


def configure(config: Config, clock: Optional[Clock] = None,
              print_func=None) -> LogManager:
    """Install a manager whose writer chain is built from config."""
    manager = LogManager(
        build_writer(config, clock=clock, print_func=print_func),
        category=config.default_category,
        clock=clock,
    )
    set_manager(manager)
    return manager


def log(message: str, level: LogLevel, category: Optional[str] = None,
        **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().log(message, level, category, **kwargs)


def trace(message: str, category: Optional[str] = None, **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().trace(message, category, **kwargs)


def debug(message: str, category: Optional[str] = None, **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().debug(message, category, **kwargs)


def info(message: str, category: Optional[str] = None, **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().info(message, category, **kwargs)


def warning(message: str, category: Optional[str] = None, **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().warning(message, category, **kwargs)


def error(message: str, category: Optional[str] = None, **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().error(message, category, **kwargs)


def fatal(message: str, category: Optional[str] = None, **kwargs) -> None:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    get_manager().fatal(message, category, **kwargs)


def timed(message: str, **kwargs) -> Timing:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    return get_manager().timed(message, **kwargs)


def time(message: str, block: Callable[[], T], **kwargs) -> T:
    kwargs["stacklevel"] = kwargs.get("stacklevel", 1) + 1
    return get_manager().time(message, block, **kwargs)
