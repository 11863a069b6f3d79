import pytest
from datetime import datetime

from logchain import manager
from logchain.clock import ManualClock
from logchain.levels import LogLevel
from logchain.record import LogRecord


@pytest.fixture(autouse=True)
def reset_logging():
    """Each test starts and ends with the stock manager and default formatter."""
    manager.reset()
    yield
    manager.reset()


@pytest.fixture
def clock():
    return ManualClock(datetime(2024, 1, 7, 9, 5, 3))


@pytest.fixture
def make_record():
    def _make(message="Message", level=LogLevel.DEBUG, category=None,
              file="/src/app/module.py", line=42, formatted=None):
        return LogRecord(
            message=message,
            level=level,
            category=category,
            file=file,
            line=line,
            formatted=formatted,
        )
    return _make
