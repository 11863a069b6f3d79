"""Fallback reporting for failures inside a writer chain.

Nothing in a chain may raise to the logging call site, so stages that catch
an error hand it here. The diagnostic is a single console line; if even that
fails it is dropped.
"""

import sys

from logchain.levels import LogLevel
from logchain.record import LogRecord

DIAGNOSTIC_CATEGORY = "LOGGER"


def report_failure(stage: str, exc: BaseException, console=None) -> None:
    """Emit a best-effort diagnostic about a failed stage to a console writer.

    ``console`` is any object with ``log(record)``; stdout is used when omitted.
    """
    text = f"{LogLevel.ERROR.display_name}: [{DIAGNOSTIC_CATEGORY}] {stage} failed: {exc!r}"
    try:
        if console is not None:
            console.log(LogRecord(
                message=text,
                level=LogLevel.ERROR,
                category=DIAGNOSTIC_CATEGORY,
                file=__file__,
                line=0,
            ))
        else:
            print(text, file=sys.stdout)
    except Exception:
        pass
