"""
Logging setup for one Climatiseur invocation.

Loguru sinks are added on entry and removed on exit, and records from the
core package's standard ``logging`` loggers are routed into loguru.
"""

import logging
import os
import sys
from typing import Optional

from loguru import logger

LOGFILE = os.path.join(os.path.expanduser("~"), ".log", "climatiseur.log")
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} {level} [{name}.{function}] {message}"


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside of the logging module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


class LogSession:
    """Loguru configuration scoped to a single run."""

    def __init__(self, verbose: bool = False, log_to_file: bool = True, logfile: Optional[str] = None):
        self.level = "DEBUG" if verbose else "INFO"
        self.logfile = (logfile or LOGFILE) if log_to_file else None
        self._sink_ids: list[int] = []
        self._previous_handlers: list[logging.Handler] = []
        self._previous_level = logging.WARNING

    def open(self):
        """Install sinks and return the logger to pass into the pipeline."""
        logger.remove()

        if self.logfile:
            logfile = os.path.expanduser(self.logfile)
            os.makedirs(os.path.dirname(logfile) or ".", mode=0o755, exist_ok=True)
            sink = logfile
        else:
            sink = sys.stdout
        self._sink_ids.append(
            logger.add(sink, level=self.level, format=LOG_FORMAT, backtrace=True, diagnose=False)
        )

        root = logging.getLogger()
        self._previous_handlers = root.handlers[:]
        self._previous_level = root.level
        root.handlers = [InterceptHandler()]
        root.setLevel(self.level)

        return logger

    def close(self) -> None:
        """Flush and remove the sinks added by open()."""
        for sink_id in self._sink_ids:
            logger.remove(sink_id)
        self._sink_ids.clear()

        root = logging.getLogger()
        root.handlers = self._previous_handlers
        root.setLevel(self._previous_level)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def configure_logging(verbose: bool = False, log_to_file: bool = True, logfile: Optional[str] = None) -> LogSession:
    """Create the logging session for this process.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_to_file: Append to the logfile instead of writing to stdout
        logfile: Override the default ~/.log/climatiseur.log
    """
    return LogSession(verbose=verbose, log_to_file=log_to_file, logfile=logfile)
