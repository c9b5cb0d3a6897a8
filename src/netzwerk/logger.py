"""The logging sink for request and response logs.

Diagnostics go to **stderr** only, through a Rich
:class:`~rich.console.Console`, so they never mix with an application's own
stdout data.  Each line carries a timestamp, a severity marker and the call
site that produced it::

    2024-05-02 09:14:03.118 [debug][client.py]:212 _perform ->
    Request: POST https://reqres.in/api/users

The module exposes two layers:

1. :class:`NetworkLogger` -- a stateful object holding the console and the
   quiet/colour flags.
2. Module-level :func:`log`, :func:`get_logger`, :func:`set_logger` and
   :func:`reset_logger` that delegate to a global instance so callers do not
   need to pass the logger around.

Logging is a side channel: a quiet logger drops everything, and writing a
log line never raises into the caller.
"""

from __future__ import annotations

import inspect
import json
import os
import sys
from datetime import datetime
from enum import Enum
from typing import IO, Any, Optional

from rich.console import Console
from rich.markup import escape


class LogEvent(str, Enum):
    """Severity of a log line; the value is the marker printed with it."""

    ERROR = "error"
    INFO = "info"
    DEBUG = "debug"
    VERBOSE = "verbose"
    WARNING = "warning"
    SEVERE = "severe"


_STYLES: dict[LogEvent, str] = {
    LogEvent.ERROR: "bold red",
    LogEvent.INFO: "cyan",
    LogEvent.DEBUG: "dim",
    LogEvent.VERBOSE: "dim",
    LogEvent.WARNING: "yellow",
    LogEvent.SEVERE: "bold magenta",
}

DATE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class NetworkLogger:
    """Writes timestamped, call-site-tagged log lines to stderr.

    Args:
        quiet: Drop every message.  Used by test suites and by clients that
            want a silent sink without touching ``enable_log``.
        no_color: Disable Rich styling.  Also honoured via ``NO_COLOR`` and
            ``TERM=dumb``.
        file: Stream to write to instead of ``sys.stderr``.
    """

    def __init__(
        self,
        quiet: bool = False,
        no_color: bool = False,
        file: Optional[IO[str]] = None,
    ) -> None:
        self._quiet = quiet
        self._no_color = no_color or _should_disable_color()
        self._console = Console(
            file=file if file is not None else sys.stderr,
            no_color=self._no_color,
            stderr=file is None,
            highlight=False,
            soft_wrap=True,
        )

    @property
    def is_quiet(self) -> bool:
        """Whether this logger drops all messages."""
        return self._quiet

    def log(self, message: str, event: LogEvent = LogEvent.DEBUG, stacklevel: int = 1) -> None:
        """Write *message* at severity *event*.

        Args:
            message: The text to log.  It is printed on its own line below
                the header so multi-line payloads stay readable.
            event: Severity marker.
            stacklevel: How many frames above the caller to attribute the
                line to.  ``1`` is the direct caller.
        """
        if self._quiet:
            return
        header = f"{datetime.now().strftime(DATE_FORMAT)[:-3]} [{event.value}]{_call_site(stacklevel + 1)} ->"
        try:
            if self._no_color:
                self._console.print(header, markup=False)
            else:
                self._console.print(f"[{_STYLES[event]}]{escape(header)}[/]")
            self._console.print(message, markup=False)
        except (OSError, ValueError):
            # Stream closed underneath us (e.g. captured by a finished test).
            return

    def error(self, message: str) -> None:
        self.log(message, LogEvent.ERROR, stacklevel=2)

    def warning(self, message: str) -> None:
        self.log(message, LogEvent.WARNING, stacklevel=2)

    def info(self, message: str) -> None:
        self.log(message, LogEvent.INFO, stacklevel=2)

    def debug(self, message: str) -> None:
        self.log(message, LogEvent.DEBUG, stacklevel=2)


def pretty_json(payload: Any) -> str:
    """Render a JSON-compatible payload with indentation for log output."""
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(payload)


def _call_site(depth: int) -> str:
    """Return ``[file.py]:line func`` for the frame *depth* levels above this one."""
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                return ""
            frame = frame.f_back
        if frame is None:
            return ""
        filename = os.path.basename(frame.f_code.co_filename)
        return f"[{filename}]:{frame.f_lineno} {frame.f_code.co_name}"
    finally:
        del frame


def _should_disable_color() -> bool:
    """Colour is disabled when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global logger instance
# ------------------------------------------------------------------ #

_logger: Optional[NetworkLogger] = None


def get_logger() -> NetworkLogger:
    """Return the global :class:`NetworkLogger`, creating a default one lazily."""
    global _logger
    if _logger is None:
        _logger = NetworkLogger()
    return _logger


def set_logger(logger: NetworkLogger) -> None:
    """Install *logger* as the global :class:`NetworkLogger`."""
    global _logger
    _logger = logger


def reset_logger() -> None:
    """Reset the global logger to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _logger
    _logger = None


def log(message: str, event: LogEvent = LogEvent.DEBUG) -> None:
    """Log *message* through the global :class:`NetworkLogger`."""
    get_logger().log(message, event, stacklevel=2)
