"""Timestamped logging for verbose, debug and error output.

Lines look like ``[2025-01-04 10:30:00 UTC][DEBUG][parser] message``. The
level tag is omitted for plain verbose output and the component tag names
the pipeline stage that wrote the line. Output goes to stderr unless a log
file has been set with :func:`set_log_file`.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone

LEVEL_DEBUG = "DEBUG"
LEVEL_ERROR = "ERROR"

_LOG_FILE: str | None = None


def log(verbose: bool, message: str, component: str | None = None) -> None:
    if verbose:
        _emit(format_line(message, component=component))


def log_debug(debug: bool, message: str, component: str | None = None) -> None:
    if debug:
        _emit(format_line(message, LEVEL_DEBUG, component))


def log_error(message: str, component: str | None = None) -> None:
    _emit(format_line(message, LEVEL_ERROR, component))


def set_log_file(path: str | None) -> None:
    global _LOG_FILE
    _LOG_FILE = path


def format_line(
    message: str,
    level: str | None = None,
    component: str | None = None,
    now: datetime | None = None,
) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M:%S")
    tags = "".join(f"[{tag}]" for tag in (level, component) if tag)
    return f"[{stamp} UTC]{tags} {message}\n"


def _emit(line: str) -> None:
    if not _LOG_FILE:
        sys.stderr.write(line)
        return
    with open(_LOG_FILE, "a", encoding="utf-8") as handle:
        handle.write(line)
