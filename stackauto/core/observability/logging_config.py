"""
Logging configuration — one setup call for the CLI and embedding programs.

The library itself only ever does ``logger = logging.getLogger(__name__)``;
nothing is configured on import. The CLI calls ``setup_logging`` once at
startup. Programs embedding stackauto may call it too, or configure
logging themselves.

Levels are resolved in precedence order:
    CLI flag  >  STACKAUTO_LOG_LEVEL env var  >  WARNING (default)

Optional file output via STACKAUTO_LOG_FILE / STACKAUTO_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "STACKAUTO_LOG_LEVEL"
ENV_LOG_FILE = "STACKAUTO_LOG_FILE"
ENV_LOG_FILE_LEVEL = "STACKAUTO_LOG_FILE_LEVEL"

_CLOCK = "%H:%M:%S"
_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s"

# (threshold, format, datefmt): first threshold >= the console level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _DETAILED, _CLOCK),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", _CLOCK),
    (logging.CRITICAL, "%(message)s", None),
)

# The file always gets full detail with a date
_FILE_FORMAT = (_DETAILED, "%Y-%m-%d %H:%M:%S")


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick a level name from CLI flags, falling back to the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install stackauto's handlers on the root logger.

    Existing root handlers are replaced, so calling this twice is safe.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Also write to this file when given.
        log_file_level: Level for the file. Defaults to ``level``.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # the root must let through whatever the most verbose handler wants
    root.setLevel(min(h.level for h in handlers))


def _console_handler(level: int) -> logging.Handler:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    fmt, datefmt = _FILE_FORMAT
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown or empty names mean WARNING."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
