"""
Logging configuration for the CLI entrypoint.

``main.py`` calls ``setup_logging`` once. Modules log through
``logging.getLogger(__name__)`` and never configure handlers.

Level precedence:
    --debug > --verbose > --quiet > DEVSETUP_LOG_LEVEL > WARNING

Two destinations:
    stderr     diagnostics only; format grows with verbosity
    log file   DEVSETUP_LOG_FILE, optional, own level via
               DEVSETUP_LOG_FILE_LEVEL, always the full format

The reporter already prints its ``[INFO]``/``[ERROR]`` lines with click
and mirrors them to the ``devsetup.report`` logger. Those records go
to the log file only, so the console never shows a line twice.
"""

from __future__ import annotations

import logging
import sys

REPORT_LOGGER = "devsetup.report"

_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _SkipReportMirror(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(REPORT_LOGGER)


def _console_handler(level: int) -> logging.Handler:
    if level <= logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]
    elif level <= logging.INFO:
        fmt, datefmt = _CONSOLE_FORMATS[logging.INFO]
    else:
        fmt, datefmt = "%(message)s", None

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handler.addFilter(_SkipReportMirror())
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the console handler and, optionally, the file handler.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path of a log file that also receives reporter lines.
        log_file_level: File level name; defaults to ``level``.
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
    # Root passes everything any handler wants; handlers do the filtering.
    root.setLevel(min(handler.level for handler in handlers))

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
