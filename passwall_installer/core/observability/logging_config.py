"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  PWI_LOG_LEVEL env var  >  INFO (default)

Console lines carry a four-letter level marker (``[INFO]``, ``[WARN]``,
``[ERRO]``, ``[DEBG]``), colored when stderr is a terminal.

Optional file output via PWI_LOG_FILE / PWI_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import sys

import click

# ── Format strings ──────────────────────────────────────────────

# Console: marker + message
_FMT_CONSOLE = "%(marker)s %(message)s"

# DEBUG level: adds module context
_FMT_DEBUG = "%(marker)s %(name)s:%(lineno)d — %(message)s"

# File output: always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_MARKERS = {
    logging.DEBUG: ("DEBG", "blue"),
    logging.INFO: ("INFO", "green"),
    logging.WARNING: ("WARN", "yellow"),
    logging.ERROR: ("ERRO", "red"),
    logging.CRITICAL: ("ERRO", "red"),
}


class MarkerFormatter(logging.Formatter):
    """Prefix each record with a colored ``[LEVL]`` marker."""

    def __init__(self, fmt: str, color: bool):
        super().__init__(fmt)
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        label, fg = _MARKERS.get(record.levelno, ("INFO", "green"))
        marker = f"[{label}]"
        record.marker = click.style(marker, fg=fg) if self._color else marker
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_file_level: str | None = None,
    color: bool | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        color: Force markers colored or plain. Default: color when
            stderr is a TTY.
    """
    numeric_level = _parse_level(level)
    if color is None:
        color = sys.stderr.isatty()

    # ── Console handler (stderr) ────────────────────────────────
    fmt = _FMT_DEBUG if numeric_level <= logging.DEBUG else _FMT_CONSOLE

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(MarkerFormatter(fmt, color=color))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    # Effective root level = minimum of console and file levels
    effective_level = numeric_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
