"""
log.py

Responsibility: Console logging for the `dockerrun` logger hierarchy.

Messages go to stderr so RUN output on stdout stays clean. Level prefixes are
coloured when stderr is a terminal.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from colorama import Fore, Style, just_fix_windows_console

LOGGER_NAME = "dockerrun"

_LEVEL_STYLES = {
    logging.DEBUG: ("DEBUG:", Fore.LIGHTBLUE_EX + Style.BRIGHT),
    logging.INFO: ("", ""),
    logging.WARNING: ("Warning:", Fore.YELLOW + Style.BRIGHT),
    logging.ERROR: ("Error:", Fore.RED + Style.BRIGHT),
    logging.CRITICAL: ("Error:", Fore.RED + Style.BRIGHT),
}


class ColorFormatter(logging.Formatter):
    def __init__(self, *, color: bool = False) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix, style = _LEVEL_STYLES.get(record.levelno, ("", ""))
        custom = getattr(record, "prefix", None)
        if custom:
            prefix, style = custom, Fore.YELLOW + Style.BRIGHT
        if not prefix:
            return message
        if self.color and style:
            prefix = f"{style}{prefix}{Style.RESET_ALL}"
        return f"{prefix} {message}"


def setup_logging(debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """
    Configure the `dockerrun` logger. Safe to call more than once.
    """
    stream = stream or sys.stderr
    just_fix_windows_console()

    handler = logging.StreamHandler(stream)
    isatty = getattr(stream, "isatty", None)
    handler.setFormatter(ColorFormatter(color=bool(isatty and isatty())))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger


def hint(logger: logging.Logger, message: str, *args: object) -> None:
    """Log an INFO line with a `Hint:` prefix."""
    logger.info(message, *args, extra={"prefix": "Hint:"})
