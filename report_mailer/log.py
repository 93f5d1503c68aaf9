from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_RESET = "\033[0m"
_COLORS = {
    logging.DEBUG: "\033[36m",  # cyan
    logging.INFO: "\033[34m",  # blue
    SUCCESS: "\033[32m",  # green
    logging.WARNING: "\033[33m",  # yellow
    logging.ERROR: "\033[31m",  # red
    logging.CRITICAL: "\033[31m",
}


class TerminalFormatter(logging.Formatter):
    """Render records as ``[HH:MM:SS] message``, colored by level."""

    def __init__(self, use_color: bool = True):
        super().__init__(fmt="[%(asctime)s] %(message)s", datefmt="%H:%M:%S")
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self._use_color:
            return line
        color = _COLORS.get(record.levelno, _RESET)
        return f"{color}{line}{_RESET}"


def _supports_color(stream: IO[str]) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(debug: bool = False, stream: Optional[IO[str]] = None) -> None:
    target = stream or sys.stdout
    handler = logging.StreamHandler(target)
    handler.setFormatter(TerminalFormatter(use_color=_supports_color(target)))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
    )


def log_success(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(SUCCESS, msg, *args)
