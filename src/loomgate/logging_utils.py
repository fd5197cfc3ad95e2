"""Process logging setup for the gateway and CLI."""

from __future__ import annotations

import os
import sys
from typing import Literal

from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogStyle = Literal["plain", "rich"]

_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
_active: tuple[LogStyle, str] | None = None


def configure_logging(*, style: LogStyle = "plain", level: str | None = None) -> None:
    """Route loguru output to stderr, or through rich when ``style`` is ``"rich"``.

    ``level`` falls back to ``LOOMGATE_LOG_LEVEL`` and then ``INFO``. Repeated
    calls with the same style and level leave the handlers alone.
    """
    global _active

    resolved = (level or os.getenv("LOOMGATE_LOG_LEVEL", "INFO")).upper()
    if _active == (style, resolved):
        return

    logger.remove()
    if style == "rich":
        handler = RichHandler(console=get_console(), show_path=False, markup=False, rich_tracebacks=False)
        logger.add(handler, level=resolved, format="{message}", backtrace=False, diagnose=False)
    else:
        logger.add(sys.stderr, level=resolved, format=_PLAIN_FORMAT, backtrace=False, diagnose=False)
    _active = (style, resolved)
