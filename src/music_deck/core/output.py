"""
Unified output system using Loguru.
User-facing messages go to the log file and to the Rich console.
"""

import threading
from pathlib import Path
from typing import Union

from loguru import logger

from .console import get_console

_LEVEL_STYLES = {
    "debug": "cyan",
    "info": "white",
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: Union[int, str] = 5,
) -> None:
    """
    Configure loguru for file-only logging (the console shows log() output).

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
        rotation: Size or interval that triggers rotation (loguru syntax)
        retention: Number of rotated files (or age) to keep
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default stderr handler
    logger.remove()

    logger.add(
        log_file,
        rotation=rotation,
        retention=retention,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to file AND prints to the console.

    Threads flagged with ``silent_logging = True`` (background pumps) only
    write to the log file.

    Args:
        message: User-facing message
        level: Log level (debug, info, success, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    if getattr(threading.current_thread(), "silent_logging", False):
        return

    get_console().print(message, style=_LEVEL_STYLES.get(level, "white"), highlight=False)
