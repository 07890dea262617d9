"""Formatting and argument helpers shared by command handlers."""

import math
from typing import Optional


def format_time(seconds: Optional[float]) -> str:
    """Format seconds as M:SS ('0:00' for missing or invalid values)."""
    if not seconds or not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def parse_position(text: str) -> Optional[int]:
    """Parse a 1-based list position typed by the user into a 0-based index.

    Returns:
        The 0-based index, or None if the text is not a positive integer
    """
    try:
        position = int(text)
    except ValueError:
        return None
    return position - 1 if position >= 1 else None
