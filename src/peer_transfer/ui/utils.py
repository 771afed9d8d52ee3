"""Formatting helpers for transfer progress."""

import logging
from typing import Union

logger = logging.getLogger(__name__)

SIZE_SUFFIXES = ("B", "kiB", "MiB", "GiB", "TiB")

Number = Union[int, float]


def format_size(size: Number) -> str:
    """
    Format a byte count using base-1024 units.

    Picks the largest unit for which the scaled value is at least 1,
    capped at TiB, and renders two decimals.

    Args:
        size: Size in bytes (fractional values allowed for rates)

    Returns:
        Formatted size string

    Examples:
        >>> format_size(0)
        '0.00B'
        >>> format_size(1536)
        '1.50kiB'
        >>> format_size(1048576)
        '1.00MiB'
    """
    exp = 0
    # Integer floor of log1024(size), without float log rounding at exact powers
    while exp < len(SIZE_SUFFIXES) - 1 and size >= 1024 ** (exp + 1):
        exp += 1
    return f"{size / 1024 ** exp:.2f}{SIZE_SUFFIXES[exp]}"


def format_speed(bytes_per_second: Number) -> str:
    """Format a throughput as e.g. '1.50kiB/s'."""
    return format_size(bytes_per_second) + "/s"


def format_duration(seconds: Number) -> str:
    """
    Format a duration as mm:ss.

    Minutes keep counting past 59 instead of wrapping.

    Examples:
        >>> format_duration(65)
        '01:05'
        >>> format_duration(0)
        '00:00'
    """
    total_seconds = max(0, int(seconds))
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
