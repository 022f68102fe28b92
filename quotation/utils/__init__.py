"""
Init file for utils package.
"""

from .durations import DurationParser, format_duration, parse_duration
from .logger import LoggerFactory

__all__ = [
    "DurationParser",
    "LoggerFactory",
    "format_duration",
    "parse_duration",
]
