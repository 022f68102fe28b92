"""
Duration parsing and formatting in Go's notation ("200ms", "1m30s").
"""

import re
from datetime import timedelta
from decimal import Decimal

# Nanoseconds per unit
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class DurationParser:
    """Utility class for duration strings."""

    @staticmethod
    def parse(text: str) -> timedelta:
        """
        Parse a duration such as "300ms", "1.5s" or "1m30s".

        Args:
            text: Duration string with an optional sign and one or more
                number/unit groups

        Returns:
            timedelta with microsecond resolution

        Raises:
            ValueError: If the string is not a valid duration
        """
        value = (text or "").strip()
        sign = 1
        if value[:1] in ("+", "-"):
            sign = -1 if value[0] == "-" else 1
            value = value[1:]

        if value == "0":
            return timedelta(0)
        if not value:
            raise ValueError(f"invalid duration {text!r}")

        total_ns = Decimal(0)
        pos = 0
        while pos < len(value):
            match = _COMPONENT.match(value, pos)
            if not match:
                raise ValueError(f"invalid duration {text!r}")
            total_ns += Decimal(match.group(1)) * _UNITS[match.group(2)]
            pos = match.end()

        return timedelta(microseconds=sign * int(total_ns // 1000))

    @staticmethod
    def format(value: timedelta) -> str:
        """Render a timedelta the way Go prints a time.Duration."""
        micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
        if micros == 0:
            return "0s"

        sign = "-" if micros < 0 else ""
        micros = abs(micros)

        if micros < 1_000:
            return f"{sign}{micros}µs"
        if micros < 1_000_000:
            return f"{sign}{_with_fraction(micros, 1_000)}ms"

        hours, rest = divmod(micros, 3_600_000_000)
        minutes, rest = divmod(rest, 60_000_000)
        result = sign
        if hours:
            result += f"{hours}h"
        if hours or minutes:
            result += f"{minutes}m"
        return f"{result}{_with_fraction(rest, 1_000_000)}s"


def _with_fraction(value: int, unit: int) -> str:
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{fraction:0{digits}d}".rstrip("0")


def parse_duration(text: str) -> timedelta:
    return DurationParser.parse(text)


def format_duration(value: timedelta) -> str:
    return DurationParser.format(value)
