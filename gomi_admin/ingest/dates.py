"""
Month-key normalization: "2025-04" / "04" / "4" -> "4"
"""

import re

MONTH_KEY_SEPARATOR = "-"

_LEADING_INT = re.compile(r"^\s*\+?(\d+)")


class InvalidMonthKeyError(ValueError):
    """Raised when a schedule key has no month number in 1..12."""


def normalize_month_key(key: str) -> str:
    """
    Convert a schedule key into the canonical month key.

    "YYYY-MM" keys use the segment after the first separator, anything else
    is treated as the month itself. Leading zeros are dropped.

    Raises:
        InvalidMonthKeyError: if the month portion is not a number in 1..12
    """
    key = str(key)
    if MONTH_KEY_SEPARATOR in key:
        month_part = key.split(MONTH_KEY_SEPARATOR)[1]
    else:
        month_part = key

    match = _LEADING_INT.match(month_part)
    if not match:
        raise InvalidMonthKeyError(f"Schedule key {key!r} has no month number")

    month = int(match.group(1), 10)
    if not 1 <= month <= 12:
        raise InvalidMonthKeyError(f"Schedule key {key!r} has month {month} outside 1-12")
    return str(month)


def is_legacy_month_key(key: str) -> bool:
    """True for "YYYY-MM" style keys."""
    return MONTH_KEY_SEPARATOR in str(key)
