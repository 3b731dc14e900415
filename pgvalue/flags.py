"""Formatting flags shared by the value encoders.

The API of this package is not stable and may change without notice.
"""

from __future__ import annotations

import enum

__all__ = ["Flag", "has_flag", "should_quote_array"]


class Flag(enum.IntFlag):
    """Bits that control how a value is rendered into SQL text."""

    QUOTE = 1
    ARRAY = 2
    SUBARRAY = 4


def has_flag(flags: int, flag: int) -> bool:
    """Return True when every bit of ``flag`` is set in ``flags``."""
    return int(flags) & int(flag) == int(flag)


def should_quote_array(flags: int) -> bool:
    """Return True when an array literal must be wrapped in single quotes."""
    return has_flag(flags, Flag.QUOTE) and not has_flag(flags, Flag.SUBARRAY)