"""Parsing and formatting of PostgreSQL date and time text."""

from __future__ import annotations

import re
from datetime import datetime, time, timedelta, timezone, tzinfo

__all__ = ["parse_time", "parse_time_string", "append_time"]

_TIME_LEN = len("15:04:05.999999999")

_FRAC = r"(?:\.([0-9]+))?"
_CLOCK = r"([0-9]{2}):([0-9]{2}):([0-9]{2})" + _FRAC
_DATE = r"([0-9]{4})-([0-9]{2})-([0-9]{2})"
_TS = _DATE + " " + _CLOCK

_TIME_RE = re.compile(_CLOCK)
_DATE_RE = re.compile(_DATE)
_TS_RE = re.compile(_TS)
_TZ_LONG_RE = re.compile(_TS + r"([+-])([0-9]{2}):([0-9]{2}):([0-9]{2})")
_TZ_MEDIUM_RE = re.compile(_TS + r"([+-])([0-9]{2}):([0-9]{2})")
_TZ_SHORT_RE = re.compile(_TS + r"([+-])([0-9]{2})")
_RFC3339_RE = re.compile(_DATE + "T" + _CLOCK + r"(?:(Z)|([+-])([0-9]{2}):([0-9]{2}))")


def _error(s: str) -> ValueError:
    return ValueError(f"pg: can't parse time {s!r}")


def _micro(frac: str | None) -> int:
    if not frac:
        return 0
    return int(frac[:6].ljust(6, "0"))


def _offset(sign: str, hours: str, minutes: str = "0", seconds: str = "0") -> tzinfo:
    delta = timedelta(hours=int(hours), minutes=int(minutes), seconds=int(seconds))
    if sign == "-":
        delta = -delta
    return timezone(delta)


def _build(s: str, groups: tuple, tz: tzinfo) -> datetime:
    year, month, day, hour, minute, second, frac = groups[:7]
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), _micro(frac),
            tzinfo=tz,
        )
    except ValueError as exc:
        raise _error(s) from exc


def _parse_timestamp(s: str, regex: re.Pattern) -> datetime:
    match = regex.fullmatch(s)
    if match is None:
        raise _error(s)
    groups = match.groups()
    extra = groups[7:]
    try:
        tz = _offset(*extra) if extra else timezone.utc
    except ValueError as exc:
        raise _error(s) from exc
    return _build(s, groups, tz)


def _parse_rfc3339(s: str) -> datetime:
    match = _RFC3339_RE.fullmatch(s)
    if match is None:
        raise _error(s)
    groups = match.groups()
    if groups[7] == "Z":
        tz: tzinfo = timezone.utc
    else:
        try:
            tz = _offset(groups[8], groups[9], groups[10])
        except ValueError as exc:
            raise _error(s) from exc
    return _build(s, groups, tz)


def parse_time_string(s: str) -> datetime | time:
    """Parse a date, time of day, timestamp or timestamptz string.

    A bare time of day yields a :class:`datetime.time` in UTC; everything
    else yields an aware :class:`datetime.datetime`, in UTC unless the text
    carries its own offset.
    """
    n = len(s)
    if n <= _TIME_LEN:
        if n > 2 and s[2] == ":":
            match = _TIME_RE.fullmatch(s)
            if match is None:
                raise _error(s)
            hour, minute, second, frac = match.groups()
            try:
                return time(int(hour), int(minute), int(second), _micro(frac), tzinfo=timezone.utc)
            except ValueError as exc:
                raise _error(s) from exc
        match = _DATE_RE.fullmatch(s)
        if match is None:
            raise _error(s)
        year, month, day = match.groups()
        try:
            return datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
        except ValueError as exc:
            raise _error(s) from exc

    if s[10] == "T":
        return _parse_rfc3339(s)
    for pos, regex in ((9, _TZ_LONG_RE), (6, _TZ_MEDIUM_RE), (3, _TZ_SHORT_RE)):
        if s[n - pos] in "+-":
            return _parse_timestamp(s, regex)
    return _parse_timestamp(s, _TS_RE)


def parse_time(data: bytes) -> datetime | time:
    """Parse time text given as bytes."""
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"pg: can't parse time {bytes(data)!r}") from exc
    return parse_time_string(text)


def append_time(tm: datetime, flags: int) -> str:
    """Render ``tm`` as UTC timestamptz text; quoted when ``flags`` is exactly 1.

    Naive datetimes are taken to be in UTC.
    """
    if tm.tzinfo is None:
        tm = tm.replace(tzinfo=timezone.utc)
    else:
        tm = tm.astimezone(timezone.utc)
    text = (
        f"{tm.year:04d}-{tm.month:02d}-{tm.day:02d} "
        f"{tm.hour:02d}:{tm.minute:02d}:{tm.second:02d}"
    )
    if tm.microsecond:
        text += "." + f"{tm.microsecond:06d}".rstrip("0")
    text += "+00:00:00"
    if flags == 1:
        return f"'{text}'"
    return text