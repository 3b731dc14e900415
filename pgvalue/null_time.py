"""A timestamp wrapper whose absence is rendered as NULL."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from .encode import ValueAppender, append_null
from .timefmt import append_time, parse_time, parse_time_string

__all__ = ["NullTime"]

_JSON_NULL = "null"


def _format_rfc3339(tm: datetime) -> str:
    if tm.tzinfo is None:
        tm = tm.replace(tzinfo=timezone.utc)
    text = (
        f"{tm.year:04d}-{tm.month:02d}-{tm.day:02d}T"
        f"{tm.hour:02d}:{tm.minute:02d}:{tm.second:02d}"
    )
    if tm.microsecond:
        text += "." + f"{tm.microsecond:06d}".rstrip("0")
    offset = tm.utcoffset()
    total = int(offset.total_seconds()) if offset is not None else 0
    if total == 0:
        return text + "Z"
    sign = "+" if total > 0 else "-"
    total = abs(total)
    return f"{text}{sign}{total // 3600:02d}:{total % 3600 // 60:02d}"


@dataclass
class NullTime(ValueAppender):
    """A datetime that is None when unset; rendered as SQL NULL and JSON null."""

    time: Optional[datetime] = None

    def to_json(self) -> str:
        if self.time is None:
            return _JSON_NULL
        return json.dumps(_format_rfc3339(self.time))

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> NullTime:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        if text == _JSON_NULL:
            return cls()
        decoded = json.loads(text)
        if not isinstance(decoded, str) or len(decoded) <= 10 or decoded[10] != "T":
            raise ValueError(f"pg: NullTime: expected an RFC 3339 string, got {text!r}")
        parsed = parse_time_string(decoded)
        if not isinstance(parsed, datetime):
            raise ValueError(f"pg: NullTime: expected an RFC 3339 string, got {text!r}")
        return cls(parsed)

    def append_value(self, flags: int) -> str:
        if self.time is None:
            return append_null(flags)
        return append_time(self.time, flags)

    def scan(self, data: Union[bytes, bytearray, memoryview, str, None]) -> None:
        """Load from column text; None clears the value."""
        if data is None:
            self.time = None
            return
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        parsed = parse_time(raw)
        if not isinstance(parsed, datetime):
            raise ValueError(f"pg: NullTime can't hold a bare time of day {raw!r}")
        self.time = parsed