"""Rendering of scalar values, identifiers and JSON into SQL text."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from decimal import Decimal

from .flags import Flag, has_flag

__all__ = [
    "ValueAppender",
    "Safe",
    "Ident",
    "HexEncoder",
    "append_null",
    "append_error",
    "append_bool",
    "append_float",
    "append_string",
    "append_bytes",
    "append_ident",
    "append_jsonb",
]


class ValueAppender(ABC):
    """A value that knows how to render itself into SQL text."""

    @abstractmethod
    def append_value(self, flags: int) -> str:
        """Return the SQL text of this value."""


class Safe(str, ValueAppender):
    """SQL text that is inserted verbatim."""

    def append_value(self, flags: int) -> str:
        return str(self)


class Ident(str, ValueAppender):
    """An SQL identifier such as a table or column name."""

    def append_value(self, flags: int) -> str:
        return append_ident(str(self), flags)


def append_null(flags: int) -> str:
    """Return NULL when quoting, otherwise nothing."""
    if has_flag(flags, Flag.QUOTE):
        return "NULL"
    return ""


def append_error(err: object) -> str:
    """Render an error marker in place of a value."""
    return f"?!({err})"


def append_bool(v: bool) -> str:
    """Render a boolean as TRUE or FALSE."""
    if v:
        return "TRUE"
    return "FALSE"


def _format_float(v: float) -> str:
    text = format(Decimal(repr(v)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def append_float(v: float, flags: int) -> str:
    """Render a float; NaN and infinities are quoted unless inside an array."""
    quote = has_flag(flags, Flag.QUOTE) and not has_flag(flags, Flag.ARRAY)
    if math.isnan(v):
        special = "NaN"
    elif math.isinf(v):
        special = "Infinity" if v > 0 else "-Infinity"
    else:
        return _format_float(v)
    return f"'{special}'" if quote else special


def _append_array_string(s: str, flags: int) -> str:
    quote = has_flag(flags, Flag.QUOTE)
    parts = ['"']
    for c in s:
        if c == "\0":
            continue
        if c == "'":
            parts.append("''" if quote else "'")
        elif c == '"':
            parts.append('\\"')
        elif c == "\\":
            parts.append("\\\\")
        else:
            parts.append(c)
    parts.append('"')
    return "".join(parts)


def append_string(s: str, flags: int) -> str:
    """Render text, dropping NUL characters and escaping as ``flags`` require."""
    if has_flag(flags, Flag.ARRAY):
        return _append_array_string(s, flags)
    cleaned = s.replace("\0", "")
    if has_flag(flags, Flag.QUOTE):
        return "'" + cleaned.replace("'", "''") + "'"
    return cleaned


def append_bytes(data: bytes | None, flags: int) -> str:
    """Render bytes in the bytea hex format."""
    if data is None:
        return append_null(flags)
    if has_flag(flags, Flag.ARRAY):
        return '"\\\\x' + bytes(data).hex() + '"'
    if has_flag(flags, Flag.QUOTE):
        return "'\\x" + bytes(data).hex() + "'"
    return "\\x" + bytes(data).hex()


class HexEncoder:
    """Incrementally renders written bytes as a bytea hex literal."""

    def __init__(self, flags: int) -> None:
        self._flags = flags
        self._parts: list[str] = []
        self._written = False
        self._closed = False

    def write(self, data: bytes) -> int:
        if not self._written:
            if has_flag(self._flags, Flag.ARRAY):
                self._parts.append('"\\')
            elif has_flag(self._flags, Flag.QUOTE):
                self._parts.append("'")
            self._parts.append("\\x")
            self._written = True
        self._parts.append(bytes(data).hex())
        return len(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._written:
            if has_flag(self._flags, Flag.ARRAY):
                self._parts.append('"')
            elif has_flag(self._flags, Flag.QUOTE):
                self._parts.append("'")
        else:
            self._parts.append(append_null(self._flags))

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __enter__(self) -> HexEncoder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def append_ident(field: str, flags: int) -> str:
    """Render a possibly dotted identifier, quoting each part when asked."""
    quote = has_flag(flags, Flag.QUOTE)
    quoted = False
    parts: list[str] = []
    for c in field:
        if c == "*" and not quoted:
            parts.append("*")
            continue
        if c == ".":
            if quoted and quote:
                parts.append('"')
                quoted = False
            parts.append(".")
            continue
        if not quoted and quote:
            parts.append('"')
            quoted = True
        parts.append('""' if c == '"' else c)
    if quoted and quote:
        parts.append('"')
    return "".join(parts)


def append_jsonb(jsonb: bytes | str, flags: int) -> str:
    """Render JSON text, escaping ``\\u0000`` sequences and quotes."""
    text = jsonb.decode("utf-8") if isinstance(jsonb, (bytes, bytearray)) else jsonb
    array = has_flag(flags, Flag.ARRAY)
    quote = has_flag(flags, Flag.QUOTE)

    parts: list[str] = []
    if array:
        parts.append('"')
    elif quote:
        parts.append("'")

    i, n = 0, len(text)
    while i < n:
        c = text[i]
        i += 1
        if c == '"':
            parts.append('\\"' if array else '"')
        elif c == "'":
            parts.append("''" if quote else "'")
        elif c == "\0":
            continue
        elif c == "\\":
            if text.startswith("u0000", i):
                i += 5
                parts.append("\\\\u0000")
            else:
                parts.append("\\")
                if i < n:
                    parts.append(text[i])
                    i += 1
        else:
            parts.append(c)

    if array:
        parts.append('"')
    elif quote:
        parts.append("'")
    return "".join(parts)