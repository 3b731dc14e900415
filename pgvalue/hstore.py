"""PostgreSQL hstore values: rendering and parsing of string maps."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Optional, Union

from .decode import ValueScanner
from .encode import ValueAppender, append_error, append_null, append_string
from .flags import Flag, has_flag

__all__ = ["HstoreParser", "append_hstore", "scan_hstore", "Hstore"]

Data = Optional[Union[bytes, bytearray, memoryview, str]]

_QUOTE = ord('"')
_BACKSLASH = ord("\\")


def _unexpected_end() -> ValueError:
    return ValueError("pg: unexpected end of hstore")


class HstoreParser:
    """Reads ``"key"=>"value"`` pairs from hstore text."""

    def __init__(self, data: bytes | bytearray | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self._pos = 0

    def _try_skip(self, c: str) -> bool:
        if self._pos < len(self._data) and self._data[self._pos] == ord(c):
            self._pos += 1
            return True
        return False

    def _expect(self, c: str) -> None:
        if self._pos >= len(self._data):
            raise _unexpected_end()
        got = self._data[self._pos]
        if got != ord(c):
            raise ValueError(f"pg: got {chr(got)!r}, wanted {c!r}")
        self._pos += 1

    def _read_substring(self) -> bytes:
        out = bytearray()
        data = self._data
        while True:
            if self._pos >= len(data):
                raise _unexpected_end()
            c = data[self._pos]
            self._pos += 1
            if c == _QUOTE:
                return bytes(out)
            if c == _BACKSLASH:
                if self._pos >= len(data):
                    raise _unexpected_end()
                nxt = data[self._pos]
                if nxt in (_BACKSLASH, _QUOTE):
                    out.append(nxt)
                    self._pos += 1
                else:
                    out.append(_BACKSLASH)
                continue
            out.append(c)

    def next_key(self) -> bytes | None:
        """Return the next key, or None when the input is exhausted."""
        if self._pos >= len(self._data):
            return None
        self._expect('"')
        key = self._read_substring()
        self._expect("=")
        self._expect(">")
        return key

    def next_value(self) -> bytes:
        """Return the value that follows the last key."""
        self._expect('"')
        value = self._read_substring()
        if self._try_skip(","):
            self._try_skip(" ")
        return value


def scan_hstore(data: Data) -> dict[str, str] | None:
    """Decode hstore text into a dict; NULL gives None."""
    if data is None:
        return None
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    parser = HstoreParser(raw)
    result: dict[str, str] = {}
    while True:
        key = parser.next_key()
        if key is None:
            return result
        value = parser.next_value()
        result[key.decode("utf-8")] = value.decode("utf-8")


def append_hstore(mapping: Mapping[str, str] | None, flags: int) -> str:
    """Render a mapping of strings to strings as hstore text."""
    if mapping is None:
        return append_null(flags)
    elem_flags = int(flags) | Flag.ARRAY
    pairs = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(
                f"pg.Hstore(unsupported {type(key).__name__}=>{type(value).__name__})"
            )
        pairs.append(append_string(key, elem_flags) + "=>" + append_string(value, elem_flags))
    body = ",".join(pairs)
    if has_flag(flags, Flag.QUOTE):
        return f"'{body}'"
    return body


class Hstore(ValueAppender, ValueScanner):
    """Wraps a mapping so that it is rendered and scanned as hstore.

    Scanning into a mutable mapping replaces its contents in place; NULL
    sets ``value`` to None.
    """

    def __init__(self, value: Mapping[str, str] | None) -> None:
        if value is not None and not isinstance(value, Mapping):
            raise TypeError(f"pg.Hstore(unsupported {type(value).__qualname__})")
        self.value = value

    def append_value(self, flags: int) -> str:
        try:
            return append_hstore(self.value, flags)
        except TypeError as exc:
            return append_error(exc)

    def scan_value(self, data: Data) -> None:
        result = scan_hstore(data)
        if result is not None and isinstance(self.value, MutableMapping):
            self.value.clear()
            self.value.update(result)
        else:
            self.value = result