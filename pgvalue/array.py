"""PostgreSQL array literals: rendering and element parsing."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from .encode import append_null
from .flags import Flag, should_quote_array
from .values import append

__all__ = ["ArrayParser", "parse_array", "append_array"]

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_LBRACE = ord("{")
_RBRACE = ord("}")
_COMMA = ord(",")
_NULL = b"NULL"


def _unexpected_end() -> ValueError:
    return ValueError("pg: unexpected end of array")


class ArrayParser:
    """Reads the elements of an array literal one at a time.

    Quoted elements are unescaped, sub-arrays are returned as raw text and
    an unquoted ``NULL`` yields None.
    """

    def __init__(self, data: bytes | bytearray | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self._pos = 0
        self._error: ValueError | None = None
        first = self._read()
        if first is None:
            self._error = _unexpected_end()
        elif first != _LBRACE:
            self._error = ValueError(f"pg: got {chr(first)!r}, wanted '{{'")

    def _read(self) -> int | None:
        if self._pos >= len(self._data):
            return None
        c = self._data[self._pos]
        self._pos += 1
        return c

    def next_elem(self) -> bytes | None:
        """Return the next element; raise StopIteration at the end of the array."""
        if self._error is not None:
            raise self._error
        c = self._read()
        if c is None or c == _RBRACE:
            raise StopIteration
        if c == _QUOTE:
            elem = self._read_substring()
            self._read_comma_brace()
            return elem
        if c == _LBRACE:
            elem = self._read_sub_array()
            self._read_comma_brace()
            return elem
        self._pos -= 1
        elem = self._read_simple()
        return None if elem == _NULL else elem

    def __iter__(self) -> Iterator[bytes | None]:
        while True:
            try:
                elem = self.next_elem()
            except StopIteration:
                return
            yield elem

    def _read_simple(self) -> bytes:
        end = self._data.find(b",", self._pos)
        if end >= 0:
            elem = self._data[self._pos:end]
            self._pos = end + 1
            return elem
        elem = self._data[self._pos:]
        self._pos = len(self._data)
        if elem.endswith(b"}"):
            return elem[:-1]
        raise _unexpected_end()

    def _read_substring(self) -> bytes:
        out = bytearray()
        while True:
            c = self._read()
            if c is None:
                raise _unexpected_end()
            if c == _QUOTE:
                return bytes(out)
            if c == _BACKSLASH:
                nxt = self._read()
                if nxt is None:
                    raise _unexpected_end()
                if nxt in (_BACKSLASH, _QUOTE):
                    out.append(nxt)
                else:
                    out.append(_BACKSLASH)
                    self._pos -= 1
                continue
            out.append(c)

    def _read_sub_array(self) -> bytes:
        out = bytearray(b"{")
        while True:
            c = self._read()
            if c is None:
                raise _unexpected_end()
            if c == _RBRACE:
                out.append(c)
                return bytes(out)
            out.append(c)
            if c != _QUOTE:
                continue
            while True:
                end = self._data.find(b'"', self._pos)
                if end < 0:
                    raise _unexpected_end()
                out += self._data[self._pos:end + 1]
                self._pos = end + 1
                if out[-2] != _BACKSLASH:
                    break

    def _read_comma_brace(self) -> None:
        c = self._read()
        if c is None:
            raise _unexpected_end()
        if c not in (_COMMA, _RBRACE):
            raise ValueError(f"pg: got {chr(c)!r}, wanted ',' or '}}'")


def parse_array(data: bytes | bytearray | str) -> list[bytes | None]:
    """Return all elements of an array literal."""
    return list(ArrayParser(data))


def _is_sequence(v: Any) -> bool:
    return isinstance(v, Sequence) and not isinstance(v, (str, bytes, bytearray, memoryview))


def append_array(values: Sequence[Any] | None, flags: int) -> str:
    """Render a sequence, nested sequences included, as an array literal."""
    flags = int(flags) | Flag.ARRAY
    if values is None:
        return append_null(flags)
    if not _is_sequence(values):
        raise TypeError(f"pg: Array(unsupported {type(values).__qualname__})")

    quote = should_quote_array(flags)
    flags |= Flag.SUBARRAY
    body = "{" + ",".join(_append_elem(elem, flags) for elem in values) + "}"
    return f"'{body}'" if quote else body


def _append_elem(v: Any, flags: int) -> str:
    if _is_sequence(v):
        return append_array(v, flags)
    return append(v, flags)