"""Decoding of PostgreSQL array literals into Python lists."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Callable, Optional, Union, get_args, get_origin

from .array import ArrayParser, append_array
from .decode import ValueScanner, scan_float, scan_int, scan_string
from .decode import scanner as _scanner_for
from .encode import ValueAppender

__all__ = [
    "ArrayValueScanner",
    "scan_array",
    "scan_string_array",
    "scan_int_array",
    "scan_float_array",
    "scan_array_value_scanner",
    "Array",
]

Data = Optional[Union[bytes, bytearray, memoryview, str]]


def _raw(data: Data) -> bytes | None:
    if data is None:
        return None
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _is_sequence(v: Any) -> bool:
    return isinstance(v, Sequence) and not isinstance(v, (str, bytes, bytearray, memoryview))


class ArrayValueScanner(ABC):
    """Receives the elements of an array one at a time instead of a list."""

    @abstractmethod
    def before_scan_array_value(self, data: bytes) -> None:
        """Called once with the whole array text before any element."""

    @abstractmethod
    def scan_array_value(self, data: bytes | None) -> None:
        """Called for each element; ``data`` is None for a NULL element."""

    @abstractmethod
    def after_scan_array_value(self) -> None:
        """Called once after the last element."""


def scan_string_array(data: Data) -> list[str] | None:
    """Decode a text array; NULL elements become empty strings."""
    raw = _raw(data)
    if raw is None:
        return None
    return [scan_string(elem) for elem in ArrayParser(raw)]


def scan_int_array(data: Data) -> list[int] | None:
    """Decode an integer array; NULL elements become 0."""
    raw = _raw(data)
    if raw is None:
        return None
    return [scan_int(elem) for elem in ArrayParser(raw)]


def scan_float_array(data: Data) -> list[float] | None:
    """Decode a floating point array; NULL elements become 0.0."""
    raw = _raw(data)
    if raw is None:
        return None
    return [scan_float(elem) for elem in ArrayParser(raw)]


_FAST: dict[Any, Callable[[Data], Any]] = {
    str: scan_string_array,
    int: scan_int_array,
    float: scan_float_array,
}


def _elem_scanner(elem_type: Any) -> Callable[[bytes | None], Any]:
    if elem_type is list or get_origin(elem_type) is list:
        args = get_args(elem_type)
        inner = args[0] if args else str
        return lambda elem: scan_array(elem, inner)
    return _scanner_for(elem_type)


def scan_array(data: Data, elem_type: Any = str) -> list[Any] | None:
    """Decode an array literal whose elements are of ``elem_type``.

    ``list[X]`` as the element type decodes nested arrays. A NULL array
    gives None.
    """
    raw = _raw(data)
    if raw is None:
        return None
    fast = _FAST.get(elem_type)
    if fast is not None:
        return fast(raw)
    scan_elem = _elem_scanner(elem_type)
    return [scan_elem(elem) for elem in ArrayParser(raw)]


def scan_array_value_scanner(scanner: ArrayValueScanner, data: Data) -> None:
    """Feed the elements of an array literal to ``scanner``; NULL feeds nothing."""
    raw = _raw(data)
    if raw is None:
        return
    scanner.before_scan_array_value(raw)
    for elem in ArrayParser(raw):
        scanner.scan_array_value(elem)
    scanner.after_scan_array_value()


class Array(ValueAppender, ValueScanner):
    """Wraps a list so that it is rendered and scanned as a PostgreSQL array.

    Scanning into a list replaces its contents in place; a NULL array sets
    ``value`` to None.
    """

    def __init__(self, value: Any, elem_type: Any = str) -> None:
        self.value = value
        self.elem_type = elem_type

    def _unsupported(self) -> TypeError:
        return TypeError(f"pg: Array(unsupported {type(self.value).__qualname__})")

    def append_value(self, flags: int) -> str:
        if self.value is not None and not _is_sequence(self.value):
            raise self._unsupported()
        return append_array(self.value, flags)

    def scan_value(self, data: Data) -> None:
        if isinstance(self.value, ArrayValueScanner):
            scan_array_value_scanner(self.value, data)
            return
        if self.value is not None and not _is_sequence(self.value):
            raise self._unsupported()
        result = scan_array(data, self.elem_type)
        if result is not None and isinstance(self.value, list):
            self.value[:] = result
        else:
            self.value = result