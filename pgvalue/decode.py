"""Decoding of PostgreSQL text-format column values into Python values."""

from __future__ import annotations

import binascii
import dataclasses
import ipaddress
import json
import re
import threading
import types
from abc import ABC, abstractmethod
from datetime import datetime, time
from typing import Any, Callable, Union, get_args, get_origin

from .timefmt import parse_time

__all__ = [
    "ScannerFunc",
    "ValueScanner",
    "scan_string",
    "scan_bytes",
    "hex_decode",
    "scan_int",
    "scan_uint",
    "scan_float",
    "scan_time",
    "scan_bool",
    "scan_ip",
    "scan_ip_network",
    "scan_json",
    "register_scanner",
    "scanner",
    "scan",
]

Data = Union[bytes, bytearray, memoryview, str, None]
ScannerFunc = Callable[[Data], Any]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


class ValueScanner(ABC):
    """A value that fills itself from column text; ``data`` is None for NULL."""

    @abstractmethod
    def scan_value(self, data: bytes | None) -> None:
        """Load this value from the raw column bytes."""


def _as_bytes(data: Data) -> bytes | None:
    if data is None:
        return None
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _text(raw: bytes) -> str:
    return raw.decode("utf-8")


def scan_string(data: Data) -> str:
    """Return column text; NULL and empty values give an empty string."""
    raw = _as_bytes(data)
    if not raw:
        return ""
    return _text(raw)


def _unhex(digits: bytes) -> bytes:
    try:
        return binascii.unhexlify(digits)
    except binascii.Error as exc:
        raise ValueError(f"pg: can't decode hex {digits!r}: {exc}") from exc


def scan_bytes(data: Data) -> bytes | None:
    """Decode a bytea value in hex format; NULL gives None."""
    raw = _as_bytes(data)
    if raw is None:
        return None
    if not raw:
        return b""
    if len(raw) < 2 or raw[:2] != b"\\x":
        raise ValueError(f"pg: can't parse bytea: {raw!r}")
    return _unhex(raw[2:])


def hex_decode(data: Data) -> bytes:
    """Decode ``\\x``-prefixed hex text; NULL and empty values give no bytes."""
    raw = _as_bytes(data)
    if not raw:
        return b""
    for pos, wanted in enumerate((b"\\", b"x")):
        if pos >= len(raw):
            raise ValueError("unexpected EOF")
        got = raw[pos:pos + 1]
        if got != wanted:
            raise ValueError(f"got {got.decode('latin-1')!r}, wanted {wanted.decode()!r}")
    return _unhex(raw[2:])


def _parse_int(raw: bytes, low: int, high: int) -> int:
    text = _text(raw)
    if _INT_RE.fullmatch(text) is None:
        raise ValueError(f"pg: can't parse integer {text!r}: invalid syntax")
    num = int(text)
    if not low <= num <= high:
        raise ValueError(f"pg: can't parse integer {text!r}: value out of range")
    return num


def scan_int(data: Data) -> int:
    """Parse a 64-bit signed integer; NULL and empty values give 0."""
    raw = _as_bytes(data)
    if not raw:
        return 0
    return _parse_int(raw, _INT64_MIN, _INT64_MAX)


def scan_uint(data: Data) -> int:
    """Parse a 64-bit unsigned integer.

    Negative 64-bit values are accepted and wrapped, since the server has
    no unsigned 64-bit type.
    """
    raw = _as_bytes(data)
    if not raw:
        return 0
    if raw.startswith(b"-"):
        return _parse_int(raw, _INT64_MIN, _INT64_MAX) & _UINT64_MAX
    return _parse_int(raw, 0, _UINT64_MAX)


def scan_float(data: Data) -> float:
    """Parse a floating point number; NULL and empty values give 0.0."""
    raw = _as_bytes(data)
    if not raw:
        return 0.0
    text = _text(raw)
    if "_" in text or text != text.strip():
        raise ValueError(f"pg: can't parse float {text!r}: invalid syntax")
    try:
        return float(text)
    except ValueError as exc:
        raise ValueError(f"pg: can't parse float {text!r}: invalid syntax") from exc


def scan_time(data: Data) -> datetime | time | None:
    """Parse a date or time value; NULL and empty values give None."""
    raw = _as_bytes(data)
    if not raw:
        return None
    return parse_time(raw)


def scan_bool(data: Data) -> bool:
    """Return True only for the texts ``t`` and ``1``."""
    raw = _as_bytes(data)
    return raw is not None and raw in (b"t", b"1")


def scan_ip(data: Data) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """Parse an IP address; NULL gives None."""
    raw = _as_bytes(data)
    if raw is None:
        return None
    try:
        return ipaddress.ip_address(_text(raw))
    except ValueError as exc:
        raise ValueError(f"pg: invalid ip={raw!r}") from exc


def scan_ip_network(data: Data) -> ipaddress.IPv4Network | ipaddress.IPv6Network | None:
    """Parse CIDR notation into a network with host bits cleared; NULL gives None."""
    raw = _as_bytes(data)
    if raw is None:
        return None
    text = _text(raw)
    if "/" not in text:
        raise ValueError(f"invalid CIDR address: {text}")
    try:
        return ipaddress.ip_network(text, strict=False)
    except ValueError as exc:
        raise ValueError(f"invalid CIDR address: {text}") from exc


def scan_json(data: Data) -> Any:
    """Decode a JSON value; NULL gives None."""
    raw = _as_bytes(data)
    if raw is None:
        return None
    return json.loads(_text(raw))


def _scan_bytearray(data: Data) -> bytearray | None:
    value = scan_bytes(data)
    return None if value is None else bytearray(value)


_BUILTIN: dict[type, ScannerFunc] = {
    bool: scan_bool,
    int: scan_int,
    float: scan_float,
    str: scan_string,
    bytes: scan_bytes,
    bytearray: _scan_bytearray,
    datetime: scan_time,
    time: scan_time,
    ipaddress.IPv4Address: scan_ip,
    ipaddress.IPv6Address: scan_ip,
    ipaddress.IPv4Network: scan_ip_network,
    ipaddress.IPv6Network: scan_ip_network,
    dict: scan_json,
    list: scan_json,
}

_scanners: dict[Any, ScannerFunc] = {}
_lock = threading.Lock()


def _value_scanner(typ: type) -> ScannerFunc:
    def scan_into(data: Data) -> Any:
        value = typ()
        value.scan_value(_as_bytes(data))
        return value

    return scan_into


def _dataclass_scanner(typ: type) -> ScannerFunc:
    names = {field.name for field in dataclasses.fields(typ)}

    def scan_into(data: Data) -> Any:
        decoded = scan_json(data)
        if decoded is None:
            return None
        if not isinstance(decoded, dict):
            raise ValueError(
                f"pg: can't decode {type(decoded).__name__} into {typ.__qualname__}"
            )
        return typ(**{k: v for k, v in decoded.items() if k in names})

    return scan_into


def _optional_scanner(inner: ScannerFunc) -> ScannerFunc:
    def scan_optional(data: Data) -> Any:
        if data is None:
            return None
        return inner(data)

    return scan_optional


def _type_name(typ: Any) -> str:
    return getattr(typ, "__qualname__", None) or repr(typ)


def _resolve(typ: Any) -> ScannerFunc:
    if typ is None:
        raise TypeError("pg: Scan(nil)")
    if typ is object or typ is Any:
        return scan_json

    origin = get_origin(typ)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        args = [arg for arg in get_args(typ) if arg is not type(None)]
        if len(args) == 1 and len(get_args(typ)) == 2:
            return _optional_scanner(scanner(args[0]))
        raise TypeError(f"pg: Scan(unsupported {typ!r})")
    if origin is not None:
        if origin in (list, dict):
            return scan_json
        typ = origin

    if not isinstance(typ, type):
        raise TypeError(f"pg: Scan(unsupported {typ!r})")
    if issubclass(typ, ValueScanner):
        return _value_scanner(typ)
    if dataclasses.is_dataclass(typ):
        return _dataclass_scanner(typ)
    for base in typ.__mro__:
        fn = _BUILTIN.get(base)
        if fn is not None:
            return fn
    raise TypeError(f"pg: Scan(unsupported {_type_name(typ)})")


def register_scanner(typ: Any, fn: ScannerFunc) -> None:
    """Register ``fn`` as the scanner for ``typ``.

    Raises ValueError if a scanner for the type is already known.
    """
    with _lock:
        if typ in _scanners:
            raise ValueError(
                f"pg: scanner for the type={_type_name(typ)} is already registered"
            )
        _scanners[typ] = fn


def scanner(typ: Any) -> ScannerFunc:
    """Return the scanner used for ``typ``; TypeError if there is none."""
    fn = _scanners.get(typ)
    if fn is not None:
        return fn
    fn = _resolve(typ)
    with _lock:
        return _scanners.setdefault(typ, fn)


def scan(typ: Any, data: Data) -> Any:
    """Decode raw column bytes as a value of ``typ``; ``data`` is None for NULL."""
    return scanner(typ)(data)