"""Rendering of arbitrary Python values into SQL text, chosen by type."""

from __future__ import annotations

import dataclasses
import ipaddress
import json
import threading
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable

from .encode import (
    ValueAppender,
    append_bool,
    append_bytes,
    append_error,
    append_float,
    append_jsonb,
    append_null,
    append_string,
)
from .timefmt import append_time

__all__ = ["AppenderFunc", "register_appender", "appender", "append", "append_json"]

AppenderFunc = Callable[[Any, int], str]

_appenders: dict[type, AppenderFunc] = {}
_lock = threading.Lock()


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def append_json(v: Any, flags: int) -> str:
    """Render ``v`` as JSON text; an error marker is rendered if it cannot be encoded."""
    try:
        text = json.dumps(
            v,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_json_default,
        )
    except (TypeError, ValueError) as exc:
        return append_error(exc)
    return append_jsonb(text, flags)


def _append_appender(v: ValueAppender, flags: int) -> str:
    try:
        return v.append_value(flags)
    except Exception as exc:  # an appender's failure is rendered, not raised
        return append_error(exc)


def _append_decimal(v: Decimal, flags: int) -> str:
    if v.is_finite():
        return format(v, "f")
    return append_float(float(v), flags)


def _append_isoformat(v: date | time, flags: int) -> str:
    return append_string(v.isoformat(), flags)


def _append_text(v: Any, flags: int) -> str:
    return append_string(str(v), flags)


_BUILTIN: dict[type, AppenderFunc] = {
    type(None): lambda v, flags: append_null(flags),
    bool: lambda v, flags: append_bool(v),
    int: lambda v, flags: str(int(v)),
    float: lambda v, flags: append_float(float(v), flags),
    Decimal: _append_decimal,
    str: lambda v, flags: append_string(str.__str__(v), flags),
    bytes: lambda v, flags: append_bytes(bytes(v), flags),
    bytearray: lambda v, flags: append_bytes(bytes(v), flags),
    memoryview: lambda v, flags: append_bytes(bytes(v), flags),
    datetime: append_time,
    date: _append_isoformat,
    time: _append_isoformat,
    ipaddress.IPv4Address: _append_text,
    ipaddress.IPv6Address: _append_text,
    ipaddress.IPv4Network: _append_text,
    ipaddress.IPv6Network: _append_text,
    dict: append_json,
    list: append_json,
    tuple: append_json,
}


def _resolve(typ: type) -> AppenderFunc:
    if issubclass(typ, ValueAppender):
        return _append_appender
    if dataclasses.is_dataclass(typ):
        return append_json
    for base in typ.__mro__:
        fn = _BUILTIN.get(base)
        if fn is not None:
            return fn
    raise TypeError(f"pg: unsupported type {typ.__qualname__}")


def register_appender(typ: type, fn: AppenderFunc) -> None:
    """Register ``fn`` as the appender for ``typ``.

    Raises ValueError if an appender for the type is already known.
    """
    with _lock:
        if typ in _appenders:
            raise ValueError(
                f"pg: appender for the type={typ.__qualname__} is already registered"
            )
        _appenders[typ] = fn


def appender(typ: type) -> AppenderFunc:
    """Return the appender used for values of ``typ``; TypeError if there is none."""
    fn = _appenders.get(typ)
    if fn is not None:
        return fn
    fn = _resolve(typ)
    with _lock:
        return _appenders.setdefault(typ, fn)


def append(v: Any, flags: int) -> str:
    """Render any supported value as SQL text."""
    return appender(type(v))(v, flags)