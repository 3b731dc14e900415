"""Decoding of column values by their PostgreSQL type OID."""

from __future__ import annotations

import json
import math
import struct
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from .array_scan import scan_float_array, scan_int_array, scan_string_array
from .decode import scan_bool, scan_bytes, scan_float, scan_int, scan_string, scan_time
from .encode import ValueAppender, append_string

__all__ = ["RawValue", "read_column_value"]

Data = Optional[Union[bytes, bytearray, memoryview, str]]

_PG_BOOL = 16
_PG_INT2 = 21
_PG_INT4 = 23
_PG_INT8 = 20
_PG_FLOAT4 = 700
_PG_FLOAT8 = 701
_PG_TEXT = 25
_PG_VARCHAR = 1043
_PG_BYTEA = 17
_PG_JSON = 114
_PG_JSONB = 3802
_PG_TIMESTAMP = 1114
_PG_TIMESTAMPTZ = 1184
_PG_INT32_ARRAY = 1007
_PG_INT8_ARRAY = 1016
_PG_FLOAT8_ARRAY = 1022
_PG_STRING_ARRAY = 1009
_PG_UUID = 2950


@dataclass(frozen=True)
class RawValue(ValueAppender):
    """A column value of a type without a dedicated decoder, kept as text."""

    type: int
    value: str

    def append_value(self, flags: int) -> str:
        return append_string(self.value, flags)

    def to_json(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)


def _sized_int(bits: int) -> Callable[[Data], int]:
    limit = 1 << (bits - 1)

    def scan_sized(data: Data) -> int:
        num = scan_int(data)
        if not -limit <= num < limit:
            raise ValueError(f"pg: can't parse integer {num}: value out of range")
        return num

    return scan_sized


def _scan_float4(data: Data) -> float:
    num = scan_float(data)
    if math.isnan(num) or math.isinf(num):
        return num
    try:
        return struct.unpack("<f", struct.pack("<f", num))[0]
    except OverflowError as exc:
        raise ValueError(f"pg: can't parse float {num!r}: value out of range") from exc


_READERS: dict[int, Callable[[Data], Any]] = {
    _PG_BOOL: scan_bool,
    _PG_INT2: _sized_int(16),
    _PG_INT4: _sized_int(32),
    _PG_INT8: scan_int,
    _PG_FLOAT4: _scan_float4,
    _PG_FLOAT8: scan_float,
    _PG_BYTEA: scan_bytes,
    _PG_TEXT: scan_string,
    _PG_VARCHAR: scan_string,
    _PG_UUID: scan_string,
    _PG_JSON: scan_string,
    _PG_JSONB: scan_string,
    _PG_TIMESTAMP: scan_time,
    _PG_TIMESTAMPTZ: scan_time,
    _PG_INT32_ARRAY: scan_int_array,
    _PG_INT8_ARRAY: scan_int_array,
    _PG_FLOAT8_ARRAY: scan_float_array,
    _PG_STRING_ARRAY: scan_string_array,
}


def read_column_value(data_type: int, data: Data) -> Any:
    """Decode column text according to its type OID.

    JSON columns come back as their raw text; unknown types as RawValue.
    """
    reader = _READERS.get(data_type)
    if reader is not None:
        return reader(data)
    return RawValue(data_type, scan_string(data))