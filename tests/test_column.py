import json
from datetime import datetime, timezone

import pytest

from pgvalue.array import append_array
from pgvalue.column import RawValue, read_column_value
from pgvalue.encode import append_bytes, append_string
from pgvalue.flags import Flag
from pgvalue.timefmt import append_time


def test_bool():
    assert read_column_value(16, b"t") is True
    assert read_column_value(16, b"f") is False


def test_ints():
    assert read_column_value(20, b"3000000000") == 3000000000
    assert read_column_value(23, b"-123") == -123
    assert read_column_value(21, b"123") == 123


def test_null_int():
    assert read_column_value(23, None) == 0


@pytest.mark.parametrize("oid,text", [(21, b"40000"), (23, b"3000000000"), (20, b"abc")])
def test_int_out_of_range(oid, text):
    with pytest.raises(ValueError):
        read_column_value(oid, text)


def test_floats():
    assert read_column_value(700, b"1.5") == 1.5
    assert read_column_value(701, b"-2.25") == -2.25


def test_float4_overflow():
    with pytest.raises(ValueError):
        read_column_value(700, b"1e300")


def test_text_types():
    assert read_column_value(25, b"hello") == "hello"
    assert read_column_value(1043, b"world") == "world"
    uuid_text = "123e4567-e89b-12d3-a456-426614174000"
    assert read_column_value(2950, uuid_text.encode()) == uuid_text


def test_bytea_round_trip():
    data = b"\x00\x01\xfe"
    assert read_column_value(17, append_bytes(data, 0).encode()) == data


def test_json_kept_raw():
    assert read_column_value(114, b'{"a": 1}') == '{"a": 1}'
    assert read_column_value(3802, b"[1,2]") == "[1,2]"


@pytest.mark.parametrize("oid", [1114, 1184])
def test_timestamp_round_trip(oid):
    dt = datetime(2006, 2, 3, 10, 30, 35, 987654, tzinfo=timezone.utc)
    assert read_column_value(oid, append_time(dt, 0).encode()) == dt


def test_arrays():
    assert read_column_value(1007, append_array([1, 2], 0).encode()) == [1, 2]
    assert read_column_value(1016, append_array([2**40], 0).encode()) == [2**40]
    assert read_column_value(1022, append_array([1.5, -0.5], 0).encode()) == [1.5, -0.5]
    assert read_column_value(1009, append_array(["a", "b c"], 0).encode()) == ["a", "b c"]


def test_unknown_type_raw_value():
    assert read_column_value(600, b"(1,2)") == RawValue(600, "(1,2)")


def test_raw_value_append():
    assert RawValue(600, "it's").append_value(Flag.QUOTE) == append_string("it's", Flag.QUOTE)


def test_raw_value_json():
    assert json.loads(RawValue(600, 'x"y').to_json()) == 'x"y'