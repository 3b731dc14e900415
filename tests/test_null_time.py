from datetime import datetime, timedelta, timezone

import pytest

from pgvalue.flags import Flag
from pgvalue.null_time import NullTime
from pgvalue.timefmt import append_time

UTC_DT = datetime(2006, 2, 3, 10, 30, 35, 987654, tzinfo=timezone.utc)
OFFSET_DT = datetime(2006, 2, 3, 10, 30, 35, 500000, tzinfo=timezone(timedelta(hours=3)))


def test_zero_append_is_null():
    assert NullTime().append_value(Flag.QUOTE) == "NULL"
    assert NullTime().append_value(0) == ""


def test_append_matches_append_time():
    assert NullTime(UTC_DT).append_value(Flag.QUOTE) == append_time(UTC_DT, Flag.QUOTE)


def test_zero_json_is_null():
    assert NullTime().to_json() == "null"
    assert NullTime.from_json("null") == NullTime()
    assert NullTime.from_json(b"null") == NullTime()


def test_utc_json_uses_z():
    assert NullTime(UTC_DT).to_json().endswith('Z"')


@pytest.mark.parametrize("dt", [UTC_DT, OFFSET_DT])
def test_json_round_trip(dt):
    restored = NullTime.from_json(NullTime(dt).to_json())
    assert restored.time == dt
    assert restored.time.utcoffset() == dt.utcoffset()


@pytest.mark.parametrize("text", ["123", '"2006-01-02"', '"not a time at all"', "{"])
def test_from_json_rejects(text):
    with pytest.raises(ValueError):
        NullTime.from_json(text)


def test_scan_round_trip():
    nt = NullTime()
    nt.scan(append_time(OFFSET_DT, 0).encode())
    assert nt.time == OFFSET_DT


def test_scan_null_clears():
    nt = NullTime(UTC_DT)
    nt.scan(None)
    assert nt.time is None
    assert nt.append_value(Flag.QUOTE) == "NULL"


def test_scan_invalid():
    with pytest.raises(ValueError):
        NullTime().scan(b"15:04:05")