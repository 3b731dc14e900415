import math

import pytest

from pgvalue.array import ArrayParser, append_array, parse_array
from pgvalue.flags import Flag

ARRAY_TESTS = [
    ("{}", []),
    ('{""}', [b""]),
    ('{"\\\\"}', [b"\\"]),
    ("{\"''\"}", [b"''"]),
    ("{{\"''\\\"{}\"}}", [b"{\"''\\\"{}\"}"]),
    ("{\"''\\\"{}\"}", [b"''\"{}"]),
    ("{1,2}", [b"1", b"2"]),
    ("{1,NULL}", [b"1", None]),
    ('{"1","2"}', [b"1", b"2"]),
    ('{"{1}","{2}"}', [b"{1}", b"{2}"]),
    ("{{1,2},{3}}", [b"{1,2}", b"{3}"]),
]


@pytest.mark.parametrize("text,wanted", ARRAY_TESTS)
def test_array_parser(text, wanted):
    assert list(ArrayParser(text.encode())) == wanted
    assert parse_array(text) == wanted


def test_next_elem_stops_at_end():
    parser = ArrayParser(b"{a}")
    assert parser.next_elem() == b"a"
    with pytest.raises(StopIteration):
        parser.next_elem()


@pytest.mark.parametrize(
    "text",
    [b"", b"1,2}", b'{"abc', b'{"a"x}', b"{1", b"{{1,2", b'{"a"'],
)
def test_malformed_arrays_raise(text):
    with pytest.raises(ValueError):
        parse_array(text)


def test_missing_brace_error_is_sticky():
    parser = ArrayParser(b"[1]")
    for _ in range(2):
        with pytest.raises(ValueError):
            parser.next_elem()


def test_append_ints():
    assert append_array([1, 2], 0) == "{1,2}"
    assert append_array([3, 4], Flag.QUOTE) == "'{3,4}'"


def test_append_empty_and_none():
    assert append_array([], 0) == "{}"
    assert append_array(None, 0) == ""
    assert append_array(None, Flag.QUOTE) == "NULL"


def test_nested_arrays_quote_only_outer():
    assert append_array([[1, 2], [3]], 0) == "{{1,2},{3}}"
    assert append_array([[1, 2], [3]], Flag.QUOTE) == "'{{1,2},{3}}'"
    assert parse_array(append_array([[1, 2], [3]], 0)) == [b"{1,2}", b"{3}"]


def test_float_specials_are_not_quoted_inside_arrays():
    out = append_array([float("nan"), 1.5], Flag.QUOTE)
    assert out == "'{NaN,1.5}'"
    parsed = parse_array(out[1:-1])
    assert math.isnan(float(parsed[0])) and float(parsed[1]) == 1.5


def test_strings_are_double_quoted():
    assert append_array(["one@example.com", "two@example.com"], 0) == (
        '{"one@example.com","two@example.com"}'
    )


def test_single_quotes_doubled_when_quoting():
    assert append_array(["it's"], Flag.QUOTE) == "'{\"it''s\"}'"


@pytest.mark.parametrize(
    "strings",
    [["a", "b"], ['a"b\\c'], ["", "x y"], ["it's", "{}", ","]],
)
def test_string_round_trip(strings):
    assert parse_array(append_array(strings, 0)) == [s.encode() for s in strings]


def test_null_element_in_quoted_array():
    out = append_array([1, None], Flag.QUOTE)
    assert parse_array(out[1:-1]) == [b"1", None]


def test_tuple_is_accepted():
    assert append_array((5, 6), 0) == append_array([5, 6], 0)


def test_unsupported_value_raises():
    with pytest.raises(TypeError):
        append_array(5, 0)
    with pytest.raises(TypeError):
        append_array("abc", 0)