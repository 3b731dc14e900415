import pytest

from pgvalue.flags import Flag
from pgvalue.hstore import Hstore, HstoreParser, append_hstore, scan_hstore

HSTORE_CASES = [
    ('""=>""', {"": ""}),
    ("\"k''k\"=>\"k''k\"", {"k''k": "k''k"}),
    (r'"k\"k"=>"k\"k"', {'k"k': 'k"k'}),
    (r'"k\k"=>"k\k"', {"k\\k": "k\\k"}),
    ('"foo"=>"bar"', {"foo": "bar"}),
    ('"foo"=>"bar","k"=>"v"', {"foo": "bar", "k": "v"}),
]


@pytest.mark.parametrize("text,expected", HSTORE_CASES)
def test_hstore_parser_cases(text, expected):
    assert scan_hstore(text.encode()) == expected


def test_space_after_comma():
    assert scan_hstore('"foo"=>"bar", "k"=>"v"') == {"foo": "bar", "k": "v"}


def test_null_and_empty():
    assert scan_hstore(None) is None
    assert scan_hstore(b"") == {}


def test_parser_steps():
    parser = HstoreParser('"foo"=>"bar","k"=>"v"')
    assert parser.next_key() == b"foo"
    assert parser.next_value() == b"bar"
    assert parser.next_key() == b"k"
    assert parser.next_value() == b"v"
    assert parser.next_key() is None


@pytest.mark.parametrize("text", ['"a"=>x', '"a"="b"', '"a', '"a"=>"b', "a=>b"])
def test_malformed(text):
    with pytest.raises(ValueError):
        scan_hstore(text)


def test_append_plain():
    assert append_hstore({"foo": "bar"}, 0) == '"foo"=>"bar"'


def test_append_quoted():
    assert append_hstore({"it's": "v"}, Flag.QUOTE) == "'\"it''s\"=>\"v\"'"


def test_append_null():
    assert append_hstore(None, Flag.QUOTE) == "NULL"
    assert append_hstore(None, 0) == ""


def test_append_empty():
    assert append_hstore({}, 0) == ""


@pytest.mark.parametrize(
    "mapping",
    [{"foo": "bar", "k": "v"}, {'q"uote': "back\\slash"}, {"": ""}, {"a b": "c,d=>e"}],
)
def test_round_trip(mapping):
    assert scan_hstore(append_hstore(mapping, 0)) == mapping


def test_append_rejects_non_strings():
    with pytest.raises(TypeError):
        append_hstore({"a": 1}, 0)


def test_hstore_append_value():
    assert Hstore({"a": "b"}).append_value(0) == append_hstore({"a": "b"}, 0)


def test_hstore_append_value_error_marker():
    assert Hstore({"a": 1}).append_value(0).startswith("?!(pg.Hstore(unsupported")


def test_hstore_rejects_non_mapping():
    with pytest.raises(TypeError):
        Hstore([1])


def test_hstore_scan_in_place():
    dst = {"old": "value"}
    Hstore(dst).scan_value(b'"hello"=>"world"')
    assert dst == {"hello": "world"}


def test_hstore_scan_null():
    h = Hstore({"a": "b"})
    h.scan_value(None)
    assert h.value is None