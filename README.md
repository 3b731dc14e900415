# pgvalue

`pgvalue` converts between Python values and PostgreSQL's text
representation. It does two jobs:

- it renders values as SQL literals, or as the plain text of a query
  parameter;
- it parses the text that PostgreSQL sends for a column back into Python
  values.

The package needs nothing outside the standard library.

## Installation

```
pip install pgvalue
```

## Flags

Every encoder takes an integer `flags` argument built from `pgvalue.flags.Flag`:

| Flag | Effect |
|------|--------|
| `Flag.QUOTE` | Produce a quoted SQL literal, such as `'it''s'`. |
| `Flag.ARRAY` | Produce an element inside an array literal. |
| `Flag.SUBARRAY` | Mark a nested array, so it is not quoted again. |

Passing `0` gives the raw text, which suits a query parameter.
`has_flag` and `should_quote_array` in the same module test these bits.

## Encoding values

```python
from pgvalue.flags import Flag
from pgvalue.values import append
from pgvalue.encode import Safe, Ident, append_ident

append("it's", Flag.QUOTE)          # "'it''s'"
append(None, Flag.QUOTE)            # "NULL"
append(True, 0)                     # "TRUE"
append(b"\x01\x02", Flag.QUOTE)     # "'\\x0102'"
append({"a": 1}, Flag.QUOTE)        # JSON, quoted and escaped

append_ident("table.id", Flag.QUOTE)      # '"table"."id"'
Ident("table.*").append_value(Flag.QUOTE) # '"table".*'
Safe("now()").append_value(Flag.QUOTE)    # 'now()'
```

NUL characters are dropped from text. Datetimes are rendered in UTC
(`pgvalue.timefmt.append_time`); naive datetimes are taken to be UTC.
Dicts, lists, tuples and dataclasses are rendered as JSON, with `\u0000`
escaped as `\\u0000` (`pgvalue.encode.append_jsonb`).
`pgvalue.encode.HexEncoder` builds a bytea literal from bytes written to it
piece by piece.

Any class that subclasses `pgvalue.encode.ValueAppender` and implements
`append_value(flags)` is rendered by that method.
`pgvalue.values.register_appender` adds an encoder for your own type;
registering a type twice raises `ValueError`.
`pgvalue.values.appender` returns the encoder that applies to a type and
raises `TypeError` for unsupported types.

## Arrays, hstore and IN lists

```python
from pgvalue.flags import Flag
from pgvalue.array import append_array, parse_array
from pgvalue.array_scan import Array, scan_int_array
from pgvalue.hstore import append_hstore, scan_hstore
from pgvalue.in_op import in_, in_multi

append_array(["a", "b"], Flag.QUOTE)      # '\'{"a","b"}\''
parse_array(b'{1,NULL,"x"}')              # [b"1", None, b"x"]
scan_int_array(b"{1,2,3}")                # [1, 2, 3]
Array([1, 2]).append_value(0)             # "{1,2}"

append_hstore({"k": "v"}, Flag.QUOTE)     # '\'"k"=>"v"\''
scan_hstore(b'"foo"=>"bar"')              # {"foo": "bar"}

in_multi(1, 2, 3).append_value(0)         # "1,2,3"
in_([[1, 2], [3, 4]]).append_value(0)     # "(1,2),(3,4)"
```

`pgvalue.array.ArrayParser` yields the elements of an array literal one at
a time; sub-arrays come back as their raw text. `pgvalue.array_scan.scan_array`
decodes elements of a given type, and `list[X]` as the element type decodes
nested arrays. A class implementing `pgvalue.array_scan.ArrayValueScanner`
receives elements one by one through `scan_array_value_scanner`.

`Array` and `pgvalue.hstore.Hstore` wrap a list or mapping; their
`scan_value` replaces the contents of the wrapped list or mapping in place.

`in_` given something other than a list or tuple returns an object whose
`append_value` raises `TypeError`.

## Decoding values

```python
from pgvalue.decode import scan, scan_bytes, scan_bool
from pgvalue.column import read_column_value
from pgvalue.timefmt import parse_time_string

scan(int, b"42")                            # 42
scan_bytes(b"\\x0102")                      # b"\x01\x02"
scan_bool(b"t")                             # True
read_column_value(23, b"7")                 # 7  (int4)
parse_time_string("2006-01-02 15:04:05+07") # aware datetime
```

The decoders take `None` to mean SQL `NULL`. `scan` accepts built-in types,
`Optional[X]`, dataclasses (decoded from JSON) and subclasses of
`pgvalue.decode.ValueScanner`. `pgvalue.decode.register_scanner` adds a
decoder for your own type.

`parse_time_string` returns a `datetime.time` in UTC for a bare time of day
and an aware `datetime.datetime` otherwise.

`read_column_value` picks a decoder from the column's type OID. JSON and
JSONB columns come back as their raw text; types it does not know come back
as a `pgvalue.column.RawValue` holding the OID and the text.

`pgvalue.null_time.NullTime` wraps an optional datetime. An empty value is
written as SQL `NULL` and as JSON `null`; `to_json` and `from_json` use
RFC 3339 text.

## What this package does not do

`pgvalue` only converts values. It does not connect to a server, send
queries, format query templates with placeholders, or manage transactions;
pair it with a client that does.

## Running the tests

```
pip install -e ".[test]"
pytest
```