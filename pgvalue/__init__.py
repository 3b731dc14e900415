"""Encode Python values as PostgreSQL literals and decode PostgreSQL text-format values."""

__version__ = "10.11.0"

__all__ = [
    "flags",
    "timefmt",
    "encode",
    "values",
    "array",
    "decode",
    "array_scan",
    "hstore",
    "in_op",
    "column",
    "null_time",
]