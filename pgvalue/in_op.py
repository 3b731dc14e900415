"""Rendering of value lists for SQL ``IN (...)`` expressions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .encode import ValueAppender
from .values import append

__all__ = ["InOp", "in_", "in_multi"]


def _append_in(values: Sequence[Any], flags: int) -> str:
    return ",".join(
        f"({_append_in(elem, flags)})" if isinstance(elem, (list, tuple)) else append(elem, flags)
        for elem in values
    )


class InOp(ValueAppender):
    """Renders its values separated by commas; nested lists become tuples."""

    def __init__(self, values: Sequence[Any], error: str | None = None) -> None:
        self._values = values
        self._error = error

    def append_value(self, flags: int) -> str:
        if self._error is not None:
            raise TypeError(self._error)
        return _append_in(self._values, flags)


def in_(values: Sequence[Any]) -> InOp:
    """Wrap a list or tuple for use in ``IN (?)``."""
    if not isinstance(values, (list, tuple)):
        return InOp((), f"pg: In(non-slice {type(values).__qualname__})")
    return InOp(values)


def in_multi(*args: Any) -> InOp:
    """Wrap the given arguments for use in ``IN (?)``."""
    return InOp(list(args))