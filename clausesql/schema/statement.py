"""The ``Statement`` value type returned by every builder.

A statement is SQL text with qmark (``?``) placeholders plus the ordered list
of values to bind to them.  It is a ``NamedTuple`` so it unpacks and compares
like a plain pair::

    sql, params = where({"id": 42})
    assert where({"id": 42}) == ("id = ?", [42])
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NamedTuple

from clausesql.errors import ArgumentError


class Statement(NamedTuple):
    """SQL text plus its positional parameters.

    Attributes:
        sql: SQL text; may be empty for an empty predicate.
        params: Values for the ``?`` placeholders, in left-to-right order.
    """

    sql: str
    params: list[Any]

    @property
    def is_empty(self) -> bool:
        """``True`` when the statement carries no SQL text."""
        return not self.sql

    @classmethod
    def coerce(cls, value: Any) -> Statement:
        """Normalise ``value`` into a :class:`Statement`.

        Accepts a ``Statement``, a bare SQL string (no parameters), or a
        two-item ``(sql, params)`` sequence.

        Raises:
            ArgumentError: For any other shape.
        """
        if isinstance(value, Statement):
            return value
        if isinstance(value, str):
            return cls(value, [])
        if (
            isinstance(value, Sequence)
            and len(value) == 2
            and isinstance(value[0], str)
            and isinstance(value[1], Sequence)
            and not isinstance(value[1], str)
        ):
            return cls(value[0], list(value[1]))
        raise ArgumentError(
            f'"statement" expected a Statement, a SQL string or an (sql, params) pair, '
            f"found {type(value).__name__} {value!r}",
            argument="statement",
        )
