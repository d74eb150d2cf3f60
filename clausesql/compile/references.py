"""Rendering of column, table and ordering references.

Every statement builder funnels its identifiers through these helpers so
that plain names, dotted names and aliased pairs are handled uniformly:

* ``"id"`` / ``"t.id"``   -> rendered through the quoting strategy per segment
* ``{"id": "foo"}``       -> ``id AS foo`` (columns) or ``id foo`` (tables)
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from clausesql.errors import ArgumentError
from clausesql.quoting import QuoteStrategy, render_identifier

_DIRECTIONS = frozenset({"ASC", "DESC"})


def _alias_pair(ref: Mapping[str, str], kind: str) -> tuple[str, str]:
    if len(ref) != 1:
        raise ArgumentError(
            f"aliased {kind} must be a single {{name: alias}} entry, got {dict(ref)!r}",
            argument=kind,
        )
    return next(iter(ref.items()))


def column_sql(column: str | Mapping[str, str], quote: QuoteStrategy) -> str:
    """Render a column, optionally aliased (``{"id": "foo"}`` -> ``id AS foo``)."""
    if isinstance(column, Mapping):
        name, alias = _alias_pair(column, "column")
        return f"{render_identifier(name, quote)} AS {render_identifier(alias, quote)}"
    return render_identifier(column, quote)


def table_sql(table: str | Mapping[str, str], quote: QuoteStrategy) -> str:
    """Render a table, optionally aliased (``{"person": "p"}`` -> ``person p``)."""
    if isinstance(table, Mapping):
        name, alias = _alias_pair(table, "table")
        return f"{render_identifier(name, quote)} {render_identifier(alias, quote)}"
    return render_identifier(table, quote)


def _direction(value: Any) -> str:
    direction = value.upper() if isinstance(value, str) else None
    if direction not in _DIRECTIONS:
        raise ArgumentError(
            f"order direction must be 'asc' or 'desc', got {value!r}",
            argument="direction",
        )
    return direction


def iter_order_entries(entries: Any) -> Iterator[tuple[str, str]]:
    """Yield ``(identifier, direction)`` pairs in the order supplied.

    ``entries`` may be a single identifier, a ``{identifier: direction}``
    mapping (one pair per key), or a sequence mixing both forms.
    """
    if isinstance(entries, (str, Mapping)):
        entries = [entries]
    for entry in entries:
        if isinstance(entry, Mapping):
            for identifier, direction in entry.items():
                yield identifier, _direction(direction)
        else:
            yield entry, "ASC"


def order_entry_sql(identifier: str, direction: str, quote: QuoteStrategy) -> str:
    """Render one ordering entry as ``<identifier> <ASC|DESC>``."""
    return f"{render_identifier(identifier, quote)} {direction}"
