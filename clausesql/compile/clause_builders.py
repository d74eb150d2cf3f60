"""Clause-level SQL builders.

Each function renders exactly one reusable SQL fragment.  All of them are
pure and order-preserving: entries come out in the order the caller's
mapping or sequence yields them, never sorted.

Functions
---------
where            — ``<id> = ? AND <id> IS NULL ...`` plus parameters
join             — ``JOIN <table> ON <l> = <r> AND ...``
order_by         — ``ORDER BY <id> ASC,<id> DESC``
set_assignments  — ``<k> = ?,<k> = NULL`` plus parameters (``UPDATE ... SET``)
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from clausesql.compile.references import iter_order_entries, order_entry_sql, table_sql
from clausesql.errors import ArgumentError
from clausesql.quoting import QuoteStrategy, as_is, render_identifier
from clausesql.schema.statement import Statement


def where(predicates: Mapping[str, Any], *, quote: QuoteStrategy = as_is) -> Statement:
    """Build an equality predicate from an ordered mapping.

    ``None`` values render as ``<id> IS NULL`` and bind no parameter; every
    other value renders as ``<id> = ?`` and binds the value.

    Args:
        predicates: Mapping of identifier to value, in the desired order.
        quote: Identifier quoting strategy.

    Returns:
        The predicate text (without the ``WHERE`` keyword) and its params.
        An empty mapping yields ``Statement("", [])``.
    """
    parts: list[str] = []
    params: list[Any] = []
    for identifier, value in predicates.items():
        rendered = render_identifier(identifier, quote)
        if value is None:
            parts.append(f"{rendered} IS NULL")
        else:
            parts.append(f"{rendered} = ?")
            params.append(value)
    return Statement(" AND ".join(parts), params)


def join(
    table: str | Mapping[str, str],
    on: Mapping[str, str],
    *,
    quote: QuoteStrategy = as_is,
) -> str:
    """Build a ``JOIN … ON …`` fragment.

    Args:
        table: Joined table, optionally aliased (``{"bb": "b"}``).
        on: Mapping of left identifier to right identifier; each pair becomes
            an equality condition, joined by ``AND``.
        quote: Identifier quoting strategy.

    Raises:
        ArgumentError: If ``on`` is empty.
    """
    if not on:
        raise ArgumentError("join requires at least one ON condition", argument="on")
    conditions = " AND ".join(
        f"{render_identifier(left, quote)} = {render_identifier(right, quote)}"
        for left, right in on.items()
    )
    return f"JOIN {table_sql(table, quote)} ON {conditions}"


def order_by(entries: Any, *, quote: QuoteStrategy = as_is) -> str:
    """Build an ``ORDER BY`` fragment.

    Args:
        entries: A single identifier (``"a"``), a direction mapping
            (``{"a": "desc"}``), or a sequence of either.  Directions default
            to ``ASC``.
        quote: Identifier quoting strategy.

    Raises:
        ArgumentError: If no entries are given or a direction is unknown.
    """
    rendered = [
        order_entry_sql(identifier, direction, quote)
        for identifier, direction in iter_order_entries(entries)
    ]
    if not rendered:
        raise ArgumentError("order_by requires at least one column", argument="entries")
    return f"ORDER BY {','.join(rendered)}"


def set_assignments(values: Mapping[str, Any], quote: QuoteStrategy) -> Statement:
    """Build the assignment list of an ``UPDATE … SET`` clause.

    ``None`` values render as ``<k> = NULL`` and bind no parameter.
    """
    parts: list[str] = []
    params: list[Any] = []
    for identifier, value in values.items():
        rendered = render_identifier(identifier, quote)
        if value is None:
            parts.append(f"{rendered} = NULL")
        else:
            parts.append(f"{rendered} = ?")
            params.append(value)
    return Statement(",".join(parts), params)
