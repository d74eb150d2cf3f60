"""Statement assembly: ``SELECT`` / ``INSERT`` / ``UPDATE`` / ``DELETE``.

Builders compose the clause-level fragments from
:mod:`clausesql.compile.clause_builders` into complete parameterized
statements.  The output text is a whitespace-exact contract::

    select(["a.id", "b.name"], {"aa": "a"},
           join({"bb": "b"}, {"a.id": "b.id"}),
           where({"b.test": 42}))
    # Statement(sql='SELECT a.id,b.name FROM aa a JOIN bb b ON a.id = b.id '
    #               'WHERE b.test = ?', params=[42])

Every builder takes the quoting strategy as the keyword-only ``quote``
argument; pass the same strategy to nested ``join`` / ``where`` /
``order_by`` calls for uniform quoting.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from clausesql.compile.clause_builders import set_assignments
from clausesql.compile.references import column_sql, table_sql
from clausesql.errors import ArgumentError
from clausesql.quoting import QuoteStrategy, as_is
from clausesql.schema.statement import Statement

#: Marker for "all columns" in :func:`select`.
ALL_COLUMNS = "*"


def _columns_sql(columns: Any, quote: QuoteStrategy) -> str:
    if columns == ALL_COLUMNS:
        return ALL_COLUMNS
    if isinstance(columns, (str, Mapping)):
        return column_sql(columns, quote)
    rendered = [column_sql(column, quote) for column in columns]
    if not rendered:
        raise ArgumentError("select requires at least one column", argument="columns")
    return ",".join(rendered)


def _split_select_clauses(
    clauses: tuple[Any, ...],
) -> tuple[list[str], Statement | None, str | None]:
    """Split trailing ``select`` clauses into joins, predicate and ordering.

    The accepted shape is ``join* predicate? order_by?``.  Without a
    predicate, a trailing ``ORDER BY`` fragment is indistinguishable from a
    join fragment and is rendered the same way.
    """
    joins: list[str] = []
    predicate: Statement | None = None
    ordering: str | None = None
    for clause in clauses:
        if ordering is not None:
            raise ArgumentError(
                f"unexpected select clause after ORDER BY: {clause!r}", argument="clauses"
            )
        if isinstance(clause, str):
            if predicate is None:
                joins.append(clause)
            else:
                ordering = clause
        elif isinstance(clause, tuple) and predicate is None:
            predicate = Statement.coerce(clause)
        else:
            raise ArgumentError(
                f"select clauses must be join fragments, one predicate, then an "
                f"ORDER BY fragment; got {clause!r}",
                argument="clauses",
            )
    return joins, predicate, ordering


def select(
    columns: Any,
    table: str | Mapping[str, str],
    *clauses: Any,
    quote: QuoteStrategy = as_is,
) -> Statement:
    """Build a ``SELECT`` statement.

    Args:
        columns: ``"*"``, a single column (``"id"`` or ``{"id": "alias"}``),
            or a sequence of columns.
        table: Source table, optionally aliased.
        *clauses: Zero or more ``join`` fragments, an optional ``where``
            predicate, and an optional ``order_by`` fragment, in that order.
        quote: Identifier quoting strategy.

    Returns:
        The statement; its params are exactly the predicate's params.

    Raises:
        ArgumentError: If the clauses are out of order or of the wrong type.
    """
    joins, predicate, ordering = _split_select_clauses(clauses)
    sql = f"SELECT {_columns_sql(columns, quote)} FROM {table_sql(table, quote)}"
    for fragment in joins:
        sql += f" {fragment}"
    params: list[Any] = []
    if predicate is not None and not predicate.is_empty:
        sql += f" WHERE {predicate.sql}"
        params = list(predicate.params)
    if ordering:
        sql += f" {ordering}"
    return Statement(sql, params)


def _insert_prefix(table: Any, columns: Sequence[Any], quote: QuoteStrategy) -> str:
    cols = ", ".join(column_sql(column, quote) for column in columns)
    return f"INSERT INTO {table_sql(table, quote)} ( {cols} ) VALUES "


def _placeholders(count: int) -> str:
    return f"( {', '.join(['?'] * count)} )"


def _insert_single_row(
    table: Any, row: Mapping[str, Any], quote: QuoteStrategy
) -> Statement:
    if not row:
        raise ArgumentError("insert called with an empty row", argument="rows")
    columns = list(row.keys())
    return Statement(
        _insert_prefix(table, columns, quote) + _placeholders(len(columns)),
        list(row.values()),
    )


def _insert_multi_row(
    table: Any,
    columns: Sequence[Any],
    rows: Sequence[Sequence[Any]],
    quote: QuoteStrategy,
) -> Statement:
    if not columns:
        raise ArgumentError("insert called with an empty column list", argument="columns")
    width = len(columns)
    if any(len(values) != width for values in rows):
        raise ArgumentError(
            "insert called with inconsistent number of columns / values",
            argument="values",
        )
    groups = ", ".join(_placeholders(width) for _ in rows)
    params = [value for values in rows for value in values]
    return Statement(_insert_prefix(table, columns, quote) + groups, params)


def insert(
    table: str | Mapping[str, str],
    *data: Any,
    quote: QuoteStrategy = as_is,
) -> list[Statement] | Statement:
    """Build ``INSERT`` statements in one of two mutually exclusive forms.

    Row form — one or more mappings, one statement per row, columns taken
    from each row's own keys::

        insert("person", {"name": "Ada"}, {"name": "Alan", "age": 41})
        # [Statement('INSERT INTO person ( name ) VALUES ( ? )', ['Ada']),
        #  Statement('INSERT INTO person ( name, age ) VALUES ( ?, ? )', ['Alan', 41])]

    Column/values form — a column sequence then one or more value rows, one
    multi-row statement::

        insert("person", ["name", "age"], ["Ada", 36], ["Alan", 41])
        # Statement('INSERT INTO person ( name, age ) VALUES ( ?, ? ), ( ?, ? )',
        #           ['Ada', 36, 'Alan', 41])

    Raises:
        ArgumentError: If no data is given, a column list has no value rows,
            both forms are mixed, or a value row's length differs from the
            column count.
    """
    if not data:
        raise ArgumentError("insert called without data to insert", argument="data")

    rows = [item for item in data if isinstance(item, Mapping)]
    if rows:
        if len(rows) != len(data):
            raise ArgumentError(
                "insert may take records or columns and values, not both",
                argument="data",
            )
        return [_insert_single_row(table, row, quote) for row in rows]

    columns, *values = data
    if not values:
        raise ArgumentError("insert called with columns but no values", argument="data")
    if isinstance(columns, str) or any(isinstance(row, str) for row in values):
        raise ArgumentError(
            "insert columns and value rows must be sequences, not strings",
            argument="data",
        )
    return _insert_multi_row(table, list(columns), [list(row) for row in values], quote)


def update(
    table: str | Mapping[str, str],
    values: Mapping[str, Any],
    where: Statement | tuple[str, list[Any]] | None = None,
    *,
    quote: QuoteStrategy = as_is,
) -> Statement:
    """Build an ``UPDATE … SET … [WHERE …]`` statement.

    ``None`` values in ``values`` render as ``<k> = NULL``.  Params are the
    non-null assignment values followed by the predicate's params.

    Raises:
        ArgumentError: If ``values`` is empty.
    """
    if not values:
        raise ArgumentError("update requires at least one column to set", argument="values")
    assignments = set_assignments(values, quote)
    sql = f"UPDATE {table_sql(table, quote)} SET {assignments.sql}"
    params = list(assignments.params)
    predicate = Statement.coerce(where) if where is not None else None
    if predicate is not None and not predicate.is_empty:
        sql += f" WHERE {predicate.sql}"
        params.extend(predicate.params)
    return Statement(sql, params)


def delete(
    table: str | Mapping[str, str],
    where: Statement | tuple[str, list[Any]] | None = None,
    *,
    quote: QuoteStrategy = as_is,
) -> Statement:
    """Build a ``DELETE FROM … [WHERE …]`` statement."""
    sql = f"DELETE FROM {table_sql(table, quote)}"
    predicate = Statement.coerce(where) if where is not None else None
    if predicate is None or predicate.is_empty:
        return Statement(sql, [])
    return Statement(f"{sql} WHERE {predicate.sql}", list(predicate.params))
