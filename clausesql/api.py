"""Top-level API: build and execute statements on an open connection.

Each function creates a fresh
:class:`~clausesql.execute.context.TransactionContext` for the connection it
receives and never closes the connection; acquiring and releasing
connections stays with the caller::

    conn = sqlite3.connect("app.db")
    keys = insert_rows(conn, "person", {"name": "Ada"}, {"name": "Alan"})
    people = query(conn, select("*", "person", order_by("name")))
    update_rows(conn, "person", {"name": "Grace"}, where({"id": keys[0]}))
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from clausesql.compile.statements import delete, insert, update
from clausesql.errors import ArgumentError
from clausesql.execute.context import TransactionContext
from clausesql.execute.engine import execute_returning_keys, execute_statement, run_query
from clausesql.execute.transaction import run_in_transaction
from clausesql.schema.options import ExecutionOptions, QueryOptions
from clausesql.schema.statement import Statement

_DEFAULT_EXECUTION = ExecutionOptions()
_DEFAULT_QUERY = QueryOptions()


def query(
    connection: Any,
    statement: Statement | tuple[str, Sequence[Any]] | str,
    options: QueryOptions | None = None,
) -> Any:
    """Run a read query and return its materialized rows.

    By default returns a ``list`` of dicts keyed by lower-cased column label.
    """
    options = options or _DEFAULT_QUERY
    return run_query(
        TransactionContext.open(connection),
        statement,
        row=options.row,
        result_set=options.result_set,
        identifiers=options.identifiers,
    )


def execute(
    connection: Any,
    statement: Statement | tuple[str, Sequence[Any]] | str,
    *param_groups: Sequence[Any],
    options: ExecutionOptions | None = None,
) -> list[int]:
    """Execute a data-modifying statement and return its update counts.

    Without ``param_groups`` the statement runs once with its own parameters.
    Otherwise ``statement`` must carry no parameters and runs once per group
    on a single cursor, inside one transaction by default, reporting one
    update count per group.

    Raises:
        ArgumentError: If both the statement and ``param_groups`` supply
            parameters.
    """
    options = options or _DEFAULT_EXECUTION
    sql, params = Statement.coerce(statement)
    if param_groups and params:
        raise ArgumentError(
            "pass parameters with the statement or as parameter groups, not both",
            argument="param_groups",
        )
    return execute_statement(
        TransactionContext.open(connection),
        sql,
        param_groups or [params],
        run_in_transaction=options.run_in_transaction,
    )


def insert_rows(
    connection: Any,
    table: str | Mapping[str, str],
    *data: Any,
    options: ExecutionOptions | None = None,
) -> list[Any]:
    """Insert rows and report what the database generated.

    Row form (one mapping per row) returns one generated key per row; the
    update count stands in for drivers without generated-key support.  All
    rows run inside one outer transaction when ``run_in_transaction`` is set.

    Column/values form (a column sequence followed by value rows) runs one
    multi-row statement and returns its update count as ``[count]``.

    Raises:
        ArgumentError: For a malformed insert shape, before any I/O.
    """
    options = options or _DEFAULT_EXECUTION
    statements = insert(table, *data, quote=options.quote)
    context = TransactionContext.open(connection)

    if isinstance(statements, Statement):
        return execute_statement(
            context,
            statements.sql,
            [statements.params],
            run_in_transaction=options.run_in_transaction,
        )

    def insert_each(ctx: TransactionContext) -> list[Any]:
        return [
            execute_returning_keys(
                ctx,
                sql,
                params,
                run_in_transaction=options.run_in_transaction,
                generated_keys=options.generated_keys,
            )
            for sql, params in statements
        ]

    if options.run_in_transaction:
        return run_in_transaction(context, insert_each)
    return insert_each(context)


def update_rows(
    connection: Any,
    table: str | Mapping[str, str],
    values: Mapping[str, Any],
    where: Statement | tuple[str, Sequence[Any]] | None = None,
    options: ExecutionOptions | None = None,
) -> list[int]:
    """Build and execute an ``UPDATE``; returns ``[update_count]``."""
    options = options or _DEFAULT_EXECUTION
    return execute(connection, update(table, values, where, quote=options.quote), options=options)


def delete_rows(
    connection: Any,
    table: str | Mapping[str, str],
    where: Statement | tuple[str, Sequence[Any]] | None = None,
    options: ExecutionOptions | None = None,
) -> list[int]:
    """Build and execute a ``DELETE``; returns ``[update_count]``."""
    options = options or _DEFAULT_EXECUTION
    return execute(connection, delete(table, where, quote=options.quote), options=options)
