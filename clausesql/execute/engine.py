"""Execution engine: run parameterized statements on a DB-API connection.

Three entry points, all taking an explicit
:class:`~clausesql.execute.context.TransactionContext`:

``execute_statement``
    One statement, zero or more parameter groups; returns one update count
    per group.
``execute_returning_keys``
    One single-row statement; returns the generated key, or the update
    count when the driver cannot report one.
``run_query``
    A read query; rows are materialized as dicts before the cursor closes.

Each call owns exactly one cursor and closes it on every exit path.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from contextlib import closing
from typing import Any, TypeVar

from clausesql.execute.capabilities import CapabilityRegistry
from clausesql.execute.context import TransactionContext
from clausesql.execute import transaction
from clausesql.execute.transaction import raise_database_error
from clausesql.quoting import QuoteStrategy, lower_case
from clausesql.schema.options import identity
from clausesql.schema.statement import Statement

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run(
    context: TransactionContext,
    work: Callable[[TransactionContext], T],
    transactional: bool,
) -> T:
    if transactional:
        return transaction.run_in_transaction(context, work)
    try:
        return work(context)
    except Exception as exc:
        raise_database_error(exc, context.connection)


def execute_statement(
    context: TransactionContext,
    sql: str,
    param_groups: Iterable[Sequence[Any]] = (),
    run_in_transaction: bool = True,
) -> list[int]:
    """Execute ``sql`` once per parameter group.

    Args:
        context: Transaction context holding the connection.
        sql: Statement text with ``?`` placeholders.
        param_groups: Parameter sequences, applied in order.  With no groups
            the statement runs once without bound parameters.
        run_in_transaction: Wrap the execution in a (possibly nested)
            transaction.

    Returns:
        One update count per group, in the same order (a single count when
        no groups were given).
    """
    groups = [list(group) for group in param_groups]
    connection = context.require_connection()

    with closing(connection.cursor()) as cursor:

        def work(_: TransactionContext) -> list[int]:
            if not groups:
                logger.debug("Executing %s", sql)
                cursor.execute(sql)
                return [cursor.rowcount]
            logger.debug("Executing %s with %d parameter group(s)", sql, len(groups))
            counts: list[int] = []
            for group in groups:
                cursor.execute(sql, group)
                counts.append(cursor.rowcount)
            return counts

        return _run(context, work, run_in_transaction)


def execute_returning_keys(
    context: TransactionContext,
    sql: str,
    params: Sequence[Any] = (),
    run_in_transaction: bool = True,
    generated_keys: bool | None = None,
) -> Any:
    """Execute a single-row statement and return its generated key.

    Args:
        context: Transaction context holding the connection.
        sql: Statement text with ``?`` placeholders.
        params: Values for the placeholders.
        run_in_transaction: Wrap the execution in a (possibly nested)
            transaction.
        generated_keys: Whether the driver reports generated keys through
            ``cursor.lastrowid``; ``None`` consults
            :class:`~clausesql.execute.capabilities.CapabilityRegistry`.

    Returns:
        The generated key, or the update count when the driver does not
        support generated keys or reported none for this statement.
    """
    connection = context.require_connection()
    if generated_keys is None:
        generated_keys = CapabilityRegistry.for_connection(connection).generated_keys

    with closing(connection.cursor()) as cursor:

        def work(_: TransactionContext) -> Any:
            logger.debug("Executing %s returning keys", sql)
            cursor.execute(sql, list(params))
            count = cursor.rowcount
            if not generated_keys:
                return count
            key = getattr(cursor, "lastrowid", None)
            return count if key is None else key

        return _run(context, work, run_in_transaction)


def run_query(
    context: TransactionContext,
    statement: Statement | tuple[str, Sequence[Any]] | str,
    *,
    row: Callable[[dict[str, Any]], Any] = identity,
    result_set: Callable[[Iterable[Any]], T] = list,  # type: ignore[assignment]
    identifiers: QuoteStrategy = lower_case,
) -> T:
    """Execute a read query and hand its rows to ``result_set``.

    Args:
        context: Transaction context holding the connection.
        statement: The query and its parameters.
        row: Applied to each row dict.
        result_set: Receives the lazy iterable of mapped rows; it must
            consume it, as the cursor closes when it returns.
        identifiers: Renders each column label into a row key.

    Returns:
        Whatever ``result_set`` returns (a ``list`` by default).

    Raises:
        ArgumentError: If ``statement`` is not a recognised shape.
    """
    sql, params = Statement.coerce(statement)
    connection = context.require_connection()

    with closing(connection.cursor()) as cursor:
        logger.debug("Querying %s", sql)
        try:
            cursor.execute(sql, params)
        except Exception as exc:
            raise_database_error(exc, connection)
        labels = [identifiers(column[0]) for column in cursor.description or ()]
        rows = (dict(zip(labels, values)) for values in cursor)
        return result_set(row(r) for r in rows)
