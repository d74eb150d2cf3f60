"""Nesting-aware transaction manager.

``run_in_transaction`` runs a unit of work with commit-or-rollback-once
semantics.  Only the outermost invocation (level 1) touches the connection's
transaction state; nested invocations run inline and can only request a
rollback through :func:`~clausesql.execute.context.set_rollback_only`::

    def transfer(ctx):
        execute_statement(ctx, "UPDATE account SET balance = balance - ? WHERE id = ?", [[10, 1]])
        run_in_transaction(ctx, credit)          # absorbed, no commit here
        if overdrawn(ctx):
            set_rollback_only(ctx)

    run_in_transaction(TransactionContext.open(conn), transfer)

Failures
--------
Any exception raised by the unit of work rolls back the outer transaction
before propagating.  When a driver error was wrapped by a non-database
exception (``raise RuntimeError(...) from exc``), the original driver error
is re-raised instead of the wrapper.
"""
from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import replace
from typing import Any, NoReturn, TypeVar

from clausesql.errors import TransactionError
from clausesql.execute.context import TransactionContext, TransactionState

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Optional observer of the outermost transaction's state transitions.
StateListener = Callable[[TransactionState], None]


def database_error_types(connection: Any) -> tuple[type[BaseException], ...]:
    """Return the PEP 249 ``Error`` base class for ``connection``'s driver.

    Looks at the connection's optional ``Error`` attribute first, then at the
    ``Error`` class of the driver's top-level module.
    """
    error_type = getattr(connection, "Error", None)
    if not isinstance(error_type, type):
        driver = sys.modules.get(type(connection).__module__.split(".")[0])
        error_type = getattr(driver, "Error", None)
    if isinstance(error_type, type) and issubclass(error_type, BaseException):
        return (error_type,)
    return ()


def find_database_error(
    exc: BaseException, error_types: tuple[type[BaseException], ...]
) -> BaseException | None:
    """Walk the ``__cause__`` chain of ``exc`` to the first database error."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if error_types and isinstance(current, error_types):
            return current
        seen.add(id(current))
        current = current.__cause__
    return None


def raise_database_error(exc: BaseException, connection: Any) -> NoReturn:
    """Re-raise ``exc``, exposing a wrapped database error when there is one.

    Database errors themselves are re-raised untouched; so is any exception
    that carries no database error in its cause chain.
    """
    original = find_database_error(exc, database_error_types(connection))
    if original is None or original is exc:
        raise exc
    logger.debug(
        "Unwrapped %s from %s", type(original).__name__, type(exc).__name__
    )
    raise original from None


def _read_mode(connection: Any) -> tuple[str, Any]:
    """Return the attribute holding the connection's transaction mode and its value.

    PEP 249's ``autocommit`` is preferred; ``sqlite3`` before Python 3.12
    only offers ``isolation_level``, where ``None`` means autocommit.
    """
    for attribute in ("autocommit", "isolation_level"):
        try:
            return attribute, getattr(connection, attribute)
        except AttributeError:
            continue
    raise TransactionError(
        "connection exposes neither an 'autocommit' nor an 'isolation_level' attribute",
        connection_type=f"{type(connection).__module__}.{type(connection).__qualname__}",
    )


def _begin(connection: Any, attribute: str, saved: Any) -> None:
    if attribute == "autocommit":
        connection.autocommit = False
    elif saved is None:
        connection.isolation_level = ""


def _restore(connection: Any, attribute: str, saved: Any) -> None:
    if attribute == "isolation_level":
        connection.isolation_level = saved
        return
    # Driver-specific modes (sqlite3's LEGACY_TRANSACTION_CONTROL) leave the
    # transaction implicitly opened after commit/rollback; True closes it.
    if saved is not True and saved is not False:
        connection.autocommit = True
    connection.autocommit = saved


def run_in_transaction(
    context: TransactionContext,
    work: Callable[[TransactionContext], T],
    listener: StateListener | None = None,
) -> T:
    """Evaluate ``work`` as a transaction on the context's connection.

    Nested transactions are absorbed into the outermost one.  The outermost
    call commits once ``work`` returns, or rolls back if a rollback was
    requested at any level or ``work`` raised.

    Args:
        context: Context of the caller; a nested context is derived from it
            and handed to ``work``.
        work: The unit of work.
        listener: Optional callback notified of the outermost transaction's
            state transitions (``IN_PROGRESS`` then ``COMMITTED`` or
            ``ROLLED_BACK``).  Ignored for nested calls.

    Returns:
        Whatever ``work`` returns.

    Raises:
        NoConnectionError: If the context has no connection.
        TransactionError: If the connection has neither ``autocommit`` nor
            ``isolation_level``.
    """
    nested = context.nested()
    connection = nested.require_connection()

    if nested.level > 1:
        try:
            return work(nested)
        except Exception as exc:
            raise_database_error(exc, connection)

    attribute, saved_mode = _read_mode(connection)
    nested = replace(nested, saved_autocommit=saved_mode)
    notify = listener or (lambda state: None)

    _begin(connection, attribute, saved_mode)
    notify(TransactionState.IN_PROGRESS)
    try:
        result = work(nested)
        if nested.rollback.requested:
            logger.debug("Rollback requested; rolling back transaction")
            connection.rollback()
            notify(TransactionState.ROLLED_BACK)
        else:
            connection.commit()
            notify(TransactionState.COMMITTED)
        return result
    except Exception as exc:
        logger.debug("Rolling back transaction after %s", type(exc).__name__)
        connection.rollback()
        notify(TransactionState.ROLLED_BACK)
        raise_database_error(exc, connection)
    finally:
        nested.rollback.reset()
        _restore(connection, attribute, saved_mode)
