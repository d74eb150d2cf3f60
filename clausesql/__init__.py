"""clausesql – composable SQL statements with nested-transaction execution.

Public API
----------
Builders (pure, return ``Statement(sql, params)`` or a SQL fragment):
``select``, ``insert``, ``update``, ``delete``, ``where``, ``join``,
``order_by``.

Execution (take an open PEP 249 connection):
``query``, ``execute``, ``insert_rows``, ``update_rows``, ``delete_rows``.

Lower-level execution building blocks live in :mod:`clausesql.execute`:
``TransactionContext``, ``run_in_transaction``, ``execute_statement``,
``execute_returning_keys``, ``run_query``.

Quoting strategies
------------------
``as_is`` (default), ``lower_case``, ``quoted(q)`` and ``from_sqlalchemy``.
Pass one as ``quote=`` to any builder::

    select(["a.id", "b.name"], {"aa": "a"},
           join({"bb": "b"}, {"a.id": "b.id"}, quote=quoted("`")),
           where({"b.test": 42}, quote=quoted("`")),
           quote=quoted("`"))

Extensibility
-------------
Generated-key support for a DB-API driver can be declared via::

    from clausesql.execute.capabilities import CapabilityRegistry, DriverCapabilities

    CapabilityRegistry.register("oracledb", DriverCapabilities(generated_keys=False))
"""

from __future__ import annotations

from clausesql.api import delete_rows, execute, insert_rows, query, update_rows
from clausesql.compile.clause_builders import join, order_by, where
from clausesql.compile.statements import ALL_COLUMNS, delete, insert, select, update
from clausesql.errors import (
    ArgumentError,
    ClauseSQLError,
    NoConnectionError,
    TransactionError,
)
from clausesql.execute.capabilities import CapabilityRegistry, DriverCapabilities
from clausesql.execute.context import (
    TransactionContext,
    TransactionState,
    set_rollback_only,
)
from clausesql.execute.engine import execute_returning_keys, execute_statement, run_query
from clausesql.execute.transaction import run_in_transaction
from clausesql.quoting import (
    QuoteStrategy,
    as_is,
    from_sqlalchemy,
    lower_case,
    quoted,
    render_identifier,
)
from clausesql.schema.options import ExecutionOptions, QueryOptions
from clausesql.schema.statement import Statement

# ---------------------------------------------------------------------------
# Register built-in driver capabilities with CapabilityRegistry
# ---------------------------------------------------------------------------

CapabilityRegistry.register("sqlite3", DriverCapabilities(generated_keys=True))
CapabilityRegistry.register("pymysql", DriverCapabilities(generated_keys=True))
CapabilityRegistry.register("MySQLdb", DriverCapabilities(generated_keys=True))
CapabilityRegistry.register("mysql", DriverCapabilities(generated_keys=True))
CapabilityRegistry.register("psycopg", DriverCapabilities(generated_keys=False))
CapabilityRegistry.register("psycopg2", DriverCapabilities(generated_keys=False))

__all__ = [
    # Builders
    "ALL_COLUMNS",
    "select",
    "insert",
    "update",
    "delete",
    "where",
    "join",
    "order_by",
    "Statement",
    # Quoting
    "QuoteStrategy",
    "as_is",
    "lower_case",
    "quoted",
    "from_sqlalchemy",
    "render_identifier",
    # Execution
    "query",
    "execute",
    "insert_rows",
    "update_rows",
    "delete_rows",
    "ExecutionOptions",
    "QueryOptions",
    "TransactionContext",
    "TransactionState",
    "run_in_transaction",
    "set_rollback_only",
    "execute_statement",
    "execute_returning_keys",
    "run_query",
    "CapabilityRegistry",
    "DriverCapabilities",
    # Errors
    "ClauseSQLError",
    "ArgumentError",
    "NoConnectionError",
    "TransactionError",
]
