"""clausesql execution layer: transactions and statement execution."""
from clausesql.execute.capabilities import CapabilityRegistry, DriverCapabilities
from clausesql.execute.context import (
    RollbackFlag,
    TransactionContext,
    TransactionState,
    set_rollback_only,
)
from clausesql.execute.transaction import raise_database_error, run_in_transaction
from clausesql.execute.engine import execute_returning_keys, execute_statement, run_query

__all__ = [
    "CapabilityRegistry",
    "DriverCapabilities",
    "RollbackFlag",
    "TransactionContext",
    "TransactionState",
    "execute_returning_keys",
    "execute_statement",
    "raise_database_error",
    "run_in_transaction",
    "run_query",
    "set_rollback_only",
]
