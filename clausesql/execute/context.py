"""Transaction context value objects.

A :class:`TransactionContext` is created once per top-level execution call
and passed explicitly to everything that touches the connection.  Nested
transactional calls derive a child context that shares the connection and
the :class:`RollbackFlag` cell of the outermost context.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any

from clausesql.errors import NoConnectionError


class TransactionState(enum.Enum):
    """Lifecycle of one outermost transaction.

    ``IDLE`` is the state before the outermost call begins. It is never sent
    to a state listener, which receives ``IN_PROGRESS`` followed by exactly one
    of ``COMMITTED`` or ``ROLLED_BACK``.
    """

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class RollbackFlag:
    """Mutable rollback request shared by every level of one transaction."""

    __slots__ = ("_requested",)

    def __init__(self) -> None:
        self._requested = False

    @property
    def requested(self) -> bool:
        return self._requested

    def request(self) -> None:
        self._requested = True

    def reset(self) -> None:
        self._requested = False

    def __repr__(self) -> str:
        return f"RollbackFlag(requested={self._requested})"


@dataclass(frozen=True)
class TransactionContext:
    """Connection handle plus the nesting state of the current call chain.

    Attributes:
        connection: An open PEP 249 connection, owned by the caller.
        level: Transaction nesting level; ``0`` outside any transaction.
        rollback: Rollback flag shared with every derived context.
        saved_autocommit: Transaction mode recorded by the outermost
            transaction (``autocommit``, or ``isolation_level`` for older
            ``sqlite3``), restored when it finishes.
    """

    connection: Any
    level: int = 0
    rollback: RollbackFlag = field(default_factory=RollbackFlag)
    saved_autocommit: Any = None

    @classmethod
    def open(cls, connection: Any) -> TransactionContext:
        """Create a fresh top-level context for ``connection``."""
        return cls(connection=connection)

    def nested(self) -> TransactionContext:
        """Derive the context for one more level of transaction nesting."""
        return replace(self, level=self.level + 1)

    def require_connection(self) -> Any:
        """Return the connection, or raise if the context has none.

        Raises:
            NoConnectionError: If ``connection`` is ``None``.
        """
        if self.connection is None:
            raise NoConnectionError()
        return self.connection

    @property
    def in_transaction(self) -> bool:
        return self.level > 0


def set_rollback_only(context: TransactionContext) -> None:
    """Make the outermost transaction of ``context`` roll back instead of commit."""
    context.rollback.request()
