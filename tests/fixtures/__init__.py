"""Test fixtures: a recording DB-API connection double."""

from __future__ import annotations

from typing import Any


class FakeDatabaseError(Exception):
    """Stands in for a driver's PEP 249 ``Error``."""


class FakeCursor:
    """Cursor double that records every call on its connection."""

    def __init__(self, connection: RecordingConnection) -> None:
        self._connection = connection
        self.rowcount = -1
        self.lastrowid: Any = None
        self.description = connection.description
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> None:
        conn = self._connection
        conn.log.append(("execute", sql, None if params is None else list(params)))
        if conn.fail_on is not None and conn.fail_on in sql:
            raise FakeDatabaseError(f"failed: {sql}")
        self.rowcount = conn.rowcounts.pop(0) if conn.rowcounts else 1
        self.lastrowid = conn.lastrowid

    def __iter__(self):
        return iter(self._connection.rows)

    def close(self) -> None:
        self.closed = True
        self._connection.log.append(("close",))


class RecordingConnection:
    """Connection double logging transaction calls in order.

    Args:
        autocommit: Initial autocommit mode.
        rowcounts: Successive ``rowcount`` values reported by executions
            (``1`` once exhausted).
        lastrowid: Value every cursor reports as ``lastrowid``.
        description: Cursor description for queries.
        rows: Rows yielded by iterating a cursor.
        fail_on: Substring of SQL that makes ``execute`` raise.
    """

    Error = FakeDatabaseError

    def __init__(
        self,
        autocommit: Any = True,
        rowcounts: list[int] | None = None,
        lastrowid: Any = None,
        description: list[tuple] | None = None,
        rows: list[tuple] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self._autocommit = autocommit
        self.rowcounts = list(rowcounts or [])
        self.lastrowid = lastrowid
        self.description = description
        self.rows = list(rows or [])
        self.fail_on = fail_on
        self.log: list[tuple] = []
        self.cursors: list[FakeCursor] = []

    @property
    def autocommit(self) -> Any:
        return self._autocommit

    @autocommit.setter
    def autocommit(self, value: Any) -> None:
        self.log.append(("autocommit", value))
        self._autocommit = value

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def commit(self) -> None:
        self.log.append(("commit",))

    def rollback(self) -> None:
        self.log.append(("rollback",))

    def transaction_calls(self) -> list[tuple]:
        """The log without statement executions and cursor closes."""
        return [entry for entry in self.log if entry[0] in {"autocommit", "commit", "rollback"}]

    def executed(self) -> list[tuple]:
        """``(sql, params)`` for every statement execution, in order."""
        return [entry[1:] for entry in self.log if entry[0] == "execute"]


class LegacyConnection:
    """A connection without the PEP 249 ``autocommit`` attribute."""

    def cursor(self) -> FakeCursor:
        raise AssertionError("cursor() should not be reached")

    def commit(self) -> None:
        raise AssertionError("commit() should not be reached")

    def rollback(self) -> None:
        raise AssertionError("rollback() should not be reached")


class IsolationLevelConnection(RecordingConnection):
    """A ``sqlite3``-style connection predating the ``autocommit`` attribute."""

    def __init__(self, isolation_level: Any = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._isolation_level = isolation_level

    def __getattribute__(self, name: str) -> Any:
        if name == "autocommit":
            raise AttributeError(name)
        return super().__getattribute__(name)

    @property
    def isolation_level(self) -> Any:
        return self._isolation_level

    @isolation_level.setter
    def isolation_level(self, value: Any) -> None:
        self.log.append(("isolation_level", value))
        self._isolation_level = value

    def transaction_calls(self) -> list[tuple]:
        return [
            entry
            for entry in self.log
            if entry[0] in {"isolation_level", "commit", "rollback"}
        ]
