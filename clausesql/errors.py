"""Custom exception hierarchy for clausesql.

All library errors inherit from :class:`ClauseSQLError` so callers can catch
the base class for any clausesql-specific failure.  Database-layer failures
are never wrapped: they are the driver's own PEP 249 exceptions and reach the
caller as raised by the driver.
"""
from __future__ import annotations


class ClauseSQLError(Exception):
    """Base exception for all clausesql errors."""


class ArgumentError(ClauseSQLError, ValueError):
    """Raised when a builder or execution call receives malformed input.

    Always raised before any I/O takes place.

    Args:
        message: Human-readable description.
        argument: Name of the offending argument, when one can be singled out.
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class NoConnectionError(ClauseSQLError):
    """Raised when a transaction context carries no database connection."""

    def __init__(self) -> None:
        super().__init__("no current database connection")


class TransactionError(ClauseSQLError):
    """Raised when a connection cannot take part in transaction management.

    Args:
        message: Human-readable description.
        connection_type: Qualified name of the offending connection class.
    """

    def __init__(self, message: str, connection_type: str | None = None) -> None:
        super().__init__(message)
        self.connection_type = connection_type
