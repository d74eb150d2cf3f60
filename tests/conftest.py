"""Shared pytest fixtures for clausesql unit and integration tests."""
from __future__ import annotations

import sqlite3
import sys

import pytest

from clausesql.execute.context import TransactionContext
from tests.fixtures import RecordingConnection

SCHEMA = """
CREATE TABLE person (
    id    INTEGER PRIMARY KEY AUTOINCREMENT,
    name  TEXT NOT NULL UNIQUE,
    age   INTEGER,
    email TEXT
);
CREATE TABLE pet (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    person_id INTEGER NOT NULL REFERENCES person (id),
    name      TEXT NOT NULL
);
"""


@pytest.fixture()
def conn() -> RecordingConnection:
    """A fresh recording connection in autocommit mode."""
    return RecordingConnection()


@pytest.fixture()
def ctx(conn: RecordingConnection) -> TransactionContext:
    """A top-level transaction context on the recording connection."""
    return TransactionContext.open(conn)


def _open(**kwargs) -> sqlite3.Connection:
    connection = sqlite3.connect(":memory:", **kwargs)
    connection.executescript(SCHEMA)
    connection.commit()
    return connection


@pytest.fixture()
def db() -> sqlite3.Connection:
    """In-memory SQLite database in the driver's default transaction mode."""
    connection = _open()
    yield connection
    connection.close()


@pytest.fixture()
def autocommit_db() -> sqlite3.Connection:
    """In-memory SQLite database with ``isolation_level=None`` (autocommit)."""
    connection = _open(isolation_level=None)
    yield connection
    connection.close()


@pytest.fixture()
def pep249_db() -> sqlite3.Connection:
    """In-memory SQLite database with PEP 249 transaction control."""
    if sys.version_info < (3, 12):
        pytest.skip("sqlite3.Connection.autocommit requires Python 3.12+")
    connection = _open(autocommit=False)
    yield connection
    connection.close()
