"""Unit tests for the execution engine."""

from __future__ import annotations

import pytest

from clausesql.errors import ArgumentError
from clausesql.execute.capabilities import CapabilityRegistry, DriverCapabilities, driver_name
from clausesql.execute.context import TransactionContext
from clausesql.execute.engine import execute_returning_keys, execute_statement, run_query
from clausesql.execute.transaction import run_in_transaction
from clausesql.quoting import as_is
from clausesql.schema.statement import Statement
from tests.fixtures import FakeDatabaseError, RecordingConnection

INSERT = "INSERT INTO person ( name ) VALUES ( ? )"


# ---------------------------------------------------------------------------
# execute_statement
# ---------------------------------------------------------------------------


def test_batch_reports_one_count_per_group_in_order(ctx):
    ctx.connection.rowcounts = [1, 0, 3]

    counts = execute_statement(ctx, "UPDATE person SET age = ? WHERE name = ?", [[1, "a"], [2, "b"], [3, "c"]])

    assert counts == [1, 0, 3]
    assert [params for _, params in ctx.connection.executed()] == [[1, "a"], [2, "b"], [3, "c"]]


def test_batch_runs_in_one_cursor_and_transaction(conn, ctx):
    execute_statement(ctx, INSERT, [["a"], ["b"]])

    assert len(conn.cursors) == 1
    assert conn.cursors[0].closed
    assert conn.transaction_calls() == [("autocommit", False), ("commit",), ("autocommit", True)]


def test_no_param_groups_executes_once_without_params(conn, ctx):
    assert execute_statement(ctx, "DELETE FROM person") == [1]
    assert conn.executed() == [("DELETE FROM person", None)]


def test_without_transaction_leaves_connection_alone(conn, ctx):
    execute_statement(ctx, INSERT, [["a"]], run_in_transaction=False)

    assert conn.transaction_calls() == []
    assert conn.cursors[0].closed


def test_failure_rolls_back_and_closes_cursor(ctx):
    conn = ctx.connection
    conn.fail_on = "person"

    with pytest.raises(FakeDatabaseError):
        execute_statement(ctx, INSERT, [["a"]])

    assert conn.transaction_calls() == [("autocommit", False), ("rollback",), ("autocommit", True)]
    assert conn.cursors[0].closed
    assert conn.log[-1] == ("close",)


def test_failure_without_transaction_propagates(ctx):
    ctx.connection.fail_on = "person"

    with pytest.raises(FakeDatabaseError):
        execute_statement(ctx, INSERT, [["a"]], run_in_transaction=False)
    assert ctx.connection.cursors[0].closed


def test_statements_inside_outer_transaction_commit_once(conn, ctx):
    def work(tx):
        execute_statement(tx, INSERT, [["a"]])
        execute_statement(tx, INSERT, [["b"]])

    run_in_transaction(ctx, work)

    assert conn.transaction_calls() == [("autocommit", False), ("commit",), ("autocommit", True)]
    assert len(conn.executed()) == 2


# ---------------------------------------------------------------------------
# execute_returning_keys
# ---------------------------------------------------------------------------


def test_returns_generated_key():
    conn = RecordingConnection(lastrowid=7)
    ctx = TransactionContext.open(conn)
    assert execute_returning_keys(ctx, INSERT, ["a"], generated_keys=True) == 7
    assert conn.executed() == [(INSERT, ["a"])]


def test_falls_back_to_update_count_when_unsupported():
    conn = RecordingConnection(lastrowid=7, rowcounts=[1])
    ctx = TransactionContext.open(conn)
    assert execute_returning_keys(ctx, INSERT, ["a"], generated_keys=False) == 1


def test_falls_back_to_update_count_when_no_key_reported():
    conn = RecordingConnection(lastrowid=None, rowcounts=[2])
    ctx = TransactionContext.open(conn)
    assert execute_returning_keys(ctx, INSERT, ["a"], generated_keys=True) == 2


def test_generated_key_capability_is_probed_once():
    conn = RecordingConnection(lastrowid=11)
    name = driver_name(conn)
    CapabilityRegistry.unregister(name)
    try:
        ctx = TransactionContext.open(conn)
        assert execute_returning_keys(ctx, INSERT, ["a"]) == 11
        assert execute_returning_keys(ctx, INSERT, ["b"]) == 11
        assert CapabilityRegistry.for_connection(conn) == DriverCapabilities(generated_keys=True)
        # one probe cursor plus one cursor per statement
        assert len(conn.cursors) == 3
    finally:
        CapabilityRegistry.unregister(name)


def test_registered_capability_wins_over_probe():
    conn = RecordingConnection(lastrowid=11, rowcounts=[1])
    name = driver_name(conn)
    CapabilityRegistry.register(name, DriverCapabilities(generated_keys=False))
    try:
        assert execute_returning_keys(TransactionContext.open(conn), INSERT, ["a"]) == 1
        assert name in CapabilityRegistry.registered_drivers()
    finally:
        CapabilityRegistry.unregister(name)


def test_returning_keys_failure_rolls_back(ctx):
    ctx.connection.fail_on = "INSERT"
    with pytest.raises(FakeDatabaseError):
        execute_returning_keys(ctx, INSERT, ["a"], generated_keys=True)
    assert ("rollback",) in ctx.connection.transaction_calls()
    assert ctx.connection.cursors[-1].closed


# ---------------------------------------------------------------------------
# run_query
# ---------------------------------------------------------------------------


def _query_connection() -> RecordingConnection:
    return RecordingConnection(
        description=[("ID", None), ("Name", None)],
        rows=[(1, "Ada"), (2, "Alan")],
    )


def test_query_returns_row_dicts_with_lower_cased_keys():
    conn = _query_connection()
    rows = run_query(TransactionContext.open(conn), Statement("SELECT * FROM person WHERE age > ?", [30]))

    assert rows == [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Alan"}]
    assert conn.executed() == [("SELECT * FROM person WHERE age > ?", [30])]
    assert conn.cursors[0].closed
    assert conn.transaction_calls() == []


def test_query_row_result_set_and_identifiers():
    conn = _query_connection()
    names = run_query(
        TransactionContext.open(conn),
        "SELECT * FROM person",
        row=lambda r: r["Name"],
        result_set=tuple,
        identifiers=as_is,
    )
    assert names == ("Ada", "Alan")


def test_query_result_set_sees_rows_lazily():
    conn = _query_connection()
    first = run_query(TransactionContext.open(conn), ("SELECT * FROM person", []), result_set=next)
    assert first == {"id": 1, "name": "Ada"}


def test_query_rejects_malformed_statement(ctx):
    with pytest.raises(ArgumentError, match="statement"):
        run_query(ctx, 42)
    assert ctx.connection.cursors == []


def test_query_failure_closes_cursor():
    conn = _query_connection()
    conn.fail_on = "person"
    with pytest.raises(FakeDatabaseError):
        run_query(TransactionContext.open(conn), "SELECT * FROM person")
    assert conn.cursors[0].closed
