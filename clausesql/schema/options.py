"""Pydantic models for the options accepted by the execution API.

Options are parsed once, at the call boundary, into frozen models with named
fields and documented defaults.  Unknown option names are rejected by
pydantic when the model is constructed::

    from clausesql import ExecutionOptions, quoted, update_rows

    update_rows(
        conn, "users", {"name": "Ada"}, where({"id": 1}),
        options=ExecutionOptions(quote=quoted('"'), run_in_transaction=False),
    )
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict

from clausesql.quoting import QuoteStrategy, as_is, lower_case


def identity(value: Any) -> Any:
    """Return ``value`` unchanged."""
    return value


class ExecutionOptions(BaseModel):
    """Options for ``execute``, ``insert_rows``, ``update_rows`` and ``delete_rows``.

    Attributes:
        quote: Identifier quoting strategy used when the call builds its own
            statement.
        run_in_transaction: Wrap the call in a (possibly nested) transaction.
        generated_keys: Force generated-key retrieval on (``True``) or off
            (``False``).  ``None`` uses the capability registered for the
            connection's driver.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    quote: QuoteStrategy = as_is
    run_in_transaction: bool = True
    generated_keys: bool | None = None


class QueryOptions(BaseModel):
    """Options for ``query``.

    Attributes:
        row: Applied to each result row (a ``dict`` keyed by column label).
        result_set: Receives the lazy iterable of mapped rows and must force
            it; the cursor is closed as soon as it returns.
        identifiers: Renders each result column label into a row key. This
            is the quoting option for queries and takes the place of
            ``ExecutionOptions.quote``. Queries never open a transaction,
            so there is no ``run_in_transaction`` counterpart.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    row: Callable[[dict[str, Any]], Any] = identity
    result_set: Callable[[Iterable[Any]], Any] = list
    identifiers: QuoteStrategy = lower_case
