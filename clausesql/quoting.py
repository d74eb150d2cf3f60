"""Identifier quoting strategies.

A quoting strategy is any ``Callable[[str], str]`` that renders one raw
identifier segment.  Strategies are passed explicitly to every builder call
through the ``quote`` keyword; nothing is resolved from ambient state::

    from clausesql import quoted, select

    select(["t.id"], "table", quote=quoted("`"))
    # Statement(sql='SELECT `t`.`id` FROM `table`', params=[])

Dotted identifiers are split on ``.`` and each segment is rendered on its
own, so ``t.id`` becomes ``"t"."id"`` rather than ``"t.id"``.

SQLAlchemy strategy
-------------------
:func:`from_sqlalchemy` adapts the identifier preparer of a SQLAlchemy
dialect.  Install the optional dependency before using it::

    pip install "clausesql[sqlalchemy]"
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from clausesql.errors import ArgumentError

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect

#: A pure function rendering one raw identifier segment.
QuoteStrategy = Callable[[str], str]


def as_is(identifier: str) -> str:
    """Leave ``identifier`` unchanged."""
    return identifier


def lower_case(identifier: str) -> str:
    """Lower-case ``identifier``."""
    return identifier.lower()


def quoted(quote: str | tuple[str, str]) -> QuoteStrategy:
    """Return a strategy wrapping identifiers in quote characters.

    Args:
        quote: A single quote string used on both sides (e.g. ``"`"`` or
            ``'"'``), or an ``(open, close)`` pair such as ``("[", "]")``.

    Returns:
        A strategy that wraps each identifier segment.  Occurrences of the
        closing quote inside the identifier are doubled.

    Raises:
        ArgumentError: If ``quote`` is empty or a pair of the wrong size.
    """
    if isinstance(quote, str):
        if not quote:
            raise ArgumentError("quote character must not be empty", argument="quote")
        opening = closing = quote
    else:
        pair = tuple(quote)
        if len(pair) != 2 or not all(pair):
            raise ArgumentError(
                "quote must be a string or an (open, close) pair", argument="quote"
            )
        opening, closing = pair

    def _quote(identifier: str) -> str:
        escaped = identifier.replace(closing, closing * 2)
        return f"{opening}{escaped}{closing}"

    return _quote


def from_sqlalchemy(dialect: Dialect | Any) -> QuoteStrategy:
    """Build a strategy from a SQLAlchemy dialect's identifier preparer.

    Args:
        dialect: A :class:`sqlalchemy.engine.Dialect`, or any object with a
            ``dialect`` attribute (``Engine``, ``Connection``).

    Returns:
        A strategy that always quotes, using the dialect's quote characters
        and escaping rules.
    """
    dialect = getattr(dialect, "dialect", dialect)
    preparer = dialect.identifier_preparer
    return preparer.quote_identifier


def render_identifier(identifier: str, quote: QuoteStrategy = as_is) -> str:
    """Render a possibly dotted identifier through ``quote``.

    Args:
        identifier: Raw identifier, e.g. ``"id"`` or ``"t.id"``.
        quote: Strategy applied to every dot-separated segment.

    Returns:
        The rendered segments joined with ``.``.

    Raises:
        ArgumentError: If ``identifier`` is not a string.
    """
    if not isinstance(identifier, str):
        raise ArgumentError(
            f"identifier must be a string, got {type(identifier).__name__}: {identifier!r}",
            argument="identifier",
        )
    return ".".join(quote(segment) for segment in identifier.split("."))
