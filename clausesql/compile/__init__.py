"""clausesql compilation layer: pure builders producing ``Statement`` values."""
from clausesql.compile.clause_builders import join, order_by, where
from clausesql.compile.statements import ALL_COLUMNS, delete, insert, select, update

__all__ = [
    "ALL_COLUMNS",
    "delete",
    "insert",
    "join",
    "order_by",
    "select",
    "update",
    "where",
]
