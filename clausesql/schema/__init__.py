"""Value types shared by the builders and the execution layer."""
from clausesql.schema.options import ExecutionOptions, QueryOptions, identity
from clausesql.schema.statement import Statement

__all__ = [
    "ExecutionOptions",
    "QueryOptions",
    "Statement",
    "identity",
]
