"""SQL dialect system for computed-column predicates."""

from pyconnfilter.dialect._base import Dialect, WriteFunc
from pyconnfilter.dialect.postgres import PostgresDialect

__all__ = [
    "Dialect",
    "PostgresDialect",
    "WriteFunc",
]
