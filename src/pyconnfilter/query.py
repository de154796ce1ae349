"""Query-scoped state for predicate resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import StringIO
from typing import Any

from pyconnfilter.dialect._base import Dialect
from pyconnfilter.dialect.postgres import PostgresDialect


@dataclass(frozen=True)
class Result:
    """Result of a parameterized resolution."""

    sql: str
    parameters: list[Any] = field(default_factory=list)


class QueryContext:
    """Parameter buffer shared by every filter field of one query.

    Each query gets its own context; placeholders are numbered in the order
    values are added.
    """

    def __init__(self, dialect: Dialect | None = None) -> None:
        self._dialect = dialect or PostgresDialect()
        self._parameters: list[Any] = []

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def parameters(self) -> list[Any]:
        return self._parameters

    def add_param(self, value: Any) -> int:
        """Add a parameter and return its 1-based index."""
        self._parameters.append(value)
        return len(self._parameters)

    def rewind(self, count: int) -> None:
        """Drop every parameter added after the first ``count``."""
        del self._parameters[count:]

    def write_param(self, w: StringIO, value: Any, type_name: str | None = None) -> None:
        """Bind ``value`` and write its placeholder, cast to ``type_name`` if given."""
        idx = self.add_param(value)
        if type_name is None:
            self._dialect.write_param_placeholder(w, idx)
            return
        self._dialect.write_cast(
            w, lambda: self._dialect.write_param_placeholder(w, idx), type_name
        )

    def result(self, sql: str) -> Result:
        return Result(sql=sql, parameters=list(self._parameters))
