"""Abstract base class for SQL dialects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from io import StringIO


WriteFunc = Callable[[], None]
"""Callback that writes a sub-expression to the shared StringIO buffer."""


class Dialect(ABC):
    """Abstract base class defining the SQL dialect interface.

    All SQL-syntax-specific code lives behind this interface.
    Methods receive a StringIO writer and callback functions for sub-expressions.
    """

    # --- Literals and identifiers ---

    @abstractmethod
    def write_param_placeholder(self, w: StringIO, param_index: int) -> None: ...

    @abstractmethod
    def write_identifier(self, w: StringIO, name: str) -> None: ...

    @abstractmethod
    def write_cast(self, w: StringIO, write_expr: WriteFunc, type_name: str) -> None: ...

    # --- Functions ---

    @abstractmethod
    def write_function_call(
        self,
        w: StringIO,
        schema_name: str,
        function_name: str,
        write_args: Sequence[WriteFunc],
    ) -> None: ...

    # --- Operators ---

    @abstractmethod
    def write_binary_operator(
        self, w: StringIO, write_lhs: WriteFunc, op: str, write_rhs: WriteFunc
    ) -> None: ...

    @abstractmethod
    def write_null_check(self, w: StringIO, write_expr: WriteFunc, is_null: bool) -> None: ...

    @abstractmethod
    def write_not(self, w: StringIO, write_expr: WriteFunc) -> None: ...

    @abstractmethod
    def write_like(
        self,
        w: StringIO,
        write_target: WriteFunc,
        write_pattern: WriteFunc,
        case_insensitive: bool,
        negate: bool,
    ) -> None: ...

    @abstractmethod
    def write_array_membership(
        self, w: StringIO, write_elem: WriteFunc, write_array: WriteFunc
    ) -> None: ...

    @abstractmethod
    def write_any_comparison(
        self, w: StringIO, write_value: WriteFunc, op: str, write_array: WriteFunc
    ) -> None: ...
