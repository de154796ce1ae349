"""PostgreSQL dialect implementation."""

from __future__ import annotations

from collections.abc import Sequence
from io import StringIO

from pyconnfilter._utils import quote_identifier
from pyconnfilter.dialect._base import Dialect, WriteFunc


class PostgresDialect(Dialect):
    """PostgreSQL dialect for computed-column predicates."""

    # --- Literals and identifiers ---

    def write_param_placeholder(self, w: StringIO, param_index: int) -> None:
        w.write(f"${param_index}")

    def write_identifier(self, w: StringIO, name: str) -> None:
        w.write(quote_identifier(name))

    def write_cast(self, w: StringIO, write_expr: WriteFunc, type_name: str) -> None:
        write_expr()
        w.write(f"::{type_name}")

    # --- Functions ---

    def write_function_call(
        self,
        w: StringIO,
        schema_name: str,
        function_name: str,
        write_args: Sequence[WriteFunc],
    ) -> None:
        self.write_identifier(w, schema_name)
        w.write(".")
        self.write_identifier(w, function_name)
        w.write("(")
        for i, write_arg in enumerate(write_args):
            if i > 0:
                w.write(", ")
            write_arg()
        w.write(")")

    # --- Operators ---

    def write_binary_operator(
        self, w: StringIO, write_lhs: WriteFunc, op: str, write_rhs: WriteFunc
    ) -> None:
        write_lhs()
        w.write(f" {op} ")
        write_rhs()

    def write_null_check(self, w: StringIO, write_expr: WriteFunc, is_null: bool) -> None:
        write_expr()
        w.write(" IS NULL" if is_null else " IS NOT NULL")

    def write_not(self, w: StringIO, write_expr: WriteFunc) -> None:
        w.write("NOT (")
        write_expr()
        w.write(")")

    def write_like(
        self,
        w: StringIO,
        write_target: WriteFunc,
        write_pattern: WriteFunc,
        case_insensitive: bool,
        negate: bool,
    ) -> None:
        write_target()
        if negate:
            w.write(" NOT")
        w.write(" ILIKE " if case_insensitive else " LIKE ")
        write_pattern()

    def write_array_membership(
        self, w: StringIO, write_elem: WriteFunc, write_array: WriteFunc
    ) -> None:
        write_elem()
        w.write(" = ANY(")
        write_array()
        w.write(")")

    def write_any_comparison(
        self, w: StringIO, write_value: WriteFunc, op: str, write_array: WriteFunc
    ) -> None:
        write_value()
        w.write(f" {op} ANY(")
        write_array()
        w.write(")")
