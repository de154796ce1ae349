"""Naming rules for synthesized filter fields and types.

Subclass :class:`Inflector` to change how schema-level names are derived.
Every method must be deterministic: the same catalog entity always maps to
the same name, at build time and at resolve time.
"""

from __future__ import annotations

from pyconnfilter._constants import TAG_FIELD_NAME, TAG_NAME
from pyconnfilter._utils import to_camel_case, to_upper_camel_case
from pyconnfilter.catalog import PgClass, PgProc


class Inflector:
    """Default naming rules."""

    def argument(self, name: str, index: int) -> str:
        """External name of the function argument at signature position ``index``.

        Position 0 is the implicit row argument, so unnamed extra arguments
        are named ``arg1``, ``arg2``, ...
        """
        if not name:
            return f"arg{index}"
        return to_camel_case(name)

    def computed_column(self, pseudo_column_name: str, proc: PgProc, table: PgClass) -> str:
        field_name = proc.tags.get(TAG_FIELD_NAME)
        if isinstance(field_name, str):
            return field_name
        return to_camel_case(pseudo_column_name)

    def table_type(self, table: PgClass) -> str:
        name = table.tags.get(TAG_NAME)
        if isinstance(name, str):
            return to_upper_camel_case(name)
        return to_upper_camel_case(table.name)

    def filter_type(self, table: PgClass) -> str:
        return f"{self.table_type(table)}Filter"

    def operators_type(self, scalar_name: str, is_list: bool = False) -> str:
        if is_list:
            return f"{scalar_name}ListFilter"
        return f"{scalar_name}Filter"

    def computed_column_operators_type(
        self, table: PgClass, pseudo_column_name: str, operators_type_name: str
    ) -> str:
        return (
            f"{self.table_type(table)}{to_upper_camel_case(pseudo_column_name)}"
            f"ComputedColumn{operators_type_name}"
        )

    def computed_column_args_type(self, table: PgClass, pseudo_column_name: str) -> str:
        return f"{self.table_type(table)}{to_upper_camel_case(pseudo_column_name)}ComputedColumnArgs"


DEFAULT_INFLECTOR = Inflector()
