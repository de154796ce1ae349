"""Build and resolve options for computed-column filtering."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FilterOptions:
    """Options controlling which filters are exposed and how input is checked.

    Attributes:
        computed_columns: Expose every eligible computed column. When False,
            only functions tagged ``@filterable`` are exposed.
        arrays: Expose filters for array-typed return values.
        allowed_operators: If set, only these operators are exposed.
        operator_names: Rename operators in the GraphQL schema
            (``{"equalTo": "eq"}``).
        allow_null_input: Treat ``null`` operator values as absent instead
            of rejecting them.
        allow_empty_object_input: Accept ``{}`` as a field filter value.
    """

    computed_columns: bool = True
    arrays: bool = True
    allowed_operators: frozenset[str] | None = None
    operator_names: Mapping[str, str] = field(default_factory=dict)
    allow_null_input: bool = False
    allow_empty_object_input: bool = False

    def exposed_operator_name(self, name: str) -> str:
        return self.operator_names.get(name, name)

    def is_operator_allowed(self, name: str) -> bool:
        return self.allowed_operators is None or name in self.allowed_operators


DEFAULT_OPTIONS = FilterOptions()
