"""pyconnfilter - Filter GraphQL connections on PostgreSQL computed columns."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyconnfilter")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0.dev0"

from typing import Any

from pyconnfilter._constants import CAPABILITY_FILTER
from pyconnfilter._errors import (
    ERR_MSG_UNKNOWN_FIELD,
    DuplicateFieldError,
    FilterError,
    IntrospectionError,
    InvalidFilterValueError,
    InvalidOperatorError,
    MissingArgumentError,
    RegistryConflictError,
    TypeConflictError,
    UnknownFieldError,
)
from pyconnfilter.catalog import ArgMode, Catalog, Namespace, PgClass, PgProc, PgType
from pyconnfilter.computed_columns import (
    ComputedColumnDescriptor,
    ComputedColumnResolver,
    FilterField,
    add_computed_column_filters,
    is_eligible_computed_column,
    project_arguments,
)
from pyconnfilter.dialect import Dialect, PostgresDialect
from pyconnfilter.inflection import DEFAULT_INFLECTOR, Inflector
from pyconnfilter.introspect import introspect
from pyconnfilter.options import DEFAULT_OPTIONS, FilterOptions
from pyconnfilter.query import QueryContext, Result
from pyconnfilter.registry import FilterRegistry
from pyconnfilter.tags import is_omitted

__all__ = [
    "add_computed_column_filters",
    "build_filters",
    "introspect",
    "is_eligible_computed_column",
    "project_arguments",
    "resolve_filter_field",
    "ArgMode",
    "Catalog",
    "ComputedColumnDescriptor",
    "ComputedColumnResolver",
    "Dialect",
    "FilterField",
    "FilterOptions",
    "FilterRegistry",
    "Inflector",
    "Namespace",
    "PgClass",
    "PgProc",
    "PgType",
    "PostgresDialect",
    "QueryContext",
    "Result",
    "DuplicateFieldError",
    "FilterError",
    "IntrospectionError",
    "InvalidFilterValueError",
    "InvalidOperatorError",
    "MissingArgumentError",
    "RegistryConflictError",
    "TypeConflictError",
    "UnknownFieldError",
]


def build_filters(
    catalog: Catalog,
    *,
    options: FilterOptions | None = None,
    inflector: Inflector | None = None,
) -> FilterRegistry:
    """Build computed column filter fields for every selectable table.

    Args:
        catalog: Catalog snapshot, e.g. from :func:`introspect`.
        options: Exposure and input handling options.
        inflector: Naming rules.

    Returns:
        A frozen FilterRegistry holding one filter input type per table.

    Raises:
        DuplicateFieldError: If two functions map to the same field name.
        TypeConflictError: If an operators type name is reused with a
            different structure.
    """
    if options is None:
        options = DEFAULT_OPTIONS
    if inflector is None:
        inflector = DEFAULT_INFLECTOR

    registry = FilterRegistry()
    for table in catalog.classes:
        if not table.is_selectable or is_omitted(table, CAPABILITY_FILTER):
            continue
        filter_type_name = inflector.filter_type(table)
        registry.filter_input_type(
            filter_type_name,
            description=(
                f"A filter to be used against `{inflector.table_type(table)}` object types. "
                "All fields are combined with a logical ‘and.’"
            ),
        )
        add_computed_column_filters(
            registry,
            catalog,
            table,
            filter_type_name=filter_type_name,
            options=options,
            inflector=inflector,
        )
    registry.freeze()
    return registry


def resolve_filter_field(
    registry: FilterRegistry,
    filter_type_name: str,
    field_name: str,
    value: Any,
    source_alias: str,
    ctx: QueryContext | None = None,
) -> Result | None:
    """Resolve one filter field value to a parameterized predicate.

    Args:
        registry: Registry built by :func:`build_filters`.
        filter_type_name: Filter input type the field belongs to.
        field_name: Field name on the filter type.
        value: The field's filter value (operators plus optional ``args``).
        source_alias: Alias of the row being filtered.
        ctx: Query context to bind parameters into. A fresh one is used if
            omitted; pass a shared one when resolving several fields of one
            query so placeholders do not collide.

    Returns:
        Result with SQL containing $1, $2, ... placeholders and the
        parameter list of ``ctx``, or None if the value produces no predicate.

    Raises:
        UnknownFieldError: If no resolver is registered for the field.
        MissingArgumentError: If a computed column argument is not supplied.
    """
    if ctx is None:
        ctx = QueryContext()
    resolver = registry.get_resolver(filter_type_name, field_name)
    if resolver is None:
        raise UnknownFieldError(
            ERR_MSG_UNKNOWN_FIELD,
            f"no resolver registered for {filter_type_name}.{field_name}",
        )
    sql = resolver(field_name, value, source_alias, ctx)
    if sql is None:
        return None
    return ctx.result(sql)
