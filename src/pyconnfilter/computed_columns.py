"""Computed column filters.

A computed column is a stable function ``<table>_<name>(<table>, ...)`` in the
table's schema. Eligible functions are exposed as fields on the table's filter
input type; filtering on one invokes the function with the current row (and
any extra arguments supplied under ``args``) and applies the operators to its
result::

    {"fullName": {"equalTo": "Jane"}}
    -> "app"."person_full_name"("person_1") = $1::text

    {"computed": {"args": {"extra": 3}, "greaterThan": 10}}
    -> "app"."person_computed"("person_1", $1::int4) > $2::int4
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from io import StringIO
from types import MappingProxyType
from typing import Any

from pyconnfilter._constants import (
    ARGS_FIELD_NAME,
    CAPABILITY_EXECUTE,
    CAPABILITY_FILTER,
    RECORD_TYPE_ID,
    TAG_FILTERABLE,
    VOID_TYPE_ID,
)
from pyconnfilter._errors import (
    ERR_MSG_INVALID_FILTER_VALUE,
    ERR_MSG_UNKNOWN_FIELD,
    DuplicateFieldError,
    IntrospectionError,
    InvalidFilterValueError,
    MissingArgumentError,
    UnknownFieldError,
)
from pyconnfilter.catalog import ArgMode, Catalog, PgClass, PgProc, PgType
from pyconnfilter.inflection import DEFAULT_INFLECTOR, Inflector
from pyconnfilter.operators import (
    ComputedColumnArgument,
    ComputedColumnWithArgs,
    build_operators_type,
)
from pyconnfilter.options import DEFAULT_OPTIONS, FilterOptions
from pyconnfilter.query import QueryContext
from pyconnfilter.registry import FilterFieldDefinition, FilterRegistry
from pyconnfilter.resolve import ColumnType, resolve_field
from pyconnfilter.tags import is_omitted

logger = logging.getLogger(__name__)

_EXPOSABLE_MODES = (ArgMode.IN, ArgMode.INOUT)


@dataclass(frozen=True)
class ComputedColumnDescriptor:
    """Eligibility result for one function.

    ``arg_names`` and ``arg_types`` exclude the implicit row argument and any
    argument that is not ``in`` or ``inout``.
    """

    pseudo_column_name: str
    arg_names: tuple[str, ...]
    arg_types: tuple[PgType, ...]
    arguments: tuple[ComputedColumnArgument, ...]


@dataclass(frozen=True)
class FilterField:
    """A synthesized computed column filter field."""

    field_name: str
    procedure: PgProc
    operators_type_name: str
    has_arguments_subfield: bool
    arguments: tuple[ComputedColumnArgument, ...] = ()


def _exposable_indexes(proc: PgProc) -> list[int]:
    return [
        index
        for index in range(1, len(proc.arg_type_ids))
        if proc.arg_mode(index) in _EXPOSABLE_MODES
    ]


def project_arguments(
    catalog: Catalog,
    proc: PgProc,
    *,
    inflector: Inflector = DEFAULT_INFLECTOR,
) -> tuple[ComputedColumnArgument, ...]:
    """Return the exposed arguments of ``proc`` in signature order.

    The implicit row argument (index 0) is never exposed, and only ``in`` and
    ``inout`` arguments are kept. Names go through ``inflector.argument``,
    the same normalization used to look up supplied values when resolving.

    Raises:
        IntrospectionError: If an argument type is missing from the catalog.
    """
    arguments: list[ComputedColumnArgument] = []
    for index in _exposable_indexes(proc):
        pg_type = catalog.type_by_id(proc.arg_type_ids[index])
        if pg_type is None:
            raise IntrospectionError(
                "unknown argument type",
                f"type {proc.arg_type_ids[index]!r} of argument {index} of "
                f"{proc.namespace_name}.{proc.name} not found in catalog",
            )
        name = proc.arg_names[index] if index < len(proc.arg_names) else ""
        arguments.append(ComputedColumnArgument(inflector.argument(name, index), pg_type))
    return tuple(arguments)


def _skip(proc: PgProc, table: PgClass, reason: str) -> None:
    logger.debug(f"Skipping {proc.namespace_name}.{proc.name} for table {table.name}: {reason}")
    return None


def is_eligible_computed_column(
    catalog: Catalog,
    table: PgClass,
    proc: PgProc,
    *,
    options: FilterOptions = DEFAULT_OPTIONS,
    inflector: Inflector = DEFAULT_INFLECTOR,
) -> ComputedColumnDescriptor | None:
    """Decide whether ``proc`` can be exposed as a filterable computed column of ``table``.

    Checks run cheapest first and stop at the first failure. A failing check
    is not an error: the function is simply left out of the schema.

    Returns:
        The descriptor for an eligible function, otherwise None.
    """
    if not (proc.tags.get(TAG_FILTERABLE) or options.computed_columns):
        return _skip(proc, table, "not @filterable and computed column filters are disabled")
    if is_omitted(proc, CAPABILITY_EXECUTE):
        return _skip(proc, table, "omitted for execute")
    if is_omitted(proc, CAPABILITY_FILTER):
        return _skip(proc, table, "omitted for filter")
    if not proc.is_stable:
        return _skip(proc, table, "not stable")
    if proc.namespace_id != table.namespace_id:
        return _skip(proc, table, "different namespace")

    prefix = f"{table.name}_"
    if not proc.name.startswith(prefix) or len(proc.name) == len(prefix):
        return _skip(proc, table, f"name does not start with {prefix!r}")
    pseudo_column_name = proc.name[len(prefix):]

    if not proc.arg_type_ids or proc.arg_type_ids[0] != table.type_id:
        return _skip(proc, table, "first argument is not the table row type")
    if proc.returns_set:
        return _skip(proc, table, "returns a set")

    return_type = catalog.type_by_id(proc.return_type_id)
    if return_type is None:
        return _skip(proc, table, f"unknown return type {proc.return_type_id}")
    if catalog.class_of_type(return_type) is not None:
        return _skip(proc, table, "returns a table row type")
    if return_type.id == RECORD_TYPE_ID:
        return _skip(proc, table, "returns record")
    if return_type.id == VOID_TYPE_ID:
        return _skip(proc, table, "returns void")

    arg_names: list[str] = []
    arg_types: list[PgType] = []
    for index in _exposable_indexes(proc):
        arg_type = catalog.type_by_id(proc.arg_type_ids[index])
        if arg_type is None:
            return _skip(proc, table, f"unknown argument type {proc.arg_type_ids[index]}")
        arg_class = catalog.class_of_type(arg_type)
        if arg_type.is_composite and arg_class is not None and arg_class.is_selectable:
            return _skip(proc, table, "accepts a second table row argument")
        arg_names.append(proc.arg_names[index] if index < len(proc.arg_names) else "")
        arg_types.append(arg_type)

    arguments = project_arguments(catalog, proc, inflector=inflector)
    seen: set[str] = set()
    for argument in arguments:
        if argument.name in seen:
            return _skip(proc, table, f"more than one argument is named {argument.name!r}")
        seen.add(argument.name)

    return ComputedColumnDescriptor(
        pseudo_column_name=pseudo_column_name,
        arg_names=tuple(arg_names),
        arg_types=tuple(arg_types),
        arguments=arguments,
    )


def resolve_args_noop(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> None:
    """Resolver for the ``args`` sub-field; arguments are bound by the field resolver."""
    return None


@dataclass(frozen=True)
class ComputedColumnResolver:
    """Resolves every computed column field of one filter type.

    One instance is registered under each synthesized field name; the field
    name selects the function to invoke.
    """

    registry: FilterRegistry
    catalog: Catalog
    fields: Mapping[str, FilterField]
    options: FilterOptions = DEFAULT_OPTIONS

    def __call__(
        self,
        field_name: str,
        field_value: Any,
        source_alias: str,
        ctx: QueryContext,
    ) -> str | None:
        if field_value is None:
            return None

        field = self.fields.get(field_name)
        if field is None:
            raise UnknownFieldError(
                ERR_MSG_UNKNOWN_FIELD,
                f"no computed column registered for field {field_name!r}",
            )
        if not isinstance(field_value, Mapping):
            raise InvalidFilterValueError(
                ERR_MSG_INVALID_FILTER_VALUE,
                f"filter value for {field_name!r} must be an object, got {type(field_value).__name__}",
            )
        provided = field_value.get(ARGS_FIELD_NAME)
        if provided is None:
            provided = {}
        elif not isinstance(provided, Mapping):
            raise InvalidFilterValueError(
                ERR_MSG_INVALID_FILTER_VALUE,
                f"args for {field_name!r} must be an object, got {type(provided).__name__}",
            )

        # Validate before binding so a failure leaves no parameters behind.
        bound: list[tuple[Any, str]] = []
        for argument in field.arguments:
            if argument.name not in provided:
                raise MissingArgumentError(
                    argument.name,
                    f"argument {argument.name!r} of {field.procedure.namespace_name}."
                    f"{field.procedure.name} missing from filter field {field_name!r}",
                )
            bound.append((provided[argument.name], self.catalog.sql_type_name(argument.type)))

        proc = field.procedure
        mark = len(ctx.parameters)
        sql = None
        try:
            w = StringIO()
            write_args = [partial(ctx.dialect.write_identifier, w, source_alias)]
            write_args.extend(
                partial(ctx.write_param, w, value, type_name) for value, type_name in bound
            )
            ctx.dialect.write_function_call(w, proc.namespace_name, proc.name, write_args)

            return_type = self.catalog.type_by_id(proc.return_type_id)
            sql = resolve_field(
                self.registry,
                self.catalog,
                field_value,
                w.getvalue(),
                field.operators_type_name,
                ctx,
                return_type,
                None,
                field_name,
                options=self.options,
            )
        finally:
            # Unused or failed calls must not leave their arguments bound.
            if sql is None:
                ctx.rewind(mark)
        return sql


def add_computed_column_filters(
    registry: FilterRegistry,
    catalog: Catalog,
    table: PgClass,
    *,
    filter_type_name: str | None = None,
    options: FilterOptions = DEFAULT_OPTIONS,
    inflector: Inflector = DEFAULT_INFLECTOR,
) -> list[FilterField]:
    """Register a filter field for every eligible computed column of ``table``.

    Args:
        registry: Registry receiving types, fields and resolvers.
        catalog: Catalog snapshot to read functions and types from.
        table: The table whose filter type is being built.
        filter_type_name: Filter input type name. Defaults to
            ``inflector.filter_type(table)``.
        options: Exposure and input handling options.
        inflector: Naming rules.

    Returns:
        The synthesized fields, in catalog order.

    Raises:
        DuplicateFieldError: If two eligible functions map to one field name.
        TypeConflictError: If an operators type name is reused with a
            different structure.
    """
    if filter_type_name is None:
        filter_type_name = inflector.filter_type(table)

    candidates: dict[str, tuple[PgProc, ComputedColumnDescriptor]] = {}
    for proc in catalog.procedures:
        descriptor = is_eligible_computed_column(
            catalog, table, proc, options=options, inflector=inflector
        )
        if descriptor is None:
            continue
        field_name = inflector.computed_column(descriptor.pseudo_column_name, proc, table)
        if field_name in candidates:
            other = candidates[field_name][0]
            raise DuplicateFieldError(
                f"duplicate filter field {field_name}",
                f"{other.namespace_name}.{other.name} and {proc.namespace_name}.{proc.name} "
                f"both map to {filter_type_name}.{field_name}",
            )
        candidates[field_name] = (proc, descriptor)

    fields: dict[str, FilterField] = {}
    for field_name, (proc, descriptor) in candidates.items():
        with_args = (
            ComputedColumnWithArgs(table, descriptor.pseudo_column_name, descriptor.arguments)
            if descriptor.arguments
            else None
        )
        operators_type = build_operators_type(
            registry,
            catalog,
            proc.return_type_id,
            None,
            with_args,
            options=options,
            inflector=inflector,
        )
        if operators_type is None:
            logger.debug(f"Dropping {filter_type_name}.{field_name}: no operators type for its return type")
            continue

        registry.register_field(
            filter_type_name,
            FilterFieldDefinition(
                name=field_name,
                description=f"Filter by the object’s `{field_name}` field.",
                type=operators_type,
            ),
        )
        if with_args is not None:
            registry.register_resolver(operators_type.name, ARGS_FIELD_NAME, resolve_args_noop)

        fields[field_name] = FilterField(
            field_name=field_name,
            procedure=proc,
            operators_type_name=operators_type.name,
            has_arguments_subfield=with_args is not None,
            arguments=descriptor.arguments,
        )

    resolver = ComputedColumnResolver(
        registry=registry,
        catalog=catalog,
        fields=MappingProxyType(dict(fields)),
        options=options,
    )
    for field_name in fields:
        registry.register_resolver(filter_type_name, field_name, resolver)

    logger.info(f"Registered {len(fields)} computed column filter fields on {filter_type_name}")
    return list(fields.values())
