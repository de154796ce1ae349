"""Operators input types: the comparison operators available for a value type."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from graphql import (
    GraphQLBoolean,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLInputType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLScalarType,
    GraphQLString,
)

from pyconnfilter._constants import ARGS_FIELD_NAME
from pyconnfilter._operators import (
    ANY_OPERATORS,
    BASE_OPERATORS,
    JSONB_OPERATORS,
    LIKE_OPERATORS,
    LIST_OPERATORS,
    OPERATOR_DESCRIPTIONS,
    SORT_OPERATORS,
)
from pyconnfilter.catalog import Catalog, PgClass, PgType
from pyconnfilter.inflection import DEFAULT_INFLECTOR, Inflector
from pyconnfilter.options import DEFAULT_OPTIONS, FilterOptions
from pyconnfilter.registry import FilterRegistry
from pyconnfilter.resolve import OPERATOR_RESOLVERS
from pyconnfilter.scalars import (
    STRING_PG_TYPES,
    UNORDERED_PG_TYPES,
    scalar_for_type,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputedColumnArgument:
    """An exposed computed column argument: external name and catalog type."""

    name: str
    type: PgType


@dataclass(frozen=True)
class ComputedColumnWithArgs:
    """A computed column whose operators type needs an ``args`` sub-field."""

    table: PgClass
    name: str
    arguments: tuple[ComputedColumnArgument, ...]


@dataclass(frozen=True)
class _OperatorSet:
    scalar: GraphQLScalarType
    is_list: bool
    operators: tuple[str, ...]


def _operator_set(catalog: Catalog, pg_type: PgType, options: FilterOptions) -> _OperatorSet | None:
    base = catalog.base_type(pg_type)
    if base.is_array:
        if not options.arrays:
            return None
        item = catalog.type_by_id(base.array_item_type_id)
        if item is None:
            return None
        item = catalog.base_type(item)
        if item.is_array:
            return None
        scalar = scalar_for_type(item)
        if scalar is None:
            return None
        return _OperatorSet(scalar, True, LIST_OPERATORS)

    if base.name == "json":
        # json has no equality operator; only jsonb is filterable
        return None
    scalar = scalar_for_type(base)
    if scalar is None:
        return None
    operators: list[str] = list(BASE_OPERATORS)
    if base.name not in UNORDERED_PG_TYPES:
        operators.extend(SORT_OPERATORS)
    if base.name in STRING_PG_TYPES:
        operators.extend(LIKE_OPERATORS)
    if base.name == "jsonb":
        operators.extend(JSONB_OPERATORS)
    return _OperatorSet(scalar, False, tuple(operators))


def input_type_for(
    catalog: Catalog, pg_type: PgType, options: FilterOptions = DEFAULT_OPTIONS
) -> GraphQLInputType | None:
    """Map a catalog type to the GraphQL input type used for plain values."""
    base = catalog.base_type(pg_type)
    if base.is_array:
        if not options.arrays:
            return None
        item = catalog.type_by_id(base.array_item_type_id)
        if item is None:
            return None
        scalar = scalar_for_type(catalog.base_type(item))
        return GraphQLList(scalar) if scalar is not None else None
    return scalar_for_type(base)


def _operator_input_type(name: str, operator_set: _OperatorSet) -> GraphQLInputType:
    scalar = operator_set.scalar
    if name == "isNull":
        return GraphQLBoolean
    if name == "containsKey":
        return GraphQLString
    if name in ("containsAllKeys", "containsAnyKeys"):
        return GraphQLList(GraphQLNonNull(GraphQLString))
    if operator_set.is_list:
        if name in ANY_OPERATORS:
            return scalar
        return GraphQLList(scalar)
    if name in ("in", "notIn"):
        return GraphQLList(GraphQLNonNull(scalar))
    return scalar


def build_operators_type(
    registry: FilterRegistry,
    catalog: Catalog,
    type_id: str,
    type_modifier: int | None = None,
    computed_column_with_args: ComputedColumnWithArgs | None = None,
    *,
    options: FilterOptions = DEFAULT_OPTIONS,
    inflector: Inflector = DEFAULT_INFLECTOR,
) -> GraphQLInputObjectType | None:
    """Build, or reuse from ``registry``, the operators type for a value type.

    When ``computed_column_with_args`` is given, the type also carries an
    ``args`` field whose input object has one field per argument.

    Returns None when the type (or one of the argument types) has no GraphQL
    mapping, or when every operator is disallowed by ``options``.
    """
    pg_type = catalog.type_by_id(type_id)
    if pg_type is None:
        return None
    operator_set = _operator_set(catalog, pg_type, options)
    if operator_set is None:
        logger.debug(f"No operators for type {pg_type.name} ({type_id})")
        return None

    exposed = tuple(
        (name, options.exposed_operator_name(name))
        for name in operator_set.operators
        if options.is_operator_allowed(name)
    )
    if not exposed:
        return None

    type_name = inflector.operators_type(operator_set.scalar.name, operator_set.is_list)
    args_type: GraphQLInputType | None = None
    args_shape: tuple | None = None
    if computed_column_with_args is not None:
        args_fields: dict[str, GraphQLInputField] = {}
        for argument in computed_column_with_args.arguments:
            argument_type = input_type_for(catalog, argument.type, options)
            if argument_type is None:
                logger.debug(
                    f"Argument {argument.name} of computed column "
                    f"{computed_column_with_args.name} has unsupported type {argument.type.name}"
                )
                return None
            args_fields[argument.name] = GraphQLInputField(argument_type)

        args_type_name = inflector.computed_column_args_type(
            computed_column_with_args.table, computed_column_with_args.name
        )
        args_shape = (
            args_type_name,
            tuple((name, str(field.type)) for name, field in args_fields.items()),
        )
        args_type = registry.register_type(
            args_type_name,
            ("args", args_shape[1]),
            lambda: GraphQLInputObjectType(
                args_type_name,
                args_fields,
                description=f"Arguments of the `{computed_column_with_args.name}` computed column.",
            ),
        )
        type_name = inflector.computed_column_operators_type(
            computed_column_with_args.table, computed_column_with_args.name, type_name
        )

    shape = (
        "operators",
        operator_set.scalar.name,
        operator_set.is_list,
        type_modifier,
        exposed,
        args_shape,
    )

    def create() -> GraphQLInputObjectType:
        fields: dict[str, GraphQLInputField] = {}
        if args_type is not None:
            fields[ARGS_FIELD_NAME] = GraphQLInputField(
                args_type, description="Arguments passed to the computed column function."
            )
        for name, exposed_name in exposed:
            fields[exposed_name] = GraphQLInputField(
                _operator_input_type(name, operator_set),
                description=OPERATOR_DESCRIPTIONS.get(name),
            )
        scalar_name = operator_set.scalar.name
        description = (
            f"A filter to be used against {scalar_name} List fields."
            if operator_set.is_list
            else f"A filter to be used against {scalar_name} fields."
        )
        return GraphQLInputObjectType(type_name, fields, description=description)

    operators_type = registry.register_type(type_name, shape, create)
    for name, exposed_name in exposed:
        registry.register_resolver(type_name, exposed_name, OPERATOR_RESOLVERS[name])
    return operators_type
