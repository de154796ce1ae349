"""Generic single-field predicate resolution.

Turns one operators-type value (``{"equalTo": 5, "lessThan": 10}``) applied
to one SQL expression into a parameterized predicate fragment. Operator
resolvers are looked up in the :class:`~pyconnfilter.registry.FilterRegistry`
under the operators type name, so any type can contribute extra entries
(the computed column ``args`` sub-field registers a no-op one).
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from io import StringIO
from typing import Any

from pyconnfilter._errors import (
    ERR_MSG_EMPTY_OBJECT,
    ERR_MSG_INVALID_FILTER_VALUE,
    ERR_MSG_INVALID_OPERATOR,
    ERR_MSG_NULL_LITERAL,
    InvalidFilterValueError,
    InvalidOperatorError,
)
from pyconnfilter._operators import (
    ANY_OPERATORS,
    ARRAY_OPERATORS,
    COMPARISON_OPERATORS,
    JSONB_OPERATORS,
    LIKE_OPERATORS,
)
from pyconnfilter._utils import escape_like_wildcards, validate_no_null_bytes
from pyconnfilter.catalog import Catalog, PgType
from pyconnfilter.options import DEFAULT_OPTIONS, FilterOptions
from pyconnfilter.query import QueryContext
from pyconnfilter.registry import FilterRegistry
from pyconnfilter.scalars import JSON_PG_TYPES


@dataclass(frozen=True)
class ColumnType:
    """SQL typing information an operator needs to bind its value."""

    sql_type: str
    item_sql_type: str | None = None
    is_json: bool = False

    @property
    def is_list(self) -> bool:
        return self.item_sql_type is not None

    @classmethod
    def of(cls, catalog: Catalog, pg_type: PgType) -> ColumnType:
        base = catalog.base_type(pg_type)
        item_sql_type = None
        if base.is_array:
            item = catalog.type_by_id(base.array_item_type_id)
            if item is not None:
                item_sql_type = catalog.sql_type_name(item)
        return cls(
            sql_type=catalog.sql_type_name(pg_type),
            item_sql_type=item_sql_type,
            is_json=base.name in JSON_PG_TYPES,
        )


OperatorResolver = Callable[[str, Any, QueryContext, ColumnType], str | None]


def _bind(value: Any, column: ColumnType) -> Any:
    if column.is_json:
        return json.dumps(value)
    if isinstance(value, str):
        validate_no_null_bytes(value)
    return value


def _comparison(op: str) -> OperatorResolver:
    def resolve(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
        w = StringIO()
        ctx.dialect.write_binary_operator(
            w,
            lambda: w.write(column_sql),
            op,
            lambda: ctx.write_param(w, _bind(value, column), column.sql_type),
        )
        return w.getvalue()

    return resolve


def _resolve_is_null(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
    w = StringIO()
    ctx.dialect.write_null_check(w, lambda: w.write(column_sql), bool(value))
    return w.getvalue()


def _write_in(w: StringIO, column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> None:
    if not isinstance(value, (list, tuple)):
        raise InvalidFilterValueError(
            ERR_MSG_INVALID_FILTER_VALUE,
            f"expected a list for an in/notIn operator, got {type(value).__name__}",
        )
    ctx.dialect.write_array_membership(
        w,
        lambda: w.write(column_sql),
        lambda: ctx.write_param(w, [_bind(v, column) for v in value], f"{column.sql_type}[]"),
    )


def _resolve_in(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
    w = StringIO()
    _write_in(w, column_sql, value, ctx, column)
    return w.getvalue()


def _resolve_not_in(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
    w = StringIO()
    ctx.dialect.write_not(w, lambda: _write_in(w, column_sql, value, ctx, column))
    return w.getvalue()


def _like(prefix: str, suffix: str, escape: bool, case_insensitive: bool, negate: bool) -> OperatorResolver:
    def resolve(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
        text = str(value)
        validate_no_null_bytes(text)
        pattern = f"{prefix}{escape_like_wildcards(text) if escape else text}{suffix}"
        w = StringIO()
        ctx.dialect.write_like(
            w,
            lambda: w.write(column_sql),
            lambda: ctx.write_param(w, pattern, column.sql_type),
            case_insensitive,
            negate,
        )
        return w.getvalue()

    return resolve


def _containment(name: str) -> OperatorResolver:
    """``contains``/``containedBy`` for jsonb values and arrays, ``overlaps`` for arrays."""

    def resolve(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
        if column.is_json:
            op = JSONB_OPERATORS[name]
            bound, type_name = json.dumps(value), "jsonb"
        else:
            op = ARRAY_OPERATORS[name]
            bound, type_name = value, column.sql_type
        w = StringIO()
        ctx.dialect.write_binary_operator(
            w,
            lambda: w.write(column_sql),
            op,
            lambda: ctx.write_param(w, bound, type_name),
        )
        return w.getvalue()

    return resolve


def _json_key(op: str, type_name: str) -> OperatorResolver:
    def resolve(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
        w = StringIO()
        ctx.dialect.write_binary_operator(
            w,
            lambda: w.write(column_sql),
            op,
            lambda: ctx.write_param(w, value, type_name),
        )
        return w.getvalue()

    return resolve


def _any(op: str) -> OperatorResolver:
    def resolve(column_sql: str, value: Any, ctx: QueryContext, column: ColumnType) -> str:
        w = StringIO()
        ctx.dialect.write_any_comparison(
            w,
            lambda: ctx.write_param(w, value, column.item_sql_type),
            op,
            lambda: w.write(column_sql),
        )
        return w.getvalue()

    return resolve


def _build_operator_resolvers() -> dict[str, OperatorResolver]:
    resolvers: dict[str, OperatorResolver] = {
        "isNull": _resolve_is_null,
        "in": _resolve_in,
        "notIn": _resolve_not_in,
        "contains": _containment("contains"),
        "containedBy": _containment("containedBy"),
        "overlaps": _containment("overlaps"),
        "containsKey": _json_key(JSONB_OPERATORS["containsKey"], "text"),
        "containsAllKeys": _json_key(JSONB_OPERATORS["containsAllKeys"], "text[]"),
        "containsAnyKeys": _json_key(JSONB_OPERATORS["containsAnyKeys"], "text[]"),
    }
    for name, op in COMPARISON_OPERATORS.items():
        resolvers[name] = _comparison(op)
    for name, op in ANY_OPERATORS.items():
        resolvers[name] = _any(op)
    for name, pattern in LIKE_OPERATORS.items():
        resolvers[name] = _like(*pattern)
    return resolvers


OPERATOR_RESOLVERS: dict[str, OperatorResolver] = _build_operator_resolvers()


def resolve_field(
    registry: FilterRegistry,
    catalog: Catalog,
    field_value: Any,
    column_sql: str,
    operators_type_name: str,
    ctx: QueryContext,
    pg_type: PgType,
    type_modifier: int | None,
    field_name: str,
    *,
    options: FilterOptions = DEFAULT_OPTIONS,
) -> str | None:
    """Resolve an operators-type value against ``column_sql``.

    Args:
        registry: Registry holding the operator resolvers of the type.
        catalog: Catalog used to render SQL type names for casts.
        field_value: Mapping of operator name to value.
        column_sql: SQL expression the operators apply to.
        operators_type_name: Name of the operators input type.
        ctx: Query context receiving bound parameters.
        pg_type: Type of ``column_sql``.
        type_modifier: Type modifier of ``column_sql``; unused for
            function results, which carry none.
        field_name: Filter field name, for error messages.
        options: Null and empty-object input handling.

    Returns:
        The predicate fragment, or None if no operator produced one.

    Raises:
        InvalidFilterValueError: If the value is not a mapping, is empty, or
            holds a forbidden null.
        InvalidOperatorError: If an operator is not defined on the type.
    """
    if field_value is None:
        return None
    if not isinstance(field_value, Mapping):
        raise InvalidFilterValueError(
            ERR_MSG_INVALID_FILTER_VALUE,
            f"filter value for {field_name!r} must be an object, got {type(field_value).__name__}",
        )
    if not field_value and not options.allow_empty_object_input:
        raise InvalidFilterValueError(
            ERR_MSG_EMPTY_OBJECT,
            f"empty filter object supplied for {field_name!r}",
        )

    column = ColumnType.of(catalog, pg_type)
    fragments: list[str] = []
    for operator_name, value in field_value.items():
        resolver = registry.get_resolver(operators_type_name, operator_name)
        if resolver is None:
            raise InvalidOperatorError(
                ERR_MSG_INVALID_OPERATOR,
                f"operator {operator_name!r} is not defined on {operators_type_name!r} "
                f"(field {field_name!r})",
            )
        if value is None:
            if options.allow_null_input:
                continue
            raise InvalidFilterValueError(
                ERR_MSG_NULL_LITERAL,
                f"null supplied for {field_name}.{operator_name}",
            )
        fragment = resolver(column_sql, value, ctx, column)
        if fragment is not None:
            fragments.append(fragment)

    if not fragments:
        return None
    if len(fragments) == 1:
        return fragments[0]
    return " AND ".join(f"({fragment})" for fragment in fragments)
