"""GraphQL input scalars for PostgreSQL types."""

from __future__ import annotations

from typing import Any

from graphql import (
    GraphQLBoolean,
    GraphQLFloat,
    GraphQLInt,
    GraphQLScalarType,
    GraphQLString,
    IntValueNode,
    StringValueNode,
    ValueNode,
    value_from_ast_untyped,
)
from graphql.error import GraphQLError

from pyconnfilter.catalog import PgType


def _parse_string_like_literal(value_node: ValueNode, _variables: Any = None) -> str:
    if isinstance(value_node, (StringValueNode, IntValueNode)):
        return value_node.value
    raise GraphQLError(f"Expected a string literal, got {type(value_node).__name__}")


def _string_scalar(name: str, description: str) -> GraphQLScalarType:
    """A scalar transported as a string and cast to its type by the database."""
    return GraphQLScalarType(
        name=name,
        description=description,
        serialize=str,
        parse_value=str,
        parse_literal=_parse_string_like_literal,
    )


GraphQLBigInt = _string_scalar(
    "BigInt", "A signed eight-byte integer, transported as a string."
)
GraphQLBigFloat = _string_scalar(
    "BigFloat", "An arbitrary precision number, transported as a string."
)
GraphQLDatetime = _string_scalar(
    "Datetime", "A point in time as described by the ISO 8601 standard."
)
GraphQLDate = _string_scalar("Date", "A calendar date in YYYY-MM-DD format.")
GraphQLTime = _string_scalar("Time", "A time of day as described by ISO 8601.")
GraphQLInterval = _string_scalar("Interval", "A PostgreSQL interval literal.")
GraphQLUUID = _string_scalar("UUID", "A universally unique identifier.")

GraphQLJSON = GraphQLScalarType(
    name="JSON",
    description="A JSON value.",
    serialize=lambda value: value,
    parse_value=lambda value: value,
    parse_literal=lambda value_node, variables=None: value_from_ast_untyped(value_node, variables),
)

# PostgreSQL type name -> GraphQL scalar
SCALARS_BY_PG_TYPE: dict[str, GraphQLScalarType] = {
    "int2": GraphQLInt,
    "int4": GraphQLInt,
    "int8": GraphQLBigInt,
    "float4": GraphQLFloat,
    "float8": GraphQLFloat,
    "numeric": GraphQLBigFloat,
    "money": GraphQLFloat,
    "bool": GraphQLBoolean,
    "text": GraphQLString,
    "varchar": GraphQLString,
    "bpchar": GraphQLString,
    "char": GraphQLString,
    "name": GraphQLString,
    "citext": GraphQLString,
    "uuid": GraphQLUUID,
    "date": GraphQLDate,
    "timestamp": GraphQLDatetime,
    "timestamptz": GraphQLDatetime,
    "time": GraphQLTime,
    "timetz": GraphQLTime,
    "interval": GraphQLInterval,
    "json": GraphQLJSON,
    "jsonb": GraphQLJSON,
}

STRING_PG_TYPES = {"text", "varchar", "bpchar", "char", "name", "citext"}
JSON_PG_TYPES = {"json", "jsonb"}
UNORDERED_PG_TYPES = {"bool", "json", "jsonb", "uuid"}


def scalar_for_type(pg_type: PgType) -> GraphQLScalarType | None:
    """Map a (non-array, domain-unwrapped) type to its GraphQL scalar."""
    if pg_type.kind == "e":
        return GraphQLString
    return SCALARS_BY_PG_TYPE.get(pg_type.name)
