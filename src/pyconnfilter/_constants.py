"""Catalog constants for computed-column filtering."""

RECORD_TYPE_ID = "2249"
"""OID of the generic ``record`` pseudo-type."""

VOID_TYPE_ID = "2278"
"""OID of the ``void`` pseudo-type."""

PG_CATALOG_NAMESPACE = "pg_catalog"

ARGS_FIELD_NAME = "args"
"""Reserved operators-type field carrying extra computed column arguments."""

TAG_FILTERABLE = "filterable"
TAG_OMIT = "omit"
TAG_NAME = "name"
TAG_FIELD_NAME = "fieldName"

CAPABILITY_EXECUTE = "execute"
CAPABILITY_FILTER = "filter"

# Single letter @omit aliases
OMIT_ALIASES: dict[str, str] = {
    "C": "create",
    "R": "read",
    "U": "update",
    "D": "delete",
    "E": "execute",
    "F": "filter",
    "O": "order",
    "A": "all",
    "M": "many",
}

MAX_POSTGRESQL_IDENTIFIER_LENGTH = 63
