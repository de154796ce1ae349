"""PostgreSQL catalog introspection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from pyconnfilter._errors import IntrospectionError
from pyconnfilter.catalog import ArgMode, Catalog, Namespace, PgClass, PgProc, PgType
from pyconnfilter.tags import parse_smart_comment

SELECTABLE_RELKINDS = {"r", "v", "m", "f", "p"}

_NAMESPACES_QUERY = """
    SELECT n.oid::text, n.nspname, obj_description(n.oid, 'pg_namespace')
    FROM pg_catalog.pg_namespace n
    WHERE n.nspname = ANY(%s)
    ORDER BY n.nspname
"""

_CLASSES_QUERY = """
    SELECT c.oid::text, c.relname, c.relnamespace::text, n.nspname,
           c.reltype::text, c.relkind, obj_description(c.oid, 'pg_class')
    FROM pg_catalog.pg_class c
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = ANY(%s)
      AND c.relkind IN ('r', 'v', 'm', 'f', 'p', 'c')
    ORDER BY n.nspname, c.relname
"""

_TYPES_QUERY = """
    SELECT t.oid::text, t.typname, t.typnamespace::text, n.nspname,
           t.typtype, t.typcategory, NULLIF(t.typrelid, 0)::text,
           NULLIF(t.typelem, 0)::text, NULLIF(t.typbasetype, 0)::text,
           obj_description(t.oid, 'pg_type')
    FROM pg_catalog.pg_type t
    JOIN pg_catalog.pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = ANY(%s) OR n.nspname = 'pg_catalog'
    ORDER BY t.oid
"""

_PROCS_QUERY = """
    SELECT p.oid::text, p.proname, p.pronamespace::text, n.nspname,
           p.proargnames,
           COALESCE(p.proallargtypes, p.proargtypes::oid[])::text[],
           p.proargmodes::text[],
           p.prorettype::text, p.proretset, p.provolatile,
           obj_description(p.oid, 'pg_proc')
    FROM pg_catalog.pg_proc p
    JOIN pg_catalog.pg_namespace n ON n.oid = p.pronamespace
    WHERE n.nspname = ANY(%s)
      AND p.prokind = 'f'
    ORDER BY n.nspname, p.proname, p.oid
"""


@runtime_checkable
class PgCursor(Protocol):
    """Minimal cursor protocol for PostgreSQL drivers."""

    def execute(self, query: str, params: Any = ..., /) -> Any: ...
    def fetchall(self) -> list[tuple[Any, ...]]: ...
    def close(self) -> None: ...


@runtime_checkable
class PgConnection(Protocol):
    """Minimal connection protocol for PostgreSQL drivers."""

    def cursor(self) -> PgCursor: ...


def introspect_postgres(
    conn: PgConnection,
    *,
    schema_names: Sequence[str] = ("public",),
) -> Catalog:
    """Introspect the catalog entities computed column filtering reads.

    Args:
        conn: A PostgreSQL connection (e.g. ``psycopg.Connection``).
        schema_names: Schemas to load functions and relations from. Types
            are also loaded from ``pg_catalog``.

    Returns:
        A :class:`~pyconnfilter.catalog.Catalog` snapshot.

    Raises:
        IntrospectionError: If a requested schema is not found.
    """
    if not schema_names:
        return Catalog()

    cur = conn.cursor()
    try:
        return _introspect(cur, list(schema_names))
    finally:
        cur.close()


def _fetch(cur: PgCursor, query: str, schema_names: list[str]) -> list[tuple[Any, ...]]:
    cur.execute(query, [schema_names])
    return cur.fetchall()


def _introspect(cur: PgCursor, schema_names: list[str]) -> Catalog:
    namespaces = [_map_namespace(row) for row in _fetch(cur, _NAMESPACES_QUERY, schema_names)]
    found = {n.name for n in namespaces}
    for name in schema_names:
        if name not in found:
            raise IntrospectionError(
                f"schema not found: {name!r}",
                internal_details=f"schema {name!r} not found in pg_namespace",
            )

    classes = [_map_class(row) for row in _fetch(cur, _CLASSES_QUERY, schema_names)]
    types = [_map_type(row) for row in _fetch(cur, _TYPES_QUERY, schema_names)]
    procedures = [_map_proc(row) for row in _fetch(cur, _PROCS_QUERY, schema_names)]
    return Catalog(namespaces=namespaces, classes=classes, types=types, procedures=procedures)


def _map_namespace(row: tuple[Any, ...]) -> Namespace:
    oid, name, comment = row
    smart = parse_smart_comment(comment)
    return Namespace(id=str(oid), name=str(name), description=smart.description, tags=smart.tags)


def _map_class(row: tuple[Any, ...]) -> PgClass:
    oid, name, namespace_id, namespace_name, type_id, kind, comment = row
    smart = parse_smart_comment(comment)
    return PgClass(
        id=str(oid),
        name=str(name),
        namespace_id=str(namespace_id),
        namespace_name=str(namespace_name),
        type_id=str(type_id),
        kind=str(kind),
        is_selectable=str(kind) in SELECTABLE_RELKINDS,
        description=smart.description,
        tags=smart.tags,
    )


def _optional_id(value: Any) -> str | None:
    return None if value is None else str(value)


def _map_type(row: tuple[Any, ...]) -> PgType:
    (
        oid, name, namespace_id, namespace_name, kind, category,
        class_id, elem_id, base_type_id, comment,
    ) = row
    smart = parse_smart_comment(comment)
    # typelem is also set on fixed-length non-array types such as name and point
    array_item_type_id = _optional_id(elem_id) if category == "A" else None
    return PgType(
        id=str(oid),
        name=str(name),
        namespace_id=str(namespace_id),
        namespace_name=str(namespace_name),
        kind=str(kind),
        category=str(category),
        class_id=_optional_id(class_id),
        array_item_type_id=array_item_type_id,
        domain_base_type_id=_optional_id(base_type_id),
        description=smart.description,
        tags=smart.tags,
    )


def _map_proc(row: tuple[Any, ...]) -> PgProc:
    (
        oid, name, namespace_id, namespace_name, arg_names, arg_type_ids,
        arg_modes, return_type_id, returns_set, volatility, comment,
    ) = row
    smart = parse_smart_comment(comment)
    arg_type_ids = tuple(str(t) for t in (arg_type_ids or ()))
    names = [str(n) if n is not None else "" for n in (arg_names or ())]
    names.extend([""] * (len(arg_type_ids) - len(names)))
    try:
        modes = tuple(ArgMode(m) for m in (arg_modes or ()))
    except ValueError as exc:
        raise IntrospectionError(
            "unexpected argument mode",
            f"function {namespace_name}.{name} has argument modes {arg_modes!r}",
            wrapped=exc,
        ) from exc
    return PgProc(
        id=str(oid),
        name=str(name),
        namespace_id=str(namespace_id),
        namespace_name=str(namespace_name),
        return_type_id=str(return_type_id),
        arg_names=tuple(names),
        arg_type_ids=arg_type_ids,
        arg_modes=modes,
        returns_set=bool(returns_set),
        is_stable=volatility in ("s", "i"),
        description=smart.description,
        tags=smart.tags,
    )
