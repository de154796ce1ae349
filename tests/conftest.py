"""Shared test fixtures.

The catalog mirrors a small ``app_public`` schema::

    CREATE TABLE post (...);
    CREATE TABLE othertable (...);
    CREATE TYPE address AS (...);
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from pyconnfilter.catalog import ArgMode, Catalog, Namespace, PgClass, PgProc, PgType
from pyconnfilter.query import QueryContext
from pyconnfilter.registry import FilterRegistry

APP_PUBLIC = "100"
OTHER_SCHEMA = "200"

POST_CLASS = "1000"
POST_TYPE = "1001"
OTHER_CLASS = "2000"
OTHER_TYPE = "2001"
ADDRESS_CLASS = "3000"
ADDRESS_TYPE = "3001"
EMAIL_DOMAIN = "4001"

BOOL, INT8, INT4, TEXT, JSON, POINT, FLOAT8, TEXT_ARRAY, INT4_ARRAY = (
    "16", "20", "23", "25", "114", "600", "701", "1009", "1007",
)
RECORD, VOID, JSONB = "2249", "2278", "3802"

NAMESPACES = [
    Namespace(id=APP_PUBLIC, name="app_public"),
    Namespace(id=OTHER_SCHEMA, name="app_private"),
]

TYPES = [
    PgType(id=BOOL, name="bool", category="B"),
    PgType(id=INT8, name="int8", category="N"),
    PgType(id=INT4, name="int4", category="N"),
    PgType(id=TEXT, name="text", category="S"),
    PgType(id=JSON, name="json", category="U"),
    PgType(id=POINT, name="point", category="G"),
    PgType(id=FLOAT8, name="float8", category="N"),
    PgType(id=TEXT_ARRAY, name="_text", category="A", array_item_type_id=TEXT),
    PgType(id=INT4_ARRAY, name="_int4", category="A", array_item_type_id=INT4),
    PgType(id=RECORD, name="record", kind="p", category="P"),
    PgType(id=VOID, name="void", kind="p", category="P"),
    PgType(id=JSONB, name="jsonb", category="U"),
    PgType(
        id=POST_TYPE, name="post", namespace_id=APP_PUBLIC,
        namespace_name="app_public", kind="c", category="C", class_id=POST_CLASS,
    ),
    PgType(
        id=OTHER_TYPE, name="othertable", namespace_id=APP_PUBLIC,
        namespace_name="app_public", kind="c", category="C", class_id=OTHER_CLASS,
    ),
    PgType(
        id=ADDRESS_TYPE, name="address", namespace_id=APP_PUBLIC,
        namespace_name="app_public", kind="c", category="C", class_id=ADDRESS_CLASS,
    ),
    PgType(
        id=EMAIL_DOMAIN, name="email", namespace_id=APP_PUBLIC,
        namespace_name="app_public", kind="d", category="S", domain_base_type_id=TEXT,
    ),
]

CLASSES = [
    PgClass(
        id=POST_CLASS, name="post", namespace_id=APP_PUBLIC,
        namespace_name="app_public", type_id=POST_TYPE,
    ),
    PgClass(
        id=OTHER_CLASS, name="othertable", namespace_id=APP_PUBLIC,
        namespace_name="app_public", type_id=OTHER_TYPE,
    ),
    PgClass(
        id=ADDRESS_CLASS, name="address", namespace_id=APP_PUBLIC,
        namespace_name="app_public", type_id=ADDRESS_TYPE, kind="c",
        is_selectable=False,
    ),
]


def _make_proc(
    name: str,
    arg_type_ids: tuple[str, ...] = (POST_TYPE,),
    *,
    arg_names: tuple[str, ...] | None = None,
    arg_modes: tuple[ArgMode, ...] = (),
    return_type_id: str = TEXT,
    returns_set: bool = False,
    is_stable: bool = True,
    namespace_id: str = APP_PUBLIC,
    tags: dict[str, Any] | None = None,
) -> PgProc:
    if arg_names is None:
        arg_names = ("p",) + tuple(f"arg_{i}" for i in range(1, len(arg_type_ids)))
    namespace_name = "app_public" if namespace_id == APP_PUBLIC else "app_private"
    return PgProc(
        id=f"proc:{name}",
        name=name,
        namespace_id=namespace_id,
        namespace_name=namespace_name,
        return_type_id=return_type_id,
        arg_names=arg_names,
        arg_type_ids=arg_type_ids,
        arg_modes=arg_modes,
        returns_set=returns_set,
        is_stable=is_stable,
        tags=tags or {},
    )


def _make_catalog(*procs: PgProc) -> Catalog:
    return Catalog(namespaces=NAMESPACES, classes=CLASSES, types=TYPES, procedures=procs)


DEFAULT_PROCS = [
    _make_proc("post_full_name", arg_names=("p",)),
    _make_proc(
        "post_computed", (POST_TYPE, INT4), arg_names=("p", "extra"),
        return_type_id=INT4,
    ),
    _make_proc(
        "post_ab", (POST_TYPE, INT4, INT4), arg_names=("p", "a", "b"),
        return_type_id=INT4,
    ),
    _make_proc("post_tags", returns_set=True),
    _make_proc(
        "post_other_table", (POST_TYPE, OTHER_TYPE), arg_names=("p", "other_row"),
        return_type_id=BOOL,
    ),
    _make_proc("post_labels", return_type_id=TEXT_ARRAY),
    _make_proc("post_random", is_stable=False),
]


@pytest.fixture
def make_proc() -> Callable[..., PgProc]:
    return _make_proc


@pytest.fixture
def make_catalog() -> Callable[..., Catalog]:
    return _make_catalog


@pytest.fixture
def catalog() -> Catalog:
    return _make_catalog(*DEFAULT_PROCS)


@pytest.fixture
def post_table(catalog: Catalog) -> PgClass:
    table = catalog.class_by_id(POST_CLASS)
    assert table is not None
    return table


@pytest.fixture
def registry() -> FilterRegistry:
    return FilterRegistry()


@pytest.fixture
def ctx() -> QueryContext:
    return QueryContext()
