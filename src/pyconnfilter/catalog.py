"""Read-only catalog model for computed-column discovery."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pyconnfilter._constants import PG_CATALOG_NAMESPACE
from pyconnfilter._utils import quote_identifier


class ArgMode(enum.StrEnum):
    IN = "i"
    OUT = "o"
    INOUT = "b"
    VARIADIC = "v"
    TABLE = "t"


@dataclass(frozen=True)
class Namespace:
    """A schema (``pg_namespace`` row)."""

    id: str
    name: str
    description: str = ""
    tags: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PgType:
    """A catalog type (``pg_type`` row)."""

    id: str
    name: str
    namespace_id: str = ""
    namespace_name: str = PG_CATALOG_NAMESPACE
    kind: str = "b"
    category: str = "U"
    class_id: str | None = None
    array_item_type_id: str | None = None
    domain_base_type_id: str | None = None
    description: str = ""
    tags: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_composite(self) -> bool:
        return self.kind == "c"

    @property
    def is_array(self) -> bool:
        return self.category == "A" and self.array_item_type_id is not None


@dataclass(frozen=True)
class PgClass:
    """A table, view, or other relation (``pg_class`` row)."""

    id: str
    name: str
    namespace_id: str
    type_id: str
    namespace_name: str = "public"
    kind: str = "r"
    is_selectable: bool = True
    description: str = ""
    tags: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PgProc:
    """A catalog function (``pg_proc`` row).

    ``arg_type_ids``, ``arg_names`` and ``arg_modes`` are aligned and cover
    every argument, including ``out`` arguments. An empty ``arg_modes``
    means every argument is ``in``.
    """

    id: str
    name: str
    namespace_id: str
    return_type_id: str
    namespace_name: str = "public"
    arg_names: tuple[str, ...] = ()
    arg_type_ids: tuple[str, ...] = ()
    arg_modes: tuple[ArgMode, ...] = ()
    returns_set: bool = False
    is_stable: bool = False
    description: str = ""
    tags: Mapping[str, Any] = field(default_factory=dict)

    def arg_mode(self, index: int) -> ArgMode:
        if not self.arg_modes:
            return ArgMode.IN
        return self.arg_modes[index]


class Catalog:
    """Introspected catalog snapshot with O(1) lookups by id."""

    def __init__(
        self,
        *,
        namespaces: Iterable[Namespace] = (),
        classes: Iterable[PgClass] = (),
        types: Iterable[PgType] = (),
        procedures: Iterable[PgProc] = (),
    ) -> None:
        self._namespaces = list(namespaces)
        self._classes = list(classes)
        self._types = list(types)
        self._procedures = list(procedures)
        self._namespace_index: dict[str, Namespace] = {n.id: n for n in self._namespaces}
        self._class_index: dict[str, PgClass] = {c.id: c for c in self._classes}
        self._type_index: dict[str, PgType] = {t.id: t for t in self._types}

    @property
    def namespaces(self) -> list[Namespace]:
        return list(self._namespaces)

    @property
    def classes(self) -> list[PgClass]:
        return list(self._classes)

    @property
    def types(self) -> list[PgType]:
        return list(self._types)

    @property
    def procedures(self) -> list[PgProc]:
        return list(self._procedures)

    def namespace_by_id(self, namespace_id: str) -> Namespace | None:
        return self._namespace_index.get(namespace_id)

    def class_by_id(self, class_id: str | None) -> PgClass | None:
        if class_id is None:
            return None
        return self._class_index.get(class_id)

    def type_by_id(self, type_id: str | None) -> PgType | None:
        if type_id is None:
            return None
        return self._type_index.get(type_id)

    def class_of_type(self, pg_type: PgType) -> PgClass | None:
        """Return the relation backing a composite type, if any."""
        return self.class_by_id(pg_type.class_id)

    def base_type(self, pg_type: PgType) -> PgType:
        """Unwrap domains down to their base type."""
        seen: set[str] = set()
        while pg_type.kind == "d" and pg_type.domain_base_type_id is not None:
            if pg_type.id in seen:
                break
            seen.add(pg_type.id)
            base = self.type_by_id(pg_type.domain_base_type_id)
            if base is None:
                break
            pg_type = base
        return pg_type

    def sql_type_name(self, pg_type: PgType) -> str:
        """Render a type for use in a cast (``int4``, ``"app"."color"[]``)."""
        if pg_type.is_array:
            item = self.type_by_id(pg_type.array_item_type_id)
            if item is not None:
                return f"{self.sql_type_name(item)}[]"
        if pg_type.namespace_name == PG_CATALOG_NAMESPACE:
            # Bare char means character(1); the internal one-byte type needs quotes.
            if pg_type.name == "char":
                return quote_identifier(pg_type.name)
            return pg_type.name
        return f"{quote_identifier(pg_type.namespace_name)}.{quote_identifier(pg_type.name)}"

    def __len__(self) -> int:
        return len(self._procedures)
