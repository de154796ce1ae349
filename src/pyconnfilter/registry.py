"""Append-checked registries for synthesized filter types, fields, and resolvers."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from graphql import GraphQLInputField, GraphQLInputObjectType, GraphQLInputType

from pyconnfilter._errors import (
    ERR_MSG_REGISTRY_FROZEN,
    DuplicateFieldError,
    RegistryFrozenError,
    ResolverConflictError,
    TypeConflictError,
)

Resolver = Callable[..., Any]
"""A field-level or operator-level resolver returning a SQL fragment or None."""


@dataclass(frozen=True)
class FilterFieldDefinition:
    """A field registered on a filter input type."""

    name: str
    description: str
    type: GraphQLInputType
    is_filter_field: bool = True


class FilterRegistry:
    """Type, field, and resolver maps built during one synthesis pass.

    Every map is insert-or-reuse: registering an entry equal to the existing
    one is a no-op, registering a different entry under a taken key raises a
    :class:`~pyconnfilter._errors.RegistryConflictError`. After
    :meth:`freeze` the registry is read-only.
    """

    def __init__(self) -> None:
        self._types: dict[str, tuple[Hashable, GraphQLInputType]] = {}
        self._fields: dict[str, dict[str, FilterFieldDefinition]] = {}
        self._resolvers: dict[tuple[str, str], Resolver] = {}
        self._filter_types: dict[str, GraphQLInputObjectType] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _check_writable(self, what: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                ERR_MSG_REGISTRY_FROZEN,
                f"cannot register {what} after the registry was frozen",
            )

    # --- Types ---

    def register_type(
        self,
        name: str,
        shape: Hashable,
        factory: Callable[[], GraphQLInputType],
    ) -> GraphQLInputType:
        """Return the type registered under ``name``, creating it if needed.

        ``shape`` is the structural identity of the type; reusing a name with
        a different shape is a configuration error.
        """
        existing = self._types.get(name)
        if existing is not None:
            existing_shape, existing_type = existing
            if existing_shape != shape:
                raise TypeConflictError(
                    f"conflicting definitions for type {name}",
                    f"type {name!r} registered with shape {existing_shape!r}, got {shape!r}",
                )
            return existing_type
        self._check_writable(f"type {name!r}")
        created = factory()
        self._types[name] = (shape, created)
        return created

    def get_type(self, name: str) -> GraphQLInputType | None:
        entry = self._types.get(name)
        return entry[1] if entry is not None else None

    def type_names(self) -> list[str]:
        return list(self._types)

    # --- Fields ---

    def register_field(self, filter_type_name: str, definition: FilterFieldDefinition) -> None:
        fields = self._fields.get(filter_type_name, {})
        existing = fields.get(definition.name)
        if existing is not None:
            if existing != definition:
                raise DuplicateFieldError(
                    f"duplicate filter field {definition.name}",
                    f"field {definition.name!r} already registered on {filter_type_name!r}",
                )
            return
        self._check_writable(f"field {filter_type_name}.{definition.name}")
        self._fields.setdefault(filter_type_name, {})[definition.name] = definition

    def fields_for(self, filter_type_name: str) -> dict[str, FilterFieldDefinition]:
        return dict(self._fields.get(filter_type_name, {}))

    # --- Resolvers ---

    def register_resolver(self, type_name: str, field_name: str, resolver: Resolver) -> None:
        key = (type_name, field_name)
        existing = self._resolvers.get(key)
        if existing is not None:
            if existing != resolver:
                raise ResolverConflictError(
                    f"conflicting resolvers for {type_name}.{field_name}",
                    f"resolver for {key!r} already registered as {existing!r}",
                )
            return
        self._check_writable(f"resolver {type_name}.{field_name}")
        self._resolvers[key] = resolver

    def get_resolver(self, type_name: str, field_name: str) -> Resolver | None:
        return self._resolvers.get((type_name, field_name))

    # --- Materialization ---

    def filter_input_type(self, name: str, description: str | None = None) -> GraphQLInputObjectType:
        """Materialize a filter input type from its registered fields.

        Fields are read lazily, so fields registered after this call still
        appear on the type.
        """
        existing = self._filter_types.get(name)
        if existing is not None:
            return existing

        def fields() -> dict[str, GraphQLInputField]:
            return {
                field_name: GraphQLInputField(definition.type, description=definition.description)
                for field_name, definition in self._fields.get(name, {}).items()
            }

        created = GraphQLInputObjectType(name, fields, description=description)
        self._filter_types[name] = created
        return created
