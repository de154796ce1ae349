"""Filter registry tests."""

import pytest
from graphql import GraphQLInputObjectType, GraphQLInt, GraphQLString

from pyconnfilter._errors import (
    DuplicateFieldError,
    RegistryFrozenError,
    ResolverConflictError,
    TypeConflictError,
)
from pyconnfilter.registry import FilterFieldDefinition


def _input_type(name):
    return GraphQLInputObjectType(name, {})


def _resolve_a(*args):
    return "a"


def _resolve_b(*args):
    return "b"


class TestTypes:
    def test_register_creates_once(self, registry):
        calls = []

        def factory():
            calls.append(1)
            return _input_type("IntFilter")

        first = registry.register_type("IntFilter", ("operators", "Int"), factory)
        second = registry.register_type("IntFilter", ("operators", "Int"), factory)
        assert first is second
        assert len(calls) == 1
        assert registry.get_type("IntFilter") is first

    def test_shape_conflict(self, registry):
        registry.register_type("IntFilter", ("operators", "Int"), lambda: _input_type("IntFilter"))
        with pytest.raises(TypeConflictError, match="conflicting definitions for type IntFilter"):
            registry.register_type("IntFilter", ("operators", "String"), lambda: _input_type("IntFilter"))

    def test_unknown_type(self, registry):
        assert registry.get_type("Nope") is None

    def test_type_names_in_registration_order(self, registry):
        registry.register_type("B", "b", lambda: _input_type("B"))
        registry.register_type("A", "a", lambda: _input_type("A"))
        assert registry.type_names() == ["B", "A"]


class TestFields:
    def test_register_and_read(self, registry):
        definition = FilterFieldDefinition("fullName", "desc", GraphQLString)
        registry.register_field("PostFilter", definition)
        assert registry.fields_for("PostFilter") == {"fullName": definition}

    def test_equal_redefinition_is_noop(self, registry):
        registry.register_field("PostFilter", FilterFieldDefinition("fullName", "desc", GraphQLString))
        registry.register_field("PostFilter", FilterFieldDefinition("fullName", "desc", GraphQLString))
        assert len(registry.fields_for("PostFilter")) == 1

    def test_different_redefinition_raises(self, registry):
        registry.register_field("PostFilter", FilterFieldDefinition("fullName", "desc", GraphQLString))
        with pytest.raises(DuplicateFieldError):
            registry.register_field("PostFilter", FilterFieldDefinition("fullName", "desc", GraphQLInt))

    def test_same_name_on_other_type(self, registry):
        registry.register_field("PostFilter", FilterFieldDefinition("name", "d", GraphQLString))
        registry.register_field("UserFilter", FilterFieldDefinition("name", "d", GraphQLInt))
        assert registry.fields_for("UserFilter")["name"].type is GraphQLInt

    def test_fields_for_returns_copy(self, registry):
        registry.register_field("PostFilter", FilterFieldDefinition("x", "d", GraphQLInt))
        registry.fields_for("PostFilter").clear()
        assert "x" in registry.fields_for("PostFilter")


class TestResolvers:
    def test_register_and_get(self, registry):
        registry.register_resolver("IntFilter", "equalTo", _resolve_a)
        assert registry.get_resolver("IntFilter", "equalTo") is _resolve_a
        assert registry.get_resolver("IntFilter", "lessThan") is None

    def test_same_resolver_is_noop(self, registry):
        registry.register_resolver("IntFilter", "equalTo", _resolve_a)
        registry.register_resolver("IntFilter", "equalTo", _resolve_a)

    def test_conflicting_resolver(self, registry):
        registry.register_resolver("IntFilter", "equalTo", _resolve_a)
        with pytest.raises(ResolverConflictError):
            registry.register_resolver("IntFilter", "equalTo", _resolve_b)


class TestFreeze:
    def test_new_entries_rejected(self, registry):
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register_type("IntFilter", "x", lambda: _input_type("IntFilter"))
        with pytest.raises(RegistryFrozenError):
            registry.register_field("PostFilter", FilterFieldDefinition("x", "d", GraphQLInt))
        with pytest.raises(RegistryFrozenError):
            registry.register_resolver("IntFilter", "equalTo", _resolve_a)

    def test_existing_entries_readable(self, registry):
        created = registry.register_type("IntFilter", "x", lambda: _input_type("IntFilter"))
        registry.register_resolver("IntFilter", "equalTo", _resolve_a)
        registry.freeze()
        assert registry.register_type("IntFilter", "x", lambda: _input_type("IntFilter")) is created
        assert registry.get_resolver("IntFilter", "equalTo") is _resolve_a


class TestFilterInputType:
    def test_fields_are_lazy(self, registry):
        post_filter = registry.filter_input_type("PostFilter", description="Post filter.")
        registry.register_field("PostFilter", FilterFieldDefinition("fullName", "By name.", GraphQLString))
        assert post_filter.description == "Post filter."
        assert list(post_filter.fields) == ["fullName"]
        assert post_filter.fields["fullName"].description == "By name."

    def test_materialized_once(self, registry):
        assert registry.filter_input_type("PostFilter") is registry.filter_input_type("PostFilter")
