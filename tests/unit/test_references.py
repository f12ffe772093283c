"""Tests for ``spine_mysql.references``: descriptors and dependency lookup."""

from __future__ import annotations

import pytest

from spine_mysql.errors import ConfigError, ReferenceNotFoundError
from spine_mysql.references import DependencyResolver, Descriptor, References


class TestDescriptor:
    def test_from_string(self):
        descriptor = Descriptor.from_string("pip-services:connection:mysql:default:1.0")
        assert descriptor == Descriptor("pip-services", "connection", "mysql", "default", "1.0")

    def test_from_string_empty_is_none(self):
        assert Descriptor.from_string("") is None

    def test_from_string_bad_format(self):
        with pytest.raises(ConfigError) as exc_info:
            Descriptor.from_string("a:b:c", correlation_id="cid")
        assert exc_info.value.code == "BAD_DESCRIPTOR"
        assert exc_info.value.correlation_id == "cid"

    def test_wildcards_match(self):
        wanted = Descriptor("*", "connection", "mysql", "*", "1.0")
        assert wanted.match(Descriptor("pip-services", "connection", "mysql", "default", "1.0"))
        assert not wanted.match(Descriptor("pip-services", "connection", "postgres", "default", "1.0"))

    def test_match_non_descriptor(self):
        assert not Descriptor("*", "*", "*", "*", "*").match("connection")

    def test_str(self):
        assert str(Descriptor("g", "t", None, "n", "1.0")) == "g:t:*:n:1.0"


class TestReferences:
    def test_get_by_name_and_descriptor(self):
        component = object()
        refs = References.from_tuples(
            "plain", "value",
            Descriptor("g", "connection", "mysql", "default", "1.0"), component,
        )
        assert refs.get_one_optional("plain") == "value"
        assert refs.get_one_optional(Descriptor("*", "connection", "*", "*", "*")) is component

    def test_get_one_required_missing(self):
        with pytest.raises(ReferenceNotFoundError):
            References().get_one_required("missing")

    def test_put_none_rejected(self):
        with pytest.raises(ValueError):
            References().put("x", None)

    def test_remove_returns_component(self):
        refs = References.from_tuples("a", 1)
        assert refs.remove("a") == 1
        assert len(refs) == 0

    def test_get_optional_returns_all_matches(self):
        refs = References.from_tuples("a", 1, "a", 2, "b", 3)
        assert refs.get_optional("a") == [1, 2]
        assert refs.get_all() == [1, 2, 3]


class TestDependencyResolver:
    def test_descriptor_dependency(self):
        connection = object()
        resolver = DependencyResolver({"dependencies.connection": "*:connection:mysql:*:1.0"})
        resolver.set_references(
            References.from_tuples(Descriptor("pip-services", "connection", "mysql", "default", "1.0"), connection)
        )
        assert resolver.get_one_optional("connection") is connection

    def test_plain_name_dependency(self):
        resolver = DependencyResolver({"dependencies.logger": "my-logger"})
        resolver.set_references(References.from_tuples("my-logger", "L"))
        assert resolver.get_one_required("logger") == "L"

    def test_without_references(self):
        resolver = DependencyResolver()
        assert resolver.get_one_optional("connection") is None
        assert resolver.get_optional("connection") == []

    def test_required_missing_raises(self):
        resolver = DependencyResolver({"dependencies.connection": "*:connection:mysql:*:1.0"}, References())
        with pytest.raises(ReferenceNotFoundError):
            resolver.get_one_required("connection")
