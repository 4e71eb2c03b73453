"""Tests for behavior definitions and entry classification."""

from __future__ import annotations

import pytest

from traitcore.behavior.definition import (
    BehaviorDefinition,
    Entry,
    classify,
    requires,
)
from traitcore.errors import BehaviorDefinitionError
from traitcore.types import EntryKind


class TestClassify:
    def test_callable_is_implementation(self):
        fn = lambda self: None  # noqa: E731
        entry = classify("go", fn)
        assert entry.kind is EntryKind.IMPLEMENTATION
        assert entry.value is fn

    def test_requires_is_dependency(self):
        entry = classify("refresh", requires("reload data"))
        assert entry == Entry.dependency()

    def test_non_callable_rejected(self):
        with pytest.raises(BehaviorDefinitionError) as exc_info:
            classify("limit", 10)
        assert exc_info.value.method_name == "limit"
        assert isinstance(exc_info.value, TypeError)

    @pytest.mark.parametrize("wrapper", [staticmethod, classmethod])
    def test_descriptors_rejected(self, wrapper):
        with pytest.raises(BehaviorDefinitionError, match=wrapper.__name__):
            classify("go", wrapper(lambda *a: None))

    def test_property_rejected(self):
        with pytest.raises(BehaviorDefinitionError, match="property"):
            classify("size", property(lambda self: 1))

    def test_resolution_entry_rejected(self):
        with pytest.raises(BehaviorDefinitionError, match="resolve"):
            classify("go", Entry.resolution("before", lambda self: None))

    def test_private_dependency_rejected(self):
        with pytest.raises(BehaviorDefinitionError, match="private"):
            classify("_helper", requires())


class TestBehaviorDefinition:
    def test_from_mapping_splits_kinds(self):
        definition = BehaviorDefinition.from_mapping(
            {
                "initialize": lambda self: self,
                "_tidy": lambda self: None,
                "refresh": requires(),
            },
            name="Example",
        )
        assert definition.name == "Example"
        assert sorted(definition) == ["_tidy", "initialize", "refresh"]
        assert list(definition.public_methods) == ["initialize"]
        assert list(definition.private_methods) == ["_tidy"]
        assert definition.dependencies == ["refresh"]

    def test_from_class_skips_dunders(self):
        class Greets:
            """Says hello."""

            greeting = requires()

            def greet(self, name):
                return f"{self.greeting()} {name}"

        definition = BehaviorDefinition.from_class(Greets)
        assert definition.name == "Greets"
        assert sorted(definition) == ["greet", "greeting"]

    def test_definition_is_read_only(self):
        definition = BehaviorDefinition.from_mapping({"go": lambda self: None})
        with pytest.raises(TypeError):
            definition._entries["stop"] = Entry.dependency()

    def test_default_name(self):
        assert BehaviorDefinition({}).name == "behavior"
