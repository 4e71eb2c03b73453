"""Tests for late-bound methods."""

from __future__ import annotations

import pytest

from traitcore.behavior.compose import compose
from traitcore.behavior.encapsulate import behavior, encapsulate
from traitcore.behavior.registry import MethodRegistry, late_bound
from traitcore.errors import MissingImplementationError


class TestMethodRegistry:
    def test_register_and_lookup(self):
        registry = MethodRegistry({"greet": lambda who: f"hi {who}"})
        assert registry["greet"]("ada") == "hi ada"
        assert "greet" in registry
        assert registry.names() == ["greet"]

    def test_decorator_form(self):
        registry = MethodRegistry()

        @registry.register("double")
        def double(value):
            return value * 2

        assert registry["double"] is double

    def test_non_callable_rejected(self):
        with pytest.raises(TypeError, match="callable"):
            MethodRegistry().register("limit", 10)

    def test_missing_name(self):
        registry = MethodRegistry()
        with pytest.raises(MissingImplementationError):
            registry["absent"]

    def test_unregister(self):
        registry = MethodRegistry({"greet": print})
        registry.unregister("greet")
        registry.unregister("greet")
        assert "greet" not in registry


class TestLateBound:
    def test_reassignment_affects_existing_receivers(self):
        registry = MethodRegistry({"status": lambda: "idle"})
        Status = encapsulate(late_bound(registry, "status", name="Status"))
        obj = Status.create_instance()

        assert obj.status() == "idle"
        registry.register("status", lambda: "busy")
        assert obj.status() == "busy"

    def test_arguments_forwarded(self):
        registry = MethodRegistry({"add": lambda a, b: a + b})
        Adds = encapsulate(late_bound(registry, "add"))
        assert Adds.create_instance().add(2, b=3) == 5

    def test_unregistered_name_fails_at_call_time(self):
        registry = MethodRegistry()
        Pings = encapsulate(late_bound(registry, "ping", name="Pings"))
        obj = Pings.create_instance()

        with pytest.raises(MissingImplementationError):
            obj.ping()

        registry.register("ping", lambda: "pong")
        assert obj.ping() == "pong"

    def test_composes_with_early_bound_behavior(self):
        @behavior
        class Counts:
            def initialize(self):
                self._n = 0
                return self

            def bump(self):
                self._n += 1
                return self._n

        registry = MethodRegistry({"label": lambda: "counter"})
        Mixed = compose(Counts, encapsulate(late_bound(registry, "label", name="Labels")))
        obj = Mixed.create_instance().initialize()

        assert obj.bump() == 1
        assert obj.label() == "counter"
