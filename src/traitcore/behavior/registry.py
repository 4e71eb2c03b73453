"""
Late-bound methods: a mutable registry looked up by name at call time.

Encapsulation is early-bound: a behavior captures its implementations when
it is defined, and nothing can swap them afterwards.  A ``MethodRegistry``
is the opposite.  Behaviors built with ``late_bound()`` hold only method
*names*; every call looks the name up in the registry, so reassigning an
entry changes the behavior of every receiver immediately.

Usage::

    from traitcore.behavior.registry import MethodRegistry, late_bound

    registry = MethodRegistry()
    registry.register("notify", print)

    Notifies = encapsulate(late_bound(registry, "notify"))
    ...
    registry.register("notify", send_email)   # affects existing receivers
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional

from traitcore.behavior.definition import BehaviorDefinition, Entry
from traitcore.errors import MissingImplementationError

logger = logging.getLogger(__name__)


class MethodRegistry:
    """Thread-safe mapping of method name to the current implementation."""

    def __init__(self, methods: Optional[Mapping[str, Callable[..., Any]]] = None) -> None:
        self._methods: dict[str, Callable[..., Any]] = {}
        self._lock = threading.Lock()
        for name, fn in (methods or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: Optional[Callable[..., Any]] = None):
        """Bind *name* to *fn*, replacing any previous binding.

        With *fn* omitted, returns a decorator::

            @registry.register("notify")
            def notify(message): ...
        """
        if fn is None:
            def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
                self.register(name, func)
                return func

            return decorator

        if not callable(fn):
            raise TypeError(f"Registry entry '{name}' must be callable")
        with self._lock:
            replaced = name in self._methods
            self._methods[name] = fn
        logger.debug("%s registry method '%s'", "Reassigned" if replaced else "Registered", name)
        return fn

    def unregister(self, name: str) -> None:
        with self._lock:
            self._methods.pop(name, None)

    def __getitem__(self, name: str) -> Callable[..., Any]:
        with self._lock:
            fn = self._methods.get(name)
        if fn is None:
            raise MissingImplementationError(name)
        return fn

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._methods)


def _lookup_at_call_time(registry: MethodRegistry, name: str) -> Callable[..., Any]:
    def method(context, *args, **kwargs):
        return registry[name](*args, **kwargs)

    method.__name__ = name
    method.__qualname__ = name
    return method


def late_bound(
    registry: MethodRegistry,
    *names: str,
    name: Optional[str] = None,
) -> BehaviorDefinition:
    """Definition whose methods forward to *registry* by name on every call.

    Registry functions receive only the call arguments, never the private
    context or the receiver.
    """
    entries = {
        method_name: Entry.implementation(_lookup_at_call_time(registry, method_name))
        for method_name in names
    }
    return BehaviorDefinition(entries, name or "late_bound")
