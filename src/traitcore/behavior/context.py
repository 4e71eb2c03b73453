"""
Private contexts: the hidden per-receiver scope encapsulated methods run in.

A ``PrivateContext`` holds whatever state method bodies assign to it.  For
each declared dependency it also carries a forwarding method that calls the
receiver's public method of the same name.  When that method returns the
receiver itself, the forwarder returns the context instead, so fluent
chains stay inside the private scope.

``ContextStore`` associates contexts with receivers by identity.  There is
one store per encapsulated behavior, so two behaviors composed onto the same
receiver never see each other's private state.  Entries are dropped when the
receiver is garbage-collected.
"""

from __future__ import annotations

import logging
import threading
import types
import weakref
from typing import Any, Callable, Iterable, Mapping, Optional

from traitcore.behavior.otel import emit_context_created
from traitcore.errors import MissingImplementationError

logger = logging.getLogger(__name__)


class PrivateContext:
    """Execution scope for encapsulated method bodies."""

    def __repr__(self) -> str:
        return f"<PrivateContext at {id(self):#x}>"


def _forwarder(
    name: str,
    receiver_ref: "weakref.ReferenceType[Any]",
    context: PrivateContext,
) -> Callable[..., Any]:
    def forward(*args: Any, **kwargs: Any) -> Any:
        receiver = receiver_ref()
        if receiver is None:
            raise ReferenceError(f"Receiver for dependency '{name}' no longer exists")
        method = getattr(receiver, name, None)
        if not callable(method):
            raise MissingImplementationError(name)
        result = method(*args, **kwargs)
        if result is receiver:
            return context
        return result

    forward.__name__ = name
    return forward


def build_context(
    receiver: Any,
    dependency_names: Iterable[str],
    private_methods: Optional[Mapping[str, Callable[..., Any]]] = None,
) -> PrivateContext:
    """Build a fresh private context for *receiver*.

    The context keeps only a weak reference to the receiver.

    Raises:
        TypeError: If the receiver does not support weak references.
    """
    try:
        receiver_ref = weakref.ref(receiver)
    except TypeError:
        raise TypeError(
            f"{type(receiver).__name__} instances cannot hold private state: "
            f"the type does not support weak references"
        ) from None

    context = PrivateContext()
    for name in dependency_names:
        setattr(context, name, _forwarder(name, receiver_ref, context))
    for name, fn in (private_methods or {}).items():
        setattr(context, name, types.MethodType(fn, context))
    return context


class ContextStore:
    """At-most-once cache of private contexts, keyed by receiver identity."""

    def __init__(
        self,
        owner: str,
        dependency_names: Iterable[str] = (),
        private_methods: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> None:
        self.owner = owner
        self._dependency_names = tuple(dependency_names)
        self._private_methods = dict(private_methods or {})
        self._contexts: dict[int, PrivateContext] = {}
        self._lock = threading.Lock()

    def get_or_create(self, receiver: Any) -> PrivateContext:
        key = id(receiver)
        context = self._contexts.get(key)
        if context is not None:
            return context

        with self._lock:
            context = self._contexts.get(key)
            if context is None:
                context = build_context(
                    receiver, self._dependency_names, self._private_methods
                )
                weakref.finalize(receiver, self._contexts.pop, key, None)
                self._contexts[key] = context
                logger.debug(
                    "Created private context: behavior=%s receiver=%s",
                    self.owner,
                    type(receiver).__name__,
                )
                emit_context_created(self.owner)
        return context

    def get(self, receiver: Any) -> Optional[PrivateContext]:
        """Return the receiver's context without creating one."""
        return self._contexts.get(id(receiver))

    def __contains__(self, receiver: object) -> bool:
        return id(receiver) in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)
