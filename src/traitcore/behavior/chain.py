"""
Delegation-chain roots and the object model that creates instances.

A chain root is the shared ancestor every instance of a behavior must
delegate to; with the default ``ClassObjectModel`` it is a class, and
``None`` stands for "no particular root".  The engine never inspects roots
directly: ancestry and instance creation go through an ``ObjectModel``.

Composition may only narrow the root: a participant is accepted when its
root and the accumulated root lie on one line of descent, and the
accumulated root then becomes the more specialized of the two.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

from traitcore.errors import MissingImplementationError

if TYPE_CHECKING:
    from traitcore.behavior.model import Behavior

logger = logging.getLogger(__name__)

MISSING = object()


@runtime_checkable
class ObjectModel(Protocol):
    """Delegation-chain operations the composition engine depends on."""

    def create_instance(self, chain_root: Any, behavior: "Behavior") -> Any:
        """Create an instance that delegates to *chain_root* and exposes *behavior*."""
        ...

    def is_descendant_or_same(self, a: Any, b: Any) -> bool:
        """True if root *a* is *b* or lies further down *b*'s chain."""
        ...

    def lookup(self, root: Any, name: str) -> Any:
        """Return the attribute *name* inherited from *root*, or ``MISSING``."""
        ...


def _missing_method(name: str):
    def missing(receiver, *args, **kwargs):
        raise MissingImplementationError(name)

    missing.__name__ = name
    missing.__qualname__ = name
    return missing


class ClassObjectModel:
    """Object model where chain roots are classes.

    ``create_instance`` builds (once per behavior and root) a subclass of the
    root holding the behavior's public methods, plus stubs raising
    ``MissingImplementationError`` for dependencies nothing satisfies.
    Instances are created with ``cls.__new__(cls)``; calling ``initialize``
    is left to the caller.
    """

    def __init__(self) -> None:
        self._classes: "weakref.WeakKeyDictionary[Behavior, dict[tuple, type]]" = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def is_descendant_or_same(self, a: Any, b: Any) -> bool:
        if b is None or a is b:
            return True
        if a is None:
            return False
        return isinstance(a, type) and isinstance(b, type) and issubclass(a, b)

    def lookup(self, root: Any, name: str) -> Any:
        if root is None:
            return MISSING
        return getattr(root, name, MISSING)

    def build_class(
        self,
        behavior: "Behavior",
        chain_root: Any = MISSING,
        name: Optional[str] = None,
    ) -> type:
        """Return the class exposing *behavior* on top of *chain_root*."""
        root = behavior.chain_root if chain_root is MISSING else chain_root
        with self._lock:
            built = self._classes.setdefault(behavior, {})
            cls = built.get((root, name))
            if cls is None:
                cls = self._make_class(behavior, root, name)
                built[(root, name)] = cls
        return cls

    def _make_class(self, behavior: "Behavior", root: Any, name: Optional[str]) -> type:
        class_name = name or behavior.name.replace("+", "_")
        namespace: dict[str, Any] = {
            "__module__": __name__,
            "__qualname__": class_name,
            "__doc__": f"Instances exposing the '{behavior.name}' behavior.",
        }
        namespace.update(behavior.methods)
        for dependency in behavior.dependencies:
            if self.lookup(root, dependency) is MISSING:
                namespace[dependency] = _missing_method(dependency)

        bases = (root,) if root is not None else (object,)
        logger.debug(
            "Building class %s for behavior %s (root=%s)",
            class_name,
            behavior.name,
            getattr(root, "__name__", None),
        )
        return type(class_name, bases, namespace)

    def create_instance(self, chain_root: Any, behavior: "Behavior") -> Any:
        cls = self.build_class(behavior, chain_root)
        return cls.__new__(cls)


_default_model: Optional[ClassObjectModel] = None
_default_lock = threading.Lock()


def default_object_model() -> ClassObjectModel:
    """Return the shared ``ClassObjectModel``."""
    global _default_model
    with _default_lock:
        if _default_model is None:
            _default_model = ClassObjectModel()
        return _default_model


def is_compatible(
    candidate_root: Any,
    accumulated_root: Any,
    object_model: Optional[ObjectModel] = None,
) -> bool:
    """Decide whether *candidate_root* can join a composition rooted at *accumulated_root*.

    ``None`` on either side is permissive; otherwise the two roots must be
    identical or one must descend from the other.  Siblings are rejected.
    """
    if accumulated_root is None or candidate_root is None:
        return True
    if candidate_root is accumulated_root:
        return True
    model = object_model or default_object_model()
    return model.is_descendant_or_same(
        accumulated_root, candidate_root
    ) or model.is_descendant_or_same(candidate_root, accumulated_root)


def narrowest_root(
    candidate_root: Any,
    accumulated_root: Any,
    object_model: Optional[ObjectModel] = None,
) -> Any:
    """Return the more specialized of two compatible roots."""
    if accumulated_root is None:
        return candidate_root
    if candidate_root is None:
        return accumulated_root
    model = object_model or default_object_model()
    if model.is_descendant_or_same(candidate_root, accumulated_root):
        return candidate_root
    return accumulated_root
