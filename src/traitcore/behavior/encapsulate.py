"""
Encapsulation: publish a behavior's methods while hiding its state.

``encapsulate()`` turns a ``BehaviorDefinition`` into a ``Behavior`` whose
public methods, called on a receiver, run the original implementation
against that receiver's private context instead of the receiver itself.
An implementation that returns its context is seen by callers as returning
the receiver, so fluent ``return self`` chains keep working across the
boundary.

Usage::

    from traitcore.behavior import behavior

    @behavior
    class SingsSongs:
        def initialize(self):
            self._songs = []
            return self

        def add_song(self, name):
            self._songs.append(name)
            return self

        def songs(self):
            return self._songs
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Mapping, Optional, Union, overload

from traitcore.behavior.context import ContextStore
from traitcore.behavior.definition import BehaviorDefinition
from traitcore.behavior.model import Behavior
from traitcore.errors import BehaviorDefinitionError
from traitcore.types import EntryKind

logger = logging.getLogger(__name__)

DefinitionLike = Union[BehaviorDefinition, Mapping[str, Any]]


def _public_method(impl: Callable[..., Any], contexts: ContextStore) -> Callable[..., Any]:
    @functools.wraps(impl)
    def method(receiver, *args, **kwargs):
        context = contexts.get_or_create(receiver)
        result = impl(context, *args, **kwargs)
        if result is context:
            return receiver
        return result

    return method


def encapsulate(
    definition: DefinitionLike,
    chain_root: Any = None,
    name: Optional[str] = None,
) -> Behavior:
    """Wrap a behavior definition so its methods run in private contexts.

    Args:
        definition: A ``BehaviorDefinition`` or a plain mapping of
            name to callable / ``requires()``.
        chain_root: Delegation-chain root for instances (a class or None).
        name: Display name; defaults to the definition's name.

    Returns:
        An encapsulated ``Behavior`` owning its own ``ContextStore``.
    """
    if not isinstance(definition, BehaviorDefinition):
        definition = BehaviorDefinition.from_mapping(definition, name)

    resolutions = definition.names_of(EntryKind.RESOLUTION)
    if resolutions:
        raise BehaviorDefinitionError(
            f"Cannot encapsulate resolution entries {resolutions}; "
            f"apply resolve() to the encapsulated behavior instead",
            resolutions[0],
        )

    behavior_name = name or definition.name
    dependencies = definition.dependencies
    contexts = ContextStore(
        behavior_name,
        dependency_names=dependencies,
        private_methods=definition.private_methods,
    )
    methods = {
        key: _public_method(impl, contexts)
        for key, impl in definition.public_methods.items()
    }

    logger.debug(
        "Encapsulated behavior %s: methods=%s dependencies=%s private=%s",
        behavior_name,
        sorted(methods),
        dependencies,
        sorted(definition.private_methods),
    )
    return Behavior(
        name=behavior_name,
        methods=methods,
        dependencies=tuple(dependencies),
        chain_root=chain_root,
        contexts=contexts,
    )


@overload
def behavior(klass: type) -> Behavior: ...


@overload
def behavior(
    *, chain_root: Any = None, name: Optional[str] = None
) -> Callable[[type], Behavior]: ...


def behavior(klass=None, *, chain_root=None, name=None):
    """Class decorator: author a behavior as a class body and encapsulate it.

    The decorated name is bound to the resulting ``Behavior``, not to a
    class.  Use as ``@behavior`` or ``@behavior(chain_root=Base)``.
    """

    def wrap(cls: type) -> Behavior:
        return encapsulate(BehaviorDefinition.from_class(cls), chain_root, name)

    if klass is None:
        return wrap
    return wrap(klass)
