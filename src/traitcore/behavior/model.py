"""
The ``Behavior`` value shared by encapsulated, resolved and composed behaviors.

A behavior exposes:

- ``methods``: public methods taking the receiver as first argument
- ``dependencies``: names some composition partner still has to supply
- ``resolutions``: directives attached by ``resolve()``, pending composition
- ``chain_root``: the delegation-chain root its instances must use

Behaviors are immutable once built and may be shared across threads.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from traitcore.behavior.chain import ClassObjectModel, ObjectModel, default_object_model
from traitcore.behavior.context import ContextStore, PrivateContext
from traitcore.behavior.definition import Entry


def _frozen(mapping: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, eq=False)
class Behavior:
    name: str
    methods: Mapping[str, Callable[..., Any]] = field(default_factory=_frozen)
    dependencies: tuple[str, ...] = ()
    resolutions: Mapping[str, Entry] = field(default_factory=_frozen)
    chain_root: Any = None
    contexts: Optional[ContextStore] = None
    participants: tuple[str, ...] = ()
    resolved: Mapping[str, str] = field(default_factory=_frozen)

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", _frozen(self.methods))
        object.__setattr__(self, "resolutions", _frozen(self.resolutions))
        object.__setattr__(self, "resolved", _frozen(self.resolved))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        if not self.participants:
            object.__setattr__(self, "participants", (self.name,))

    def entries(self) -> dict[str, Entry]:
        """Tagged view of every name this behavior contributes to a composition."""
        result: dict[str, Entry] = {
            key: Entry.implementation(method) for key, method in self.methods.items()
        }
        for key in self.dependencies:
            result[key] = Entry.dependency()
        result.update(self.resolutions)
        return result

    def replace(self, **changes: Any) -> "Behavior":
        return dataclasses.replace(self, **changes)

    def with_chain_root(self, chain_root: Any) -> "Behavior":
        """Copy of this behavior bound to another chain root.

        The copy shares this behavior's private contexts.
        """
        return self.replace(chain_root=chain_root)

    def context_for(self, receiver: Any) -> PrivateContext:
        """Return (creating if needed) the receiver's private context.

        Raises:
            TypeError: If this is a composed behavior; composed behaviors
                keep one context per participant, not one of their own.
        """
        if self.contexts is None:
            raise TypeError(
                f"Behavior '{self.name}' is composed and has no private context "
                f"of its own"
            )
        return self.contexts.get_or_create(receiver)

    def build_class(
        self,
        name: Optional[str] = None,
        object_model: Optional[ClassObjectModel] = None,
    ) -> type:
        model = object_model or default_object_model()
        return model.build_class(self, self.chain_root, name)

    def create_instance(self, object_model: Optional[ObjectModel] = None) -> Any:
        """Create an uninitialized instance; call ``initialize`` yourself."""
        model = object_model or default_object_model()
        return model.create_instance(self.chain_root, self)

    def __contains__(self, name: object) -> bool:
        return name in self.methods or name in self.dependencies or name in self.resolutions

    def __repr__(self) -> str:
        return (
            f"Behavior({self.name!r}, methods={sorted(self.methods)}, "
            f"dependencies={list(self.dependencies)})"
        )
