"""
Behavior definitions: named tables of methods, tagged by kind.

Every entry is classified once, where the definition is authored:

- a callable becomes an ``IMPLEMENTATION``
- a ``requires()`` marker becomes a ``DEPENDENCY`` (some composition
  partner must supply it)
- ``RESOLUTION`` entries are only ever produced by ``resolve()``

Anything else is rejected with ``BehaviorDefinitionError``.

Names with a single leading underscore are private helpers: they are bound
onto the private context but never published on the receiver.

Usage::

    from traitcore.behavior.definition import BehaviorDefinition, requires

    definition = BehaviorDefinition.from_mapping({
        "initialize": lambda self: self,
        "refresh": requires(),
    })
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterator, Optional

from traitcore.errors import BehaviorDefinitionError
from traitcore.types import EntryKind


class Requires:
    """Marker for a method a behavior depends on but does not implement."""

    __slots__ = ("doc",)

    def __init__(self, doc: Optional[str] = None) -> None:
        self.doc = doc

    def __repr__(self) -> str:
        return "requires()"


def requires(doc: Optional[str] = None) -> Requires:
    """Declare a dependency on a method supplied by another behavior."""
    return Requires(doc)


@dataclass(frozen=True)
class Entry:
    """A single tagged entry of a behavior definition."""

    kind: EntryKind
    value: Optional[Callable[..., Any]] = None
    policy: Optional[str] = None

    @classmethod
    def implementation(cls, fn: Callable[..., Any]) -> "Entry":
        return cls(EntryKind.IMPLEMENTATION, fn)

    @classmethod
    def dependency(cls) -> "Entry":
        return cls(EntryKind.DEPENDENCY)

    @classmethod
    def resolution(cls, policy: str, fn: Callable[..., Any]) -> "Entry":
        return cls(EntryKind.RESOLUTION, fn, policy)


def is_private(name: str) -> bool:
    return name.startswith("_") and not is_dunder(name)


def is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def classify(name: str, value: Any) -> Entry:
    """Tag a raw value as an implementation or a dependency.

    Raises:
        BehaviorDefinitionError: For resolution entries, descriptors that do
            not take the private context as first argument, private
            dependencies, and non-callable values.
    """
    if isinstance(value, Entry):
        if value.kind is EntryKind.RESOLUTION:
            raise BehaviorDefinitionError(
                f"'{name}' is a resolution entry; resolutions are created "
                f"with resolve()",
                name,
            )
        entry = value
    elif isinstance(value, Requires):
        entry = Entry.dependency()
    elif isinstance(value, (staticmethod, classmethod, property)):
        raise BehaviorDefinitionError(
            f"'{name}' is a {type(value).__name__}; behavior methods must be "
            f"plain functions taking the private context first",
            name,
        )
    elif callable(value):
        entry = Entry.implementation(value)
    else:
        raise BehaviorDefinitionError(
            f"'{name}' must be a callable or requires(), "
            f"got {type(value).__name__}",
            name,
        )

    if entry.kind is EntryKind.DEPENDENCY and is_private(name):
        raise BehaviorDefinitionError(
            f"Dependency '{name}' cannot be private", name
        )
    return entry


class BehaviorDefinition(Mapping):
    """Immutable mapping of method name to tagged ``Entry``."""

    def __init__(self, entries: Mapping[str, Entry], name: Optional[str] = None) -> None:
        self._entries = MappingProxyType(dict(entries))
        self.name = name or "behavior"

    @classmethod
    def from_mapping(
        cls,
        methods: Mapping[str, Any],
        name: Optional[str] = None,
    ) -> "BehaviorDefinition":
        entries = {key: classify(key, value) for key, value in methods.items()}
        return cls(entries, name)

    @classmethod
    def from_class(cls, klass: type) -> "BehaviorDefinition":
        """Build a definition from a class body.

        Dunder attributes (``__module__``, ``__doc__`` and so on) are skipped;
        base classes are not consulted.
        """
        methods = {
            key: value for key, value in vars(klass).items() if not is_dunder(key)
        }
        return cls.from_mapping(methods, klass.__name__)

    def __getitem__(self, key: str) -> Entry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def names_of(self, kind: EntryKind) -> list[str]:
        return [key for key, entry in self._entries.items() if entry.kind is kind]

    @property
    def public_methods(self) -> dict[str, Callable[..., Any]]:
        return {
            key: entry.value
            for key, entry in self._entries.items()
            if entry.kind is EntryKind.IMPLEMENTATION and not is_private(key)
        }

    @property
    def private_methods(self) -> dict[str, Callable[..., Any]]:
        return {
            key: entry.value
            for key, entry in self._entries.items()
            if entry.kind is EntryKind.IMPLEMENTATION and is_private(key)
        }

    @property
    def dependencies(self) -> list[str]:
        return self.names_of(EntryKind.DEPENDENCY)

    def __repr__(self) -> str:
        return f"BehaviorDefinition({self.name!r}, {list(self._entries)})"
