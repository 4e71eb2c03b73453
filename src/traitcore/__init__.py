"""
TraitCore - Encapsulated behaviors and conflict-aware composition.

A behavior is a table of named methods meant to be mixed into objects.
TraitCore wraps each behavior so its methods run against hidden,
per-instance private state, and composes several behaviors into one,
refusing silent name clashes unless an explicit resolution policy
(overwrite, discard, before, after, around) says how to merge them.

Example usage:
    from traitcore import behavior, compose, resolve

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

    @behavior
    class HasAwards:
        def initialize(self):
            self._awards = []
            return self

        def add_award(self, name):
            self._awards.append(name)
            return self

        def awards(self):
            return self._awards

    Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "after"}))
    singer = Singer.create_instance().initialize()
    singer.add_song("Fallen Angel").add_award("Grammy")
"""

__version__ = "0.1.0"

from traitcore.behavior import (
    Behavior,
    BehaviorDefinition,
    ClassObjectModel,
    CompositionSummary,
    MethodRegistry,
    ObjectModel,
    behavior,
    compose,
    encapsulate,
    late_bound,
    requires,
    resolve,
)
from traitcore.errors import (
    BehaviorDefinitionError,
    CompositionError,
    ConflictError,
    DependencyTypeError,
    IncompatibleChainError,
    ManifestReferenceError,
    MissingImplementationError,
    TraitCoreError,
    UnexpectedResolutionError,
    UnknownPolicyError,
)
from traitcore.types import EntryKind, Policy

__all__ = [
    "Behavior",
    "BehaviorDefinition",
    "ClassObjectModel",
    "CompositionSummary",
    "MethodRegistry",
    "ObjectModel",
    "behavior",
    "compose",
    "encapsulate",
    "late_bound",
    "requires",
    "resolve",
    "EntryKind",
    "Policy",
    # Errors
    "TraitCoreError",
    "BehaviorDefinitionError",
    "CompositionError",
    "ConflictError",
    "UnexpectedResolutionError",
    "IncompatibleChainError",
    "DependencyTypeError",
    "UnknownPolicyError",
    "MissingImplementationError",
    "ManifestReferenceError",
    "__version__",
]
