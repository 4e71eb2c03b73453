"""
Composition engine: fold encapsulated behaviors into one.

``compose(a, b, c)`` seeds an accumulator from ``a`` and folds ``b`` then
``c`` into it.  For each participant, in order:

1. its chain root must be compatible with the accumulated root
   (``IncompatibleChainError``);
2. each implementation is installed; a name already implemented is a
   ``ConflictError``, a name only declared as a dependency is satisfied;
3. each dependency is carried forward unless something callable already
   provides it (``DependencyTypeError`` for anything non-callable);
4. each resolution replaces the existing implementation with
   ``policy(incoming, existing)``; resolving a name with no conflict is an
   ``UnexpectedResolutionError``, an unknown tag an ``UnknownPolicyError``.

Dependencies still outstanding after the fold may be satisfied by a
callable inherited from the final chain root.

Composition is all-or-nothing: the accumulator is private to the call,
inputs are never mutated, and any failure raises with no partial result.

Usage::

    from traitcore.behavior import compose, resolve

    Singer = compose(SingsSongs, resolve(HasAwards, {"initialize": "after"}))
    singer = Singer.create_instance()
    singer.initialize()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from traitcore.behavior.chain import (
    MISSING,
    ObjectModel,
    default_object_model,
    is_compatible,
    narrowest_root,
)
from traitcore.behavior.definition import Entry
from traitcore.behavior.model import Behavior
from traitcore.behavior.otel import emit_composition_result
from traitcore.behavior.policies import get_policy, policy_tag
from traitcore.behavior.summary import CompositionSummary, root_name, summarize
from traitcore.errors import (
    BehaviorDefinitionError,
    CompositionError,
    ConflictError,
    DependencyTypeError,
    IncompatibleChainError,
    UnexpectedResolutionError,
)
from traitcore.types import Policy

logger = logging.getLogger(__name__)


def resolve(
    behavior: Behavior,
    directives: Mapping[str, Union[str, Policy]],
) -> Behavior:
    """Return a copy of *behavior* with some methods tagged for resolution.

    The original behavior is left untouched; the copy shares its private
    contexts.  Policy tags are checked when the copy is composed.

    Raises:
        BehaviorDefinitionError: If a name is not a public method of *behavior*.
    """
    methods = dict(behavior.methods)
    resolutions = dict(behavior.resolutions)

    for name, policy in directives.items():
        if name in methods:
            fn = methods.pop(name)
        elif name in resolutions:
            fn = resolutions[name].value
        else:
            raise BehaviorDefinitionError(
                f"Cannot resolve '{name}': behavior '{behavior.name}' does not "
                f"implement it",
                name,
            )
        resolutions[name] = Entry.resolution(policy_tag(policy), fn)

    return behavior.replace(methods=methods, resolutions=resolutions)


@dataclass
class _Accumulator:
    object_model: ObjectModel
    methods: dict[str, Callable[..., Any]] = field(default_factory=dict)
    dependencies: list[str] = field(default_factory=list)
    origins: dict[str, str] = field(default_factory=dict)
    resolved: dict[str, str] = field(default_factory=dict)
    participants: list[str] = field(default_factory=list)
    chain_root: Any = None

    def seed(self, first: Behavior) -> None:
        if first.resolutions:
            name, entry = next(iter(first.resolutions.items()))
            raise UnexpectedResolutionError(name, entry.policy)
        self.methods.update(first.methods)
        self.dependencies.extend(first.dependencies)
        self.origins.update({key: first.name for key in first.methods})
        self.participants.append(first.name)
        self.chain_root = first.chain_root

    def fold(self, participant: Behavior) -> None:
        self._fold_chain_root(participant)
        for name, method in participant.methods.items():
            self._install(name, method, participant.name)
        for name in participant.dependencies:
            self._carry_dependency(name)
        for name, entry in participant.resolutions.items():
            self._apply_resolution(name, entry, participant.name)
        self.participants.append(participant.name)

    def _fold_chain_root(self, participant: Behavior) -> None:
        if not is_compatible(participant.chain_root, self.chain_root, self.object_model):
            raise IncompatibleChainError(
                participant.chain_root, self.chain_root, participant.name
            )
        self.chain_root = narrowest_root(
            participant.chain_root, self.chain_root, self.object_model
        )

    def _install(self, name: str, method: Callable[..., Any], origin: str) -> None:
        if name in self.methods:
            raise ConflictError(name, self.origins.get(name), origin)
        if name in self.dependencies:
            self.dependencies.remove(name)
        self.methods[name] = method
        self.origins[name] = origin

    def _carry_dependency(self, name: str) -> None:
        if name in self.methods:
            existing = self.methods[name]
            if not callable(existing):
                raise DependencyTypeError(name, existing)
            return
        if name not in self.dependencies:
            self.dependencies.append(name)

    def _apply_resolution(self, name: str, entry: Entry, origin: str) -> None:
        existing = self.methods.get(name)
        if existing is None:
            raise UnexpectedResolutionError(name, entry.policy)
        policy = get_policy(entry.policy, name)
        self.methods[name] = policy(entry.value, existing)
        self.origins[name] = f"{self.origins.get(name)}+{origin}"
        self.resolved[name] = entry.policy
        logger.debug(
            "Resolved conflict on '%s' with policy %s (%s)",
            name,
            entry.policy,
            self.origins[name],
        )

    def settle_dependencies(self) -> None:
        """Let the chain root satisfy dependencies nothing else implements."""
        for name in list(self.dependencies):
            inherited = self.object_model.lookup(self.chain_root, name)
            if inherited is MISSING:
                continue
            if not callable(inherited):
                raise DependencyTypeError(name, inherited)
            self.dependencies.remove(name)
            logger.debug(
                "Dependency '%s' satisfied by chain root %s",
                name,
                root_name(self.chain_root),
            )

    def build(self, name: Optional[str]) -> Behavior:
        return Behavior(
            name=name or "+".join(self.participants),
            methods=self.methods,
            dependencies=tuple(self.dependencies),
            chain_root=self.chain_root,
            participants=tuple(self.participants),
            resolved=self.resolved,
        )


def _participant_list(participants: tuple[Any, ...]) -> list[Behavior]:
    if len(participants) == 1 and isinstance(participants[0], (list, tuple)):
        participants = tuple(participants[0])
    if not participants:
        raise ValueError("compose() requires at least one behavior")
    for participant in participants:
        if not isinstance(participant, Behavior):
            raise TypeError(
                f"compose() expects encapsulated behaviors, "
                f"got {type(participant).__name__}"
            )
    return list(participants)


def compose(
    *participants: Union[Behavior, Iterable[Behavior]],
    name: Optional[str] = None,
    object_model: Optional[ObjectModel] = None,
) -> Behavior:
    """Compose behaviors left to right into a single behavior.

    Args:
        *participants: Encapsulated (optionally resolved) behaviors, or a
            single list of them.
        name: Display name for the result; defaults to ``"A+B+..."``.
        object_model: Object model used for chain-root checks.

    Returns:
        The composed ``Behavior``.

    Raises:
        ConflictError, UnexpectedResolutionError, IncompatibleChainError,
        DependencyTypeError, UnknownPolicyError: see ``traitcore.errors``.
    """
    behaviors = _participant_list(participants)
    accumulator = _Accumulator(object_model or default_object_model())
    display_name = name or "+".join(b.name for b in behaviors)

    try:
        accumulator.seed(behaviors[0])
        for participant in behaviors[1:]:
            accumulator.fold(participant)
        accumulator.settle_dependencies()
    except CompositionError as exc:
        logger.warning("Composition of %s failed: %s", display_name, exc)
        emit_composition_result(
            CompositionSummary(
                name=display_name,
                passed=False,
                participants=[b.name for b in behaviors],
                error=exc.to_dict(),
            )
        )
        raise

    composed = accumulator.build(name)
    emit_composition_result(summarize(composed))
    return composed
