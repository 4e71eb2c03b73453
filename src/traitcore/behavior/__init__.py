"""
Behavior encapsulation and composition.

Wrap tables of methods so they run against hidden per-receiver state, then
merge several of them into one, with explicit policies for name conflicts.

Public API::

    from traitcore.behavior import (
        # Authoring
        behavior,
        requires,
        BehaviorDefinition,
        # Encapsulation and composition
        encapsulate,
        resolve,
        compose,
        Behavior,
        # Delegation chain
        ClassObjectModel,
        ObjectModel,
        is_compatible,
        # Late binding
        MethodRegistry,
        late_bound,
        # Reporting
        CompositionSummary,
        summarize,
    )
"""

from traitcore.behavior.chain import (
    ClassObjectModel,
    ObjectModel,
    default_object_model,
    is_compatible,
    narrowest_root,
)
from traitcore.behavior.compose import compose, resolve
from traitcore.behavior.context import ContextStore, PrivateContext, build_context
from traitcore.behavior.definition import (
    BehaviorDefinition,
    Entry,
    Requires,
    requires,
)
from traitcore.behavior.encapsulate import behavior, encapsulate
from traitcore.behavior.model import Behavior
from traitcore.behavior.policies import POLICIES, get_policy
from traitcore.behavior.registry import MethodRegistry, late_bound
from traitcore.behavior.summary import CompositionSummary, summarize

__all__ = [
    # Authoring
    "behavior",
    "requires",
    "Requires",
    "BehaviorDefinition",
    "Entry",
    # Encapsulation and composition
    "encapsulate",
    "resolve",
    "compose",
    "Behavior",
    "ContextStore",
    "PrivateContext",
    "build_context",
    # Policies
    "POLICIES",
    "get_policy",
    # Delegation chain
    "ClassObjectModel",
    "ObjectModel",
    "default_object_model",
    "is_compatible",
    "narrowest_root",
    # Late binding
    "MethodRegistry",
    "late_bound",
    # Reporting
    "CompositionSummary",
    "summarize",
]
