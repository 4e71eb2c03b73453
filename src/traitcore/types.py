"""
Core enums shared across TraitCore.

Using these enums instead of bare strings keeps the entry kinds and policy
tags consistent between the engine and the manifest schema.
"""

from __future__ import annotations

from enum import Enum


class EntryKind(str, Enum):
    """Kind of a named entry in a behavior definition."""

    IMPLEMENTATION = "implementation"
    DEPENDENCY = "dependency"
    RESOLUTION = "resolution"


class Policy(str, Enum):
    """Conflict resolution policy tags.

    Note that ``OVERWRITE`` keeps the existing implementation and ``DISCARD``
    keeps the incoming one.  See ``traitcore.behavior.policies``.
    """

    OVERWRITE = "overwrite"
    DISCARD = "discard"
    BEFORE = "before"
    AFTER = "after"
    AROUND = "around"
