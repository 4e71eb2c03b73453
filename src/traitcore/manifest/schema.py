"""
Pydantic v2 models for the composition manifest YAML format.

A manifest names the behaviors to compose, in order, by import path, and
the resolution directives to apply to each.  All models use
``extra="forbid"`` to reject unknown keys at parse time.

Usage::

    from traitcore.manifest.schema import CompositionManifest
    import yaml

    with open("singer.traits.yaml") as fh:
        raw = yaml.safe_load(fh)
    manifest = CompositionManifest.model_validate(raw)
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traitcore.types import Policy

_REF_PATTERN = r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$"


class ParticipantSpec(BaseModel):
    """One behavior in the composition, with optional resolutions."""

    model_config = ConfigDict(extra="forbid")

    ref: str = Field(
        ...,
        pattern=_REF_PATTERN,
        description="Import path of an encapsulated behavior, 'package.module:attr'",
    )
    resolve: dict[str, Policy] = Field(
        default_factory=dict,
        description="Method name to resolution policy",
    )
    description: Optional[str] = Field(None)


class CompositionManifest(BaseModel):
    """Root model for a composition manifest YAML file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(
        ..., min_length=1, description="Manifest schema version (e.g. 0.1.0)"
    )
    manifest_type: Literal["behavior_composition"] = Field(
        ..., description="Must be 'behavior_composition'"
    )
    name: str = Field(..., min_length=1, description="Name of the composed behavior")
    chain_root: Optional[str] = Field(
        None,
        pattern=_REF_PATTERN,
        description="Import path of the class instances must delegate to",
    )
    participants: list[ParticipantSpec] = Field(
        ..., min_length=1, description="Behaviors to compose, left to right"
    )
    description: Optional[str] = Field(None)

    @field_validator("participants")
    @classmethod
    def first_has_no_resolutions(cls, v: list[ParticipantSpec]) -> list[ParticipantSpec]:
        if v and v[0].resolve:
            raise ValueError(
                "the first participant cannot carry resolutions: there is "
                "nothing to conflict with yet"
            )
        return v
