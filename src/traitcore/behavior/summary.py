"""Result model describing a composed (or failed) behavior."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from traitcore.behavior.model import Behavior


def root_name(root: Any) -> Optional[str]:
    if root is None:
        return None
    module = getattr(root, "__module__", None)
    qualname = getattr(root, "__qualname__", None)
    if module and qualname:
        return f"{module}:{qualname}"
    return repr(root)


class CompositionSummary(BaseModel):
    """Outcome of a ``compose()`` call, suitable for logs and reports."""

    model_config = ConfigDict(extra="forbid")

    name: str
    passed: bool
    participants: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    resolved: dict[str, str] = Field(
        default_factory=dict, description="Method name to the policy that resolved it"
    )
    chain_root: Optional[str] = None
    error: Optional[dict[str, Any]] = None


def summarize(behavior: "Behavior") -> CompositionSummary:
    return CompositionSummary(
        name=behavior.name,
        passed=True,
        participants=list(behavior.participants),
        methods=sorted(behavior.methods),
        dependencies=sorted(behavior.dependencies),
        resolved=dict(behavior.resolved),
        chain_root=root_name(behavior.chain_root),
    )
