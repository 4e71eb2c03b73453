"""
Exceptions for behavior composition and encapsulation.

Every composition failure is fatal: ``compose()`` raises synchronously and
returns no partial result.  Each exception carries structured attributes and
a ``to_dict()`` view for JSON reporting (used by ``traitcore check``).

Hierarchy::

    TraitCoreError
    ├── BehaviorDefinitionError      (authoring time, also a TypeError)
    ├── CompositionError             (compose time)
    │   ├── ConflictError
    │   ├── UnexpectedResolutionError
    │   ├── IncompatibleChainError
    │   ├── DependencyTypeError
    │   └── UnknownPolicyError
    ├── MissingImplementationError   (call time, also a NotImplementedError)
    └── ManifestReferenceError       (manifest resolution, also an ImportError)
"""

from __future__ import annotations

from typing import Any, Optional


def _root_name(root: Any) -> Optional[str]:
    if root is None:
        return None
    return getattr(root, "__qualname__", None) or repr(root)


class TraitCoreError(Exception):
    """Base class for all TraitCore errors."""

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "message": str(self)}


class BehaviorDefinitionError(TraitCoreError, TypeError):
    """Raised when a behavior definition is authored with an invalid entry."""

    def __init__(self, message: str, method_name: Optional[str] = None) -> None:
        self.method_name = method_name
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["method_name"] = self.method_name
        return result


# ---------------------------------------------------------------------------
# Compose-time errors
# ---------------------------------------------------------------------------


class CompositionError(TraitCoreError):
    """Base class for errors raised while composing behaviors."""


class ConflictError(CompositionError):
    """Two participants implement the same method without a resolution."""

    def __init__(
        self,
        method_name: str,
        existing_from: Optional[str] = None,
        incoming_from: Optional[str] = None,
    ) -> None:
        self.method_name = method_name
        self.existing_from = existing_from
        self.incoming_from = incoming_from
        msg = f"Method '{method_name}' is implemented by more than one behavior"
        if existing_from and incoming_from:
            msg += f" ({existing_from} and {incoming_from})"
        msg += "; supply a resolution with resolve()"
        super().__init__(msg)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update(
            method_name=self.method_name,
            existing_from=self.existing_from,
            incoming_from=self.incoming_from,
        )
        return result


class UnexpectedResolutionError(CompositionError):
    """A resolution was supplied for a method that has no conflict."""

    def __init__(self, method_name: str, policy: str) -> None:
        self.method_name = method_name
        self.policy = policy
        super().__init__(
            f"Resolution '{policy}' for method '{method_name}' does not "
            f"resolve a conflict: no earlier behavior provides it"
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update(method_name=self.method_name, policy=self.policy)
        return result


class IncompatibleChainError(CompositionError):
    """A participant's chain root is not compatible with the accumulated root."""

    def __init__(
        self,
        candidate_root: Any,
        accumulated_root: Any,
        participant: Optional[str] = None,
    ) -> None:
        self.candidate_root = candidate_root
        self.accumulated_root = accumulated_root
        self.participant = participant
        who = f"Behavior '{participant}'" if participant else "Behavior"
        super().__init__(
            f"{who} requires chain root {_root_name(candidate_root)}, which is "
            f"not compatible with {_root_name(accumulated_root)}"
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update(
            candidate_root=_root_name(self.candidate_root),
            accumulated_root=_root_name(self.accumulated_root),
            participant=self.participant,
        )
        return result


class DependencyTypeError(CompositionError):
    """A declared dependency is bound to a value that cannot be called."""

    def __init__(self, method_name: str, found: Any) -> None:
        self.method_name = method_name
        self.found = found
        super().__init__(
            f"Dependency '{method_name}' must be satisfied by a callable, "
            f"found {type(found).__name__}"
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update(method_name=self.method_name, found=type(self.found).__name__)
        return result


class UnknownPolicyError(CompositionError):
    """A resolution names a policy that is not in the policy library."""

    def __init__(self, policy: str, method_name: Optional[str] = None) -> None:
        self.policy = policy
        self.method_name = method_name
        where = f" for method '{method_name}'" if method_name else ""
        super().__init__(f"Unknown resolution policy '{policy}'{where}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update(policy=self.policy, method_name=self.method_name)
        return result


# ---------------------------------------------------------------------------
# Call-time and manifest errors
# ---------------------------------------------------------------------------


class MissingImplementationError(TraitCoreError, NotImplementedError):
    """A dependency was never satisfied and the method was called anyway."""

    def __init__(self, method_name: str) -> None:
        self.method_name = method_name
        super().__init__(
            f"Method '{method_name}' is declared as a dependency but no "
            f"composed behavior implements it"
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["method_name"] = self.method_name
        return result


class ManifestReferenceError(TraitCoreError, ImportError):
    """A manifest reference could not be imported or has the wrong type."""

    def __init__(self, ref: str, reason: str) -> None:
        self.ref = ref
        self.reason = reason
        super().__init__(f"Cannot resolve reference '{ref}': {reason}")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update(ref=self.ref, reason=self.reason)
        return result
