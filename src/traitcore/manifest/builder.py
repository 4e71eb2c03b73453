"""
Build a composed behavior from a validated manifest.

Import references have the form ``package.module:attribute`` (dotted
attributes allowed after the colon).  Each participant must resolve to an
encapsulated ``Behavior``; the optional chain root must resolve to a class.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

from traitcore.behavior.chain import ObjectModel
from traitcore.behavior.compose import compose, resolve
from traitcore.behavior.model import Behavior
from traitcore.errors import ManifestReferenceError
from traitcore.manifest.schema import CompositionManifest

logger = logging.getLogger(__name__)


def import_ref(ref: str) -> Any:
    """Import the object named by ``"package.module:attr"``.

    Raises:
        ManifestReferenceError: If the module or attribute cannot be found.
    """
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise ManifestReferenceError(ref, "expected 'package.module:attribute'")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ManifestReferenceError(ref, f"cannot import module: {exc}") from exc

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ManifestReferenceError(
                ref, f"'{part}' not found in {module_name}"
            ) from None
    return target


def _import_behavior(ref: str) -> Behavior:
    target = import_ref(ref)
    if not isinstance(target, Behavior):
        raise ManifestReferenceError(
            ref, f"expected an encapsulated Behavior, got {type(target).__name__}"
        )
    return target


def _import_chain_root(ref: Optional[str]) -> Any:
    if ref is None:
        return None
    target = import_ref(ref)
    if not isinstance(target, type):
        raise ManifestReferenceError(
            ref, f"chain root must be a class, got {type(target).__name__}"
        )
    return target


def build_from_manifest(
    manifest: CompositionManifest,
    object_model: Optional[ObjectModel] = None,
) -> Behavior:
    """Resolve, annotate and compose the participants of *manifest*.

    When the manifest declares a chain root it is assigned to the first
    participant, so the usual compatibility rules apply to the others.

    Raises:
        ManifestReferenceError: For unresolvable references.
        CompositionError: For any composition failure.
    """
    participants: list[Behavior] = []
    for spec in manifest.participants:
        participant = _import_behavior(spec.ref)
        if spec.resolve:
            participant = resolve(participant, spec.resolve)
        participants.append(participant)

    chain_root = _import_chain_root(manifest.chain_root)
    if chain_root is not None:
        participants[0] = participants[0].with_chain_root(chain_root)

    logger.debug(
        "Building %s from manifest: %s",
        manifest.name,
        [spec.ref for spec in manifest.participants],
    )
    return compose(*participants, name=manifest.name, object_model=object_model)
