"""
Composition manifests: declare a composition in YAML instead of code.

Public API::

    from traitcore.manifest import (
        CompositionManifest,
        ParticipantSpec,
        ManifestLoader,
        build_from_manifest,
        import_ref,
    )
"""

from traitcore.manifest.builder import build_from_manifest, import_ref
from traitcore.manifest.loader import ManifestLoader
from traitcore.manifest.schema import CompositionManifest, ParticipantSpec

__all__ = [
    "CompositionManifest",
    "ParticipantSpec",
    "ManifestLoader",
    "build_from_manifest",
    "import_ref",
]
