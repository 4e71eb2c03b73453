"""
YAML manifest loader with per-path caching.

Loads composition manifest YAML files, validates them against the Pydantic
schema, and caches the result per resolved file path.

Usage::

    from traitcore.manifest.loader import ManifestLoader

    loader = ManifestLoader()
    manifest = loader.load(Path("singer.traits.yaml"))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

import yaml

from traitcore.manifest.schema import CompositionManifest

logger = logging.getLogger(__name__)


class ManifestLoader:
    """Loads and caches composition manifests from YAML files."""

    _cache: ClassVar[dict[str, CompositionManifest]] = {}

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the manifest cache (useful in tests)."""
        cls._cache.clear()

    def load(self, path: Path) -> CompositionManifest:
        """Load a manifest from a YAML file.

        Args:
            path: Path to the YAML manifest file.

        Returns:
            Validated ``CompositionManifest`` instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            TypeError: If the YAML root is not a mapping.
            yaml.YAMLError: If the file contains invalid YAML.
            pydantic.ValidationError: If the YAML does not match the schema.
        """
        key = str(path.resolve())
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Manifest cache hit: %s", key)
            return cached

        if not path.exists():
            raise FileNotFoundError(f"Composition manifest not found: {path}")

        with open(path) as fh:
            raw = yaml.safe_load(fh)

        manifest = self._validate(raw, str(path))
        self._cache[key] = manifest

        logger.debug(
            "Loaded composition manifest: name=%s participants=%d root=%s",
            manifest.name,
            len(manifest.participants),
            manifest.chain_root,
        )
        return manifest

    def load_from_string(self, yaml_str: str) -> CompositionManifest:
        """Load a manifest from a YAML string (convenience for testing).

        Raises:
            TypeError: If the YAML root is not a mapping.
            pydantic.ValidationError: If the YAML does not match the schema.
        """
        return self._validate(yaml.safe_load(yaml_str), "<string>")

    @staticmethod
    def _validate(raw: object, source: str) -> CompositionManifest:
        if not isinstance(raw, dict):
            raise TypeError(
                f"Expected YAML mapping at root of {source}, "
                f"got {type(raw).__name__}"
            )
        return CompositionManifest.model_validate(raw)
