"""
Pytest configuration and fixtures for TraitCore tests.
"""

from __future__ import annotations

import logging
from typing import Generator

import pytest

from traitcore.config import reset_config
from traitcore.logger import ROOT_LOGGER_NAME
from traitcore.manifest.loader import ManifestLoader


# ============================================================================
# Isolation Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Fresh config, manifest cache and log handlers for each test."""
    for key in ("TRAITCORE_LOG_LEVEL", "TRAITCORE_LOG_FORMAT",
                "TRAITCORE_EMIT_SPAN_EVENTS", "TRAITCORE_MANIFEST_DIR"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    ManifestLoader.clear_cache()

    yield

    reset_config()
    ManifestLoader.clear_cache()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_traitcore_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
