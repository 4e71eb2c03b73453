"""
Logging setup for TraitCore.

Library modules only call ``logging.getLogger(__name__)``; nothing is
configured on import.  Applications and the CLI call ``configure_logging()``
once to attach a stderr handler to the ``traitcore`` logger.

Two formats are supported:

- ``text``: ``LEVEL name: message`` lines for the console
- ``json``: one JSON object per record, for log pipelines

Usage:
    from traitcore.logger import configure_logging

    configure_logging(level="debug", fmt="json")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from traitcore.config import get_config

ROOT_LOGGER_NAME = "traitcore"

# Marker attribute so repeated calls replace our handler, not user handlers.
_HANDLER_FLAG = "_traitcore_handler"


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a stderr handler to the ``traitcore`` logger.

    Args:
        level: Log level name; defaults to ``TraitCoreConfig.log_level``
        fmt: ``json`` or ``text``; defaults to ``TraitCoreConfig.log_format``

    Returns:
        The configured ``traitcore`` logger
    """
    config = get_config()
    level = (level or config.log_level).upper()
    fmt = fmt or config.log_format

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_FLAG, False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    setattr(handler, _HANDLER_FLAG, True)
    logger.addHandler(handler)
    return logger
