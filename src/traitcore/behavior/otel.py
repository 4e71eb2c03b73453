"""
OTel span event emission helpers for behavior composition.

Log + optional span event on the current span.  Events are only added when
``TraitCoreConfig.emit_span_events`` is enabled and the current span is
recording.

Usage::

    from traitcore.behavior.otel import emit_composition_result

    emit_composition_result(summary)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace as otel_trace

from traitcore.config import get_config

if TYPE_CHECKING:
    from traitcore.behavior.summary import CompositionSummary

logger = logging.getLogger(__name__)


def _add_span_event(name: str, attributes: dict[str, str | int | float | bool]) -> None:
    """Add an event to the current OTel span if enabled and recording."""
    if not get_config().emit_span_events:
        return
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)


def emit_composition_result(summary: "CompositionSummary") -> None:
    """Emit a span event for a composition outcome.

    Event name: ``traitcore.compose.succeeded`` or ``traitcore.compose.failed``.
    """
    event_name = (
        "traitcore.compose.succeeded" if summary.passed else "traitcore.compose.failed"
    )

    attrs: dict[str, str | int | float | bool] = {
        "traitcore.behavior": summary.name,
        "traitcore.passed": summary.passed,
        "traitcore.participant_count": len(summary.participants),
        "traitcore.method_count": len(summary.methods),
        "traitcore.dependency_count": len(summary.dependencies),
        "traitcore.resolved_count": len(summary.resolved),
    }
    if summary.chain_root:
        attrs["traitcore.chain_root"] = summary.chain_root
    if summary.error:
        attrs["traitcore.error"] = summary.error.get("error", "")
        attrs["traitcore.error_message"] = summary.error.get("message", "")

    if summary.passed:
        logger.debug(
            "Composed behavior %s: participants=%s methods=%d dependencies=%s",
            summary.name,
            summary.participants,
            len(summary.methods),
            summary.dependencies,
        )
    else:
        logger.warning(
            "Composition of %s FAILED: %s",
            summary.name,
            summary.error.get("message") if summary.error else "unknown error",
        )

    _add_span_event(event_name, attrs)


def emit_context_created(behavior_name: str) -> None:
    """Emit ``traitcore.context.created`` when a private context is built."""
    _add_span_event(
        "traitcore.context.created",
        {"traitcore.behavior": behavior_name},
    )
