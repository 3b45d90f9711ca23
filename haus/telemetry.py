"""
Moderation telemetry.

Exports to Application Insights through OpenTelemetry when configured.
Never records content, reasons text or identifiers: only verdicts, buckets
and timings.
"""
import logging
from typing import Literal, Optional

from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry.trace import get_current_span

logger = logging.getLogger("haus.telemetry")

VERDICT_VALUES = ("APPROVED", "PENDING_REVIEW", "FLAGGED", "REJECTED")
RISK_LEVEL_VALUES = ("High", "Medium", "Low")


def init_telemetry(connection_string: Optional[str]) -> bool:
    """
    Initialize Azure Application Insights via OpenTelemetry.
    Returns False (and does nothing) when no connection string is configured.
    """
    if not connection_string:
        return False  # Telemetry disabled (local / tests)

    configure_azure_monitor(connection_string=connection_string)
    logger.info("Telemetry exporter configured")
    return True


def emit_moderation_telemetry(
    decision_latency_ms: int,
    verdict: str,
    risk_level: str,
    decision_path: Literal["classifier", "fallback", "scores", "empty"],
    fallback_triggered: bool,
):
    """
    Emit the single custom moderation event on the current span.
    Attributes are locked; no kwargs.
    """
    assert isinstance(decision_latency_ms, int), "decision_latency_ms must be int"
    assert verdict in VERDICT_VALUES, f"verdict must be one of {VERDICT_VALUES}, got {verdict}"
    assert risk_level in RISK_LEVEL_VALUES, f"risk_level must be one of {RISK_LEVEL_VALUES}, got {risk_level}"
    assert decision_path in ("classifier", "fallback", "scores", "empty"), f"unexpected decision_path {decision_path}"
    assert isinstance(fallback_triggered, bool), "fallback_triggered must be bool"

    span = get_current_span()
    if not span or not span.is_recording():
        return  # No active span - telemetry disabled or not in trace context

    span.add_event(
        name="haus.moderation",
        attributes={
            "decision_latency_ms": decision_latency_ms,
            "verdict": verdict,
            "risk_level": risk_level,
            "decision_path": decision_path,
            "fallback_triggered": fallback_triggered,
        },
    )


def scrub_exception_for_telemetry(exception: Exception) -> str:
    """
    Never record str(e): provider errors can echo the submitted text.
    """
    return type(exception).__name__


def emit_exception_telemetry(exception: Exception):
    span = get_current_span()
    if not span or not span.is_recording():
        return

    span.add_event(
        name="haus.exception",
        attributes={
            "exception_type": scrub_exception_for_telemetry(exception)
        },
    )
