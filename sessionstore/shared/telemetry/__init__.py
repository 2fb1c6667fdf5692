"""Telemetry: logging setup and tracing helpers."""

from sessionstore.shared.telemetry.logging import setup_logging
from sessionstore.shared.telemetry.tracing import (
    add_span_attributes,
    set_span_error,
    traced,
)

__all__ = [
    "add_span_attributes",
    "set_span_error",
    "setup_logging",
    "traced",
]
