"""
OpenTelemetry Integration Module

Provides distributed tracing and metrics collection capabilities:
- tracer: Tracer setup, spans and trace header propagation
- metrics: Counters and latency histograms

Every Caller implementation reports through this module so production and
contract traffic show up the same way.
"""

from .tracer import (
    setup_tracer,
    inject_trace_headers,
    create_span
)
from .metrics import (
    setup_metrics,
    increment_counter,
    record_latency
)

__all__ = [
    "setup_tracer",
    "inject_trace_headers",
    "create_span",
    "setup_metrics",
    "increment_counter",
    "record_latency"
]
