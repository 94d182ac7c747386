"""
OpenTelemetry Metrics Collection

Counters and latency histograms for RPC traffic. Instruments are created
lazily on first use and cached by name; until setup_metrics() installs a
MeterProvider they are no-ops.
"""

import logging
from typing import Dict, Any

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)

# Instruments by (kind, name)
_instruments = {}

def setup_metrics(service_name: str, otlp_endpoint: str = "localhost:4317", export_interval_ms: int = 5000):
    """Configure OpenTelemetry metrics collection

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        export_interval_ms: Metrics export interval in milliseconds

    Returns:
        Meter: Meter for the given service
    """
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=otlp_endpoint),
        export_interval_millis=export_interval_ms
    )
    metrics.set_meter_provider(MeterProvider(
        resource=Resource.create({"service.name": service_name}),
        metric_readers=[reader]
    ))

    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return metrics.get_meter(service_name)

def _instrument(kind: str, name: str):
    key = (kind, name)
    if key not in _instruments:
        meter = metrics.get_meter("xo_sdk")
        if kind == "counter":
            _instruments[key] = meter.create_counter(name=name, description=f"Count of {name}", unit="1")
        else:
            _instruments[key] = meter.create_histogram(name=name, description=f"Latency of {name}", unit="ms")
    return _instruments[key]

def increment_counter(name: str, amount: int = 1, attributes: Dict[str, Any] = None):
    """Add ``amount`` to the counter ``name``, e.g. rpc.client.requests"""
    _instrument("counter", name).add(amount, attributes or {})

def record_latency(name: str, value_ms: float, attributes: Dict[str, Any] = None):
    """Record one latency sample in milliseconds"""
    _instrument("histogram", name).record(value_ms, attributes or {})
