"""
OpenTelemetry Trace Context Management

Provides tracer setup, span creation and propagation of the current trace
context into outgoing HTTP headers.
"""

import logging
from typing import Dict, Any, Optional

from opentelemetry import trace, propagate
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)

def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer
    
    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        
    Returns:
        Tracer: Tracer for the given service
    """
    # Create TracerProvider
    provider = TracerProvider(
        sampler=ALWAYS_ON,
        resource=Resource.create({"service.name": service_name})
    )
    
    # Add batch span processor with OTLP exporter
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    
    # Set global TracerProvider
    trace.set_tracer_provider(provider)
    
    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")
    
    return trace.get_tracer(service_name)

def inject_trace_headers(headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Inject the current trace context into HTTP headers
    
    Uses the globally configured propagator (W3C traceparent by default).
    Nothing is added when there is no active span.
    
    Args:
        headers: Headers to update in place; a new dict is created when None
        
    Returns:
        Dict[str, str]: The updated headers
    """
    if headers is None:
        headers = {}
    propagate.inject(headers)
    return headers

def create_span(name: str, attributes: Dict[str, Any] = None, kind=trace.SpanKind.CLIENT):
    """Create new span
    
    Args:
        name: Span name
        attributes: Span attributes
        kind: Span kind, client by default since every caller talks to a remote API
        
    Returns:
        Context manager yielding the span
    """
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=kind,
    )
