"""
Discount Functions OpenTelemetry Setup

Optional tracing for function runs:
- Tracing is on only when FunctionSettings carries an OTLP endpoint
- One span per function evaluation
- Span attributes for the function handle and cart size
"""
from __future__ import annotations
from typing import Any, Optional
import logging

from patterns.domain_config import FunctionSettings

logger = logging.getLogger(__name__)

SERVICE_NAME = "discount-functions"


def setup_otel(settings: Optional[FunctionSettings] = None, service_name: str = SERVICE_NAME):
    """Return a tracer exporting to ``settings.otel_endpoint``, or None when tracing is off."""
    settings = settings or FunctionSettings.from_env()
    if not settings.otel_endpoint:
        return None

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    except ImportError:
        logger.warning("OTLP endpoint %s set but OpenTelemetry is not installed", settings.otel_endpoint)
        return None

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_endpoint)))
    trace.set_tracer_provider(provider)
    return trace.get_tracer(service_name)


def _line_count(payload: Any) -> int:
    cart = payload.get("cart") if isinstance(payload, dict) else None
    lines = cart.get("lines") if isinstance(cart, dict) else None
    return len(lines) if isinstance(lines, list) else 0


def create_function_span(tracer, handle: str, payload: Any):
    """Create a span for a discount function run."""
    if tracer is None:
        return None
    return tracer.start_span(
        f"discount_function.{handle}",
        attributes={
            "function.handle": handle,
            "cart.line_count": _line_count(payload),
        },
    )
