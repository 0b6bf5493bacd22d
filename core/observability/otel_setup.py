"""
OpenTelemetry setup for the discount service.

- Traces for discount function runs (one span per evaluation)
- Run counters attached to the span as attributes
"""
from __future__ import annotations
from typing import Optional
import os

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


def setup_otel(
    service_name: str = "bxgy-discounts",
    endpoint: Optional[str] = None,
):
    """Initialize OpenTelemetry, exporting over OTLP when an endpoint is set."""
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    otlp_endpoint = endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otlp_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    return trace.get_tracer(service_name)


def get_tracer(service_name: str = "bxgy-discounts"):
    """Tracer from the globally configured provider (no-op until setup_otel runs)."""
    return trace.get_tracer(service_name)


def create_run_span(tracer, function_name: str, shop: Optional[str] = None):
    """Create a span for one discount function run (use as a context manager)."""
    attributes = {"function.name": function_name}
    if shop:
        attributes["shop"] = shop
    return tracer.start_as_current_span(
        f"discount_function.{function_name}",
        attributes=attributes,
    )
