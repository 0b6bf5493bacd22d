"""Logging and tracing setup shared by the API and the discount engine."""
from core.observability.logging_setup import configure_logging
from core.observability.otel_setup import create_run_span, get_tracer, setup_otel

__all__ = [
    "configure_logging",
    "create_run_span",
    "get_tracer",
    "setup_otel",
]
