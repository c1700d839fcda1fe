"""observability layer: metrics, tracing, logging"""

from .metrics import WorkMetrics, metrics_endpoint
from .telemetry import (
    Telemetry,
    initialize,
    instrument_app,
    name_span_after_route,
    normalize_endpoint,
)

__all__ = [
    "WorkMetrics",
    "metrics_endpoint",
    "Telemetry",
    "initialize",
    "instrument_app",
    "name_span_after_route",
    "normalize_endpoint",
]
