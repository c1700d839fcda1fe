from fastapi import Response
from opentelemetry.metrics import Meter
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# counters
work_requests_total = Counter(
    "sample_app_work_requests_total",
    "total number of work requests",
    ["status"],
)

# histograms
work_latency_seconds = Histogram(
    "sample_app_work_latency_seconds",
    "simulated work latency in seconds",
    buckets=[0.025, 0.05, 0.1, 0.2, 0.3, 0.4],
)


def metrics_endpoint() -> Response:
    """prometheus metrics endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


class WorkMetrics:
    """request outcome and latency instruments, pushed over otlp and exposed for scraping"""

    def __init__(self, meter: Meter):
        self.requests = meter.create_counter(
            "app.work.requests",
            unit="{request}",
            description="number of work requests by outcome",
        )
        self.latency = meter.create_histogram(
            "app.work.latency",
            unit="ms",
            description="simulated work latency",
        )

    def record(self, latency_ms: int, status_code: int) -> None:
        """record one work outcome"""
        attributes = {"http.status_code": status_code}
        self.requests.add(1, attributes)
        self.latency.record(latency_ms, attributes)

        work_requests_total.labels(status=str(status_code)).inc()
        work_latency_seconds.observe(latency_ms / 1000)
