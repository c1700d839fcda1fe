"""Shared test fixtures for all test modules."""

import pytest
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from sample_app.config import Settings
from sample_app.main import create_app
from sample_app.models.resource import ResourceDescriptor
from sample_app.observability.metrics import WorkMetrics
from sample_app.observability.telemetry import initialize
from sample_app.services.work_simulator import WorkSimulator
from tests.support import no_sleep


@pytest.fixture
def resource() -> ResourceDescriptor:
    return ResourceDescriptor(service_name="sample-app-test", service_version="9.9.9")


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def metric_reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def telemetry(resource, span_exporter, metric_reader):
    """Telemetry pipeline exporting to in-memory sinks."""
    telemetry = initialize(
        resource,
        "localhost:4317",
        span_exporter=span_exporter,
        metric_reader=metric_reader,
    )
    yield telemetry
    telemetry.shutdown(1000)


@pytest.fixture
def finished_spans(telemetry, span_exporter):
    """Flush the batch processor and return everything exported so far."""

    def _finished_spans():
        telemetry.tracer_provider.force_flush(1000)
        return list(span_exporter.get_finished_spans())

    return _finished_spans


@pytest.fixture
def settings() -> Settings:
    return Settings(enable_metrics=True, shutdown_timeout_ms=1000)


@pytest.fixture
def make_app(telemetry, settings):
    """Factory building an app whose work simulator uses the given random source."""

    def _make_app(rng=None, sleep=no_sleep):
        simulator = WorkSimulator(
            telemetry.tracer,
            rng=rng,
            metrics=WorkMetrics(telemetry.meter),
            sleep=sleep,
        )
        return create_app(telemetry, simulator=simulator, settings=settings)

    return _make_app
