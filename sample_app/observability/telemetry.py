import threading
import time
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.metrics import Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.trace import Tracer

from ..exceptions import TelemetryInitializationError
from ..logger import get_logger
from ..models.resource import ResourceDescriptor

logger = get_logger(__name__)

DEFAULT_COLLECTOR_ENDPOINT = "otel-collector:4317"
DEFAULT_METRIC_EXPORT_INTERVAL_MS = 60000
DEFAULT_SHUTDOWN_TIMEOUT_MS = 30000
INSTRUMENTATION_NAME = "sample_app"


def normalize_endpoint(endpoint: str | None) -> str:
    """
    validate a collector endpoint and return it as host:port

    accepts host:port or an http(s) url without a path; blank falls back to
    the well-known collector address
    """
    endpoint = (endpoint or "").strip() or DEFAULT_COLLECTOR_ENDPOINT

    parsed = urlparse(endpoint if "://" in endpoint else f"//{endpoint}")
    if parsed.scheme not in ("", "http", "https"):
        raise ValueError(f"unsupported scheme {parsed.scheme!r} in {endpoint!r}")
    if parsed.path not in ("", "/") or parsed.query or parsed.fragment:
        raise ValueError(f"endpoint must not carry a path: {endpoint!r}")

    try:
        port = parsed.port
    except ValueError as e:
        raise ValueError(f"invalid port in {endpoint!r}") from e

    if not parsed.hostname or not port:
        raise ValueError(f"endpoint must be host:port, got {endpoint!r}")

    host = f"[{parsed.hostname}]" if ":" in parsed.hostname else parsed.hostname
    return f"{host}:{port}"


class Telemetry:
    """
    explicitly owned telemetry pipeline

    holds the tracer and meter providers built by initialize() and the single
    shutdown operation draining both signal types
    """

    def __init__(
        self,
        resource: ResourceDescriptor,
        endpoint: str,
        tracer_provider: TracerProvider,
        meter_provider: MeterProvider,
    ):
        self.resource = resource
        self.endpoint = endpoint
        self.tracer_provider = tracer_provider
        self.meter_provider = meter_provider
        self.tracer: Tracer = tracer_provider.get_tracer(INSTRUMENTATION_NAME)
        self.meter: Meter = meter_provider.get_meter(INSTRUMENTATION_NAME)
        self._lock = threading.Lock()
        self._shut_down = False

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    def shutdown(self, timeout_millis: int = DEFAULT_SHUTDOWN_TIMEOUT_MS) -> bool:
        """
        flush and close both pipelines within one deadline

        returns True when everything drained in time; repeated calls are
        ignored and return False
        """
        with self._lock:
            if self._shut_down:
                logger.debug("telemetry already shut down")
                return False
            self._shut_down = True

        deadline = time.monotonic() + timeout_millis / 1000

        def remaining_millis() -> int:
            return max(0, int((deadline - time.monotonic()) * 1000))

        logger.info("shutting down telemetry", timeout_ms=timeout_millis)

        result = {"drained": False}

        def drain() -> None:
            # provider shutdown drains the batch queue again without a deadline
            try:
                drained = self.tracer_provider.force_flush(remaining_millis())
                self.tracer_provider.shutdown()
                if not drained:
                    logger.warning("span flush did not finish before deadline")
            except Exception as e:
                logger.warning("span shutdown failed", error=str(e))
                drained = False

            # the periodic reader exports once more on shutdown and raises if that fails
            try:
                self.meter_provider.shutdown(timeout_millis=remaining_millis())
            except Exception as e:
                logger.warning("metric shutdown failed", error=str(e))
                drained = False

            result["drained"] = drained

        worker = threading.Thread(target=drain, name="telemetry-shutdown", daemon=True)
        worker.start()
        worker.join(timeout_millis / 1000)

        if worker.is_alive():
            logger.warning("telemetry shutdown abandoned at deadline", timeout_ms=timeout_millis)
            return False

        logger.info("telemetry shut down", drained=result["drained"])
        return result["drained"]


def initialize(
    resource: ResourceDescriptor,
    collector_endpoint: str | None = None,
    *,
    metric_export_interval_millis: int = DEFAULT_METRIC_EXPORT_INTERVAL_MS,
    span_exporter: SpanExporter | None = None,
    metric_reader: MetricReader | None = None,
) -> Telemetry:
    """configure opentelemetry with otlp exporters"""
    try:
        endpoint = normalize_endpoint(collector_endpoint)
        otel_resource: Resource = resource.to_resource()

        # traces
        if span_exporter is None:
            span_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
        tracer_provider = TracerProvider(resource=otel_resource)
        tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))

        # metrics
        if metric_reader is None:
            metric_reader = PeriodicExportingMetricReader(
                OTLPMetricExporter(endpoint=endpoint, insecure=True),
                export_interval_millis=metric_export_interval_millis,
            )
        meter_provider = MeterProvider(resource=otel_resource, metric_readers=[metric_reader])
    except Exception as e:
        logger.error("telemetry initialization failed", error=str(e))
        raise TelemetryInitializationError(
            "failed to initialize telemetry",
            details={"endpoint": collector_endpoint, "error": str(e)},
        ) from e

    logger.info(
        "telemetry configured",
        otlp_endpoint=endpoint,
        service_name=resource.service_name,
        service_version=resource.service_version,
    )
    return Telemetry(resource, endpoint, tracer_provider, meter_provider)


async def name_span_after_route(request: Request) -> None:
    """rename the active server span to the name of the route handling the request"""
    name = getattr(request.scope.get("route"), "name", None)
    span = trace.get_current_span()
    if name and span.is_recording():
        span.update_name(name)


def instrument_app(app: FastAPI, telemetry: Telemetry, excluded_urls: str = "healthz,metrics") -> None:
    """instrument fastapi app with opentelemetry"""
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=telemetry.tracer_provider,
        meter_provider=telemetry.meter_provider,
        excluded_urls=excluded_urls,
        exclude_spans=["receive", "send"],
    )
    logger.info("fastapi instrumented with opentelemetry", excluded_urls=excluded_urls)
