import asyncio
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI

from . import __version__
from .api.routes import health, work
from .config import Settings, settings as default_settings
from .exceptions import TelemetryInitializationError
from .logger import configure_logging, get_logger
from .models.resource import ResourceDescriptor
from .observability.metrics import WorkMetrics
from .observability.telemetry import (
    Telemetry,
    initialize,
    instrument_app,
    name_span_after_route,
)
from .services.work_simulator import WorkSimulator

logger = get_logger(__name__)


def create_app(
    telemetry: Telemetry,
    simulator: WorkSimulator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    compose the http app around an initialized telemetry pipeline

    the app takes ownership of the pipeline and shuts it down when the
    lifespan ends
    """
    settings = settings or default_settings
    if simulator is None:
        simulator = WorkSimulator(telemetry.tracer, metrics=WorkMetrics(telemetry.meter))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """application lifecycle manager"""
        logger.info("starting sample service", endpoint=telemetry.endpoint)

        yield

        # shutdown
        logger.info("shutting down service")
        await asyncio.to_thread(telemetry.shutdown, settings.shutdown_timeout_ms)
        logger.info("service stopped")

    app = FastAPI(
        title="Sample App",
        description="reference service emitting correlated traces, logs and metrics",
        version=__version__,
        lifespan=lifespan,
        # every route names the request span after itself
        dependencies=[Depends(name_span_after_route)],
    )
    app.state.settings = settings
    app.state.telemetry = telemetry
    app.state.work_simulator = simulator

    instrument_app(app, telemetry)

    app.include_router(health.router)
    app.include_router(work.router)
    return app


def run(settings: Settings | None = None) -> None:
    """start the service, exiting non-zero when telemetry cannot be built"""
    settings = settings or default_settings
    configure_logging(settings.log_level, settings.log_format)

    try:
        telemetry = initialize(
            ResourceDescriptor.from_settings(settings),
            settings.otlp_endpoint,
            metric_export_interval_millis=settings.metric_export_interval_ms,
        )
    except TelemetryInitializationError as e:
        logger.error("refusing to start without telemetry", reason=e.message, **e.details)
        sys.exit(1)

    app = create_app(telemetry, settings=settings)

    logger.info("starting server", host=settings.host, port=settings.port)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    finally:
        telemetry.shutdown(settings.shutdown_timeout_ms)
