import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Tracer

from ..logger import bind_trace_context, get_logger
from ..models.work import WorkOutcome
from ..observability.metrics import WorkMetrics

MAX_WORK_LATENCY_MS = 400
MAX_CACHE_LATENCY_MS = 200
FAILURE_RATE = 0.20

SUCCESS_BODY = "Work completed\n"
FAILURE_BODY = "Internal Server Error"


class WorkSimulator:
    """
    simulated request handling with injected latency and failures

    every call runs two child spans of the active span, sleeps for a random
    duration in each, then draws the outcome independently of the latencies
    """

    def __init__(
        self,
        tracer: Tracer,
        rng: random.Random | None = None,
        metrics: WorkMetrics | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: Any = None,
    ):
        self._tracer = tracer
        self._rng = rng if rng is not None else random.Random()
        self._metrics = metrics
        self._sleep = sleep
        self._logger = logger if logger is not None else get_logger(__name__)

    async def handle(self) -> WorkOutcome:
        """run one unit of work under the currently active span"""
        log = bind_trace_context(self._logger, trace.get_current_span().get_span_context())

        with self._tracer.start_as_current_span("simulate_work") as span:
            latency_ms = self._rng.randrange(MAX_WORK_LATENCY_MS)
            span.set_attribute("work.latency_ms", latency_ms)
            await self._sleep(latency_ms / 1000)

        with self._tracer.start_as_current_span("db_cache_lookup"):
            await self._sleep(self._rng.randrange(MAX_CACHE_LATENCY_MS) / 1000)

        if self._rng.random() < FAILURE_RATE:
            log.error("request failed", latency_ms=latency_ms, status=500)
            outcome = WorkOutcome(status_code=500, body=FAILURE_BODY, latency_ms=latency_ms)
        else:
            log.info("request succeeded", latency_ms=latency_ms, status=200)
            outcome = WorkOutcome(status_code=200, body=SUCCESS_BODY, latency_ms=latency_ms)

        if self._metrics is not None:
            self._metrics.record(outcome.latency_ms, outcome.status_code)

        return outcome
