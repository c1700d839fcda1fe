"""Tests for structured logging with trace correlation."""

import json

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import format_span_id, format_trace_id

from sample_app.logger import (
    add_severity_level,
    add_trace_context,
    bind_trace_context,
    configure_logging,
)


@pytest.fixture
def tracer():
    return TracerProvider().get_tracer("test")


@pytest.fixture
def reset_logging():
    yield
    structlog.reset_defaults()


def read_records(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]


def test_records_carry_active_trace_context(reset_logging, tracer, capsys):
    configure_logging("INFO", "json")
    logger = structlog.get_logger("correlation")

    with tracer.start_as_current_span("outer") as span:
        logger.info("inside span", latency_ms=12, status=200)

    [record] = read_records(capsys)
    context = span.get_span_context()
    assert record["event"] == "inside span"
    assert record["trace_id"] == format_trace_id(context.trace_id)
    assert record["span_id"] == format_span_id(context.span_id)
    assert record["latency_ms"] == 12
    assert record["status"] == 200
    assert record["severity"] == "INFO"
    assert "timestamp" in record


def test_records_outside_spans_have_no_trace_context(reset_logging, capsys):
    configure_logging("INFO", "json")
    structlog.get_logger("plain").warning("no span")

    [record] = read_records(capsys)
    assert record["severity"] == "WARNING"
    assert "trace_id" not in record


def test_level_filtering(reset_logging, capsys):
    configure_logging("INFO", "json")
    structlog.get_logger("filtered").debug("dropped")

    assert read_records(capsys) == []


def test_bound_ids_win_over_the_active_span(reset_logging, tracer, capsys):
    configure_logging("INFO", "json")
    with tracer.start_as_current_span("parent") as parent:
        logger = bind_trace_context(structlog.get_logger("bound"))
        with tracer.start_as_current_span("child"):
            logger.error("logged in child")

    [record] = read_records(capsys)
    assert record["span_id"] == format_span_id(parent.get_span_context().span_id)
    assert record["severity"] == "ERROR"


def test_bind_without_span_returns_logger_unchanged():
    logger = structlog.get_logger("unbound")

    assert bind_trace_context(logger) is logger


def test_add_trace_context_keeps_explicit_ids(tracer):
    with tracer.start_as_current_span("span"):
        event_dict = add_trace_context(None, "info", {"trace_id": "explicit"})

    assert event_dict["trace_id"] == "explicit"
    assert len(event_dict["span_id"]) == 16


def test_severity_level():
    assert add_severity_level(None, "warning", {})["severity"] == "WARNING"
    assert add_severity_level(None, "error", {})["severity"] == "ERROR"
