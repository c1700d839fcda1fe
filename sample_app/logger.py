import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanContext, format_span_id, format_trace_id
from structlog.types import EventDict, Processor


def add_severity_level(_logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """add severity field for cloud logging compatibility"""
    if method_name == "warning":
        event_dict["severity"] = "WARNING"
    else:
        event_dict["severity"] = method_name.upper()
    return event_dict


def add_trace_context(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """add trace_id and span_id of the active span, keeping explicitly bound ids"""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict.setdefault("trace_id", format_trace_id(span_context.trace_id))
        event_dict.setdefault("span_id", format_span_id(span_context.span_id))
    return event_dict


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """configure structlog with JSON or console output"""

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_severity_level,
        add_trace_context,
    ]

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """get configured logger instance"""
    return structlog.get_logger(name)


def bind_trace_context(logger: Any, span_context: SpanContext | None = None) -> Any:
    """
    bind trace and span ids to a logger

    uses the active span when no span context is given; the logger is
    returned unchanged when there is no valid span to correlate with
    """
    if span_context is None:
        span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return logger
    return logger.bind(
        trace_id=format_trace_id(span_context.trace_id),
        span_id=format_span_id(span_context.span_id),
    )
