"""Structured logging for the service store (structlog over stdlib logging)."""

import logging
import sys

import structlog

# Loggers that are chatty at INFO and add nothing to request logs
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib and structlog records through one structlog formatter.

    Core modules log with ``logging.getLogger(__name__)``; their records pick
    up the request context bound by :func:`bind_request_context`.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: JSON lines when True, coloured console output otherwise.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=_SHARED_PROCESSORS + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, subject: str | None = None) -> None:
    """Bind the trace id and optional request details to the current async context."""
    ctx = {"trace_id": trace_id}
    if subject:
        ctx["subject"] = subject
    structlog.contextvars.bind_contextvars(**ctx)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
