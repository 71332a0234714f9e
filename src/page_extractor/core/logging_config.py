"""Structured JSON logging configuration using structlog.

Call ``configure_logging()`` once at process startup (the HTTP app factory
and the MCP server entry point both do).  All modules can then use either the
stdlib logging API or structlog directly:

Stdlib usage (pipeline modules)::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("scraper: attempt %d for %s", attempt, url)

Structlog usage (front-ends, richer context binding)::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("extraction_complete", url=url, is_readable=True)

A ``request_id`` context variable is populated by the request-logging
middleware in ``api/main.py`` and merged into every log record emitted
during that request's lifetime.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TextIO

import structlog
from structlog.types import EventDict, WrappedLogger

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
"""Per-request ID propagated from the HTTP middleware to log processors."""


def _inject_request_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Inject the current request ID into the log event dict if set.

    Runs after ``merge_contextvars`` as a fallback for code paths that set
    the ``ContextVar`` directly rather than through ``bind_contextvars``.
    """
    rid = request_id_var.get()
    if rid is not None and "request_id" not in event_dict:
        event_dict["request_id"] = rid
    return event_dict


def configure_logging(log_level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure structlog with JSON output for production.

    With ``log_level != "DEBUG"`` records are rendered as newline-delimited
    JSON.  With ``"DEBUG"`` structlog's ``ConsoleRenderer`` is used for
    human-readable output.

    Standard fields added to every record: ``timestamp``, ``level``,
    ``logger``, ``event`` and, inside an HTTP request, ``request_id``.

    Idempotent: previously attached root handlers are replaced.

    Args:
        log_level: ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"`` or
            ``"CRITICAL"``.  Case-insensitive.
        stream: Destination stream.  Defaults to ``sys.stdout``; the MCP
            server passes ``sys.stderr`` because stdout carries the protocol.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)
    is_development = level_upper == "DEBUG"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _inject_request_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        final_renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(
            colors=True,
        )
    else:
        final_renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    # Playwright's driver and uvicorn's access log are chatty at INFO.
    if not is_development:
        for noisy_logger in ("uvicorn.access", "asyncio", "trafilatura", "htmldate"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
