"""FastAPI application factory and entry point.

Creates the application instance, registers the request-logging middleware
and mounts the extraction router.

Usage::

    # Development server (from project root)
    uvicorn page_extractor.api.main:app --reload

    # Console script, honours EXTRACTOR_HOST / EXTRACTOR_PORT
    page-extractor-api
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response

from page_extractor.config.settings import get_settings
from page_extractor.core.logging_config import configure_logging, request_id_var

configure_logging("INFO")

logger = structlog.get_logger(__name__)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can
    call ``create_app()`` with a patched settings environment.

    Returns:
        A fully configured ``FastAPI`` instance.
    """
    settings = get_settings()

    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="Fetches a web page in a headless browser and extracts its main article.",
        version="0.1.0",
        redirect_slashes=False,
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Log every request with its status and duration under a request ID."""
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("unhandled_exception", exc_info=exc)
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = getattr(response, "status_code", 500)
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn(
                "request_complete",
                status_code=status_code,
                elapsed_ms=elapsed_ms,
            )

        response.headers["X-Request-ID"] = request_id
        return response

    from page_extractor.api.routes.extract import router as extract_router  # noqa: PLC0415

    application.include_router(extract_router)

    return application


app = create_app()


def run() -> None:
    """Serve :data:`app` with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
