"""Extraction route.

Routes:
    POST /extract — fetch a URL and return the extracted article
"""

from __future__ import annotations

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from page_extractor.api.dependencies import get_pipeline
from page_extractor.core.schemas.extraction import (
    ErrorResponse,
    ExtractionResponse,
    ExtractRequest,
)
from page_extractor.scraper.pipeline import ExtractionPipeline

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/extract",
    response_model=ExtractionResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def extract(
    pipeline: Annotated[ExtractionPipeline, Depends(get_pipeline)],
    payload: Optional[ExtractRequest] = None,
) -> ExtractionResponse | JSONResponse:
    """Extract the main article from ``payload.url``.

    Returns ``400`` when no URL is given and ``500`` for any extraction
    failure, including invalid URLs and unreachable pages.
    """
    if payload is None or not payload.url:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "URL is required"},
        )

    try:
        result = await pipeline.extract(payload.url)
    except Exception as exc:  # noqa: BLE001
        logger.error("extraction_failed", url=payload.url, error=str(exc), exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to extract content"},
        )

    logger.info(
        "extraction_complete",
        url=payload.url,
        is_readable=result.is_readable,
        length=result.length,
    )
    return ExtractionResponse.model_validate(result.to_dict())
