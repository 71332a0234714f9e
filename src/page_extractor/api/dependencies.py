"""Shared FastAPI dependencies.

Tests replace :func:`get_pipeline` through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from page_extractor.config.settings import get_pipeline_config
from page_extractor.scraper.pipeline import ExtractionPipeline


@lru_cache
def get_pipeline() -> ExtractionPipeline:
    """Return the process-wide pipeline.

    The pipeline holds no per-request state; each ``extract`` call opens and
    closes its own browser session.
    """
    return ExtractionPipeline(get_pipeline_config())
