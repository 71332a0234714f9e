"""Pydantic request/response schemas for the extraction endpoint.

Used by the HTTP route for validation, serialisation and OpenAPI
documentation generation.  Wire field names are camelCase.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ExtractRequest(BaseModel):
    """Payload for ``POST /extract``.

    ``url`` is unconstrained at the schema level: a missing or empty value
    yields the endpoint's own ``400`` and any other non-URL value (numbers,
    objects) fails inside the pipeline with a ``500``.
    """

    url: Any = None


class ExtractionResponse(BaseModel):
    """Serialised :class:`~page_extractor.scraper.pipeline.ExtractionResult`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    content: str
    text_content: str
    length: int
    excerpt: str
    byline: Optional[str] = None
    site_name: Optional[str] = None
    is_readable: bool


class ErrorResponse(BaseModel):
    """Body of ``400`` / ``500`` responses."""

    error: str
