"""Extraction pipeline: validate → browse → fetch → sanitise → extract → normalise.

Usage::

    from page_extractor.scraper.pipeline import ExtractionPipeline

    pipeline = ExtractionPipeline(config)
    result = await pipeline.extract("https://example.com/article")

Each call owns one browser session, which is closed on every exit path before
the result (or error) reaches the caller.  Only :class:`InvalidURL`,
:class:`PermanentNavigationError` and :class:`ExhaustedRetriesError` are
raised for navigation problems; a page without an identifiable article is a
successful result with ``is_readable=False``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

from page_extractor.config.settings import get_pipeline_config
from page_extractor.scraper.browser import BrowserSessionManager
from page_extractor.scraper.config import PipelineConfig
from page_extractor.scraper.content_extractor import ExtractedArticle, extract_article
from page_extractor.scraper.playwright_fetcher import PageFetcher
from page_extractor.scraper.sanitizer import parse_html, sanitize_document
from page_extractor.scraper.text_normalizer import normalize_text
from page_extractor.scraper.timing import RandomSource, Sleep
from page_extractor.scraper.urls import validate_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Normalised article record returned by :meth:`ExtractionPipeline.extract`.

    ``length`` always equals ``len(text_content)``.  When ``is_readable`` is
    ``False``, ``byline`` and ``site_name`` are ``None``.
    """

    title: str
    content: str
    text_content: str
    length: int
    excerpt: str
    byline: str | None
    site_name: str | None
    is_readable: bool

    @classmethod
    def from_article(cls, article: ExtractedArticle) -> ExtractionResult:
        text_content = normalize_text(article.text)
        return cls(
            title=normalize_text(article.title),
            content=article.content,
            text_content=text_content,
            length=len(text_content),
            excerpt=normalize_text(article.excerpt),
            byline=article.byline if article.is_readable else None,
            site_name=article.site_name if article.is_readable else None,
            is_readable=article.is_readable,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire representation."""
        return {
            "title": self.title,
            "content": self.content,
            "textContent": self.text_content,
            "length": self.length,
            "excerpt": self.excerpt,
            "byline": self.byline,
            "siteName": self.site_name,
            "isReadable": self.is_readable,
        }


def process_html(html: str, url: str) -> ExtractionResult:
    """Turn rendered HTML into a normalised :class:`ExtractionResult`."""
    document = sanitize_document(parse_html(html))
    return ExtractionResult.from_article(extract_article(document, url))


class ExtractionPipeline:
    """Composes the pipeline stages around one browser session per call.

    Args:
        config: Read-only pipeline configuration.
        session_manager: Browser lifecycle owner.  Built from ``rng`` when
            omitted.
        rng: Randomness for jitter, scroll depth and device pixel ratio.
        sleep: Coroutine used for jitter and backoff pauses.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        session_manager: BrowserSessionManager | None = None,
        rng: RandomSource | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config or PipelineConfig()
        self._rng = rng or random.Random()
        self._sessions = session_manager or BrowserSessionManager(rng=self._rng)
        self._sleep = sleep

    async def extract(self, url: str) -> ExtractionResult:
        """Fetch *url* in a fresh browser session and extract its article.

        Raises:
            InvalidURL: Before any browser resource is allocated.
            PermanentNavigationError: The target is unreachable.
            ExhaustedRetriesError: Every attempt failed transiently.
        """
        url = validate_url(url)
        logger.info("scraper: starting extraction for %s", url)

        async with self._sessions.session(self.config) as session:
            fetcher = PageFetcher(session.context, self.config, rng=self._rng, sleep=self._sleep)
            html = await fetcher.fetch(url)

        result = process_html(html, url)
        logger.info(
            "scraper: extracted %s (readable=%s, length=%d)",
            url,
            result.is_readable,
            result.length,
        )
        return result


async def extract_content(url: str) -> ExtractionResult:
    """Extract *url* with the process-wide configuration."""
    return await ExtractionPipeline(get_pipeline_config()).extract(url)
