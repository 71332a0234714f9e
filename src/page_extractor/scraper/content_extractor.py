"""Article extraction from a sanitised document.

Primary extractor: ``trafilatura`` main-content extraction in precision mode,
with title / author / site name / description read through
``trafilatura.extract_metadata``.  ``trafilatura.extract`` returns ``None``
when it finds no main content, which selects the fallback.
Fallback: the whole ``<body>`` (markup and text) with the ``<title>`` as the
title.  The fallback never raises.

Fields returned here are raw; whitespace normalisation happens when the
pipeline builds the final result.
"""

from __future__ import annotations

import html as html_module
import logging
from dataclasses import dataclass
from typing import Any

import trafilatura
from bs4 import BeautifulSoup

from page_extractor.scraper.config import EXCERPT_LENGTH

logger = logging.getLogger(__name__)

#: Options shared by every ``trafilatura.extract`` call.  Precision mode, no
#: external fallback algorithms: ``None`` when a page has no main content.
_EXTRACT_OPTIONS: dict[str, Any] = {
    "include_comments": False,
    "include_tables": True,
    "include_images": False,
    "favor_precision": True,
    "fast": True,
}

# ---------------------------------------------------------------------------
# Output dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtractedArticle:
    """Raw result of extracting an article from a page.

    Attributes:
        title: Article or document title.
        content: HTML fragment holding the article (or the whole body).
        text: Plain text of ``content``.
        excerpt: Up to :data:`EXCERPT_LENGTH` raw characters of summary text.
        byline: Author, or ``None``.  Always ``None`` when not readable.
        site_name: Publisher name, or ``None``.  Always ``None`` when not
            readable.
        is_readable: ``True`` iff the primary pass found an article.
    """

    title: str
    content: str
    text: str
    excerpt: str
    byline: str | None
    site_name: str | None
    is_readable: bool


@dataclass(frozen=True)
class MainContent:
    """Main content found by trafilatura.

    Attributes:
        text: Plain text, one paragraph per line.
        content: HTML fragment of the same content.
    """

    text: str
    content: str

    @property
    def first_paragraph(self) -> str:
        return next((line.strip() for line in self.text.splitlines() if line.strip()), "")


@dataclass(frozen=True)
class _PageMetadata:
    title: str | None = None
    author: str | None = None
    sitename: str | None = None
    description: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _document_title(document: BeautifulSoup) -> str:
    if document.title is None:
        return ""
    return document.title.get_text()


def _run_trafilatura(html: str, url: str, output_format: str) -> str | None:
    try:
        return trafilatura.extract(html, url=url, output_format=output_format, **_EXTRACT_OPTIONS)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "scraper: trafilatura %s extraction failed for %s: %s", output_format, url, exc
        )
        return None


def _body_markup(markup: str) -> str:
    soup = BeautifulSoup(markup, "html.parser")
    return soup.body.decode_contents().strip() if soup.body is not None else markup.strip()


def _paragraph_markup(text: str) -> str:
    return "\n".join(
        f"<p>{html_module.escape(line.strip())}</p>" for line in text.splitlines() if line.strip()
    )


def _read_metadata(document: BeautifulSoup, url: str) -> _PageMetadata:
    """Read page-level metadata via trafilatura; empty metadata on failure."""
    try:
        meta = trafilatura.extract_metadata(str(document), default_url=url)
    except Exception as exc:  # noqa: BLE001
        logger.warning("scraper: trafilatura metadata extraction failed for %s: %s", url, exc)
        return _PageMetadata()
    if meta is None:
        return _PageMetadata()
    return _PageMetadata(
        title=getattr(meta, "title", None) or None,
        author=getattr(meta, "author", None) or None,
        sitename=getattr(meta, "sitename", None) or None,
        description=getattr(meta, "description", None) or None,
    )


# ---------------------------------------------------------------------------
# Public extraction functions
# ---------------------------------------------------------------------------


def extract_main_content(document: BeautifulSoup, url: str) -> MainContent | None:
    """Run trafilatura's main-content extraction over *document*.

    Args:
        document: Sanitised document.
        url: Page URL, passed to trafilatura for its heuristics.

    Returns:
        The main content, or ``None`` when trafilatura finds no article text.
    """
    html = str(document)
    text = _run_trafilatura(html, url, "txt")
    if not text or not text.strip():
        return None
    markup = _run_trafilatura(html, url, "html")
    content = _body_markup(markup) if markup else _paragraph_markup(text)
    return MainContent(text=text, content=content)


def extract_fallback(document: BeautifulSoup) -> ExtractedArticle:
    """Use the whole document body as the article.

    Args:
        document: Sanitised document.

    Returns:
        An unreadable :class:`ExtractedArticle`.  A missing or empty body
        yields empty strings.
    """
    body = document.body
    content = body.decode_contents() if body is not None else ""
    text = body.get_text() if body is not None else ""
    return ExtractedArticle(
        title=_document_title(document),
        content=content,
        text=text,
        excerpt=text[:EXCERPT_LENGTH],
        byline=None,
        site_name=None,
        is_readable=False,
    )


def extract_article(document: BeautifulSoup, url: str) -> ExtractedArticle:
    """Extract the main article from a sanitised document.

    Runs the trafilatura pass first and falls back to
    :func:`extract_fallback` when it finds nothing.

    Args:
        document: Sanitised document (see
            :func:`~page_extractor.scraper.sanitizer.sanitize_document`).
        url: Page URL, used by trafilatura for metadata heuristics.

    Returns:
        An :class:`ExtractedArticle`.
    """
    main = extract_main_content(document, url)
    if main is None:
        logger.info("scraper: no main content in %s; using body fallback", url)
        return extract_fallback(document)

    meta = _read_metadata(document, url)
    excerpt = meta.description or main.first_paragraph
    return ExtractedArticle(
        title=meta.title or _document_title(document),
        content=main.content,
        text=main.text,
        excerpt=excerpt[:EXCERPT_LENGTH],
        byline=meta.author,
        site_name=meta.sitename,
        is_readable=True,
    )
