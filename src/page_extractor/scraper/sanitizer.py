"""HTML sanitising ahead of article extraction.

Two passes:

- **String pass** (:func:`strip_stylesheets`): stylesheet ``<link>`` tags and
  inline ``<style>`` blocks are removed with regular expressions before the
  document is parsed, so the parser never builds nodes for them.
- **Tree pass** (:func:`sanitize_document`): elements matching
  :data:`~page_extractor.scraper.config.NOISE_SELECTORS` are dropped and runs
  of spaces / tabs inside text nodes are collapsed.  Block structure is left
  alone.

The tree pass works on a copy; neither the raw HTML string nor the parsed
document handed in is modified.
"""

from __future__ import annotations

import copy
import logging
import re

from bs4 import BeautifulSoup, NavigableString, Tag

from page_extractor.scraper.config import NOISE_SELECTORS

logger = logging.getLogger(__name__)

_STYLESHEET_LINK_RE = re.compile(r"<link[^>]*stylesheet[^>]*>", re.IGNORECASE)
_STYLE_BLOCK_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")


def strip_stylesheets(html: str) -> str:
    """Remove stylesheet links and inline style blocks from raw HTML."""
    html = _STYLESHEET_LINK_RE.sub("", html)
    return _STYLE_BLOCK_RE.sub("", html)


def parse_html(html: str) -> BeautifulSoup:
    """Strip stylesheets from *html* and parse the remainder."""
    return BeautifulSoup(strip_stylesheets(html), "html.parser")


def _collapse_whitespace(root: Tag) -> None:
    """Collapse space/tab runs in every plain text node below *root*."""
    # Comments, CDATA and doctypes are NavigableString subclasses; skip them.
    for node in list(root.descendants):
        if type(node) is not NavigableString:
            continue
        collapsed = _HORIZONTAL_SPACE_RE.sub(" ", node)
        if collapsed != node:
            node.replace_with(NavigableString(collapsed))


def sanitize_document(document: BeautifulSoup) -> BeautifulSoup:
    """Return a cleaned copy of *document*.

    Args:
        document: Parsed page, as returned by :func:`parse_html`.

    Returns:
        A new document without noise elements and with collapsed horizontal
        whitespace in the body's text nodes.
    """
    cleaned = copy.copy(document)

    removed = 0
    for element in cleaned.select(", ".join(NOISE_SELECTORS)):
        # Descendants of an already removed match are gone with it.
        if element.decomposed:
            continue
        element.decompose()
        removed += 1
    logger.debug("scraper: sanitizer removed %d noise elements", removed)

    _collapse_whitespace(cleaned.body or cleaned)
    return cleaned
