"""Shared pytest fixtures for page extractor tests.

Fixture summary
---------------
rng             — Seeded ``random.Random`` so jitter and scroll depth repeat.
sleep_recorder  — Awaitable stand-in for ``asyncio.sleep`` that records
                  every requested pause instead of waiting.
fake_browser    — Fake Playwright driver / browser / context triple wired
                  into a ``playwright_factory`` callable.

No test launches a real browser or touches the network.  Pages are built
with :func:`make_page`, which mimics the subset of ``playwright.async_api.Page``
the fetcher uses.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

ARTICLE_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
  <title>Test Title</title>
  <link rel="stylesheet" href="/static/site.css">
  <style>body { color: red; }</style>
</head>
<body>
  <nav><a href="/">Home</a> <a href="/news">News</a></nav>
  <article>
    <h1>Test Title</h1>
    <p>The first paragraph of the story, which has a few commas, and some words.</p>
    <p>A second paragraph   with     irregular spacing.</p>
    <p>Council members met on Tuesday evening to debate the new harbour budget,
    which sets aside funds for dredging, a repaired sea wall and a small ferry
    terminal. Residents who spoke during the public session asked for more
    frequent crossings in winter and for the ticket office to open earlier.
    The final vote is expected next month after a second round of hearings.</p>
  </article>
  <script>window.tracking = true;</script>
  <footer>Copyright Example News</footer>
</body>
</html>
"""

LINKS_ONLY_HTML = """
<html>
<head><title>Link Directory</title></head>
<body><div><a href="/a">Alpha</a> <a href="/b">Beta</a> <a href="/c">Gamma</a></div></body>
</html>
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class SleepRecorder:
    """Records requested pauses (seconds) without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_response(status: int = 200, status_text: str = "OK") -> MagicMock:
    """Return a fake navigation response."""
    response = MagicMock()
    response.status = status
    response.status_text = status_text
    response.ok = 200 <= status < 300
    return response


def make_page(
    html: str = ARTICLE_HTML,
    *,
    response: Any = None,
    goto_error: BaseException | None = None,
) -> MagicMock:
    """Return a fake page whose ``goto`` yields *response* or raises *goto_error*.

    A successful 200 response is used when neither is given.
    """
    page = MagicMock()
    page.set_extra_http_headers = AsyncMock()
    if goto_error is not None:
        page.goto = AsyncMock(side_effect=goto_error)
    else:
        page.goto = AsyncMock(return_value=response if response is not None else make_response())
    page.wait_for_load_state = AsyncMock()
    page.evaluate = AsyncMock()
    page.content = AsyncMock(return_value=html)
    page.close = AsyncMock()
    return page


def make_context(*pages: MagicMock) -> MagicMock:
    """Return a fake browser context handing out *pages* in order."""
    context = MagicMock()
    context.new_page = AsyncMock(side_effect=list(pages))
    context.close = AsyncMock()
    return context


@dataclass
class FakeBrowser:
    """Fake Playwright object graph used by session manager tests."""

    context: MagicMock = field(default_factory=make_context)
    browser: MagicMock = field(default_factory=MagicMock)
    playwright: MagicMock = field(default_factory=MagicMock)
    factory: MagicMock = field(default_factory=MagicMock)

    def __post_init__(self) -> None:
        self.browser.new_context = AsyncMock(return_value=self.context)
        self.browser.close = AsyncMock()
        self.playwright.chromium.launch = AsyncMock(return_value=self.browser)
        self.playwright.stop = AsyncMock()
        starter = MagicMock()
        starter.start = AsyncMock(return_value=self.playwright)
        self.factory.return_value = starter

    def serve(self, *pages: MagicMock) -> None:
        self.context.new_page = AsyncMock(side_effect=list(pages))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def fake_browser() -> FakeBrowser:
    return FakeBrowser()
