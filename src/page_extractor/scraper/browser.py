"""Per-extraction browser process and context lifecycle.

Each extraction launches its own headless Chromium, opens one isolated
context with a spoofed client fingerprint, and tears everything down when it
finishes.  Contexts are never pooled or reused across extractions.

Install Playwright and download the Chromium browser binary::

    pip install playwright>=1.48
    playwright install chromium
"""

from __future__ import annotations

import logging
import random
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from page_extractor.scraper.config import PipelineConfig
from page_extractor.scraper.timing import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """Live browser resources owned by one extraction.

    Attributes:
        context: Isolated browsing context pages are opened in.
        browser: Chromium instance backing ``context``.
        playwright: Driver connection that launched ``browser``.
        closed: Set once :meth:`BrowserSessionManager.close_context` ran.
    """

    context: BrowserContext
    browser: Browser
    playwright: Playwright
    closed: bool = False


async def _close_quietly(label: str, close: Callable[[], Awaitable[Any]]) -> None:
    try:
        await close()
    except Exception as exc:  # noqa: BLE001
        logger.debug("scraper: ignoring error while closing %s: %s", label, exc)


class BrowserSessionManager:
    """Opens and closes browser sessions.

    Args:
        rng: Source for the device pixel ratio choice.
        playwright_factory: Callable returning an object with an async
            ``start()`` method, ``async_playwright`` by default.  Tests inject
            fakes here.
    """

    def __init__(
        self,
        *,
        rng: RandomSource | None = None,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self._rng = rng or random.Random()
        self._playwright_factory = playwright_factory

    async def open_context(self, config: PipelineConfig) -> BrowserSession:
        """Launch Chromium and open a fingerprinted context.

        Anything acquired before a failure is released before the error
        propagates.
        """
        playwright = await self._playwright_factory().start()
        try:
            browser = await playwright.chromium.launch(
                headless=config.headless,
                handle_sigint=True,
                handle_sigterm=True,
                handle_sighup=True,
            )
        except BaseException:
            await _close_quietly("playwright", playwright.stop)
            raise

        scale_factor = self._rng.choice(config.device_scale_factors)
        try:
            context = await browser.new_context(
                user_agent=config.user_agent,
                viewport=config.viewport,
                device_scale_factor=scale_factor,
            )
        except BaseException:
            await _close_quietly("browser", browser.close)
            await _close_quietly("playwright", playwright.stop)
            raise

        logger.debug("scraper: opened browser context (device_scale_factor=%s)", scale_factor)
        return BrowserSession(context=context, browser=browser, playwright=playwright)

    async def close_context(self, session: BrowserSession) -> None:
        """Close the context, the browser and the driver.  Idempotent.

        Errors raised while closing are logged and swallowed.
        """
        if session.closed:
            return
        session.closed = True
        await _close_quietly("context", session.context.close)
        await _close_quietly("browser", session.browser.close)
        await _close_quietly("playwright", session.playwright.stop)
        logger.debug("scraper: browser session closed")

    @asynccontextmanager
    async def session(self, config: PipelineConfig) -> AsyncIterator[BrowserSession]:
        """Scoped acquisition: the session is closed on every exit path."""
        browser_session = await self.open_context(config)
        try:
            yield browser_session
        finally:
            await self.close_context(browser_session)
