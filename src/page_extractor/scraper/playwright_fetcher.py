"""Playwright page fetcher with classified, bounded retries.

A fetch is a small state machine::

    Attempting(0) ──► Succeeded(html)
         │
         ├─ permanent error ──► PermanentlyFailed(error)
         ├─ transient error, attempts left ──► Attempting(n + 1)
         └─ transient error, none left ──► Exhausted(last_error, attempts)

Each attempt opens a fresh page in the shared browser context, applies the
spoofed headers, pauses for a random 0.5–1.5 s, navigates with the
``"commit"`` readiness condition, waits (bounded) for ``domcontentloaded``,
scrolls to a random depth and captures the rendered HTML.  The page is
always closed before the next attempt starts.

Which URL variant an attempt uses and whether it is preceded by a backoff
is decided by :func:`select_strategy`, a pure function of the attempt index
and whether the host is on the problematic-site list.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import random
from dataclasses import dataclass, replace
from typing import Union

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from page_extractor.core.exceptions import (
    ClassifiedError,
    ErrorKind,
    ExhaustedRetriesError,
    NavigationError,
    PermanentNavigationError,
    TransientNavigationError,
)
from page_extractor.scraper.config import PERMANENT_ERROR_PATTERNS, PipelineConfig
from page_extractor.scraper.timing import RandomSource, Sleep, jitter_seconds, wait_for_condition

logger = logging.getLogger(__name__)

#: In-page scroll to a fraction of the document height; tolerates a missing body.
_SCROLL_SCRIPT = """
(fraction) => {
    const height = document.body ? document.body.scrollHeight : 0;
    window.scrollTo({ top: fraction * height, behavior: 'smooth' });
}
"""

# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------


def classify_error(message: str, attempt: int | None = None) -> ClassifiedError:
    """Classify a browser error message as permanent or transient.

    Args:
        message: Error message reported by Playwright / the browser.
        attempt: Attempt index to record on the result.

    Returns:
        A :class:`ClassifiedError`; permanent iff *message* contains one of
        :data:`PERMANENT_ERROR_PATTERNS`.
    """
    permanent = any(pattern in message for pattern in PERMANENT_ERROR_PATTERNS)
    kind = ErrorKind.PERMANENT if permanent else ErrorKind.TRANSIENT
    return ClassifiedError(kind=kind, message=message, attempt=attempt)


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------


class StrategyVariant(str, enum.Enum):
    NORMAL = "normal"
    FORCE_LEGACY_PROTOCOL = "forceLegacyProtocol"
    DELAYED = "delayed"


@dataclass(frozen=True)
class Strategy:
    """How a single attempt navigates.

    Attributes:
        variant: Which branch of the retry policy produced this strategy.
        downgrade: Rewrite ``https://`` to ``http://`` before navigating.
    """

    variant: StrategyVariant
    downgrade: bool = False

    def target_url(self, url: str) -> str:
        if self.downgrade and url.startswith("https://"):
            return "http://" + url[len("https://"):]
        return url

    def backoff_ms(self, attempt: int, retry_delay_ms: int) -> int:
        if self.variant is StrategyVariant.DELAYED:
            return retry_delay_ms * attempt
        return 0


def select_strategy(attempt: int, is_problematic_site: bool) -> Strategy:
    """Return the navigation strategy for a 0-based attempt index.

    - Attempt 0 navigates normally.
    - Attempt 1 on a problematic site downgrades to http without backoff.
    - Every other attempt backs off, downgrading on even attempt indices.
    """
    if attempt == 0:
        return Strategy(StrategyVariant.NORMAL)
    if attempt == 1 and is_problematic_site:
        return Strategy(StrategyVariant.FORCE_LEGACY_PROTOCOL, downgrade=True)
    return Strategy(StrategyVariant.DELAYED, downgrade=attempt % 2 == 0)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Succeeded:
    html: str
    attempts: int


@dataclass(frozen=True)
class PermanentlyFailed:
    error: ClassifiedError


@dataclass(frozen=True)
class Exhausted:
    last_error: ClassifiedError
    attempts: int


FetchState = Union[Attempting, Succeeded, PermanentlyFailed, Exhausted]


@dataclass(frozen=True)
class FetchAttempt:
    """Record of one navigation try.

    Attributes:
        attempt: 0-based attempt index.
        strategy: Strategy variant used.
        html: Captured HTML on success.
        error: Classified failure otherwise.
    """

    attempt: int
    strategy: StrategyVariant
    html: str | None = None
    error: ClassifiedError | None = None


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class PageFetcher:
    """Drives navigation attempts against one browser context.

    Args:
        context: Browser context owned by the current extraction.
        config: Pipeline configuration.
        rng: Source for jitter and scroll depth.
        sleep: Coroutine used for jitter and backoff pauses.
    """

    def __init__(
        self,
        context: BrowserContext,
        config: PipelineConfig,
        *,
        rng: RandomSource | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._context = context
        self._config = config
        self._rng = rng or random.Random()
        self._sleep = sleep
        self.history: list[FetchAttempt] = []

    async def fetch(self, url: str) -> str:
        """Return the rendered HTML of *url*.

        Raises:
            PermanentNavigationError: On the first permanent failure.
            ExhaustedRetriesError: When every attempt failed transiently.
        """
        state = await self.run(url)
        if isinstance(state, Succeeded):
            return state.html
        if isinstance(state, PermanentlyFailed):
            logger.warning("scraper: permanent failure for %s: %s", url, state.error.message)
            raise PermanentNavigationError(state.error)
        logger.warning(
            "scraper: giving up on %s after %d attempts: %s",
            url,
            state.attempts,
            state.last_error.message,
        )
        raise ExhaustedRetriesError(state.last_error, state.attempts)

    async def run(self, url: str) -> FetchState:
        """Run the state machine to a terminal state."""
        is_problematic = self._config.is_problematic_site(url)
        state: FetchState = Attempting(0)
        while isinstance(state, Attempting):
            state = await self._step(url, state.attempt, is_problematic)
        return state

    async def _step(self, url: str, attempt: int, is_problematic: bool) -> FetchState:
        strategy = select_strategy(attempt, is_problematic)
        backoff_ms = strategy.backoff_ms(attempt, self._config.retry_delay_ms)
        if backoff_ms:
            logger.debug("scraper: backing off %d ms before attempt %d", backoff_ms, attempt)
            await self._sleep(backoff_ms / 1000)

        target = strategy.target_url(url)
        logger.info(
            "scraper: attempt %d for %s (strategy=%s)", attempt, target, strategy.variant.value
        )
        try:
            html = await self._attempt(target)
        except NavigationError as exc:
            error = replace(exc.error, attempt=attempt)
        except Exception as exc:  # noqa: BLE001
            error = classify_error(str(exc) or type(exc).__name__, attempt)
        else:
            self.history.append(FetchAttempt(attempt, strategy.variant, html=html))
            return Succeeded(html=html, attempts=attempt + 1)

        self.history.append(FetchAttempt(attempt, strategy.variant, error=error))
        if error.is_permanent:
            return PermanentlyFailed(error)
        if attempt + 1 >= self._config.max_retries:
            return Exhausted(last_error=error, attempts=attempt + 1)
        logger.warning("scraper: attempt %d failed, retrying: %s", attempt + 1, error.message)
        return Attempting(attempt + 1)

    async def _attempt(self, target: str) -> str:
        page = await self._context.new_page()
        try:
            await page.set_extra_http_headers(dict(self._config.headers))
            await self._sleep(jitter_seconds(self._rng))

            response = await page.goto(
                target,
                wait_until="commit",
                timeout=self._config.navigation_timeout_ms,
            )
            if response is None:
                raise TransientNavigationError(
                    ClassifiedError(ErrorKind.TRANSIENT, "No response received")
                )
            if not response.ok:
                raise TransientNavigationError(
                    ClassifiedError(
                        ErrorKind.TRANSIENT,
                        f"HTTP error: {response.status} {response.status_text}",
                    )
                )

            timeout_ms = self._config.dom_ready_timeout_ms
            await wait_for_condition(
                page.wait_for_load_state("domcontentloaded", timeout=timeout_ms),
                timeout_ms,
            )
            await self._scroll(page)
            return await page.content()
        finally:
            try:
                await page.close()
            except Exception as exc:  # noqa: BLE001
                logger.debug("scraper: ignoring error while closing page: %s", exc)

    async def _scroll(self, page: Page) -> None:
        """Scroll to a random depth; failures inside the page are ignored."""
        try:
            await page.evaluate(_SCROLL_SCRIPT, self._rng.random())
        except PlaywrightError as exc:
            logger.debug("scraper: scroll failed, continuing: %s", exc)
