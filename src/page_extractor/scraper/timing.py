"""Randomness and waiting primitives used by the fetcher.

Every source of non-determinism in a fetch (pre-navigation jitter, scroll
target, device pixel ratio) is drawn from a :class:`RandomSource` handed in
by the caller, and every pause goes through an injectable ``sleep``
coroutine.  Tests pass a seeded :class:`random.Random` and a recording sleep.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol, TypeVar

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from page_extractor.scraper.config import JITTER_MAX_MS, JITTER_MIN_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: ``asyncio.sleep``-compatible coroutine function (seconds).
Sleep = Callable[[float], Awaitable[Any]]


class RandomSource(Protocol):
    """Subset of :class:`random.Random` the pipeline relies on."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


def jitter_seconds(
    rng: RandomSource,
    low_ms: float = JITTER_MIN_MS,
    high_ms: float = JITTER_MAX_MS,
) -> float:
    """Return a human-like pause length in seconds, drawn from ``[low_ms, high_ms]``."""
    return rng.uniform(low_ms, high_ms) / 1000


async def wait_for_condition(condition: Awaitable[Any], timeout_ms: float) -> bool:
    """Wait for *condition* or a deadline, whichever comes first.

    The condition is cancelled when the deadline passes.  A Playwright
    timeout raised by the condition itself counts as reaching the deadline;
    any other exception propagates.

    Args:
        condition: Awaitable that completes when the condition holds.
        timeout_ms: Deadline in milliseconds.

    Returns:
        ``True`` if the condition completed, ``False`` if the deadline won.
    """
    try:
        await asyncio.wait_for(condition, timeout=timeout_ms / 1000)
    except (asyncio.TimeoutError, PlaywrightTimeoutError):
        logger.debug("scraper: condition not met within %.0f ms", timeout_ms)
        return False
    return True
