"""Constants, tuning parameters and the immutable pipeline configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlparse

# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------

#: Maximum number of navigation attempts per extraction.
DEFAULT_MAX_RETRIES: int = 3

#: Base backoff unit (ms).  Attempt ``n`` waits ``n * DEFAULT_RETRY_DELAY_MS``.
DEFAULT_RETRY_DELAY_MS: int = 1000

#: Domain substrings whose second attempt is downgraded from https to http.
DEFAULT_PROBLEMATIC_SITES: frozenset[str] = frozenset(
    {"washingtonpost.com", "bloomberg.com"}
)

#: Browser engine messages that mean retrying cannot help.
PERMANENT_ERROR_PATTERNS: tuple[str, ...] = (
    "net::ERR_NAME_NOT_RESOLVED",
    "net::ERR_NAME_RESOLUTION_FAILED",
    "net::ERR_INVALID_URL",
    "net::ERR_CONNECTION_REFUSED",
    "net::ERR_ABORTED",
)

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

#: Navigation timeout passed to ``page.goto`` (ms).
DEFAULT_NAVIGATION_TIMEOUT_MS: int = 30_000

#: Upper bound on the wait for ``domcontentloaded`` after commit (ms).
DEFAULT_DOM_READY_TIMEOUT_MS: int = 10_000

#: Pre-navigation jitter bounds (ms).
JITTER_MIN_MS: float = 500.0
JITTER_MAX_MS: float = 1500.0

# ---------------------------------------------------------------------------
# Client fingerprint
# ---------------------------------------------------------------------------

USER_AGENT: str = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

VIEWPORT_WIDTH: int = 1920
VIEWPORT_HEIGHT: int = 1080

#: Device pixel ratios the session manager picks from at random.
DEVICE_SCALE_FACTORS: tuple[int, ...] = (1, 2)

#: Extra headers applied to every page.
SPOOFED_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Accept-CH": "Sec-CH-UA-Platform, Sec-CH-UA-Platform-Version",
        "Permissions-Policy": "interest-cohort=()",
        "Accept-Language": "en-US,en;q=0.9",
        "Sec-CH-UA": '"Chromium";v="120", "Google Chrome";v="120"',
        "Sec-CH-UA-Mobile": "?0",
        "Sec-CH-UA-Platform": '"Linux"',
    }
)

# ---------------------------------------------------------------------------
# Sanitising and extraction
# ---------------------------------------------------------------------------

#: Elements removed from the parsed document before extraction.
NOISE_SELECTORS: tuple[str, ...] = (
    "script",
    "style",
    "svg",
    "img",
    "video",
    "iframe",
    '[aria-hidden="true"]',
    ".ad",
    ".cookie-banner",
    ".newsletter-signup",
    ".popup",
    "#cookie-notice",
)

#: Number of raw characters of body text used for the excerpt.
EXCERPT_LENGTH: int = 150


# ---------------------------------------------------------------------------
# Pipeline configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineConfig:
    """Read-only configuration shared by every extraction in the process.

    Built once at startup (see
    :func:`page_extractor.config.settings.get_pipeline_config`) and passed
    explicitly into :class:`~page_extractor.scraper.pipeline.ExtractionPipeline`.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    problematic_sites: frozenset[str] = DEFAULT_PROBLEMATIC_SITES
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    dom_ready_timeout_ms: int = DEFAULT_DOM_READY_TIMEOUT_MS
    headers: Mapping[str, str] = field(default_factory=lambda: SPOOFED_HEADERS)
    user_agent: str = USER_AGENT
    viewport_width: int = VIEWPORT_WIDTH
    viewport_height: int = VIEWPORT_HEIGHT
    device_scale_factors: tuple[int, ...] = DEVICE_SCALE_FACTORS
    headless: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        # Freeze containers handed in by callers.
        object.__setattr__(self, "problematic_sites", frozenset(self.problematic_sites))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "device_scale_factors", tuple(self.device_scale_factors))

    @property
    def viewport(self) -> dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    def is_problematic_site(self, url: str) -> bool:
        """Return ``True`` if the URL's host contains a problematic-site entry."""
        host = (urlparse(url).hostname or "").lower()
        return any(site.lower() in host for site in self.problematic_sites)
