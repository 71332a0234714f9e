"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.  Every
variable is prefixed with ``EXTRACTOR_`` (e.g. ``EXTRACTOR_MAX_RETRIES=5``).
Never call ``os.getenv`` directly elsewhere in the codebase.

Usage::

    from page_extractor.config.settings import get_pipeline_config

    config = get_pipeline_config()
    config.max_retries
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from page_extractor.scraper.config import (
    DEFAULT_DOM_READY_TIMEOUT_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_PROBLEMATIC_SITES,
    DEFAULT_RETRY_DELAY_MS,
    USER_AGENT,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
    PipelineConfig,
)


class Settings(BaseSettings):
    """Process-wide configuration backed by environment variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="EXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Retry policy
    # ------------------------------------------------------------------

    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)
    """Maximum number of navigation attempts per extraction."""

    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    """Base backoff unit in milliseconds.  Attempt ``n`` waits ``n`` units."""

    problematic_sites: list[str] = sorted(DEFAULT_PROBLEMATIC_SITES)
    """Domain substrings whose second attempt is downgraded to plain http.
    Supplied as a JSON list, e.g. ``EXTRACTOR_PROBLEMATIC_SITES='["ft.com"]'``."""

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------

    navigation_timeout_ms: int = Field(default=DEFAULT_NAVIGATION_TIMEOUT_MS, ge=0)
    """Timeout passed to ``page.goto``."""

    dom_ready_timeout_ms: int = Field(default=DEFAULT_DOM_READY_TIMEOUT_MS, ge=0)
    """Upper bound on the wait for ``domcontentloaded`` after navigation commits."""

    user_agent: str = USER_AGENT
    """User-agent string presented by every browser context."""

    viewport_width: int = Field(default=VIEWPORT_WIDTH, gt=0)
    viewport_height: int = Field(default=VIEWPORT_HEIGHT, gt=0)

    headless: bool = True
    """Run Chromium without a visible window.  Set to False when debugging locally."""

    # ------------------------------------------------------------------
    # Application behaviour
    # ------------------------------------------------------------------

    app_name: str = "Web Content Extractor"
    """Name reported by the HTTP API and the MCP server."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    host: str = "0.0.0.0"
    """Bind address for ``page-extractor-api``."""

    port: int = 3000
    """Bind port for ``page-extractor-api``."""

    def to_pipeline_config(self) -> PipelineConfig:
        """Build the immutable pipeline configuration from these settings."""
        return PipelineConfig(
            max_retries=self.max_retries,
            retry_delay_ms=self.retry_delay_ms,
            problematic_sites=frozenset(self.problematic_sites),
            navigation_timeout_ms=self.navigation_timeout_ms,
            dom_ready_timeout_ms=self.dom_ready_timeout_ms,
            user_agent=self.user_agent,
            viewport_width=self.viewport_width,
            viewport_height=self.viewport_height,
            headless=self.headless,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Pydantic Settings reads the environment and .env file exactly once per
    process lifetime.  In tests, call ``get_settings.cache_clear()`` after
    patching environment variables.
    """
    return Settings()


@lru_cache
def get_pipeline_config() -> PipelineConfig:
    """Return the process-wide :class:`PipelineConfig`, built on first use."""
    return get_settings().to_pipeline_config()
