"""Unit tests for environment-backed settings."""

from __future__ import annotations

from dataclasses import MISSING, fields

import pytest
from pydantic import ValidationError

from page_extractor.config.settings import Settings, get_pipeline_config, get_settings
from page_extractor.scraper.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_PROBLEMATIC_SITES,
    SPOOFED_HEADERS,
    PipelineConfig,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    get_pipeline_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_pipeline_config.cache_clear()


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.max_retries == DEFAULT_MAX_RETRIES
        assert settings.retry_delay_ms == 1000
        assert set(settings.problematic_sites) == DEFAULT_PROBLEMATIC_SITES
        assert settings.port == 3000
        assert settings.app_name == "Web Content Extractor"

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXTRACTOR_MAX_RETRIES", "5")
        monkeypatch.setenv("EXTRACTOR_PROBLEMATIC_SITES", '["ft.com", "wsj.com"]')
        monkeypatch.setenv("EXTRACTOR_HEADLESS", "false")

        settings = Settings(_env_file=None)

        assert settings.max_retries == 5
        assert settings.problematic_sites == ["ft.com", "wsj.com"]
        assert settings.headless is False

    def test_rejects_non_positive_retries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXTRACTOR_MAX_RETRIES", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestPipelineConfig:
    def test_built_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXTRACTOR_RETRY_DELAY_MS", "250")
        monkeypatch.setenv("EXTRACTOR_PROBLEMATIC_SITES", '["ft.com"]')

        config = get_pipeline_config()

        assert isinstance(config, PipelineConfig)
        assert config.retry_delay_ms == 250
        assert config.problematic_sites == frozenset({"ft.com"})
        assert dict(config.headers) == dict(SPOOFED_HEADERS)

    def test_cached_per_process(self) -> None:
        assert get_pipeline_config() is get_pipeline_config()

    def test_config_is_immutable(self) -> None:
        config = PipelineConfig()

        with pytest.raises(AttributeError):
            config.max_retries = 10  # type: ignore[misc]
        with pytest.raises(TypeError):
            config.headers["X-Test"] = "1"  # type: ignore[index]

    def test_default_headers_are_built_per_instance(self) -> None:
        headers = next(f for f in fields(PipelineConfig) if f.name == "headers")

        assert headers.default is MISSING
        assert headers.default_factory is not MISSING
        assert PipelineConfig().headers == SPOOFED_HEADERS
        assert PipelineConfig().headers is not PipelineConfig().headers
