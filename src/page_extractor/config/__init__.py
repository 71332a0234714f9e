"""Configuration package for the page extractor.

Re-exports the settings entry points so that callers can write::

    from page_extractor.config import get_pipeline_config
"""

from __future__ import annotations

from page_extractor.config.settings import Settings, get_pipeline_config, get_settings

__all__ = [
    "Settings",
    "get_pipeline_config",
    "get_settings",
]
