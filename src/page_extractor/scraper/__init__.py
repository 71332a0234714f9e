"""Fetch-and-extract pipeline.

Turns a URL into a normalised article record by driving a headless Chromium
session and running a two-tier extraction over the rendered HTML.

Sub-modules:
- ``config``             — constants, tuning parameters and ``PipelineConfig``
- ``urls``               — http/https URL validation
- ``timing``             — randomness source, jitter and bounded waits
- ``browser``            — per-extraction browser process / context lifecycle
- ``playwright_fetcher`` — navigation retry state machine
- ``sanitizer``          — stylesheet stripping and noise-element removal
- ``content_extractor``  — trafilatura primary pass with deterministic fallback
- ``text_normalizer``    — whitespace normalisation of textual fields
- ``pipeline``           — orchestration and guaranteed teardown
"""
