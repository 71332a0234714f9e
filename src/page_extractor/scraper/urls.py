"""URL validation for the extraction pipeline.

Pure functions, no I/O.  Validation runs before any browser resource is
allocated.
"""

from __future__ import annotations

import urllib.parse

from page_extractor.core.exceptions import InvalidURL

#: Schemes the browser is allowed to navigate to.
ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def is_valid_url(url: object) -> bool:
    """Return ``True`` if *url* parses as an absolute http(s) URL with a host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urllib.parse.urlparse(url.strip())
        # ``.port`` raises on out-of-range or non-numeric ports.
        parsed.port  # noqa: B018
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_SCHEMES and bool(parsed.hostname)


def validate_url(url: object) -> str:
    """Return the stripped URL or raise :class:`InvalidURL`.

    Args:
        url: Raw user input.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        InvalidURL: If the input is not a string, cannot be parsed, or does
            not use the ``http`` / ``https`` scheme.
    """
    if not is_valid_url(url):
        raise InvalidURL(str(url))
    return str(url).strip()
