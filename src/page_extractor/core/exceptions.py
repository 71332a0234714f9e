"""Application-wide exception hierarchy for the page extractor.

All custom exceptions subclass ``PageExtractorError``, enabling consistent
error handling and structured logging across the pipeline and its HTTP / MCP
front-ends.

Hierarchy::

    PageExtractorError
    ├── InvalidURL
    ├── NavigationError              (error: ClassifiedError)
    │   ├── PermanentNavigationError
    │   └── TransientNavigationError
    └── ExhaustedRetriesError        (last_error: ClassifiedError, attempts: int)

Only ``InvalidURL``, ``PermanentNavigationError`` and
``ExhaustedRetriesError`` escape :func:`ExtractionPipeline.extract`.
``TransientNavigationError`` is raised and caught inside a single fetch
attempt.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ErrorKind(str, enum.Enum):
    """Retry classification of a navigation failure."""

    PERMANENT = "permanent"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class ClassifiedError:
    """Tagged navigation failure.

    Attributes:
        kind: Whether retrying can help.
        message: Message reported by the browser engine (or synthesised for
            missing / non-2xx responses).
        attempt: 0-based index of the attempt that produced the failure, or
            ``None`` when the error was classified outside the retry loop.
    """

    kind: ErrorKind
    message: str
    attempt: int | None = None

    @property
    def is_permanent(self) -> bool:
        return self.kind is ErrorKind.PERMANENT


class PageExtractorError(Exception):
    """Base class for all page extractor exceptions."""


class InvalidURL(PageExtractorError):
    """Raised when the input is not a parseable ``http``/``https`` URL.

    Raised before any browser resource is allocated.

    Args:
        url: The rejected input string.
    """

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL format: {url!r}")
        self.url = url


# ---------------------------------------------------------------------------
# Navigation exceptions
# ---------------------------------------------------------------------------


class NavigationError(PageExtractorError):
    """Base class for failures while loading a page in the browser.

    Args:
        error: The classified failure.
    """

    def __init__(self, error: ClassifiedError) -> None:
        super().__init__(error.message)
        self.error = error


class PermanentNavigationError(NavigationError):
    """Raised when the target is categorically unreachable.

    Name resolution failures, invalid URLs and refused connections abort all
    remaining attempts immediately.
    """


class TransientNavigationError(NavigationError):
    """Raised inside an attempt for timeouts, missing or non-2xx responses."""


class ExhaustedRetriesError(PageExtractorError):
    """Raised after every allowed attempt failed with a transient error.

    Args:
        last_error: Classification of the final attempt's failure.
        attempts: Number of attempts made.
    """

    def __init__(self, last_error: ClassifiedError, attempts: int) -> None:
        super().__init__(
            f"Failed to load page after {attempts} attempts: {last_error.message}"
        )
        self.last_error = last_error
        self.attempts = attempts
