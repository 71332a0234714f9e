"""Whitespace normalisation for textual article fields.

Applied to ``title``, ``text_content`` and ``excerpt`` before a result leaves
the pipeline.  The transform is deterministic and idempotent:
``normalize_text(normalize_text(x)) == normalize_text(x)``.
"""

from __future__ import annotations

import re

_LINE_BREAKS = re.compile(r"\r\n?")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")
_SPACE_AROUND_NEWLINE = re.compile(r" *\n *")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_text(text: str | None) -> str:
    """Normalise whitespace in *text*.

    Steps, in order:

    1. ``\\r\\n`` and lone ``\\r`` become ``\\n``.
    2. Runs of spaces and tabs become a single space.
    3. Spaces touching a line break are dropped.
    4. Three or more consecutive line breaks become two (one blank line).
    5. Leading and trailing whitespace is trimmed.

    Args:
        text: Raw text.  ``None`` and ``""`` are accepted.

    Returns:
        The normalised string; ``""`` for empty or absent input.
    """
    if not text:
        return ""
    text = _LINE_BREAKS.sub("\n", text)
    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()
