"""Text normalization for leaf text and verbatim code blocks.

Leaf text (titles, descriptions, bullets) has every whitespace run collapsed
to a single space. Verbatim code keeps its indentation and interior blank
lines; only the edges and trailing blanks are trimmed.
"""

from __future__ import annotations

import re


_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_BLANKS_RE = re.compile(r"[ \t]+$", re.MULTILINE)


def normalize_text(text: str | None) -> str:
    """Collapse whitespace runs to one space and trim both ends."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_code(content: str | None) -> str:
    """Trim a verbatim code block.

    Steps, in order:
    1. Strip trailing spaces/tabs from every line.
    2. Drop one leading newline, unless the content opens with a blank-line run.
    3. Drop one trailing newline, unless the content closes with a blank-line run.

    Re-applying the function to its own output returns it unchanged.

    Examples:
        >>> normalize_code("\\nfoo();  \\n")
        'foo();'
    """
    if not content:
        return ""

    text = _TRAILING_BLANKS_RE.sub("", content)

    if text.startswith("\n") and not text.startswith("\n\n"):
        text = text[1:]

    if text.endswith("\n") and not text.endswith("\n\n"):
        text = text[:-1]

    return text
