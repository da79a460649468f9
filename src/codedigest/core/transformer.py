"""
Per-file text transforms.

Comment removal here is a single regular expression, not a parser. It is
language-agnostic and best effort: it strips ``//``, ``#`` and ``--`` line
comments, ``/* ... */`` blocks and single-line triple-quoted spans, and it
will also strip things that only look like comments, such as ``//`` inside a
URL string or ``#`` in a CSS colour.
"""

import re

from .models import Config

COMMENTS_RE = re.compile(
    r'(//.*)|(/\*[\s\S]*?\*/)|(#.*)|(--.*)|(""".*?""")',
    re.MULTILINE,
)


def remove_comments(text: str) -> str:
    """Delete everything the comment expression matches."""
    return COMMENTS_RE.sub('', text)


def compact(text: str) -> str:
    """Drop blank and whitespace-only lines, keeping the order of the rest."""
    return "\n".join(line for line in text.splitlines() if line.strip())


def transform(raw_text: str, config: Config) -> str:
    """
    Apply the transforms enabled in ``config``.

    Comment removal runs before compaction so that lines emptied by the
    first step are dropped by the second.
    """
    text = raw_text
    if config.remove_comments:
        text = remove_comments(text)
    if config.compact_mode:
        text = compact(text)
    return text
