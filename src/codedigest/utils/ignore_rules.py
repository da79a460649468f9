"""
Ignore-rule handling for codedigest.

Patterns are glob-like strings in which ``.`` is literal and ``*`` matches
any run of characters. A compiled pattern matches a path when it is found
anywhere inside the path string; matching is deliberately loose (no
anchoring to path boundaries), so ``build`` also matches ``app/build/out``
and ``rebuild.sh``.
"""

import logging
import re
from typing import Iterable, List, Optional, Pattern

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> Optional[Pattern[str]]:
    """
    Translate one ignore pattern into a regular expression.

    Args:
        pattern: Raw pattern, e.g. ``*.log`` or ``build/``.

    Returns:
        The compiled expression, or None if the pattern is not a valid
        expression after translation (such a pattern never matches).
    """
    translated = pattern.replace('.', '\\.').replace('*', '.*')
    try:
        return re.compile(translated)
    except re.error as e:
        logger.warning(f"Ignoring invalid pattern '{pattern}': {e}")
        return None


def should_ignore(path: str, patterns: Iterable[str]) -> bool:
    """
    Check a relative path against raw patterns.

    Args:
        path: Slash-separated path relative to the source root.
        patterns: Raw ignore patterns.

    Returns:
        True if any pattern is found anywhere in ``path``.
    """
    return IgnoreRuleSet(patterns).should_ignore(path)


def read_ignore_rules(text: str) -> List[str]:
    """Parse ignore-file text: trimmed lines without blanks or ``#`` comments."""
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith('#'):
            rules.append(line)
    return rules


class IgnoreRuleSet:
    """An ordered set of compiled ignore patterns, built once per run."""

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns: List[str] = list(patterns)
        self._compiled = [c for c in (compile_pattern(p) for p in self.patterns) if c is not None]

    def __len__(self) -> int:
        return len(self.patterns)

    def should_ignore(self, path: str) -> bool:
        """Return True if any compiled pattern is found in ``path``."""
        return any(regex.search(path) for regex in self._compiled)
