"""
Token-budgeted artifact writer.

A digest is written as one artifact, or, when a token budget is set, as a
sequence of numbered parts. Every part starts with the same preamble
(header plus tree block). Sections that would overflow the current part
roll over to a new one; a section too large for any part is split across
parts with a truncation marker at the end of one part and a continuation
marker at the start of the next.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional

from .tokenizer import TokenCounter

logger = logging.getLogger(__name__)

SAFETY_MARGIN = 500
MIN_USABLE_TOKENS = 1000
CHARS_PER_TOKEN = 3

TRUNCATION_MARKER = "\n\n... [File truncated: continued in next part] ...\n"
CONTINUATION_MARKER = "... [Continued from previous part: {path}] ...\n\n"


def sanitize_filename(name: str) -> str:
    """Sanitize a string for use as a filename."""
    # Replace invalid characters with underscores
    sanitized = re.sub(r'[<>:"/\\|?*]', '_', name)
    # Remove any trailing dots or spaces (Windows issue)
    sanitized = sanitized.rstrip('. ')
    # Limit length to avoid path length issues
    if len(sanitized) > 100:
        sanitized = sanitized[:100]
    return sanitized or "Project"


@dataclass
class PartState:
    """Mutable counters for the artifacts of one run."""

    part_index: int = 1
    handle: Optional[IO[str]] = None
    part_tokens: int = 0
    overhead_tokens: int = 0
    total_tokens: int = 0
    files: List[Path] = field(default_factory=list)


class PartWriter:
    """
    Writes formatted sections into one or more artifacts.

    Use as a context manager; the first part is opened on entry and the
    open part is closed on exit, whether or not the run succeeded.
    """

    def __init__(self, output_dir: Path, base_name: str, token_limit: int,
                 preamble: str, counter: Optional[TokenCounter] = None):
        """
        Args:
            output_dir: Directory the artifacts are written to (created if missing)
            base_name: Artifact name stem, e.g. ``MyApp_Digest``
            token_limit: Maximum tokens per part; 0 writes one unnumbered artifact
            preamble: Header and tree text written at the top of every part
            counter: Token counter; required when ``token_limit`` is set
        """
        if token_limit > 0 and counter is None:
            raise ValueError("A token counter is required when a token limit is set")

        self.output_dir = Path(output_dir)
        self.base_name = sanitize_filename(base_name)
        self.token_limit = token_limit
        self.preamble = preamble
        self.counter = counter
        self.state = PartState()

    def __enter__(self) -> 'PartWriter':
        self.start_new_part()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close_current_part()

    @property
    def files(self) -> List[Path]:
        """Artifacts created so far, in creation order."""
        return list(self.state.files)

    @property
    def total_tokens(self) -> int:
        return self.state.total_tokens

    def _count(self, text: str) -> int:
        return self.counter.count(text) if self.counter is not None else 0

    def _next_path(self) -> Path:
        if self.token_limit > 0:
            return self.output_dir / f"{self.base_name}_Part{self.state.part_index}.txt"
        return self.output_dir / f"{self.base_name}.txt"

    def start_new_part(self) -> Path:
        """Close the open part and open the next one, writing the preamble."""
        self.close_current_part()
        self.output_dir.mkdir(parents=True, exist_ok=True)

        path = self._next_path()
        self.state.handle = open(path, 'w', encoding='utf-8')
        self.state.files.append(path)
        self.state.part_index += 1

        self.state.handle.write(self.preamble)
        if self.token_limit > 0:
            self.state.overhead_tokens = self._count(self.preamble)
        self.state.part_tokens = self.state.overhead_tokens
        logger.debug(f"Opened {path.name} ({self.state.overhead_tokens} preamble tokens)")
        return path

    def close_current_part(self) -> None:
        """Flush and close the open part; safe to call repeatedly."""
        handle, self.state.handle = self.state.handle, None
        if handle is None:
            return
        try:
            handle.flush()
            handle.close()
        except Exception as e:
            logger.error(f"Error closing digest part: {e}")

    def _write(self, text: str) -> None:
        if self.state.handle is None:
            raise RuntimeError("No digest part is open")
        self.state.handle.write(text)

    def write_content(self, path: str, content: str, tokens: int) -> None:
        """
        Append one formatted section, rolling over or splitting as needed.

        Args:
            path: Source-relative path of the file, used in the continuation marker
            content: The formatted section
            tokens: Token count of ``content``
        """
        state = self.state
        if self.token_limit > 0 and state.part_tokens + tokens > self.token_limit:
            if tokens > self.token_limit - state.overhead_tokens:
                self._write_large_file_split(path, content)
                state.total_tokens += tokens
                return
            self.start_new_part()

        self._write(content)
        state.part_tokens += tokens
        state.total_tokens += tokens

    def _write_counted(self, text: str) -> None:
        self._write(text)
        self.state.part_tokens += self._count(text)

    def _write_large_file_split(self, path: str, content: str) -> None:
        """Split ``content`` across parts, marking each boundary."""
        state = self.state
        fresh_part = state.part_tokens == state.overhead_tokens
        if not fresh_part and self.token_limit - state.part_tokens - SAFETY_MARGIN < MIN_USABLE_TOKENS:
            self.start_new_part()

        remaining = content
        while True:
            char_limit = max((self.token_limit - state.part_tokens) * CHARS_PER_TOKEN,
                             MIN_USABLE_TOKENS * CHARS_PER_TOKEN)
            if len(remaining) <= char_limit:
                self._write_counted(remaining)
                return

            head, remaining = remaining[:char_limit], remaining[char_limit:]
            self._write_counted(head + TRUNCATION_MARKER)
            self.start_new_part()
            self._write_counted(CONTINUATION_MARKER.format(path=path))
            logger.debug(f"Split {path} across parts {state.part_index - 2} and {state.part_index - 1}")
