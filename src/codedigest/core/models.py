"""
Core data models for codedigest.

This module contains the fundamental data structures used throughout
the application: run configuration, collected file entries, and the
state values emitted while a digest is being produced.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class OutputFormat(str, Enum):
    """Framing used around the header, tree and file sections."""

    PLAIN = "plain"
    MARKDOWN = "markdown"
    XML = "xml"


# Named exclude-pattern bundles offered to the caller
IGNORE_PRESETS: Dict[str, Tuple[str, ...]] = {
    'android': ('build', '.gradle', 'local.properties', '.idea', '*.png', '*.jpg', '*.so', '*.aar'),
    'web': ('node_modules', '.next', 'dist', 'build', 'yarn.lock', 'package-lock.json'),
    'python': ('__pycache__', '*.pyc', 'venv', '.venv', '.git', '.ipynb_checkpoints'),
    'media': ('*.mp4', '*.mp3', '*.mov', '*.jpg', '*.png', '*.zip'),
}


@dataclass(frozen=True)
class Config:
    """Configuration for a single digest run.

    Instances are immutable; build a new one with ``dataclasses.replace``
    instead of mutating a shared instance.
    """

    source: Optional[str] = None
    output_dir: Path = Path('output')
    custom_ignore_file: Optional[str] = None
    exclude_patterns: Tuple[str, ...] = ()

    use_gitignore: bool = True
    remove_comments: bool = False
    compact_mode: bool = False
    skip_tree: bool = False
    show_token_count: bool = True

    output_format: OutputFormat = OutputFormat.PLAIN
    max_file_size_kb: int = 0  # 0 means unlimited
    token_limit: int = 0  # 0 means a single, unnumbered artifact

    github_token: str = field(default_factory=lambda: os.getenv('GITHUB_TOKEN', ''))
    branch: Optional[str] = None
    token_encoder: str = "cl100k_base"

    # Encoding fallbacks
    encoding_fallbacks: Tuple[str, ...] = ('utf-8', 'utf-8-sig', 'latin-1', 'cp1252')

    def __post_init__(self):
        if self.max_file_size_kb < 0:
            raise ValueError(f"max_file_size_kb must be >= 0, got {self.max_file_size_kb}")
        if self.token_limit < 0:
            raise ValueError(f"token_limit must be >= 0, got {self.token_limit}")
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, 'exclude_patterns', tuple(self.exclude_patterns))
        object.__setattr__(self, 'output_dir', Path(self.output_dir))
        object.__setattr__(self, 'output_format', OutputFormat(self.output_format))

    @property
    def counts_tokens(self) -> bool:
        """Token counting is required for budgeting and optional otherwise."""
        return self.token_limit > 0 or self.show_token_count


@dataclass(frozen=True)
class FileEntry:
    """A file selected for content inclusion during traversal."""

    path: str  # slash-separated, relative to the source root
    name: str
    handle: Any  # pathlib.Path or a remote content handle
    size_kb: int


@dataclass(frozen=True)
class ProcessingState:
    """Base class for the states observed by a caller during a run."""

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True)
class Idle(ProcessingState):
    """Nothing is running."""


@dataclass(frozen=True)
class Scanning(ProcessingState):
    """The source tree is being walked."""


@dataclass(frozen=True)
class Processing(ProcessingState):
    """File contents are being written."""

    current_file: str
    progress: float
    total_files: int
    processed: int


@dataclass(frozen=True)
class Success(ProcessingState):
    """The run finished and produced one or more artifacts."""

    files: List[Path]
    total_source_files: int
    total_tokens: int
    message: str

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True)
class Error(ProcessingState):
    """The run stopped without producing a usable digest."""

    message: str

    @property
    def is_terminal(self) -> bool:
        return True


def parse_patterns(text: str) -> List[str]:
    """Split a comma-separated pattern string into trimmed, non-empty patterns."""
    return [p.strip() for p in text.split(',') if p.strip()]


def merge_patterns(current: Iterable[str], extra: Iterable[str]) -> Tuple[str, ...]:
    """Append ``extra`` to ``current`` keeping first-seen order and dropping duplicates."""
    merged: List[str] = []
    for pattern in list(current) + list(extra):
        if pattern not in merged:
            merged.append(pattern)
    return tuple(merged)


def apply_preset(current: Iterable[str], preset_name: str) -> Tuple[str, ...]:
    """
    Merge a named preset into an existing pattern list.

    Raises:
        ValueError: If the preset is unknown.
    """
    key = preset_name.lower()
    if key not in IGNORE_PRESETS:
        raise ValueError(f"Unknown preset '{preset_name}'. Available: {', '.join(sorted(IGNORE_PRESETS))}")
    return merge_patterns(current, IGNORE_PRESETS[key])
