"""
File processing module for codedigest.

This module turns one collected file into a formatted digest section:
- Content reading through the run's lister
- Encoding detection with fallbacks
- Comment removal and compaction
- Format framing and token counting
"""

import logging
from typing import Optional, Tuple

from ..adapters.base import DirectoryLister
from ..utils.encodings import EncodingDetector
from .formatter import OutputFormatter
from .models import Config, FileEntry
from .tokenizer import TokenCounter
from .transformer import transform

logger = logging.getLogger(__name__)


class FileAnalyzer:
    """Handles per-file content extraction and formatting."""

    def __init__(self, config: Config, counter: TokenCounter, formatter: Optional[OutputFormatter] = None):
        self.config = config
        self.counter = counter
        self.formatter = formatter or OutputFormatter(config.output_format)
        self.detector = EncodingDetector(config.encoding_fallbacks)

    def read_file_content(self, entry: FileEntry, lister: DirectoryLister) -> Tuple[Optional[str], Optional[str]]:
        """
        Read file content with multiple encoding fallbacks.

        Returns:
            Tuple of (content, error_message)
            If successful, content is the file text and error_message is None
            If failed, content is None and error_message describes the issue
        """
        try:
            raw_content = lister.read_bytes(entry.handle)
        except PermissionError:
            return None, "Permission denied"
        except Exception as e:
            return None, f"Error reading file: {str(e)}"

        return self.detector.decode(raw_content, entry.path)

    def process(self, entry: FileEntry, lister: DirectoryLister) -> Optional[Tuple[str, int]]:
        """
        Build the digest section for one file.

        Returns:
            Tuple of (formatted_section, tokens), or None when the file could
            not be read or decoded. Tokens are counted on the whole section
            and are 0 when counting is disabled for the run.
        """
        text, error = self.read_file_content(entry, lister)
        if text is None:
            logger.warning(f"Skipping {entry.path}: {error}")
            return None

        section = self.formatter.format_file(entry.path, transform(text, self.config))
        tokens = self.counter.count(section) if self.config.counts_tokens else 0
        return section, tokens
