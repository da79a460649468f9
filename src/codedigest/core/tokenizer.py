"""
Token counting functionality for codedigest.

This module wraps OpenAI's tiktoken library behind a small counter whose
results are advisory: any failure yields 0 tokens instead of an exception,
so a digest run never aborts because of token counting.
"""

import logging
from typing import Any, Optional

import tiktoken

logger = logging.getLogger(__name__)


class TokenCounter:
    """
    Counts tokens for text content.

    The encoder is loaded on first use, so constructing a counter is cheap
    and never touches the network.
    """

    def __init__(self, encoding_name: str = "cl100k_base"):
        """
        Initialize the token counter.

        Args:
            encoding_name: The name of the tiktoken encoding to use.
                         Default is cl100k_base (used by GPT-4).
        """
        self.encoding_name = encoding_name
        self.encoder: Optional[Any] = None
        self._load_attempted = False

    def _load_encoder(self) -> None:
        self._load_attempted = True
        try:
            self.encoder = tiktoken.get_encoding(self.encoding_name)
        except Exception as e:
            logger.warning(f"Failed to initialize token encoder '{self.encoding_name}': {e}")
            self.encoder = None

    @property
    def is_available(self) -> bool:
        """Check if token counting is available."""
        if not self._load_attempted:
            self._load_encoder()
        return self.encoder is not None

    def count(self, text: str) -> int:
        """
        Count tokens in the given text.

        Args:
            text: The text to count tokens for.

        Returns:
            Number of tokens, or 0 if the text is empty or counting failed.
        """
        if not text or not self.is_available:
            return 0

        try:
            # Text such as <|endoftext|> is counted as ordinary text
            return len(self.encoder.encode(text, disallowed_special=()))
        except Exception as e:
            logger.debug(f"Error counting tokens: {e}")
            return 0
