"""
Text decoding utilities.

Turns raw file bytes into text, preferring a byte order mark when one is
present and otherwise trying a list of fallback encodings in order.
"""

import logging
from typing import Iterable, Optional, Tuple

# Common encodings to try, ordered by likelihood
DEFAULT_ENCODINGS = (
    'utf-8',
    'utf-8-sig',  # UTF-8 with BOM
    'latin-1',
    'cp1252',     # Windows-1252
)

BOM_CHECKS = (
    # Longest marks first: the UTF-32-LE mark starts with the UTF-16-LE one
    (b'\xff\xfe\x00\x00', 'utf-32-le'),
    (b'\x00\x00\xfe\xff', 'utf-32-be'),
    (b'\xef\xbb\xbf', 'utf-8-sig'),
    (b'\xff\xfe', 'utf-16-le'),
    (b'\xfe\xff', 'utf-16-be'),
)

logger = logging.getLogger(__name__)


class EncodingDetector:
    """Handles encoding detection and text decoding."""

    def __init__(self, fallback_encodings: Optional[Iterable[str]] = None):
        """
        Initialize the encoding detector.

        Args:
            fallback_encodings: Encodings to try. If None, uses defaults.
        """
        self.encodings = tuple(fallback_encodings or DEFAULT_ENCODINGS)

    @staticmethod
    def detect_bom(content: bytes) -> Optional[str]:
        """Return the encoding named by a leading byte order mark, if any."""
        for bom, encoding in BOM_CHECKS:
            if content.startswith(bom):
                return encoding
        return None

    def decode(self, content: bytes, file_path: str = "") -> Tuple[Optional[str], Optional[str]]:
        """
        Decode bytes to text.

        Args:
            content: Raw bytes to decode.
            file_path: Optional path used in log and error messages.

        Returns:
            Tuple of (text, error_message). On success error_message is None;
            on failure text is None.
        """
        bom_encoding = self.detect_bom(content)
        if bom_encoding:
            try:
                # utf-8-sig strips the mark; the utf-16/32 codecs keep it
                return content.decode(bom_encoding).lstrip('\ufeff'), None
            except UnicodeDecodeError as e:
                logger.debug(f"BOM decode failed for {file_path}: {e}")

        last_error: Optional[UnicodeDecodeError] = None
        for encoding in self.encodings:
            try:
                return content.decode(encoding), None
            except UnicodeDecodeError as e:
                last_error = e
            except LookupError:
                logger.warning(f"Unknown encoding '{encoding}' skipped")

        error_msg = f"Unable to decode file with available encodings ({', '.join(self.encodings)})"
        if last_error is not None:
            error_msg += f" - failed at byte {last_error.start}"
        return None, error_msg
