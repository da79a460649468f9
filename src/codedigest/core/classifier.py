"""
Content classification for codedigest.

Decides whether a file's content is binary or asset noise that should be
left out of a digest. Excluded files are still listed in the directory tree;
only their content is skipped.
"""

import logging
from typing import Callable, Optional

from .models import FileEntry

logger = logging.getLogger(__name__)

PEEK_SIZE = 512

# Extensions that are always binary or useless as text
SKIPPABLE_EXTENSIONS = frozenset({
    # Images & Media
    'png', 'jpg', 'jpeg', 'webp', 'gif', 'bmp', 'svg', 'ico', 'tiff',
    'mp4', 'mkv', 'avi', 'mov', 'mp3', 'wav', 'flac', 'ogg',
    # Archives & Binaries
    'zip', 'tar', 'gz', 'rar', '7z', 'jar', 'apk', 'aab', 'dex', 'class', 'so', 'o', 'a',
    'pdf', 'doc', 'docx', 'xls', 'xlsx', 'ppt', 'pptx',
    'exe', 'dll', 'bin', 'dat', 'db', 'sqlite', 'pdb',
    # Keystores & Certs
    'jks', 'keystore', 'pem', 'crt', 'der', 'p12',
    # Fonts
    'ttf', 'otf', 'woff', 'woff2', 'eot',
})

# Exact (lower-cased) filenames: build wrappers, OS metadata, local config
SKIPPABLE_FILENAMES = frozenset({
    'gradle-wrapper.jar',
    'gradlew',
    'gradlew.bat',
    'local.properties',
    '.ds_store',
    'thumbs.db',
})

# Directory segments that only ever hold icons, fonts or raw assets
ASSET_PATH_SEGMENTS = ('/res/mipmap', '/res/font', '/res/raw')

GRAPHIC_PATH_SEGMENT = '/res/drawable'

# Root tags marking a markup file as a graphic asset rather than code
ASSET_XML_TAGS = (
    '<vector',
    '<animated-vector',
    '<bitmap',
    '<aapt:attr',
    '<shape',
    '<selector',
    '<ripple',
    '<layer-list',
    '<nine-patch',
)

PeekFn = Callable[[int], bytes]


def _extension(name: str) -> str:
    return name.rsplit('.', 1)[1] if '.' in name else ''


class ContentClassifier:
    """Heuristic "smart skip" for binary and asset files."""

    def is_skippable_name(self, name: str) -> bool:
        """Check a file name against the filename and extension deny-lists."""
        lower_name = name.lower()
        if lower_name in SKIPPABLE_FILENAMES:
            return True
        return _extension(lower_name) in SKIPPABLE_EXTENSIONS

    def is_content_excluded(self, entry: FileEntry, peek: Optional[PeekFn] = None) -> bool:
        """
        Decide whether the content of ``entry`` should be left out.

        Checks run in order and stop at the first match:
        1. exact filename deny-list
        2. extension deny-list
        3. icon/font/raw asset directory segments in the path
        4. for markup files under a drawable directory, a peek at the first
           512 bytes looking for a graphic root tag

        Args:
            entry: The file being classified.
            peek: Callable returning up to N leading bytes of the file. When
                omitted, step 4 is skipped.

        Returns:
            True if the content should be excluded from the digest.
        """
        if self.is_skippable_name(entry.name):
            return True

        path = '/' + entry.path.lower()
        if any(segment in path for segment in ASSET_PATH_SEGMENTS):
            return True

        if GRAPHIC_PATH_SEGMENT in path and _extension(entry.name.lower()) == 'xml' and peek is not None:
            return self._is_xml_asset(entry, peek)

        return False

    def _is_xml_asset(self, entry: FileEntry, peek: PeekFn) -> bool:
        try:
            head = peek(PEEK_SIZE)
        except Exception as e:
            # Unreadable files are treated as code
            logger.debug(f"Could not peek at {entry.path}: {e}")
            return False

        if not head:
            return False

        header = head[:PEEK_SIZE].decode('utf-8', errors='replace').strip().lower()
        return any(tag in header for tag in ASSET_XML_TAGS)
