"""Local filesystem directory lister."""
import logging
import os
from pathlib import Path
from typing import List, Optional

from .base import DirectoryLister, ListedEntry

logger = logging.getLogger(__name__)


class LocalLister(DirectoryLister):
    """Lists a directory tree through direct filesystem paths."""

    def __init__(self, root_path: str):
        """Initialize the lister with the source directory."""
        path = Path(os.path.expanduser(root_path))
        if not path.is_dir():
            raise ValueError(f"Path is not a directory: {root_path}")

        self._root = path.resolve()
        self._root_name = self._root.name or str(self._root)

    @property
    def root_name(self) -> str:
        return self._root_name

    @property
    def root(self) -> Path:
        return self._root

    def list_children(self, directory: Path) -> List[ListedEntry]:
        entries = []
        for child in directory.iterdir():
            # Skip symlinks to prevent traversal outside the root
            if child.is_symlink():
                continue

            if child.is_dir():
                entries.append(ListedEntry(child.name, True, 0, child))
                continue

            try:
                size = child.stat().st_size
            except OSError as e:
                # Skip files we can't access
                logger.debug(f"Cannot stat {child}: {e}")
                continue
            entries.append(ListedEntry(child.name, False, size, child))
        return entries

    def read_bytes(self, handle: Path) -> bytes:
        return handle.read_bytes()

    def read_head(self, handle: Path, size: int) -> bytes:
        with open(handle, 'rb') as f:
            return f.read(size)

    def find_root_file(self, name: str) -> Optional[Path]:
        candidate = self._root / name
        if candidate.is_file():
            return candidate
        return None
