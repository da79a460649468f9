"""
Base directory lister interface.

This module defines the abstract interface that every directory-access
strategy implements, so traversal behaves identically regardless of how
the files are reached.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass(frozen=True)
class ListedEntry:
    """One child of a listed directory."""

    name: str
    is_dir: bool
    size: int  # bytes; 0 for directories
    handle: Any


class DirectoryLister(ABC):
    """
    Abstract base class for directory listers.

    A lister exposes the source as a tree of opaque handles: ``root`` is the
    handle of the top directory, and every ``ListedEntry.handle`` it returns
    can be passed back to ``list_children`` (directories) or to
    ``read_bytes``/``read_head`` (files).
    """

    @property
    @abstractmethod
    def root_name(self) -> str:
        """Display name of the source root."""

    @property
    @abstractmethod
    def root(self) -> Any:
        """Handle of the source root directory."""

    @abstractmethod
    def list_children(self, directory: Any) -> List[ListedEntry]:
        """
        List the direct children of a directory, in no particular order.

        Raises:
            OSError: If the directory cannot be listed.
        """

    @abstractmethod
    def read_bytes(self, handle: Any) -> bytes:
        """
        Read the whole content of a file.

        Raises:
            OSError: If the file cannot be read.
        """

    def read_head(self, handle: Any, size: int) -> bytes:
        """Read up to ``size`` leading bytes of a file."""
        return self.read_bytes(handle)[:size]

    @abstractmethod
    def find_root_file(self, name: str) -> Optional[Any]:
        """Return the handle of a regular file directly under the root, or None."""
