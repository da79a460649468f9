"""
Depth-first source traversal.

Walks a source through a DirectoryLister, rendering the directory tree
and collecting the files whose content belongs in the digest.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from ..adapters.base import DirectoryLister, ListedEntry
from ..utils.ignore_rules import IgnoreRuleSet
from ..utils.tree_builder import TreeRenderer
from .classifier import ContentClassifier
from .models import Config, FileEntry

logger = logging.getLogger(__name__)

GIT_DIR = '.git'


@dataclass
class TraversalResult:
    """Files collected for content inclusion plus the rendered tree."""

    files: List[FileEntry]
    tree_text: str


class Traverser:
    """Walks a source tree once per run."""

    def __init__(self, classifier: Optional[ContentClassifier] = None):
        self.classifier = classifier or ContentClassifier()

    def walk(self, lister: DirectoryLister, config: Config, ignore_rules: IgnoreRuleSet) -> TraversalResult:
        """
        Traverse the whole source.

        Raises:
            OSError: If the root directory cannot be listed.
        """
        tree = TreeRenderer(lister.root_name, enabled=not config.skip_tree)
        files: List[FileEntry] = []

        # Root listing failures propagate to the caller
        children = lister.list_children(lister.root)
        self._visit(lister, config, ignore_rules, children, "", "", tree, files)

        return TraversalResult(files=files, tree_text=tree.text())

    def _visit(self, lister: DirectoryLister, config: Config, ignore_rules: IgnoreRuleSet,
               children: List[ListedEntry], prefix: str, relative_path: str,
               tree: TreeRenderer, files: List[FileEntry]) -> None:
        survivors = []
        for child in sorted(children, key=lambda c: c.name.lower()):
            if child.name == GIT_DIR:
                continue
            path = f"{relative_path}/{child.name}" if relative_path else child.name
            # Directories are matched with a trailing slash so "build/" prunes them
            candidate = path + '/' if child.is_dir else path
            if ignore_rules.should_ignore(candidate):
                continue
            survivors.append((child, path))

        for index, (child, path) in enumerate(survivors):
            is_last = index == len(survivors) - 1
            tree.add_entry(prefix, child.name, is_last)

            if child.is_dir:
                self._visit(lister, config, ignore_rules, self._list_nested(lister, child.handle, path),
                            tree.child_prefix(prefix, is_last), path, tree, files)
                continue

            size_kb = child.size // 1024
            if config.max_file_size_kb and size_kb > config.max_file_size_kb:
                continue

            entry = FileEntry(path=path, name=child.name, handle=child.handle, size_kb=size_kb)
            peek = self._peek_for(lister, child.handle)
            if self.classifier.is_content_excluded(entry, peek):
                continue
            files.append(entry)

    @staticmethod
    def _peek_for(lister: DirectoryLister, handle: Any):
        return lambda size: lister.read_head(handle, size)

    @staticmethod
    def _list_nested(lister: DirectoryLister, handle: Any, path: str) -> List[ListedEntry]:
        try:
            return lister.list_children(handle)
        except Exception as e:
            logger.warning(f"Cannot list directory {path}, treating it as empty: {e}")
            return []
