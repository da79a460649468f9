"""ASCII directory-tree rendering utilities."""

from typing import List

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "


class TreeRenderer:
    """
    Builds tree text line by line while a traversal walks the source.

    Lines are appended in visit order, so the caller controls sorting and
    pruning; the renderer only knows about connectors and prefixes. A
    disabled renderer accepts every call and produces an empty string.
    """

    def __init__(self, root_name: str, enabled: bool = True):
        self.root_name = root_name
        self.enabled = enabled
        self._lines: List[str] = []
        if enabled:
            self._lines.append(f"Directory Structure for: {root_name}")
            self._lines.append(root_name)

    def add_entry(self, prefix: str, name: str, is_last: bool) -> None:
        """
        Append one entry line.

        Args:
            prefix: Continuation prefix inherited from the parent levels
            name: Entry name to display
            is_last: Whether this is the last surviving sibling
        """
        if not self.enabled:
            return
        connector = LAST_BRANCH if is_last else BRANCH
        self._lines.append(f"{prefix}{connector}{name}")

    @staticmethod
    def child_prefix(prefix: str, is_last: bool) -> str:
        """Prefix passed down to the children of an entry."""
        return prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX)

    def text(self) -> str:
        """Rendered tree, one entry per line, newline-terminated."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
