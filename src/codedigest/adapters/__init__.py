"""Directory listers for different source types."""
import os

from ..core.models import Config
from .base import DirectoryLister, ListedEntry
from .github import GitHubLister, parse_github_reference
from .local import LocalLister


def create_lister(config: Config) -> DirectoryLister:
    """
    Create the appropriate directory lister for the configured source.

    A source that is an existing local directory always wins; otherwise a
    GitHub reference is tried.

    Args:
        config: Configuration object

    Returns:
        Appropriate DirectoryLister instance

    Raises:
        ValueError: If the source is missing, not a directory, or not a
            reachable GitHub repository
    """
    source = (config.source or "").strip()
    if not source:
        raise ValueError("No source folder selected.")

    local_path = os.path.expanduser(source)
    if os.path.isdir(local_path):
        return LocalLister(local_path)

    if os.path.exists(local_path):
        raise ValueError(f"Path exists but is not a directory: {source}")

    if parse_github_reference(source) is not None:
        return GitHubLister(source, token=config.github_token, branch=config.branch)

    raise ValueError(
        f"Invalid source: {source}\n"
        "Expected: local directory path or GitHub repository (https://github.com/owner/repo)"
    )


__all__ = ['DirectoryLister', 'ListedEntry', 'GitHubLister', 'LocalLister', 'create_lister']
