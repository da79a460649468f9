"""GitHub repository lister implementation."""
import base64
import logging
import re
from typing import List, Optional, Tuple

from github import Auth, Github, GithubException
from github.ContentFile import ContentFile

from .base import DirectoryLister, ListedEntry

logger = logging.getLogger(__name__)

GITHUB_URL_RE = re.compile(
    r'^(?:https?://)?(?:www\.)?github\.com/'
    r'(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?'
    r'(?:/tree/(?P<branch>[^\s]+?))?/?$'
)
SHORTHAND_RE = re.compile(r'^(?P<owner>[\w-]+)/(?P<repo>[\w-]+)$')


def parse_github_reference(reference: str) -> Optional[Tuple[str, str, Optional[str]]]:
    """
    Parse a GitHub repository reference.

    Accepts ``https://github.com/owner/repo``, ``github.com/owner/repo`` and
    ``owner/repo``; the URL forms may end in ``/tree/<branch>``.

    Returns:
        Tuple of (owner, repo, branch) or None if the reference is not a
        GitHub repository. ``branch`` is None when not given.
    """
    reference = reference.strip()
    match = GITHUB_URL_RE.match(reference)
    if match:
        return match.group('owner'), match.group('repo'), match.group('branch')

    # Shorthand must not look like a file path
    match = SHORTHAND_RE.match(reference)
    if match:
        return match.group('owner'), match.group('repo'), None
    return None


class GitHubLister(DirectoryLister):
    """Lists a repository through content handles from the GitHub contents API."""

    def __init__(self, reference: str, token: str = "", branch: Optional[str] = None):
        """
        Connect to a GitHub repository.

        Args:
            reference: Repository URL or ``owner/repo`` shorthand.
            token: Personal access token; anonymous access when empty.
            branch: Branch or ref to read; overrides a branch in the URL.

        Raises:
            ValueError: If the reference is malformed or the repository
                cannot be accessed.
        """
        parsed = parse_github_reference(reference)
        if parsed is None:
            raise ValueError(f"Invalid GitHub repository reference: {reference}")
        self.owner, self.repo_name, url_branch = parsed

        if token:
            self.github = Github(auth=Auth.Token(token))
        else:
            logger.warning("GITHUB_TOKEN not set; using anonymous GitHub access (low rate limit)")
            self.github = Github()

        try:
            self.repo = self.github.get_repo(f"{self.owner}/{self.repo_name}")
            self.branch = branch or url_branch or self.repo.default_branch
        except GithubException as e:
            raise ValueError(
                f"Cannot access GitHub repository {self.owner}/{self.repo_name}: {self._describe(e)}"
            ) from e

        logger.info(f"Connected to GitHub repository: {self.owner}/{self.repo_name} ({self.branch})")

    @staticmethod
    def _describe(error: GithubException) -> str:
        data = error.data if isinstance(error.data, dict) else {}
        return f"HTTP {error.status} {data.get('message', '')}".strip()

    @property
    def root_name(self) -> str:
        return self.repo.name

    @property
    def root(self) -> str:
        return ""

    def list_children(self, path: str) -> List[ListedEntry]:
        # Directory handles are repository paths; the root is ""
        try:
            contents = self.repo.get_contents(path, ref=self.branch)
        except GithubException as e:
            raise OSError(f"Cannot list '{path or '/'}': {self._describe(e)}") from e

        if not isinstance(contents, list):
            contents = [contents]

        entries = []
        for content in contents:
            # Symlinks and submodules are not followed
            if content.type == 'dir':
                entries.append(ListedEntry(content.name, True, 0, content.path))
            elif content.type == 'file':
                entries.append(ListedEntry(content.name, False, content.size or 0, content))
        return entries

    def read_bytes(self, handle) -> bytes:
        try:
            if handle.encoding == 'base64':
                return handle.decoded_content
            # Files above the contents API size limit come back without inline content
            blob = self.repo.get_git_blob(handle.sha)
            return base64.b64decode(blob.content)
        except GithubException as e:
            raise OSError(f"Cannot read '{handle.path}': {self._describe(e)}") from e

    def find_root_file(self, name: str) -> Optional[ContentFile]:
        try:
            content = self.repo.get_contents(name, ref=self.branch)
        except GithubException:
            return None
        if isinstance(content, list) or content.type != 'file':
            return None
        return content
