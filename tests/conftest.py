import pytest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import MagicMock, patch

from github import GithubException


class WordCounter:
    """Deterministic token counter for tests: one token per whitespace-separated word."""

    is_available = True

    def count(self, text: str) -> int:
        return len(text.split()) if text else 0


class FakeContentFile:
    """Mimics a PyGithub ContentFile backed by a local file or directory."""

    def __init__(self, root: Path, path: str, type_override: str = None):
        full = root / path
        self.path = path
        self.name = full.name
        self.sha = f"sha-{path}"
        self._full = full
        if type_override:
            self.type = type_override
            self.size = 0
        elif full.is_dir():
            self.type = 'dir'
            self.size = 0
        else:
            self.type = 'file'
            self.size = full.stat().st_size
        self.encoding = 'base64'

    @property
    def decoded_content(self) -> bytes:
        return self._full.read_bytes()


class FakeGitHubRepo:
    """Mimics a PyGithub Repository whose contents mirror a local directory."""

    def __init__(self, root: Path, name: str = None):
        self.root = root
        self.name = name or root.name
        self.default_branch = 'main'
        self.refs = []

    def get_contents(self, path, ref=None):
        self.refs.append(ref)
        target = self.root / path if path else self.root
        if not target.exists():
            raise GithubException(404, {"message": "Not Found"}, None)
        if target.is_dir():
            return [
                FakeContentFile(self.root, child.relative_to(self.root).as_posix())
                for child in target.iterdir()
            ]
        return FakeContentFile(self.root, path)


@pytest.fixture
def temp_workspace():
    """Create a temporary directory for test files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def word_counter():
    return WordCounter()


@pytest.fixture
def sample_repo(temp_workspace):
    """Create a sample project structure for testing."""
    repo_root = temp_workspace / "sample_repo"
    repo_root.mkdir()

    # Create directory structure
    (repo_root / "src").mkdir()
    (repo_root / "src" / "utils").mkdir()
    (repo_root / "docs").mkdir()
    (repo_root / ".git").mkdir()
    (repo_root / "build").mkdir()

    # Create files
    (repo_root / "README.md").write_text("# Sample Repository\n\nTest repository for codedigest")
    (repo_root / "setup.py").write_text("from setuptools import setup\n\nsetup(name='sample')")
    (repo_root / "src" / "main.py").write_text("def main():\n    print('Hello, World!')")
    (repo_root / "src" / "utils" / "helpers.py").write_text("def helper():\n    return 42")
    (repo_root / "docs" / "guide.txt").write_text("Read me first")
    (repo_root / "build" / "output.txt").write_text("generated")
    (repo_root / ".git" / "config").write_text("[core]\n    repositoryformatversion = 0")

    # Create binary file
    (repo_root / "image.png").write_bytes(b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR')

    return repo_root


@pytest.fixture
def github_lister_factory():
    """Build a GitHubLister over a FakeGitHubRepo mirroring a local directory."""
    from codedigest.adapters.github import GitHubLister

    def factory(root: Path, branch: str = None):
        fake_repo = FakeGitHubRepo(root)
        with patch('codedigest.adapters.github.Github') as mock_github:
            mock_github.return_value = MagicMock(get_repo=MagicMock(return_value=fake_repo))
            return GitHubLister(f"octocat/{root.name}", token="test-token", branch=branch)

    return factory
