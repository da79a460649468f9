import pytest
from click.testing import CliRunner
from unittest.mock import patch

from codedigest import __version__
from codedigest.cli import build_exclude_patterns, main
from codedigest.core.models import IGNORE_PRESETS
from conftest import WordCounter


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def offline_counter():
    with patch('codedigest.core.engine.TokenCounter', return_value=WordCounter()) as mock_counter:
        yield mock_counter


class TestBuildExcludePatterns:
    def test_comma_lists_and_repeats(self):
        assert build_exclude_patterns(("*.log, dist", "tmp", "dist"), ()) == ("*.log", "dist", "tmp")

    def test_presets_appended_after_excludes(self):
        patterns = build_exclude_patterns(("custom",), ("media",))

        assert patterns == ("custom",) + IGNORE_PRESETS['media']


class TestCli:
    def test_version(self, runner):
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_digest_local_directory(self, runner, sample_repo, temp_workspace):
        out_dir = temp_workspace / "out"

        result = runner.invoke(main, [str(sample_repo), '-o', str(out_dir)])

        assert result.exit_code == 0, result.output
        digest = (out_dir / "sample_repo_Digest.txt").read_text(encoding='utf-8')
        assert "File: src/main.py" in digest
        assert "FILES DIGESTED" in result.output
        assert "Source:" in result.output

    def test_options_reach_config(self, runner, sample_repo, temp_workspace):
        out_dir = temp_workspace / "out"

        result = runner.invoke(main, [
            str(sample_repo), '-o', str(out_dir), '-f', 'markdown', '--skip-tree',
            '-e', 'docs,build', '--preset', 'python',
        ])

        assert result.exit_code == 0, result.output
        digest = (out_dir / "sample_repo_Digest.txt").read_text(encoding='utf-8')
        assert "## File: README.md" in digest
        assert "Directory Structure" not in digest
        assert "guide.txt" not in digest

    def test_token_limit_writes_parts(self, runner, sample_repo, temp_workspace):
        out_dir = temp_workspace / "out"

        result = runner.invoke(main, [str(sample_repo), '-o', str(out_dir), '-t', '5000'])

        assert result.exit_code == 0, result.output
        assert (out_dir / "sample_repo_Digest_Part1.txt").exists()

    def test_error_exits_nonzero(self, runner, temp_workspace):
        empty = temp_workspace / "empty"
        empty.mkdir()

        result = runner.invoke(main, [str(empty)])

        assert result.exit_code == 1
        assert "No matching files found after filtering." in result.output

    def test_invalid_format_rejected(self, runner, sample_repo):
        result = runner.invoke(main, [str(sample_repo), '--format', 'html'])

        assert result.exit_code == 2

    def test_negative_token_limit_rejected(self, runner, sample_repo):
        result = runner.invoke(main, [str(sample_repo), '-t', '-5'])

        assert result.exit_code == 2
