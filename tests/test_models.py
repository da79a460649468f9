import dataclasses
from pathlib import Path

import pytest

from codedigest.core.models import (
    IGNORE_PRESETS, Config, Error, FileEntry, Idle, OutputFormat, Processing,
    Scanning, Success, apply_preset, merge_patterns, parse_patterns,
)


class TestConfig:
    def test_defaults(self):
        config = Config()

        assert config.source is None
        assert config.output_dir == Path('output')
        assert config.exclude_patterns == ()
        assert config.use_gitignore is True
        assert config.show_token_count is True
        assert config.output_format == OutputFormat.PLAIN
        assert config.max_file_size_kb == 0
        assert config.token_limit == 0
        assert config.token_encoder == "cl100k_base"

    def test_config_is_immutable(self):
        config = Config(source="/tmp/project")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.source = "/elsewhere"

    def test_lists_and_strings_are_coerced(self):
        config = Config(exclude_patterns=['*.log', 'build'], output_dir='out', output_format='xml')

        assert config.exclude_patterns == ('*.log', 'build')
        assert config.output_dir == Path('out')
        assert config.output_format is OutputFormat.XML

    def test_negative_limits_rejected(self):
        with pytest.raises(ValueError):
            Config(token_limit=-1)
        with pytest.raises(ValueError):
            Config(max_file_size_kb=-5)

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError):
            Config(output_format='html')

    def test_github_token_from_environment(self, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')

        assert Config().github_token == 'env-token'

    @pytest.mark.parametrize("token_limit,show_tokens,expected", [
        (0, True, True),
        (0, False, False),
        (1000, False, True),
    ])
    def test_counts_tokens(self, token_limit, show_tokens, expected):
        config = Config(token_limit=token_limit, show_token_count=show_tokens)

        assert config.counts_tokens is expected


class TestProcessingStates:
    def test_terminal_states(self):
        assert Success(files=[], total_source_files=0, total_tokens=0, message="").is_terminal
        assert Error("boom").is_terminal

    def test_non_terminal_states(self):
        assert not Idle().is_terminal
        assert not Scanning().is_terminal
        assert not Processing(current_file="a", progress=0.5, total_files=2, processed=1).is_terminal

    def test_states_compare_by_value(self):
        assert Error("same") == Error("same")
        assert Scanning() == Scanning()

    def test_file_entry_is_frozen(self):
        entry = FileEntry(path="src/a.py", name="a.py", handle=None, size_kb=0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.path = "other"


class TestPatternHelpers:
    def test_parse_patterns_trims_and_drops_empties(self):
        assert parse_patterns(" *.log, build ,, ,dist") == ['*.log', 'build', 'dist']

    def test_parse_patterns_empty(self):
        assert parse_patterns("") == []

    def test_merge_keeps_order_and_drops_duplicates(self):
        assert merge_patterns(['a', 'b'], ['b', 'c', 'a', 'd']) == ('a', 'b', 'c', 'd')

    def test_apply_preset(self):
        merged = apply_preset(['custom'], 'web')

        assert merged[0] == 'custom'
        assert merged[1:] == IGNORE_PRESETS['web']

    def test_apply_preset_is_case_insensitive(self):
        assert apply_preset([], 'Python') == IGNORE_PRESETS['python']

    def test_apply_preset_twice_adds_nothing(self):
        once = apply_preset([], 'android')

        assert apply_preset(once, 'android') == once

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            apply_preset([], 'cobol')
