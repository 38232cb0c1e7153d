"""Tests for loading [tool.readme-examples] from pyproject.toml."""

import logging

import pytest

from readme_examples.config import (
    CheckerConfig,
    ConfigError,
    config_from_table,
    find_pyproject,
    load_config,
)


def write_pyproject(directory, body):
    path = directory / "pyproject.toml"
    path.write_text(body, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test reading configuration files."""

    def test_defaults_without_table(self, tmp_path):
        write_pyproject(tmp_path, '[project]\nname = "x"\n')
        config = load_config(tmp_path)
        assert config == CheckerConfig()
        assert config.content_syntaxes == {"text": ".txt", "json": ".json", "tmpl": ".tmpl"}

    def test_table(self, tmp_path):
        write_pyproject(tmp_path, "\n".join([
            "[tool.readme-examples]",
            'program = "mytool"',
            'example-syntax = "console"',
            "max-memory-lines = 3",
            "run = false",
            "",
            "[tool.readme-examples.content-syntaxes]",
            'yaml = ".yaml"',
            "",
        ]))
        config = load_config(tmp_path)
        assert config.program == "mytool"
        assert config.example_syntax == "console"
        assert config.max_memory_lines == 3
        assert config.run is False
        assert config.content_syntaxes == {"yaml": ".yaml"}
        assert config.timeout == 60

    def test_found_from_nested_file(self, tmp_path):
        path = write_pyproject(tmp_path, '[tool.readme-examples]\nprogram = "mytool"\n')
        docs = tmp_path / "docs"
        docs.mkdir()
        readme = docs / "guide.md"
        readme.write_text("# Guide\n")
        assert find_pyproject(readme) == path.resolve()
        assert load_config(readme).program == "mytool"

    def test_invalid_toml(self, tmp_path):
        write_pyproject(tmp_path, "[tool.readme-examples\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    @pytest.mark.parametrize("body", [
        "program = 1",
        'timeout = "soon"',
        "timeout = -1",
        "max-memory-lines = true",
        'run = "yes"',
        'content-syntaxes = ["text"]',
    ])
    def test_wrong_type(self, tmp_path, body):
        write_pyproject(tmp_path, f"[tool.readme-examples]\n{body}\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_key_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="readme_examples.config"):
            config = config_from_table({"program": "mytool", "colour": "blue"})
        assert config.program == "mytool"
        assert "Ignoring unknown [tool.readme-examples] key: colour" in caplog.text


class TestOverrides:
    """Test command line overrides."""

    def test_none_keeps_value(self):
        config = CheckerConfig(program="mytool", run=False)
        assert config.with_overrides(program=None, run=None) == config

    def test_values_applied(self):
        config = CheckerConfig().with_overrides(program="other", run=False, executable="./bin/other")
        assert config.program == "other"
        assert config.run is False
        assert config.executable == "./bin/other"

    def test_base_config(self):
        base = CheckerConfig(timeout=5)
        assert config_from_table({"program": "x"}, base).timeout == 5
