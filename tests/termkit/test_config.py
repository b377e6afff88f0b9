"""Tests for configuration file loading and option merging."""

import pytest

from termkit.config import load_config_file, merge_options, normalize_key, require_options
from termkit.glossary.exceptions import ConfigError

CONFIG = """\
scopedir: ./scope
onNotExist: warn
resolve:
  input: "docs/**/*.md"
  output: ./out
  on-not-exist: throw
mrgt:
  vsntag: v1
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


class TestLoadConfigFile:
    """Test shared options and per-command sections."""

    def test_section_overrides_shared_options(self, config_file):
        options = load_config_file(config_file, "resolve")
        assert options == {
            "scopedir": "./scope",
            "on_not_exist": "throw",
            "input": "docs/**/*.md",
            "output": "./out",
        }

    def test_legacy_section_name(self, config_file):
        options = load_config_file(config_file, "build")
        assert options["vsntag"] == "v1"
        assert options["on_not_exist"] == "warn"
        assert "input" not in options

    def test_other_sections_do_not_leak(self, config_file):
        assert load_config_file(config_file, "hrg") == {"scopedir": "./scope", "on_not_exist": "warn"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path, "resolve") == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="E011"):
            load_config_file(tmp_path / "missing.yaml", "resolve")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config_file(path, "resolve")


class TestOptions:
    """Test merging and required options."""

    def test_cli_values_win(self):
        merged = merge_options({"output": "cli-out", "force": None}, {"output": "cfg-out", "force": True})
        assert merged == {"output": "cli-out", "force": True}

    def test_missing_required_option(self):
        with pytest.raises(ConfigError, match="--scopedir"):
            require_options({"input": "x", "scopedir": ""}, ["input", "scopedir"])

    def test_required_options_present(self):
        require_options({"input": "x"}, ["input"])

    def test_normalize_key(self):
        assert normalize_key("onNotExist") == "on_not_exist"
        assert normalize_key("on-not-exist") == "on_not_exist"
        assert normalize_key("scopedir") == "scopedir"
