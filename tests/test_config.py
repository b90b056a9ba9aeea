"""
Unit tests for interpreter configuration loading.
"""

import logging

import pytest
from monkeylang import InterpreterConfig, ConfigError, configure_logging
from monkeylang.config import CONFIG_ENV_VAR


class TestDefaults:
    """Test default configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = InterpreterConfig.load()
        assert config == InterpreterConfig()
        assert config.prompt == ">> "
        assert config.max_errors == 20
        assert config.log_level == "WARNING"
        assert config.color is True


class TestLoading:
    """Test loading YAML config files."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "monkey.yaml"
        path.write_text('prompt: "monkey> "\nmax_errors: 5\nlog_level: debug\ncolor: false\n')
        config = InterpreterConfig.load(path)
        assert config.prompt == "monkey> "
        assert config.max_errors == 5
        assert config.log_level == "DEBUG"
        assert config.color is False

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "monkey.yaml"
        path.write_text("max_errors: 3\n")
        config = InterpreterConfig.load(str(path))
        assert config.max_errors == 3
        assert config.prompt == ">> "

    def test_empty_file(self, tmp_path):
        path = tmp_path / "monkey.yaml"
        path.write_text("")
        assert InterpreterConfig.load(path) == InterpreterConfig()

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("prompt: '$ '\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert InterpreterConfig.load().prompt == "$ "

    def test_explicit_path_wins_over_environment(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.yaml"
        env_path.write_text("max_errors: 1\n")
        arg_path = tmp_path / "arg.yaml"
        arg_path.write_text("max_errors: 2\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
        assert InterpreterConfig.load(arg_path).max_errors == 2


class TestValidation:
    """Test rejection of invalid configuration."""

    @pytest.mark.parametrize("text,fragment", [
        ("colour: true\n", "unknown config key"),
        ("max_errors: many\n", "must be int"),
        ("color: 1\n", "must be bool"),
        ("max_errors: true\n", "must be int"),
        ("log_level: LOUD\n", "unknown log level"),
        ("max_errors: 0\n", "at least 1"),
        ("- a\n- b\n", "expected a mapping"),
        ("prompt: [unclosed\n", "invalid YAML"),
    ])
    def test_invalid(self, tmp_path, text, fragment):
        path = tmp_path / "bad.yaml"
        path.write_text(text)
        with pytest.raises(ConfigError, match=fragment):
            InterpreterConfig.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            InterpreterConfig.load(tmp_path / "nope.yaml")

    def test_from_dict(self):
        config = InterpreterConfig.from_dict({"prompt": "? "})
        assert config.prompt == "? "


class TestLogging:
    """Test logging setup."""

    def test_configure_logging_sets_level(self):
        configure_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        configure_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING
