"""
Tests for configuration loading.

Focus Areas:
1. Defaults when nothing is configured
2. Each file format and the precedence between files and environment
3. Validation errors for bad values
"""

import json
import logging
import os
from logging.handlers import RotatingFileHandler

import pytest

from sash import ShellConfig, configure_logging, load_config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in list(os.environ):
        if key.startswith("SASH_"):
            monkeypatch.delenv(key)


class TestDefaults:
    def test_empty_directory(self, tmp_path):
        config = load_config(tmp_path)

        assert config == ShellConfig()
        assert config.backend == "auto"
        assert config.prompt == ">"
        assert config.prompt_color == ()
        assert config.history_dir is None
        assert config.history_size == 1000
        assert config.unique_history is True
        assert config.log_level is None
        assert config.extra == {}

    def test_defaults_to_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "sash.toml").write_text('[sash]\nprompt = "cwd> "\n', encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert load_config().prompt == "cwd> "

    def test_config_is_frozen(self):
        with pytest.raises(AttributeError):
            ShellConfig().prompt = "x"  # type: ignore[misc]


class TestFileFormats:
    def test_toml(self, tmp_path):
        (tmp_path / "sash.toml").write_text(
            "[sash]\n"
            'backend = "plain"\n'
            "history_size = 50\n"
            "unique_history = false\n"
            'prompt_color = ["bold", "red"]\n',
            encoding="utf-8",
        )

        config = load_config(tmp_path)

        assert config.backend == "plain"
        assert config.history_size == 50
        assert config.unique_history is False
        assert config.prompt_color == ("bold", "red")

    def test_ini(self, tmp_path):
        (tmp_path / "sash.ini").write_text(
            "[sash]\nhistory_size = 20\nlog_level = debug\n", encoding="utf-8")

        config = load_config(tmp_path)

        assert config.history_size == 20
        assert config.log_level == "DEBUG"

    def test_json(self, tmp_path):
        (tmp_path / "sash.json").write_text(
            json.dumps({"sash": {"prompt": "json> ", "history_size": 7}}), encoding="utf-8")

        config = load_config(tmp_path)

        assert config.prompt == "json> "
        assert config.history_size == 7

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "# comment\n"
            "\n"
            'SASH_PROMPT="env% "\n'
            "SASH_UNIQUE_HISTORY=no\n",
            encoding="utf-8",
        )

        config = load_config(tmp_path)

        assert config.prompt == "env% "
        assert config.unique_history is False

    def test_broken_files_are_ignored(self, tmp_path):
        (tmp_path / "sash.json").write_text("{not json", encoding="utf-8")
        (tmp_path / "sash.toml").write_text("= nope", encoding="utf-8")

        assert load_config(tmp_path) == ShellConfig()


class TestPrecedence:
    def test_later_files_win(self, tmp_path):
        (tmp_path / "sash.ini").write_text("[sash]\nhistory_size = 300\n", encoding="utf-8")
        (tmp_path / "sash.toml").write_text("[sash]\nhistory_size = 500\n", encoding="utf-8")

        assert load_config(tmp_path).history_size == 500

    def test_environment_wins_over_files(self, tmp_path, monkeypatch):
        (tmp_path / "sash.toml").write_text("[sash]\nhistory_size = 500\n", encoding="utf-8")
        monkeypatch.setenv("SASH_HISTORY_SIZE", "200")

        assert load_config(tmp_path).history_size == 200

    def test_environment_values_are_coerced(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SASH_BACKEND", "PLAIN")
        monkeypatch.setenv("SASH_PROMPT_COLOR", "bold, green")
        monkeypatch.setenv("SASH_UNIQUE_HISTORY", "off")

        config = load_config(tmp_path)

        assert config.backend == "plain"
        assert config.prompt_color == ("bold", "green")
        assert config.unique_history is False

    def test_paths_are_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SASH_HISTORY_DIR", str(tmp_path / "history"))
        monkeypatch.setenv("SASH_LOG_FILE_PATH", "none")

        config = load_config(tmp_path)

        assert config.history_dir == (tmp_path / "history").resolve()
        assert config.log_file_path is None

    def test_unknown_keys_are_kept_as_extra(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SASH_THEME", "dark")
        monkeypatch.setenv("NOT_SASH", "ignored")

        config = load_config(tmp_path)

        assert config.extra == {"SASH_THEME": "dark"}


class TestValidation:
    @pytest.mark.parametrize("key, value", [
        ("SASH_BACKEND", "curses"),
        ("SASH_HISTORY_SIZE", "0"),
        ("SASH_HISTORY_SIZE", "many"),
        ("SASH_UNIQUE_HISTORY", "maybe"),
        ("SASH_LOG_LEVEL", "loud"),
        ("SASH_PROMPT_COLOR", "chartreuse"),
    ])
    def test_invalid_values(self, tmp_path, monkeypatch, key, value):
        monkeypatch.setenv(key, value)

        with pytest.raises(ValueError):
            load_config(tmp_path)


class TestConfigureLogging:
    def test_level_and_log_file(self, tmp_path):
        logfile = tmp_path / "sash.log"
        config = ShellConfig(log_level="DEBUG", log_file_path=logfile)

        logger = configure_logging(config, name="sash-config-test")
        try:
            assert logger.level == logging.DEBUG
            assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)

            logger.debug("hello file")
            for handler in logger.handlers:
                handler.flush()

            assert "hello file" in logfile.read_text(encoding="utf-8")
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_default_level_is_info(self):
        logger = configure_logging(ShellConfig(), name="sash-config-default-test")
        try:
            assert logger.level == logging.INFO
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
