"""Tests for settings, path helpers and logging setup."""

import logging

import pytest

from paper_llm import logging_config, paths
from paper_llm.config import Settings


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("PAPER_LLM_LOG_LEVEL", " debug ")
    monkeypatch.setenv("PAPER_LLM_REQUEST_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("PAPER_LLM_OPENROUTER_TITLE", "Reader")

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.request_timeout_seconds == 12.5
    assert settings.openrouter_title == "Reader"
    assert settings.chat_context_window_chars == 512_000


def test_paths_follow_settings(monkeypatch, tmp_path):
    monkeypatch.setattr(paths.settings, "data_dir", tmp_path / "state")
    monkeypatch.setattr(paths.settings, "config_dir", tmp_path / "local")

    assert paths.scene_defaults_path() == tmp_path / "state" / "scene_defaults.yaml"
    assert paths.local_keys_config_path() == tmp_path / "local" / "keys_config.yaml"
    assert paths.ensure_parent(paths.usage_log_path()).parent.is_dir()


@pytest.fixture
def reset_logging(monkeypatch):
    monkeypatch.setattr(logging_config, "_initialized", False)
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_setup_logging_writes_session_header(tmp_path, reset_logging):
    log_file = logging_config.setup_logging(log_dir=tmp_path, level="warning")

    logging.getLogger("paper_llm.test").warning("probe message")

    assert log_file == tmp_path / "paper_llm.log"
    content = log_file.read_text(encoding="utf-8")
    assert "Session started at:" in content
    assert "probe message" in content
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging_config.setup_logging(log_dir=tmp_path) == log_file
