import logging

import pytest

from event_bridge.config import EventBridgeConfig, load_config, load_dotenv_files
from event_bridge.core.errors import InvalidTargetError
from event_bridge.core.targets import EventTarget

ENV_KEYS = (
    "EVENT_BRIDGE_LOG_LEVEL",
    "EVENT_BRIDGE_SURFACE_KIND",
    "EVENT_BRIDGE_SURFACE_LABEL",
    "EVENT_BRIDGE_MAX_ERRORS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        # set first so monkeypatch restores values written by dotenv
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults():
    config = EventBridgeConfig.from_env()
    assert config.log_level == "INFO"
    assert config.surface_target() == EventTarget.webview("main")
    assert config.max_errors == 200
    assert config.logging_level() == logging.INFO


def test_from_env_parses_values(monkeypatch):
    monkeypatch.setenv("EVENT_BRIDGE_LOG_LEVEL", "debug")
    monkeypatch.setenv("EVENT_BRIDGE_SURFACE_KIND", "Window")
    monkeypatch.setenv("EVENT_BRIDGE_SURFACE_LABEL", "settings")
    monkeypatch.setenv("EVENT_BRIDGE_MAX_ERRORS", "25")

    config = EventBridgeConfig.from_env()

    assert config.logging_level() == logging.DEBUG
    assert config.surface_target() == EventTarget.window("settings")
    assert config.max_errors == 25


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("EVENT_BRIDGE_MAX_ERRORS", "lots")
    assert EventBridgeConfig.from_env().max_errors == 200
    monkeypatch.setenv("EVENT_BRIDGE_MAX_ERRORS", "-1")
    assert EventBridgeConfig.from_env().max_errors == 200


def test_unknown_level_and_kind():
    config = EventBridgeConfig(log_level="chatty", surface_kind="tab")
    assert config.logging_level() == logging.INFO
    with pytest.raises(InvalidTargetError):
        config.surface_target()
    assert EventBridgeConfig(surface_kind="global").surface_target().is_global


def test_load_config_reads_dotenv_without_overriding(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "EVENT_BRIDGE_SURFACE_LABEL=from-file\nEVENT_BRIDGE_LOG_LEVEL=WARNING\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("EVENT_BRIDGE_LOG_LEVEL", "ERROR")

    config = load_config([env_file, tmp_path / "missing.env"])

    assert config.surface_label == "from-file"
    assert config.log_level == "ERROR"


def test_load_dotenv_files_skips_missing(tmp_path):
    assert load_dotenv_files([tmp_path / "nope.env"]) == ()
