import json
import logging

import pytest

from match3.components.token import TokenKind
from match3.settings import DEFAULT_SETTINGS, config_from_settings, load_settings, save_settings


def test_missing_file_returns_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.json")
    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_saved_settings_merge_with_defaults(tmp_path):
    path = tmp_path / "match3.json"
    save_settings({"swap_delay": 0.1, "require_match": True}, path)
    settings = load_settings(path)
    assert settings["swap_delay"] == 0.1
    assert settings["require_match"] is True
    assert settings["fall_delay"] == DEFAULT_SETTINGS["fall_delay"]


def test_invalid_json_falls_back_with_warning(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="match3.settings"):
        settings = load_settings(path)
    assert settings == DEFAULT_SETTINGS
    assert "Failed to load settings" in caplog.text


def test_non_object_json_falls_back(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_config_from_settings_ignores_unknown_keys():
    config = config_from_settings({
        "swap_delay": 0.0,
        "require_match": True,
        "spawn_kinds": ["red", "blue", "green"],
        "log_level": "DEBUG",
    })
    assert config.swap_delay == 0.0
    assert config.require_match is True
    assert config.spawn_kinds == (TokenKind.RED, TokenKind.BLUE, TokenKind.GREEN)


def test_config_rejects_negative_delay():
    with pytest.raises(ValueError):
        config_from_settings({"fall_delay": -1})
