"""Tests for wildscapes/config.py - environment configuration."""

import logging

import pytest

from wildscapes.config import WildscapesConfig, load_config
from wildscapes.errors import ConfigurationError


class TestDefaults:
    def test_empty_environment(self):
        config = load_config({})
        assert config == WildscapesConfig()
        assert config.persistence_enabled is False
        assert config.log_level_value == logging.INFO

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("WILDSCAPES_LOG_LEVEL", "debug")
        assert load_config().log_level == "DEBUG"


class TestValues:
    def test_full_environment(self):
        config = load_config(
            {
                "WILDSCAPES_API_BASE_URL": "https://stats.example.test/api/",
                "WILDSCAPES_API_TIMEOUT_SEC": "2.5",
                "WILDSCAPES_FINISH_ROUND": "yes",
                "WILDSCAPES_LOG_LEVEL": "warning",
                "WILDSCAPES_CATALOG_PATH": "/tmp/cards.yaml",
            }
        )
        assert config.api_base_url == "https://stats.example.test/api"
        assert config.persistence_enabled is True
        assert config.api_timeout_sec == 2.5
        assert config.finish_round is True
        assert config.log_level == "WARNING"
        assert config.catalog_path == "/tmp/cards.yaml"

    @pytest.mark.parametrize("raw,expected", [("1", True), ("on", True), ("0", False), ("off", False)])
    def test_flag_values(self, raw, expected):
        assert load_config({"WILDSCAPES_FINISH_ROUND": raw}).finish_round is expected

    def test_blank_url_disables_persistence(self):
        assert load_config({"WILDSCAPES_API_BASE_URL": "  "}).api_base_url is None


class TestErrors:
    @pytest.mark.parametrize(
        "env,key",
        [
            ({"WILDSCAPES_API_BASE_URL": "ftp://x"}, "WILDSCAPES_API_BASE_URL"),
            ({"WILDSCAPES_API_TIMEOUT_SEC": "soon"}, "WILDSCAPES_API_TIMEOUT_SEC"),
            ({"WILDSCAPES_API_TIMEOUT_SEC": "-1"}, "WILDSCAPES_API_TIMEOUT_SEC"),
            ({"WILDSCAPES_FINISH_ROUND": "maybe"}, "WILDSCAPES_FINISH_ROUND"),
            ({"WILDSCAPES_LOG_LEVEL": "loud"}, "WILDSCAPES_LOG_LEVEL"),
        ],
    )
    def test_invalid_values(self, env, key):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(env)
        assert exc_info.value.context["key"] == key
        assert exc_info.value.code == "CONFIGURATION_ERROR"
