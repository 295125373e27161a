"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from netdiag.config import (
    Config,
    Environment,
    get_config,
    load_config_from_env,
    load_config_from_file,
    reset_config,
)
from netdiag.exceptions import ConfigurationError


class TestConfigModel:
    def test_defaults(self) -> None:
        config = Config()
        assert config.environment == Environment.DEVELOPMENT
        assert config.rules_path is None
        assert config.high_confidence_threshold == 65
        assert config.medium_confidence_threshold == 40
        assert config.log_level == "WARNING"
        assert config.metrics_enabled is True

    def test_medium_above_high_rejected(self) -> None:
        with pytest.raises(ValueError):
            Config(high_confidence_threshold=30, medium_confidence_threshold=50)

    def test_threshold_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            Config(high_confidence_threshold=120)

    def test_environment_from_string(self) -> None:
        assert Environment.from_string("PRODUCTION") == Environment.PRODUCTION
        assert Environment.from_string("qa") == Environment.DEVELOPMENT


class TestLoadFromEnv:
    def test_reads_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETDIAG_ENVIRONMENT", "staging")
        monkeypatch.setenv("NETDIAG_HIGH_CONFIDENCE_THRESHOLD", "80")
        monkeypatch.setenv("NETDIAG_MEDIUM_CONFIDENCE_THRESHOLD", "50")
        monkeypatch.setenv("NETDIAG_LOG_LEVEL", "debug")
        monkeypatch.setenv("NETDIAG_METRICS_ENABLED", "no")
        monkeypatch.setenv("NETDIAG_RULES_PATH", "/etc/netdiag/rules.yaml")

        config = load_config_from_env()

        assert config.environment == Environment.STAGING
        assert config.high_confidence_threshold == 80
        assert config.medium_confidence_threshold == 50
        assert config.log_level == "DEBUG"
        assert config.metrics_enabled is False
        assert config.rules_path == Path("/etc/netdiag/rules.yaml")

    def test_unparseable_int_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETDIAG_HIGH_CONFIDENCE_THRESHOLD", "lots")
        assert load_config_from_env().high_confidence_threshold == 65

    def test_inconsistent_thresholds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETDIAG_MEDIUM_CONFIDENCE_THRESHOLD", "90")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_env()
        assert "environment" in exc_info.value.message


class TestLoadFromFile:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "netdiag.yaml"
        path.write_text("high_confidence_threshold: 75\nlog_level: INFO\n")

        config = load_config_from_file(path)

        assert config.high_confidence_threshold == 75
        assert config.log_level == "INFO"

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "netdiag.json"
        path.write_text('{"metrics_enabled": false, "rules_path": "rules.yaml"}')

        config = load_config_from_file(path)

        assert config.metrics_enabled is False
        assert config.rules_path == Path("rules.yaml")

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "netdiag.yaml"
        path.write_text("")
        assert load_config_from_file(path) == Config()

    def test_missing_file_falls_back_to_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NETDIAG_LOG_LEVEL", "error")
        config = load_config_from_file(tmp_path / "absent.yaml")
        assert config.log_level == "ERROR"

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "netdiag.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config_from_file(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / "netdiag.json"
        path.write_text('{"high_confidence_threshold": 150}')
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_file(path)
        assert exc_info.value.config_key == "high_confidence_threshold"

    def test_unparseable(self, tmp_path: Path) -> None:
        path = tmp_path / "netdiag.json"
        path.write_text("{broken")
        with pytest.raises(ConfigurationError, match="Failed to read"):
            load_config_from_file(path)


class TestGetConfig:
    def test_cached(self) -> None:
        assert get_config() is get_config()

    def test_reset_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_config()
        monkeypatch.setenv("NETDIAG_HIGH_CONFIDENCE_THRESHOLD", "90")
        assert get_config() is first

        reset_config()
        assert get_config().high_confidence_threshold == 90

    def test_config_file_variable(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "netdiag.yaml"
        path.write_text("medium_confidence_threshold: 30\n")
        monkeypatch.setenv("NETDIAG_CONFIG_FILE", str(path))

        assert get_config().medium_confidence_threshold == 30
