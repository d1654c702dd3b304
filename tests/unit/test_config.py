"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from gangsched.config import (
    GangSchedConfig, LoggingConfig, ScoringSettings, get_config, set_config, reset_config,
)
from gangsched.errors import ConfigurationError
from gangsched.types import ScoringMode


class TestScoringSettings:
    def test_defaults(self):
        cfg = ScoringSettings()
        assert cfg.mode is ScoringMode.LEAST
        assert cfg.min_score == 0
        assert cfg.max_score == 100

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GANGSCHED_MODE", "Most")
        monkeypatch.setenv("GANGSCHED_MAX_SCORE", "10")
        cfg = ScoringSettings()
        assert cfg.mode is ScoringMode.MOST
        assert cfg.max_score == 10

    def test_accepts_long_names(self):
        assert ScoringSettings(mode="PreferMostAllocated").mode is ScoringMode.MOST

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            ScoringSettings(mode="Balanced")

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError, match="min_score cannot be larger"):
            ScoringSettings(min_score=50, max_score=10)

    def test_is_frozen(self):
        cfg = ScoringSettings()
        with pytest.raises(Exception):
            cfg.mode = ScoringMode.MOST


class TestLoggingConfig:
    def test_defaults(self):
        cfg = LoggingConfig()
        assert cfg.log_level == "INFO"
        assert cfg.log_format == "console"

    def test_invalid_level(self):
        with pytest.raises(ConfigurationError):
            LoggingConfig(log_level="LOUD")

    def test_invalid_format(self):
        with pytest.raises(ConfigurationError):
            LoggingConfig(log_format="xml")

    def test_from_env_normalizes_case(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        cfg = LoggingConfig.from_env()
        assert cfg.log_level == "DEBUG"
        assert cfg.log_format == "json"


class TestGangSchedConfig:
    def test_defaults(self):
        cfg = GangSchedConfig()
        assert cfg.scoring.mode is ScoringMode.LEAST
        assert cfg.validate() == []

    def test_from_env_invalid_mode_fails_fast(self, monkeypatch):
        monkeypatch.setenv("GANGSCHED_MODE", "Balanced")
        with pytest.raises(ConfigurationError) as exc:
            GangSchedConfig.from_env()
        assert exc.value.field == "mode"

    def test_from_env_inverted_range(self, monkeypatch):
        monkeypatch.setenv("GANGSCHED_MIN_SCORE", "100")
        monkeypatch.setenv("GANGSCHED_MAX_SCORE", "0")
        with pytest.raises(ConfigurationError) as exc:
            GangSchedConfig.from_env()
        assert exc.value.field == "score_range"

    def test_from_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / "gangsched.env"
        env_file.write_text("# scoring\nGANGSCHED_MODE=Most\n")
        monkeypatch.setenv("GANGSCHED_MODE", "Least")
        cfg = GangSchedConfig.from_env(str(env_file))
        assert cfg.scoring.mode is ScoringMode.MOST

    def test_missing_env_file_is_ignored(self, tmp_path):
        cfg = GangSchedConfig.from_env(str(tmp_path / "missing.env"))
        assert cfg.scoring.mode is ScoringMode.LEAST

    def test_to_dict(self):
        d = GangSchedConfig().to_dict()
        assert d["scoring"]["mode"] == "Least"
        assert d["logging"]["log_format"] == "console"

    def test_str(self):
        assert str(GangSchedConfig()) == "GangSchedConfig(mode=Least, range=[0, 100])"


class TestGlobalConfig:
    def test_get_config_returns_default(self):
        assert isinstance(get_config(), GangSchedConfig)

    def test_get_config_is_singleton(self):
        assert get_config() is get_config()

    def test_reset_config_clears_singleton(self):
        a = get_config()
        reset_config()
        assert get_config() is not a

    def test_set_config_validates(self):
        cfg = GangSchedConfig(scoring=ScoringSettings(mode="Most"))
        set_config(cfg)
        assert get_config() is cfg
