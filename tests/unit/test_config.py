"""Unit tests for configuration management."""
import logging

import pytest
from pydantic import ValidationError

import cider_dedup.config as config_module
from cider_dedup.config import DedupConfig, get_config, reload_config
from cider_dedup.matching.fields import FieldWeights


class TestDefaults:
    def test_default_values(self, config):
        assert config.duplicate_threshold == 0.85
        assert config.similar_threshold == 0.50
        assert config.name_weight == 0.55
        assert config.brand_weight == 0.25
        assert config.strength_weight == 0.10
        assert config.container_weight == 0.10
        assert config.edit_distance_weight == 0.6
        assert config.token_overlap_weight == 0.4
        assert config.quick_check_budget == 10
        assert config.max_similar_matches == 3
        assert config.max_suggestions == 5
        assert config.min_suggestion_length == 2
        assert config.log_level == "INFO"

    def test_defaults_have_no_issues(self, config):
        assert config.validate_configuration() == []

    def test_field_weights(self, config):
        assert config.field_weights() == FieldWeights()

    def test_log_configuration(self, config, caplog):
        with caplog.at_level(logging.INFO, logger="cider-dedup"):
            config.log_configuration()
        assert "Configuration loaded" in caplog.text


class TestEnvironment:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CIDER_DEDUP_DUPLICATE_THRESHOLD", "0.9")
        monkeypatch.setenv("CIDER_DEDUP_QUICK_CHECK_BUDGET", "25")
        monkeypatch.setenv("CIDER_DEDUP_LOG_LEVEL", "debug")

        config = DedupConfig(_env_file=None)

        assert config.duplicate_threshold == 0.9
        assert config.quick_check_budget == 25
        assert config.log_level == "DEBUG"

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("CIDER_DEDUP_SIMILAR_THRESHOLD", "not-a-number")
        with pytest.raises(ValidationError):
            DedupConfig(_env_file=None)

    def test_unrelated_env_ignored(self, monkeypatch):
        monkeypatch.setenv("CIDER_DEDUP_SOMETHING_ELSE", "1")
        assert DedupConfig(_env_file=None).duplicate_threshold == 0.85


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"duplicate_threshold": 1.5},
            {"similar_threshold": -0.1},
            {"similar_threshold": 0.9},
            {"duplicate_threshold": 0.5, "similar_threshold": 0.5},
            {"name_weight": -1.0},
            {"brand_weight": float("nan")},
            {"name_weight": 0, "brand_weight": 0, "strength_weight": 0, "container_weight": 0},
            {"edit_distance_weight": 0, "token_overlap_weight": 0},
            {"quick_check_budget": 0},
            {"max_suggestions": 0},
            {"log_level": "LOUD"},
        ],
    )
    def test_rejected(self, kwargs):
        with pytest.raises(ValidationError):
            DedupConfig(_env_file=None, **kwargs)

    def test_warnings_for_unusual_values(self):
        config = DedupConfig(
            _env_file=None,
            duplicate_threshold=0.6,
            similar_threshold=0.3,
            name_weight=0.2,
            brand_weight=0.5,
        )
        issues = config.validate_configuration()

        assert any("Field weights sum" in issue for issue in issues)
        assert any("DUPLICATE_THRESHOLD" in issue for issue in issues)
        assert any("Brand outweighs name" in issue for issue in issues)

    def test_blend_warning(self):
        config = DedupConfig(_env_file=None, edit_distance_weight=1.0)
        assert any("blend" in issue for issue in config.validate_configuration())


class TestGlobalConfig:
    def test_get_config_is_cached(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)
        assert get_config() is get_config()

    def test_reload_config_reads_environment(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)
        first = get_config()
        monkeypatch.setenv("CIDER_DEDUP_MAX_SUGGESTIONS", "7")

        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.max_suggestions == 7
        assert get_config() is reloaded
