"""
Unit tests for Settings and the FSRS parameter vector.
"""

import pytest
from pydantic import ValidationError

from contextual_fsrs.config import Settings
from contextual_fsrs.scheduling import DEFAULT_PARAMETERS, FSRSParameters, validate_parameters
from contextual_fsrs.scheduling.parameters import DEFAULT_WEIGHTS, PARAMETER_COUNT


def _weights_csv(weights):
    return ",".join(str(w) for w in weights)


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FSRS_PARAMETERS", raising=False)
        monkeypatch.delenv("CACHE_ENABLED", raising=False)
        settings = Settings(_env_file=None)

        assert settings.fsrs_desired_retention == 0.9
        assert settings.cache_enabled is True
        assert settings.get_fsrs_parameters() is DEFAULT_PARAMETERS
        assert settings.cache_memory_budget_bytes == 50 * 1024 * 1024

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FSRS_DESIRED_RETENTION", "0.85")
        monkeypatch.setenv("CACHE_ENABLED", "false")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.fsrs_desired_retention == 0.85
        assert settings.cache_enabled is False
        assert settings.log_level == "DEBUG"

    def test_custom_parameters(self):
        weights = list(DEFAULT_WEIGHTS)
        weights[0] = 0.5

        settings = Settings(_env_file=None, fsrs_parameters=_weights_csv(weights))

        assert settings.get_fsrs_parameters()[0] == 0.5
        assert len(settings.get_fsrs_parameters()) == PARAMETER_COUNT

    def test_invalid_parameters_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, fsrs_parameters="1.0,2.0,3.0")

    @pytest.mark.parametrize("retention", [0.0, 1.0, 1.5])
    def test_retention_bounds(self, retention):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, fsrs_desired_retention=retention)

    def test_cache_config_dict(self):
        config = Settings(_env_file=None, cache_maintenance_batch_size=64).get_cache_config()

        assert config["maintenance_batch_size"] == 64
        assert config["maintenance_interval_seconds"] == 600.0


class TestParameters:
    def test_default_vector_is_valid(self):
        assert len(DEFAULT_PARAMETERS) == PARAMETER_COUNT
        assert validate_parameters(DEFAULT_WEIGHTS) == []

    def test_reports_every_problem(self):
        weights = list(DEFAULT_WEIGHTS)[:20] + [0.0]
        weights[2] = float("inf")

        errors = validate_parameters(weights)

        assert len(errors) == 2
        assert "w2" in errors[0]
        assert "w20" in errors[1]

    def test_wrong_count(self):
        assert validate_parameters([1.0] * 3) == ["Invalid parameter count: expected 21, got 3"]

    def test_from_sequence_raises(self):
        with pytest.raises(ValueError, match="out of reasonable bounds"):
            FSRSParameters.from_sequence([0.0] * PARAMETER_COUNT)

    def test_indexing_and_iteration(self):
        assert DEFAULT_PARAMETERS[11] == 2.18
        assert list(DEFAULT_PARAMETERS) == list(DEFAULT_WEIGHTS)
