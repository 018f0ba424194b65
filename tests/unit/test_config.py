"""
Unit tests for configuration and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from transfer_analytics.core.config import Config, DecompositionConfig, ForecastConfig
from transfer_analytics.core.logging_config import setup_logging


def test_defaults(mock_config):
    assert mock_config.anomaly.zscore_threshold == 3.0
    assert mock_config.anomaly.iqr_multiplier == 1.5
    assert mock_config.forecast.smoothing_alpha == 0.3
    assert mock_config.decomposition.candidate_periods == [7, 30]
    assert mock_config.demand.min_data_points == 30


def test_nested_environment_override(monkeypatch):
    monkeypatch.setenv("TRANSFER_ANALYTICS_ANOMALY__ZSCORE_THRESHOLD", "2.5")
    monkeypatch.setenv("TRANSFER_ANALYTICS_LOG_LEVEL", "DEBUG")

    settings = Config(_env_file=None)

    assert settings.anomaly.zscore_threshold == 2.5
    assert settings.log_level == "DEBUG"


def test_candidate_periods_validated():
    with pytest.raises(ValidationError):
        DecompositionConfig(candidate_periods=[])
    with pytest.raises(ValidationError):
        DecompositionConfig(candidate_periods=[7, 0])


def test_forecast_config_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        ForecastConfig(unknown_option=1)


def test_setup_logging_creates_handlers(mock_config):
    logger = setup_logging("transfer_analytics.test_setup", mock_config)

    try:
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 2
        assert (mock_config.logs_dir / "transfer_analytics.test_setup.log").exists()

        # Idempotent
        assert setup_logging("transfer_analytics.test_setup", mock_config) is logger
        assert len(logger.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
