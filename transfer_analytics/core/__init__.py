"""
Core module: Configuration, logging, and exception handling.
"""

from .config import (
    AnomalyConfig,
    Config,
    DecompositionConfig,
    DemandConfig,
    ForecastConfig,
    PatternConfig,
    StrengthThresholds,
    config,
)
from .exceptions import (
    AnalyticsError,
    DataValidationError,
    DegenerateInputError,
    InsufficientDataError,
    InvalidParametersError,
)
from .logging_config import setup_logging

__all__ = [
    "Config",
    "config",
    "StrengthThresholds",
    "DecompositionConfig",
    "ForecastConfig",
    "AnomalyConfig",
    "PatternConfig",
    "DemandConfig",
    "AnalyticsError",
    "InsufficientDataError",
    "InvalidParametersError",
    "DegenerateInputError",
    "DataValidationError",
    "setup_logging",
]
