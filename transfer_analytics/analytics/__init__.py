"""
Analytics module: statistics, trends, decomposition, forecasting and patterns.

Pure, synchronous computations over already-extracted series. Dependency
order: statistics → trend → decomposition → {forecasting, patterns} → demand.
"""

from .decomposition import Decomposer, centered_moving_average
from .demand import DemandForecaster, forecast_demand
from .forecasting import Forecaster
from .patterns import PatternDetector
from .schema import (
    ConfidenceInterval,
    CorrelationDirection,
    CorrelationResult,
    CycleInfo,
    DecompositionResult,
    DemandForecast,
    ForecastConfidence,
    ForecastMethod,
    ForecastResult,
    PatternReport,
    PeriodComparison,
    Quartiles,
    SeasonalityInfo,
    StatisticalSummary,
    StepChange,
    Strength,
    TrendDirection,
    TrendKind,
    TrendResult,
)
from .scoring import StrengthMapper
from .statistics import (
    autocorrelation,
    compare_periods,
    mean,
    median,
    mode,
    percentile,
    percentiles,
    quartiles,
    stddev,
    summary,
    variance,
)
from .trend import TrendAnalyzer, linear_fit, linear_slope, quadratic_fit

__all__ = [
    # Statistics
    "summary",
    "mean",
    "median",
    "mode",
    "variance",
    "stddev",
    "quartiles",
    "percentile",
    "percentiles",
    "autocorrelation",
    "compare_periods",

    # Trend
    "TrendAnalyzer",
    "linear_fit",
    "linear_slope",
    "quadratic_fit",

    # Decomposition
    "Decomposer",
    "centered_moving_average",

    # Forecasting
    "Forecaster",
    "DemandForecaster",
    "forecast_demand",

    # Patterns
    "PatternDetector",
    "StrengthMapper",

    # Schema
    "StatisticalSummary",
    "Quartiles",
    "TrendResult",
    "TrendKind",
    "TrendDirection",
    "Strength",
    "DecompositionResult",
    "SeasonalityInfo",
    "ForecastMethod",
    "ForecastResult",
    "ConfidenceInterval",
    "CorrelationResult",
    "CorrelationDirection",
    "CycleInfo",
    "StepChange",
    "PatternReport",
    "PeriodComparison",
    "DemandForecast",
    "ForecastConfidence",
]
