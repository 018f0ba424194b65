"""
Result schemas for the analytics modules.

All results are created fresh per call, fully computed, and frozen. Callers
own them outright; ``model_dump()`` yields plain dicts for caching or export.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Strength(str, Enum):
    """Qualitative strength buckets for R² and correlation magnitudes."""

    VERY_WEAK = "very_weak"
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"
    VERY_STRONG = "very_strong"


class TrendKind(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    POLYNOMIAL = "polynomial"


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    FLAT = "flat"
    COMPLEX = "complex"


class CorrelationDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NONE = "none"


class ForecastMethod(str, Enum):
    """Available forecasting methods."""

    MOVING_AVERAGE = "moving_average"
    EXPONENTIAL_SMOOTHING = "exponential_smoothing"
    WEIGHTED_AVERAGE = "weighted_average"
    LINEAR_REGRESSION = "linear_regression"
    SEASONAL = "seasonal"
    TREND_EXTRAPOLATION = "trend_extrapolation"


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


class Quartiles(_Result):
    q1: float
    q2: float
    q3: float
    iqr: float


class StatisticalSummary(_Result):
    """
    Descriptive statistics for a sequence of values.

    Variance and stddev are population measures (divide by n).
    """

    count: int = Field(ge=1)
    sum: float
    mean: float
    median: float
    mode: Optional[float] = None
    min: float
    max: float
    range: float
    variance: float = Field(ge=0.0)
    stddev: float = Field(ge=0.0)
    quartiles: Quartiles
    percentiles: Dict[str, float]
    coefficient_of_variation: float


class TrendResult(_Result):
    """
    Fitted trend with goodness of fit.

    Fields:
    - slope/intercept: linear parameters (log-space for exponential fits)
    - r_squared: 0 for flat series by convention
    - coefficient_a/exponent_b/growth_rate_percent: exponential fits only
    - coefficients/degree: polynomial fits only (y = a·x² + b·x + c)
    """

    kind: TrendKind
    slope: float
    intercept: float
    r_squared: float
    direction: TrendDirection
    strength: Strength
    coefficient_a: Optional[float] = None
    exponent_b: Optional[float] = None
    growth_rate_percent: Optional[float] = None
    coefficients: Optional[Dict[str, float]] = None
    degree: Optional[int] = None


class DecompositionResult(_Result):
    """
    Additive decomposition: original[i] == trend[i] + seasonal[i] + residual[i].

    Fields:
    - period: cycle length used for the seasonal component
    - seasonal_cycle: centered cycle (length = period), sums to ~0
    - period_autocorrelation: detrended autocorrelation at ``period``
    - trend_window: moving average window used for the trend
    """

    original: List[float]
    trend: List[float]
    seasonal: List[float]
    residual: List[float]
    period: int
    seasonal_cycle: List[float]
    period_autocorrelation: float
    trend_window: int


class SeasonalityInfo(_Result):
    is_seasonal: bool
    period: Optional[int] = None
    strength: float = 0.0
    variance: float = 0.0


class ConfidenceInterval(_Result):
    lower: List[float]
    upper: List[float]
    level: Optional[float] = None


class ForecastResult(_Result):
    """
    Future values with confidence bounds.

    lower[i] <= forecasts[i] <= upper[i] for every period. ``level`` is only
    set for statistically grounded intervals; percentage bands leave it None.
    """

    method: ForecastMethod
    periods: int = Field(ge=1)
    forecasts: List[float]
    timestamps: List[int]
    confidence_interval: ConfidenceInterval
    parameters: Dict[str, Any] = Field(default_factory=dict)


class CorrelationResult(_Result):
    correlation_coefficient: float = Field(ge=-1.0, le=1.0)
    covariance: float
    strength: Strength
    direction: CorrelationDirection


class CycleInfo(_Result):
    """Approximate cycle derived from peak spacing."""

    kind: str = "peak_cycle"
    average_period: float
    peak_count: int
    trough_count: int


class StepChange(_Result):
    index: int
    timestamp: int
    from_value: float
    to_value: float
    change: float
    change_percent: float


class PatternReport(_Result):
    """Combined pattern scan; seasonality is None for series under the minimum."""

    seasonality: Optional[SeasonalityInfo] = None
    cycles: List[CycleInfo] = Field(default_factory=list)
    step_changes: List[StepChange] = Field(default_factory=list)


class PeriodChange(_Result):
    absolute: float
    percent: float
    direction: str


class PeriodComparison(_Result):
    current: StatisticalSummary
    previous: StatisticalSummary
    change: PeriodChange
    mean_change_percent: float
    volatility_change: float


class ForecastConfidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DemandForecast(_Result):
    """
    Demand forecast produced by the orchestration routine.

    Fields:
    - strategy: simple_average, seasonal_decomposition or trend_extrapolation
    - confidence: qualitative reliability based on history length and method
    - warning: set when the history was too short for decomposition
    """

    forecast: ForecastResult
    strategy: str
    is_seasonal: bool
    seasonal_period: Optional[int] = None
    data_points: int
    confidence: ForecastConfidence
    warning: Optional[str] = None
