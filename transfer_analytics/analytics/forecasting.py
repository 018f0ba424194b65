"""
Forecasting with confidence bounds.

Methods:
- moving_average, exponential_smoothing, weighted_average: flat forecasts
  with heuristic percentage bands (not statistical intervals)
- linear_regression: OLS extrapolation with a 95% prediction interval
- seasonal: trend extrapolation plus the decomposed seasonal cycle
- trend_extrapolation: trend component extrapolation only

Every method guarantees lower[i] <= forecasts[i] <= upper[i]. Forecast
timestamps advance by one observed step per period from the last point.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from math import sqrt
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from transfer_analytics.core.config import ForecastConfig, config
from transfer_analytics.core.exceptions import (
    InsufficientDataError,
    InvalidParametersError,
)
from transfer_analytics.data.schema import (
    Series,
    normalize_timestamps,
    series_timestamps,
    series_values,
    timestamp_step,
)

from .decomposition import Decomposer
from .patterns import PatternDetector
from .schema import ConfidenceInterval, ForecastMethod, ForecastResult
from .statistics import sample_variance
from .trend import linear_fit, linear_slope

logger = logging.getLogger(__name__)

MIN_FORECAST_POINTS = 3

# (forecasts, lower, upper, level, parameters)
_MethodOutput = Tuple[List[float], List[float], List[float], Optional[float], Dict[str, Any]]


def _percentage_band(
    forecasts: List[float], lower_pct: float, upper_pct: float
) -> Tuple[List[float], List[float]]:
    lower = [f - abs(f) * lower_pct for f in forecasts]
    upper = [f + abs(f) * upper_pct for f in forecasts]
    return lower, upper


def resolve_forecast_config(base: ForecastConfig, overrides: Dict[str, Any]) -> ForecastConfig:
    """
    Apply per-call overrides on top of a base configuration.

    Raises:
        InvalidParametersError: If an override is unknown or out of range
    """
    if not overrides:
        return base
    try:
        return ForecastConfig.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        raise InvalidParametersError(f"Invalid forecast options: {e}") from e


def _coerce_method(method: Union[ForecastMethod, str]) -> ForecastMethod:
    try:
        return ForecastMethod(method)
    except ValueError as e:
        raise InvalidParametersError(f"Invalid forecast method: {method}") from e


@dataclass
class Forecaster:
    """
    Produces future-value predictions for a series.

    Linear regression is the preferred default; the seasonal method should be
    chosen when the series' seasonal component is significant.
    """

    settings: ForecastConfig = field(default_factory=lambda: config.forecast)
    decomposer: Decomposer = field(default_factory=Decomposer)
    pattern_detector: PatternDetector = field(default_factory=PatternDetector)

    def __post_init__(self) -> None:
        self._methods: Dict[ForecastMethod, Callable[..., _MethodOutput]] = {
            ForecastMethod.MOVING_AVERAGE: self._moving_average,
            ForecastMethod.EXPONENTIAL_SMOOTHING: self._exponential_smoothing,
            ForecastMethod.WEIGHTED_AVERAGE: self._weighted_average,
            ForecastMethod.LINEAR_REGRESSION: self._linear_regression,
            ForecastMethod.SEASONAL: self._seasonal,
            ForecastMethod.TREND_EXTRAPOLATION: self._trend_extrapolation,
        }

    def forecast(
        self,
        series: Series,
        periods: int,
        method: Union[ForecastMethod, str] = ForecastMethod.LINEAR_REGRESSION,
        settings: Optional[ForecastConfig] = None,
        **overrides: Any,
    ) -> ForecastResult:
        """
        Forecast ``periods`` future values.

        Args:
            series: Chronologically ordered history
            periods: Number of future periods (>= 1)
            method: Forecast method
            settings: Configuration replacing the forecaster's default
            **overrides: Individual ForecastConfig fields, e.g. ``smoothing_alpha=0.5``

        Raises:
            InvalidParametersError: periods < 1, unknown method or bad override
            InsufficientDataError: fewer than 3 points (14 for seasonal). Short
                history is a data shortage, not a bad option, so it is not an
                InvalidParametersError; catch AnalyticsError to handle both.
        """
        method = _coerce_method(method)
        if periods < 1:
            raise InvalidParametersError("Periods must be at least 1")
        if len(series) < MIN_FORECAST_POINTS:
            raise InsufficientDataError(
                f"At least {MIN_FORECAST_POINTS} data points required for forecasting"
            )

        settings = resolve_forecast_config(settings or self.settings, overrides)
        values = series_values(series)
        timestamps = series_timestamps(series)

        started = time.perf_counter()
        forecasts, lower, upper, level, parameters = self._methods[method](
            values, timestamps, periods, settings
        )

        step = timestamp_step(timestamps)
        future = [timestamps[-1] + step * i for i in range(1, periods + 1)]

        logger.debug(
            "Forecast generated: method=%s historical_points=%d periods=%d duration_ms=%.2f",
            method.value,
            len(values),
            periods,
            (time.perf_counter() - started) * 1000,
        )

        return ForecastResult(
            method=method,
            periods=periods,
            forecasts=forecasts,
            timestamps=future,
            confidence_interval=ConfidenceInterval(lower=lower, upper=upper, level=level),
            parameters=parameters,
        )

    def _moving_average(self, values, timestamps, periods, settings) -> _MethodOutput:
        window = min(settings.moving_average_window, len(values))
        recent = values[-window:]
        level_value = sum(recent) / len(recent)
        forecasts = [level_value] * periods
        lower, upper = _percentage_band(
            forecasts, settings.moving_average_band, settings.moving_average_band
        )
        return forecasts, lower, upper, None, {"window": window}

    def _exponential_smoothing(self, values, timestamps, periods, settings) -> _MethodOutput:
        alpha = settings.smoothing_alpha
        smoothed = values[0]
        for value in values[1:]:
            smoothed = alpha * value + (1 - alpha) * smoothed
        forecasts = [smoothed] * periods
        lower, upper = _percentage_band(forecasts, settings.smoothing_band, settings.smoothing_band)
        return forecasts, lower, upper, None, {"alpha": alpha}

    def _weighted_average(self, values, timestamps, periods, settings) -> _MethodOutput:
        window = min(settings.weighted_window, len(values))
        recent = values[-window:]
        # Linear weights, most recent heaviest
        weights = range(1, len(recent) + 1)
        level_value = sum(v * w for v, w in zip(recent, weights)) / sum(weights)
        forecasts = [level_value] * periods
        lower, upper = _percentage_band(
            forecasts, settings.weighted_lower_band, settings.weighted_upper_band
        )
        return forecasts, lower, upper, None, {"window": window}

    def _linear_regression(self, values, timestamps, periods, settings) -> _MethodOutput:
        x = normalize_timestamps(timestamps)
        slope, intercept, r_squared = linear_fit(x, values)
        n = len(values)

        squared_errors = [(v - (slope * xi + intercept)) ** 2 for xi, v in zip(x, values)]
        std_error = sqrt(sum(squared_errors) / n)
        margin = settings.confidence_z * std_error * sqrt(1 + 1 / n)

        last_x = x[-1]
        forecasts = [slope * (last_x + i) + intercept for i in range(1, periods + 1)]
        lower = [f - margin for f in forecasts]
        upper = [f + margin for f in forecasts]

        parameters = {
            "slope": slope,
            "intercept": intercept,
            "r_squared": r_squared,
            "standard_error": std_error,
        }
        return forecasts, lower, upper, settings.confidence_level, parameters

    def _seasonal(self, values, timestamps, periods, settings) -> _MethodOutput:
        if len(values) < settings.min_seasonal_points:
            raise InsufficientDataError(
                f"At least {settings.min_seasonal_points} data points required "
                "for seasonal forecasting"
            )
        decomposition = self.decomposer.decompose_values(values)
        seasonality = self.pattern_detector.seasonality_from_components(decomposition.seasonal)
        return self._extrapolate(
            values,
            decomposition.trend,
            periods,
            settings,
            cycle=decomposition.seasonal_cycle,
            extra={
                "period": decomposition.period,
                "seasonal_cycle": decomposition.seasonal_cycle,
                "is_seasonal": seasonality.is_seasonal,
                "seasonal_strength": seasonality.strength,
            },
        )

    def _trend_extrapolation(self, values, timestamps, periods, settings) -> _MethodOutput:
        decomposition = self.decomposer.decompose_values(values)
        return self._extrapolate(values, decomposition.trend, periods, settings)

    @staticmethod
    def _extrapolate(
        values: List[float],
        trend: List[float],
        periods: int,
        settings: ForecastConfig,
        cycle: Optional[List[float]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> _MethodOutput:
        n = len(values)
        slope = linear_slope(trend)
        last_trend = trend[-1]

        forecasts: List[float] = []
        for i in range(1, periods + 1):
            prediction = last_trend + slope * i
            if cycle:
                prediction += cycle[(n + i - 1) % len(cycle)]
            # Demand cannot be negative
            forecasts.append(max(0.0, prediction))

        margin = settings.confidence_z * sqrt(sample_variance(values))
        lower = [max(0.0, f - margin) for f in forecasts]
        upper = [f + margin for f in forecasts]

        parameters: Dict[str, Any] = {"trend_slope": slope, "last_trend": last_trend}
        parameters.update(extra or {})
        return forecasts, lower, upper, settings.confidence_level, parameters
