"""
Demand forecast orchestration.

Pipeline:

    history
        ↓
    < min_data_points? → simple average over the full history
        ↓
    Decomposer → PatternDetector (seasonality of the seasonal component)
        ↓
    Forecaster (seasonal or trend_extrapolation)
        ↓
    DemandForecast with a qualitative confidence label

Caching and data access stay with the caller; results are deterministic for
identical inputs and safe to memoize.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from transfer_analytics.core.config import DemandConfig, config
from transfer_analytics.core.exceptions import InsufficientDataError
from transfer_analytics.data.schema import Series

from .decomposition import Decomposer
from .forecasting import Forecaster, MIN_FORECAST_POINTS
from .patterns import PatternDetector
from .schema import DemandForecast, ForecastConfidence, ForecastMethod

logger = logging.getLogger(__name__)

SIMPLE_AVERAGE = "simple_average"
SEASONAL_DECOMPOSITION = "seasonal_decomposition"
TREND_EXTRAPOLATION = "trend_extrapolation"


@dataclass
class DemandForecaster:
    """
    Chooses and runs the forecasting strategy for a demand history.

    The pattern detector and forecaster default to ones built on ``decomposer``,
    so a custom DecompositionConfig drives both strategy and forecast.
    """

    settings: DemandConfig = field(default_factory=lambda: config.demand)
    decomposer: Decomposer = field(default_factory=Decomposer)
    pattern_detector: Optional[PatternDetector] = None
    forecaster: Optional[Forecaster] = None

    def __post_init__(self) -> None:
        # Strategy selection and the forecast must see the same decomposition
        if self.pattern_detector is None:
            self.pattern_detector = PatternDetector(decomposer=self.decomposer)
        if self.forecaster is None:
            self.forecaster = Forecaster(
                decomposer=self.decomposer,
                pattern_detector=self.pattern_detector,
            )

    def forecast_demand(self, series: Series, horizon: Optional[int] = None) -> DemandForecast:
        """
        Forecast demand ``horizon`` periods ahead.

        Raises:
            InsufficientDataError: If fewer than 3 points are available
            InvalidParametersError: If horizon < 1
        """
        horizon = self.settings.default_horizon if horizon is None else horizon
        data_points = len(series)

        if data_points < MIN_FORECAST_POINTS:
            raise InsufficientDataError(
                f"At least {MIN_FORECAST_POINTS} data points required for demand forecasting"
            )

        if data_points < self.settings.min_data_points:
            logger.warning(
                "Insufficient data for decomposition, using simple average: data_points=%d",
                data_points,
            )
            forecast = self.forecaster.forecast(
                series,
                horizon,
                ForecastMethod.MOVING_AVERAGE,
                moving_average_window=data_points,
            )
            return DemandForecast(
                forecast=forecast,
                strategy=SIMPLE_AVERAGE,
                is_seasonal=False,
                data_points=data_points,
                confidence=self._confidence(SIMPLE_AVERAGE, data_points),
                warning="Insufficient data for advanced forecasting",
            )

        decomposition = self.decomposer.decompose(series)
        seasonality = self.pattern_detector.seasonality_from_components(decomposition.seasonal)

        if seasonality.is_seasonal:
            strategy = SEASONAL_DECOMPOSITION
            method = ForecastMethod.SEASONAL
        else:
            strategy = TREND_EXTRAPOLATION
            method = ForecastMethod.TREND_EXTRAPOLATION

        forecast = self.forecaster.forecast(series, horizon, method)

        logger.info(
            "Generated demand forecast: strategy=%s data_points=%d horizon=%d period=%s",
            strategy,
            data_points,
            horizon,
            decomposition.period if seasonality.is_seasonal else None,
        )

        return DemandForecast(
            forecast=forecast,
            strategy=strategy,
            is_seasonal=seasonality.is_seasonal,
            seasonal_period=decomposition.period if seasonality.is_seasonal else None,
            data_points=data_points,
            confidence=self._confidence(strategy, data_points),
        )

    def _confidence(self, strategy: str, data_points: int) -> ForecastConfidence:
        if data_points < self.settings.min_data_points:
            return ForecastConfidence.LOW
        if strategy == SEASONAL_DECOMPOSITION and data_points >= self.settings.high_confidence_points:
            return ForecastConfidence.HIGH
        if data_points >= self.settings.medium_confidence_points:
            return ForecastConfidence.MEDIUM
        return ForecastConfidence.LOW


def forecast_demand(series: Series, horizon: Optional[int] = None) -> DemandForecast:
    """Forecast demand with the default configuration."""
    return DemandForecaster().forecast_demand(series, horizon)
