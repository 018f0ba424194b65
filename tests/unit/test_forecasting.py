"""
Unit tests for forecasting methods.
"""

from math import isclose

import pytest

from transfer_analytics.analytics.forecasting import Forecaster, resolve_forecast_config
from transfer_analytics.analytics.schema import ForecastMethod
from transfer_analytics.core.config import ForecastConfig
from transfer_analytics.core.exceptions import (
    AnalyticsError,
    InsufficientDataError,
    InvalidParametersError,
)
from transfer_analytics.data.schema import points_from_values

DAY = 86400


def _assert_ordered(result):
    interval = result.confidence_interval
    assert len(result.forecasts) == result.periods
    assert len(interval.lower) == result.periods
    assert len(interval.upper) == result.periods
    for low, value, high in zip(interval.lower, result.forecasts, interval.upper):
        assert low <= value <= high


@pytest.mark.parametrize("method", list(ForecastMethod))
def test_interval_ordering_for_every_method(weekly_series, method):
    result = Forecaster().forecast(weekly_series, 14, method)

    assert result.method == method
    _assert_ordered(result)


@pytest.mark.parametrize(
    "method",
    [
        ForecastMethod.MOVING_AVERAGE,
        ForecastMethod.EXPONENTIAL_SMOOTHING,
        ForecastMethod.WEIGHTED_AVERAGE,
        ForecastMethod.LINEAR_REGRESSION,
    ],
)
def test_interval_ordering_for_negative_values(method):
    series = points_from_values([-5, -6, -7, -8, -9])
    _assert_ordered(Forecaster().forecast(series, 3, method))


def test_moving_average():
    series = points_from_values(range(1, 11))
    result = Forecaster().forecast(series, 2, ForecastMethod.MOVING_AVERAGE)

    assert result.forecasts == [7.0, 7.0]
    assert isclose(result.confidence_interval.lower[0], 6.3)
    assert isclose(result.confidence_interval.upper[0], 7.7)
    assert result.confidence_interval.level is None
    assert result.parameters["window"] == 7


def test_exponential_smoothing():
    series = points_from_values([10, 20, 30])
    result = Forecaster().forecast(series, 1, ForecastMethod.EXPONENTIAL_SMOOTHING)

    assert isclose(result.forecasts[0], 18.1)
    assert isclose(result.confidence_interval.upper[0], 18.1 * 1.15)


def test_weighted_average():
    series = points_from_values([1, 2, 3, 4, 5])
    result = Forecaster().forecast(series, 1, ForecastMethod.WEIGHTED_AVERAGE)

    assert isclose(result.forecasts[0], 55 / 15)
    assert isclose(result.confidence_interval.lower[0], 55 / 15 * 0.88)


def test_linear_regression_exact_fit(linear_series):
    result = Forecaster().forecast(linear_series, 3)

    assert result.method == ForecastMethod.LINEAR_REGRESSION
    for expected, value in zip([23, 25, 27], result.forecasts):
        assert isclose(value, expected, abs_tol=1e-9)
    assert result.confidence_interval.level == 0.95
    assert isclose(result.parameters["r_squared"], 1.0, abs_tol=1e-9)
    assert result.parameters["standard_error"] < 1e-9


def test_linear_regression_interval_width():
    series = points_from_values([1, 3, 2, 4])
    result = Forecaster().forecast(series, 1)

    # residuals from y = 0.8x + 1.3: -0.3, 0.9, -0.9, 0.3
    se = (1.8 / 4) ** 0.5
    margin = 1.96 * se * (1 + 1 / 4) ** 0.5
    assert isclose(result.forecasts[0], 0.8 * 4 + 1.3)
    assert isclose(result.confidence_interval.upper[0] - result.forecasts[0], margin)


def test_seasonal_forecast_follows_trend_and_cycle(weekly_series):
    result = Forecaster().forecast(weekly_series, 14, ForecastMethod.SEASONAL)

    assert result.parameters["period"] == 7
    assert result.parameters["is_seasonal"] is True
    assert all(f >= 0 for f in result.forecasts)
    assert all(low >= 0 for low in result.confidence_interval.lower)
    for i in range(7):
        assert result.forecasts[i + 7] > result.forecasts[i]


def test_seasonal_requires_minimum_history():
    series = points_from_values(range(10))
    with pytest.raises(InsufficientDataError):
        Forecaster().forecast(series, 3, ForecastMethod.SEASONAL)


def test_trend_extrapolation_of_constant_series():
    series = points_from_values([100.0] * 20)
    result = Forecaster().forecast(series, 5, ForecastMethod.TREND_EXTRAPOLATION)

    assert result.forecasts == [100.0] * 5
    assert result.parameters["trend_slope"] == 0.0


def test_forecast_timestamps_advance_by_step(linear_series):
    result = Forecaster().forecast(linear_series, 3, "moving_average")

    last = linear_series[-1].timestamp
    assert result.timestamps == [last + DAY, last + 2 * DAY, last + 3 * DAY]


def test_invalid_periods():
    with pytest.raises(InvalidParametersError):
        Forecaster().forecast(points_from_values([1, 2, 3]), 0)


def test_too_few_points():
    with pytest.raises(InsufficientDataError):
        Forecaster().forecast(points_from_values([1, 2]), 3)


def test_short_history_is_not_a_parameter_error():
    with pytest.raises(AnalyticsError) as exc_info:
        Forecaster().forecast(points_from_values([1, 2]), 3)
    assert not isinstance(exc_info.value, InvalidParametersError)


def test_unknown_method():
    with pytest.raises(InvalidParametersError):
        Forecaster().forecast(points_from_values([1, 2, 3]), 1, "arima")


class TestOverrides:
    """Test per-call configuration overrides."""

    def test_override_applied(self):
        series = points_from_values([10, 20, 30])
        result = Forecaster().forecast(
            series, 1, ForecastMethod.EXPONENTIAL_SMOOTHING, smoothing_alpha=1.0
        )
        assert result.forecasts == [30.0]
        assert result.parameters["alpha"] == 1.0

    def test_out_of_range_override(self):
        with pytest.raises(InvalidParametersError):
            Forecaster().forecast(
                points_from_values([1, 2, 3]), 1, ForecastMethod.EXPONENTIAL_SMOOTHING,
                smoothing_alpha=0.0,
            )

    def test_unknown_override(self):
        with pytest.raises(InvalidParametersError):
            Forecaster().forecast(points_from_values([1, 2, 3]), 1, bogus=1)

    def test_resolve_without_overrides_returns_base(self):
        base = ForecastConfig()
        assert resolve_forecast_config(base, {}) is base

    def test_explicit_settings(self):
        series = points_from_values(range(1, 11))
        settings = ForecastConfig(moving_average_window=2, moving_average_band=0.5)
        result = Forecaster().forecast(series, 1, ForecastMethod.MOVING_AVERAGE, settings=settings)

        assert result.forecasts == [9.5]
        assert result.confidence_interval.upper == [9.5 * 1.5]
