"""
Pattern detection: seasonality, cycles, step changes and correlation.

Seasonality is judged on the seasonal component of a decomposition: its
variance must exceed a fixed threshold, and the dominant period is the
candidate lag with the largest autocorrelation magnitude.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import sqrt
from typing import List, Optional, Sequence, Union

from transfer_analytics.core.config import PatternConfig, StrengthThresholds, config
from transfer_analytics.core.exceptions import (
    InsufficientDataError,
    InvalidParametersError,
)
from transfer_analytics.data.schema import Series, TimeSeriesPoint, series_values

from .decomposition import Decomposer
from .schema import (
    CorrelationResult,
    CycleInfo,
    PatternReport,
    SeasonalityInfo,
    StepChange,
)
from .scoring import StrengthMapper, correlation_direction
from .statistics import autocorrelation, sample_variance, stddev

logger = logging.getLogger(__name__)

ValuesOrSeries = Union[Sequence[float], Series]


def _as_values(data: ValuesOrSeries) -> List[float]:
    return [float(p.value) if isinstance(p, TimeSeriesPoint) else float(p) for p in data]


@dataclass
class PatternDetector:
    """
    Detects recurring structure in a series.

    Notes:
    - seasonality needs at least ``min_seasonal_points`` observations
    - step changes compare each jump against the trailing local stddev
    """

    settings: PatternConfig = field(default_factory=lambda: config.patterns)
    thresholds: StrengthThresholds = field(default_factory=lambda: config.strength)
    decomposer: Decomposer = field(default_factory=Decomposer)

    def __post_init__(self) -> None:
        self._strength_mapper = StrengthMapper(self.thresholds)

    @staticmethod
    def autocorrelation(values: ValuesOrSeries, lag: int) -> float:
        return autocorrelation(_as_values(values), lag)

    def seasonality(self, series: Series) -> SeasonalityInfo:
        """
        Decompose the series and assess its seasonal component.

        Raises:
            InsufficientDataError: If fewer than ``min_seasonal_points`` points
        """
        if len(series) < self.settings.min_seasonal_points:
            raise InsufficientDataError(
                f"At least {self.settings.min_seasonal_points} data points required "
                f"for seasonality detection, got {len(series)}"
            )
        decomposition = self.decomposer.decompose(series)
        return self.seasonality_from_components(decomposition.seasonal)

    def seasonality_from_components(self, seasonal: Sequence[float]) -> SeasonalityInfo:
        """
        Assess a seasonal component produced by the Decomposer.

        Variance is the sample variance (n-1) of the component. Lags default to
        the decomposer's candidate periods.
        """
        variance = sample_variance(seasonal)
        detected_period: Optional[int] = None
        max_strength = 0.0

        lags = self.settings.seasonal_lags or self.decomposer.settings.candidate_periods
        for lag in lags:
            if len(seasonal) < lag * 2:
                continue
            strength = abs(autocorrelation(seasonal, lag))
            if strength > max_strength:
                max_strength = strength
                detected_period = lag

        return SeasonalityInfo(
            is_seasonal=variance > self.settings.seasonal_variance_threshold,
            period=detected_period,
            strength=max_strength,
            variance=variance,
        )

    def cycles(self, series: ValuesOrSeries) -> List[CycleInfo]:
        """
        Approximate cycles from the spacing of local maxima.

        Returns an empty list when fewer than two peaks exist.
        """
        values = _as_values(series)
        peaks: List[int] = []
        troughs: List[int] = []
        for i in range(1, len(values) - 1):
            if values[i] > values[i - 1] and values[i] > values[i + 1]:
                peaks.append(i)
            if values[i] < values[i - 1] and values[i] < values[i + 1]:
                troughs.append(i)

        if len(peaks) < 2:
            return []

        distances = [b - a for a, b in zip(peaks, peaks[1:])]
        return [
            CycleInfo(
                average_period=sum(distances) / len(distances),
                peak_count=len(peaks),
                trough_count=len(troughs),
            )
        ]

    def step_changes(self, series: Series) -> List[StepChange]:
        """
        Flag jumps larger than ``step_threshold`` local standard deviations.

        The local stddev is taken over up to ``step_window`` points preceding
        the jump; at least two points are required and a zero local stddev
        never flags.
        """
        points = list(series)
        values = series_values(points)
        changes: List[StepChange] = []

        for i in range(1, len(values)):
            window = values[max(0, i - self.settings.step_window):i]
            if len(window) < 2:
                continue
            local_threshold = self.settings.step_threshold * stddev(window)
            diff = values[i] - values[i - 1]
            if local_threshold > 0 and abs(diff) > local_threshold:
                previous = values[i - 1]
                changes.append(
                    StepChange(
                        index=i,
                        timestamp=points[i].timestamp,
                        from_value=previous,
                        to_value=values[i],
                        change=diff,
                        change_percent=(diff / previous) * 100 if previous != 0 else 0.0,
                    )
                )
        return changes

    def correlation(self, first: ValuesOrSeries, second: ValuesOrSeries) -> CorrelationResult:
        """
        Pearson correlation with population covariance.

        Raises:
            InvalidParametersError: If the series lengths differ
            InsufficientDataError: If fewer than 2 points are given
        """
        a = _as_values(first)
        b = _as_values(second)
        if len(a) != len(b):
            raise InvalidParametersError("Series must have equal length")
        n = len(a)
        if n < 2:
            raise InsufficientDataError("At least 2 data points required")

        mean_a = sum(a) / n
        mean_b = sum(b) / n
        covariance = sum((x - mean_a) * (y - mean_b) for x, y in zip(a, b)) / n
        std_a = sqrt(sum((x - mean_a) ** 2 for x in a) / n)
        std_b = sqrt(sum((y - mean_b) ** 2 for y in b) / n)

        coefficient = covariance / (std_a * std_b) if std_a * std_b != 0 else 0.0
        coefficient = max(-1.0, min(1.0, coefficient))

        return CorrelationResult(
            correlation_coefficient=coefficient,
            covariance=covariance,
            strength=self._strength_mapper.strength(coefficient),
            direction=correlation_direction(coefficient),
        )

    def detect(self, series: Series) -> PatternReport:
        """Run every pattern scan; seasonality is skipped for short series."""
        seasonality = None
        if len(series) >= self.settings.min_seasonal_points:
            seasonality = self.seasonality(series)

        report = PatternReport(
            seasonality=seasonality,
            cycles=self.cycles(series),
            step_changes=self.step_changes(series),
        )
        logger.debug(
            "Pattern scan: points=%d seasonal=%s cycles=%d step_changes=%d",
            len(series),
            seasonality.is_seasonal if seasonality else None,
            len(report.cycles),
            len(report.step_changes),
        )
        return report
