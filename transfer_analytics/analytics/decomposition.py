"""
Additive time-series decomposition: value = trend + seasonal + residual.

Algorithm:
1. Trend via centered moving average; the window shrinks at the edges
   instead of padding, so boundary trend values use fewer samples.
2. Detrend: detrended = original - trend.
3. Seasonal: pick the candidate period with the highest positive
   autocorrelation of the detrended series, average detrended values per
   cycle position, center the cycle so it sums to zero, tile it.
4. Residual = original - trend - seasonal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from transfer_analytics.core.config import DecompositionConfig, config
from transfer_analytics.core.exceptions import InsufficientDataError
from transfer_analytics.data.schema import Series, series_values

from .schema import DecompositionResult
from .statistics import autocorrelation

logger = logging.getLogger(__name__)


def centered_moving_average(values: Sequence[float], window: int) -> List[float]:
    """
    Centered moving average clamped to the available neighbours.

    Each point averages values within ``window // 2`` positions on either side.
    """
    n = len(values)
    half = window // 2
    result: List[float] = []
    for i in range(n):
        start = max(0, i - half)
        end = min(n - 1, i + half)
        segment = values[start:end + 1]
        result.append(sum(segment) / len(segment))
    return result


@dataclass
class Decomposer:
    """
    Splits a series into trend, seasonal and residual components.

    Candidate periods come from configuration so hourly or annual cycles can
    be tested without code changes.
    """

    settings: DecompositionConfig = field(default_factory=lambda: config.decomposition)

    def decompose(self, series: Series) -> DecompositionResult:
        """
        Decompose a series.

        Raises:
            InsufficientDataError: If the series is empty
        """
        return self.decompose_values(series_values(series))

    def decompose_values(self, values: Sequence[float]) -> DecompositionResult:
        original = [float(v) for v in values]
        n = len(original)
        if n == 0:
            raise InsufficientDataError("Cannot decompose an empty series")

        window = max(1, min(self.settings.max_trend_window, n // 3))
        trend = centered_moving_average(original, window)
        detrended = [v - t for v, t in zip(original, trend)]

        period, period_corr = self._select_period(detrended)
        cycle = self._seasonal_cycle(detrended, period)
        seasonal = [cycle[i % period] for i in range(n)]
        residual = [v - t - s for v, t, s in zip(original, trend, seasonal)]

        logger.debug(
            "Decomposed %d points: trend_window=%d period=%d autocorrelation=%.3f",
            n,
            window,
            period,
            period_corr,
        )

        return DecompositionResult(
            original=original,
            trend=trend,
            seasonal=seasonal,
            residual=residual,
            period=period,
            seasonal_cycle=cycle,
            period_autocorrelation=period_corr,
            trend_window=window,
        )

    def _select_period(self, detrended: Sequence[float]) -> Tuple[int, float]:
        n = len(detrended)
        best_period = self.settings.default_period
        best_corr = 0.0
        for period in self.settings.candidate_periods:
            if n < period * 2:
                continue
            corr = autocorrelation(detrended, period)
            if corr > best_corr:
                best_corr = corr
                best_period = period
        if best_corr == 0.0:
            best_corr = autocorrelation(detrended, best_period)
        return best_period, best_corr

    @staticmethod
    def _seasonal_cycle(detrended: Sequence[float], period: int) -> List[float]:
        sums = [0.0] * period
        counts = [0] * period
        for i, value in enumerate(detrended):
            sums[i % period] += value
            counts[i % period] += 1

        pattern = [s / c if c else 0.0 for s, c in zip(sums, counts)]
        pattern_mean = sum(pattern) / period
        return [p - pattern_mean for p in pattern]
