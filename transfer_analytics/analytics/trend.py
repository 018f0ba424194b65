"""
Trend fitting: linear, exponential and second-degree polynomial regression.

All fits are closed-form least squares. Degenerate inputs have documented
fallbacks so downstream comparisons stay total-ordered:
- identical x values: slope 0, intercept mean(y)
- flat y (SS_tot == 0): R² = 0
- non-positive y in exponential fits: ln(y) taken as 0 (approximation)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from math import exp, log
from typing import List, Sequence, Tuple, Union

from transfer_analytics.core.config import StrengthThresholds, config
from transfer_analytics.core.exceptions import (
    DegenerateInputError,
    InsufficientDataError,
    InvalidParametersError,
)
from transfer_analytics.data.schema import (
    Series,
    normalize_timestamps,
    series_timestamps,
    series_values,
)

from .schema import TrendDirection, TrendKind, TrendResult
from .scoring import StrengthMapper, trend_direction

logger = logging.getLogger(__name__)


def _r_squared(x: Sequence[float], y: Sequence[float], predict) -> float:
    mean_y = sum(y) / len(y)
    ss_total = sum((v - mean_y) ** 2 for v in y)
    if ss_total == 0:
        return 0.0
    ss_residual = sum((v - predict(xi)) ** 2 for xi, v in zip(x, y))
    return 1 - ss_residual / ss_total


def linear_fit(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float, float]:
    """
    Ordinary least squares for y = slope·x + intercept.

    Returns:
        (slope, intercept, r_squared)
    """
    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_x2 = sum(a * a for a in x)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        slope = 0.0
        intercept = sum_y / n
    else:
        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n

    r_squared = _r_squared(x, y, lambda xi: slope * xi + intercept)
    return slope, intercept, r_squared


def linear_slope(values: Sequence[float]) -> float:
    """OLS slope of values against their positional index (0 for < 2 values)."""
    if len(values) < 2:
        return 0.0
    slope, _, _ = linear_fit([float(i) for i in range(len(values))], values)
    return slope


def _solve_3x3(matrix: List[List[float]], rhs: List[float]) -> List[float]:
    """Gaussian elimination with partial pivoting."""
    a = [row[:] + [b] for row, b in zip(matrix, rhs)]
    size = 3
    for col in range(size):
        pivot = max(range(col, size), key=lambda r: abs(a[r][col]))
        if abs(a[pivot][col]) < 1e-12:
            raise DegenerateInputError("Normal equations are singular")
        a[col], a[pivot] = a[pivot], a[col]
        for row in range(col + 1, size):
            factor = a[row][col] / a[col][col]
            for k in range(col, size + 1):
                a[row][k] -= factor * a[col][k]

    solution = [0.0] * size
    for row in range(size - 1, -1, -1):
        acc = a[row][size] - sum(a[row][k] * solution[k] for k in range(row + 1, size))
        solution[row] = acc / a[row][row]
    return solution


def quadratic_fit(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float, float, float]:
    """
    Least squares for y = a·x² + b·x + c.

    x is centered before building the normal equations and the coefficients
    are expanded back afterwards.

    Returns:
        (a, b, c, r_squared)

    Raises:
        DegenerateInputError: If fewer than three distinct x values exist
    """
    if len(set(x)) < 3:
        raise DegenerateInputError(
            "Polynomial trend requires at least 3 distinct x values"
        )

    n = len(x)
    center = sum(x) / n
    u = [xi - center for xi in x]

    s1 = sum(u)
    s2 = sum(ui ** 2 for ui in u)
    s3 = sum(ui ** 3 for ui in u)
    s4 = sum(ui ** 4 for ui in u)
    t0 = sum(y)
    t1 = sum(ui * yi for ui, yi in zip(u, y))
    t2 = sum(ui * ui * yi for ui, yi in zip(u, y))

    a, b_c, c_c = _solve_3x3(
        [[s4, s3, s2], [s3, s2, s1], [s2, s1, float(n)]],
        [t2, t1, t0],
    )

    b = b_c - 2 * a * center
    c = a * center * center - b_c * center + c_c

    r_squared = _r_squared(x, y, lambda xi: a * xi * xi + b * xi + c)
    return a, b, c, r_squared


def _coerce_kind(kind: Union[TrendKind, str]) -> TrendKind:
    try:
        return TrendKind(kind)
    except ValueError as e:
        raise InvalidParametersError(f"Invalid trend type: {kind}") from e


@dataclass
class TrendAnalyzer:
    """
    Fits trends and classifies their direction and strength.

    Strength is bucketed from R² using the configured thresholds.
    """

    thresholds: StrengthThresholds = field(default_factory=lambda: config.strength)

    def __post_init__(self) -> None:
        self._strength_mapper = StrengthMapper(self.thresholds)

    def fit(
        self,
        x: Sequence[float],
        y: Sequence[float],
        kind: Union[TrendKind, str] = TrendKind.LINEAR,
    ) -> TrendResult:
        """
        Fit a trend of the given kind.

        Args:
            x: Independent values (normalized time index)
            y: Observations, same length as x

        Raises:
            InvalidParametersError: If lengths differ or kind is unknown
            InsufficientDataError: If fewer than 2 points are given
            DegenerateInputError: Polynomial fit with < 3 distinct x values
        """
        kind = _coerce_kind(kind)
        if len(x) != len(y):
            raise InvalidParametersError(
                f"x and y must have equal length ({len(x)} != {len(y)})"
            )
        if len(x) < 2:
            raise InsufficientDataError("At least 2 data points required for trend analysis")

        xs = [float(v) for v in x]
        ys = [float(v) for v in y]

        started = time.perf_counter()
        if kind == TrendKind.LINEAR:
            result = self._fit_linear(xs, ys)
        elif kind == TrendKind.EXPONENTIAL:
            result = self._fit_exponential(xs, ys)
        else:
            result = self._fit_polynomial(xs, ys)

        logger.debug(
            "Trend analysis complete: kind=%s points=%d direction=%s strength=%s duration_ms=%.2f",
            kind.value,
            len(xs),
            result.direction.value,
            result.strength.value,
            (time.perf_counter() - started) * 1000,
        )
        return result

    def analyze(
        self, series: Series, kind: Union[TrendKind, str] = TrendKind.LINEAR
    ) -> TrendResult:
        """Fit a trend against the series' normalized timestamps."""
        x = normalize_timestamps(series_timestamps(series))
        return self.fit(x, series_values(series), kind)

    def _fit_linear(self, x: List[float], y: List[float]) -> TrendResult:
        slope, intercept, r_squared = linear_fit(x, y)
        return TrendResult(
            kind=TrendKind.LINEAR,
            slope=slope,
            intercept=intercept,
            r_squared=r_squared,
            direction=trend_direction(slope),
            strength=self._strength_mapper.strength(r_squared),
        )

    def _fit_exponential(self, x: List[float], y: List[float]) -> TrendResult:
        # ln(y) = ln(a) + b·x; non-positive values are mapped to ln(y) = 0
        ln_y = [log(v) if v > 0 else 0.0 for v in y]
        slope, intercept, r_squared = linear_fit(x, ln_y)
        return TrendResult(
            kind=TrendKind.EXPONENTIAL,
            slope=slope,
            intercept=intercept,
            r_squared=r_squared,
            direction=trend_direction(slope),
            strength=self._strength_mapper.strength(r_squared),
            coefficient_a=exp(intercept),
            exponent_b=slope,
            growth_rate_percent=(exp(slope) - 1) * 100,
        )

    def _fit_polynomial(self, x: List[float], y: List[float]) -> TrendResult:
        a, b, c, r_squared = quadratic_fit(x, y)
        return TrendResult(
            kind=TrendKind.POLYNOMIAL,
            slope=b,
            intercept=c,
            r_squared=r_squared,
            direction=TrendDirection.COMPLEX,
            strength=self._strength_mapper.strength(r_squared),
            coefficients={"a": a, "b": b, "c": c},
            degree=2,
        )
