"""
Descriptive statistics primitives.

Pure functions over non-empty sequences of floats. Every function that needs
ordered data sorts a copy; caller-owned sequences are never mutated.

Design:
- Variance is the population variance (divide by n) everywhere, including
  anomaly thresholds, so detection sensitivity stays consistent
- Quartiles use the exclusive method (middle element excluded for odd n)
- Percentiles interpolate linearly at index (p/100)·(n-1)
"""

import logging
from collections import Counter
from math import ceil, floor, sqrt
from typing import Dict, Iterable, List, Optional, Sequence

from transfer_analytics.core.exceptions import (
    InsufficientDataError,
    InvalidParametersError,
)
from transfer_analytics.data.schema import Series, series_values

from .schema import PeriodChange, PeriodComparison, Quartiles, StatisticalSummary

logger = logging.getLogger(__name__)

DEFAULT_PERCENTILES = (5, 10, 25, 50, 75, 90, 95, 99)


def _require_values(values: Sequence[float]) -> None:
    if len(values) == 0:
        raise InsufficientDataError("Values cannot be empty")


def _median_sorted(ordered: Sequence[float]) -> float:
    count = len(ordered)
    middle = count // 2
    if count % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return float(ordered[middle])


def _percentile_sorted(ordered: Sequence[float], p: float) -> float:
    index = (p / 100) * (len(ordered) - 1)
    lower = floor(index)
    upper = ceil(index)
    if lower == upper:
        return float(ordered[lower])
    fraction = index - lower
    return ordered[lower] * (1 - fraction) + ordered[upper] * fraction


def _quartiles_sorted(ordered: Sequence[float]) -> Quartiles:
    count = len(ordered)
    q2 = _median_sorted(ordered)
    lower_half = ordered[: count // 2]
    upper_half = ordered[ceil(count / 2):]
    # A single value has no halves; both quartiles collapse onto the median.
    q1 = _median_sorted(lower_half) if lower_half else q2
    q3 = _median_sorted(upper_half) if upper_half else q2
    return Quartiles(q1=q1, q2=q2, q3=q3, iqr=q3 - q1)


def mean(values: Sequence[float]) -> float:
    _require_values(values)
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """
    Median of values, computed on a sorted copy.

    Even counts average the two middle elements.
    """
    _require_values(values)
    return _median_sorted(sorted(values))


def mode(values: Sequence[float]) -> Optional[float]:
    """
    Most frequent value, or None when every value occurs exactly once.

    Ties resolve to the value seen first.
    """
    _require_values(values)
    value, frequency = Counter(values).most_common(1)[0]
    if frequency == 1:
        return None
    return float(value)


def variance(values: Sequence[float], mean_value: Optional[float] = None) -> float:
    """
    Population variance (divide by n).

    Args:
        values: Observations
        mean_value: Precomputed mean, if available
    """
    _require_values(values)
    if mean_value is None:
        mean_value = mean(values)
    return sum((v - mean_value) ** 2 for v in values) / len(values)


def stddev(values: Sequence[float], mean_value: Optional[float] = None) -> float:
    return sqrt(variance(values, mean_value))


def sample_variance(values: Sequence[float]) -> float:
    """Sample variance (divide by n-1); 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    m = sum(values) / len(values)
    return sum((v - m) ** 2 for v in values) / (len(values) - 1)


def quartiles(values: Sequence[float]) -> Quartiles:
    _require_values(values)
    return _quartiles_sorted(sorted(values))


def percentile(values: Sequence[float], p: float) -> float:
    """
    Linearly interpolated percentile.

    Args:
        values: Observations (any order)
        p: Percentile in [0, 100]

    Raises:
        InvalidParametersError: If p is outside [0, 100]
    """
    _require_values(values)
    if not 0 <= p <= 100:
        raise InvalidParametersError(f"Percentile must be within [0, 100], got {p}")
    return _percentile_sorted(sorted(values), p)


def percentiles(
    values: Sequence[float], ps: Iterable[float] = DEFAULT_PERCENTILES
) -> Dict[str, float]:
    """Percentiles keyed as ``p5``, ``p10``, ..."""
    _require_values(values)
    ordered = sorted(values)
    results: Dict[str, float] = {}
    for p in ps:
        if not 0 <= p <= 100:
            raise InvalidParametersError(f"Percentile must be within [0, 100], got {p}")
        results[f"p{p:g}"] = _percentile_sorted(ordered, p)
    return results


def summary(values: Sequence[float]) -> StatisticalSummary:
    """
    Compute a full statistical summary.

    Args:
        values: Non-empty sequence of finite floats

    Returns:
        StatisticalSummary with population variance/stddev

    Raises:
        InsufficientDataError: If values is empty
    """
    _require_values(values)
    data: List[float] = [float(v) for v in values]
    ordered = sorted(data)

    count = len(data)
    total = sum(data)
    mean_value = total / count
    var = variance(data, mean_value)
    std = sqrt(var)

    return StatisticalSummary(
        count=count,
        sum=total,
        mean=mean_value,
        median=_median_sorted(ordered),
        mode=mode(data),
        min=ordered[0],
        max=ordered[-1],
        range=ordered[-1] - ordered[0],
        variance=var,
        stddev=std,
        quartiles=_quartiles_sorted(ordered),
        percentiles={f"p{p}": _percentile_sorted(ordered, p) for p in DEFAULT_PERCENTILES},
        coefficient_of_variation=(std / abs(mean_value)) * 100 if mean_value != 0 else 0.0,
    )


def _percent_change(current: float, previous: float) -> float:
    return ((current - previous) / previous) * 100 if previous != 0 else 0.0


def compare_periods(current: Series, previous: Series) -> PeriodComparison:
    """
    Compare two periods (e.g. this week vs. last week).

    Change is measured on period totals; mean change and volatility change
    are reported alongside.
    """
    current_stats = summary(series_values(current))
    previous_stats = summary(series_values(previous))

    change = current_stats.sum - previous_stats.sum
    if change > 0:
        direction = "up"
    elif change < 0:
        direction = "down"
    else:
        direction = "flat"

    return PeriodComparison(
        current=current_stats,
        previous=previous_stats,
        change=PeriodChange(
            absolute=change,
            percent=_percent_change(current_stats.sum, previous_stats.sum),
            direction=direction,
        ),
        mean_change_percent=_percent_change(current_stats.mean, previous_stats.mean),
        volatility_change=current_stats.stddev - previous_stats.stddev,
    )


def autocorrelation(values: Sequence[float], lag: int) -> float:
    """
    Normalized autocorrelation at ``lag``.

    Sum of lagged cross-products over the overlapping indices, divided by the
    total sum of squared deviations. Returns 0 when lag >= n, lag < 0, or the
    values have no variance.
    """
    n = len(values)
    if n == 0 or lag < 0 or lag >= n:
        return 0.0
    m = sum(values) / n
    denominator = sum((v - m) ** 2 for v in values)
    if denominator == 0:
        return 0.0
    numerator = sum((values[i] - m) * (values[i + lag] - m) for i in range(n - lag))
    return numerator / denominator
