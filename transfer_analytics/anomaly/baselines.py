"""
Baseline estimation for anomaly detection.

Computes the reference statistics every detector compares against. All
estimates come from the shared statistics primitives so that population
variance is used consistently across detectors.
"""

from __future__ import annotations

from typing import Sequence

from transfer_analytics.analytics import statistics as stats

from .schema import BaselineStats


def estimate_baseline(values: Sequence[float]) -> BaselineStats:
    """
    Estimate location and spread for a non-empty sequence of values.

    MAD is the median of absolute deviations from the median (unscaled).
    """
    mean = stats.mean(values)
    median = stats.median(values)
    quartiles = stats.quartiles(values)
    return BaselineStats(
        mean=mean,
        std=stats.stddev(values, mean),
        median=median,
        mad=stats.median([abs(v - median) for v in values]),
        q1=quartiles.q1,
        q3=quartiles.q3,
        iqr=quartiles.iqr,
        count=len(values),
    )
