"""
Qualitative strength mapping for fit and correlation measures.

Maps R² and correlation magnitudes to strength buckets with configurable
thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass

from transfer_analytics.core.config import StrengthThresholds

from .schema import CorrelationDirection, Strength, TrendDirection


@dataclass
class StrengthMapper:
    """
    Maps a magnitude in [0, 1] to a strength bucket.
    """

    thresholds: StrengthThresholds

    def strength(self, magnitude: float) -> Strength:
        m = abs(magnitude)
        if m >= self.thresholds.very_strong:
            return Strength.VERY_STRONG
        if m >= self.thresholds.strong:
            return Strength.STRONG
        if m >= self.thresholds.moderate:
            return Strength.MODERATE
        if m >= self.thresholds.weak:
            return Strength.WEAK
        return Strength.VERY_WEAK


def trend_direction(slope: float) -> TrendDirection:
    if slope > 0:
        return TrendDirection.INCREASING
    if slope < 0:
        return TrendDirection.DECREASING
    return TrendDirection.FLAT


def correlation_direction(coefficient: float) -> CorrelationDirection:
    if coefficient > 0:
        return CorrelationDirection.POSITIVE
    if coefficient < 0:
        return CorrelationDirection.NEGATIVE
    return CorrelationDirection.NONE
