"""
Detectors for statistical deviations.

Implements four interchangeable, explainable methods:
- Statistical (distance from the mean in standard deviations)
- IQR fences
- Z-score
- MAD modified z-score

Each detector evaluates one point at a time against a precomputed baseline
and returns an AnomalyRecord for flagged points.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from transfer_analytics.data.schema import TimeSeriesPoint

from .schema import AnomalyRecord, BaselineStats, ExpectedRange
from .scoring import SeverityMapper


@dataclass
class StatisticalDetector:
    """
    Flags points farther than ``sensitivity`` standard deviations from the mean.

    With zero spread the threshold is zero and nothing is flagged.
    """

    sensitivity: float
    severity_mapper: SeverityMapper

    def degenerate_reason(self, baseline: BaselineStats) -> Optional[str]:
        return None

    def parameters(self, baseline: BaselineStats) -> Dict[str, Any]:
        return {
            "mean": baseline.mean,
            "stddev": baseline.std,
            "threshold": self.sensitivity * baseline.std,
            "sensitivity": self.sensitivity,
        }

    def evaluate(
        self, index: int, point: TimeSeriesPoint, baseline: BaselineStats
    ) -> Optional[AnomalyRecord]:
        threshold = self.sensitivity * baseline.std
        deviation = abs(point.value - baseline.mean)
        if deviation <= threshold:
            return None
        return AnomalyRecord(
            index=index,
            timestamp=point.timestamp,
            value=point.value,
            deviation=deviation,
            expected_range=ExpectedRange(
                lower=baseline.mean - threshold,
                upper=baseline.mean + threshold,
            ),
            severity=self.severity_mapper.magnitude_severity(deviation, threshold),
        )


@dataclass
class IQRDetector:
    """
    Flags points outside ``[Q1 - m·IQR, Q3 + m·IQR]``.

    Points more than one extra IQR past a fence are HIGH.
    """

    multiplier: float
    severity_mapper: SeverityMapper

    def _bounds(self, baseline: BaselineStats) -> ExpectedRange:
        return ExpectedRange(
            lower=baseline.q1 - self.multiplier * baseline.iqr,
            upper=baseline.q3 + self.multiplier * baseline.iqr,
        )

    def degenerate_reason(self, baseline: BaselineStats) -> Optional[str]:
        return None

    def parameters(self, baseline: BaselineStats) -> Dict[str, Any]:
        bounds = self._bounds(baseline)
        return {
            "q1": baseline.q1,
            "q3": baseline.q3,
            "iqr": baseline.iqr,
            "lower_bound": bounds.lower,
            "upper_bound": bounds.upper,
            "multiplier": self.multiplier,
        }

    def evaluate(
        self, index: int, point: TimeSeriesPoint, baseline: BaselineStats
    ) -> Optional[AnomalyRecord]:
        bounds = self._bounds(baseline)
        if bounds.lower <= point.value <= bounds.upper:
            return None
        past = bounds.lower - point.value if point.value < bounds.lower else point.value - bounds.upper
        return AnomalyRecord(
            index=index,
            timestamp=point.timestamp,
            value=point.value,
            deviation=past,
            expected_range=bounds,
            severity=self.severity_mapper.range_severity(
                point.value, bounds.lower, bounds.upper, baseline.iqr
            ),
        )


@dataclass
class ZScoreDetector:
    """
    Z-score detector.

    If the baseline std is at or below ``min_std``, detection is suppressed
    instead of dividing by (near) zero.
    """

    threshold: float
    min_std: float
    severity_mapper: SeverityMapper

    def degenerate_reason(self, baseline: BaselineStats) -> Optional[str]:
        if baseline.std <= self.min_std:
            return "No variance in data - cannot calculate z-scores"
        return None

    def parameters(self, baseline: BaselineStats) -> Dict[str, Any]:
        return {"mean": baseline.mean, "stddev": baseline.std, "threshold": self.threshold}

    def compute(self, observed: float, baseline: BaselineStats) -> float:
        return (observed - baseline.mean) / baseline.std

    def evaluate(
        self, index: int, point: TimeSeriesPoint, baseline: BaselineStats
    ) -> Optional[AnomalyRecord]:
        z = self.compute(point.value, baseline)
        if abs(z) <= self.threshold:
            return None
        margin = self.threshold * baseline.std
        return AnomalyRecord(
            index=index,
            timestamp=point.timestamp,
            value=point.value,
            z_score=z,
            expected_range=ExpectedRange(
                lower=baseline.mean - margin, upper=baseline.mean + margin
            ),
            severity=self.severity_mapper.magnitude_severity(z, self.threshold),
        )


@dataclass
class MADDetector:
    """
    Median Absolute Deviation detector using the modified z-score
    ``scale·(x - median) / MAD``.

    Robust to the outliers it is looking for; suppressed when MAD is zero.
    """

    threshold: float
    scale: float
    min_mad: float
    severity_mapper: SeverityMapper

    def degenerate_reason(self, baseline: BaselineStats) -> Optional[str]:
        if baseline.mad <= self.min_mad:
            return "MAD is zero - cannot detect anomalies"
        return None

    def parameters(self, baseline: BaselineStats) -> Dict[str, Any]:
        return {"median": baseline.median, "mad": baseline.mad, "threshold": self.threshold}

    def compute(self, observed: float, baseline: BaselineStats) -> float:
        return self.scale * (observed - baseline.median) / baseline.mad

    def evaluate(
        self, index: int, point: TimeSeriesPoint, baseline: BaselineStats
    ) -> Optional[AnomalyRecord]:
        score = self.compute(point.value, baseline)
        if abs(score) <= self.threshold:
            return None
        margin = self.threshold * baseline.mad / self.scale
        return AnomalyRecord(
            index=index,
            timestamp=point.timestamp,
            value=point.value,
            modified_z_score=score,
            expected_range=ExpectedRange(
                lower=baseline.median - margin, upper=baseline.median + margin
            ),
            severity=self.severity_mapper.magnitude_severity(score, self.threshold),
        )
