"""
Anomaly module: statistical outlier detection over a single series.

Implements baselines, interchangeable detectors, severity mapping and the
detection engine.
"""

from .baselines import estimate_baseline
from .detectors import IQRDetector, MADDetector, StatisticalDetector, ZScoreDetector
from .engine import AnomalyDetector, resolve_anomaly_config
from .schema import (
    AnomalyMethod,
    AnomalyRecord,
    AnomalyResult,
    AnomalySeverity,
    BaselineStats,
    ExpectedRange,
)
from .scoring import SeverityMapper

__all__ = [
    "AnomalyDetector",
    "AnomalyMethod",
    "AnomalyRecord",
    "AnomalyResult",
    "AnomalySeverity",
    "BaselineStats",
    "ExpectedRange",
    "estimate_baseline",
    "resolve_anomaly_config",
    "StatisticalDetector",
    "IQRDetector",
    "ZScoreDetector",
    "MADDetector",
    "SeverityMapper",
]
