"""
Unit tests for anomaly detectors.
"""

from transfer_analytics.anomaly.detectors import (
    IQRDetector,
    MADDetector,
    StatisticalDetector,
    ZScoreDetector,
)
from transfer_analytics.anomaly.schema import AnomalySeverity, BaselineStats
from transfer_analytics.anomaly.scoring import SeverityMapper
from transfer_analytics.data.schema import TimeSeriesPoint

MAPPER = SeverityMapper(high_severity_factor=1.5)


def _baseline(**overrides) -> BaselineStats:
    data = {
        "mean": 10.0,
        "std": 2.0,
        "median": 10.0,
        "mad": 1.0,
        "q1": 8.0,
        "q3": 12.0,
        "iqr": 4.0,
        "count": 10,
    }
    data.update(overrides)
    return BaselineStats(**data)


def _point(value: float) -> TimeSeriesPoint:
    return TimeSeriesPoint(timestamp=0, value=value)


def test_zscore_detector_computes_value():
    detector = ZScoreDetector(threshold=3.0, min_std=1e-12, severity_mapper=MAPPER)

    z = detector.compute(14.0, _baseline())
    assert abs(z - 2.0) < 1e-6


def test_zscore_detector_flags_beyond_threshold():
    detector = ZScoreDetector(threshold=3.0, min_std=1e-12, severity_mapper=MAPPER)

    assert detector.evaluate(0, _point(16.0), _baseline()) is None

    record = detector.evaluate(3, _point(17.0), _baseline())
    assert record.index == 3
    assert record.z_score == 3.5
    assert record.severity == AnomalySeverity.MEDIUM
    assert record.expected_range.lower == 4.0
    assert record.expected_range.upper == 16.0

    high = detector.evaluate(4, _point(0.0), _baseline())
    assert high.z_score == -5.0
    assert high.severity == AnomalySeverity.HIGH


def test_zscore_detector_suppresses_small_std():
    detector = ZScoreDetector(threshold=3.0, min_std=1.0, severity_mapper=MAPPER)

    assert detector.degenerate_reason(_baseline(std=0.5)) is not None
    assert detector.degenerate_reason(_baseline()) is None


def test_mad_detector_modified_score():
    detector = MADDetector(threshold=3.5, scale=0.6745, min_mad=1e-12, severity_mapper=MAPPER)

    assert detector.evaluate(0, _point(15.0), _baseline()) is None
    record = detector.evaluate(0, _point(20.0), _baseline())
    assert abs(record.modified_z_score - 6.745) < 1e-9
    assert record.severity == AnomalySeverity.HIGH


def test_mad_detector_zero_mad():
    detector = MADDetector(threshold=3.5, scale=0.6745, min_mad=1e-12, severity_mapper=MAPPER)
    assert detector.degenerate_reason(_baseline(mad=0.0)) == "MAD is zero - cannot detect anomalies"


def test_statistical_detector():
    detector = StatisticalDetector(sensitivity=2.0, severity_mapper=MAPPER)

    assert detector.evaluate(0, _point(14.0), _baseline()) is None

    medium = detector.evaluate(0, _point(15.0), _baseline())
    assert medium.deviation == 5.0
    assert medium.severity == AnomalySeverity.MEDIUM

    high = detector.evaluate(0, _point(3.0), _baseline())
    assert high.severity == AnomalySeverity.HIGH
    assert detector.parameters(_baseline())["threshold"] == 4.0


def test_iqr_detector_bounds_and_severity():
    detector = IQRDetector(multiplier=1.5, severity_mapper=MAPPER)
    params = detector.parameters(_baseline())

    assert params["lower_bound"] == 2.0
    assert params["upper_bound"] == 18.0
    assert detector.evaluate(0, _point(18.0), _baseline()) is None

    medium = detector.evaluate(0, _point(20.0), _baseline())
    assert medium.deviation == 2.0
    assert medium.severity == AnomalySeverity.MEDIUM

    high = detector.evaluate(0, _point(-3.0), _baseline())
    assert high.deviation == 5.0
    assert high.severity == AnomalySeverity.HIGH
