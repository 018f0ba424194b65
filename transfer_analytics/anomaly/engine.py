"""
Anomaly detection engine.

Estimates a baseline for the whole series once, then runs the selected
detector over every point. Methods are interchangeable and selected per call.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from transfer_analytics.core.config import AnomalyConfig, config
from transfer_analytics.core.exceptions import (
    InsufficientDataError,
    InvalidParametersError,
)
from transfer_analytics.data.schema import Series, series_values

from .baselines import estimate_baseline
from .detectors import IQRDetector, MADDetector, StatisticalDetector, ZScoreDetector
from .schema import AnomalyMethod, AnomalyRecord, AnomalyResult
from .scoring import SeverityMapper

logger = logging.getLogger(__name__)


def resolve_anomaly_config(base: AnomalyConfig, overrides: Dict[str, Any]) -> AnomalyConfig:
    """
    Apply per-call overrides on top of a base configuration.

    Raises:
        InvalidParametersError: If an override is unknown or out of range
    """
    if not overrides:
        return base
    try:
        return AnomalyConfig.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        raise InvalidParametersError(f"Invalid anomaly options: {e}") from e


def _coerce_method(method: Union[AnomalyMethod, str]) -> AnomalyMethod:
    try:
        return AnomalyMethod(method)
    except ValueError as e:
        raise InvalidParametersError(f"Invalid anomaly detection method: {method}") from e


@dataclass
class AnomalyDetector:
    """
    Flags points that deviate from the series' own baseline.

    Notes:
    - statistical and iqr never report degenerate data; they simply flag nothing.
    - zscore and mad return an empty, degenerate result when spread is zero.
    """

    settings: AnomalyConfig = field(default_factory=lambda: config.anomaly)

    def __post_init__(self) -> None:
        self._factories: Dict[AnomalyMethod, Callable[[AnomalyConfig], Any]] = {
            AnomalyMethod.STATISTICAL: self._statistical,
            AnomalyMethod.IQR: self._iqr,
            AnomalyMethod.ZSCORE: self._zscore,
            AnomalyMethod.MAD: self._mad,
        }

    def detect(
        self,
        series: Series,
        method: Union[AnomalyMethod, str] = AnomalyMethod.STATISTICAL,
        settings: Optional[AnomalyConfig] = None,
        **overrides: Any,
    ) -> AnomalyResult:
        """
        Detect anomalies in a series.

        Args:
            series: Chronologically ordered points
            method: Detection method
            settings: Configuration replacing the detector's default
            **overrides: Individual AnomalyConfig fields, e.g. ``zscore_threshold=2.5``

        Raises:
            InvalidParametersError: Unknown method or bad override
            InsufficientDataError: Fewer than ``min_points`` points
        """
        method = _coerce_method(method)
        settings = resolve_anomaly_config(settings or self.settings, overrides)
        if len(series) < settings.min_points:
            raise InsufficientDataError(
                f"At least {settings.min_points} data points required for anomaly detection"
            )

        started = time.perf_counter()
        baseline = estimate_baseline(series_values(series))
        detector = self._factories[method](settings)
        parameters = detector.parameters(baseline)

        reason = detector.degenerate_reason(baseline)
        if reason is not None:
            logger.debug("Anomaly detection skipped: method=%s reason=%s", method.value, reason)
            return AnomalyResult(
                method=method,
                total_points=len(series),
                anomalies=[],
                parameters=parameters,
                degenerate=True,
                note=reason,
            )

        anomalies: List[AnomalyRecord] = []
        for index, point in enumerate(series):
            record = detector.evaluate(index, point, baseline)
            if record is not None:
                anomalies.append(record)

        logger.debug(
            "Anomaly detection complete: method=%s points=%d anomalies=%d duration_ms=%.2f",
            method.value,
            len(series),
            len(anomalies),
            (time.perf_counter() - started) * 1000,
        )

        return AnomalyResult(
            method=method,
            total_points=len(series),
            anomalies=anomalies,
            parameters=parameters,
        )

    @staticmethod
    def _severity(settings: AnomalyConfig) -> SeverityMapper:
        return SeverityMapper(high_severity_factor=settings.high_severity_factor)

    def _statistical(self, settings: AnomalyConfig) -> StatisticalDetector:
        return StatisticalDetector(
            sensitivity=settings.sensitivity,
            severity_mapper=self._severity(settings),
        )

    def _iqr(self, settings: AnomalyConfig) -> IQRDetector:
        return IQRDetector(
            multiplier=settings.iqr_multiplier,
            severity_mapper=self._severity(settings),
        )

    def _zscore(self, settings: AnomalyConfig) -> ZScoreDetector:
        return ZScoreDetector(
            threshold=settings.zscore_threshold,
            min_std=settings.std_floor,
            severity_mapper=self._severity(settings),
        )

    def _mad(self, settings: AnomalyConfig) -> MADDetector:
        return MADDetector(
            threshold=settings.mad_threshold,
            scale=settings.mad_scale,
            min_mad=settings.std_floor,
            severity_mapper=self._severity(settings),
        )
