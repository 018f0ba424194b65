"""
Severity mapping for anomalies.

A flagged point is MEDIUM by default and escalates to HIGH once its deviation
clears the detection threshold by the configured factor.
"""

from __future__ import annotations

from dataclasses import dataclass

from .schema import AnomalySeverity


@dataclass
class SeverityMapper:
    """
    Maps deviation metrics to severity levels.
    """

    high_severity_factor: float

    def magnitude_severity(self, magnitude: float, threshold: float) -> AnomalySeverity:
        if abs(magnitude) > threshold * self.high_severity_factor:
            return AnomalySeverity.HIGH
        return AnomalySeverity.MEDIUM

    @staticmethod
    def range_severity(value: float, lower: float, upper: float, margin: float) -> AnomalySeverity:
        """HIGH when the value lies beyond the bounds by more than ``margin``."""
        if value < lower - margin or value > upper + margin:
            return AnomalySeverity.HIGH
        return AnomalySeverity.MEDIUM
