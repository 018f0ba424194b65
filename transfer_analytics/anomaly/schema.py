"""
Schema definitions for anomaly detection.

All anomaly outputs are deterministic and explainable. Each anomaly references
its index, observed value, deviation metric and severity.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnomalyMethod(str, Enum):
    """Interchangeable detection methods."""

    STATISTICAL = "statistical"
    IQR = "iqr"
    ZSCORE = "zscore"
    MAD = "mad"


class AnomalySeverity(str, Enum):
    """Severity levels for flagged points."""

    MEDIUM = "medium"
    HIGH = "high"


class BaselineStats(BaseModel):
    """
    Baseline statistics for a series.

    Fields:
    - mean/std: central tendency and population dispersion
    - median/mad: robust counterparts
    - q1/q3/iqr: exclusive-method quartiles
    - count: number of points used
    """

    model_config = ConfigDict(frozen=True)

    mean: float
    std: float
    median: float
    mad: float
    q1: float
    q3: float
    iqr: float
    count: int


class ExpectedRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    lower: float
    upper: float


class AnomalyRecord(BaseModel):
    """
    A single flagged point.

    Fields:
    - index: position in the input series
    - z_score: set by the zscore method
    - modified_z_score: set by the mad method
    - deviation: distance from the mean (statistical) or past the bound (iqr)
    - expected_range: bounds a normal point is expected to fall within
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    timestamp: int
    value: float
    severity: AnomalySeverity
    z_score: Optional[float] = None
    modified_z_score: Optional[float] = None
    deviation: Optional[float] = None
    expected_range: Optional[ExpectedRange] = None


class AnomalyResult(BaseModel):
    """
    Outcome of one detection run.

    Fields:
    - degenerate: True when the data had no usable spread (zero stddev/MAD)
    - note: explanation for degenerate results
    """

    model_config = ConfigDict(frozen=True)

    method: AnomalyMethod
    total_points: int
    anomalies: List[AnomalyRecord]
    parameters: Dict[str, Any] = Field(default_factory=dict)
    degenerate: bool = False
    note: Optional[str] = None

    @property
    def anomalies_count(self) -> int:
        return len(self.anomalies)

    @property
    def indices(self) -> List[int]:
        return [a.index for a in self.anomalies]
