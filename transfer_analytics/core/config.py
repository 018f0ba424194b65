"""
Application configuration for the transfer analytics core.

Provides environment-aware settings with conservative defaults. Every
threshold used by the analytics and anomaly modules lives here so that
callers can run several sensitivity profiles side by side by passing an
explicit config object instead of relying on compiled-in constants.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StrengthThresholds(BaseModel):
	"""
	Lower bounds for qualitative strength buckets.

	Applied to R² for trends and to |r| for correlations.
	"""

	very_strong: float = Field(0.9, ge=0.0, le=1.0)
	strong: float = Field(0.7, ge=0.0, le=1.0)
	moderate: float = Field(0.5, ge=0.0, le=1.0)
	weak: float = Field(0.3, ge=0.0, le=1.0)


class DecompositionConfig(BaseModel):
	"""
	Configuration for trend/seasonal decomposition.

	Notes:
	- max_trend_window: upper bound for the centered moving average window.
	- candidate_periods: business cycles tested for seasonality (in points).
	- default_period: used when no candidate shows positive autocorrelation.
	"""

	max_trend_window: int = Field(7, ge=1)
	candidate_periods: List[int] = Field(default_factory=lambda: [7, 30])
	default_period: int = Field(7, ge=1)

	@field_validator("candidate_periods")
	@classmethod
	def _periods_positive(cls, value: List[int]) -> List[int]:
		if not value:
			raise ValueError("candidate_periods must not be empty")
		if any(p < 1 for p in value):
			raise ValueError("candidate_periods must be positive")
		return value


class ForecastConfig(BaseModel):
	"""
	Forecasting parameters.

	Band percentages are heuristic; only the regression and seasonal methods
	produce statistically grounded intervals.
	"""

	model_config = ConfigDict(extra="forbid")

	moving_average_window: int = Field(7, ge=1)
	moving_average_band: float = Field(0.10, ge=0.0)
	smoothing_alpha: float = Field(0.3, gt=0.0, le=1.0)
	smoothing_band: float = Field(0.15, ge=0.0)
	weighted_window: int = Field(5, ge=1)
	weighted_lower_band: float = Field(0.12, ge=0.0)
	weighted_upper_band: float = Field(0.12, ge=0.0)
	confidence_z: float = Field(1.96, gt=0.0)
	confidence_level: float = Field(0.95, gt=0.0, lt=1.0)
	min_seasonal_points: int = Field(14, ge=2)


class AnomalyConfig(BaseModel):
	"""
	Anomaly detection thresholds.

	Rationale:
	- sensitivity is measured in population standard deviations.
	- mad_scale converts MAD into a standard-normal-consistent score.
	- high_severity_factor escalates a flagged point to HIGH.
	- std_floor: spreads at or below it are treated as zero (no detection).
	"""

	model_config = ConfigDict(extra="forbid")

	min_points: int = Field(5, ge=1)
	sensitivity: float = Field(2.0, gt=0.0)
	iqr_multiplier: float = Field(1.5, gt=0.0)
	zscore_threshold: float = Field(3.0, gt=0.0)
	mad_threshold: float = Field(3.5, gt=0.0)
	mad_scale: float = Field(0.6745, gt=0.0)
	std_floor: float = Field(1e-12, ge=0.0)
	high_severity_factor: float = Field(1.5, ge=1.0)


class PatternConfig(BaseModel):
	"""
	Pattern detection configuration.

	Notes:
	- seasonal_variance_threshold: minimum seasonal-component variance.
	- step_window: trailing points used for the local standard deviation.
	- seasonal_lags: lags scanned for the dominant period; None uses the
	  decomposer's candidate_periods.
	"""

	min_seasonal_points: int = Field(14, ge=2)
	seasonal_variance_threshold: float = Field(0.3, ge=0.0)
	seasonal_lags: Optional[List[int]] = None
	step_threshold: float = Field(2.0, gt=0.0)
	step_window: int = Field(10, ge=2)


class DemandConfig(BaseModel):
	"""
	Demand forecast orchestration.
	"""

	default_horizon: int = Field(30, ge=1)
	min_data_points: int = Field(30, ge=3)
	medium_confidence_points: int = Field(45, ge=1)
	high_confidence_points: int = Field(60, ge=1)


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.

	Nested values can be overridden with a double underscore, e.g.
	``TRANSFER_ANALYTICS_ANOMALY__ZSCORE_THRESHOLD=2.5``.
	"""

	model_config = SettingsConfigDict(
		env_prefix="TRANSFER_ANALYTICS_",
		env_nested_delimiter="__",
		env_file=".env",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	strength: StrengthThresholds = StrengthThresholds()
	decomposition: DecompositionConfig = DecompositionConfig()
	forecast: ForecastConfig = ForecastConfig()
	anomaly: AnomalyConfig = AnomalyConfig()
	patterns: PatternConfig = PatternConfig()
	demand: DemandConfig = DemandConfig()


config = Config()
