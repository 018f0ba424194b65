"""
Unit tests for series ingestion and helpers.
"""

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError

from transfer_analytics.core.exceptions import DataValidationError
from transfer_analytics.data.ingestion import points_from_frame
from transfer_analytics.data.schema import (
    TimeSeriesPoint,
    normalize_timestamps,
    points_from_values,
    series_values,
    timestamp_step,
)


class TestPointsFromFrame:
    """Test DataFrame conversion."""

    def test_sorts_and_converts_datetimes(self, daily_frame):
        points = points_from_frame(daily_frame, timestamp_column="day", value_column="transfers")

        assert [p.value for p in points] == [10.0, 20.0, 30.0]
        assert points[0].timestamp == 1704067200  # 2024-01-01 UTC
        assert timestamp_step([p.timestamp for p in points]) == 86400

    def test_timezone_aware_timestamps(self):
        frame = pd.DataFrame(
            {
                "timestamp": pd.to_datetime(["2024-01-01 01:00"]).tz_localize("Europe/Berlin"),
                "value": [1],
            }
        )
        points = points_from_frame(frame)
        assert points[0].timestamp == 1704067200

    def test_integer_timestamps(self):
        frame = pd.DataFrame({"timestamp": [3, 1, 2], "value": [3.0, 1.0, 2.0]})
        points = points_from_frame(frame)

        assert [p.timestamp for p in points] == [1, 2, 3]
        assert series_values(points) == [1.0, 2.0, 3.0]

    def test_missing_column(self, daily_frame):
        with pytest.raises(DataValidationError):
            points_from_frame(daily_frame)

    def test_non_finite_values(self):
        frame = pd.DataFrame({"timestamp": [1, 2], "value": [1.0, np.nan]})
        with pytest.raises(DataValidationError):
            points_from_frame(frame)

    def test_empty_frame(self):
        frame = pd.DataFrame({"timestamp": [], "value": []})
        assert points_from_frame(frame) == []


class TestSeriesHelpers:
    """Test plain-value helpers."""

    def test_points_from_values(self):
        points = points_from_values([1, 2], start=100, step=10)
        assert points == [
            TimeSeriesPoint(timestamp=100, value=1.0),
            TimeSeriesPoint(timestamp=110, value=2.0),
        ]

    def test_timestamp_step_ignores_duplicates(self):
        assert timestamp_step([5, 5, 8, 14]) == 3
        assert timestamp_step([7]) == 1

    def test_normalize_timestamps(self):
        assert normalize_timestamps([86400, 172800, 345600]) == [0.0, 1.0, 3.0]

    def test_points_are_frozen(self):
        point = TimeSeriesPoint(timestamp=1, value=1.0)
        with pytest.raises(ValidationError):
            point.value = 2.0
