"""
Pytest configuration and shared fixtures.

Provides test configuration instances and sample series for unit and integration tests.
"""

import math
from typing import List

import pandas as pd
import pytest

from transfer_analytics.core.config import Config
from transfer_analytics.data.schema import TimeSeriesPoint, points_from_values

DAY = 86400
START = 1_700_006_400  # 2023-11-15 00:00:00 UTC


@pytest.fixture
def mock_config(tmp_path):
    """
    Fixture providing test configuration isolated from .env and environment.

    Returns:
        Config: Test instance with defaults and a temporary logs directory
    """
    return Config(_env_file=None, log_level="WARNING", logs_dir=tmp_path / "logs")


@pytest.fixture
def anomaly_values() -> List[float]:
    """Short series with a single obvious spike at index 5."""
    return [10, 12, 11, 13, 12, 95, 11, 10]


@pytest.fixture
def anomaly_series(anomaly_values) -> List[TimeSeriesPoint]:
    return points_from_values(anomaly_values, start=START, step=DAY)


@pytest.fixture
def weekly_series() -> List[TimeSeriesPoint]:
    """
    90 daily points with a rising trend and weekly seasonality.

    y = 10 + 0.5·day + 5·sin(2π·day/7) plus small deterministic noise.
    """
    values = []
    for day in range(90):
        noise = 0.05 * ((day * 37) % 11 - 5) / 5
        values.append(10 + 0.5 * day + 5 * math.sin(2 * math.pi * day / 7) + noise)
    return points_from_values(values, start=START, step=DAY)


@pytest.fixture
def linear_series() -> List[TimeSeriesPoint]:
    """Exact y = 2x + 3 for x = 0..9 on daily timestamps."""
    return points_from_values([2 * x + 3 for x in range(10)], start=START, step=DAY)


@pytest.fixture
def daily_frame() -> pd.DataFrame:
    """
    Query-style result rows, deliberately out of order.

    Returns:
        pd.DataFrame: Columns ``day`` (datetime) and ``transfers`` (int)
    """
    df = pd.DataFrame(
        {
            "day": pd.to_datetime(["2024-01-03", "2024-01-01", "2024-01-02"]),
            "transfers": [30, 10, 20],
        }
    )
    return df


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (deferred CI)"
    )
