"""
Data module: canonical series representation and ingestion helpers.

    Query rows (DataFrame) / plain values
        ↓
    Ingestion (transfer_analytics/data/ingestion.py)
        ↓
    Series of TimeSeriesPoint (transfer_analytics/data/schema.py)
        ↓
    Ready for statistics, decomposition, forecasting and anomaly detection
"""

from transfer_analytics.data.ingestion import points_from_frame
from transfer_analytics.data.schema import (
    Series,
    TimeSeriesPoint,
    normalize_timestamps,
    points_from_values,
    series_timestamps,
    series_values,
    timestamp_step,
)

__all__ = [
    "TimeSeriesPoint",
    "Series",
    "points_from_values",
    "points_from_frame",
    "series_values",
    "series_timestamps",
    "timestamp_step",
    "normalize_timestamps",
]
