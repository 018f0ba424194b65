"""
Series ingestion from tabular data.

The data-access layer typically hands over query results as pandas
DataFrames. This module converts such frames into validated series.

Design:
- Datetime columns become unix seconds, numeric columns are kept as-is
- Rows are sorted chronologically (stable, so duplicates keep their order)
- Missing columns and non-finite values are caller bugs and raise
"""

import logging
from typing import List

import numpy as np
import pandas as pd

from transfer_analytics.core.exceptions import DataValidationError
from transfer_analytics.data.schema import TimeSeriesPoint

logger = logging.getLogger(__name__)


def _timestamps_as_seconds(column: pd.Series) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(column):
        if column.dt.tz is not None:
            column = column.dt.tz_convert("UTC").dt.tz_localize(None)
        return column.astype("datetime64[ns]").astype("int64") // 10**9
    if pd.api.types.is_numeric_dtype(column):
        return column.astype("int64")
    raise DataValidationError(
        f"Timestamp column has unsupported dtype: {column.dtype}"
    )


def points_from_frame(
    frame: pd.DataFrame,
    timestamp_column: str = "timestamp",
    value_column: str = "value",
) -> List[TimeSeriesPoint]:
    """
    Convert a DataFrame into a chronologically ordered series.

    Args:
        frame: Source rows
        timestamp_column: Column holding datetimes or integer timestamps
        value_column: Column holding numeric observations

    Returns:
        List of TimeSeriesPoint sorted by timestamp

    Raises:
        DataValidationError: If a column is missing or values are not finite
    """
    missing = [c for c in (timestamp_column, value_column) if c not in frame.columns]
    if missing:
        raise DataValidationError(f"Missing columns: {', '.join(missing)}")

    if frame.empty:
        return []

    values = pd.to_numeric(frame[value_column], errors="coerce").astype(float)
    if not np.isfinite(values.to_numpy()).all():
        raise DataValidationError(
            f"Column '{value_column}' contains missing or non-finite values"
        )

    if frame[timestamp_column].isna().any():
        raise DataValidationError(f"Column '{timestamp_column}' contains missing values")

    ordered = pd.DataFrame(
        {
            "timestamp": _timestamps_as_seconds(frame[timestamp_column]).to_numpy(),
            "value": values.to_numpy(),
        }
    ).sort_values("timestamp", kind="stable")

    logger.debug("Converted %d rows into series points", len(ordered))

    return [
        TimeSeriesPoint(timestamp=int(ts), value=float(v))
        for ts, v in zip(ordered["timestamp"], ordered["value"])
    ]
