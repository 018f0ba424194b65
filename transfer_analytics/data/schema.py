"""
Canonical time-series representation for the analytics core.

Every analytics entry point consumes a Series: an ordered sequence of
TimeSeriesPoint objects. The data-access layer is responsible for ordering
points chronologically and filling calendar gaps; nothing here interpolates.

Design rationale:
- Points are immutable once constructed
- Timestamps are plain integers (unix seconds or ordinal indexes)
- Helpers always return new lists and never touch caller-owned sequences
"""

from typing import Iterable, List, Sequence

from pydantic import BaseModel, ConfigDict, Field


class TimeSeriesPoint(BaseModel):
    """
    A single observation in a series.

    Attributes:
        timestamp: Unix seconds or ordinal index
        value: Observed quantity (must be finite; not validated here)
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Unix seconds or ordinal index")
    value: float = Field(..., description="Observed value")


Series = Sequence[TimeSeriesPoint]


def points_from_values(
    values: Iterable[float], start: int = 0, step: int = 1
) -> List[TimeSeriesPoint]:
    """
    Build a series from plain values using ordinal timestamps.

    Args:
        values: Observed values in chronological order
        start: Timestamp of the first point
        step: Timestamp increment between points
    """
    return [
        TimeSeriesPoint(timestamp=start + i * step, value=float(v))
        for i, v in enumerate(values)
    ]


def series_values(series: Series) -> List[float]:
    """Values of a series as a fresh list."""
    return [float(p.value) for p in series]


def series_timestamps(series: Series) -> List[int]:
    """Timestamps of a series as a fresh list."""
    return [p.timestamp for p in series]


def timestamp_step(timestamps: Sequence[int]) -> int:
    """
    Smallest positive spacing between consecutive timestamps.

    Returns 1 when no positive spacing exists (single point or duplicates only).
    """
    gaps = [b - a for a, b in zip(timestamps, timestamps[1:]) if b - a > 0]
    return min(gaps) if gaps else 1


def normalize_timestamps(timestamps: Sequence[int]) -> List[float]:
    """
    Map timestamps onto a unit-step index starting at 0.

    Daily unix timestamps become 0, 1, 2, ... so slopes are expressed per
    period rather than per second.
    """
    if not timestamps:
        return []
    origin = min(timestamps)
    step = timestamp_step(timestamps)
    return [(t - origin) / step for t in timestamps]
