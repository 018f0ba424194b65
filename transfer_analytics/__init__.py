"""
Transfer analytics: statistical analysis of pre-aggregated time series.

Subpackages:
- core: configuration, logging, exceptions
- data: series representation and ingestion
- analytics: statistics, trends, decomposition, forecasting, patterns
- anomaly: outlier detection
"""

__version__ = "0.1.0"
