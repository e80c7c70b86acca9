"""Series module for finseries.

Provides the TimeSeries container and the functions that compose it.
"""

from .aggregation import average_time_series, sum_series, zero_series
from .analytics import (
    cagr,
    cumulative,
    exponential_moving_average,
    growth_rate,
    moving_average,
    percent_change,
    rolling_max,
    rolling_min,
    rolling_sum,
)
from .metadata import TimeSeriesMetadata
from .operations import (
    AggregationMethod,
    aggregate,
    fill_backward,
    fill_forward,
    fill_missing,
    interpolate,
)
from .timeseries import TimeSeries

__all__ = [
    # Container
    "TimeSeries",
    "TimeSeriesMetadata",
    # Aggregation helpers
    "sum_series",
    "average_time_series",
    "zero_series",
    # Operations
    "AggregationMethod",
    "aggregate",
    "fill_forward",
    "fill_backward",
    "fill_missing",
    "interpolate",
    # Analytics
    "growth_rate",
    "percent_change",
    "cagr",
    "moving_average",
    "exponential_moving_average",
    "cumulative",
    "rolling_sum",
    "rolling_min",
    "rolling_max",
]
