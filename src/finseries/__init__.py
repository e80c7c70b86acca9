"""finseries - Period-indexed numeric series for financial metrics.

Calendar periods and an immutable, period-keyed numeric container with
aligned arithmetic, zero-baseline differencing, averaging and lossless
serialization. Statement, ratio and valuation formulas are built on top of
it by composing series.

Basic usage:
    >>> from finseries import Period, TimeSeries
    >>> quarters = [Period.quarter(2025, q) for q in (1, 2, 3)]
    >>> revenue = TimeSeries(quarters, [100.0, 110.0, 121.0])
    >>> expense = TimeSeries(quarters, [80.0, 84.0, 88.2])
    >>> net_income = revenue - expense
    >>> net_income.lookup(quarters[0])
    20.0

Derived metrics:
    >>> from finseries import average_time_series, sum_series
    >>> average_assets = average_time_series(total_assets)
    >>> roa = net_income / average_assets
    >>> cash_impact = working_capital.diff()
    >>> total_debt = sum_series(debt_accounts, periods=quarters)

Persistence:
    >>> payload = revenue.to_dict()
    >>> TimeSeries.from_dict(payload) == revenue
    True
"""

__version__ = "0.3.0"

# Core API
from finseries.core.config import SeriesConfig
from finseries.core.errors import (
    EAlignment,
    EConstruction,
    EDuplicatePeriod,
    EGranularityMismatch,
    EInvalidPeriod,
    ELengthMismatch,
    ESerialization,
    FinSeriesError,
)

# Discovery
from finseries.discovery import describe

# Series
from finseries.series import (
    AggregationMethod,
    TimeSeries,
    TimeSeriesMetadata,
    aggregate,
    average_time_series,
    cagr,
    cumulative,
    exponential_moving_average,
    fill_backward,
    fill_forward,
    fill_missing,
    growth_rate,
    interpolate,
    moving_average,
    percent_change,
    rolling_max,
    rolling_min,
    rolling_sum,
    sum_series,
    zero_series,
)

# Periods
from finseries.time import (
    Granularity,
    Period,
    infer_granularity,
    period_range,
    to_pandas_freq,
)
from finseries.utils import compute_signature

__all__ = [
    "__version__",
    # Config
    "SeriesConfig",
    # Errors
    "FinSeriesError",
    "EConstruction",
    "ELengthMismatch",
    "EDuplicatePeriod",
    "EAlignment",
    "EGranularityMismatch",
    "EInvalidPeriod",
    "ESerialization",
    # Periods
    "Granularity",
    "Period",
    "period_range",
    "infer_granularity",
    "to_pandas_freq",
    # Series
    "TimeSeries",
    "TimeSeriesMetadata",
    "sum_series",
    "average_time_series",
    "zero_series",
    "AggregationMethod",
    "aggregate",
    "fill_forward",
    "fill_backward",
    "fill_missing",
    "interpolate",
    "growth_rate",
    "percent_change",
    "cagr",
    "moving_average",
    "exponential_moving_average",
    "cumulative",
    "rolling_sum",
    "rolling_min",
    "rolling_max",
    # Utilities
    "compute_signature",
    "describe",
]
