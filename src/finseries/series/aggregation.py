"""Helpers that compose several series into a derived one."""

from __future__ import annotations

import operator
from collections.abc import Iterable, Sequence

from finseries.core import numeric
from finseries.core.config import SeriesConfig
from finseries.series.metadata import TimeSeriesMetadata
from finseries.series.timeseries import TimeSeries
from finseries.time.period import Period


def zero_series(
    periods: Iterable[Period],
    metadata: TimeSeriesMetadata | None = None,
    config: SeriesConfig | None = None,
) -> TimeSeries:
    """All-zero series over ``periods``."""
    return TimeSeries.zeros(periods, metadata=metadata, config=config)


def sum_series(
    series: Sequence[TimeSeries],
    periods: Iterable[Period] | None = None,
    metadata: TimeSeriesMetadata | None = None,
    config: SeriesConfig | None = None,
) -> TimeSeries:
    """Element-wise sum of several series.

    Args:
        series: Series to add; under the strict policy they must all cover
            the same periods
        periods: Periods of the zero series returned when ``series`` is empty
        metadata: Metadata of the result (default: the first series')
        config: Series configuration (default: strict)

    Returns:
        New TimeSeries in the first series' period order

    Raises:
        EAlignment: If the series cover different periods (strict policy)

    Examples:
        >>> total_debt = sum_series([term_loan, revolver, notes])
        >>> no_accounts = sum_series([], periods=quarters)  # all zeros
    """
    if not series:
        return zero_series(periods or (), metadata=metadata, config=config)

    total = series[0]
    for other in series[1:]:
        total = total.zip_with(other, operator.add, config=config)
    if metadata is not None:
        total = total.with_metadata(metadata)
    return total


def average_time_series(series: TimeSeries) -> TimeSeries:
    """Average balance of each period with the one before it.

    The first period has no predecessor and keeps its raw value; every later
    period ``i`` becomes ``(value[i-1] + value[i]) / 2``. This is the usual
    denominator for return ratios (average assets, average equity, ...).

    Examples:
        >>> average_time_series(total_assets).values  # [10, 20, 30]
        [10, 15.0, 25.0]
    """
    values = series.values
    averaged = [
        numeric.midpoint(values[i - 1], values[i]) if i else values[i]
        for i in range(len(values))
    ]
    return series.with_values(averaged)


__all__ = ["zero_series", "sum_series", "average_time_series"]
