"""Growth, smoothing and rolling-window analytics over a TimeSeries.

Positional functions (lags, windows) work on the series' period order.
Windows outside ``1..len(series)`` produce an empty series.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

from finseries.core import numeric
from finseries.series.timeseries import TimeSeries
from finseries.time.period import Period

_DAYS_PER_YEAR = 365.25


def _empty(series: TimeSeries) -> TimeSeries:
    return series.derive([], [])


def growth_rate(series: TimeSeries, lag: int = 1) -> TimeSeries:
    """``(value[i] - value[i-lag]) / value[i-lag]`` for ``i >= lag``.

    Periods whose previous value is zero are skipped.
    """
    if lag < 1:
        raise ValueError(f"lag must be at least 1, got {lag}")
    periods = series.periods
    values = series.values
    kept: list[tuple[Period, Any]] = []
    for i in range(lag, len(values)):
        previous = values[i - lag]
        if previous == 0:
            continue
        kept.append((periods[i], numeric.divide(values[i] - previous, previous)))
    return series.derive([p for p, _ in kept], [v for _, v in kept])


def percent_change(series: TimeSeries, lag: int = 1) -> TimeSeries:
    return growth_rate(series, lag).map_values(lambda v: v * 100)


def cagr(series: TimeSeries, start: Period, end: Period) -> Any:
    """Compound annual growth rate between two periods of the series.

    Years are measured between the periods' start dates in 365.25-day
    years. Returns 0 (a Decimal 0 for Decimal series) when either value is
    missing, the start value is not positive, the span is not positive or
    the end value is negative.
    """
    start_value = series.lookup(start)
    end_value = series.lookup(end)
    kind = "decimal" if isinstance(start_value, Decimal) else "float"
    if start_value is None or end_value is None or start_value <= 0:
        return numeric.zero(kind)
    years = (end.start - start.start).days / _DAYS_PER_YEAR
    if years <= 0:
        return numeric.zero(kind)
    ratio = float(numeric.divide(end_value, start_value))
    # No real root of a negative ratio
    if ratio < 0:
        return numeric.zero(kind)
    return numeric.coerce(ratio ** (1.0 / years) - 1.0, kind)


def _window(
    series: TimeSeries,
    window: int,
    reduce: Callable[[list[Any]], Any],
) -> TimeSeries:
    if window < 1 or window > len(series):
        return _empty(series)
    periods = series.periods
    values = series.values
    result = [reduce(values[i - window + 1 : i + 1]) for i in range(window - 1, len(values))]
    return series.derive(periods[window - 1 :], result)


def _total(values: list[Any]) -> Any:
    return sum(values[1:], values[0])


def moving_average(series: TimeSeries, window: int) -> TimeSeries:
    """Trailing simple moving average, labelled at the window's last period."""
    return _window(series, window, lambda vs: numeric.divide(_total(vs), len(vs)))


def rolling_sum(series: TimeSeries, window: int) -> TimeSeries:
    return _window(series, window, _total)


def rolling_min(series: TimeSeries, window: int) -> TimeSeries:
    return _window(series, window, min)


def rolling_max(series: TimeSeries, window: int) -> TimeSeries:
    return _window(series, window, max)


def exponential_moving_average(series: TimeSeries, alpha: float) -> TimeSeries:
    """EMA seeded with the first value: ``alpha * x + (1 - alpha) * ema``."""
    if not 0 < alpha <= 1:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    result: list[Any] = []
    for value in series:
        if not result:
            result.append(value)
        else:
            result.append(alpha * value + (1 - alpha) * result[-1])
    return series.with_values(result)


def cumulative(series: TimeSeries) -> TimeSeries:
    """Running total in period order."""
    result: list[Any] = []
    for value in series:
        result.append(result[-1] + value if result else value)
    return series.with_values(result)


__all__ = [
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
