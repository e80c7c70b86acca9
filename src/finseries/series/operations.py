"""Gap filling and granularity aggregation for TimeSeries.

Fill functions project a series onto a target list of periods; aggregation
rolls finer periods up into quarters or years.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from finseries.core import numeric
from finseries.series.timeseries import TimeSeries
from finseries.time.period import Granularity, Period


class AggregationMethod(str, Enum):
    """How values falling into one target period are combined."""

    SUM = "sum"
    AVERAGE = "average"
    FIRST = "first"
    LAST = "last"
    MIN = "min"
    MAX = "max"


def fill_forward(series: TimeSeries, over: Sequence[Period]) -> TimeSeries:
    """Carry the last known value forward across ``over``.

    Leading periods with no earlier known value are left out.
    """
    periods: list[Period] = []
    values: list[Any] = []
    last_known = None
    for period in over:
        value = series.lookup(period)
        if value is not None:
            last_known = value
        if last_known is not None:
            periods.append(period)
            values.append(last_known)
    return series.derive(periods, values)


def fill_backward(series: TimeSeries, over: Sequence[Period]) -> TimeSeries:
    """Carry the next known value backward across ``over``.

    Trailing periods with no later known value are left out.
    """
    filled: list[tuple[Period, Any]] = []
    next_known = None
    for period in reversed(over):
        value = series.lookup(period)
        if value is not None:
            next_known = value
        if next_known is not None:
            filled.append((period, next_known))
    filled.reverse()
    return series.derive([p for p, _ in filled], [v for _, v in filled])


def fill_missing(series: TimeSeries, value: Any, over: Sequence[Period]) -> TimeSeries:
    """Project onto ``over`` using ``value`` where the series has no data."""
    return series.derive(over, [series.get(p, value) for p in over])


def interpolate(series: TimeSeries, over: Sequence[Period]) -> TimeSeries:
    """Linear interpolation across ``over`` by position.

    Only the span between the first and the last known value is returned;
    nothing is extrapolated.
    """
    known = [i for i, p in enumerate(over) if p in series]
    if not known:
        return series.derive([], [])

    periods: list[Period] = []
    values: list[Any] = []
    for left, right in zip(known, known[1:] + [None]):
        periods.append(over[left])
        values.append(series[over[left]])
        if right is None:
            break
        start, end = series[over[left]], series[over[right]]
        steps = right - left
        for offset in range(1, steps):
            periods.append(over[left + offset])
            values.append(start + numeric.divide((end - start) * offset, steps))
    return series.derive(periods, values)


def _target_period(period: Period, to: Granularity) -> Period:
    if to is Granularity.QUARTERLY:
        return Period.quarter(period.start.year, (period.start.month - 1) // 3 + 1)
    return Period.year(period.start.year)


def _combine(values: list[Any], method: AggregationMethod) -> Any:
    if method is AggregationMethod.SUM:
        return sum(values[1:], values[0])
    if method is AggregationMethod.AVERAGE:
        return numeric.divide(sum(values[1:], values[0]), len(values))
    if method is AggregationMethod.FIRST:
        return values[0]
    if method is AggregationMethod.LAST:
        return values[-1]
    if method is AggregationMethod.MIN:
        return min(values)
    return max(values)


def aggregate(
    series: TimeSeries,
    to: Granularity | str,
    method: AggregationMethod | str = AggregationMethod.SUM,
) -> TimeSeries:
    """Roll a series up to quarterly or annual periods.

    Args:
        series: Source series
        to: Target granularity, ``quarterly`` or ``annual``
        method: Aggregation method (sum, average, first, last, min, max)

    Returns:
        New TimeSeries over the target periods, sorted by start. Source
        periods that are not finer than ``to`` are skipped.

    Raises:
        ValueError: If ``to`` is not quarterly or annual
    """
    to = Granularity(to)
    method = AggregationMethod(method)
    if to not in (Granularity.QUARTERLY, Granularity.ANNUAL):
        raise ValueError(f"Can only aggregate to quarterly or annual, got {to.value}")

    groups: dict[Period, list[Any]] = {}
    for period, value in sorted(series.items(), key=lambda item: item[0]):
        if period.granularity >= to:
            continue
        groups.setdefault(_target_period(period, to), []).append(value)

    targets = sorted(groups)
    return TimeSeries(
        targets,
        [_combine(groups[t], method) for t in targets],
        series.metadata,
    )


__all__ = [
    "AggregationMethod",
    "fill_forward",
    "fill_backward",
    "fill_missing",
    "interpolate",
    "aggregate",
]
