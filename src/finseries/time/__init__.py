"""Time utilities: calendar periods and period sequences."""

from __future__ import annotations

from collections.abc import Iterable

from finseries.core.errors import EGranularityMismatch
from finseries.time.period import Granularity, Period


def period_range(start: Period, end: Period) -> list[Period]:
    """Consecutive periods from ``start`` to ``end`` inclusive.

    Returns an empty list when ``end`` precedes ``start``.

    Raises:
        EGranularityMismatch: If the bounds have different granularity
    """
    count = start.distance(end)
    return [start + i for i in range(count + 1)]


def infer_granularity(periods: Iterable[Period]) -> Granularity | None:
    """Return the granularity shared by all periods (None when empty)."""
    found: Granularity | None = None
    for period in periods:
        if found is None:
            found = period.granularity
        elif period.granularity is not found:
            raise EGranularityMismatch(
                "Periods mix granularities",
                context={"expected": found.value, "found": period.granularity.value},
            )
    return found


def to_pandas_freq(granularity: Granularity | str) -> str:
    """pandas Period frequency alias for a granularity."""
    return Granularity(granularity).pandas_freq


__all__ = [
    "Granularity",
    "Period",
    "period_range",
    "infer_granularity",
    "to_pandas_freq",
]
