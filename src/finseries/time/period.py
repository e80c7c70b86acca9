"""Calendar periods.

A Period is one calendar interval at a fixed granularity, identified by its
granularity and its (aligned) start instant. Periods are immutable values:
hashable, totally ordered by start instant, and built through the
granularity-specific factories which validate every calendar field.

Intervals are half-open: a period covers ``[start, end)``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Any

import pandas as pd

from finseries.core.errors import EGranularityMismatch, EInvalidPeriod

# Years whose every period (start and end) fits in a pandas Timestamp
_MIN_YEAR = pd.Timestamp.min.year + 1
_MAX_YEAR = pd.Timestamp.max.year - 1


class Granularity(str, Enum):
    """Unit of a Period, ordered from finest to coarsest."""

    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOURLY = "hourly"
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @property
    def rank(self) -> int:
        return _RANK[self]

    @property
    def pandas_freq(self) -> str:
        """pandas Period frequency alias."""
        return _PANDAS_FREQ[self]

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Granularity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, Granularity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, Granularity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, Granularity):
            return NotImplemented
        return self.rank >= other.rank


_RANK = {g: i for i, g in enumerate(Granularity)}

_PANDAS_FREQ = {
    Granularity.MILLISECOND: "ms",
    Granularity.SECOND: "s",
    Granularity.MINUTE: "min",
    Granularity.HOURLY: "h",
    Granularity.DAILY: "D",
    Granularity.MONTHLY: "M",
    Granularity.QUARTERLY: "Q",
    Granularity.ANNUAL: "Y",
}

# Fixed-length granularities
_UNIT = {
    Granularity.MILLISECOND: pd.Timedelta(milliseconds=1),
    Granularity.SECOND: pd.Timedelta(seconds=1),
    Granularity.MINUTE: pd.Timedelta(minutes=1),
    Granularity.HOURLY: pd.Timedelta(hours=1),
    Granularity.DAILY: pd.Timedelta(days=1),
}

# Calendar-length granularities, in months
_MONTHS = {
    Granularity.MONTHLY: 1,
    Granularity.QUARTERLY: 3,
    Granularity.ANNUAL: 12,
}

# Number of leading calendar fields (year, month, day, hour, minute,
# second, millisecond) that identify a period
_ANCHOR_DEPTH = {
    Granularity.MILLISECOND: 7,
    Granularity.SECOND: 6,
    Granularity.MINUTE: 5,
    Granularity.HOURLY: 4,
    Granularity.DAILY: 3,
    Granularity.MONTHLY: 2,
}

_FROM_PANDAS_FREQ = {
    "ms": Granularity.MILLISECOND,
    "L": Granularity.MILLISECOND,
    "s": Granularity.SECOND,
    "S": Granularity.SECOND,
    "min": Granularity.MINUTE,
    "T": Granularity.MINUTE,
    "h": Granularity.HOURLY,
    "H": Granularity.HOURLY,
    "D": Granularity.DAILY,
    "M": Granularity.MONTHLY,
    "Q": Granularity.QUARTERLY,
    "Y": Granularity.ANNUAL,
    "A": Granularity.ANNUAL,
}


def _check_field(name: str, value: int, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise EInvalidPeriod(
            f"{name} must be an integer",
            context={name: value},
        )
    if not low <= value <= high:
        raise EInvalidPeriod(
            f"{name} must be between {low} and {high}, got {value}",
            context={name: value, "min": low, "max": high},
        )


def _check_date(year: int, month: int, day: int) -> None:
    _check_field("year", year, _MIN_YEAR, _MAX_YEAR)
    _check_field("month", month, 1, 12)
    _check_field("day", day, 1, calendar.monthrange(year, month)[1])


def _floor(granularity: Granularity, ts: pd.Timestamp) -> pd.Timestamp:
    if granularity is Granularity.DAILY:
        return ts.normalize()
    if granularity in _UNIT:
        return ts.floor(granularity.pandas_freq)
    if granularity is Granularity.MONTHLY:
        return pd.Timestamp(year=ts.year, month=ts.month, day=1)
    if granularity is Granularity.QUARTERLY:
        return pd.Timestamp(year=ts.year, month=3 * ((ts.month - 1) // 3) + 1, day=1)
    return pd.Timestamp(year=ts.year, month=1, day=1)


def _step(granularity: Granularity, n: int) -> pd.Timedelta | pd.DateOffset:
    if granularity in _UNIT:
        return _UNIT[granularity] * n
    return pd.DateOffset(months=_MONTHS[granularity] * n)


@dataclass(frozen=True)
class Period:
    """One calendar interval at a given granularity.

    Build periods with the factories (``Period.month(2025, 1)``,
    ``Period.quarter(2025, 3)``, ...) or ``Period.containing``; the
    constructor only accepts a start instant already aligned to the
    granularity.

    Attributes:
        granularity: Unit of the period
        start: First instant of the period (timezone-naive)

    Examples:
        >>> q1 = Period.quarter(2025, 1)
        >>> q1.label
        '2025-Q1'
        >>> (q1 + 1).label
        '2025-Q2'
        >>> Period.month(2025, 2) < Period.quarter(2025, 2)
        True
    """

    granularity: Granularity
    start: pd.Timestamp

    def __post_init__(self) -> None:
        granularity = Granularity(self.granularity)
        start = pd.Timestamp(self.start)
        if start is pd.NaT:
            raise EInvalidPeriod("Period start must be a valid instant")
        if start.tzinfo is not None:
            raise EInvalidPeriod(
                "Period start must be timezone-naive",
                context={"start": str(start)},
            )
        if _floor(granularity, start) != start:
            raise EInvalidPeriod(
                f"Start {start} is not aligned to a {granularity.value} boundary",
                context={"granularity": granularity.value, "start": str(start)},
                fix_hint="Use Period.containing(granularity, when) to align a timestamp",
            )
        object.__setattr__(self, "granularity", granularity)
        object.__setattr__(self, "start", start)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def year(cls, year: int) -> Period:
        _check_field("year", year, _MIN_YEAR, _MAX_YEAR)
        return cls(Granularity.ANNUAL, pd.Timestamp(year=year, month=1, day=1))

    @classmethod
    def quarter(cls, year: int, quarter: int) -> Period:
        _check_field("year", year, _MIN_YEAR, _MAX_YEAR)
        _check_field("quarter", quarter, 1, 4)
        month = (quarter - 1) * 3 + 1
        return cls(Granularity.QUARTERLY, pd.Timestamp(year=year, month=month, day=1))

    @classmethod
    def month(cls, year: int, month: int) -> Period:
        _check_field("year", year, _MIN_YEAR, _MAX_YEAR)
        _check_field("month", month, 1, 12)
        return cls(Granularity.MONTHLY, pd.Timestamp(year=year, month=month, day=1))

    @classmethod
    def day(cls, year: int, month: int, day: int) -> Period:
        _check_date(year, month, day)
        return cls(Granularity.DAILY, pd.Timestamp(year=year, month=month, day=day))

    @classmethod
    def hour(cls, year: int, month: int, day: int, hour: int) -> Period:
        _check_date(year, month, day)
        _check_field("hour", hour, 0, 23)
        return cls(
            Granularity.HOURLY,
            pd.Timestamp(year=year, month=month, day=day, hour=hour),
        )

    @classmethod
    def minute(cls, year: int, month: int, day: int, hour: int, minute: int) -> Period:
        _check_date(year, month, day)
        _check_field("hour", hour, 0, 23)
        _check_field("minute", minute, 0, 59)
        return cls(
            Granularity.MINUTE,
            pd.Timestamp(year=year, month=month, day=day, hour=hour, minute=minute),
        )

    @classmethod
    def second(
        cls, year: int, month: int, day: int, hour: int, minute: int, second: int
    ) -> Period:
        _check_date(year, month, day)
        _check_field("hour", hour, 0, 23)
        _check_field("minute", minute, 0, 59)
        _check_field("second", second, 0, 59)
        return cls(
            Granularity.SECOND,
            pd.Timestamp(
                year=year, month=month, day=day, hour=hour, minute=minute, second=second
            ),
        )

    @classmethod
    def millisecond(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        second: int,
        millisecond: int,
    ) -> Period:
        _check_date(year, month, day)
        _check_field("hour", hour, 0, 23)
        _check_field("minute", minute, 0, 59)
        _check_field("second", second, 0, 59)
        _check_field("millisecond", millisecond, 0, 999)
        return cls(
            Granularity.MILLISECOND,
            pd.Timestamp(
                year=year,
                month=month,
                day=day,
                hour=hour,
                minute=minute,
                second=second,
                microsecond=millisecond * 1000,
            ),
        )

    @classmethod
    def containing(cls, granularity: Granularity | str, when: Any) -> Period:
        """Return the period of ``granularity`` that contains ``when``.

        Args:
            granularity: Target granularity (enum member or its value)
            when: Anything ``pandas.Timestamp`` accepts. Timezone-aware
                values are reduced to their wall-clock time.

        Raises:
            EInvalidPeriod: If ``when`` cannot be parsed or is out of range
        """
        try:
            granularity = Granularity(granularity)
        except ValueError as exc:
            raise EInvalidPeriod(
                f"Unknown granularity {granularity!r}",
                context={"granularity": granularity},
            ) from exc
        try:
            ts = pd.Timestamp(when)
        except (TypeError, ValueError) as exc:
            raise EInvalidPeriod(
                f"Cannot interpret {when!r} as a date",
                context={"when": repr(when)},
            ) from exc
        if ts is pd.NaT:
            raise EInvalidPeriod("Cannot build a period from a missing date")
        if ts.tzinfo is not None:
            ts = ts.tz_localize(None)
        _check_field("year", ts.year, _MIN_YEAR, _MAX_YEAR)
        return cls(granularity, _floor(granularity, ts))

    @classmethod
    def from_pandas(cls, period: pd.Period) -> Period:
        """Convert a calendar-aligned ``pandas.Period``."""
        base, _, anchor = period.freqstr.partition("-")
        granularity = _FROM_PANDAS_FREQ.get(base)
        if granularity is None or anchor not in ("", "DEC"):
            raise EInvalidPeriod(
                f"Unsupported pandas period frequency {period.freqstr!r}",
                context={"freq": period.freqstr},
                fix_hint="Only calendar (December year-end) frequencies map to Periods",
            )
        return cls.containing(granularity, period.start_time)

    # ------------------------------------------------------------------
    # Derived attributes
    # ------------------------------------------------------------------

    @property
    def end(self) -> pd.Timestamp:
        """Exclusive end instant: the start of the next period."""
        return self.start + _step(self.granularity, 1)

    @property
    def anchor(self) -> tuple[int, ...]:
        """Calendar fields identifying the period, e.g. ``(2025, 3)`` for Q3."""
        ts = self.start
        if self.granularity is Granularity.ANNUAL:
            return (ts.year,)
        if self.granularity is Granularity.QUARTERLY:
            return (ts.year, (ts.month - 1) // 3 + 1)
        fields = (
            ts.year,
            ts.month,
            ts.day,
            ts.hour,
            ts.minute,
            ts.second,
            ts.microsecond // 1000,
        )
        return fields[: _ANCHOR_DEPTH[self.granularity]]

    @property
    def label(self) -> str:
        ts = self.start
        g = self.granularity
        if g is Granularity.ANNUAL:
            return f"{ts.year:04d}"
        if g is Granularity.QUARTERLY:
            return f"{ts.year:04d}-Q{(ts.month - 1) // 3 + 1}"
        if g is Granularity.MONTHLY:
            return ts.strftime("%Y-%m")
        if g is Granularity.DAILY:
            return ts.strftime("%Y-%m-%d")
        if g is Granularity.HOURLY:
            return ts.strftime("%Y-%m-%dT%H")
        if g is Granularity.MINUTE:
            return ts.strftime("%Y-%m-%dT%H:%M")
        if g is Granularity.SECOND:
            return ts.strftime("%Y-%m-%dT%H:%M:%S")
        return f"{ts.strftime('%Y-%m-%dT%H:%M:%S')}.{ts.microsecond // 1000:03d}"

    def to_pandas(self) -> pd.Period:
        return pd.Period(self.start, freq=self.granularity.pandas_freq)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _sort_key(self) -> tuple[pd.Timestamp, int]:
        # Same start: finer granularity first
        return (self.start, self.granularity.rank)

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, Period):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def shift(self, n: int) -> Period:
        """Move ``n`` periods forward (negative ``n`` moves back)."""
        message = f"Shifting {self.label} by {n} leaves the supported date range"
        context = {"period": self.label, "n": n}
        try:
            start = self.start + _step(self.granularity, n)
        except (OverflowError, ValueError) as exc:
            raise EInvalidPeriod(message, context=context) from exc
        if not _MIN_YEAR <= start.year <= _MAX_YEAR:
            raise EInvalidPeriod(message, context=context)
        return Period(self.granularity, start)

    def next(self) -> Period:
        return self.shift(1)

    def previous(self) -> Period:
        return self.shift(-1)

    def distance(self, other: Period) -> int:
        """Signed number of whole periods from ``self`` to ``other``.

        Raises:
            EGranularityMismatch: If the periods have different granularity
        """
        if other.granularity is not self.granularity:
            raise EGranularityMismatch(
                "Cannot measure distance between periods of different granularity",
                context={
                    "from": self.granularity.value,
                    "to": other.granularity.value,
                },
            )
        if self.granularity in _UNIT:
            return int((other.start - self.start) // _UNIT[self.granularity])
        months = (other.start.year - self.start.year) * 12 + (
            other.start.month - self.start.month
        )
        return months // _MONTHS[self.granularity]

    def __add__(self, other: Any) -> Period:
        if isinstance(other, bool) or not isinstance(other, Integral):
            return NotImplemented
        return self.shift(int(other))

    __radd__ = __add__

    def __sub__(self, other: Any) -> Any:
        if isinstance(other, Period):
            return other.distance(self)
        if isinstance(other, bool) or not isinstance(other, Integral):
            return NotImplemented
        return self.shift(-int(other))

    # ------------------------------------------------------------------
    # Subdivision
    # ------------------------------------------------------------------

    def months(self) -> list[Period]:
        """Monthly periods inside this one (empty below monthly)."""
        if self.granularity < Granularity.MONTHLY:
            return []
        first = Period.month(self.start.year, self.start.month)
        return [first + i for i in range(_MONTHS[self.granularity])]

    def quarters(self) -> list[Period]:
        """Quarterly periods inside this one (empty below quarterly)."""
        if self.granularity < Granularity.QUARTERLY:
            return []
        first = Period.quarter(self.start.year, (self.start.month - 1) // 3 + 1)
        return [first + i for i in range(_MONTHS[self.granularity] // 3)]

    def days(self) -> list[Period]:
        """Daily periods inside this one (empty below daily)."""
        if self.granularity < Granularity.DAILY:
            return []
        first = Period(Granularity.DAILY, self.start)
        return [first + i for i in range((self.end - self.start).days)]

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"Period({self.granularity.value}, {self.label})"


__all__ = ["Granularity", "Period"]
