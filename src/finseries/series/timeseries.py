"""TimeSeries implementation.

Immutable, period-keyed numeric container. Every financial metric built on
finseries is a composition of the operations defined here; all of them
return new instances.
"""

from __future__ import annotations

import json
import logging
import operator
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any

import pandas as pd

from finseries.contracts.payloads import (
    MetadataPayload,
    TimeSeriesPayload,
    decode_value,
    encode_value,
    infer_value_type,
    load_series_payload,
    period_from_payload,
    period_to_payload,
    value_type_of,
)
from finseries.core import numeric
from finseries.core.config import DEFAULT_CONFIG, AlignmentPolicy, SeriesConfig
from finseries.core.errors import (
    EAlignment,
    EConstruction,
    EDuplicatePeriod,
    ELengthMismatch,
    ENonNumericValue,
    EPayloadInvalid,
)
from finseries.core.types import BinaryOp
from finseries.series.metadata import TimeSeriesMetadata
from finseries.time.period import Period

logger = logging.getLogger(__name__)


class TimeSeries:
    """Discrete function from Period to a numeric value.

    The series keeps the order in which periods were supplied (iteration and
    display order) and a complete period -> value mapping; lookups are always
    by Period, never by position.

    Binary arithmetic between two series requires both to cover exactly the
    same periods (``EAlignment`` otherwise); use ``zip_with`` with
    ``alignment="intersection"`` to combine over the common periods instead.
    Division by zero is not guarded and yields ``inf``/``nan``.

    Examples:
        >>> q1, q2 = Period.quarter(2025, 1), Period.quarter(2025, 2)
        >>> revenue = TimeSeries([q1, q2], [100.0, 110.0])
        >>> expense = TimeSeries([q1, q2], [80.0, 84.0])
        >>> (revenue - expense).values
        [20.0, 26.0]
        >>> revenue.lookup(Period.quarter(2025, 3)) is None
        True
    """

    __slots__ = ("_periods", "_values", "_metadata", "_labels")

    # Make numpy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(
        self,
        periods: Iterable[Period],
        values: Iterable[Any],
        metadata: TimeSeriesMetadata | None = None,
        labels: Sequence[str | None] | None = None,
    ) -> None:
        periods = tuple(periods)
        values = list(values)
        if len(periods) != len(values):
            raise ELengthMismatch(
                "periods and values must have the same length",
                context={"periods": len(periods), "values": len(values)},
            )
        if labels is not None and len(labels) != len(periods):
            raise ELengthMismatch(
                "labels must have the same length as periods",
                context={"periods": len(periods), "labels": len(labels)},
            )

        mapping: dict[Period, Any] = {}
        for period, value in zip(periods, values):
            if not isinstance(period, Period):
                raise EConstruction(
                    f"Expected a Period, got {type(period).__name__}",
                    context={"item": repr(period)},
                )
            if not numeric.is_number(value):
                raise ENonNumericValue(
                    f"Value for {period.label} is not a number",
                    context={"period": period.label, "value": repr(value)},
                )
            if period in mapping:
                raise EDuplicatePeriod(
                    f"Period {period.label} appears more than once",
                    context={"period": period.label},
                )
            mapping[period] = value

        # Display labels; periods without one are simply absent
        label_map: dict[Period, str] = {}
        for period, label in zip(periods, labels or ()):
            if label is None:
                continue
            if not isinstance(label, str):
                raise EConstruction(
                    f"Label for {period.label} must be a string",
                    context={"period": period.label, "label": repr(label)},
                )
            label_map[period] = label

        self._periods = periods
        self._values = mapping
        self._metadata = metadata or TimeSeriesMetadata()
        self._labels = label_map

    # ------------------------------------------------------------------
    # Alternate constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[Period, Any],
        metadata: TimeSeriesMetadata | None = None,
        labels: Mapping[Period, str] | None = None,
    ) -> TimeSeries:
        """Build from an unordered mapping; periods are sorted by start.

        Raises:
            EConstruction: If ``labels`` names a period missing from ``data``
        """
        periods = sorted(data)
        if labels is None:
            return cls(periods, [data[p] for p in periods], metadata)
        orphans = [p for p in labels if p not in data]
        if orphans:
            raise EConstruction(
                "Labels refer to periods without a value",
                context={"periods": [getattr(p, "label", repr(p)) for p in orphans[:5]]},
            )
        return cls(
            periods,
            [data[p] for p in periods],
            metadata,
            labels=[labels.get(p) for p in periods],
        )

    @classmethod
    def constant(
        cls,
        periods: Iterable[Period],
        value: Any,
        metadata: TimeSeriesMetadata | None = None,
    ) -> TimeSeries:
        periods = tuple(periods)
        return cls(periods, [value] * len(periods), metadata)

    @classmethod
    def zeros(
        cls,
        periods: Iterable[Period],
        metadata: TimeSeriesMetadata | None = None,
        config: SeriesConfig | None = None,
    ) -> TimeSeries:
        config = config or DEFAULT_CONFIG
        return cls.constant(periods, numeric.zero(config.numeric), metadata)

    @classmethod
    def from_pandas(
        cls,
        series: pd.Series,
        metadata: TimeSeriesMetadata | None = None,
    ) -> TimeSeries:
        """Build from a pandas Series indexed by Period or pandas.Period.

        The Series name becomes the metadata name when no metadata is given.
        """
        periods = [
            Period.from_pandas(key) if isinstance(key, pd.Period) else key
            for key in series.index
        ]
        if metadata is None and series.name is not None:
            metadata = TimeSeriesMetadata(name=str(series.name))
        return cls(periods, series.tolist(), metadata)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def periods(self) -> tuple[Period, ...]:
        return self._periods

    @property
    def values(self) -> list[Any]:
        """Values in period order."""
        return [self._values[p] for p in self._periods]

    @property
    def metadata(self) -> TimeSeriesMetadata:
        return self._metadata

    @property
    def first(self) -> Any | None:
        return self._values[self._periods[0]] if self._periods else None

    @property
    def last(self) -> Any | None:
        return self._values[self._periods[-1]] if self._periods else None

    @property
    def is_empty(self) -> bool:
        return not self._periods

    @property
    def labels(self) -> dict[Period, str]:
        """Display labels by period (empty when the series has none)."""
        return dict(self._labels)

    def label(self, period: Period) -> str | None:
        """Display label of ``period``, or None when it has none."""
        return self._labels.get(period)

    def lookup(self, period: Period) -> Any | None:
        """Value for ``period``, or None when the series has no data for it."""
        return self._values.get(period)

    def get(self, period: Period, default: Any = None) -> Any:
        return self._values.get(period, default)

    def items(self) -> Iterator[tuple[Period, Any]]:
        for period in self._periods:
            yield period, self._values[period]

    def period_set(self) -> frozenset[Period]:
        return frozenset(self._periods)

    def __getitem__(self, period: Period) -> Any:
        return self._values[period]

    def __contains__(self, period: object) -> bool:
        return period in self._values

    def __iter__(self) -> Iterator[Any]:
        for period in self._periods:
            yield self._values[period]

    def __len__(self) -> int:
        return len(self._periods)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        return (
            self._periods == other._periods
            and self.values == other.values
            and self._metadata == other._metadata
            and self._labels == other._labels
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        name = f"{self._metadata.name!r}, " if self._metadata.name else ""
        body = ", ".join(f"{p.label}: {v!r}" for p, v in self.items())
        return f"TimeSeries({name}{{{body}}})"

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    def derive(
        self,
        periods: Sequence[Period],
        values: Sequence[Any],
        metadata: TimeSeriesMetadata | None = None,
    ) -> TimeSeries:
        """New series over ``periods``, keeping the labels this one has for them."""
        return TimeSeries(
            periods,
            values,
            metadata or self._metadata,
            labels=[self._labels.get(p) for p in periods] if self._labels else None,
        )

    def with_metadata(self, metadata: TimeSeriesMetadata) -> TimeSeries:
        return self.derive(self._periods, self.values, metadata)

    def with_values(self, values: Iterable[Any]) -> TimeSeries:
        """Same periods, metadata and labels carrying new values."""
        return self.derive(self._periods, list(values))

    def with_labels(self, labels: Sequence[str | None] | None) -> TimeSeries:
        """Replace the display labels (None removes them)."""
        return TimeSeries(self._periods, self.values, self._metadata, labels=labels)

    def map_values(
        self,
        transform: Callable[[Any], Any],
        prefix: str | None = None,
    ) -> TimeSeries:
        """Apply a scalar transform to every value.

        Args:
            transform: Pure function applied to each value
            prefix: Optional text prepended to the metadata name

        Returns:
            New TimeSeries over the same periods
        """
        metadata = self._metadata.prefixed(prefix) if prefix else self._metadata
        return self.derive(self._periods, [transform(v) for v in self], metadata)

    def filter_values(self, predicate: Callable[[Any], bool]) -> TimeSeries:
        kept = [(p, v) for p, v in self.items() if predicate(v)]
        return self.derive([p for p, _ in kept], [v for _, v in kept])

    def range(self, start: Period, end: Period) -> TimeSeries:
        """Sub-series of periods between ``start`` and ``end`` inclusive."""
        return self.filter_periods(lambda p: start <= p <= end)

    def filter_periods(self, predicate: Callable[[Period], bool]) -> TimeSeries:
        kept = [p for p in self._periods if predicate(p)]
        return self.derive(kept, [self._values[p] for p in kept])

    def shift_periods(self, n: int) -> TimeSeries:
        """Relabel every value onto the period ``n`` steps later."""
        labels = [self._labels.get(p) for p in self._periods] if self._labels else None
        return TimeSeries(
            [p + n for p in self._periods], self.values, self._metadata, labels=labels
        )

    def diff(self, lag: int = 1) -> TimeSeries:
        """Period-over-period change with a zero baseline.

        For position ``i >= lag`` the result is ``value[i] - value[i - lag]``;
        the first ``lag`` positions keep their raw value, i.e. the change from
        an assumed zero prior balance. Nothing is dropped, so the result covers
        the same periods as the input.

        Raises:
            ValueError: If lag is smaller than 1
        """
        if lag < 1:
            raise ValueError(f"lag must be at least 1, got {lag}")
        values = self.values
        result = [
            values[i] - values[i - lag] if i >= lag else values[i]
            for i in range(len(values))
        ]
        return self.derive(self._periods, result)

    # ------------------------------------------------------------------
    # Binary operations
    # ------------------------------------------------------------------

    def zip_with(
        self,
        other: TimeSeries,
        op: BinaryOp,
        alignment: AlignmentPolicy | None = None,
        config: SeriesConfig | None = None,
    ) -> TimeSeries:
        """Combine two series period by period.

        Args:
            other: Right-hand operand
            op: Element-wise operation ``op(self[p], other[p])``
            alignment: ``"strict"`` or ``"intersection"``; overrides config
            config: Series configuration (default: strict)

        Returns:
            New TimeSeries in this series' period order with its metadata

        Raises:
            EAlignment: Under the strict policy, if the period sets differ
        """
        policy = alignment or (config or DEFAULT_CONFIG).alignment
        if policy == "strict":
            _require_same_periods(self, other)
            periods = self._periods
        else:
            periods = tuple(p for p in self._periods if p in other._values)
            dropped = len(self._periods) + len(other._periods) - 2 * len(periods)
            if dropped:
                logger.warning(
                    "Intersection alignment dropped %d period(s) combining %r and %r",
                    dropped,
                    self._metadata.name,
                    other._metadata.name,
                )
        result = [op(self._values[p], other._values[p]) for p in periods]
        return self.derive(periods, result)

    def _apply(self, other: Any, op: BinaryOp) -> TimeSeries:
        if isinstance(other, TimeSeries):
            return self.zip_with(other, op)
        if numeric.is_number(other):
            return self.derive(self._periods, [op(v, other) for v in self])
        return NotImplemented

    def _apply_reflected(self, other: Any, op: BinaryOp) -> TimeSeries:
        if numeric.is_number(other):
            return self.derive(self._periods, [op(other, v) for v in self])
        return NotImplemented

    def __add__(self, other: Any) -> TimeSeries:
        return self._apply(other, operator.add)

    def __sub__(self, other: Any) -> TimeSeries:
        return self._apply(other, operator.sub)

    def __mul__(self, other: Any) -> TimeSeries:
        return self._apply(other, operator.mul)

    def __truediv__(self, other: Any) -> TimeSeries:
        return self._apply(other, numeric.divide)

    def __radd__(self, other: Any) -> TimeSeries:
        return self._apply_reflected(other, operator.add)

    def __rsub__(self, other: Any) -> TimeSeries:
        return self._apply_reflected(other, operator.sub)

    def __rmul__(self, other: Any) -> TimeSeries:
        return self._apply_reflected(other, operator.mul)

    def __rtruediv__(self, other: Any) -> TimeSeries:
        return self._apply_reflected(other, numeric.divide)

    def __neg__(self) -> TimeSeries:
        return self.derive(self._periods, [-v for v in self])

    # ------------------------------------------------------------------
    # pandas interop
    # ------------------------------------------------------------------

    def to_pandas(self) -> pd.Series:
        """pandas Series indexed by Period, in series order."""
        index = pd.Index(list(self._periods), dtype=object, name="period")
        return pd.Series(self.values, index=index, name=self._metadata.name or None)

    def to_frame(self) -> pd.DataFrame:
        """Tabular view with ``period, start, end, value`` columns."""
        return pd.DataFrame(
            {
                "period": [p.label for p in self._periods],
                "start": [p.start for p in self._periods],
                "end": [p.end for p in self._periods],
                "value": self.values,
            }
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_payload(self) -> TimeSeriesPayload:
        values = self.values
        value_type = infer_value_type(values)
        tags = [value_type_of(v) for v in values]
        return TimeSeriesPayload(
            value_type=value_type,
            value_types=tags if value_type == "mixed" else None,
            periods=[period_to_payload(p) for p in self._periods],
            values=[encode_value(v, tag) for v, tag in zip(values, tags)],
            labels=[self._labels.get(p) for p in self._periods] if self._labels else None,
            metadata=MetadataPayload(**self._metadata.to_dict()),
        )

    @classmethod
    def from_payload(cls, payload: TimeSeriesPayload) -> TimeSeries:
        periods = [period_from_payload(p) for p in payload.periods]
        values = [
            decode_value(v, payload.value_type_at(i)) for i, v in enumerate(payload.values)
        ]
        metadata = TimeSeriesMetadata.from_dict(payload.metadata.model_dump())
        logger.debug("Decoded series %r with %d periods", metadata.name, len(periods))
        try:
            return cls(periods, values, metadata, labels=payload.labels)
        except EConstruction as exc:
            raise EPayloadInvalid(
                f"Payload does not describe a valid series: {exc.message}",
                context=exc.context,
            ) from exc

    def to_dict(self) -> dict[str, Any]:
        return self.to_payload().model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeSeries:
        """Decode a mapping produced by ``to_dict``.

        Raises:
            ESerialization: If the mapping is not a valid series payload
        """
        return cls.from_payload(load_series_payload(data))

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str | bytes) -> TimeSeries:
        return cls.from_payload(load_series_payload(text))


def _require_same_periods(left: TimeSeries, right: TimeSeries) -> None:
    if left._values.keys() == right._values.keys():
        return
    only_left = sorted(left._values.keys() - right._values.keys())
    only_right = sorted(right._values.keys() - left._values.keys())
    raise EAlignment(
        "Series cover different periods",
        context={
            "left": left.metadata.name,
            "right": right.metadata.name,
            "only_left": [p.label for p in only_left[:5]],
            "only_right": [p.label for p in only_right[:5]],
        },
    )


__all__ = ["TimeSeries"]
