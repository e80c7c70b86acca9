"""Tests for finseries.series.timeseries.TimeSeries.

Covers construction and its validation, lookups, transformations, aligned
arithmetic, pandas interop and the JSON round trip.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal

import numpy as np
import pandas as pd
import pytest

from finseries import (
    EAlignment,
    EConstruction,
    EDuplicatePeriod,
    ELengthMismatch,
    ESerialization,
    Period,
    SeriesConfig,
    TimeSeries,
    TimeSeriesMetadata,
)

Q1, Q2, Q3, Q4 = (Period.quarter(2025, q) for q in (1, 2, 3, 4))


@pytest.fixture
def revenue() -> TimeSeries:
    return TimeSeries(
        [Q1, Q2, Q3],
        [100.0, 110.0, 121.0],
        TimeSeriesMetadata(name="revenue", unit="USD"),
    )


@pytest.fixture
def expense() -> TimeSeries:
    return TimeSeries([Q1, Q2, Q3], [80.0, 84.0, 88.2], TimeSeriesMetadata(name="expense"))


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_basic(self, revenue: TimeSeries) -> None:
        assert revenue.periods == (Q1, Q2, Q3)
        assert revenue.values == [100.0, 110.0, 121.0]
        assert revenue.metadata.name == "revenue"
        assert len(revenue) == 3

    def test_preserves_supplied_order(self) -> None:
        ts = TimeSeries([Q2, Q1], [2, 1])
        assert ts.periods == (Q2, Q1)
        assert list(ts) == [2, 1]

    def test_default_metadata(self) -> None:
        assert TimeSeries([Q1], [1.0]).metadata == TimeSeriesMetadata()

    def test_empty(self) -> None:
        ts = TimeSeries([], [])
        assert ts.is_empty
        assert len(ts) == 0
        assert ts.first is None and ts.last is None

    def test_length_mismatch(self) -> None:
        with pytest.raises(ELengthMismatch) as exc_info:
            TimeSeries([Q1, Q2], [1.0])
        assert exc_info.value.context == {"periods": 2, "values": 1}

    def test_duplicate_period(self) -> None:
        with pytest.raises(EDuplicatePeriod, match="2025-Q1"):
            TimeSeries([Q1, Q1], [1.0, 2.0])

    def test_non_period_key(self) -> None:
        with pytest.raises(EConstruction, match="Expected a Period"):
            TimeSeries(["2025-Q1"], [1.0])

    @pytest.mark.parametrize("bad", ["1", None, True, [1.0]])
    def test_non_numeric_value(self, bad) -> None:
        with pytest.raises(EConstruction, match="not a number"):
            TimeSeries([Q1], [bad])

    def test_accepts_mixed_number_types(self) -> None:
        ts = TimeSeries([Q1, Q2, Q3], [1, 2.5, np.float64(3.0)])
        assert ts.values == [1, 2.5, 3.0]

    def test_from_mapping_sorts_periods(self) -> None:
        ts = TimeSeries.from_mapping({Q3: 3.0, Q1: 1.0, Q2: 2.0})
        assert ts.periods == (Q1, Q2, Q3)
        assert ts.values == [1.0, 2.0, 3.0]

    def test_constant_and_zeros(self) -> None:
        assert TimeSeries.constant([Q1, Q2], 7).values == [7, 7]
        zeros = TimeSeries.zeros([Q1, Q2], config=SeriesConfig.decimal())
        assert zeros.values == [Decimal(0), Decimal(0)]
        assert all(isinstance(v, Decimal) for v in zeros)


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


class TestAccess:
    def test_lookup(self) -> None:
        ts = TimeSeries([Q1, Q2], [100, 200])
        assert ts.lookup(Q1) == 100
        assert ts.lookup(Q3) is None

    def test_lookup_other_granularity_absent(self) -> None:
        ts = TimeSeries([Q1], [100])
        assert ts.lookup(Period.month(2025, 1)) is None

    def test_get_default(self, revenue: TimeSeries) -> None:
        assert revenue.get(Q4, 0.0) == 0.0

    def test_getitem(self, revenue: TimeSeries) -> None:
        assert revenue[Q2] == 110.0
        with pytest.raises(KeyError):
            revenue[Q4]

    def test_contains(self, revenue: TimeSeries) -> None:
        assert Q1 in revenue
        assert Q4 not in revenue

    def test_items_first_last(self, revenue: TimeSeries) -> None:
        assert list(revenue.items())[0] == (Q1, 100.0)
        assert revenue.first == 100.0
        assert revenue.last == 121.0
        assert revenue.period_set() == frozenset({Q1, Q2, Q3})

    def test_values_is_a_copy(self, revenue: TimeSeries) -> None:
        revenue.values.append(1.0)
        assert len(revenue.values) == 3

    def test_equality_includes_metadata(self, revenue: TimeSeries) -> None:
        same = TimeSeries([Q1, Q2, Q3], [100.0, 110.0, 121.0], revenue.metadata)
        renamed = same.with_metadata(TimeSeriesMetadata(name="sales"))
        assert revenue == same
        assert revenue != renamed

    def test_not_hashable(self, revenue: TimeSeries) -> None:
        with pytest.raises(TypeError):
            hash(revenue)

    def test_repr(self) -> None:
        ts = TimeSeries([Q1], [1.5], TimeSeriesMetadata(name="cash"))
        assert repr(ts) == "TimeSeries('cash', {2025-Q1: 1.5})"


# ---------------------------------------------------------------------------
# Transformation
# ---------------------------------------------------------------------------


class TestTransformation:
    def test_map_values(self, revenue: TimeSeries) -> None:
        doubled = revenue.map_values(lambda v: v * 2)
        assert doubled.values == [200.0, 220.0, 242.0]
        assert doubled.periods == revenue.periods
        assert revenue.values == [100.0, 110.0, 121.0]

    def test_map_values_prefix(self, revenue: TimeSeries) -> None:
        adjusted = revenue.map_values(lambda v: v, prefix="adj_")
        assert adjusted.metadata.name == "adj_revenue"
        assert adjusted.metadata.unit == "USD"

    def test_filter_values(self, revenue: TimeSeries) -> None:
        assert revenue.filter_values(lambda v: v > 105).periods == (Q2, Q3)

    def test_range_inclusive(self, revenue: TimeSeries) -> None:
        assert revenue.range(Q2, Q3).values == [110.0, 121.0]

    def test_filter_periods(self, revenue: TimeSeries) -> None:
        assert revenue.filter_periods(lambda p: p != Q2).periods == (Q1, Q3)

    def test_shift_periods(self, revenue: TimeSeries) -> None:
        shifted = revenue.shift_periods(1)
        assert shifted.periods == (Q2, Q3, Q4)
        assert shifted.values == revenue.values


class TestDiff:
    def test_zero_baseline(self) -> None:
        ts = TimeSeries([Q1, Q2, Q3], [100, 130, 120])
        assert ts.diff().values == [100, 30, -10]

    def test_constant_series(self) -> None:
        ts = TimeSeries.constant([Q1, Q2, Q3, Q4], 5.0)
        assert ts.diff().values == [5.0, 0.0, 0.0, 0.0]

    def test_single_period(self) -> None:
        assert TimeSeries([Q1], [10]).diff().values == [10]

    def test_empty(self) -> None:
        assert TimeSeries([], []).diff().is_empty

    def test_lag(self) -> None:
        ts = TimeSeries([Q1, Q2, Q3, Q4], [1, 2, 4, 8])
        assert ts.diff(lag=2).values == [1, 2, 3, 6]

    def test_keeps_periods_and_metadata(self, revenue: TimeSeries) -> None:
        result = revenue.diff()
        assert result.periods == revenue.periods
        assert result.metadata == revenue.metadata

    def test_invalid_lag(self) -> None:
        with pytest.raises(ValueError, match="lag must be at least 1"):
            TimeSeries([Q1], [1]).diff(lag=0)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


class TestSeriesArithmetic:
    def test_subtract(self, revenue: TimeSeries, expense: TimeSeries) -> None:
        net = revenue - expense
        assert net.periods == (Q1, Q2, Q3)
        assert net.values == pytest.approx([20.0, 26.0, 32.8])

    def test_add_multiply_divide(self) -> None:
        a = TimeSeries([Q1, Q2], [6.0, 8.0])
        b = TimeSeries([Q1, Q2], [2.0, 4.0])
        assert (a + b).values == [8.0, 12.0]
        assert (a * b).values == [12.0, 32.0]
        assert (a / b).values == [3.0, 2.0]

    def test_pointwise_by_period(self) -> None:
        a = TimeSeries([Q1, Q2], [1, 2])
        b = TimeSeries([Q2, Q1], [20, 10])
        result = a + b
        assert result.periods == (Q1, Q2)
        assert result.values == [11, 22]

    def test_keeps_left_metadata(self, revenue: TimeSeries, expense: TimeSeries) -> None:
        assert (revenue - expense).metadata == revenue.metadata
        assert (expense - revenue).metadata == expense.metadata

    def test_misaligned_raises(self, revenue: TimeSeries) -> None:
        other = TimeSeries([Q2, Q3, Q4], [1.0, 1.0, 1.0], TimeSeriesMetadata(name="other"))
        with pytest.raises(EAlignment) as exc_info:
            revenue + other
        context = exc_info.value.context
        assert context["only_left"] == ["2025-Q1"]
        assert context["only_right"] == ["2025-Q4"]
        assert context["left"] == "revenue"

    def test_granularity_mismatch_raises(self) -> None:
        quarterly = TimeSeries([Q1], [1.0])
        monthly = TimeSeries([Period.month(2025, 1)], [1.0])
        with pytest.raises(EAlignment):
            quarterly - monthly

    def test_divide_by_zero(self) -> None:
        num = TimeSeries([Q1, Q2, Q3], [1.0, 0.0, -2.0])
        den = TimeSeries([Q1, Q2, Q3], [0.0, 0.0, 0.0])
        result = (num / den).values
        assert result[0] == math.inf
        assert math.isnan(result[1])
        assert result[2] == -math.inf

    def test_integer_divide_by_zero(self) -> None:
        result = TimeSeries([Q1], [3]) / TimeSeries([Q1], [0])
        assert result.values == [math.inf]

    def test_decimal_arithmetic(self) -> None:
        a = TimeSeries([Q1, Q2], [Decimal("0.10"), Decimal("0.20")])
        b = TimeSeries([Q1, Q2], [Decimal("0.20"), Decimal("0")])
        assert (a + b).values == [Decimal("0.30"), Decimal("0.20")]
        assert (a / b).values[1] == Decimal("Infinity")

    def test_operands_unchanged(self, revenue: TimeSeries, expense: TimeSeries) -> None:
        revenue - expense
        assert revenue.values == [100.0, 110.0, 121.0]
        assert expense.values == [80.0, 84.0, 88.2]


class TestScalarArithmetic:
    def test_scalar_operators(self) -> None:
        ts = TimeSeries([Q1, Q2], [10.0, 20.0])
        assert (ts + 1).values == [11.0, 21.0]
        assert (ts - 1).values == [9.0, 19.0]
        assert (ts * 2).values == [20.0, 40.0]
        assert (ts / 4).values == [2.5, 5.0]

    def test_reflected_operators(self) -> None:
        ts = TimeSeries([Q1, Q2], [10.0, 20.0])
        assert (1 + ts).values == [11.0, 21.0]
        assert (100 - ts).values == [90.0, 80.0]
        assert (2 * ts).values == [20.0, 40.0]
        assert (100 / ts).values == [10.0, 5.0]

    def test_numpy_scalar(self) -> None:
        ts = TimeSeries([Q1], [10.0])
        result = np.float64(2.0) * ts
        assert isinstance(result, TimeSeries)
        assert result.values == [20.0]

    def test_builtin_sum(self) -> None:
        a = TimeSeries([Q1, Q2], [1.0, 2.0])
        b = TimeSeries([Q1, Q2], [10.0, 20.0])
        assert sum([a, b]).values == [11.0, 22.0]

    def test_negate(self) -> None:
        assert (-TimeSeries([Q1], [3.0])).values == [-3.0]

    def test_unsupported_operand(self) -> None:
        with pytest.raises(TypeError):
            TimeSeries([Q1], [1.0]) + "1"


class TestZipWith:
    def test_custom_op(self) -> None:
        a = TimeSeries([Q1, Q2], [1.0, 5.0])
        b = TimeSeries([Q1, Q2], [3.0, 2.0])
        assert a.zip_with(b, max).values == [3.0, 5.0]

    def test_intersection_alignment(self, caplog) -> None:
        a = TimeSeries([Q1, Q2, Q3], [1.0, 2.0, 3.0])
        b = TimeSeries([Q2, Q3, Q4], [10.0, 20.0, 30.0])
        with caplog.at_level(logging.WARNING, logger="finseries.series.timeseries"):
            result = a.zip_with(b, lambda x, y: x + y, alignment="intersection")
        assert result.periods == (Q2, Q3)
        assert result.values == [12.0, 23.0]
        assert "dropped 2 period(s)" in caplog.text

    def test_intersection_via_config(self) -> None:
        a = TimeSeries([Q1, Q2], [1.0, 2.0])
        b = TimeSeries([Q2], [10.0])
        result = a.zip_with(b, lambda x, y: x * y, config=SeriesConfig.lenient())
        assert result.periods == (Q2,)
        assert result.values == [20.0]

    def test_explicit_alignment_overrides_config(self) -> None:
        a = TimeSeries([Q1, Q2], [1.0, 2.0])
        b = TimeSeries([Q2], [10.0])
        with pytest.raises(EAlignment):
            a.zip_with(b, lambda x, y: x + y, alignment="strict", config=SeriesConfig.lenient())


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


class TestLabels:
    def test_no_labels_by_default(self, revenue: TimeSeries) -> None:
        assert revenue.labels == {}
        assert revenue.label(Q1) is None

    def test_construction_with_labels(self) -> None:
        ts = TimeSeries([Q1, Q2], [1.0, 2.0], labels=["Q1 FY25", None])
        assert ts.label(Q1) == "Q1 FY25"
        assert ts.label(Q2) is None
        assert ts.label(Q3) is None
        assert ts.labels == {Q1: "Q1 FY25"}

    def test_labels_length_mismatch(self) -> None:
        with pytest.raises(ELengthMismatch) as exc_info:
            TimeSeries([Q1, Q2], [1.0, 2.0], labels=["only one"])
        assert exc_info.value.context == {"periods": 2, "labels": 1}

    def test_non_string_label(self) -> None:
        with pytest.raises(EConstruction, match="must be a string"):
            TimeSeries([Q1], [1.0], labels=[2025])

    def test_from_mapping_labels(self) -> None:
        ts = TimeSeries.from_mapping({Q2: 2.0, Q1: 1.0}, labels={Q2: "Spring"})
        assert ts.periods == (Q1, Q2)
        assert ts.label(Q2) == "Spring"
        assert ts.label(Q1) is None

    def test_from_mapping_orphan_label(self) -> None:
        with pytest.raises(EConstruction, match="without a value"):
            TimeSeries.from_mapping({Q1: 1.0}, labels={Q3: "Autumn"})

    def test_labels_property_is_a_copy(self) -> None:
        ts = TimeSeries([Q1], [1.0], labels=["Q1 FY25"])
        ts.labels[Q1] = "changed"
        assert ts.label(Q1) == "Q1 FY25"

    def test_equality_includes_labels(self) -> None:
        plain = TimeSeries([Q1], [1.0])
        labelled = TimeSeries([Q1], [1.0], labels=["Q1 FY25"])
        assert plain != labelled
        assert labelled == TimeSeries([Q1], [1.0], labels=["Q1 FY25"])

    def test_with_labels(self) -> None:
        ts = TimeSeries([Q1, Q2], [1.0, 2.0]).with_labels(["a", "b"])
        assert ts.labels == {Q1: "a", Q2: "b"}
        assert ts.with_labels(None).labels == {}

    def test_carried_through_transforms(self) -> None:
        ts = TimeSeries([Q1, Q2, Q3], [1.0, 2.0, 3.0], labels=["a", "b", "c"])
        assert ts.map_values(lambda v: v * 2).labels == ts.labels
        assert ts.filter_values(lambda v: v > 1).labels == {Q2: "b", Q3: "c"}
        assert ts.filter_periods(lambda p: p != Q2).labels == {Q1: "a", Q3: "c"}
        assert ts.diff().labels == ts.labels
        assert ts.with_metadata(TimeSeriesMetadata(name="x")).labels == ts.labels

    def test_shift_moves_labels(self) -> None:
        ts = TimeSeries([Q1, Q2], [1.0, 2.0], labels=["a", "b"])
        assert ts.shift_periods(1).labels == {Q2: "a", Q3: "b"}

    def test_carried_through_arithmetic(self) -> None:
        left = TimeSeries([Q1, Q2], [10.0, 20.0], labels=["a", "b"])
        right = TimeSeries([Q1, Q2], [1.0, 2.0], labels=["x", "y"])
        assert (left - right).labels == {Q1: "a", Q2: "b"}
        assert (left * 2).labels == left.labels
        assert (100 - left).labels == left.labels
        assert (-left).labels == left.labels

    def test_intersection_keeps_left_labels(self) -> None:
        left = TimeSeries([Q1, Q2], [1.0, 2.0], labels=["a", "b"])
        right = TimeSeries([Q2, Q3], [1.0, 1.0])
        result = left.zip_with(right, lambda a, b: a + b, alignment="intersection")
        assert result.labels == {Q2: "b"}

    def test_json_round_trip(self) -> None:
        ts = TimeSeries([Q1, Q2], [1.0, 2.0], labels=[None, "Q2 FY25"])
        decoded = TimeSeries.from_json(ts.to_json())
        assert decoded.label(Q2) == "Q2 FY25"
        assert decoded == ts


# ---------------------------------------------------------------------------
# pandas interop
# ---------------------------------------------------------------------------


class TestPandasInterop:
    def test_to_pandas(self, revenue: TimeSeries) -> None:
        series = revenue.to_pandas()
        assert series.name == "revenue"
        assert series.index.name == "period"
        assert list(series.index) == [Q1, Q2, Q3]
        assert series.tolist() == [100.0, 110.0, 121.0]
        assert series.loc[Q2] == 110.0

    def test_round_trip(self) -> None:
        ts = TimeSeries([Q2, Q1], [2.0, 1.0], TimeSeriesMetadata(name="cash"))
        assert TimeSeries.from_pandas(ts.to_pandas()) == ts

    def test_from_pandas_period_index(self) -> None:
        index = pd.period_range("2025Q1", periods=3, freq="Q")
        series = pd.Series([1.0, 2.0, 3.0], index=index)
        ts = TimeSeries.from_pandas(series)
        assert ts.periods == (Q1, Q2, Q3)
        assert ts.metadata.name == ""

    def test_to_frame(self, revenue: TimeSeries) -> None:
        frame = revenue.to_frame()
        assert list(frame.columns) == ["period", "start", "end", "value"]
        assert frame["period"].tolist() == ["2025-Q1", "2025-Q2", "2025-Q3"]
        assert frame.loc[0, "end"] == pd.Timestamp("2025-04-01")


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


class TestSerialization:
    def test_dict_round_trip(self, revenue: TimeSeries) -> None:
        assert TimeSeries.from_dict(revenue.to_dict()) == revenue

    def test_json_round_trip(self, revenue: TimeSeries) -> None:
        assert TimeSeries.from_json(revenue.to_json(indent=2)) == revenue

    def test_preserves_order(self) -> None:
        ts = TimeSeries([Q3, Q1], [3.0, 1.0])
        assert TimeSeries.from_json(ts.to_json()).periods == (Q3, Q1)

    def test_decimal_round_trip(self) -> None:
        ts = TimeSeries([Q1, Q2], [Decimal("1234.5678"), Decimal("0.10")])
        decoded = TimeSeries.from_json(ts.to_json())
        assert decoded.values == [Decimal("1234.5678"), Decimal("0.10")]
        assert all(isinstance(v, Decimal) for v in decoded)

    def test_int_round_trip(self) -> None:
        ts = TimeSeries([Q1], [42])
        decoded = TimeSeries.from_dict(ts.to_dict())
        assert decoded.values == [42]
        assert isinstance(decoded.values[0], int)

    def test_mixed_decimal_and_float_round_trip(self) -> None:
        ts = TimeSeries([Q1, Q2, Q3], [Decimal("0.10"), 0.1 + 0.2, math.inf])
        decoded = TimeSeries.from_json(ts.to_json())
        assert decoded.values[0] == Decimal("0.10")
        assert isinstance(decoded.values[0], Decimal)
        assert decoded.values[1] == 0.1 + 0.2
        assert isinstance(decoded.values[1], float)
        assert decoded.values[2] == math.inf
        assert decoded == ts

    def test_mixed_int_and_float_round_trip(self) -> None:
        big = 10**17 + 1
        ts = TimeSeries([Q1, Q2], [big, 2.5])
        decoded = TimeSeries.from_dict(ts.to_dict())
        assert decoded.values == [big, 2.5]
        assert isinstance(decoded.values[0], int)
        assert isinstance(decoded.values[1], float)

    def test_float_precision_and_specials(self) -> None:
        ts = TimeSeries([Q1, Q2, Q3], [0.1 + 0.2, math.inf, math.nan])
        decoded = TimeSeries.from_json(ts.to_json()).values
        assert decoded[0] == 0.1 + 0.2
        assert decoded[1] == math.inf
        assert math.isnan(decoded[2])

    def test_mixed_granularities(self) -> None:
        ts = TimeSeries(
            [Period.year(2024), Period.month(2025, 1), Period.millisecond(2025, 2, 3, 4, 5, 6, 7)],
            [1.0, 2.0, 3.0],
        )
        assert TimeSeries.from_json(ts.to_json()) == ts

    def test_empty_round_trip(self) -> None:
        ts = TimeSeries([], [], TimeSeriesMetadata(name="empty"))
        assert TimeSeries.from_dict(ts.to_dict()) == ts

    def test_invalid_document(self) -> None:
        with pytest.raises(ESerialization):
            TimeSeries.from_json("{not json")

    def test_duplicate_periods_in_payload(self, revenue: TimeSeries) -> None:
        data = revenue.to_dict()
        data["periods"][1] = data["periods"][0]
        with pytest.raises(ESerialization, match="valid series"):
            TimeSeries.from_dict(data)
