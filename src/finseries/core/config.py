"""Configuration for series composition.

A single frozen config object carries the knobs that change how series are
combined. It is always passed explicitly; nothing in finseries reads a
module-level default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AlignmentPolicy = Literal["strict", "intersection"]
NumericKind = Literal["float", "decimal"]

_ALIGNMENTS = ("strict", "intersection")
_NUMERIC_KINDS = ("float", "decimal")


@dataclass(frozen=True)
class SeriesConfig:
    """Minimal configuration for combining time series.

    Args:
        alignment: How binary operations treat differing period sets.
            ``"strict"`` raises EAlignment unless both operands cover exactly
            the same periods; ``"intersection"`` keeps the common periods.
        numeric: Scalar type used when finseries has to create values on its
            own (zero series, empty sums): ``float`` or ``Decimal``.
    """

    alignment: AlignmentPolicy = "strict"
    numeric: NumericKind = "float"

    def __post_init__(self) -> None:
        if self.alignment not in _ALIGNMENTS:
            raise ValueError(f"alignment must be one of {_ALIGNMENTS}, got {self.alignment!r}")
        if self.numeric not in _NUMERIC_KINDS:
            raise ValueError(f"numeric must be one of {_NUMERIC_KINDS}, got {self.numeric!r}")

    @classmethod
    def strict(cls) -> SeriesConfig:
        """Default preset: equal period sets required, float zeros."""
        return cls(alignment="strict", numeric="float")

    @classmethod
    def lenient(cls) -> SeriesConfig:
        """Combine series over their common periods."""
        return cls(alignment="intersection", numeric="float")

    @classmethod
    def decimal(cls) -> SeriesConfig:
        """Strict alignment with Decimal zeros for monetary exactness."""
        return cls(alignment="strict", numeric="decimal")


DEFAULT_CONFIG = SeriesConfig()
