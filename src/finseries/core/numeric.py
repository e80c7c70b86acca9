"""Numeric helpers shared by series operations.

Series values may be ``int``, ``float`` (numpy scalars included) or
``Decimal``. These helpers keep the semantics that the arithmetic relies on
in one place: what counts as a number, zero and conversion for a numeric
kind, and unguarded division.
"""

from __future__ import annotations

import numbers
from decimal import Decimal, DivisionByZero, InvalidOperation, localcontext
from typing import Any

import numpy as np

from finseries.core.config import NumericKind


def is_number(value: Any) -> bool:
    """True for real numbers and Decimals; bools are rejected."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))


def zero(kind: NumericKind = "float") -> Any:
    """Zero of the configured numeric kind."""
    return Decimal(0) if kind == "decimal" else 0.0


def coerce(value: Any, kind: NumericKind = "float") -> Any:
    """Convert a number to the configured numeric kind."""
    if kind == "decimal":
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))
    return float(value)


def divide(numerator: Any, denominator: Any) -> Any:
    """Divide without guarding against a zero denominator.

    Floats and ints follow IEEE 754 (``inf``, ``-inf`` or ``nan``); Decimals
    produce ``Decimal('Infinity')`` or ``Decimal('NaN')``.
    """
    if isinstance(numerator, Decimal) or isinstance(denominator, Decimal):
        with localcontext() as ctx:
            ctx.traps[DivisionByZero] = False
            ctx.traps[InvalidOperation] = False
            return numerator / denominator

    if denominator == 0:
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(numerator) / np.float64(denominator))
    return numerator / denominator


def midpoint(a: Any, b: Any) -> Any:
    """Arithmetic mean of two values, keeping Decimal exactness."""
    return divide(a + b, 2)


__all__ = ["is_number", "zero", "coerce", "divide", "midpoint"]
