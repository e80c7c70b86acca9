"""Shared type definitions for finseries.

Type aliases used across modules for clarity and consistency.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, TypeVar, Union

# Concrete scalar types finseries encodes and decodes
Number = Union[int, float, Decimal]

# Generic type variable
T = TypeVar("T")

# Element-wise binary operation
BinaryOp = Callable[[Number, Number], Number]

__all__ = [
    "Number",
    "T",
    "BinaryOp",
]
