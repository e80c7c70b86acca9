"""Core error types with rich context.

A handful of error classes with an ``error_code`` each; the more specific
names used across the codebase are aliases of these.
"""

from __future__ import annotations

from typing import Any


class FinSeriesError(Exception):
    """Base exception with rich context.

    All errors in finseries use this class with specific error_code
    values instead of creating many subclasses.
    """

    error_code: str = "E_UNKNOWN"
    fix_hint: str = ""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if fix_hint:
            self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f"(context: {self.context})")
        if self.fix_hint:
            parts.append(f"[hint: {self.fix_hint}]")
        return " ".join(parts)


class EConstruction(FinSeriesError):
    """TimeSeries could not be built from the supplied data."""

    error_code = "E_CONSTRUCTION"
    fix_hint = "Pass one unique Period per value: len(periods) must equal len(values)"


class EAlignment(FinSeriesError):
    """Series or periods with incompatible period sets were combined."""

    error_code = "E_ALIGNMENT"
    fix_hint = "Build both operands over the same periods, or use alignment='intersection'"


class EInvalidPeriod(FinSeriesError):
    """A calendar field passed to a Period factory is out of range."""

    error_code = "E_INVALID_PERIOD"
    fix_hint = "Check calendar fields: month 1-12, quarter 1-4, day within the month"


class ESerialization(FinSeriesError):
    """An encoded series payload could not be decoded."""

    error_code = "E_SERIALIZATION"
    fix_hint = "Decode only payloads produced by TimeSeries.to_dict() / to_json()"


# Specific names
ELengthMismatch = EConstruction
EDuplicatePeriod = EConstruction
ENonNumericValue = EConstruction

EGranularityMismatch = EAlignment

EPayloadInvalid = ESerialization

# Error registry for lookup
ERROR_REGISTRY: dict[str, type[FinSeriesError]] = {
    "E_CONSTRUCTION": EConstruction,
    "E_ALIGNMENT": EAlignment,
    "E_INVALID_PERIOD": EInvalidPeriod,
    "E_SERIALIZATION": ESerialization,
}


def get_error_class(error_code: str) -> type[FinSeriesError]:
    """Get error class by code."""
    return ERROR_REGISTRY.get(error_code, FinSeriesError)
