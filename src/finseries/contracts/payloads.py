"""Pydantic payload models for serialized series.

These models define the JSON-friendly boundary of a TimeSeries while the
runtime code keeps working with Period objects and native numbers. Values
are carried as strings tagged with a value type so that floats (including
infinities and NaN) and Decimals survive a JSON round trip exactly.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from numbers import Integral
from typing import Any, Literal

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from finseries.core.errors import EInvalidPeriod, EPayloadInvalid
from finseries.time.period import Granularity, Period

logger = logging.getLogger(__name__)


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


SERIES_PAYLOAD_TYPE = "finseries.time_series"
SERIES_SCHEMA_VERSION = 1
SUPPORTED_SERIES_SCHEMA_VERSIONS = frozenset({SERIES_SCHEMA_VERSION})

ValueType = Literal["float", "int", "decimal"]
SeriesValueType = Literal["float", "int", "decimal", "mixed"]


class PeriodPayload(_PayloadModel):
    """Serializable payload for a Period."""

    granularity: Granularity
    start: str


class MetadataPayload(_PayloadModel):
    """Serializable payload for series metadata."""

    name: str = ""
    description: str | None = None
    unit: str | None = None


class TimeSeriesPayload(_PayloadModel):
    """Serializable payload for a TimeSeries."""

    payload_type: Literal["finseries.time_series"] = SERIES_PAYLOAD_TYPE
    schema_version: int = Field(SERIES_SCHEMA_VERSION, ge=1)
    value_type: SeriesValueType = "float"
    value_types: list[ValueType] | None = None
    periods: list[PeriodPayload] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    labels: list[str | None] | None = None
    metadata: MetadataPayload = Field(default_factory=MetadataPayload)

    @model_validator(mode="after")
    def _check_shape(self) -> TimeSeriesPayload:
        if self.schema_version not in SUPPORTED_SERIES_SCHEMA_VERSIONS:
            raise ValueError(
                f"Unsupported schema_version {self.schema_version}; "
                f"supported: {sorted(SUPPORTED_SERIES_SCHEMA_VERSIONS)}"
            )
        if len(self.periods) != len(self.values):
            raise ValueError(
                f"periods ({len(self.periods)}) and values ({len(self.values)}) "
                "must have the same length"
            )
        # Per-value tags exist only for mixed series
        if self.value_type == "mixed":
            if self.value_types is None or len(self.value_types) != len(self.values):
                raise ValueError("value_types must tag every value of a mixed series")
        elif self.value_types is not None:
            raise ValueError("value_types is only allowed when value_type is 'mixed'")
        if self.labels is not None and len(self.labels) != len(self.periods):
            raise ValueError(
                f"labels ({len(self.labels)}) and periods ({len(self.periods)}) "
                "must have the same length"
            )
        return self

    def value_type_at(self, index: int) -> ValueType:
        """Tag under which ``values[index]`` is encoded."""
        if self.value_types is not None:
            return self.value_types[index]
        return self.value_type


# ---------------------------
# Periods
# ---------------------------


def period_to_payload(period: Period) -> PeriodPayload:
    return PeriodPayload(granularity=period.granularity, start=period.start.isoformat())


def period_from_payload(payload: PeriodPayload) -> Period:
    try:
        return Period(payload.granularity, pd.Timestamp(payload.start))
    except (EInvalidPeriod, ValueError) as exc:
        raise EPayloadInvalid(
            f"Invalid period in payload: {payload.start!r}",
            context={"granularity": payload.granularity.value, "start": payload.start},
        ) from exc


# ---------------------------
# Values
# ---------------------------


def value_type_of(value: Any) -> ValueType:
    """Tag of a single value."""
    if isinstance(value, Decimal):
        return "decimal"
    if isinstance(value, Integral):
        return "int"
    return "float"


def infer_value_type(values: list[Any]) -> SeriesValueType:
    """Pick the series-level tag; ``mixed`` when values differ in type."""
    tags = {value_type_of(v) for v in values}
    if len(tags) > 1:
        return "mixed"
    return tags.pop() if tags else "float"


def encode_value(value: Any, value_type: ValueType) -> str:
    if value_type == "decimal":
        return str(value)
    if value_type == "int":
        return str(int(value))
    return repr(float(value))


def decode_value(text: str, value_type: ValueType) -> Any:
    try:
        if value_type == "decimal":
            return Decimal(text)
        if value_type == "int":
            return int(text)
        return float(text)
    except (ValueError, InvalidOperation) as exc:
        raise EPayloadInvalid(
            f"Cannot decode {text!r} as {value_type}",
            context={"value": text, "value_type": value_type},
        ) from exc


# ---------------------------
# Payload I/O
# ---------------------------


def load_series_payload(data: dict[str, Any] | str | bytes) -> TimeSeriesPayload:
    """Validate a mapping or JSON document as a TimeSeriesPayload.

    Raises:
        ESerialization: If the document does not match the schema
    """
    try:
        if isinstance(data, (str, bytes)):
            return TimeSeriesPayload.model_validate_json(data)
        return TimeSeriesPayload.model_validate(data)
    except ValidationError as exc:
        logger.debug("Rejected series payload: %s", exc)
        raise EPayloadInvalid(
            "Series payload failed validation",
            context={"errors": exc.error_count()},
        ) from exc


__all__ = [
    "SERIES_PAYLOAD_TYPE",
    "SERIES_SCHEMA_VERSION",
    "SUPPORTED_SERIES_SCHEMA_VERSIONS",
    "PeriodPayload",
    "MetadataPayload",
    "TimeSeriesPayload",
    "period_to_payload",
    "period_from_payload",
    "value_type_of",
    "infer_value_type",
    "encode_value",
    "decode_value",
    "load_series_payload",
]
