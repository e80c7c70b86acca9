"""Serialization contracts for finseries.

Pydantic models describing the JSON form of periods and series.
"""

from .payloads import (
    SERIES_PAYLOAD_TYPE,
    SERIES_SCHEMA_VERSION,
    SUPPORTED_SERIES_SCHEMA_VERSIONS,
    MetadataPayload,
    PeriodPayload,
    TimeSeriesPayload,
    load_series_payload,
)

__all__ = [
    "SERIES_PAYLOAD_TYPE",
    "SERIES_SCHEMA_VERSION",
    "SUPPORTED_SERIES_SCHEMA_VERSIONS",
    "PeriodPayload",
    "MetadataPayload",
    "TimeSeriesPayload",
    "load_series_payload",
]
