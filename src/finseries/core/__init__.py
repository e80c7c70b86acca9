"""Core module - errors, configuration and numeric helpers.

This module provides the foundational types and configuration for finseries.
"""

from finseries.core.config import SeriesConfig
from finseries.core.errors import (
    EAlignment,
    EConstruction,
    EInvalidPeriod,
    ESerialization,
    FinSeriesError,
)

__all__ = [
    # Config
    "SeriesConfig",
    # Errors
    "FinSeriesError",
    "EConstruction",
    "EAlignment",
    "EInvalidPeriod",
    "ESerialization",
]
