"""API discovery and introspection for finseries.

Provides ``describe()`` which returns a machine-readable schema of
the library's public surface: version, stable APIs, granularities and
error codes with fix hints.

Usage:
    >>> from finseries import describe
    >>> info = describe()
    >>> sorted(info)
    ['apis', 'error_codes', 'granularities', 'version']
"""

from __future__ import annotations

from typing import Any


def describe() -> dict[str, Any]:
    """Return a machine-readable API schema for finseries.

    Returns a dictionary with:
      - ``version``: library version string
      - ``apis``: mapping of task names to primary API functions
      - ``granularities``: supported period granularities, finest first
      - ``error_codes``: mapping of error codes to description/fix_hint

    Returns:
        Structured dict describing the full public surface.
    """
    import finseries

    return {
        "version": finseries.__version__,
        "apis": _get_apis(),
        "granularities": _get_granularities(),
        "error_codes": _get_error_codes(),
    }


def _get_apis() -> dict[str, dict[str, str]]:
    """Return stable API surface."""
    return {
        "period": {
            "function": "Period.year / quarter / month / day / hour / minute / second / millisecond",
            "description": "Build a validated calendar period",
        },
        "build_series": {
            "function": "TimeSeries / TimeSeries.from_mapping",
            "description": "Construct an immutable period-keyed series",
        },
        "lookup": {
            "function": "TimeSeries.lookup",
            "description": "Value for a period, or None when absent",
        },
        "combine": {
            "function": "TimeSeries.zip_with / + - * /",
            "description": "Period-aligned arithmetic between series",
        },
        "map_values": {
            "function": "TimeSeries.map_values",
            "description": "Apply a scalar transform to every value",
        },
        "labels": {
            "function": "TimeSeries.label / with_labels",
            "description": "Optional display label per period",
        },
        "diff": {
            "function": "TimeSeries.diff",
            "description": "Zero-baseline period-over-period change",
        },
        "sum": {
            "function": "sum_series",
            "description": "Element-wise sum of aligned series",
        },
        "average": {
            "function": "average_time_series",
            "description": "Average balance with the previous period",
        },
        "encode": {
            "function": "TimeSeries.to_dict / to_json",
            "description": "Lossless JSON-friendly encoding",
        },
        "decode": {
            "function": "TimeSeries.from_dict / from_json",
            "description": "Rebuild a series from its encoding",
        },
    }


def _get_granularities() -> list[str]:
    from finseries.time.period import Granularity

    return [g.value for g in Granularity]


def _get_error_codes() -> dict[str, dict[str, str]]:
    """Return all error codes with descriptions and fix hints."""
    from finseries.core.errors import ERROR_REGISTRY

    result: dict[str, dict[str, str]] = {}
    for code, cls in ERROR_REGISTRY.items():
        result[code] = {
            "class": cls.__name__,
            "description": cls.__doc__ or "",
            "fix_hint": cls.fix_hint,
        }
    return result
