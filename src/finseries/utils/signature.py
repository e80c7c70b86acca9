"""Signature helpers for change detection and provenance."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from finseries.series.timeseries import TimeSeries


def compute_signature(obj: TimeSeries | dict[str, Any]) -> str:
    """Compute a hash signature for a series or an encoded series payload.

    The signature is taken over the canonical JSON payload, so a series and
    its ``to_dict()`` output (or the series decoded from it) share one
    signature.

    Args:
        obj: TimeSeries or dictionary to hash

    Returns:
        SHA-256 hash string (truncated to 16 chars)

    Examples:
        >>> sig = compute_signature(revenue)
        >>> sig == compute_signature(TimeSeries.from_dict(revenue.to_dict()))
        True
    """
    data = obj.to_dict() if hasattr(obj, "to_dict") else dict(obj)
    json_str = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(json_str.encode()).hexdigest()[:16]


__all__ = ["compute_signature"]
