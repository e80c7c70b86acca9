"""Descriptive tags carried alongside a series."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class TimeSeriesMetadata:
    """Name, description and unit of a series.

    Metadata never affects arithmetic; binary operations keep the left
    operand's metadata.
    """

    name: str = ""
    description: str | None = None
    unit: str | None = None

    def with_name(self, name: str) -> TimeSeriesMetadata:
        return replace(self, name=name)

    def prefixed(self, prefix: str) -> TimeSeriesMetadata:
        return replace(self, name=f"{prefix}{self.name}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeSeriesMetadata:
        return cls(
            name=data.get("name", ""),
            description=data.get("description"),
            unit=data.get("unit"),
        )
