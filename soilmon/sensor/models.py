"""Domain models for soil moisture readings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from soilmon.lib.config import Condition
from soilmon.sensor.classifier import classify, recommendations_for
from soilmon.sensor.parser import ParsedLine


@dataclass(frozen=True, slots=True)
class Reading:
    """The latest moisture reading from the sensor.

    ``raw`` and ``percent`` are either both set or both None, and
    ``condition`` always matches ``percent``.
    """

    raw: int | None
    percent: int | None
    condition: Condition
    observed_at: datetime | None

    def __post_init__(self) -> None:
        if (self.raw is None) != (self.percent is None):
            raise ValueError("raw and percent must be set together")
        if self.condition != classify(self.percent):
            raise ValueError(
                f"condition {self.condition} does not match "
                f"percent {self.percent}"
            )

    @classmethod
    def unknown(cls) -> Reading:
        """Create the empty reading used before any sensor data arrives."""
        return cls(
            raw=None, percent=None, condition=Condition.UNKNOWN, observed_at=None
        )

    @classmethod
    def from_parsed(cls, parsed: ParsedLine, observed_at: datetime) -> Reading:
        """Create a classified reading from a parsed sensor line."""
        return cls(
            raw=parsed.raw,
            percent=parsed.percent,
            condition=classify(parsed.percent),
            observed_at=observed_at,
        )


@dataclass(frozen=True, slots=True)
class Snapshot:
    """A reading together with its plant recommendations."""

    reading: Reading
    recommendations: tuple[str, ...]

    @classmethod
    def of(cls, reading: Reading) -> Snapshot:
        return cls(reading, recommendations_for(reading.condition))

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to dictionary for JSON serialization."""
        observed_at = self.reading.observed_at
        return {
            "raw": self.reading.raw,
            "percent": self.reading.percent,
            "condition": self.reading.condition.value,
            "at": observed_at.isoformat() if observed_at else None,
            "recommendations": list(self.recommendations),
        }
