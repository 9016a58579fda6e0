"""Parse moisture values out of free-form sensor lines.

Accepted formats, tried in order:

- a percentage anywhere in the line (``"67%"``, ``"Moisture 67 %"``)
- a raw analog value anywhere in the line (``"523"``, ``"Moisture: 523"``)

Percentages are converted to a pseudo-raw value and raw values to a
percentage, so every parsed line carries both.
"""

import math
import re
from dataclasses import dataclass

from soilmon.lib.config import PERCENT_MAX, PERCENT_MIN, RAW_MAX, RAW_MIN

_PERCENT_PATTERN = re.compile(r"(\d{1,3})\s*%")
_RAW_PATTERN = re.compile(r"(-?\d{1,5})")


@dataclass(frozen=True, slots=True)
class ParsedLine:
    """Raw and percent values extracted from a single line."""

    raw: int
    percent: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def percent_to_raw(percent: int) -> int:
    """Convert a percentage to the equivalent raw value (wetter is lower)."""
    return _round_half_up((PERCENT_MAX - percent) * RAW_MAX / PERCENT_MAX)


def raw_to_percent(raw: int) -> int:
    """Convert a raw analog value to a moisture percentage."""
    return _round_half_up(PERCENT_MAX - (raw / RAW_MAX) * PERCENT_MAX)


def parse_line(line: str) -> ParsedLine | None:
    """Extract a moisture reading from a line of sensor output.

    Only the first match of each pattern is used. Out of range values are
    clamped rather than rejected.

    Returns:
        The parsed values, or None if the line holds no usable number.
    """
    trimmed = line.strip()
    if not trimmed:
        return None

    if match := _PERCENT_PATTERN.search(trimmed):
        percent = _clamp(int(match.group(1)), PERCENT_MIN, PERCENT_MAX)
        return ParsedLine(raw=percent_to_raw(percent), percent=percent)

    if match := _RAW_PATTERN.search(trimmed):
        raw = _clamp(int(match.group(1)), RAW_MIN, RAW_MAX)
        return ParsedLine(raw=raw, percent=raw_to_percent(raw))

    return None
