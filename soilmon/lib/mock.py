"""Mock sensor for development.

Provides a mock serial transport that generates realistic sensor output
without requiring hardware. Used by the ingestor when MOCK_SENSORS=1 is
set.
"""

import asyncio
import itertools
import random

from soilmon.sensor.ports import PortInfo

MOCK_PORT = PortInfo(
    path="mock://soil-sensor",
    manufacturer="Arduino (mock)",
    vendor_id="2341",
    product_id="0043",
    friendly_name="Mock soil moisture sensor",
)

# The three line formats the parser understands
_LINE_FORMATS = ("{raw}", "Moisture: {raw}", "{percent}%")


def _random_walk(
    current: float, drift: float, min_val: float, max_val: float
) -> float:
    """Generate next value using random walk with bounds."""
    change = random.gauss(0, drift)
    new_val = current + change
    return max(min_val, min(max_val, new_val))


def list_mock_ports() -> list[PortInfo]:
    """Stand-in for port enumeration that always finds the mock sensor."""
    return [MOCK_PORT]


class MockSerialTransport:
    """Mock transport that emits one reading per interval.

    Each line is delivered in two chunks with a CRLF ending, the way a
    real board's output reaches the host. Uses these parameters:
    - Raw value: drift=8, bounds 250-900
    - Initial value: random 400-600
    """

    def __init__(self, frequency_sec: float = 2.0) -> None:
        self._frequency_sec = frequency_sec
        self._raw = random.uniform(400.0, 600.0)
        self._formats = itertools.cycle(_LINE_FORMATS)
        self._pending = b""

    def _next_line(self) -> bytes:
        self._raw = _random_walk(self._raw, drift=8.0, min_val=250.0, max_val=900.0)
        raw = round(self._raw)
        percent = round(100 - raw / 1023 * 100)
        line = next(self._formats).format(raw=raw, percent=percent)
        return f"{line}\r\n".encode()

    async def read(self) -> bytes:
        """Return the next chunk of mock sensor output."""
        if self._pending:
            chunk, self._pending = self._pending, b""
            return chunk

        await asyncio.sleep(self._frequency_sec)
        line = self._next_line()
        split = len(line) // 2
        chunk, self._pending = line[:split], line[split:]
        return chunk

    def close(self) -> None:
        """No-op for mock transport."""
