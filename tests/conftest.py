"""Shared pytest fixtures for the test suite."""

import asyncio
import logging
from datetime import UTC, datetime

import pytest

from soilmon.lib.config import SerialSettings
from soilmon.lib.config.testing import set_settings
from soilmon.lib.store import ReadingStore
from soilmon.sensor.ports import PortInfo


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the soilmon namespace."""
    caplog.set_level(logging.DEBUG, logger="soilmon")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset global settings after each test to avoid cross-test pollution."""
    yield
    set_settings(None)


@pytest.fixture
def frozen_time():
    """Return a fixed datetime for deterministic tests."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def store():
    return ReadingStore()


@pytest.fixture
def serial_settings():
    """Serial settings with no override and the default vendor keywords."""
    return SerialSettings(reconnect_delay_sec=5.0)


@pytest.fixture
def arduino_port():
    return PortInfo(
        path="/dev/ttyACM0",
        manufacturer="Arduino (www.arduino.cc)",
        vendor_id="2341",
        product_id="0043",
        friendly_name="Arduino Uno",
    )


class FakeTransport:
    """Transport that replays scripted chunks.

    Each item is returned by one read(): bytes are data, an exception
    instance is raised. Once the script runs out, read() returns b"" to
    signal the device went away.
    """

    def __init__(self, *script: bytes | Exception) -> None:
        self._script = list(script)
        self.closed = False

    async def read(self) -> bytes:
        await asyncio.sleep(0)
        if not self._script:
            return b""
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class ControlledSleep:
    """Stand-in for asyncio.sleep that only returns when released."""

    def __init__(self) -> None:
        self.calls: list[float] = []
        self._release = asyncio.Event()

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
        await self._release.wait()
        self._release.clear()

    def release(self) -> None:
        self._release.set()


@pytest.fixture
def fake_transport_cls():
    return FakeTransport


@pytest.fixture
def controlled_sleep():
    return ControlledSleep()


async def _wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the event loop until predicate() holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0)


@pytest.fixture
def wait_until():
    return _wait_until
