"""Byte transports for the moisture sensor."""

from typing import Protocol

from soilmon.logging import get_logger

logger = get_logger("sensor.transport")


class SensorTransport(Protocol):
    """Protocol for sensor byte sources."""

    async def read(self) -> bytes: ...
    def close(self) -> None: ...


class SerialTransport:
    """Real serial port transport wrapper.

    Opening happens in the constructor; a missing or busy device raises
    ``serial.SerialException`` (an ``OSError``).
    """

    def __init__(self, path: str, baudrate: int) -> None:
        import aioserial

        self._serial = aioserial.AioSerial(port=path, baudrate=baudrate)
        self._path = path
        logger.info("Opened serial port %s at %d baud", path, baudrate)

    async def read(self) -> bytes:
        """Read whatever bytes are available, waiting for at least one.

        Returns:
            The bytes read, or b"" once the device stops delivering data.
        """
        size = max(1, self._serial.in_waiting)
        return bytes(await self._serial.read_async(size))

    def close(self) -> None:
        """Close the serial connection."""
        self._serial.close()
        logger.info("Serial port %s closed", self._path)
