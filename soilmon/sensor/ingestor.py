"""Serial ingestion of soil moisture readings.

The ingestor owns the sensor connection and moves through these states::

    disconnected -> discovering -> open -> closing -> disconnected
                         |                                 |
                         +------ no device / open error ---+

Once a connection has been open, every close is followed by a fixed delay
and a full rediscovery, forever, with no backoff. A failure at startup
leaves the ingestor idle unless ``retry_discovery`` is enabled.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from contextlib import suppress
from datetime import UTC, datetime

from soilmon.lib.config import ConnectionState, SerialSettings, get_settings
from soilmon.lib.exceptions import DeviceNotFoundError
from soilmon.lib.store import ReadingStore
from soilmon.logging import get_logger
from soilmon.sensor.models import Reading, Snapshot
from soilmon.sensor.parser import parse_line
from soilmon.sensor.ports import PortInfo, list_serial_ports, select_port
from soilmon.sensor.transport import SensorTransport, SerialTransport

logger = get_logger("sensor.ingestor")

PublishFn = Callable[[Snapshot], object]
PortLister = Callable[[], Sequence[PortInfo]]
TransportOpener = Callable[[str, int], SensorTransport]
SleepFn = Callable[[float], Awaitable[None]]


class SerialIngestor:
    """Streams sensor lines into the reading store and publishes them."""

    def __init__(
        self,
        store: ReadingStore,
        publish: PublishFn,
        *,
        settings: SerialSettings | None = None,
        list_ports: PortLister = list_serial_ports,
        open_transport: TransportOpener = SerialTransport,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Initialize the ingestor.

        Args:
            store: Where the latest reading is kept.
            publish: Called with a snapshot for every parsed line. Must not
                block.
            settings: Serial settings, defaults to the global settings.
            list_ports: Port enumeration function.
            open_transport: Opens a transport for a (path, baudrate) pair.
            sleep: Awaitable delay used between reconnect attempts.
        """
        self._store = store
        self._publish = publish
        self._settings = settings or get_settings().serial
        self._list_ports = list_ports
        self._open_transport = open_transport
        self._sleep = sleep

        self._state = ConnectionState.DISCONNECTED
        self._transport: SensorTransport | None = None
        self._port: str | None = None
        self._buffer = bytearray()
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def port(self) -> str | None:
        """Path of the open device, or None when not connected."""
        return self._port

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def feed(self, data: bytes) -> int:
        """Buffer incoming bytes and process every complete line.

        A trailing partial line stays buffered until its newline arrives.

        Returns:
            The number of readings published.
        """
        self._buffer.extend(data)
        published = 0
        while (idx := self._buffer.find(b"\n")) >= 0:
            line = bytes(self._buffer[:idx]).removesuffix(b"\r")
            del self._buffer[: idx + 1]
            if self._handle_line(line.decode("utf-8", errors="replace")):
                published += 1
        return published

    def _handle_line(self, line: str) -> bool:
        """Parse, classify, store and publish a single line."""
        parsed = parse_line(line)
        if parsed is None:
            logger.debug("Unparsed line: %r", line)
            return False

        reading = Reading.from_parsed(parsed, datetime.now(UTC))
        self._store.set(reading)
        logger.debug(
            "Read raw=%d percent=%d%% (%s)",
            reading.raw,
            reading.percent,
            reading.condition,
        )
        try:
            self._publish(Snapshot.of(reading))
        except Exception:
            logger.exception("Failed to publish reading")
        return True

    def _discover(self) -> str:
        """Choose the device path to open."""
        override = self._settings.port_override
        if override:
            return override
        port = select_port(self._list_ports(), self._settings.preferred_vendors)
        return port.path

    def _connect(self) -> SensorTransport:
        """Discover and open the sensor device."""
        self._state = ConnectionState.DISCOVERING
        try:
            path = self._discover()
            transport = self._open_transport(path, self._settings.baud)
        except Exception:
            self._state = ConnectionState.DISCONNECTED
            raise

        self._transport = transport
        self._port = path
        self._buffer.clear()
        self._state = ConnectionState.OPEN
        logger.info("Streaming readings from %s", path)
        return transport

    def _try_connect(self) -> SensorTransport | None:
        """Connect, logging instead of raising on failure."""
        try:
            return self._connect()
        except DeviceNotFoundError:
            logger.warning("No serial ports found")
        except Exception as e:
            logger.warning("Failed to open serial port: %s", e)
        return None

    def _close(self) -> None:
        """Release the transport and drop any half-received line."""
        transport, self._transport = self._transport, None
        if transport is not None:
            self._state = ConnectionState.CLOSING
            try:
                transport.close()
            except OSError as e:
                logger.warning("Error closing serial port %s: %s", self._port, e)
        self._buffer.clear()
        self._port = None
        self._state = ConnectionState.DISCONNECTED

    async def _stream(self, transport: SensorTransport) -> None:
        """Feed transport data through the pipeline until it closes."""
        try:
            while True:
                data = await transport.read()
                if not data:
                    logger.warning("Serial port %s reached end of stream", self._port)
                    return
                self.feed(data)
        except OSError as e:
            logger.error("Serial port error: %s", e)
        except Exception:
            logger.exception("Unexpected error reading serial port %s", self._port)
        finally:
            self._close()

    async def run(self) -> None:
        """Ingest readings until cancelled.

        Returns early only when the first connection attempt fails and
        ``retry_discovery`` is off.
        """
        delay = self._settings.reconnect_delay_sec
        transport = self._try_connect()
        if transport is None and not self._settings.retry_discovery:
            logger.warning("Running without sensor input")
            return

        while True:
            if transport is not None:
                await self._stream(transport)
                logger.warning(
                    "Serial port closed. Will attempt to reopen in %ss...", delay
                )
            await self._sleep(delay)
            transport = self._try_connect()

    def start(self) -> bool:
        """Run the ingestor as a background task.

        Also restarts an ingestor that gave up at startup.

        Returns:
            False if it was already running.
        """
        if self.is_running:
            return False
        self._task = asyncio.create_task(self.run(), name="serial-ingestor")
        return True

    async def stop(self) -> None:
        """Cancel the background task and close the device."""
        if self._task is not None:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._close()
