"""Read soil moisture from the serial sensor without the web server.

Each parsed line is logged, which makes this handy for checking the wiring
and the sensor's output format.
"""

from soilmon.lib.config import Settings, get_settings
from soilmon.lib.mock import MockSerialTransport, list_mock_ports
from soilmon.lib.service import run_service
from soilmon.lib.store import ReadingStore
from soilmon.logging import get_logger
from soilmon.sensor.ingestor import PublishFn, SerialIngestor
from soilmon.sensor.models import Snapshot

logger = get_logger("sensor.reader")


def create_ingestor(
    store: ReadingStore,
    publish: PublishFn,
    settings: Settings | None = None,
) -> SerialIngestor:
    """Create an ingestor for real hardware or the mock sensor."""
    settings = settings or get_settings()
    if settings.mock_sensors:
        logger.info("Using mock sensor")
        return SerialIngestor(
            store,
            publish,
            settings=settings.serial,
            list_ports=list_mock_ports,
            open_transport=lambda _path, _baud: MockSerialTransport(),
        )
    return SerialIngestor(store, publish, settings=settings.serial)


def _log_snapshot(snapshot: Snapshot) -> None:
    reading = snapshot.reading
    logger.info(
        "Moisture %d%% (raw %d): %s",
        reading.percent,
        reading.raw,
        reading.condition,
    )


async def run() -> None:
    """Ingest readings and log them until interrupted."""
    ingestor = create_ingestor(ReadingStore(), _log_snapshot)
    try:
        await ingestor.run()
    finally:
        await ingestor.stop()


def main() -> None:
    """Start the standalone serial reader."""
    run_service(run, name="reader")


if __name__ == "__main__":
    main()
