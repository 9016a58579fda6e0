"""Manual restart of the serial ingestor."""

from starlette.requests import Request
from starlette.responses import JSONResponse

from soilmon.logging import get_logger
from soilmon.sensor.ingestor import SerialIngestor

logger = get_logger("server.api.serial")


async def reconnect_serial(request: Request) -> JSONResponse:
    """Restart device discovery if the ingestor has given up.

    The ingestor does not retry on its own when no device was found at
    startup; plugging the sensor in later needs this call (or a restart).
    """
    ingestor: SerialIngestor = request.app.state.ingestor
    if not ingestor.start():
        return JSONResponse(
            {"error": "Serial ingestor is already running", "state": ingestor.state},
            status_code=409,
        )
    logger.info("Serial ingestor restarted on request")
    return JSONResponse({"status": "restarting"}, status_code=202)
