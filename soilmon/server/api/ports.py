"""Serial port diagnostics endpoint."""

import asyncio

from starlette.requests import Request
from starlette.responses import JSONResponse

from soilmon.lib.config import Settings
from soilmon.lib.exceptions import DeviceEnumerationError
from soilmon.lib.mock import list_mock_ports
from soilmon.logging import get_logger
from soilmon.sensor.ports import list_serial_ports

logger = get_logger("server.api.ports")


async def get_ports(request: Request) -> JSONResponse:
    """List the serial ports available for the sensor."""
    settings: Settings = request.app.state.settings
    list_ports = list_mock_ports if settings.mock_sensors else list_serial_ports
    try:
        ports = await asyncio.to_thread(list_ports)
    except DeviceEnumerationError as e:
        logger.error("Port listing failed: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)
    return JSONResponse([port.to_dict() for port in ports])
