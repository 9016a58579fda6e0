"""Logging configuration for the Soil Monitor application.

The web server and the standalone reader both call ``configure`` with the
``LOG_LEVEL`` setting before any reading is ingested.
"""

import logging
import sys

_configured = False

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s - %(message)s"

# uvicorn loggers that write through the soilmon handler when serving
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.access")


def configure(level: int | str = logging.INFO) -> None:
    """Send soilmon and uvicorn logs to stderr in one format.

    Only the first call has an effect, so the server factory and the
    service runner can both call it.
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    app_log = logging.getLogger("soilmon")
    app_log.setLevel(level)
    app_log.addHandler(handler)

    for name in _UVICORN_LOGGERS:
        uv_log = logging.getLogger(name)
        uv_log.handlers.clear()
        uv_log.addHandler(handler)
        uv_log.propagate = False

    # Client connects are logged by soilmon.server.websockets and .sse
    logging.getLogger("uvicorn.protocols.websockets").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return the ``soilmon.<name>`` logger."""
    return logging.getLogger(f"soilmon.{name}")
