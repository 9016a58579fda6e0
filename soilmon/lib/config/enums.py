"""Enumerations for the Soil Monitor application."""

from enum import StrEnum


class Condition(StrEnum):
    """Soil condition derived from a moisture percentage."""

    UNKNOWN = "unknown"
    SENSOR_NOT_ON_SOIL = "sensor_not_on_soil"
    DRY = "dry"
    NORMAL = "normal"
    WET = "wet"


class ConnectionState(StrEnum):
    """Lifecycle of the serial device connection."""

    DISCONNECTED = "disconnected"
    DISCOVERING = "discovering"
    OPEN = "open"
    CLOSING = "closing"
