"""Custom exceptions for the Soil Monitor application.

Provides a hierarchy of domain-specific exceptions for better error handling
and more informative error messages throughout the application.
"""


class SoilMonitorError(Exception):
    """Base exception for all application errors."""


class SerialDeviceError(SoilMonitorError):
    """Base exception for serial device errors."""


class DeviceNotFoundError(SerialDeviceError):
    """Raised when discovery finds no serial device to open."""

    def __init__(self, message: str = "No serial ports found") -> None:
        super().__init__(message)


class DeviceEnumerationError(SerialDeviceError):
    """Raised when the operating system cannot list serial ports."""
