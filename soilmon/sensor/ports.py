"""Serial port enumeration and sensor port selection."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from serial.tools import list_ports

from soilmon.lib.exceptions import DeviceEnumerationError, DeviceNotFoundError
from soilmon.logging import get_logger

logger = get_logger("sensor.ports")


@dataclass(frozen=True, slots=True)
class PortInfo:
    """Descriptor of an available serial port."""

    path: str
    manufacturer: str | None = None
    vendor_id: str | None = None
    product_id: str | None = None
    friendly_name: str | None = None

    @property
    def search_text(self) -> str:
        """Lowercased metadata used for vendor keyword matching."""
        fields = (
            self.manufacturer,
            self.vendor_id,
            self.product_id,
            self.friendly_name,
        )
        return " ".join(f for f in fields if f).lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "manufacturer": self.manufacturer,
            "vendorId": self.vendor_id,
            "productId": self.product_id,
            "friendlyName": self.friendly_name,
        }


def _format_usb_id(value: int | None) -> str | None:
    return f"{value:04x}" if value is not None else None


def list_serial_ports() -> list[PortInfo]:
    """List the serial ports known to the operating system.

    Raises:
        DeviceEnumerationError: If the ports cannot be listed.
    """
    try:
        found = list_ports.comports()
    except OSError as e:
        raise DeviceEnumerationError(f"Failed to list serial ports: {e}") from e

    return [
        PortInfo(
            path=port.device,
            manufacturer=port.manufacturer,
            vendor_id=_format_usb_id(port.vid),
            product_id=_format_usb_id(port.pid),
            # pyserial reports "n/a" when the OS gives no description
            friendly_name=(
                port.description if port.description != "n/a" else None
            ),
        )
        for port in found
    ]


def select_port(
    ports: Sequence[PortInfo], preferred_vendors: Iterable[str]
) -> PortInfo:
    """Pick the port most likely to be the sensor board.

    The first port matching a preferred vendor keyword wins, otherwise the
    first port listed.

    Raises:
        DeviceNotFoundError: If there are no ports at all.
    """
    if not ports:
        raise DeviceNotFoundError()

    keywords = [v.lower() for v in preferred_vendors]
    for port in ports:
        text = port.search_text
        if any(keyword in text for keyword in keywords):
            return port

    logger.info(
        "No port matched preferred vendors, falling back to %s", ports[0].path
    )
    return ports[0]
