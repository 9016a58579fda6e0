"""Process-wide holder for the latest sensor reading."""

from soilmon.sensor.models import Reading, Snapshot


class ReadingStore:
    """Holds the single most recent reading.

    Readings are frozen, and set() swaps the whole object in one assignment,
    so a reader on another task or thread never sees half an update.
    There is no history: each set() replaces the previous reading.
    """

    def __init__(self, initial: Reading | None = None) -> None:
        self._reading = initial or Reading.unknown()

    @property
    def reading(self) -> Reading:
        return self._reading

    def get(self) -> Snapshot:
        """Return the current reading with its recommendations."""
        return Snapshot.of(self._reading)

    def set(self, reading: Reading) -> None:
        """Replace the current reading."""
        self._reading = reading
