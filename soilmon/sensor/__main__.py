"""Standalone sensor reader entrypoint.

Reads soil moisture from the serial sensor and logs every reading, without
starting the web server.

Usage: python -m soilmon.sensor
"""

from soilmon.sensor.reader import main

if __name__ == "__main__":
    main()
