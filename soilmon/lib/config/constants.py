"""Shared constants for the configuration module.

These constants are separated to avoid circular imports between settings.py
and the sensor modules.
"""

# Analog range of the sensor (10-bit ADC); lower raw values are wetter soil
RAW_MIN = 0
RAW_MAX = 1023

PERCENT_MIN = 0
PERCENT_MAX = 100

# Classification thresholds, in percent
# <= NOT_ON_SOIL_MAX: probe in air or unplugged
# < DRY_BELOW: dry, <= NORMAL_MAX: normal, above: wet
NOT_ON_SOIL_MAX = 3
DRY_BELOW = 30
NORMAL_MAX = 60

DEFAULT_BAUD = 9600
DEFAULT_RECONNECT_DELAY_SEC = 5.0

# Matched case-insensitively against port manufacturer, ids and description
DEFAULT_PREFERRED_VENDORS = ("arduino", "wch", "wch.cn", "silicon labs", "ftdi")
