"""Centralized configuration for the Soil Monitor application.

This package provides:
- Enums for soil conditions and connection states
- Pydantic settings models for configuration
- Sensor range and classification constants
"""

from .constants import (
    DEFAULT_PREFERRED_VENDORS,
    DRY_BELOW,
    NORMAL_MAX,
    NOT_ON_SOIL_MAX,
    PERCENT_MAX,
    PERCENT_MIN,
    RAW_MAX,
    RAW_MIN,
)
from .enums import Condition, ConnectionState
from .settings import SerialSettings, ServerSettings, Settings, get_settings

__all__ = [
    # Enums
    "Condition",
    "ConnectionState",
    # Settings models
    "SerialSettings",
    "ServerSettings",
    "Settings",
    # Constants
    "DEFAULT_PREFERRED_VENDORS",
    "DRY_BELOW",
    "NORMAL_MAX",
    "NOT_ON_SOIL_MAX",
    "PERCENT_MAX",
    "PERCENT_MIN",
    "RAW_MAX",
    "RAW_MIN",
    # Functions
    "get_settings",
]
