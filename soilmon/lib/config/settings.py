"""Settings models and configuration loading for the Soil Monitor application."""

from functools import cached_property, lru_cache
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from soilmon.lib.config.constants import (
    DEFAULT_BAUD,
    DEFAULT_PREFERRED_VENDORS,
    DEFAULT_RECONNECT_DELAY_SEC,
)


def _parse_bool(v: Any) -> bool:
    """Parse boolean from string '1'/'0' or actual bool."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v == "1"
    return bool(v)


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]


def _split_csv(value: str) -> tuple[str, ...]:
    """Split a comma-separated setting, dropping blank entries."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


class SerialSettings(BaseModel):
    """Serial sensor connection settings."""

    model_config = ConfigDict(frozen=True)

    port_override: str = ""
    baud: int = DEFAULT_BAUD
    reconnect_delay_sec: float = DEFAULT_RECONNECT_DELAY_SEC
    preferred_vendors: tuple[str, ...] = DEFAULT_PREFERRED_VENDORS
    retry_discovery: bool = False


class ServerSettings(BaseModel):
    """Web server settings."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"
    cors_origins: tuple[str, ...] = ("*",)
    subscriber_queue_size: int = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Sensors
    mock_sensors: _BoolFromStr = False

    # Serial (SERIAL_PORT wins over COM_PORT when both are set)
    serial_port: str = Field(
        default="",
        validation_alias=AliasChoices("serial_port", "com_port"),
    )
    serial_baud: int = Field(default=DEFAULT_BAUD, gt=0)
    serial_reconnect_delay_sec: float = Field(
        default=DEFAULT_RECONNECT_DELAY_SEC, gt=0
    )
    serial_preferred_vendors: str = ",".join(DEFAULT_PREFERRED_VENDORS)
    serial_retry_discovery: _BoolFromStr = False

    # Web server
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    static_dir: str = "public"
    cors_origins: str = "*"
    subscriber_queue_size: int = Field(default=16, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @cached_property
    def serial(self) -> SerialSettings:
        """Get serial settings as nested object."""
        return SerialSettings(
            port_override=self.serial_port.strip(),
            baud=self.serial_baud,
            reconnect_delay_sec=self.serial_reconnect_delay_sec,
            preferred_vendors=tuple(
                v.lower() for v in _split_csv(self.serial_preferred_vendors)
            ),
            retry_discovery=self.serial_retry_discovery,
        )

    @cached_property
    def server(self) -> ServerSettings:
        """Get web server settings as nested object."""
        return ServerSettings(
            host=self.host,
            port=self.port,
            static_dir=self.static_dir,
            cors_origins=_split_csv(self.cors_origins),
            subscriber_queue_size=self.subscriber_queue_size,
        )


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from soilmon.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
