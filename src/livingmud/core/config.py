"""Configuration management for the LivingMUD engine.

Settings are loaded with pydantic-settings from environment variables and an
optional ``.env`` file. Tick lengths are logical units; nothing here is tied
to wall-clock time.

Example:
    >>> from livingmud.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.death.corpse_decay_ticks
    300

Environment Variables:
    LIVINGMUD_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LIVINGMUD_RNG_SEED: Optional seed for reproducible dice
    LIVINGMUD_TICK_HEARTBEAT_INTERVAL: Ticks between heartbeats
    LIVINGMUD_DEATH_CORPSE_DECAY_TICKS: Ticks before a corpse decays
    LIVINGMUD_DATABASE_PATH: Path to the player SQLite database
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from livingmud.core.exceptions import ConfigurationError


class TickSettings(BaseSettings):
    """Configuration for the heartbeat scheduler.

    Attributes:
        heartbeat_interval: Logical ticks between two heartbeats of one entity.
        intoxication_decay: Intoxication removed on every heartbeat.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIVINGMUD_TICK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    heartbeat_interval: int = Field(
        default=1,
        ge=1,
        le=60,
        description="Ticks between heartbeats",
    )
    intoxication_decay: int = Field(
        default=2,
        ge=0,
        le=100,
        description="Intoxication decay per heartbeat",
    )


class DeathSettings(BaseSettings):
    """Configuration for death handling and corpse lifecycle.

    Attributes:
        corpse_decay_ticks: Ticks a corpse lies before decaying.
        corpse_recheck_ticks: Delay before retrying decay of a carried corpse.
        holding_location: Where dead players wait as spirits.
        respawn_location: Where resurrected players reappear.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIVINGMUD_DEATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    corpse_decay_ticks: int = Field(
        default=300,
        ge=1,
        description="Ticks before a corpse decays",
    )
    corpse_recheck_ticks: int = Field(
        default=60,
        ge=1,
        description="Retry delay for a corpse that is not lying in a room",
    )
    holding_location: str = Field(
        default="netherworld",
        min_length=1,
        description="Holding location for dead players",
    )
    respawn_location: str = Field(
        default="town_square",
        min_length=1,
        description="Location resurrected players return to",
    )

    @model_validator(mode="after")
    def validate_locations(self) -> "DeathSettings":
        """Ensure the holding and respawn locations differ.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If both locations are the same room.
        """
        if self.holding_location == self.respawn_location:
            raise ConfigurationError(
                f"holding_location and respawn_location must differ "
                f"(both are {self.holding_location!r})",
                config_key="respawn_location",
            )
        return self


class StorageSettings(BaseSettings):
    """Configuration for player persistence.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIVINGMUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/livingmud.db"),
        description="Path to SQLite database",
    )


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Logging level.
        rng_seed: Optional seed for the dice roller.
        tick: Scheduler settings.
        death: Death and corpse settings.
        storage: Persistence settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIVINGMUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="LivingMUD",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    rng_seed: int | None = Field(
        default=None,
        description="Seed for reproducible dice rolls",
    )

    tick: TickSettings = Field(default_factory=TickSettings)
    death: DeathSettings = Field(default_factory=DeathSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "TickSettings",
    "DeathSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
