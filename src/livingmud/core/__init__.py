"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        LivingMudError: Base exception for all engine errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from livingmud.core.config import (
    DeathSettings,
    Settings,
    StorageSettings,
    TickSettings,
    clear_settings_cache,
    get_settings,
)
from livingmud.core.exceptions import (
    CombatError,
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    InvalidTargetError,
    LivingMudError,
    PersistenceError,
    ResourceExhaustedError,
    SchedulerError,
    StaleReferenceError,
    ValidationError,
)
from livingmud.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "LivingMudError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Game engine exceptions
    "GameEngineError",
    "CombatError",
    "InvalidTargetError",
    "ResourceExhaustedError",
    "StaleReferenceError",
    "SchedulerError",
    "DiceRollError",
    "PersistenceError",
    # Configuration
    "Settings",
    "TickSettings",
    "DeathSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
