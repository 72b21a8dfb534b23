"""Custom exception hierarchy for the LivingMUD engine.

All exceptions inherit from LivingMudError so the command layer can catch
engine failures at a single boundary while still seeing the domain context
(entity ids, skill names, mana costs) in ``details``.

Most combat outcomes are not errors: misses, failed skill rolls and invalid
targets are reported through return values. Exceptions are reserved for
resource rejection, stale references that callers asked to resolve
explicitly, configuration and persistence failures.

Example:
    >>> from livingmud.core.exceptions import ResourceExhaustedError
    >>> raise ResourceExhaustedError("Not enough mana", resource="mana", required=15, available=3)
"""

from __future__ import annotations

from typing import Any


class LivingMudError(Exception):
    """Base exception for all LivingMUD errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(LivingMudError):
    """Base exception for all game engine errors."""


class CombatError(GameEngineError):
    """Raised when combat resolution reaches an inconsistent state."""

    def __init__(
        self,
        message: str,
        *,
        combatant_id: str | None = None,
        target_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combatant context.

        Args:
            message: Human-readable error description.
            combatant_id: Identifier of the acting combatant.
            target_id: Identifier of the combatant being attacked.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if combatant_id:
            combined_details["combatant_id"] = combatant_id
        if target_id:
            combined_details["target_id"] = target_id
        super().__init__(message, details=combined_details)


class InvalidTargetError(CombatError):
    """Raised when an action names a target that cannot take part in it.

    The public combat surface converts this into a ``False`` return; it
    only escapes from the lower-level helpers that promise a resolved target.
    """


class ResourceExhaustedError(GameEngineError):
    """Raised when an entity lacks the mana (or other pool) an action needs.

    Always raised before any state has been mutated.
    """

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        required: int | None = None,
        available: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize resource error with pool context.

        Args:
            message: Human-readable error description.
            resource: Name of the exhausted pool (e.g. 'mana').
            required: Amount the action needed.
            available: Amount the entity had.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if resource:
            combined_details["resource"] = resource
        if required is not None:
            combined_details["required"] = required
        if available is not None:
            combined_details["available"] = available
        super().__init__(message, details=combined_details)


class StaleReferenceError(GameEngineError):
    """Raised when an id no longer resolves to a live entity."""

    def __init__(
        self,
        message: str,
        *,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize stale reference error with the dangling id.

        Args:
            message: Human-readable error description.
            entity_id: The id that failed to resolve.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class SchedulerError(GameEngineError):
    """Raised when the tick scheduler is asked for an impossible schedule."""


class DiceRollError(GameEngineError):
    """Raised when dice rolling operations fail."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Persistence Exceptions
# =============================================================================


class PersistenceError(LivingMudError):
    """Raised when player state cannot be saved or restored."""

    def __init__(
        self,
        message: str,
        *,
        player_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with the player involved.

        Args:
            message: Human-readable error description.
            player_name: Name of the player record.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if player_name:
            combined_details["player_name"] = player_name
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(LivingMudError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(LivingMudError):
    """Raised when data handed to the engine fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    "LivingMudError",
    # Game engine exceptions
    "GameEngineError",
    "CombatError",
    "InvalidTargetError",
    "ResourceExhaustedError",
    "StaleReferenceError",
    "SchedulerError",
    "DiceRollError",
    # Persistence
    "PersistenceError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
