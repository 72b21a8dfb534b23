"""Enumerations shared by the LivingMUD models and engine."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Kind tag of a living entity, used to dispatch death handling."""

    GENERIC = "generic"
    """Plain living with no kind-specific behaviour."""

    MONSTER = "monster"
    """Autonomous actor: grants XP, drops loot, removed on death."""

    PLAYER = "player"
    """Player-controlled: persisted and relocated on death."""


class CombatState(StrEnum):
    """Combat state machine of a living."""

    IDLE = "idle"
    ENGAGED = "engaged"


class LifeState(StrEnum):
    """Whether a living can still act in the world."""

    ALIVE = "alive"
    DEAD = "dead"
    SPIRIT = "spirit"
    """A dead player waiting in the holding location."""


class WeightCategory(StrEnum):
    """Armor weight class driving spell failure and dodge penalty."""

    NONE = "none"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class Stat(StrEnum):
    """The seven living stats."""

    STR = "strength"
    DEX = "dexterity"
    AGI = "agility"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"


__all__ = [
    "EntityKind",
    "CombatState",
    "LifeState",
    "WeightCategory",
    "Stat",
]
