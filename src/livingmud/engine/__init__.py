"""Game engine module for LivingMUD.

This module provides the tick-driven subsystems that animate livings:
scheduling, combat, progression, resources, equipment, death and spells,
plus the MudEngine facade that wires them together.

Submodules:
    dice: Random draws backed by the d20 library
    messaging: Notifier protocol and in-process MessageBus
    scheduler: Heartbeat and timer min-heap
    combat: Engagement and attack resolution
    progression: Skill and stat advancement
    resources: Regeneration, intoxication and mana
    equipment: Wield/wear and armor/weapon modifiers
    death: Death dispatch and corpse decay
    spells: Mana-gated spells
    guilds: Guild membership and skill grants
    game_loop: MudEngine facade

Example:
    >>> from livingmud.engine import MudEngine
    >>> engine = MudEngine()
    >>> engine.start_combat(alice, goblin)
    True
    >>> engine.run(5)
"""

from __future__ import annotations

# =============================================================================
# Primitives
# =============================================================================
from livingmud.engine.dice import DiceExpression, DiceRoller
from livingmud.engine.messaging import MessageBus, Notifier
from livingmud.engine.scheduler import ScheduledEntry, TickScheduler

# =============================================================================
# Subsystems
# =============================================================================
from livingmud.engine.equipment import EquipmentModifiers
from livingmud.engine.progression import ProgressionEngine, stats_for_skill
from livingmud.engine.resources import ResourceRegulator
from livingmud.engine.death import DeathHandler
from livingmud.engine.combat import AttackResult, CombatEngine, ConsiderResult
from livingmud.engine.spells import SPELLBOOK, Spell, SpellCaster, SpellResult
from livingmud.engine.guilds import GuildHall

# =============================================================================
# Facade
# =============================================================================
from livingmud.engine.game_loop import MudEngine


__all__ = [
    # Primitives
    "DiceExpression",
    "DiceRoller",
    "Notifier",
    "MessageBus",
    "ScheduledEntry",
    "TickScheduler",
    # Subsystems
    "EquipmentModifiers",
    "ProgressionEngine",
    "stats_for_skill",
    "ResourceRegulator",
    "DeathHandler",
    "AttackResult",
    "ConsiderResult",
    "CombatEngine",
    "Spell",
    "SpellResult",
    "SPELLBOOK",
    "SpellCaster",
    "GuildHall",
    # Facade
    "MudEngine",
]
