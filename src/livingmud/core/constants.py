"""Engine-wide constants for LivingMUD.

Formula coefficients, clamps and lookup tables shared by the combat,
progression, resource and spell subsystems.
"""

from __future__ import annotations

# =============================================================================
# Living Defaults
# =============================================================================

DEFAULT_STAT = 1
"""Starting value of every stat on a fresh living."""

BASE_VITAL = 10
"""Flat component of max_hp and max_mana."""

VITAL_PER_STAT = 5
"""max_hp gains this much per CON point; max_mana per INT point."""

DEFAULT_REGEN_RATE = 1
"""Baseline HP regenerated per idle heartbeat."""

MAX_INTOXICATION = 100
"""Upper bound of the intoxication scale."""

DEFAULT_XP_VALUE = 10
"""XP a monster is worth when nothing else is configured."""

# =============================================================================
# Combat Constants
# =============================================================================

BASE_HIT_CHANCE = 30
"""Flat component of the hit-chance formula."""

MIN_HIT_CHANCE = 5
"""Lowest possible hit chance, in percent."""

MAX_HIT_CHANCE = 95
"""Highest possible hit chance, in percent."""

MIN_COMBAT_DIFFICULTY = 5
"""Lower clamp of the skill difficulty derived from target max_hp."""

MAX_COMBAT_DIFFICULTY = 20
"""Upper clamp of the skill difficulty derived from target max_hp."""

UNARMED_SKILL = "unarmed"
"""Skill used when no weapon is wielded."""

DODGE_SKILL = "dodge"
"""Skill trained by the defender on a miss."""

# =============================================================================
# Progression Constants
# =============================================================================

SKILL_BASE_CHANCE = 30.0
"""Skill-gain chance (percent) at skill 0 and difficulty 10."""

MIN_SKILL_CHANCE = 1.0
MAX_SKILL_CHANCE = 50.0

STAT_BASE_PERCENT = 5
"""Stat-gain chance (percent) at divisor 1."""

STAT_BASE_PERMILLE = 50
"""Stat-gain chance (per mille) used once the percent chance rounds to 0."""

BASIC_SKILLS = frozenset({"unarmed", "dodge", "haggling", "swimming"})
"""Skills every living may train regardless of its allowed-skill set."""

COMBAT_SKILLS = frozenset(
    {"unarmed", "sword", "axe", "mace", "club", "staff", "parry", "shield_block"}
)
FINESSE_SKILLS = frozenset({"dagger", "bow"})
MAGIC_SCHOOLS = frozenset(
    {
        "abjuration",
        "conjuration",
        "divination",
        "enchantment",
        "evocation",
        "illusion",
        "necromancy",
        "transmutation",
    }
)
SOCIAL_SKILLS = frozenset({"haggling"})
ENDURANCE_SKILLS = frozenset({"swimming", "climbing"})

# Skill family -> stats trained alongside a successful gain
SKILL_STAT_TABLE: dict[frozenset[str], tuple[str, ...]] = {
    COMBAT_SKILLS: ("strength", "dexterity"),
    FINESSE_SKILLS: ("dexterity", "agility"),
    MAGIC_SCHOOLS: ("intelligence", "wisdom"),
    SOCIAL_SKILLS: ("charisma",),
    ENDURANCE_SKILLS: ("constitution", "strength"),
    frozenset({DODGE_SKILL}): ("agility",),
}

# =============================================================================
# Equipment Constants
# =============================================================================

SPELL_FAILURE_BY_WEIGHT = {
    "none": 0,
    "light": 10,
    "medium": 30,
    "heavy": 60,
}
"""Percent spell failure contributed by one armor piece."""

DODGE_PENALTY_BY_WEIGHT = {
    "none": 0,
    "light": 0,
    "medium": 10,
    "heavy": 25,
}
"""Percent dodge-skill penalty contributed by one armor piece."""

DEFAULT_SKILL_BY_WEAPON_KIND = {
    "blade": "sword",
    "piercing": "dagger",
    "blunt": "mace",
    "axe": "axe",
    "bow": "bow",
    "staff": "staff",
}
"""Skill a weapon trains when its template does not name one."""

# =============================================================================
# Spell Constants
# =============================================================================

SPELL_POWER_BASE = 10
"""Flat component of spell power (10 + school skill + int/2)."""

SPELL_FIZZLE_DIFFICULTY = 5
"""School skill difficulty when armor makes a spell fizzle."""

MAX_SPELL_DIFFICULTY = 25
"""Upper clamp of the school difficulty after a successful cast."""


__all__ = [
    # Living defaults
    "DEFAULT_STAT",
    "BASE_VITAL",
    "VITAL_PER_STAT",
    "DEFAULT_REGEN_RATE",
    "MAX_INTOXICATION",
    "DEFAULT_XP_VALUE",
    # Combat
    "BASE_HIT_CHANCE",
    "MIN_HIT_CHANCE",
    "MAX_HIT_CHANCE",
    "MIN_COMBAT_DIFFICULTY",
    "MAX_COMBAT_DIFFICULTY",
    "UNARMED_SKILL",
    "DODGE_SKILL",
    # Progression
    "SKILL_BASE_CHANCE",
    "MIN_SKILL_CHANCE",
    "MAX_SKILL_CHANCE",
    "STAT_BASE_PERCENT",
    "STAT_BASE_PERMILLE",
    "BASIC_SKILLS",
    "COMBAT_SKILLS",
    "FINESSE_SKILLS",
    "MAGIC_SCHOOLS",
    "SOCIAL_SKILLS",
    "ENDURANCE_SKILLS",
    "SKILL_STAT_TABLE",
    # Equipment
    "SPELL_FAILURE_BY_WEIGHT",
    "DODGE_PENALTY_BY_WEIGHT",
    "DEFAULT_SKILL_BY_WEAPON_KIND",
    # Spells
    "SPELL_POWER_BASE",
    "SPELL_FIZZLE_DIFFICULTY",
    "MAX_SPELL_DIFFICULTY",
]
