"""The Living entity and its components.

One flattened entity type covers every actor in the world. Behaviour that
differs between generic livings, monsters and players is selected by the
``kind`` tag and by the optional ``monster``/``player`` extension data,
never by subclassing.

Vitals are kept inside their bounds by the methods on Living: callers
asking for more HP than ``max_hp`` or mana below zero are clamped, not
rejected. Cross-entity references (the combat target, equipped items) are
stored as uids and re-resolved through the World on every use.

Example:
    >>> hero = create_player("alice", location="town_square")
    >>> hero.vitals.max_hp
    15
    >>> hero.set_stat("con", 10)
    >>> hero.vitals.max_hp, hero.vitals.hp
    (60, 15)
"""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from livingmud.core.constants import (
    BASE_VITAL,
    BASIC_SKILLS,
    DEFAULT_REGEN_RATE,
    DEFAULT_STAT,
    DEFAULT_XP_VALUE,
    MAX_INTOXICATION,
    UNARMED_SKILL,
    VITAL_PER_STAT,
)
from livingmud.core.exceptions import ValidationError
from livingmud.models.enums import CombatState, EntityKind, LifeState, Stat


STAT_ALIASES: dict[str, str] = {
    "str": Stat.STR.value,
    "dex": Stat.DEX.value,
    "agi": Stat.AGI.value,
    "con": Stat.CON.value,
    "int": Stat.INT.value,
    "wis": Stat.WIS.value,
    "cha": Stat.CHA.value,
}


def resolve_stat(name: str) -> str:
    """Map a short or full stat name to the StatsComponent field name.

    Raises:
        ValidationError: If the name is not a stat.
    """
    key = name.lower()
    key = STAT_ALIASES.get(key, key)
    if key not in {stat.value for stat in Stat}:
        raise ValidationError(f"Unknown stat: {name}", field_name="stat", invalid_value=name)
    return key


def derive_vital(stat_value: int) -> int:
    """max_hp from CON, max_mana from INT."""
    return BASE_VITAL + VITAL_PER_STAT * stat_value


# =============================================================================
# Components
# =============================================================================


class Component(BaseModel):
    """Base class for Living components."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        use_enum_values=True,
    )


class StatsComponent(Component):
    """The seven stats; all start at 1."""

    strength: int = Field(default=DEFAULT_STAT, ge=0)
    dexterity: int = Field(default=DEFAULT_STAT, ge=0)
    agility: int = Field(default=DEFAULT_STAT, ge=0)
    constitution: int = Field(default=DEFAULT_STAT, ge=0)
    intelligence: int = Field(default=DEFAULT_STAT, ge=0)
    wisdom: int = Field(default=DEFAULT_STAT, ge=0)
    charisma: int = Field(default=DEFAULT_STAT, ge=0)


class VitalsComponent(Component):
    """HP, mana, regeneration and intoxication."""

    hp: int = Field(default=15, ge=0)
    max_hp: int = Field(default=15, ge=1)
    mana: int = Field(default=15, ge=0)
    max_mana: int = Field(default=15, ge=1)
    regen_rate: int = Field(default=DEFAULT_REGEN_RATE, ge=0, description="HP per idle tick")
    intoxication: int = Field(default=0, ge=0, le=MAX_INTOXICATION)


class CombatComponent(Component):
    """Combat state and the weak reference to the current target."""

    state: CombatState = Field(default=CombatState.IDLE)
    attacker_uid: UUID | None = Field(default=None, description="Current target, by uid")


class EquipmentComponent(Component):
    """Uids of the wielded weapon and worn armor, keyed by slot."""

    wielded_uid: UUID | None = None
    worn: dict[str, UUID] = Field(default_factory=dict)


class SkillsComponent(Component):
    """Skill values plus what the living is allowed to train and cast."""

    values: dict[str, int] = Field(default_factory=dict)
    allowed: set[str] = Field(default_factory=set, description="Empty means unrestricted")
    known_spells: set[str] = Field(default_factory=set)


class MonsterData(Component):
    """Extension data for autonomous actors."""

    xp_value: int = Field(default=DEFAULT_XP_VALUE, ge=0)
    aggressive: bool = False
    drop_chance: int = Field(default=0, ge=0, le=100, description="Percent per listed drop")
    drops: list[str] = Field(default_factory=list, description="Item template ids")
    death_message: str | None = Field(default=None, description="Replaces '<X> dies!'")


class PlayerData(Component):
    """Extension data for player-controlled livings."""

    xp: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    gold: int = Field(default=0, ge=0)
    reequip_uids: list[UUID] = Field(
        default_factory=list,
        description="Items stripped at death, re-equipped once recovered",
    )
    guilds: list[str] = Field(default_factory=list, description="Ids of guilds joined")


# =============================================================================
# Living Entity
# =============================================================================


class Living(BaseModel):
    """Any entity with stats, vitals and combat capability."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        use_enum_values=True,
    )

    uid: UUID = Field(default_factory=uuid4, description="Unique identifier")
    name: str = Field(default="someone", description="Keyword and display name")
    short: str = Field(default="someone", description="Short description used in messages")
    kind: EntityKind = Field(default=EntityKind.GENERIC)
    location: str | None = Field(default=None, description="Opaque room label")
    life_state: LifeState = Field(default=LifeState.ALIVE)

    stats: StatsComponent = Field(default_factory=StatsComponent)
    vitals: VitalsComponent = Field(default_factory=VitalsComponent)
    combat: CombatComponent = Field(default_factory=CombatComponent)
    equipment: EquipmentComponent = Field(default_factory=EquipmentComponent)
    skills: SkillsComponent = Field(default_factory=SkillsComponent)

    monster: MonsterData | None = None
    player: PlayerData | None = None

    # -------------------------------------------------------------------------
    # Identity and state queries
    # -------------------------------------------------------------------------

    @property
    def display_name(self) -> str:
        """Capitalized short, as used at the start of a message."""
        return self.short[:1].upper() + self.short[1:]

    @property
    def is_alive(self) -> bool:
        return self.life_state == LifeState.ALIVE

    @property
    def is_player(self) -> bool:
        return self.kind == EntityKind.PLAYER

    @property
    def in_combat(self) -> bool:
        return self.combat.state == CombatState.ENGAGED

    @property
    def is_idle(self) -> bool:
        """True when no heartbeat work is pending."""
        v = self.vitals
        return (
            v.hp == v.max_hp
            and v.mana == v.max_mana
            and v.intoxication == 0
            and not self.in_combat
        )

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    def query_stat(self, name: str) -> int:
        return getattr(self.stats, resolve_stat(name))

    def set_stat(self, name: str, value: int) -> None:
        """Set a stat, re-deriving max_hp (CON) or max_mana (INT).

        Negative values are clamped to 0.
        """
        field = resolve_stat(name)
        setattr(self.stats, field, max(0, value))
        if field == Stat.CON:
            self.recalculate_max_hp()
        elif field == Stat.INT:
            self.recalculate_max_mana()

    def recalculate_max_hp(self) -> None:
        """Re-derive max_hp; hp is only lowered if it now exceeds the maximum."""
        self.vitals.max_hp = derive_vital(self.stats.constitution)
        if self.vitals.hp > self.vitals.max_hp:
            self.vitals.hp = self.vitals.max_hp

    def recalculate_max_mana(self) -> None:
        self.vitals.max_mana = derive_vital(self.stats.intelligence)
        if self.vitals.mana > self.vitals.max_mana:
            self.vitals.mana = self.vitals.max_mana

    # -------------------------------------------------------------------------
    # Vitals (clamped)
    # -------------------------------------------------------------------------

    def set_hp(self, value: int) -> None:
        self.vitals.hp = min(max(0, value), self.vitals.max_hp)

    def set_mana(self, value: int) -> None:
        self.vitals.mana = min(max(0, value), self.vitals.max_mana)

    def set_intoxication(self, value: int) -> None:
        self.vitals.intoxication = min(max(0, value), MAX_INTOXICATION)

    # -------------------------------------------------------------------------
    # Skills
    # -------------------------------------------------------------------------

    def query_skill(self, skill: str) -> int:
        return self.skills.values.get(skill, 0)

    def set_skill(self, skill: str, value: int) -> None:
        values = dict(self.skills.values)
        values[skill] = max(0, value)
        self.skills.values = values

    def grant_skills(self, skills: set[str] | frozenset[str]) -> list[str]:
        """Allow training of ``skills``.

        A living with an empty allowed set is already unrestricted and is
        left that way.

        Returns:
            The skills newly allowed, sorted.
        """
        if not self.skills.allowed:
            return []
        added = set(skills) - self.skills.allowed
        self.skills.allowed = self.skills.allowed | added
        return sorted(added)

    def revoke_skills(self, skills: set[str] | frozenset[str]) -> list[str]:
        """Stop ``skills`` from being trained; earned values are kept.

        Basic skills stay in the set, so a restricted living never becomes
        unrestricted by losing skills.

        Returns:
            The skills no longer allowed, sorted.
        """
        removed = (set(skills) & self.skills.allowed) - BASIC_SKILLS
        self.skills.allowed = self.skills.allowed - removed
        return sorted(removed)

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def engage(self, target_uid: UUID) -> None:
        self.combat.attacker_uid = target_uid
        self.combat.state = CombatState.ENGAGED

    def disengage(self) -> None:
        self.combat.attacker_uid = None
        self.combat.state = CombatState.IDLE


# =============================================================================
# Factories
# =============================================================================


def _apply_stats(living: Living, stats: dict[str, int] | None) -> None:
    for name, value in (stats or {}).items():
        living.set_stat(name, value)
    living.set_hp(living.vitals.max_hp)
    living.set_mana(living.vitals.max_mana)


def create_living(
    name: str,
    *,
    short: str | None = None,
    location: str | None = None,
    stats: dict[str, int] | None = None,
    **fields: Any,
) -> Living:
    """Create a generic living at full health."""
    living = Living(name=name, short=short or name, location=location, **fields)
    _apply_stats(living, stats)
    return living


def create_player(
    name: str,
    *,
    location: str | None = None,
    stats: dict[str, int] | None = None,
    allowed_skills: set[str] | None = None,
) -> Living:
    """Create a new player at full health.

    Players start with a restricted skill set that always includes
    unarmed combat; guilds widen it later.
    """
    player = Living(
        name=name.lower(),
        short=name.capitalize(),
        kind=EntityKind.PLAYER,
        location=location,
        skills=SkillsComponent(allowed={UNARMED_SKILL} | set(allowed_skills or ())),
        player=PlayerData(),
    )
    _apply_stats(player, stats)
    return player


def create_monster(
    name: str,
    *,
    short: str | None = None,
    location: str | None = None,
    stats: dict[str, int] | None = None,
    xp_value: int = DEFAULT_XP_VALUE,
    aggressive: bool = False,
    drop_chance: int = 0,
    drops: list[str] | None = None,
    death_message: str | None = None,
) -> Living:
    """Create a monster at full health with unrestricted skills."""
    monster = Living(
        name=name,
        short=short or f"a {name}",
        kind=EntityKind.MONSTER,
        location=location,
        monster=MonsterData(
            xp_value=xp_value,
            aggressive=aggressive,
            drop_chance=drop_chance,
            drops=list(drops or []),
            death_message=death_message,
        ),
    )
    _apply_stats(monster, stats)
    return monster


__all__ = [
    "STAT_ALIASES",
    "resolve_stat",
    "derive_vital",
    # Components
    "Component",
    "StatsComponent",
    "VitalsComponent",
    "CombatComponent",
    "EquipmentComponent",
    "SkillsComponent",
    "MonsterData",
    "PlayerData",
    # Entity
    "Living",
    # Factories
    "create_living",
    "create_player",
    "create_monster",
]
