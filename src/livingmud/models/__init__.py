"""Pydantic models for livings, items, guilds, corpses and the world arena."""

from __future__ import annotations

from livingmud.models.corpse import Corpse
from livingmud.models.guild import Guild, default_guilds
from livingmud.models.enums import (
    CombatState,
    EntityKind,
    LifeState,
    Stat,
    WeightCategory,
)
from livingmud.models.items import (
    Armor,
    Drink,
    Item,
    ItemCatalog,
    Weapon,
    default_catalog,
)
from livingmud.models.living import (
    CombatComponent,
    EquipmentComponent,
    Living,
    MonsterData,
    PlayerData,
    SkillsComponent,
    StatsComponent,
    VitalsComponent,
    create_living,
    create_monster,
    create_player,
)
from livingmud.models.world import World


__all__ = [
    # Enums
    "CombatState",
    "EntityKind",
    "LifeState",
    "Stat",
    "WeightCategory",
    # Items
    "Item",
    "Weapon",
    "Armor",
    "Drink",
    "ItemCatalog",
    "default_catalog",
    # Livings
    "Living",
    "StatsComponent",
    "VitalsComponent",
    "CombatComponent",
    "EquipmentComponent",
    "SkillsComponent",
    "MonsterData",
    "PlayerData",
    "create_living",
    "create_player",
    "create_monster",
    # Guilds
    "Guild",
    "default_guilds",
    # Corpses and world
    "Corpse",
    "World",
]
