"""LivingMUD - Living-entity engine for text MUDs.

Animates the creatures and players of a MUD world on a logical tick clock:
melee combat, skill and stat growth through use, HP/mana regeneration,
intoxication, equipment modifiers, spells, and death with corpse decay.

ENGINE RULES:
- The World arena owns every entity; cross-entity links are uids
- Every random outcome goes through an injected DiceRoller (d20)
- Vitals are clamped to their bounds, never rejected

Example:
    >>> from livingmud import MudEngine, create_player, create_monster
    >>>
    >>> engine = MudEngine()
    >>> hero = engine.add_living(create_player("thorin", location="cave"))
    >>> goblin = engine.add_living(create_monster("goblin", location="cave"))
    >>> engine.start_combat(hero, goblin)
    True
    >>> engine.run(20)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 models for livings, items, corpses and the world.
    engine: Scheduler, combat, progression, resources, death and spells.
    storage: SQLite persistence for players.
"""

from __future__ import annotations

# Core
from livingmud.core.config import Settings, get_settings
from livingmud.core.exceptions import LivingMudError
from livingmud.core.logging import configure_from_settings, configure_logging, get_logger

# Models
from livingmud.models import (
    Armor,
    Corpse,
    Drink,
    Item,
    ItemCatalog,
    Living,
    Weapon,
    World,
    create_living,
    create_monster,
    create_player,
    default_catalog,
)

# Engine
from livingmud.engine import (
    DiceRoller,
    MessageBus,
    MudEngine,
    TickScheduler,
)

# Storage
from livingmud.storage import Database


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "LivingMudError",
    "Settings",
    "get_settings",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    # Models
    "Living",
    "Item",
    "Weapon",
    "Armor",
    "Drink",
    "ItemCatalog",
    "default_catalog",
    "Corpse",
    "World",
    "create_living",
    "create_player",
    "create_monster",
    # Engine
    "DiceRoller",
    "MessageBus",
    "TickScheduler",
    "MudEngine",
    # Storage
    "Database",
]
