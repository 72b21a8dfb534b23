"""Engine facade wiring the subsystems into one tick-driven game loop.

MudEngine owns the World and every subsystem, registers the heartbeat
handler with the scheduler, and exposes the operations a command layer
calls. Each heartbeat does one thing for a living: an engaged living
attacks, an idle one recovers.

Example:
    >>> engine = MudEngine()
    >>> alice = engine.add_living(create_player("alice", location="cave"))
    >>> goblin = engine.add_living(create_monster("goblin", location="cave"))
    >>> engine.start_combat(alice, goblin)
    True
    >>> engine.run(10)
"""

from __future__ import annotations

from typing import Any

from livingmud.core.config import Settings, get_settings
from livingmud.core.logging import get_logger
from livingmud.engine.combat import AttackResult, CombatEngine, ConsiderResult
from livingmud.engine.death import DeathHandler
from livingmud.engine.dice import DiceRoller
from livingmud.engine.equipment import EquipmentModifiers
from livingmud.engine.guilds import GuildHall
from livingmud.engine.messaging import MessageBus, Notifier
from livingmud.engine.progression import ProgressionEngine
from livingmud.engine.resources import ResourceRegulator
from livingmud.engine.scheduler import TickScheduler
from livingmud.engine.spells import SpellCaster, SpellResult
from livingmud.models.guild import Guild, default_guilds
from livingmud.models.items import Item, ItemCatalog, default_catalog
from livingmud.models.living import Living
from livingmud.models.world import World
from livingmud.storage.database import PlayerStore


logger = get_logger(__name__)


class MudEngine:
    """Living-entity engine: combat, progression, resources and death.

    Attributes:
        settings: Engine configuration.
        world: Arena of livings, items and corpses.
        scheduler: Heartbeat and timer scheduler.
        combat: Attack resolution.
        progression: Skill and stat advancement.
        resources: Regeneration, intoxication and mana.
        equipment: Wield/wear and equipment modifiers.
        death: Death handling and corpse decay.
        spells: Spell casting.
        guilds: Guild membership and skill grants.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        world: World | None = None,
        dice: DiceRoller | None = None,
        notifier: Notifier | None = None,
        catalog: ItemCatalog | None = None,
        store: PlayerStore | None = None,
        guilds: dict[str, Guild] | None = None,
    ) -> None:
        """Wire the engine.

        Args:
            settings: Configuration; the cached settings if omitted.
            world: Arena to operate on; a new empty one if omitted.
            dice: Random source; seeded from ``settings.rng_seed`` if omitted.
            notifier: Message sink; a MessageBus over the world if omitted.
            catalog: Item templates for loot; the stock catalog if omitted.
            store: Player persistence; players are not saved if omitted.
            guilds: Guild definitions by id; the stock guilds if omitted.
        """
        self.settings = settings if settings is not None else get_settings()
        self.world = world if world is not None else World()
        self.dice = dice or DiceRoller(seed=self.settings.rng_seed)
        self.notifier: Notifier = notifier or MessageBus(self.world)
        self.catalog = catalog or default_catalog()
        self.store = store

        self.scheduler = TickScheduler(self.world, interval=self.settings.tick.heartbeat_interval)
        self.equipment = EquipmentModifiers(self.world, self.notifier)
        self.progression = ProgressionEngine(self.dice, self.notifier)
        self.resources = ResourceRegulator(
            self.world,
            self.scheduler,
            self.notifier,
            intoxication_decay=self.settings.tick.intoxication_decay,
        )
        self.death = DeathHandler(
            self.world,
            self.scheduler,
            self.notifier,
            self.dice,
            self.equipment,
            self.catalog,
            self.settings.death,
            store,
        )
        self.combat = CombatEngine(
            self.world,
            self.scheduler,
            self.dice,
            self.notifier,
            self.progression,
            self.resources,
            self.equipment,
            self.death,
        )
        self.spells = SpellCaster(
            self.world,
            self.dice,
            self.notifier,
            self.progression,
            self.resources,
            self.equipment,
            self.combat,
        )
        self.guilds = GuildHall(guilds if guilds is not None else default_guilds(), self.notifier)
        self.scheduler.set_heartbeat_handler(self.heartbeat)

        logger.info(
            "MudEngine initialized",
            interval=self.scheduler.interval,
            persistent=store is not None,
        )

    # =========================================================================
    # Heartbeat
    # =========================================================================

    def heartbeat(self, entity: Living) -> AttackResult | None:
        """One scheduled beat: attack if engaged, otherwise recover."""
        if entity.in_combat:
            return self.combat.do_attack(entity)
        self.resources.regenerate(entity)
        return None

    def tick(self) -> int:
        """Advance one logical tick; returns the number of callbacks run."""
        return self.scheduler.run_tick()

    def run(self, ticks: int) -> int:
        """Advance ``ticks`` logical ticks."""
        return self.scheduler.run(ticks)

    # =========================================================================
    # Population
    # =========================================================================

    def add_living(self, living: Living) -> Living:
        """Put a living into the world, scheduling it if it has work."""
        self.world.add_living(living)
        if not living.is_idle:
            self.scheduler.ensure_active(living)
        return living

    def remove_living(self, living: Living) -> None:
        self.scheduler.deschedule(living.uid)
        self.world.remove_living(living.uid)

    def spawn_item(self, template_id: str, holder: Living | None = None, **overrides: Any) -> Item:
        """Clone a catalog item into the world, optionally into a living's hands.

        Raises:
            ValidationError: If the template is unknown.
        """
        item = self.world.add_item(self.catalog.clone(template_id, **overrides))
        if holder is not None:
            self.world.give_item(item, holder.uid)
        return item

    def login(self, name: str) -> Living | None:
        """Restore a stored player into the world.

        Returns:
            The player, or None if there is no store or no record.
        """
        if self.store is None:
            return None
        player = self.store.load_player(name)
        if player is not None:
            self.add_living(player)
        return player

    def logout(self, player: Living) -> bool:
        """Save a player and take them out of the world.

        Returns:
            Whether the player was saved.
        """
        saved = self.store.save_player(player) if self.store is not None else False
        self.remove_living(player)
        return saved

    # =========================================================================
    # Combat
    # =========================================================================

    def start_combat(self, entity: Living, target: Living | None) -> bool:
        return self.combat.start_combat(entity, target)

    def stop_combat(self, entity: Living) -> bool:
        return self.combat.stop_combat(entity)

    def receive_damage(self, target: Living, amount: int, source: Living | None = None) -> int:
        return self.combat.receive_damage(target, amount, source)

    def query_in_combat(self, entity: Living) -> bool:
        return entity.in_combat

    def query_attacker(self, entity: Living) -> Living | None:
        return self.combat.query_attacker(entity)

    def consider(self, entity: Living, target: Living) -> ConsiderResult:
        return self.combat.consider(entity, target)

    def provoke(self, monster: Living, intruder: Living) -> bool:
        return self.combat.provoke(monster, intruder)

    # =========================================================================
    # Vitals and resources
    # =========================================================================

    def query_hp(self, entity: Living) -> int:
        return entity.vitals.hp

    def query_max_hp(self, entity: Living) -> int:
        return entity.vitals.max_hp

    def query_mana(self, entity: Living) -> int:
        return entity.vitals.mana

    def query_max_mana(self, entity: Living) -> int:
        return entity.vitals.max_mana

    def query_intoxication(self, entity: Living) -> int:
        return entity.vitals.intoxication

    def add_intoxication(self, entity: Living, amount: int) -> int:
        return self.resources.add_intoxication(entity, amount)

    def drink(self, entity: Living, item: Item) -> bool:
        return self.resources.drink(entity, item)

    def set_stat(self, entity: Living, stat: str, value: int) -> None:
        """Privileged stat assignment; a raised maximum leaves HP/mana to regenerate."""
        entity.set_stat(stat, value)
        if not entity.is_idle:
            self.scheduler.ensure_active(entity)

    # =========================================================================
    # Skills and spells
    # =========================================================================

    def query_skill(self, entity: Living, skill: str) -> int:
        return self.progression.query_skill(entity, skill)

    def set_skill(self, entity: Living, skill: str, value: int) -> None:
        self.progression.set_skill(entity, skill, value)

    def advance_skill(self, entity: Living, skill: str, difficulty: int) -> bool:
        return self.progression.advance_skill(entity, skill, difficulty)

    def learn_spell(self, entity: Living, spell_id: str) -> bool:
        """Add a spell to a living's repertoire, subject to its learn requirement."""
        return self.spells.learn(entity, spell_id)

    def grant_skills(self, entity: Living, skills: set[str] | frozenset[str]) -> list[str]:
        """Allow a living to train more skills; returns those newly allowed."""
        return self.guilds.grant_skills(entity, skills)

    def revoke_skills(self, entity: Living, skills: set[str] | frozenset[str]) -> list[str]:
        """Stop a living training skills; returns those no longer allowed."""
        return self.guilds.revoke_skills(entity, skills)

    def join_guild(self, player: Living, guild_id: str) -> bool:
        return self.guilds.join(player, guild_id)

    def leave_guild(self, player: Living, guild_id: str) -> bool:
        return self.guilds.leave(player, guild_id)

    def cast(self, caster: Living, spell_id: str, target: Living | None = None) -> SpellResult:
        return self.spells.cast(caster, spell_id, target)

    # =========================================================================
    # Equipment
    # =========================================================================

    def wield(self, entity: Living, item: Item) -> bool:
        return self.equipment.wield(entity, item)

    def unwield(self, entity: Living) -> bool:
        return self.equipment.unwield(entity)

    def wear(self, entity: Living, item: Item) -> bool:
        return self.equipment.wear(entity, item)

    def remove_armor(self, entity: Living, slot: str) -> bool:
        return self.equipment.remove_armor(entity, slot)

    def remove_armor_item(self, entity: Living, item: Item) -> bool:
        return self.equipment.remove_armor_item(entity, item)

    def reequip(self, entity: Living) -> int:
        return self.equipment.reequip(entity)

    # =========================================================================
    # Death
    # =========================================================================

    def resurrect(self, entity: Living) -> bool:
        """Return a spirit to life and let it recover."""
        if not self.death.resurrect(entity):
            return False
        if not entity.is_idle:
            self.scheduler.ensure_active(entity)
        return True


__all__ = ["MudEngine"]
