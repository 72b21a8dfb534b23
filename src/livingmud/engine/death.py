"""Death handling and the corpse lifecycle.

Death fires exactly once per living: the first thing ``handle_death`` does
is take the living out of the ALIVE state, and every later call (or damage)
sees that and does nothing.

What happens next depends on the living's kind, via a dispatch table:

- generic: the death is announced and the living stops acting.
- monster: a player killer earns XP, loot drops are rolled into a fresh
  corpse along with the monster's inventory, and the monster is removed.
- player: wielded and worn items are stripped into the corpse (and
  remembered for re-equipping), the player is moved to the holding
  location as a spirit at full HP, and saved.

Corpses decay on a timer. A corpse that is being carried waits and checks
again later; one lying nowhere is destroyed with its contents.

A monster killed without an explicit killer credits its current opponent.
"""

from __future__ import annotations

from collections.abc import Callable
from uuid import UUID

from livingmud.core.config import DeathSettings
from livingmud.core.exceptions import PersistenceError
from livingmud.core.logging import get_logger
from livingmud.engine.dice import DiceRoller
from livingmud.engine.equipment import EquipmentModifiers
from livingmud.engine.messaging import Notifier
from livingmud.engine.scheduler import TickScheduler
from livingmud.models.corpse import Corpse
from livingmud.models.enums import EntityKind, LifeState
from livingmud.models.items import ItemCatalog
from livingmud.models.living import Living
from livingmud.models.world import World
from livingmud.storage.database import PlayerStore


logger = get_logger(__name__)

DeathRoutine = Callable[[Living, Living | None], None]


class DeathHandler:
    """Terminal transition for livings whose HP reached zero."""

    def __init__(
        self,
        world: World,
        scheduler: TickScheduler,
        notifier: Notifier,
        dice: DiceRoller,
        equipment: EquipmentModifiers,
        catalog: ItemCatalog,
        settings: DeathSettings,
        store: PlayerStore | None = None,
    ) -> None:
        self._world = world
        self._scheduler = scheduler
        self._notifier = notifier
        self._dice = dice
        self._equipment = equipment
        self._catalog = catalog
        self._settings = settings
        self._store = store
        self._routines: dict[str, DeathRoutine] = {
            EntityKind.GENERIC: self._die_generic,
            EntityKind.MONSTER: self._die_monster,
            EntityKind.PLAYER: self._die_player,
        }

    # =========================================================================
    # Entry point
    # =========================================================================

    def handle_death(self, entity: Living, killer: Living | None = None) -> bool:
        """Kill a living.

        Args:
            entity: The living whose HP reached zero.
            killer: The living that dealt the final blow; the living's
                current opponent if omitted.

        Returns:
            False if the living was already dead.
        """
        if not entity.is_alive:
            return False

        if killer is None:
            killer = self._world.get_living(entity.combat.attacker_uid)

        entity.life_state = LifeState.DEAD
        entity.disengage()
        self._scheduler.deschedule(entity.uid)

        logger.info(
            "Living died",
            entity=entity.name,
            kind=entity.kind,
            killer=killer.name if killer is not None else None,
        )
        self._routines[entity.kind](entity, killer)
        return True

    # =========================================================================
    # Per-kind routines
    # =========================================================================

    def _die_generic(self, entity: Living, killer: Living | None) -> None:
        self._notifier.tell_room(entity.location, f"{entity.display_name} dies!")

    def _die_monster(self, entity: Living, killer: Living | None) -> None:
        monster = entity.monster

        if (
            monster is not None
            and killer is not None
            and killer.player is not None
            and self._world.is_alive(killer.uid)
        ):
            killer.player.xp += monster.xp_value
            self._notifier.tell(killer.uid, f"You gain {monster.xp_value} experience points.")

        message = monster.death_message if monster is not None and monster.death_message else None
        self._notifier.tell_room(entity.location, message or f"{entity.display_name} dies!")

        corpse = self._make_corpse(entity)
        if monster is not None and monster.drop_chance > 0:
            self._roll_drops(entity, corpse, monster.drops, monster.drop_chance)
        self._equipment.strip(entity)
        self._transfer_inventory(entity, corpse)
        self.start_decay(corpse)

        self._world.remove_living(entity.uid)

    def _die_player(self, entity: Living, killer: Living | None) -> None:
        death_location = entity.location

        corpse = self._make_corpse(entity)
        stripped = self._equipment.strip(entity)
        if entity.player is not None:
            entity.player.reequip_uids = stripped
        self._transfer_inventory(entity, corpse)

        self._notifier.tell_room(
            death_location,
            f"{entity.display_name} has died!",
            exclude=(entity.uid,),
        )
        self.start_decay(corpse)

        self._notifier.tell(entity.uid, "You feel yourself slipping away...")
        self._notifier.tell(
            entity.uid,
            f"Your vision fades to gray as you enter the {self._settings.holding_location}.",
        )
        entity.location = self._settings.holding_location
        entity.set_hp(entity.vitals.max_hp)
        entity.life_state = LifeState.SPIRIT
        self._save(entity)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _make_corpse(self, entity: Living) -> Corpse:
        return self._world.add_corpse(
            Corpse(corpse_of=entity.short, original_uid=entity.uid, location=entity.location)
        )

    def _roll_drops(self, entity: Living, corpse: Corpse, drops: list[str], chance: int) -> None:
        for template_id in drops:
            if template_id not in self._catalog:
                logger.warning("Unknown drop template", entity=entity.name, template=template_id)
                continue
            if self._dice.percent() >= chance:
                continue
            item = self._world.add_item(self._catalog.clone(template_id))
            self._world.give_item(item, corpse.uid)
            logger.debug("Loot dropped", entity=entity.name, item=item.name)

    def _transfer_inventory(self, entity: Living, corpse: Corpse) -> None:
        for item in self._world.contents_of(entity.uid):
            self._world.give_item(item, corpse.uid)

    def _save(self, entity: Living) -> None:
        if self._store is None:
            return
        try:
            self._store.save_player(entity)
        except PersistenceError as exc:
            logger.error("Failed to save player", entity=entity.name, error=str(exc))

    # =========================================================================
    # Corpse decay
    # =========================================================================

    def start_decay(self, corpse: Corpse, delay: int | None = None) -> None:
        """Schedule the corpse to decay after ``delay`` ticks (default from settings)."""
        ticks = delay if delay is not None else self._settings.corpse_decay_ticks
        corpse.decay_at = self._scheduler.current_tick + ticks
        self._scheduler.call_out(ticks, corpse.uid, self._decay)

    def _decay(self, corpse_uid: UUID) -> None:
        corpse = self._world.get_corpse(corpse_uid)
        if corpse is None:
            return

        if corpse.container_uid is not None:
            self.start_decay(corpse, self._settings.corpse_recheck_ticks)
            return

        # With no room to spill into, the contents go with the corpse
        for item in self._world.contents_of(corpse.uid):
            if corpse.location is None:
                self._world.remove_item(item.uid)
            else:
                self._world.drop_item(item, corpse.location)

        if corpse.location is not None:
            name = corpse.short[:1].upper() + corpse.short[1:]
            self._notifier.tell_room(corpse.location, f"{name} decays into dust.")
        self._world.remove_corpse(corpse.uid)
        logger.info("Corpse decayed", corpse=corpse.short, location=corpse.location)

    # =========================================================================
    # Afterlife
    # =========================================================================

    def resurrect(self, entity: Living) -> bool:
        """Bring a spirit back to life at the respawn location.

        Returns:
            False if the living is not a spirit.
        """
        if entity.life_state != LifeState.SPIRIT:
            return False

        entity.life_state = LifeState.ALIVE
        entity.location = self._settings.respawn_location
        entity.set_hp(entity.vitals.max_hp)
        self._notifier.tell(entity.uid, "You feel life flow back into your body.")
        self._notifier.tell_room(
            entity.location,
            f"{entity.display_name} materializes in a shimmer of light.",
            exclude=(entity.uid,),
        )
        logger.info("Player resurrected", entity=entity.name, location=entity.location)
        self._save(entity)
        return True


__all__ = ["DeathHandler"]
