"""HP and mana regeneration, intoxication and mana spending.

Regeneration only happens out of combat. Intoxication wears off on every
heartbeat regardless, and while it lasts it speeds up HP regeneration by a
tenth of its value. Every mutation here clamps to the living's bounds.
"""

from __future__ import annotations

from livingmud.core.constants import MAX_INTOXICATION
from livingmud.core.exceptions import ResourceExhaustedError
from livingmud.core.logging import get_logger
from livingmud.engine.messaging import Notifier
from livingmud.engine.scheduler import TickScheduler
from livingmud.models.items import Drink, Item
from livingmud.models.living import Living
from livingmud.models.world import World


logger = get_logger(__name__)


class ResourceRegulator:
    """Per-heartbeat resource upkeep for livings."""

    def __init__(
        self,
        world: World,
        scheduler: TickScheduler,
        notifier: Notifier,
        *,
        intoxication_decay: int = 2,
    ) -> None:
        self._world = world
        self._scheduler = scheduler
        self._notifier = notifier
        self._intoxication_decay = intoxication_decay

    # =========================================================================
    # Heartbeat
    # =========================================================================

    def regenerate(self, entity: Living) -> None:
        """Run one heartbeat of resource upkeep.

        Engaged livings only sober up. Idle livings also regain HP
        (``regen_rate + intoxication/10``) and mana (``1 + wis/3``), are told
        once when either pool fills, and are descheduled when nothing is
        left to recover.
        """
        self.decay_intoxication(entity)
        if entity.in_combat:
            return

        vitals = entity.vitals
        bonus = vitals.intoxication // 10

        if vitals.hp < vitals.max_hp:
            entity.set_hp(vitals.hp + vitals.regen_rate + bonus)
            if vitals.hp == vitals.max_hp:
                self._notifier.tell(entity.uid, "You feel fully healed.")

        if vitals.mana < vitals.max_mana:
            entity.set_mana(vitals.mana + 1 + entity.stats.wisdom // 3)
            if vitals.mana == vitals.max_mana:
                self._notifier.tell(entity.uid, "Your mana is fully restored.")

        if vitals.hp == vitals.max_hp and vitals.mana == vitals.max_mana and vitals.intoxication == 0:
            self._scheduler.stop_if_idle(entity)

    def decay_intoxication(self, entity: Living) -> int:
        """Sober up by one heartbeat's worth; never below 0."""
        if entity.vitals.intoxication > 0:
            entity.set_intoxication(entity.vitals.intoxication - self._intoxication_decay)
            if entity.vitals.intoxication == 0:
                self._notifier.tell(entity.uid, "You feel sober again.")
        return entity.vitals.intoxication

    # =========================================================================
    # Intoxication
    # =========================================================================

    def add_intoxication(self, entity: Living, amount: int) -> int:
        """Change intoxication by ``amount``, clamped to 0..100.

        Returns:
            The new intoxication level.
        """
        entity.set_intoxication(entity.vitals.intoxication + amount)
        if entity.vitals.intoxication > 0:
            self._scheduler.ensure_active(entity)
        return entity.vitals.intoxication

    def drink(self, entity: Living, item: Item) -> bool:
        """Drink a carried drink, consuming it.

        Returns:
            False if the item is not a drink the living is carrying.
        """
        if not isinstance(item, Drink) or item.container_uid != entity.uid:
            return False

        self._world.remove_item(item.uid)
        self._notifier.tell(entity.uid, f"You drink {item.short}.")
        self._notifier.tell_room(
            entity.location,
            f"{entity.display_name} drinks {item.short}.",
            exclude=(entity.uid,),
        )
        level = self.add_intoxication(entity, item.intoxication)
        if level >= MAX_INTOXICATION:
            self._notifier.tell(entity.uid, "The world spins wildly around you.")
        logger.debug("Drink consumed", entity=entity.name, item=item.name, intoxication=level)
        return True

    # =========================================================================
    # Direct adjustments
    # =========================================================================

    def heal(self, entity: Living, amount: int) -> int:
        """Restore HP up to the maximum.

        Returns:
            HP actually restored.
        """
        if amount <= 0 or not entity.is_alive:
            return 0
        before = entity.vitals.hp
        entity.set_hp(before + amount)
        return entity.vitals.hp - before

    def spend_mana(self, entity: Living, cost: int) -> None:
        """Deduct mana, or reject the whole action before touching anything.

        Raises:
            ResourceExhaustedError: If the living has less than ``cost`` mana.
        """
        if cost > entity.vitals.mana:
            raise ResourceExhaustedError(
                f"{entity.name} lacks the mana",
                resource="mana",
                required=cost,
                available=entity.vitals.mana,
            )
        entity.set_mana(entity.vitals.mana - cost)
        if cost > 0:
            self._scheduler.ensure_active(entity)


__all__ = ["ResourceRegulator"]
