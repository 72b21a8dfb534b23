"""Wielding, wearing and the combat modifiers derived from equipment.

A living references its weapon and armor by uid. Every aggregate here
resolves those uids through the World and ignores any that no longer point
at an item the living is carrying, so a stolen or destroyed item silently
stops counting.
"""

from __future__ import annotations

from uuid import UUID

from livingmud.core.constants import UNARMED_SKILL
from livingmud.core.logging import get_logger
from livingmud.engine.messaging import Notifier
from livingmud.models.items import Armor, Item, Weapon
from livingmud.models.living import Living
from livingmud.models.world import World


logger = get_logger(__name__)


class EquipmentModifiers:
    """Equip operations and armor/weapon aggregation."""

    def __init__(self, world: World, notifier: Notifier) -> None:
        self._world = world
        self._notifier = notifier

    # =========================================================================
    # Resolution
    # =========================================================================

    def _held(self, entity: Living, uid: UUID | None) -> Item | None:
        item = self._world.get_item(uid)
        if item is None or item.container_uid != entity.uid:
            return None
        return item

    def wielded_weapon(self, entity: Living) -> Weapon | None:
        item = self._held(entity, entity.equipment.wielded_uid)
        return item if isinstance(item, Weapon) else None

    def worn_armor(self, entity: Living) -> list[Armor]:
        pieces = []
        for uid in entity.equipment.worn.values():
            item = self._held(entity, uid)
            if isinstance(item, Armor):
                pieces.append(item)
        return pieces

    def weapon_skill(self, entity: Living) -> str:
        """Skill used for attacks: the weapon's skill type, else unarmed."""
        weapon = self.wielded_weapon(entity)
        return weapon.skill_type if weapon is not None else UNARMED_SKILL

    # =========================================================================
    # Aggregates
    # =========================================================================

    def total_armor(self, entity: Living) -> int:
        return sum(piece.armor_class for piece in self.worn_armor(entity))

    def total_spell_failure(self, entity: Living) -> int:
        return sum(piece.spell_failure for piece in self.worn_armor(entity))

    def total_dodge_penalty(self, entity: Living) -> int:
        return sum(piece.dodge_penalty for piece in self.worn_armor(entity))

    # =========================================================================
    # Weapons
    # =========================================================================

    def wield(self, entity: Living, item: Item) -> bool:
        """Wield a carried weapon, unwielding the current one first.

        Returns:
            False if the item is not a weapon or not carried by the living.
        """
        if not item.is_weapon or item.container_uid != entity.uid:
            return False
        if entity.equipment.wielded_uid == item.uid:
            return True

        if entity.equipment.wielded_uid is not None:
            self.unwield(entity)

        entity.equipment.wielded_uid = item.uid
        self._notifier.tell(entity.uid, f"You wield {item.short}.")
        self._notifier.tell_room(
            entity.location,
            f"{entity.display_name} wields {item.short}.",
            exclude=(entity.uid,),
        )
        logger.debug("Weapon wielded", entity=entity.name, item=item.name)
        return True

    def unwield(self, entity: Living) -> bool:
        """Stop wielding; the weapon stays in the inventory."""
        uid = entity.equipment.wielded_uid
        if uid is None:
            return False

        entity.equipment.wielded_uid = None
        item = self._world.get_item(uid)
        if item is not None:
            self._notifier.tell(entity.uid, f"You stop wielding {item.short}.")
        return True

    # =========================================================================
    # Armor
    # =========================================================================

    def wear(self, entity: Living, item: Item) -> bool:
        """Wear a carried armor piece in its slot.

        Returns:
            False if the item is not armor, not carried, has no slot, is
            already worn, or its slot is occupied.
        """
        if not isinstance(item, Armor) or item.container_uid != entity.uid:
            return False
        if not item.slot:
            return False
        worn = entity.equipment.worn
        if item.uid in worn.values() or self._held(entity, worn.get(item.slot)) is not None:
            return False

        worn[item.slot] = item.uid
        self._notifier.tell(entity.uid, f"You wear {item.short}.")
        self._notifier.tell_room(
            entity.location,
            f"{entity.display_name} wears {item.short}.",
            exclude=(entity.uid,),
        )
        logger.debug("Armor worn", entity=entity.name, item=item.name, slot=item.slot)
        return True

    def remove_armor(self, entity: Living, slot: str) -> bool:
        """Take off whatever is worn in ``slot``."""
        if not slot or slot not in entity.equipment.worn:
            return False

        uid = entity.equipment.worn.pop(slot)
        item = self._world.get_item(uid)
        if item is not None:
            self._notifier.tell(entity.uid, f"You remove {item.short}.")
        return True

    def remove_armor_item(self, entity: Living, item: Item) -> bool:
        """Take off a specific armor piece, whatever slot it is in."""
        for slot, uid in entity.equipment.worn.items():
            if uid == item.uid:
                return self.remove_armor(entity, slot)
        return False

    # =========================================================================
    # Death support
    # =========================================================================

    def strip(self, entity: Living) -> list[UUID]:
        """Unequip everything without messages.

        Returns:
            Uids of the items that were wielded or worn.
        """
        stripped = []
        if entity.equipment.wielded_uid is not None:
            stripped.append(entity.equipment.wielded_uid)
        stripped.extend(entity.equipment.worn.values())
        entity.equipment.wielded_uid = None
        entity.equipment.worn = {}
        return stripped

    def reequip(self, entity: Living) -> int:
        """Re-equip the items a player had on at death, if carried again.

        Items not yet recovered stay on the list for a later call.

        Returns:
            Number of items put back on.
        """
        if entity.player is None or not entity.player.reequip_uids:
            return 0

        restored = 0
        pending = []
        for uid in entity.player.reequip_uids:
            item = self._held(entity, uid)
            if item is None:
                pending.append(uid)
            elif (item.is_weapon and self.wield(entity, item)) or self.wear(entity, item):
                restored += 1
        entity.player.reequip_uids = pending
        return restored


__all__ = ["EquipmentModifiers"]
