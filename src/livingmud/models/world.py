"""The World arena: every living, item and corpse, indexed by uid.

Entities never hold references to each other. A combat target or an
equipped item is a uid that is looked up here each time it is needed, so
an entity destroyed earlier in the same tick simply stops resolving.

Rooms are opaque labels owned by the topology layer; two livings are
co-located when their labels are equal.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from livingmud.core.exceptions import StaleReferenceError
from livingmud.models.corpse import Corpse
from livingmud.models.items import AnyItem, Item
from livingmud.models.living import Living


class World(BaseModel):
    """Arena owning all runtime entities."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    actors: dict[UUID, Living] = Field(default_factory=dict)
    items: dict[UUID, AnyItem] = Field(default_factory=dict)
    corpses: dict[UUID, Corpse] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=datetime.now)

    # =========================================================================
    # Livings
    # =========================================================================

    def add_living(self, living: Living) -> Living:
        self.actors[living.uid] = living
        self.updated_at = datetime.now()
        return living

    def remove_living(self, uid: UUID) -> Living | None:
        living = self.actors.pop(uid, None)
        self.updated_at = datetime.now()
        return living

    def get_living(self, uid: UUID | None) -> Living | None:
        if uid is None:
            return None
        return self.actors.get(uid)

    def require_living(self, uid: UUID) -> Living:
        """Resolve a uid that the caller expects to be present.

        Raises:
            StaleReferenceError: If no living has that uid.
        """
        living = self.actors.get(uid)
        if living is None:
            raise StaleReferenceError("Living no longer exists", entity_id=str(uid))
        return living

    def is_alive(self, uid: UUID | None) -> bool:
        living = self.get_living(uid)
        return living is not None and living.is_alive

    def is_colocated(self, first: Living, second: Living) -> bool:
        return first.location is not None and first.location == second.location

    def livings_at(self, location: str | None, *, exclude: tuple[UUID, ...] = ()) -> list[Living]:
        if location is None:
            return []
        return [
            living
            for living in self.actors.values()
            if living.location == location and living.uid not in exclude
        ]

    # =========================================================================
    # Items
    # =========================================================================

    def add_item(self, item: Item) -> Item:
        self.items[item.uid] = item
        return item

    def get_item(self, uid: UUID | None) -> Item | None:
        if uid is None:
            return None
        return self.items.get(uid)

    def remove_item(self, uid: UUID) -> Item | None:
        return self.items.pop(uid, None)

    def contents_of(self, holder_uid: UUID) -> list[Item]:
        """Items carried by a living or lying in a corpse."""
        return [item for item in self.items.values() if item.container_uid == holder_uid]

    def give_item(self, item: Item, holder_uid: UUID) -> None:
        """Move an item into a living's or corpse's inventory."""
        item.container_uid = holder_uid
        item.location = None

    def drop_item(self, item: Item, location: str | None) -> None:
        """Put an item on the floor of a room."""
        item.container_uid = None
        item.location = location

    # =========================================================================
    # Corpses
    # =========================================================================

    def add_corpse(self, corpse: Corpse) -> Corpse:
        self.corpses[corpse.uid] = corpse
        return corpse

    def get_corpse(self, uid: UUID | None) -> Corpse | None:
        if uid is None:
            return None
        return self.corpses.get(uid)

    def remove_corpse(self, uid: UUID) -> Corpse | None:
        return self.corpses.pop(uid, None)

    # =========================================================================
    # Generic
    # =========================================================================

    def exists(self, uid: UUID | None) -> bool:
        return uid is not None and (uid in self.actors or uid in self.items or uid in self.corpses)


__all__ = ["World"]
