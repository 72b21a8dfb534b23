"""Item entities referenced by livings.

Weapons, armor and drinks exist independently of the livings that hold
them. A living only stores item uids; wielding, wearing or unequipping an
item never creates or destroys it. Where an item currently is follows the
same rule as the rest of the world model: ``container_uid`` names the living
or corpse holding it, otherwise ``location`` names the room it lies in.

The combat-relevant numbers on weapons and armor are frozen once the item
exists.

Example:
    >>> catalog = default_catalog()
    >>> dagger = catalog.clone("rusty_dagger")
    >>> dagger.damage
    8
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from livingmud.core.constants import (
    DEFAULT_SKILL_BY_WEAPON_KIND,
    DODGE_PENALTY_BY_WEIGHT,
    SPELL_FAILURE_BY_WEIGHT,
    UNARMED_SKILL,
)
from livingmud.core.exceptions import ValidationError
from livingmud.models.enums import WeightCategory


# =============================================================================
# Item Entities
# =============================================================================


class Item(BaseModel):
    """Base item entity."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
        use_enum_values=True,
    )

    uid: UUID = Field(default_factory=uuid4, description="Unique identifier")
    template_id: str = Field(default="", description="Catalog template this was cloned from")
    kind: Literal["generic"] = "generic"
    name: str = Field(default="thing", description="Keyword used to refer to the item")
    short: str = Field(default="a thing", description="Short description used in messages")

    # Placement
    container_uid: UUID | None = Field(default=None, description="Living or corpse holding it")
    location: str | None = Field(default=None, description="Room it lies in when not held")

    @property
    def is_weapon(self) -> bool:
        return False

    @property
    def is_armor(self) -> bool:
        return False


class Weapon(Item):
    """A wieldable weapon."""

    kind: Literal["weapon"] = "weapon"
    damage: int = Field(default=5, ge=0, frozen=True, description="Base damage")
    weapon_kind: str = Field(default="melee", frozen=True, description="Blade, piercing, blunt...")
    skill_type: str = Field(default="", frozen=True, description="Skill used and trained")

    def model_post_init(self, __context: Any) -> None:
        # Frozen fields cannot be assigned after init, so fill the default via __dict__
        if not self.skill_type:
            self.__dict__["skill_type"] = DEFAULT_SKILL_BY_WEAPON_KIND.get(
                self.weapon_kind, UNARMED_SKILL
            )

    @property
    def is_weapon(self) -> bool:
        return True


class Armor(Item):
    """A wearable armor piece occupying a single slot."""

    kind: Literal["armor"] = "armor"
    armor_class: int = Field(default=1, ge=0, frozen=True, description="Damage absorbed per hit")
    slot: str = Field(default="torso", frozen=True, description="Body slot")
    weight_category: WeightCategory = Field(default=WeightCategory.NONE, frozen=True)

    @computed_field(description="Spell failure percent contributed by this piece")
    @property
    def spell_failure(self) -> int:
        return SPELL_FAILURE_BY_WEIGHT[self.weight_category]

    @computed_field(description="Dodge penalty percent contributed by this piece")
    @property
    def dodge_penalty(self) -> int:
        return DODGE_PENALTY_BY_WEIGHT[self.weight_category]

    @property
    def is_armor(self) -> bool:
        return True


class Drink(Item):
    """An intoxicating drink, consumed when drunk."""

    kind: Literal["drink"] = "drink"
    intoxication: int = Field(default=10, ge=0, le=100, frozen=True)


AnyItem = Annotated[Union[Weapon, Armor, Drink, Item], Field(discriminator="kind")]


# =============================================================================
# Item Catalog
# =============================================================================


class ItemCatalog:
    """Factory for items cloned from named templates.

    Death handling uses this to instantiate loot drops; the catalog is the
    only place new item entities come from at runtime.
    """

    def __init__(self) -> None:
        self._templates: dict[str, tuple[type[Item], dict[str, Any]]] = {}

    def register(self, template_id: str, item_type: type[Item], **fields: Any) -> None:
        """Register (or replace) a template.

        Args:
            template_id: Name used by ``clone`` and monster drop lists.
            item_type: Item class to instantiate.
            **fields: Field values for every clone.
        """
        self._templates[template_id] = (item_type, fields)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def clone(self, template_id: str, **overrides: Any) -> Item:
        """Create a fresh item from a template.

        Args:
            template_id: Registered template name.
            **overrides: Field values replacing the template's.

        Returns:
            A new item with its own uid.

        Raises:
            ValidationError: If the template is unknown.
        """
        if template_id not in self._templates:
            raise ValidationError(
                f"Unknown item template: {template_id}",
                field_name="template_id",
                invalid_value=template_id,
            )
        item_type, fields = self._templates[template_id]
        return item_type(template_id=template_id, **{**fields, **overrides})


def default_catalog() -> ItemCatalog:
    """Build the catalog of stock items used by the bundled monsters."""
    catalog = ItemCatalog()

    # Weapons
    catalog.register("rusty_dagger", Weapon, name="dagger", short="a rusty dagger",
                     damage=8, weapon_kind="piercing")
    catalog.register("iron_sword", Weapon, name="sword", short="an iron sword",
                     damage=10, weapon_kind="blade", skill_type="sword")
    catalog.register("goblin_blade", Weapon, name="blade", short="a jagged goblin blade",
                     damage=18, weapon_kind="blade")
    catalog.register("troll_club", Weapon, name="club", short="a massive troll club",
                     damage=28, weapon_kind="blunt", skill_type="club")
    catalog.register("dragonslayer", Weapon, name="dragonslayer",
                     short="the legendary Dragonslayer sword", damage=50, weapon_kind="blade")

    # Armor
    catalog.register("leather_armor", Armor, name="armor", short="leather armor",
                     armor_class=2, slot="torso", weight_category=WeightCategory.LIGHT)
    catalog.register("wolf_pelt", Armor, name="pelt", short="a wolf pelt",
                     armor_class=2, slot="torso", weight_category=WeightCategory.LIGHT)
    catalog.register("goblin_mail", Armor, name="chainmail", short="crude goblin chainmail",
                     armor_class=4, slot="torso", weight_category=WeightCategory.MEDIUM)
    catalog.register("iron_helm", Armor, name="helm", short="an iron helm",
                     armor_class=2, slot="head", weight_category=WeightCategory.MEDIUM)
    catalog.register("troll_hide", Armor, name="hide", short="tough troll hide armor",
                     armor_class=6, slot="torso", weight_category=WeightCategory.HEAVY)
    catalog.register("dragonscale", Armor, name="dragonscale",
                     short="magnificent dragonscale armor", armor_class=10, slot="torso",
                     weight_category=WeightCategory.HEAVY)
    catalog.register("spider_silk_gloves", Armor, name="gloves", short="spider silk gloves",
                     armor_class=1, slot="hands", weight_category=WeightCategory.NONE)

    # Drinks
    catalog.register("ale", Drink, name="ale", short="a mug of ale", intoxication=10)
    catalog.register("firewhisky", Drink, name="whisky", short="a glass of firewhisky",
                     intoxication=30)

    return catalog


__all__ = [
    "Item",
    "Weapon",
    "Armor",
    "Drink",
    "AnyItem",
    "ItemCatalog",
    "default_catalog",
]
