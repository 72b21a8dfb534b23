"""Mana-fuelled spells.

A cast is checked in full before anything changes: the caster must know
the spell, be allowed to use its school, meet the minimum school skill, have
a valid target and enough mana. Only then is mana spent. Armor can still
make the spell fizzle after that, which costs the mana but teaches the
school a little.

Spell power is ``10 + school skill + int/2``; each spell turns power into
damage or healing its own way.

Example:
    >>> result = caster.cast(alice, "magic_missile", goblin)
    >>> result.success, result.amount
    (True, 2)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from livingmud.core.constants import (
    MAX_SPELL_DIFFICULTY,
    SPELL_FIZZLE_DIFFICULTY,
    SPELL_POWER_BASE,
)
from livingmud.core.exceptions import ResourceExhaustedError
from livingmud.core.logging import get_logger
from livingmud.engine.combat import CombatEngine
from livingmud.engine.dice import DiceRoller
from livingmud.engine.equipment import EquipmentModifiers
from livingmud.engine.messaging import Notifier
from livingmud.engine.progression import ProgressionEngine
from livingmud.engine.resources import ResourceRegulator
from livingmud.models.living import Living
from livingmud.models.world import World


logger = get_logger(__name__)


@dataclass(frozen=True)
class Spell:
    """Static definition of a spell.

    Attributes:
        spell_id: Identifier stored in a living's known spells.
        name: Display name.
        school: Magic school skill used and trained.
        mana_cost: Mana spent on every attempt that passes the checks.
        min_skill: School skill needed to cast.
        offensive: Damaging spells need another living as target.
        verb: Phrase used in messages ("hurl a ball of fire at").
        learn_skill: School skill needed to learn the spell.
    """

    spell_id: str
    name: str
    school: str
    mana_cost: int
    min_skill: int
    offensive: bool
    verb: str
    learn_skill: int = 0


@dataclass(frozen=True)
class SpellResult:
    """Outcome of a cast attempt.

    Attributes:
        success: Whether the spell took effect.
        reason: Why it did not ('' on success).
        amount: Damage dealt or HP restored.
        mana_spent: Mana consumed by the attempt.
    """

    success: bool
    reason: str = ""
    amount: int = 0
    mana_spent: int = 0


SPELLBOOK: dict[str, Spell] = {
    "magic_missile": Spell(
        "magic_missile", "Magic Missile", "evocation", 5, 0, True,
        "launch a bolt of magical force at",
    ),
    "fireball": Spell(
        "fireball", "Fireball", "evocation", 15, 10, True,
        "hurl a ball of fire at", learn_skill=10,
    ),
    "heal": Spell(
        "heal", "Heal", "abjuration", 10, 0, False,
        "channel healing energy into",
    ),
    "shield": Spell(
        "shield", "Shield", "abjuration", 8, 5, False,
        "conjure a shimmering shield around", learn_skill=5,
    ),
}


class SpellCaster:
    """Validates, pays for and resolves spells."""

    def __init__(
        self,
        world: World,
        dice: DiceRoller,
        notifier: Notifier,
        progression: ProgressionEngine,
        resources: ResourceRegulator,
        equipment: EquipmentModifiers,
        combat: CombatEngine,
    ) -> None:
        self._world = world
        self._dice = dice
        self._notifier = notifier
        self._progression = progression
        self._resources = resources
        self._equipment = equipment
        self._combat = combat
        self._effects: dict[str, Callable[[int], int]] = {
            "magic_missile": lambda power: power // 4 + power // 4,
            "fireball": lambda power: power // 2 + self._dice.below(power // 2),
            "heal": lambda power: power // 2 + self._dice.below(power // 2),
            "shield": lambda power: max(2, power // 4 + self._dice.below(power // 4)),
        }

    @staticmethod
    def spell_power(caster: Living, spell: Spell) -> int:
        return SPELL_POWER_BASE + caster.query_skill(spell.school) + caster.stats.intelligence // 2

    # =========================================================================
    # Learning
    # =========================================================================

    def learn(self, entity: Living, spell_id: str) -> bool:
        """Add a spell to a living's repertoire if its school skill allows.

        Relearning a known spell is a no-op that still succeeds.

        Returns:
            False if no such spell exists or the school skill is below the
            spell's learn requirement.
        """
        spell = SPELLBOOK.get(spell_id)
        if spell is None:
            return False
        if spell_id in entity.skills.known_spells:
            return True

        skill = entity.query_skill(spell.school)
        if skill < spell.learn_skill:
            self._notifier.tell(
                entity.uid,
                f"You need {spell.school} skill of at least {spell.learn_skill} "
                f"to learn {spell.name}. (You have {skill})",
            )
            return False

        entity.skills.known_spells = entity.skills.known_spells | {spell_id}
        self._notifier.tell(entity.uid, f"You have learned {spell.name}!")
        logger.info("Spell learned", entity=entity.name, spell=spell_id)
        return True

    # =========================================================================
    # Validation
    # =========================================================================

    def _rejection(self, caster: Living, spell: Spell, target: Living | None) -> str:
        if not caster.is_alive:
            return "You cannot cast spells in your current state."
        if spell.spell_id not in caster.skills.known_spells:
            return f"You don't know how to cast {spell.name}."
        if not self._progression.can_use_skill(caster, spell.school):
            return f"You don't know the {spell.school} school of magic."
        skill = caster.query_skill(spell.school)
        if skill < spell.min_skill:
            return f"You need at least {spell.min_skill} {spell.school} skill to cast {spell.name}."
        if target is None:
            return f"Cast {spell.name} at whom?"
        if spell.offensive and target.uid == caster.uid:
            return "You can't target yourself!"
        if not target.is_alive or not self._world.is_colocated(caster, target):
            return "That's not a valid target."
        return ""

    # =========================================================================
    # Casting
    # =========================================================================

    def cast(self, caster: Living, spell_id: str, target: Living | None = None) -> SpellResult:
        """Attempt to cast a spell.

        Offensive spells default to the caster's current opponent; others
        default to the caster.

        Returns:
            The outcome; failed checks leave the caster untouched.
        """
        spell = SPELLBOOK.get(spell_id)
        if spell is None:
            return SpellResult(success=False, reason="You know of no such spell.")

        if target is None:
            target = self._combat.query_attacker(caster) if spell.offensive else caster

        reason = self._rejection(caster, spell, target)
        if reason:
            self._notifier.tell(caster.uid, reason)
            return SpellResult(success=False, reason=reason)

        try:
            self._resources.spend_mana(caster, spell.mana_cost)
        except ResourceExhaustedError:
            reason = (
                f"You don't have enough mana to cast {spell.name}. "
                f"(Need {spell.mana_cost}, have {caster.vitals.mana})"
            )
            self._notifier.tell(caster.uid, reason)
            return SpellResult(success=False, reason=reason)

        failure = self._equipment.total_spell_failure(caster)
        if failure > 0 and self._dice.percent() < failure:
            self._notifier.tell(caster.uid, "Your armor interferes with the spell! The magic fizzles.")
            self._progression.train(caster, spell.school, SPELL_FIZZLE_DIFFICULTY)
            logger.info("Spell fizzled", caster=caster.name, spell=spell.spell_id, failure=failure)
            return SpellResult(success=False, reason="fizzled", mana_spent=spell.mana_cost)

        assert target is not None
        amount = self._effects[spell.spell_id](self.spell_power(caster, spell))
        if spell.offensive:
            amount = self._strike(caster, spell, target, amount)
        else:
            amount = self._mend(caster, spell, target, amount)

        self._progression.train(caster, spell.school, min(10 + spell.min_skill, MAX_SPELL_DIFFICULTY))
        logger.info("Spell cast", caster=caster.name, spell=spell.spell_id, target=target.name, amount=amount)
        return SpellResult(success=True, amount=amount, mana_spent=spell.mana_cost)

    def _strike(self, caster: Living, spell: Spell, target: Living, damage: int) -> int:
        self._notifier.tell(caster.uid, f"You {spell.verb} {target.short}!")
        self._notifier.tell(target.uid, f"{caster.display_name} casts {spell.name} at you!")
        self._notifier.tell_room(
            caster.location,
            f"{caster.display_name} casts {spell.name} at {target.short}!",
            exclude=(caster.uid, target.uid),
        )

        actual = self._combat.receive_damage(target, damage, source=caster)
        self._notifier.tell(caster.uid, f"The {spell.name.lower()} deals {actual} damage!")

        if caster.combat.attacker_uid != target.uid:
            self._combat.start_combat(caster, target)
        return actual

    def _mend(self, caster: Living, spell: Spell, target: Living, amount: int) -> int:
        restored = self._resources.heal(target, amount)
        if target.uid == caster.uid:
            self._notifier.tell(caster.uid, f"You {spell.verb} yourself.")
        else:
            self._notifier.tell(caster.uid, f"You {spell.verb} {target.short}.")
            self._notifier.tell(target.uid, f"{caster.display_name} casts {spell.name} on you.")
        self._notifier.tell(
            target.uid,
            f"You recover {restored} health. (HP: {target.vitals.hp}/{target.vitals.max_hp})",
        )
        return restored


__all__ = [
    "Spell",
    "SpellResult",
    "SPELLBOOK",
    "SpellCaster",
]
