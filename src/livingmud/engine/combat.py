"""Per-heartbeat combat resolution between livings.

Combat is a two-state machine per living (idle, engaged). Engaging a target
also engages the target back, but the two sides then resolve their attacks
independently, each on its own heartbeat. There is no shared round, so
whoever was scheduled first may land an extra blow.

One attack, from the attacker's side:

1. Re-resolve the target by uid; if it is gone, dead or elsewhere, stop.
2. ``hit = clamp(30 + 2*dex + skill/2 - 2*t_agi - t_dodge_eff/3 - intox/2, 5, 95)``
3. Roll 0..99; below ``hit`` is a hit.
4. Hit: ``damage = (base + str/2) * (100 + 2*skill) / 100``; the target's
   armor absorbs all but at least 1 point; the attacker trains its weapon
   skill.
5. Miss: the target trains dodge and the attacker trains at half difficulty.
6. The attacker sobers up a little.

Example:
    >>> combat.start_combat(alice, goblin)
    True
    >>> result = combat.do_attack(alice)
    >>> result.hit_chance
    30
"""

from __future__ import annotations

from dataclasses import dataclass

from livingmud.core.constants import (
    BASE_HIT_CHANCE,
    DODGE_SKILL,
    MAX_COMBAT_DIFFICULTY,
    MAX_HIT_CHANCE,
    MIN_COMBAT_DIFFICULTY,
    MIN_HIT_CHANCE,
)
from livingmud.core.exceptions import InvalidTargetError, StaleReferenceError
from livingmud.core.logging import get_logger
from livingmud.engine.death import DeathHandler
from livingmud.engine.dice import DiceRoller
from livingmud.engine.equipment import EquipmentModifiers
from livingmud.engine.messaging import Notifier
from livingmud.engine.progression import ProgressionEngine
from livingmud.engine.resources import ResourceRegulator
from livingmud.engine.scheduler import TickScheduler
from livingmud.models.living import Living
from livingmud.models.world import World


logger = get_logger(__name__)


CONSIDER_RATINGS: tuple[tuple[int, str], ...] = (
    (20, "is a complete pushover."),
    (10, "looks like easy prey."),
    (5, "should be a comfortable fight."),
    (2, "looks like a fair challenge."),
    (-2, "is evenly matched with you."),
    (-5, "looks like a tough fight."),
    (-10, "would be very dangerous to fight."),
    (-20, "would probably kill you."),
)
ANNIHILATION_RATING = "would annihilate you."


def clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


@dataclass(frozen=True)
class AttackResult:
    """Outcome of one resolved attack.

    Attributes:
        hit: Whether the attack landed.
        roll: The 0..99 roll.
        hit_chance: Percent chance the roll was compared against.
        damage: Raw damage before armor (0 on a miss).
        actual: Damage left after the target's armor (0 on a miss).
        killed: Whether this attack killed the target.
    """

    hit: bool
    roll: int
    hit_chance: int
    damage: int = 0
    actual: int = 0
    killed: bool = False


@dataclass(frozen=True)
class ConsiderResult:
    """Expected outcome of a fight, from the considering living's side.

    Attributes:
        damage_per_round: Expected damage dealt per attack.
        damage_taken_per_round: Expected damage received per attack.
        rounds_to_kill: Attacks needed to kill the target.
        rounds_to_die: Attacks the target needs to kill us.
        advantage: ``rounds_to_die - rounds_to_kill``; positive favours us.
        rating: Human-readable verdict.
    """

    damage_per_round: int
    damage_taken_per_round: int
    rounds_to_kill: int
    rounds_to_die: int
    advantage: int
    rating: str


class CombatEngine:
    """Engagement, attack resolution and damage for livings."""

    def __init__(
        self,
        world: World,
        scheduler: TickScheduler,
        dice: DiceRoller,
        notifier: Notifier,
        progression: ProgressionEngine,
        resources: ResourceRegulator,
        equipment: EquipmentModifiers,
        death: DeathHandler,
    ) -> None:
        self._world = world
        self._scheduler = scheduler
        self._dice = dice
        self._notifier = notifier
        self._progression = progression
        self._resources = resources
        self._equipment = equipment
        self._death = death

    # =========================================================================
    # Engagement
    # =========================================================================

    def start_combat(self, entity: Living, target: Living | None) -> bool:
        """Engage ``target``; the target engages back if it is not fighting.

        Returns:
            False (and nothing changes) if the target is the entity itself,
            is not a living alive in the world, or is already the entity's
            current target.
        """
        return self._engage(entity, target, announce=True)

    def _engage(self, entity: Living, target: Living | None, *, announce: bool) -> bool:
        if target is None or target.uid == entity.uid:
            return False
        if not entity.is_alive or not self._world.is_alive(target.uid):
            return False
        if entity.in_combat and entity.combat.attacker_uid == target.uid:
            return False

        entity.engage(target.uid)
        self._scheduler.ensure_active(entity)
        logger.info("Combat started", attacker=entity.name, target=target.name)

        if announce:
            self._notifier.tell(entity.uid, f"You attack {target.short}!")
            self._notifier.tell(target.uid, f"{entity.display_name} attacks you!")

        if not target.in_combat:
            self._engage(target, entity, announce=False)
        return True

    def stop_combat(self, entity: Living) -> bool:
        """Disengage; the living is descheduled if it has nothing else to do.

        Returns:
            False if the living was not engaged.
        """
        if not entity.in_combat and entity.combat.attacker_uid is None:
            return False

        entity.disengage()
        self._scheduler.stop_if_idle(entity)
        logger.info("Combat stopped", entity=entity.name)
        return True

    def query_attacker(self, entity: Living) -> Living | None:
        """The current target, if it still resolves to a living."""
        if not entity.in_combat:
            return None
        return self._world.get_living(entity.combat.attacker_uid)

    # =========================================================================
    # Formulas
    # =========================================================================

    def query_hit_chance(self, attacker: Living, target: Living) -> int:
        """Percent chance that ``attacker`` hits ``target``, within 5..95."""
        weapon_skill = attacker.query_skill(self._equipment.weapon_skill(attacker))
        penalty = min(self._equipment.total_dodge_penalty(target), 100)
        effective_dodge = target.query_skill(DODGE_SKILL) * (100 - penalty) // 100

        chance = (
            BASE_HIT_CHANCE
            + 2 * attacker.stats.dexterity
            + weapon_skill // 2
            - 2 * target.stats.agility
            - effective_dodge // 3
            - attacker.vitals.intoxication // 2
        )
        return clamp(chance, MIN_HIT_CHANCE, MAX_HIT_CHANCE)

    def query_damage(self, attacker: Living) -> int:
        """Raw damage of one hit, before the target's armor."""
        weapon = self._equipment.wielded_weapon(attacker)
        strength = attacker.stats.strength
        base = weapon.damage if weapon is not None else 1 + strength // 3
        weapon_skill = attacker.query_skill(self._equipment.weapon_skill(attacker))
        return (base + strength // 2) * (100 + 2 * weapon_skill) // 100

    @staticmethod
    def skill_difficulty(target: Living) -> int:
        """Training difficulty of fighting ``target``: tougher targets teach more."""
        return clamp(
            MIN_COMBAT_DIFFICULTY + target.vitals.max_hp // 5,
            MIN_COMBAT_DIFFICULTY,
            MAX_COMBAT_DIFFICULTY,
        )

    # =========================================================================
    # Damage
    # =========================================================================

    def receive_damage(self, target: Living, amount: int, source: Living | None = None) -> int:
        """Apply damage through the target's armor.

        At least one point always gets through. Reaching 0 HP kills the
        target; a target that is already dead or gone takes nothing.

        Returns:
            Damage after armor, at least 1 (0 if the target could not be hurt).
        """
        if not target.is_alive or self._world.get_living(target.uid) is not target:
            return 0

        actual = max(1, amount - self._equipment.total_armor(target))
        target.set_hp(target.vitals.hp - actual)
        self._scheduler.ensure_active(target)

        if target.vitals.hp == 0:
            self._death.handle_death(target, killer=source)
        return actual

    # =========================================================================
    # Attack resolution
    # =========================================================================

    def _resolve_target(self, entity: Living) -> Living:
        """Re-resolve the current target by uid.

        Raises:
            InvalidTargetError: If the target is gone, dead or elsewhere.
        """
        target_uid = entity.combat.attacker_uid
        try:
            target = self._world.require_living(target_uid)
        except StaleReferenceError as exc:
            raise InvalidTargetError(
                "Target no longer exists",
                combatant_id=str(entity.uid),
                target_id=str(target_uid),
            ) from exc
        if not target.is_alive or not self._world.is_colocated(entity, target):
            raise InvalidTargetError(
                "Target is out of reach",
                combatant_id=str(entity.uid),
                target_id=str(target_uid),
            )
        return target

    def do_attack(self, entity: Living) -> AttackResult | None:
        """Resolve one attack by an engaged living.

        Returns:
            The outcome, or None if the living is not engaged or its target
            is no longer valid (in which case it disengages).
        """
        if not entity.in_combat:
            return None

        try:
            target = self._resolve_target(entity)
        except InvalidTargetError as exc:
            logger.debug("Combat target lost", entity=entity.name, reason=exc.message)
            self.stop_combat(entity)
            return None

        skill = self._equipment.weapon_skill(entity)
        hit_chance = self.query_hit_chance(entity, target)
        difficulty = self.skill_difficulty(target)
        roll = self._dice.percent()

        if roll < hit_chance:
            result = self._resolve_hit(entity, target, skill, difficulty, roll, hit_chance)
        else:
            result = self._resolve_miss(entity, target, skill, difficulty, roll, hit_chance)

        self._resources.decay_intoxication(entity)
        return result

    def _resolve_hit(
        self,
        entity: Living,
        target: Living,
        skill: str,
        difficulty: int,
        roll: int,
        hit_chance: int,
    ) -> AttackResult:
        damage = self.query_damage(entity)
        expected = max(1, damage - self._equipment.total_armor(target))

        self._notifier.tell(entity.uid, f"You hit {target.short} for {expected} damage.")
        self._notifier.tell(target.uid, f"{entity.display_name} hits you for {expected} damage.")
        self._notifier.tell_room(
            entity.location,
            f"{entity.display_name} hits {target.short}.",
            exclude=(entity.uid, target.uid),
        )

        actual = self.receive_damage(target, damage, source=entity)
        self._progression.train(entity, skill, difficulty)

        killed = not target.is_alive
        if killed:
            self.stop_combat(entity)

        logger.debug(
            "Attack hit",
            attacker=entity.name,
            target=target.name,
            roll=roll,
            hit_chance=hit_chance,
            damage=damage,
            actual=actual,
            killed=killed,
        )
        return AttackResult(
            hit=True,
            roll=roll,
            hit_chance=hit_chance,
            damage=damage,
            actual=actual,
            killed=killed,
        )

    def _resolve_miss(
        self,
        entity: Living,
        target: Living,
        skill: str,
        difficulty: int,
        roll: int,
        hit_chance: int,
    ) -> AttackResult:
        self._notifier.tell(entity.uid, f"You miss {target.short}.")
        self._notifier.tell(target.uid, f"{entity.display_name} misses you.")
        self._notifier.tell_room(
            entity.location,
            f"{entity.display_name} misses {target.short}.",
            exclude=(entity.uid, target.uid),
        )

        self._progression.train(target, DODGE_SKILL, difficulty)
        self._progression.train(entity, skill, difficulty // 2)

        logger.debug("Attack missed", attacker=entity.name, target=target.name, roll=roll)
        return AttackResult(hit=False, roll=roll, hit_chance=hit_chance)

    # =========================================================================
    # Evaluation and aggression
    # =========================================================================

    def consider(self, entity: Living, target: Living) -> ConsiderResult:
        """Estimate how a fight between the two would go."""
        our_dpr = max(
            1,
            self.query_hit_chance(entity, target)
            * (self.query_damage(entity) - self._equipment.total_armor(target))
            // 100,
        )
        their_dpr = max(
            1,
            self.query_hit_chance(target, entity)
            * (self.query_damage(target) - self._equipment.total_armor(entity))
            // 100,
        )

        rounds_to_kill = -(-target.vitals.hp // our_dpr)
        rounds_to_die = -(-entity.vitals.hp // their_dpr)
        advantage = rounds_to_die - rounds_to_kill

        rating = ANNIHILATION_RATING
        for threshold, text in CONSIDER_RATINGS:
            if advantage >= threshold:
                rating = text
                break

        return ConsiderResult(
            damage_per_round=our_dpr,
            damage_taken_per_round=their_dpr,
            rounds_to_kill=rounds_to_kill,
            rounds_to_die=rounds_to_die,
            advantage=advantage,
            rating=rating,
        )

    def provoke(self, monster: Living, intruder: Living) -> bool:
        """Let an aggressive monster attack a living entering its room.

        Returns:
            True if the monster attacked.
        """
        if monster.monster is None or not monster.monster.aggressive:
            return False
        if monster.in_combat or intruder.uid == monster.uid:
            return False
        if not monster.is_alive or not intruder.is_alive:
            return False
        if not self._world.is_colocated(monster, intruder):
            return False

        self._notifier.tell_room(
            monster.location,
            f"{monster.display_name} attacks {intruder.short}!",
            exclude=(monster.uid, intruder.uid),
        )
        return self.start_combat(monster, intruder)


__all__ = [
    "AttackResult",
    "ConsiderResult",
    "CombatEngine",
    "clamp",
]
