"""Probabilistic skill and stat advancement.

Skills improve through use. Each attempt rolls against a chance that
shrinks as the skill grows (``30 / (1 + skill/10)`` percent at difficulty
10), so a novice learns quickly and a master barely moves. Every successful
skill gain also gives the stats behind that skill a chance to grow, with an
even steeper curve: ``5 / (1 + stat/3)`` percent, falling back to a
per-mille roll once that rounds down to zero so a stat never stops growing
entirely.

Example:
    >>> engine = ProgressionEngine(DiceRoller(), bus)
    >>> engine.skill_gain_chance(0, 10)
    30.0
    >>> engine.train(hero, "sword", difficulty=12)
    False
"""

from __future__ import annotations

import math

from livingmud.core.constants import (
    BASIC_SKILLS,
    MAX_SKILL_CHANCE,
    MIN_SKILL_CHANCE,
    SKILL_BASE_CHANCE,
    SKILL_STAT_TABLE,
    STAT_BASE_PERCENT,
    STAT_BASE_PERMILLE,
)
from livingmud.core.logging import get_logger
from livingmud.engine.dice import DiceRoller
from livingmud.engine.messaging import Notifier
from livingmud.models.living import Living, resolve_stat


logger = get_logger(__name__)


def stats_for_skill(skill: str) -> tuple[str, ...]:
    """Stats that may grow alongside a gain in ``skill``."""
    for family, stats in SKILL_STAT_TABLE.items():
        if skill in family:
            return stats
    return ()


class ProgressionEngine:
    """Skill and stat advancement for livings."""

    def __init__(self, dice: DiceRoller, notifier: Notifier) -> None:
        self._dice = dice
        self._notifier = notifier

    # =========================================================================
    # Skills
    # =========================================================================

    @staticmethod
    def can_use_skill(entity: Living, skill: str) -> bool:
        """Whether the living may train ``skill``.

        Basic skills are always allowed. Otherwise the skill must be in the
        living's allowed set, where an empty set means unrestricted.
        """
        if skill in BASIC_SKILLS:
            return True
        allowed = entity.skills.allowed
        return not allowed or skill in allowed

    @staticmethod
    def skill_gain_chance(current: int, difficulty: int) -> float:
        """Percent chance of gaining a point at the given skill level.

        Strictly non-increasing in ``current`` for a fixed difficulty.
        """
        divisor = 1 + current / 10
        chance = SKILL_BASE_CHANCE / divisor * difficulty / 10
        return min(max(chance, MIN_SKILL_CHANCE), MAX_SKILL_CHANCE)

    def advance_skill(self, entity: Living, skill: str, difficulty: int) -> bool:
        """Roll for a one-point gain in ``skill``.

        Args:
            entity: The living using the skill.
            skill: Skill name.
            difficulty: How demanding the use was; 10 is the baseline.

        Returns:
            True if the skill went up.
        """
        if not self.can_use_skill(entity, skill):
            return False

        current = entity.query_skill(skill)
        chance = self.skill_gain_chance(current, difficulty)
        if self._dice.percent() >= chance:
            return False

        entity.set_skill(skill, current + 1)
        logger.info(
            "Skill advanced",
            entity=entity.name,
            skill=skill,
            value=current + 1,
            difficulty=difficulty,
        )
        return True

    def query_skill(self, entity: Living, skill: str) -> int:
        return entity.query_skill(skill)

    def set_skill(self, entity: Living, skill: str, value: int) -> None:
        """Privileged direct assignment; negative values clamp to 0."""
        entity.set_skill(skill, value)
        logger.info("Skill set", entity=entity.name, skill=skill, value=entity.query_skill(skill))

    # =========================================================================
    # Stats
    # =========================================================================

    @staticmethod
    def stat_gain_odds(current: int) -> tuple[int, int]:
        """Chance of a stat gain as ``(successes, out_of)``.

        Returns a percent while that is at least 1, otherwise a per-mille
        value that never drops below 1.
        """
        divisor = 1 + current / 3
        percent = math.floor(STAT_BASE_PERCENT / divisor)
        if percent > 0:
            return percent, 100
        return max(1, math.floor(STAT_BASE_PERMILLE / divisor)), 1000

    def advance_stat(self, entity: Living, stat: str) -> bool:
        """Roll for a one-point gain in ``stat``.

        CON and INT gains re-derive max_hp and max_mana.

        Returns:
            True if the stat went up.
        """
        field = resolve_stat(stat)
        current = entity.query_stat(field)
        successes, out_of = self.stat_gain_odds(current)
        roll = self._dice.percent() if out_of == 100 else self._dice.permille()
        if roll >= successes:
            return False

        entity.set_stat(field, current + 1)
        logger.info("Stat advanced", entity=entity.name, stat=field, value=current + 1)
        return True

    def advance_stats_for_skill(self, entity: Living, skill: str) -> list[str]:
        """Give every stat behind ``skill`` an independent chance to grow.

        Returns:
            The stats that went up.
        """
        return [stat for stat in stats_for_skill(skill) if self.advance_stat(entity, stat)]

    # =========================================================================
    # Training
    # =========================================================================

    def train(self, entity: Living, skill: str, difficulty: int) -> bool:
        """Use a skill: roll for a gain and, on success, for its stats.

        The living is told about every improvement.

        Returns:
            True if the skill went up.
        """
        if not self.advance_skill(entity, skill, difficulty):
            return False

        self._notifier.tell(entity.uid, f"[Your {skill} skill improves!]")
        for stat in self.advance_stats_for_skill(entity, skill):
            self._notifier.tell(entity.uid, f"[Your {stat} increases!]")
        return True


__all__ = [
    "stats_for_skill",
    "ProgressionEngine",
]
