"""Random draws for the engine, backed by the d20 library.

Every probabilistic outcome in combat, progression, spells and loot goes
through a DiceRoller, so a scripted roller reproduces a fight exactly.
The engine's formulas are expressed as "roll in 0..N-1 and compare", which
the helpers below derive from a single ``1dN`` die.

Example:
    >>> roller = DiceRoller(seed=7)
    >>> 0 <= roller.percent() <= 99
    True
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

import d20

from livingmud.core.exceptions import DiceRollError
from livingmud.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static modifier applied.
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int


class DiceRoller:
    """Source of every random number the engine uses."""

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d100', '2d6+3').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        dice_values = self._extract_dice_values(result.expr)
        return DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
        )

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract kept dice values from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values

    # =========================================================================
    # Engine draws
    # =========================================================================

    def below(self, sides: int) -> int:
        """Uniform integer in ``0..sides-1``; 0 when ``sides`` is not positive."""
        if sides <= 0:
            return 0
        return self.roll(f"1d{sides}").total - 1

    def percent(self) -> int:
        """Uniform integer in 0..99."""
        return self.below(100)

    def permille(self) -> int:
        """Uniform integer in 0..999."""
        return self.below(1000)


__all__ = [
    "DiceExpression",
    "DiceRoller",
]
