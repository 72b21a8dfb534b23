"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the LivingMUD test suite.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from livingmud.engine.dice import DiceRoller


if TYPE_CHECKING:
    from collections.abc import Generator

    from livingmud.core.config import Settings
    from livingmud.engine.game_loop import MudEngine
    from livingmud.engine.messaging import MessageBus
    from livingmud.models.living import Living
    from livingmud.models.world import World


# =============================================================================
# Scripted Dice
# =============================================================================


class ScriptedDice(DiceRoller):
    """DiceRoller whose draws are queued by the test.

    Unscripted draws fall back to the least eventful value: a percent or
    per-mille roll of the maximum (every "roll below" check fails) and a
    ``below`` roll of 0.
    """

    def __init__(self) -> None:
        super().__init__()
        self.percents: deque[int] = deque()
        self.permilles: deque[int] = deque()
        self.belows: deque[int] = deque()
        self.calls: list[str] = []

    def script(
        self,
        *,
        percents: Iterable[int] = (),
        permilles: Iterable[int] = (),
        belows: Iterable[int] = (),
    ) -> ScriptedDice:
        self.percents.extend(percents)
        self.permilles.extend(permilles)
        self.belows.extend(belows)
        return self

    def percent(self) -> int:
        self.calls.append("percent")
        return self.percents.popleft() if self.percents else 99

    def permille(self) -> int:
        self.calls.append("permille")
        return self.permilles.popleft() if self.permilles else 999

    def below(self, sides: int) -> int:
        self.calls.append(f"below:{sides}")
        if sides <= 0:
            return 0
        return min(self.belows.popleft(), sides - 1) if self.belows else 0


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from livingmud.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "LIVINGMUD_DEBUG": "true",
        "LIVINGMUD_LOG_LEVEL": "DEBUG",
        "LIVINGMUD_RNG_SEED": "42",
        "LIVINGMUD_TICK_HEARTBEAT_INTERVAL": "2",
        "LIVINGMUD_DEATH_CORPSE_DECAY_TICKS": "50",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings() -> Settings:
    """Default engine settings, independent of the process environment."""
    from livingmud.core.config import DeathSettings, Settings, StorageSettings, TickSettings

    return Settings(
        tick=TickSettings(heartbeat_interval=1, intoxication_decay=2),
        death=DeathSettings(
            corpse_decay_ticks=300,
            corpse_recheck_ticks=60,
            holding_location="netherworld",
            respawn_location="town_square",
        ),
        storage=StorageSettings(),
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Provide a seeded d20-backed roller."""
    return DiceRoller(seed=42)


@pytest.fixture
def dice() -> ScriptedDice:
    """Provide a roller with scripted draws."""
    return ScriptedDice()


@pytest.fixture
def engine(settings: Settings, dice: ScriptedDice) -> MudEngine:
    """Provide an engine wired to scripted dice."""
    from livingmud.engine.game_loop import MudEngine

    return MudEngine(settings, dice=dice)


@pytest.fixture
def world(engine: MudEngine) -> World:
    return engine.world


@pytest.fixture
def bus(engine: MudEngine) -> MessageBus:
    return engine.notifier


@pytest.fixture
def player(engine: MudEngine) -> Living:
    """A fresh player in the cave (all stats 1, 15/15 HP)."""
    from livingmud.models.living import create_player

    return engine.add_living(create_player("alice", location="cave"))


@pytest.fixture
def goblin(engine: MudEngine) -> Living:
    """A fresh monster in the cave (all stats 1, 15/15 HP)."""
    from livingmud.models.living import create_monster

    return engine.add_living(create_monster("goblin", location="cave", xp_value=25))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "players.db"
