"""Integration tests for a fight driven purely by the tick loop.

Uses the real seeded dice, so assertions hold whichever side wins.
"""

from __future__ import annotations

import pytest

from livingmud.core.config import Settings
from livingmud.engine.dice import DiceRoller
from livingmud.engine.game_loop import MudEngine
from livingmud.models.enums import LifeState
from livingmud.models.living import Living, create_monster, create_player


MAX_TICKS = 5000


def fight_until_over(engine: MudEngine, *fighters: Living) -> int:
    """Tick until nobody is fighting; returns the ticks taken."""
    for elapsed in range(1, MAX_TICKS + 1):
        engine.tick()
        if not any(fighter.in_combat for fighter in fighters):
            return elapsed
    pytest.fail("fight did not end")


@pytest.fixture
def arena(settings: Settings) -> MudEngine:
    return MudEngine(settings, dice=DiceRoller(seed=7))


class TestFightToDeath:
    """A full fight from first blow to corpse decay."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_exactly_one_side_falls(self, settings: Settings, seed: int) -> None:
        """The fight ends with one survivor and one death."""
        engine = MudEngine(settings, dice=DiceRoller(seed=seed))
        hero = engine.add_living(create_player("hero", location="pit", stats={"str": 8, "dex": 5}))
        orc = engine.add_living(create_monster("orc", location="pit", xp_value=40))
        engine.wield(hero, engine.spawn_item("iron_sword", holder=hero))

        engine.start_combat(hero, orc)
        fight_until_over(engine, hero, orc)

        orc_gone = engine.world.get_living(orc.uid) is None
        hero_spirit = hero.life_state == LifeState.SPIRIT
        assert orc_gone != hero_spirit
        assert len(engine.world.corpses) == 1
        if orc_gone:
            assert hero.player is not None
            assert hero.player.xp == 40
            assert hero.is_alive
        else:
            assert hero.location == "netherworld"
            assert orc.is_alive

    def test_fight_is_narrated(self, arena: MudEngine) -> None:
        """Both sides hear about the fight from the first blow."""
        hero = arena.add_living(create_player("hero", location="pit"))
        rat = arena.add_living(create_monster("rat", location="pit"))

        arena.start_combat(hero, rat)
        fight_until_over(arena, hero, rat)

        assert arena.notifier.inbox(hero.uid)[0] == "You attack a rat!"
        assert arena.notifier.inbox(rat.uid)[0] == "Hero attacks you!"

    def test_survivor_recovers_and_sleeps(self, arena: MudEngine) -> None:
        """After the fight the survivor regenerates and is descheduled."""
        hero = arena.add_living(create_player("hero", location="pit", stats={"str": 12, "con": 8}))
        rat = arena.add_living(create_monster("rat", location="pit"))
        arena.wield(hero, arena.spawn_item("goblin_blade", holder=hero))

        arena.start_combat(hero, rat)
        fight_until_over(arena, hero, rat)
        arena.run(200)

        survivor = hero if hero.is_alive else rat
        assert survivor.vitals.hp == survivor.vitals.max_hp
        assert not arena.scheduler.is_scheduled(survivor.uid)

    def test_corpse_decays_and_spills_loot(self, arena: MudEngine) -> None:
        """The loser's corpse disappears after the decay delay."""
        hero = arena.add_living(create_player("hero", location="pit", stats={"str": 12}))
        wolf = arena.add_living(create_monster("wolf", location="pit", drop_chance=100, drops=["wolf_pelt"]))
        arena.wield(hero, arena.spawn_item("goblin_blade", holder=hero))

        arena.start_combat(hero, wolf)
        fight_until_over(arena, hero, wolf)
        corpse = next(iter(arena.world.corpses.values()))
        held = [item.uid for item in arena.world.contents_of(corpse.uid)]

        arena.run(arena.settings.death.corpse_decay_ticks)

        assert arena.world.corpses == {}
        for uid in held:
            item = arena.world.get_item(uid)
            assert item is not None
            assert item.container_uid is None
            assert item.location == "pit"

