"""Tests for the MudEngine facade and its heartbeat."""

from __future__ import annotations

from pathlib import Path

import pytest

from livingmud.core.config import Settings
from livingmud.core.exceptions import ValidationError
from livingmud.engine.combat import AttackResult
from livingmud.engine.game_loop import MudEngine
from livingmud.models.living import Living, create_monster, create_player
from livingmud.models.world import World
from livingmud.storage.database import Database


class TestWiring:
    """Tests for engine construction."""

    def test_uses_cached_settings(self, mock_env_vars: dict[str, str]) -> None:
        """Test an engine without settings reads the environment."""
        engine = MudEngine()

        assert engine.scheduler.interval == 2
        assert engine.settings.death.corpse_decay_ticks == 50

    def test_shares_given_world(self, settings: Settings, dice) -> None:
        """Test a supplied world is used as is."""
        world = World()

        engine = MudEngine(settings, world=world, dice=dice)

        assert engine.world is world
        assert engine.store is None


class TestHeartbeat:
    """Tests for what a single heartbeat does."""

    def test_engaged_living_attacks(self, engine: MudEngine, player: Living, goblin: Living) -> None:
        """Test an engaged living swings at its opponent."""
        engine.start_combat(player, goblin)

        result = engine.heartbeat(player)

        assert isinstance(result, AttackResult)
        assert result.roll == 99
        assert result.hit is False

    def test_idle_living_recovers(self, engine: MudEngine, player: Living) -> None:
        """Test a living out of combat regenerates instead."""
        player.set_hp(10)

        assert engine.heartbeat(player) is None
        assert player.vitals.hp == 11

    def test_tick_counts_callbacks(self, engine: MudEngine, player: Living, goblin: Living) -> None:
        """Test a tick reports how many callbacks ran."""
        player.set_hp(10)
        goblin.set_hp(10)
        engine.scheduler.ensure_active(player)
        engine.scheduler.ensure_active(goblin)

        assert engine.tick() == 2
        assert engine.scheduler.current_tick == 1


class TestPopulation:
    """Tests for adding and removing world entities."""

    def test_add_full_health_living_not_scheduled(self, engine: MudEngine, player: Living) -> None:
        """Test an idle living costs no heartbeats."""
        assert not engine.scheduler.is_scheduled(player.uid)

    def test_add_hurt_living_scheduled(self, engine: MudEngine) -> None:
        """Test a living with something to recover is scheduled on arrival."""
        rat = create_monster("rat", location="cellar")
        rat.set_hp(3)

        engine.add_living(rat)

        assert engine.scheduler.is_scheduled(rat.uid)

    def test_remove_living(self, engine: MudEngine, player: Living, goblin: Living) -> None:
        """Test removal also cancels the heartbeat."""
        engine.start_combat(goblin, player)

        engine.remove_living(goblin)

        assert engine.world.get_living(goblin.uid) is None
        assert not engine.scheduler.is_scheduled(goblin.uid)

    def test_spawn_item(self, engine: MudEngine, player: Living) -> None:
        """Test spawned items are placed in the world, optionally held."""
        ale = engine.spawn_item("ale", holder=player)
        cheap = engine.spawn_item("ale", short="a flat ale")

        assert ale.container_uid == player.uid
        assert cheap.container_uid is None
        assert cheap.short == "a flat ale"
        assert engine.world.contents_of(player.uid) == [ale]

    def test_spawn_unknown_template(self, engine: MudEngine) -> None:
        """Test an unknown template raises."""
        with pytest.raises(ValidationError, match="Unknown item template"):
            engine.spawn_item("philosophers_stone")


class TestStatsAndSkills:
    """Tests for privileged adjustments through the facade."""

    def test_set_stat_schedules_recovery(self, engine: MudEngine, player: Living) -> None:
        """Test raising CON leaves HP to regenerate up to the new maximum."""
        engine.set_stat(player, "con", 3)

        assert engine.query_max_hp(player) == 25
        assert engine.query_hp(player) == 15
        assert engine.scheduler.is_scheduled(player.uid)

        engine.run(10)

        assert engine.query_hp(player) == 25
        assert not engine.scheduler.is_scheduled(player.uid)

    def test_set_int_changes_max_mana(self, engine: MudEngine, player: Living) -> None:
        """Test INT drives maximum mana."""
        engine.set_stat(player, "intelligence", 0)

        assert engine.query_max_mana(player) == 10
        assert engine.query_mana(player) == 10

    def test_learn_spell(self, engine: MudEngine, player: Living) -> None:
        """Test learning adds to the known set without duplicates."""
        assert engine.learn_spell(player, "heal") is True
        assert engine.learn_spell(player, "heal") is True

        assert player.skills.known_spells == {"heal"}


class TestSessions:
    """Tests for login and logout against a store."""

    def test_logout_then_login(self, settings: Settings, dice, db_path: Path) -> None:
        """Test a player survives a logout/login round trip."""
        engine = MudEngine(settings, dice=dice, store=Database(db_path))
        alice = engine.add_living(create_player("alice", location="cave"))
        engine.set_skill(alice, "unarmed", 7)
        alice.set_hp(9)

        assert engine.logout(alice) is True
        assert engine.world.get_living(alice.uid) is None
        assert not engine.scheduler.is_scheduled(alice.uid)

        restored = engine.login("Alice")

        assert restored is not None
        assert restored.uid == alice.uid
        assert restored.location == "cave"
        assert restored.query_skill("unarmed") == 7
        assert engine.world.get_living(restored.uid) is restored
        assert engine.scheduler.is_scheduled(restored.uid)

    def test_login_unknown(self, settings: Settings, dice, db_path: Path) -> None:
        """Test logging in a name with no record returns None."""
        engine = MudEngine(settings, dice=dice, store=Database(db_path))

        assert engine.login("nobody") is None

    def test_without_store(self, engine: MudEngine, player: Living) -> None:
        """Test an engine without a store still removes on logout."""
        assert engine.logout(player) is False
        assert engine.world.get_living(player.uid) is None
        assert engine.login("alice") is None
