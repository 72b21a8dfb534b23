"""Tests for regeneration, intoxication and mana spending."""

from __future__ import annotations

import pytest

from livingmud.core.exceptions import ResourceExhaustedError
from livingmud.engine.game_loop import MudEngine
from livingmud.engine.messaging import MessageBus
from livingmud.models.living import Living


class TestRegenerate:
    """Tests for the idle heartbeat."""

    def test_hp_regen(self, engine: MudEngine, player: Living) -> None:
        """Test an idle living regains regen_rate HP."""
        player.set_hp(10)

        engine.resources.regenerate(player)

        assert player.vitals.hp == 11

    def test_intoxication_bonus(self, engine: MudEngine, player: Living) -> None:
        """Test intoxication speeds up HP regeneration by a tenth of its value."""
        player.set_hp(5)
        player.set_intoxication(30)

        engine.resources.regenerate(player)

        # decays to 28 first, bonus 2
        assert player.vitals.intoxication == 28
        assert player.vitals.hp == 8

    def test_mana_regen_uses_wisdom(self, engine: MudEngine, player: Living) -> None:
        """Test mana regeneration is 1 + wis/3."""
        player.set_stat("wis", 9)
        player.set_mana(5)

        engine.resources.regenerate(player)

        assert player.vitals.mana == 9

    def test_engaged_does_not_regenerate(self, engine: MudEngine, player: Living, goblin: Living) -> None:
        """Test combat suppresses regeneration but not sobering up."""
        engine.start_combat(player, goblin)
        player.set_hp(5)
        player.set_intoxication(10)

        engine.resources.regenerate(player)

        assert player.vitals.hp == 5
        assert player.vitals.intoxication == 8

    def test_full_heal_message_and_stop(
        self, engine: MudEngine, bus: MessageBus, player: Living
    ) -> None:
        """Test reaching full HP is announced and an idle living is descheduled."""
        player.set_hp(14)
        engine.scheduler.ensure_active(player)

        engine.resources.regenerate(player)

        assert bus.inbox(player.uid) == ["You feel fully healed."]
        assert not engine.scheduler.is_scheduled(player.uid)

    def test_never_exceeds_max(self, engine: MudEngine, player: Living) -> None:
        """Test regeneration clamps at the maximum."""
        player.set_stat("wis", 60)
        player.set_mana(14)

        engine.resources.regenerate(player)

        assert player.vitals.mana == player.vitals.max_mana

    def test_heartbeats_until_healed(self, engine: MudEngine, player: Living) -> None:
        """Test the scheduler drives regeneration and then stops."""
        player.set_hp(10)
        engine.scheduler.ensure_active(player)

        engine.run(5)

        assert player.vitals.hp == 15
        assert not engine.scheduler.is_scheduled(player.uid)


class TestIntoxication:
    """Tests for drinking and sobering up."""

    def test_add_intoxication_clamps(self, engine: MudEngine, player: Living) -> None:
        """Test intoxication stays within 0..100."""
        assert engine.add_intoxication(player, 150) == 100
        assert engine.add_intoxication(player, -500) == 0

    def test_add_intoxication_schedules(self, engine: MudEngine, player: Living) -> None:
        """Test a drunk living is scheduled to sober up."""
        engine.add_intoxication(player, 5)

        assert engine.scheduler.is_scheduled(player.uid)
        assert engine.query_intoxication(player) == 5

    def test_sober_message(self, engine: MudEngine, bus: MessageBus, player: Living) -> None:
        """Test reaching zero intoxication is announced."""
        player.set_intoxication(1)

        assert engine.resources.decay_intoxication(player) == 0
        assert bus.inbox(player.uid) == ["You feel sober again."]

    def test_drink(self, engine: MudEngine, bus: MessageBus, player: Living) -> None:
        """Test drinking consumes the drink and raises intoxication."""
        ale = engine.spawn_item("ale", holder=player)

        assert engine.drink(player, ale) is True
        assert engine.world.get_item(ale.uid) is None
        assert player.vitals.intoxication == 10
        assert bus.inbox(player.uid) == ["You drink a mug of ale."]

    def test_drink_not_carried(self, engine: MudEngine, player: Living) -> None:
        """Test a drink lying on the floor cannot be drunk."""
        ale = engine.spawn_item("ale")

        assert engine.drink(player, ale) is False
        assert player.vitals.intoxication == 0

    def test_drink_not_a_drink(self, engine: MudEngine, player: Living) -> None:
        """Test only drinks can be drunk."""
        sword = engine.spawn_item("iron_sword", holder=player)

        assert engine.drink(player, sword) is False

    def test_drink_to_the_limit(self, engine: MudEngine, bus: MessageBus, player: Living) -> None:
        """Test maximum intoxication is announced."""
        for _ in range(4):
            engine.drink(player, engine.spawn_item("firewhisky", holder=player))

        assert player.vitals.intoxication == 100
        assert bus.inbox(player.uid)[-1] == "The world spins wildly around you."


class TestDirectAdjustments:
    """Tests for heal and spend_mana."""

    def test_heal_returns_restored(self, engine: MudEngine, player: Living) -> None:
        """Test heal reports only the HP actually restored."""
        player.set_hp(10)

        assert engine.resources.heal(player, 20) == 5
        assert player.vitals.hp == 15

    def test_heal_nothing(self, engine: MudEngine, player: Living) -> None:
        """Test a non-positive heal does nothing."""
        player.set_hp(10)

        assert engine.resources.heal(player, 0) == 0
        assert player.vitals.hp == 10

    def test_spend_mana(self, engine: MudEngine, player: Living) -> None:
        """Test mana is deducted and regeneration scheduled."""
        engine.resources.spend_mana(player, 5)

        assert player.vitals.mana == 10
        assert engine.scheduler.is_scheduled(player.uid)

    def test_spend_mana_insufficient(self, engine: MudEngine, player: Living) -> None:
        """Test insufficient mana raises before anything changes."""
        with pytest.raises(ResourceExhaustedError) as exc_info:
            engine.resources.spend_mana(player, 16)

        assert exc_info.value.details["required"] == 16
        assert exc_info.value.details["available"] == 15
        assert player.vitals.mana == 15
        assert not engine.scheduler.is_scheduled(player.uid)
