"""Tests for spell casting."""

from __future__ import annotations

import pytest

from livingmud.engine.game_loop import MudEngine
from livingmud.engine.messaging import MessageBus
from livingmud.engine.spells import SPELLBOOK, SpellCaster
from livingmud.models.living import Living, create_player


@pytest.fixture
def mage(engine: MudEngine) -> Living:
    """A player allowed the evocation and abjuration schools, knowing every spell."""
    living = engine.add_living(
        create_player(
            "merlin",
            location="cave",
            allowed_skills={"unarmed", "evocation", "abjuration"},
        )
    )
    living.skills.known_spells = set(SPELLBOOK)
    return living


class TestSpellbook:
    """Tests for spell definitions and power."""

    def test_learn_unknown_spell(self, engine: MudEngine, mage: Living) -> None:
        """Test only spellbook entries can be learned."""
        assert engine.learn_spell(mage, "wish") is False
        assert "wish" not in mage.skills.known_spells

    @pytest.mark.parametrize(
        ("spell_id", "school", "required"),
        [("fireball", "evocation", 10), ("shield", "abjuration", 5)],
    )
    def test_learn_needs_school_skill(
        self, engine: MudEngine, bus: MessageBus, player: Living, spell_id: str, school: str, required: int
    ) -> None:
        """Test advanced spells can only be learned with enough school skill."""
        player.set_skill(school, required - 1)

        assert engine.learn_spell(player, spell_id) is False
        assert spell_id not in player.skills.known_spells
        assert bus.drain(player.uid)[-1].startswith(f"You need {school} skill of at least {required}")

        player.set_skill(school, required)

        assert engine.learn_spell(player, spell_id) is True
        assert spell_id in player.skills.known_spells

    def test_novice_spells_learned_at_zero(self, engine: MudEngine, bus: MessageBus, player: Living) -> None:
        """Test spells without a learn requirement need no school skill."""
        assert engine.learn_spell(player, "magic_missile") is True
        assert bus.inbox(player.uid) == ["You have learned Magic Missile!"]

    def test_spell_power(self, mage: Living) -> None:
        """Test power is 10 + school skill + int/2."""
        mage.set_skill("evocation", 12)
        mage.set_stat("int", 7)

        assert SpellCaster.spell_power(mage, SPELLBOOK["fireball"]) == 25


class TestRejections:
    """Tests for casts refused before anything changes."""

    def test_unknown_spell(self, engine: MudEngine, mage: Living) -> None:
        """Test a spell that does not exist."""
        result = engine.cast(mage, "wish")

        assert result.success is False
        assert mage.vitals.mana == 15

    def test_spell_not_known(self, engine: MudEngine, player: Living, goblin: Living) -> None:
        """Test a spell the caster never learned."""
        result = engine.cast(player, "magic_missile", goblin)

        assert result.reason == "You don't know how to cast Magic Missile."
        assert player.vitals.mana == 15

    def test_school_not_allowed(self, engine: MudEngine, bus: MessageBus, player: Living, goblin: Living) -> None:
        """Test a caster barred from the school cannot cast."""
        engine.learn_spell(player, "magic_missile")
        bus.drain(player.uid)

        result = engine.cast(player, "magic_missile", goblin)

        assert result.success is False
        assert bus.inbox(player.uid) == ["You don't know the evocation school of magic."]
        assert player.vitals.mana == 15

    def test_skill_too_low(self, engine: MudEngine, mage: Living, goblin: Living) -> None:
        """Test the minimum school skill is enforced."""
        result = engine.cast(mage, "fireball", goblin)

        assert result.reason == "You need at least 10 evocation skill to cast Fireball."
        assert mage.vitals.mana == 15

    def test_no_target(self, engine: MudEngine, mage: Living) -> None:
        """Test an offensive spell out of combat needs a target."""
        result = engine.cast(mage, "magic_missile")

        assert result.reason == "Cast Magic Missile at whom?"

    def test_self_target(self, engine: MudEngine, mage: Living) -> None:
        """Test an offensive spell cannot target the caster."""
        result = engine.cast(mage, "magic_missile", mage)

        assert result.reason == "You can't target yourself!"
        assert mage.vitals.hp == 15

    def test_target_elsewhere(self, engine: MudEngine, mage: Living) -> None:
        """Test targets must share the caster's room."""
        from livingmud.models.living import create_monster

        bat = engine.add_living(create_monster("bat", location="belfry"))

        result = engine.cast(mage, "magic_missile", bat)

        assert result.reason == "That's not a valid target."
        assert bat.vitals.hp == 15

    def test_insufficient_mana(self, engine: MudEngine, mage: Living, goblin: Living) -> None:
        """Test too little mana fails without spending anything."""
        mage.set_mana(3)

        result = engine.cast(mage, "magic_missile", goblin)

        assert result.success is False
        assert result.reason == "You don't have enough mana to cast Magic Missile. (Need 5, have 3)"
        assert mage.vitals.mana == 3
        assert goblin.vitals.hp == 15


class TestOffensiveSpells:
    """Tests for damaging spells."""

    def test_magic_missile(self, engine: MudEngine, dice, mage: Living, goblin: Living) -> None:
        """Test magic missile deals power/4 twice and starts a fight."""
        dice.calls.clear()

        result = engine.cast(mage, "magic_missile", goblin)

        assert result.success is True
        assert result.amount == 4
        assert result.mana_spent == 5
        assert mage.vitals.mana == 10
        assert goblin.vitals.hp == 11
        assert mage.combat.attacker_uid == goblin.uid
        assert goblin.combat.attacker_uid == mage.uid
        # no armor, so the only draw is the school training roll
        assert dice.calls == ["percent"]

    def test_fireball(self, engine: MudEngine, dice, mage: Living, goblin: Living) -> None:
        """Test fireball deals power/2 plus a random part."""
        mage.set_skill("evocation", 10)
        dice.script(belows=[3])

        result = engine.cast(mage, "fireball", goblin)

        # power 20: 10 + 3
        assert result.amount == 13
        assert goblin.vitals.hp == 2
        assert mage.vitals.mana == 0

    def test_default_target_is_opponent(self, engine: MudEngine, mage: Living, goblin: Living) -> None:
        """Test an offensive spell with no target hits the current opponent."""
        engine.start_combat(mage, goblin)

        result = engine.cast(mage, "magic_missile")

        assert result.success is True
        assert goblin.vitals.hp == 11

    def test_spell_kill(self, engine: MudEngine, mage: Living, goblin: Living) -> None:
        """Test a killing spell grants XP and leaves the caster idle."""
        goblin.set_hp(2)

        engine.cast(mage, "magic_missile", goblin)

        assert engine.world.get_living(goblin.uid) is None
        assert mage.player is not None
        assert mage.player.xp == 25
        assert not mage.in_combat

    def test_success_trains_school(self, engine: MudEngine, dice, bus: MessageBus, mage: Living, goblin: Living) -> None:
        """Test a successful cast trains the spell's school."""
        dice.script(percents=[0])

        engine.cast(mage, "magic_missile", goblin)

        assert mage.query_skill("evocation") == 1
        assert "[Your evocation skill improves!]" in bus.inbox(mage.uid)


class TestHealingSpells:
    """Tests for restorative spells."""

    def test_heal_self_by_default(self, engine: MudEngine, dice, mage: Living) -> None:
        """Test heal defaults to the caster."""
        mage.set_hp(5)
        dice.script(belows=[2])

        result = engine.cast(mage, "heal")

        # power 10: 5 + 2
        assert result.amount == 7
        assert mage.vitals.hp == 12
        assert mage.vitals.mana == 5

    def test_heal_other(self, engine: MudEngine, bus: MessageBus, mage: Living, player: Living) -> None:
        """Test heal on another living in the room."""
        player.set_hp(1)

        result = engine.cast(mage, "heal", player)

        assert result.amount == 5
        assert player.vitals.hp == 6
        assert "Merlin casts Heal on you." in bus.inbox(player.uid)

    def test_heal_reports_actual(self, engine: MudEngine, mage: Living) -> None:
        """Test healing past the maximum reports only what was restored."""
        mage.set_hp(14)

        result = engine.cast(mage, "heal")

        assert result.amount == 1

    def test_shield_needs_skill(self, engine: MudEngine, mage: Living) -> None:
        """Test shield requires 5 abjuration."""
        assert engine.cast(mage, "shield").success is False

        mage.set_skill("abjuration", 5)
        mage.set_hp(5)
        result = engine.cast(mage, "shield")

        assert result.success is True
        # power 15: max(2, 3 + 0)
        assert result.amount == 3


class TestArmorInterference:
    """Tests for armor spell failure."""

    def test_fizzle(self, engine: MudEngine, dice, bus: MessageBus, mage: Living, goblin: Living) -> None:
        """Test heavy armor can make a spell fizzle after the mana is spent."""
        engine.wear(mage, engine.spawn_item("troll_hide", holder=mage))
        dice.script(percents=[59])

        result = engine.cast(mage, "magic_missile", goblin)

        assert result.success is False
        assert result.reason == "fizzled"
        assert result.mana_spent == 5
        assert mage.vitals.mana == 10
        assert goblin.vitals.hp == 15
        assert "Your armor interferes with the spell! The magic fizzles." in bus.inbox(mage.uid)

    def test_armor_roll_passed(self, engine: MudEngine, dice, mage: Living, goblin: Living) -> None:
        """Test a failure roll at or above the armor penalty lets the spell through."""
        engine.wear(mage, engine.spawn_item("troll_hide", holder=mage))
        dice.script(percents=[60])

        result = engine.cast(mage, "magic_missile", goblin)

        assert result.success is True
        assert goblin.vitals.hp == 11
