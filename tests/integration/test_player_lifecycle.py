"""Integration tests for a player's death, persistence and return.

Covers the path a player takes across sessions: dying, being saved as a
spirit, logging back in, resurrecting and recovering their gear.
"""

from __future__ import annotations

from pathlib import Path

from livingmud.core.config import Settings
from livingmud.engine.game_loop import MudEngine
from livingmud.models.enums import LifeState
from livingmud.models.living import create_monster, create_player
from livingmud.storage.database import Database


class TestPlayerLifecycle:
    """Death survives a restart; resurrection and recovery complete it."""

    def test_spirit_persists_across_restart(self, settings: Settings, dice, db_path: Path) -> None:
        """A player who died is still a spirit after logging back in."""
        engine = MudEngine(settings, dice=dice, store=Database(db_path))
        hero = engine.add_living(create_player("hero", location="crypt"))
        ghoul = engine.add_living(create_monster("ghoul", location="crypt"))

        engine.receive_damage(hero, 100, ghoul)

        # A fresh engine over the same database, as after a restart
        restarted = MudEngine(settings, dice=dice, store=Database(db_path))
        restored = restarted.login("hero")

        assert restored is not None
        assert restored.life_state == LifeState.SPIRIT
        assert restored.location == "netherworld"
        assert not restarted.scheduler.is_scheduled(restored.uid)

    def test_resurrection_is_saved(self, settings: Settings, dice, db_path: Path) -> None:
        """Resurrecting writes the respawn location to the store."""
        db = Database(db_path)
        engine = MudEngine(settings, dice=dice, store=db)
        hero = engine.add_living(create_player("hero", location="crypt"))

        engine.receive_damage(hero, 100)
        engine.resurrect(hero)

        record = db.get_record("hero")
        assert record is not None
        assert record.location == "town_square"
        loaded = db.load_player("hero")
        assert loaded is not None
        assert loaded.life_state == LifeState.ALIVE

    def test_corpse_run(self, settings: Settings, dice, db_path: Path) -> None:
        """A resurrected player walks back, loots the corpse and re-equips."""
        engine = MudEngine(settings, dice=dice, store=Database(db_path))
        hero = engine.add_living(create_player("hero", location="crypt"))
        mace = engine.spawn_item("troll_club", holder=hero)
        helm = engine.spawn_item("iron_helm", holder=hero)
        engine.wield(hero, mace)
        engine.wear(hero, helm)

        engine.receive_damage(hero, 100)
        corpse = next(iter(engine.world.corpses.values()))
        engine.resurrect(hero)

        hero.location = corpse.location
        for item in engine.world.contents_of(corpse.uid):
            engine.world.give_item(item, hero.uid)

        assert engine.reequip(hero) == 2
        assert hero.equipment.wielded_uid == mace.uid
        assert hero.equipment.worn == {"head": helm.uid}
        assert engine.equipment.weapon_skill(hero) == "club"

        # The empty corpse still rots away on schedule
        engine.run(settings.death.corpse_decay_ticks)
        assert engine.world.corpses == {}
        assert mace.container_uid == hero.uid
