"""Guilds: membership that widens what a player may train.

A player's allowed-skill set is not fixed at creation. Joining a guild adds
the guild's skills to it and teaches the guild's spells; leaving takes them
away again, except for skills another of the player's guilds still grants.
Skill values already earned are never touched.

Example:
    >>> guilds = default_guilds()
    >>> sorted(guilds["fighters"].granted_skills)[:3]
    ['axe', 'club', 'dagger']
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Guild(BaseModel):
    """Static definition of a guild.

    Attributes:
        guild_id: Identifier stored in a player's guild list.
        name: Display name.
        granted_skills: Skills members are allowed to train.
        granted_spells: Spell ids taught on joining and forgotten on leaving.
        conflicts: Guild ids whose members may not join this guild.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    guild_id: str
    name: str
    granted_skills: frozenset[str] = Field(default_factory=frozenset)
    granted_spells: tuple[str, ...] = ()
    conflicts: frozenset[str] = Field(default_factory=frozenset)


def default_guilds() -> dict[str, Guild]:
    """The stock guilds, keyed by id."""
    guilds = [
        Guild(
            guild_id="fighters",
            name="Fighters Guild",
            granted_skills=frozenset(
                {"sword", "axe", "mace", "club", "dagger", "shield_block", "parry"}
            ),
        ),
        Guild(
            guild_id="mages",
            name="Mages Guild",
            granted_skills=frozenset({"evocation", "conjuration", "transmutation"}),
            granted_spells=("magic_missile", "fireball"),
        ),
        Guild(
            guild_id="healers",
            name="Healers Guild",
            granted_skills=frozenset({"abjuration", "divination"}),
            granted_spells=("heal", "shield"),
        ),
    ]
    return {guild.guild_id: guild for guild in guilds}


__all__ = ["Guild", "default_guilds"]
