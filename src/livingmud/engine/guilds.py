"""Guild membership and skill grants.

GuildHall is the only place a living's allowed-skill set changes after
creation. Joining a guild grants its skills and teaches its spells outright,
without the learn requirement a spell otherwise has. Leaving reverses both,
keeping any skill or spell another joined guild still provides.

Example:
    >>> hall = GuildHall(default_guilds(), bus)
    >>> hall.join(alice, "fighters")
    True
    >>> hall.join(alice, "fighters")
    False
"""

from __future__ import annotations

from livingmud.core.logging import get_logger
from livingmud.engine.messaging import Notifier
from livingmud.models.guild import Guild
from livingmud.models.living import Living


logger = get_logger(__name__)


class GuildHall:
    """Registry of guilds plus the membership operations on players."""

    def __init__(self, guilds: dict[str, Guild], notifier: Notifier) -> None:
        self._guilds = dict(guilds)
        self._notifier = notifier

    def get(self, guild_id: str) -> Guild | None:
        return self._guilds.get(guild_id)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._guilds

    # =========================================================================
    # Skill grants
    # =========================================================================

    def grant_skills(self, entity: Living, skills: set[str] | frozenset[str]) -> list[str]:
        """Allow ``entity`` to train ``skills``.

        Returns:
            The skills newly allowed.
        """
        added = entity.grant_skills(skills)
        if added:
            logger.info("Skills granted", entity=entity.name, skills=added)
        return added

    def revoke_skills(self, entity: Living, skills: set[str] | frozenset[str]) -> list[str]:
        """Stop ``entity`` training ``skills``; earned values are kept.

        Returns:
            The skills no longer allowed.
        """
        removed = entity.revoke_skills(skills)
        if removed:
            logger.info("Skills revoked", entity=entity.name, skills=removed)
        return removed

    # =========================================================================
    # Membership
    # =========================================================================

    def can_join(self, player: Living, guild: Guild) -> bool:
        """No current guild may conflict with ``guild`` in either direction."""
        if player.player is None:
            return False
        for joined_id in player.player.guilds:
            if joined_id in guild.conflicts:
                return False
            joined = self._guilds.get(joined_id)
            if joined is not None and guild.guild_id in joined.conflicts:
                return False
        return True

    def join(self, player: Living, guild_id: str) -> bool:
        """Make ``player`` a member of a guild.

        Returns:
            False if the guild is unknown, the player is already a member,
            or a conflicting membership forbids it.
        """
        guild = self._guilds.get(guild_id)
        if guild is None or player.player is None:
            return False
        if guild_id in player.player.guilds:
            self._notifier.tell(player.uid, f"You are already a member of the {guild.name}.")
            return False
        if not self.can_join(player, guild):
            self._notifier.tell(player.uid, f"You cannot join the {guild.name} at this time.")
            return False

        player.player.guilds = [*player.player.guilds, guild_id]
        self.grant_skills(player, guild.granted_skills)
        player.skills.known_spells = player.skills.known_spells | set(guild.granted_spells)

        self._notifier.tell(player.uid, f"You are now a member of the {guild.name}!")
        self._notifier.tell(
            player.uid,
            f"You can now train: {', '.join(sorted(guild.granted_skills))}",
        )
        logger.info("Guild joined", entity=player.name, guild=guild_id)
        return True

    def leave(self, player: Living, guild_id: str) -> bool:
        """End ``player``'s membership of a guild.

        Returns:
            False if the player is not a member.
        """
        guild = self._guilds.get(guild_id)
        if guild is None or player.player is None or guild_id not in player.player.guilds:
            return False

        player.player.guilds = [g for g in player.player.guilds if g != guild_id]
        kept_skills: set[str] = set()
        kept_spells: set[str] = set()
        for other_id in player.player.guilds:
            other = self._guilds.get(other_id)
            if other is not None:
                kept_skills |= other.granted_skills
                kept_spells |= set(other.granted_spells)

        lost = self.revoke_skills(player, guild.granted_skills - kept_skills)
        player.skills.known_spells = player.skills.known_spells - (
            set(guild.granted_spells) - kept_spells
        )

        self._notifier.tell(player.uid, f"You have left the {guild.name}.")
        if lost:
            self._notifier.tell(player.uid, f"You can no longer advance: {', '.join(lost)}")
        logger.info("Guild left", entity=player.name, guild=guild_id)
        return True


__all__ = ["GuildHall"]
