"""Notification primitives consumed by the engine.

The engine never writes to a connection. It tells a Notifier that a living
(or everyone in a room) should see a line of text; the transport layer
decides what that means. MessageBus is the in-process implementation,
which keeps per-living inboxes the session layer drains.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Protocol
from uuid import UUID

from livingmud.core.logging import get_logger
from livingmud.models.world import World


logger = get_logger(__name__)


class Notifier(Protocol):
    """Single- and room-scoped message delivery."""

    def tell(self, uid: UUID, message: str) -> None: ...

    def tell_room(
        self,
        location: str | None,
        message: str,
        *,
        exclude: tuple[UUID, ...] = (),
    ) -> None: ...


class MessageBus:
    """Notifier that queues messages per living."""

    def __init__(self, world: World) -> None:
        self._world = world
        self._inboxes: dict[UUID, list[str]] = defaultdict(list)

    def tell(self, uid: UUID, message: str) -> None:
        self._inboxes[uid].append(message)
        logger.debug("Message queued", recipient=str(uid), message=message)

    def tell_room(
        self,
        location: str | None,
        message: str,
        *,
        exclude: tuple[UUID, ...] = (),
    ) -> None:
        for living in self._world.livings_at(location, exclude=exclude):
            self.tell(living.uid, message)

    def inbox(self, uid: UUID) -> list[str]:
        """Messages queued for a living, oldest first."""
        return list(self._inboxes.get(uid, []))

    def drain(self, uid: UUID) -> list[str]:
        """Return and clear the messages queued for a living."""
        return self._inboxes.pop(uid, [])


__all__ = [
    "Notifier",
    "MessageBus",
]
