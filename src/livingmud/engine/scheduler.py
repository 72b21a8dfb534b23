"""Heartbeat and timer scheduling on a logical tick clock.

The scheduler keeps a single min-heap of ``(wake_tick, seq, entity_uid)``
entries. Two kinds of entries share it:

- Heartbeats: repeating, at most one per living. A living is scheduled
  while it has pending work (combat, regeneration, sobering up) and is
  removed once it is idle.
- Timers: one-shot callbacks bound to an entity (corpse decay).

Cancellation is lazy. Descheduling drops the entry from the active index
and marks it cancelled; the heap discards it when it reaches the top.
Entries whose entity no longer exists (or, for heartbeats, is no longer
alive) are dropped silently when they come due.

Example:
    >>> scheduler = TickScheduler(world, interval=1)
    >>> scheduler.set_heartbeat_handler(engine.heartbeat)
    >>> scheduler.ensure_active(goblin)
    True
    >>> scheduler.run(5)
"""

from __future__ import annotations

import heapq
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID

from livingmud.core.exceptions import SchedulerError
from livingmud.core.logging import bind_context, get_logger
from livingmud.models.living import Living
from livingmud.models.world import World


logger = get_logger(__name__)

HeartbeatHandler = Callable[[Living], None]
TimerCallback = Callable[[UUID], None]


@dataclass(order=True)
class ScheduledEntry:
    """One pending heartbeat or timer in the heap."""

    wake_tick: int
    seq: int
    entity_uid: UUID = field(compare=False)
    callback: TimerCallback | None = field(compare=False, default=None)
    cancelled: bool = field(compare=False, default=False)


class TickScheduler:
    """Drives heartbeats and timers for every scheduled entity."""

    def __init__(self, world: World, *, interval: int = 1) -> None:
        """Initialize the scheduler.

        Args:
            world: Arena used to check that entities still exist.
            interval: Ticks between two heartbeats of the same living.

        Raises:
            SchedulerError: If the interval is not positive.
        """
        if interval < 1:
            raise SchedulerError(
                "Heartbeat interval must be at least one tick",
                details={"interval": interval},
            )
        self._world = world
        self._interval = interval
        self._heap: list[ScheduledEntry] = []
        self._seq = 0
        self._tick = 0
        self._active: dict[UUID, ScheduledEntry] = {}
        self._timers: dict[UUID, list[ScheduledEntry]] = {}
        self._handler: HeartbeatHandler | None = None

    # =========================================================================
    # Configuration and queries
    # =========================================================================

    def set_heartbeat_handler(self, handler: HeartbeatHandler) -> None:
        self._handler = handler

    @property
    def current_tick(self) -> int:
        return self._tick

    @property
    def interval(self) -> int:
        return self._interval

    def is_scheduled(self, uid: UUID) -> bool:
        """Whether the living has a pending heartbeat."""
        return uid in self._active

    def pending_timers(self, uid: UUID) -> int:
        return sum(1 for entry in self._timers.get(uid, []) if not entry.cancelled)

    def pending_count(self) -> int:
        """Number of live heartbeats and timers."""
        return len(self._active) + sum(self.pending_timers(uid) for uid in self._timers)

    # =========================================================================
    # Heartbeats
    # =========================================================================

    def _push(
        self,
        wake_tick: int,
        uid: UUID,
        callback: TimerCallback | None = None,
    ) -> ScheduledEntry:
        self._seq += 1
        entry = ScheduledEntry(wake_tick=wake_tick, seq=self._seq, entity_uid=uid, callback=callback)
        heapq.heappush(self._heap, entry)
        return entry

    def ensure_active(self, entity: Living) -> bool:
        """Make sure the living receives heartbeats.

        Idempotent: a living that is already scheduled keeps its current
        slot.

        Args:
            entity: The living with pending work.

        Returns:
            True if a new heartbeat was scheduled.
        """
        if entity.uid in self._active or not entity.is_alive:
            return False
        self._active[entity.uid] = self._push(self._tick + self._interval, entity.uid)
        logger.debug("Heartbeat scheduled", entity=entity.name, tick=self._tick)
        return True

    def stop_if_idle(self, entity: Living) -> bool:
        """Deschedule the living once it has nothing left to do.

        Returns:
            True if the living was idle and its heartbeat was removed.
        """
        if not entity.is_idle:
            return False
        return self._cancel_heartbeat(entity.uid)

    def _cancel_heartbeat(self, uid: UUID) -> bool:
        entry = self._active.pop(uid, None)
        if entry is None:
            return False
        entry.cancelled = True
        logger.debug("Heartbeat removed", entity_uid=str(uid), tick=self._tick)
        return True

    def deschedule(self, uid: UUID) -> None:
        """Cancel the heartbeat and every timer of an entity."""
        self._cancel_heartbeat(uid)
        for entry in self._timers.pop(uid, []):
            entry.cancelled = True

    # =========================================================================
    # Timers
    # =========================================================================

    def call_out(self, delay: int, uid: UUID, callback: TimerCallback) -> ScheduledEntry:
        """Run ``callback(uid)`` once, ``delay`` ticks from now.

        Args:
            delay: Ticks to wait; at least one.
            uid: Entity the timer belongs to; the timer is dropped if it is gone.
            callback: Function to call.

        Returns:
            The scheduled entry.

        Raises:
            SchedulerError: If the delay is not positive.
        """
        if delay < 1:
            raise SchedulerError(
                "call_out delay must be at least one tick",
                details={"delay": delay, "entity_uid": str(uid)},
            )
        entry = self._push(self._tick + delay, uid, callback)
        self._timers.setdefault(uid, []).append(entry)
        return entry

    # =========================================================================
    # Driving loop
    # =========================================================================

    def run_tick(self) -> int:
        """Advance the clock by one tick and run everything that is due.

        Returns:
            Number of heartbeats and timers executed.
        """
        self._tick += 1
        bind_context(tick=self._tick)
        executed = 0

        while self._heap and self._heap[0].wake_tick <= self._tick:
            entry = heapq.heappop(self._heap)
            if entry.cancelled:
                continue
            if entry.callback is not None:
                executed += self._run_timer(entry, entry.callback)
            else:
                executed += self._run_heartbeat(entry)

        return executed

    def run(self, ticks: int) -> int:
        """Run ``ticks`` consecutive ticks."""
        return sum(self.run_tick() for _ in range(ticks))

    def _run_heartbeat(self, entry: ScheduledEntry) -> int:
        uid = entry.entity_uid
        if self._active.get(uid) is not entry:
            return 0

        living = self._world.get_living(uid)
        if living is None or not living.is_alive:
            del self._active[uid]
            return 0

        if self._handler is not None:
            self._handler(living)

        # The handler may have descheduled (or rescheduled) this living
        if self._active.get(uid) is entry:
            self._active[uid] = self._push(self._tick + self._interval, uid)
        return 1

    def _run_timer(self, entry: ScheduledEntry, callback: TimerCallback) -> int:
        uid = entry.entity_uid
        timers = self._timers.get(uid)
        if timers is not None:
            timers.remove(entry)
            if not timers:
                del self._timers[uid]

        if not self._world.exists(uid):
            return 0

        callback(uid)
        return 1


__all__ = [
    "ScheduledEntry",
    "TickScheduler",
]
