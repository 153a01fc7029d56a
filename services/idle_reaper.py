"""
IdleReaper: evicts lobbies nobody has touched for a while.

One asyncio task per lobby, armed at creation. When it fires it re-reads the
lobby's ``last_active``. Idle lobbies are removed from the registry and handed
to the eviction callback so the adapter can tear down their message.

By default a lobby that was active inside the window is left alone and the
check is not repeated. With ``renew=True`` the check is re-armed for the
remainder of the window instead.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from domain.models.lobby import Lobby, lobby_key
from services.lobby_registry import LobbyRef, LobbyRegistry

logger = logging.getLogger("lobby_bot.services.idle_reaper")

EvictCallback = Callable[[Lobby], Awaitable[None]]


class IdleReaper:
    """Schedules and cancels per-lobby idle checks."""

    def __init__(
        self,
        registry: LobbyRegistry,
        window_seconds: float = 3600,
        renew: bool = False,
        on_evict: EvictCallback | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.registry = registry
        self.window_seconds = window_seconds
        self.renew = renew
        self.on_evict = on_evict
        self.clock = clock
        self._tasks: dict[LobbyRef, asyncio.Task] = {}

    def arm(self, lobby: Lobby, delay: float | None = None) -> asyncio.Task:
        """Schedule a check for ``lobby``, replacing any pending one."""
        ref = (lobby.guild_id, lobby.key)
        self.cancel(lobby.guild_id, lobby.lobby_id)
        wait = self.window_seconds if delay is None else delay
        task = asyncio.get_running_loop().create_task(self._check_after(ref, wait))
        self._tasks[ref] = task
        return task

    def cancel(self, guild_id: int, lobby_id: str) -> bool:
        """Cancel a pending check. Returns True if one was pending."""
        ref = (guild_id, lobby_key(lobby_id))
        task = self._tasks.pop(ref, None)
        if task is None:
            return False
        if task is asyncio.current_task():
            return False
        task.cancel()
        return True

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
        self._tasks.clear()

    def is_armed(self, guild_id: int, lobby_id: str) -> bool:
        task = self._tasks.get((guild_id, lobby_key(lobby_id)))
        return task is not None and not task.done()

    async def _check_after(self, ref: LobbyRef, delay: float) -> None:
        await asyncio.sleep(delay)
        guild_id, key = ref
        if self._tasks.get(ref) is asyncio.current_task():
            del self._tasks[ref]

        lobby = self.registry.get(guild_id, key)
        if lobby is None:
            return

        idle_for = self.clock() - lobby.last_active
        if idle_for < self.window_seconds:
            if self.renew:
                self.arm(lobby, delay=self.window_seconds - idle_for)
            return

        self.registry.remove(guild_id, key)
        logger.info(f"Lobby {lobby.lobby_id} has been removed due to inactivity.")
        if self.on_evict is not None:
            try:
                await self.on_evict(lobby)
            except Exception as exc:
                logger.warning(f"Eviction cleanup failed for lobby {lobby.lobby_id}: {exc}")
