"""
Lobby orchestration: the inbound actions of the bot.

Each coroutine resolves the target lobby, applies the transition through the
registry / membership engine in one synchronous step, and only then performs
best-effort side effects (re-render, direct messages). Side-effect failures
are logged and reported as failed Results that callers may ignore; they never
undo or block the state change.
"""

import logging

from domain.models.lobby import Lobby, LobbySnapshot
from services import error_codes
from services.idle_reaper import IdleReaper
from services.interfaces import ILobbyRenderer, INotifier
from services.lobby_registry import LobbyRegistry
from services.membership_service import JoinOutcome, MembershipService
from services.result import Result

logger = logging.getLogger("lobby_bot.services.lobby")


class LobbyService:
    """Wraps the registry and membership engine with rendering and notifications."""

    def __init__(
        self,
        registry: LobbyRegistry,
        membership: MembershipService,
        renderer: ILobbyRenderer | None = None,
        notifier: INotifier | None = None,
        reaper: IdleReaper | None = None,
        host_auto_join: bool = True,
        default_max_size: int = 16,
    ):
        self.registry = registry
        self.membership = membership
        self.renderer = renderer
        self.notifier = notifier
        self.reaper = reaper
        self.host_auto_join = host_auto_join
        self.default_max_size = default_max_size

    # -- Queries --

    def get_lobby(self, guild_id: int, lobby_id: str) -> Lobby | None:
        return self.registry.get(guild_id, lobby_id)

    def list_lobbies(self, guild_id: int) -> list[LobbySnapshot]:
        return list(self.registry.list_by_guild(guild_id))

    def lobby_of(self, user_id: int) -> Lobby | None:
        return self.registry.lobby_of(user_id)

    def _require(self, guild_id: int, lobby_id: str) -> Result[Lobby]:
        lobby = self.registry.get(guild_id, lobby_id)
        if lobby is None:
            return Result.fail(
                f"No lobby named **{lobby_id}** found in this server.",
                code=error_codes.LOBBY_NOT_FOUND,
            )
        return Result.ok(lobby)

    # -- Inbound actions --

    async def create_lobby(
        self,
        guild_id: int,
        lobby_id: str,
        host_id: int,
        max_size: int | None = None,
        host_tag: str | None = None,
        channel_id: int | None = None,
    ) -> Result[Lobby]:
        """
        Open a lobby, seat the host (when host auto-join is on), arm the idle
        check and render it.

        Args:
            guild_id: Guild the lobby belongs to
            lobby_id: Display name, unique per guild ignoring case
            host_id: User opening the lobby
            max_size: Member cap (2-24); the configured default when None
            host_tag: Gamertag recorded for the host when auto-joined
            channel_id: Channel the lobby message should be posted in

        Returns:
            Result with the new Lobby, or duplicate_lobby / invalid_size /
            validation_error.
        """
        if max_size is None:
            max_size = self.default_max_size
        created = self.registry.create(guild_id, lobby_id, host_id, max_size, channel_id=channel_id)
        if not created:
            return created
        lobby = created.value

        migrated_from = None
        if self.host_auto_join:
            joined = self.membership.join(lobby, host_id, host_tag or str(host_id))
            migrated_from = joined.value.previous_lobby

        if self.reaper is not None:
            self.reaper.arm(lobby)

        await self._render(lobby)
        if migrated_from is not None:
            await self._after_migration(host_id, migrated_from, lobby)
        return Result.ok(lobby)

    async def join(
        self, guild_id: int, lobby_id: str, user_id: int, display_tag: str
    ) -> Result[JoinOutcome]:
        found = self._require(guild_id, lobby_id)
        if not found:
            return found
        lobby = found.value

        result = self.membership.join(lobby, user_id, display_tag)
        if not result:
            return result

        await self._refresh(lobby)
        previous = result.value.previous_lobby
        if previous is not None:
            await self._after_migration(user_id, previous, lobby)
        return result

    async def leave(self, guild_id: int, lobby_id: str, user_id: int) -> Result[Lobby]:
        found = self._require(guild_id, lobby_id)
        if not found:
            return found
        lobby = found.value

        result = self.membership.leave(lobby, user_id)
        if not result:
            return result

        await self._refresh(lobby)
        return Result.ok(lobby)

    async def kick(
        self,
        guild_id: int,
        lobby_id: str,
        actor_id: int,
        target_id: int,
        actor_is_manager: bool = False,
        guild_name: str | None = None,
    ) -> Result[Lobby]:
        found = self._require(guild_id, lobby_id)
        if not found:
            return found
        lobby = found.value

        result = self.membership.kick(lobby, actor_id, target_id, actor_is_manager)
        if not result:
            return result

        await self._refresh(lobby)
        where = f" in **{guild_name}**" if guild_name else ""
        await self._notify(
            target_id, f"You have been kicked from the lobby **{lobby.lobby_id}**{where}."
        )
        return Result.ok(lobby)

    async def reassign_host(
        self,
        guild_id: int,
        lobby_id: str,
        actor_id: int,
        new_host_id: int,
        actor_is_manager: bool = False,
    ) -> Result[int]:
        """Returns the previous host id on success."""
        found = self._require(guild_id, lobby_id)
        if not found:
            return found
        lobby = found.value

        result = self.membership.reassign_host(lobby, actor_id, new_host_id, actor_is_manager)
        if not result:
            return result

        await self._refresh(lobby)
        await self._notify(
            result.value,
            f"You are no longer the host of lobby `{lobby.lobby_id}`. "
            f"The new host is <@{new_host_id}>.",
        )
        await self._notify(
            new_host_id, f"You have been assigned as the new host for lobby `{lobby.lobby_id}`."
        )
        return result

    async def resize(
        self,
        guild_id: int,
        lobby_id: str,
        actor_id: int,
        new_size: int,
        actor_is_manager: bool = False,
    ) -> Result[Lobby]:
        found = self._require(guild_id, lobby_id)
        if not found:
            return found
        lobby = found.value

        result = self.membership.resize(lobby, actor_id, new_size, actor_is_manager)
        if not result:
            return result

        await self._refresh(lobby)
        return Result.ok(lobby)

    async def end_lobby(
        self, guild_id: int, lobby_id: str, actor_id: int, actor_is_manager: bool = False
    ) -> Result[Lobby]:
        found = self._require(guild_id, lobby_id)
        if not found:
            return found
        lobby = found.value

        if not self.membership.can_manage(lobby, actor_id, actor_is_manager):
            return Result.fail(
                "You do not have permission to end this lobby.", code=error_codes.FORBIDDEN
            )

        self.registry.remove(guild_id, lobby.lobby_id)
        if self.reaper is not None:
            self.reaper.cancel(guild_id, lobby.lobby_id)
        logger.info(f"Lobby '{lobby.lobby_id}' ended by {actor_id} in guild {guild_id}")

        await self._remove_render(lobby)
        return Result.ok(lobby)

    async def handle_eviction(self, lobby: Lobby) -> None:
        """Idle reaper callback: the lobby is already out of the registry."""
        await self._remove_render(lobby)

    # -- Best-effort side effects --

    async def _after_migration(
        self, user_id: int, previous: LobbySnapshot, joined: Lobby
    ) -> None:
        live = self.registry.get(previous.guild_id, previous.lobby_id)
        if live is not None:
            await self._refresh(live)
        await self._notify(
            user_id,
            f"You were removed from lobby **{previous.lobby_id}** because you joined "
            f"**{joined.lobby_id}**.",
        )

    async def _render(self, lobby: Lobby) -> Result[None]:
        if self.renderer is None:
            return Result.ok()
        try:
            lobby.render_handle = await self.renderer.render(lobby)
        except Exception as exc:
            logger.warning(f"Failed to render lobby {lobby.lobby_id}: {exc}")
            return Result.fail(str(exc), code=error_codes.RENDER_FAILURE)
        return Result.ok()

    async def _refresh(self, lobby: Lobby) -> Result[None]:
        if self.renderer is None or lobby.render_handle is None:
            return Result.ok()
        try:
            await self.renderer.update(lobby.render_handle, lobby)
        except Exception as exc:
            logger.warning(f"Failed to update lobby message for {lobby.lobby_id}: {exc}")
            return Result.fail(str(exc), code=error_codes.RENDER_FAILURE)
        return Result.ok()

    async def _remove_render(self, lobby: Lobby) -> Result[None]:
        if self.renderer is None or lobby.render_handle is None:
            return Result.ok()
        try:
            await self.renderer.remove(lobby.render_handle)
        except Exception as exc:
            logger.warning(f"Failed to delete lobby message for {lobby.lobby_id}: {exc}")
            return Result.fail(str(exc), code=error_codes.RENDER_FAILURE)
        finally:
            lobby.render_handle = None
        return Result.ok()

    async def _notify(self, user_id: int, message: str) -> Result[None]:
        if self.notifier is None:
            return Result.ok()
        try:
            await self.notifier.notify(user_id, message)
        except Exception as exc:
            logger.warning(f"Could not send DM to user {user_id}: {exc}")
            return Result.fail(str(exc), code=error_codes.NOTIFICATION_FAILURE)
        return Result.ok()
