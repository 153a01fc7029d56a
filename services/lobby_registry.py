"""
LobbyRegistry: in-memory store of every open lobby plus the user reverse index.

Lobbies are keyed by guild and by lower-cased name, so two guilds can each
run a lobby called "Alpha" while "alpha" and "ALPHA" collide inside one guild.
The reverse index maps each user to the single lobby they occupy (as member
or waitlisted) across all guilds.

All methods are synchronous. Callers on the event loop invoke them directly
so that no mutation is split by a suspension point.
"""

import logging
from collections.abc import Iterator

from domain.models.lobby import MAX_LOBBY_SIZE, MIN_LOBBY_SIZE, Lobby, LobbySnapshot, lobby_key
from services import error_codes
from services.result import Result

logger = logging.getLogger("lobby_bot.services.lobby_registry")

LobbyRef = tuple[int, str]  # (guild_id, lobby key)


class LobbyRegistry:
    """Owns lobby lifetimes and the user -> lobby reverse index."""

    def __init__(self):
        self._lobbies: dict[int, dict[str, Lobby]] = {}
        self._occupancy: dict[int, LobbyRef] = {}

    # -- Lobby lifecycle --

    def create(
        self,
        guild_id: int,
        lobby_id: str,
        host_id: int,
        max_size: int,
        channel_id: int | None = None,
    ) -> Result[Lobby]:
        """
        Register a new, empty lobby.

        Returns:
            Result with the Lobby, or a failure with code validation_error,
            invalid_size or duplicate_lobby.
        """
        name = (lobby_id or "").strip()
        if not name:
            return Result.fail("Lobby name cannot be empty.", code=error_codes.VALIDATION_ERROR)

        if not MIN_LOBBY_SIZE <= max_size <= MAX_LOBBY_SIZE:
            return Result.fail(
                f"Lobby size must be between {MIN_LOBBY_SIZE} and {MAX_LOBBY_SIZE}.",
                code=error_codes.INVALID_SIZE,
            )

        guild_lobbies = self._lobbies.setdefault(guild_id, {})
        key = lobby_key(name)
        if key in guild_lobbies:
            return Result.fail(
                "A lobby with this name already exists in this server.",
                code=error_codes.DUPLICATE_LOBBY,
            )

        lobby = Lobby(
            lobby_id=name,
            guild_id=guild_id,
            host_id=host_id,
            max_size=max_size,
            channel_id=channel_id,
        )
        guild_lobbies[key] = lobby
        logger.info(f"Created lobby '{name}' in guild {guild_id} (host={host_id}, max={max_size})")
        return Result.ok(lobby)

    def get(self, guild_id: int, lobby_id: str) -> Lobby | None:
        """Case-insensitive lookup within a guild. None when absent."""
        return self._lobbies.get(guild_id, {}).get(lobby_key(lobby_id))

    def remove(self, guild_id: int, lobby_id: str) -> Lobby | None:
        """
        Delete a lobby and clear the reverse index for everyone in it.

        Returns:
            The removed Lobby, or None if it did not exist.
        """
        guild_lobbies = self._lobbies.get(guild_id)
        if not guild_lobbies:
            return None
        lobby = guild_lobbies.pop(lobby_key(lobby_id), None)
        if lobby is None:
            return None
        if not guild_lobbies:
            del self._lobbies[guild_id]

        ref = (guild_id, lobby.key)
        for user_id in lobby.occupants():
            if self._occupancy.get(user_id) == ref:
                del self._occupancy[user_id]
        logger.info(f"Removed lobby '{lobby.lobby_id}' from guild {guild_id}")
        return lobby

    def list_by_guild(self, guild_id: int) -> Iterator[LobbySnapshot]:
        """Lazily yield snapshots of a guild's lobbies in creation order."""
        for lobby in list(self._lobbies.get(guild_id, {}).values()):
            yield lobby.snapshot()

    def hosted_by(self, guild_id: int, user_id: int) -> list[LobbySnapshot]:
        return [s for s in self.list_by_guild(guild_id) if s.host_id == user_id]

    def __len__(self) -> int:
        return sum(len(guild) for guild in self._lobbies.values())

    # -- Reverse index --

    def lobby_of(self, user_id: int) -> Lobby | None:
        """The lobby a user currently occupies, if any."""
        ref = self._occupancy.get(user_id)
        if ref is None:
            return None
        guild_id, key = ref
        return self._lobbies.get(guild_id, {}).get(key)

    def index_user(self, user_id: int, lobby: Lobby) -> None:
        self._occupancy[user_id] = (lobby.guild_id, lobby.key)

    def unindex_user(self, user_id: int, lobby: Lobby) -> None:
        """Clear a user's index entry if it still points at ``lobby``."""
        if self._occupancy.get(user_id) == (lobby.guild_id, lobby.key):
            del self._occupancy[user_id]
