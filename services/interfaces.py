"""
Boundary interfaces (ABCs) between the lobby core and the Discord adapter.

The core never touches discord.py objects. It calls these contracts, which
the adapter in ``utils/`` implements, and tests replace with fakes.

Usage:
    class DiscordLobbyRenderer(ILobbyRenderer):
        async def render(self, lobby: Lobby) -> Any:
            ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domain.models.lobby import Lobby, LobbySnapshot
    from domain.models.map_vote import VoteSession


class ILobbyRenderer(ABC):
    """Owns the visible representation of a lobby."""

    @abstractmethod
    async def render(self, lobby: "Lobby") -> Any:
        """Create the representation and return an opaque handle to it."""
        ...

    @abstractmethod
    async def update(self, handle: Any, lobby: "Lobby") -> None:
        """Redraw an existing representation from current lobby state."""
        ...

    @abstractmethod
    async def remove(self, handle: Any) -> None:
        """Delete the representation. Must tolerate an already-removed handle."""
        ...


class INotifier(ABC):
    """Sends direct messages to users."""

    @abstractmethod
    async def notify(self, user_id: int, message: str) -> None:
        """Deliver a message. May raise if the user cannot be reached."""
        ...


class IMapVotePrompter(ABC):
    """
    Drives the user-facing half of a map vote.

    Every ``choose_*`` coroutine returns None if the user never answered.
    The orchestrator enforces the deadlines, so implementations may wait
    indefinitely.
    """

    # True when open_ballot seeds one marker per candidate that close_ballot
    # will count as a vote.
    seeds_markers: bool = False

    @abstractmethod
    async def choose_lobby(
        self, session: "VoteSession", lobbies: list["LobbySnapshot"]
    ) -> str | None:
        ...

    @abstractmethod
    async def choose_sizes(self, session: "VoteSession") -> list[str] | None:
        ...

    @abstractmethod
    async def choose_gamemodes(self, session: "VoteSession") -> list[str] | None:
        ...

    @abstractmethod
    async def open_ballot(self, session: "VoteSession") -> None:
        """Announce the candidates and start accepting votes."""
        ...

    @abstractmethod
    async def close_ballot(self, session: "VoteSession") -> dict[int, int]:
        """Stop accepting votes and return raw counts per candidate index."""
        ...

    @abstractmethod
    async def announce(self, session: "VoteSession") -> None:
        """Announce the resolved outcome."""
        ...

    @abstractmethod
    async def clear(self, session: "VoteSession", reason: str) -> None:
        """Remove partial UI after an abort."""
        ...

    @abstractmethod
    async def report_error(self, session: "VoteSession") -> None:
        """Fallback message when announcing failed."""
        ...
