"""
Lobby domain model.

A lobby is a host-owned roster scoped to one guild: an ordered member list
capped at ``max_size`` and an unbounded, ordered waitlist. The model only
knows how to mutate its own lists; cross-lobby rules (one lobby per user,
permissions) live in the service layer.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MIN_LOBBY_SIZE = 2
MAX_LOBBY_SIZE = 24


def lobby_key(lobby_id: str) -> str:
    """Case-insensitive lookup key for a lobby name."""
    return lobby_id.strip().lower()


class JoinPlacement(Enum):
    """Which list a joining user landed in."""

    MEMBER = "member"
    WAITLIST = "waitlist"


@dataclass(frozen=True)
class LobbySnapshot:
    """Read-only copy of a lobby handed out by list operations."""

    lobby_id: str
    guild_id: int
    host_id: int
    max_size: int
    members: tuple[int, ...]
    waitlist: tuple[int, ...]
    gamertags: tuple[tuple[int, str], ...]
    last_active: float

    @property
    def member_count(self) -> int:
        return len(self.members)

    def gamertag(self, user_id: int) -> str | None:
        return dict(self.gamertags).get(user_id)


@dataclass
class Lobby:
    """Represents a custom games lobby."""

    lobby_id: str
    guild_id: int
    host_id: int
    max_size: int
    members: list[int] = field(default_factory=list)
    waitlist: list[int] = field(default_factory=list)
    gamertags: dict[int, str] = field(default_factory=dict)
    last_active: float = field(default_factory=time.time)
    channel_id: int | None = None  # Channel the lobby message was posted in
    render_handle: Any = None  # Owned by the rendering adapter

    @property
    def key(self) -> str:
        return lobby_key(self.lobby_id)

    def contains(self, user_id: int) -> bool:
        return user_id in self.members or user_id in self.waitlist

    def is_full(self) -> bool:
        return len(self.members) >= self.max_size

    def add(self, user_id: int, gamertag: str) -> JoinPlacement:
        """Append to members if there is room, otherwise to the waitlist."""
        if self.is_full():
            self.waitlist.append(user_id)
            placement = JoinPlacement.WAITLIST
        else:
            self.members.append(user_id)
            placement = JoinPlacement.MEMBER
        self.gamertags[user_id] = gamertag
        return placement

    def remove(self, user_id: int) -> bool:
        """
        Remove a user from whichever list holds them.

        Waitlisted users are never promoted to fill the freed slot.
        """
        if user_id in self.members:
            self.members.remove(user_id)
        elif user_id in self.waitlist:
            self.waitlist.remove(user_id)
        else:
            return False
        self.gamertags.pop(user_id, None)
        return True

    def gamertag(self, user_id: int) -> str | None:
        return self.gamertags.get(user_id)

    def occupants(self) -> list[int]:
        """Members followed by waitlisted users."""
        return self.members + self.waitlist

    def touch(self, now: float | None = None) -> None:
        self.last_active = time.time() if now is None else now

    def snapshot(self) -> LobbySnapshot:
        return LobbySnapshot(
            lobby_id=self.lobby_id,
            guild_id=self.guild_id,
            host_id=self.host_id,
            max_size=self.max_size,
            members=tuple(self.members),
            waitlist=tuple(self.waitlist),
            gamertags=tuple(self.gamertags.items()),
            last_active=self.last_active,
        )
