"""
Typed lobby component actions.

Buttons and selects on a lobby message carry a custom id built from a
LobbyAction, and interactions are routed by parsing it back. The lobby name
goes last so names containing the separator still round-trip.
"""

from dataclasses import dataclass
from enum import Enum

CUSTOM_ID_PREFIX = "lobby"
CUSTOM_ID_MAX_LENGTH = 100


class ActionKind(Enum):
    JOIN = "join"
    LEAVE = "leave"
    KICK = "kick"  # opens the member picker
    KICK_SELECT = "kick_select"


@dataclass(frozen=True)
class LobbyAction:
    """A component action aimed at one lobby."""

    kind: ActionKind
    guild_id: int
    lobby_id: str
    payload: int | None = None  # target user for actions that have one

    @property
    def custom_id(self) -> str:
        payload = "" if self.payload is None else str(self.payload)
        custom_id = f"{CUSTOM_ID_PREFIX}:{self.kind.value}:{self.guild_id}:{payload}:{self.lobby_id}"
        if len(custom_id) > CUSTOM_ID_MAX_LENGTH:
            raise ValueError(f"Lobby name too long for a component id: {self.lobby_id!r}")
        return custom_id

    @classmethod
    def from_custom_id(cls, custom_id: str | None) -> "LobbyAction | None":
        """Parse a custom id. None if it is not a lobby action."""
        if not custom_id:
            return None
        parts = custom_id.split(":", 4)
        if len(parts) != 5 or parts[0] != CUSTOM_ID_PREFIX:
            return None
        _, kind, guild_id, payload, lobby_id = parts
        try:
            return cls(
                kind=ActionKind(kind),
                guild_id=int(guild_id),
                lobby_id=lobby_id,
                payload=int(payload) if payload else None,
            )
        except ValueError:
            return None
