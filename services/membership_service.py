"""
MembershipService: roster transitions for a single lobby.

Pure state logic with no I/O. Each operation validates first and only then
mutates, so a rejected action never leaves partial state behind. Side effects
the caller should perform (re-render, direct messages) are described by the
returned values.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from domain.models.lobby import MAX_LOBBY_SIZE, MIN_LOBBY_SIZE, JoinPlacement, Lobby, LobbySnapshot
from services import error_codes
from services.lobby_registry import LobbyRegistry
from services.result import Result

logger = logging.getLogger("lobby_bot.services.membership")


@dataclass(frozen=True)
class JoinOutcome:
    """Where a joining user landed, and which lobby they were pulled out of."""

    placement: JoinPlacement
    previous_lobby: LobbySnapshot | None = None


class MembershipService:
    """
    Applies join/leave/kick/host/resize transitions.

    Keeps the registry's reverse index in step with every roster change so a
    user is never in two lobbies at once.
    """

    def __init__(self, registry: LobbyRegistry, clock: Callable[[], float] = time.time):
        self.registry = registry
        self.clock = clock

    @staticmethod
    def can_manage(lobby: Lobby, actor_id: int, actor_is_manager: bool) -> bool:
        """Host or manager capability."""
        return actor_is_manager or lobby.host_id == actor_id

    def join(self, lobby: Lobby, user_id: int, display_tag: str) -> Result[JoinOutcome]:
        """
        Add a user to the lobby, migrating them out of any other lobby first.

        Returns:
            Result with a JoinOutcome, or already_member.
        """
        if lobby.contains(user_id):
            return Result.fail("You have already joined this lobby.", code=error_codes.ALREADY_MEMBER)

        previous = self.registry.lobby_of(user_id)
        previous_snapshot = None
        if previous is not None and previous is not lobby:
            previous.remove(user_id)
            previous.touch(self.clock())
            self.registry.unindex_user(user_id, previous)
            previous_snapshot = previous.snapshot()
            logger.info(
                f"User {user_id} left lobby '{previous.lobby_id}' to join '{lobby.lobby_id}'"
            )

        placement = lobby.add(user_id, display_tag)
        self.registry.index_user(user_id, lobby)
        lobby.touch(self.clock())
        return Result.ok(JoinOutcome(placement=placement, previous_lobby=previous_snapshot))

    def leave(self, lobby: Lobby, user_id: int) -> Result[None]:
        """Remove a user. Waitlisted users are not promoted into the freed slot."""
        if not lobby.remove(user_id):
            return Result.fail("You are not part of this lobby.", code=error_codes.NOT_IN_LOBBY)
        self.registry.unindex_user(user_id, lobby)
        lobby.touch(self.clock())
        return Result.ok()

    def kick(
        self, lobby: Lobby, actor_id: int, target_id: int, actor_is_manager: bool = False
    ) -> Result[None]:
        """Remove another user on behalf of the host or a manager."""
        if not self.can_manage(lobby, actor_id, actor_is_manager):
            return Result.fail(
                "You do not have permission to kick players from this lobby.",
                code=error_codes.FORBIDDEN,
            )
        if target_id == lobby.host_id:
            return Result.fail("You cannot kick the host of the lobby.", code=error_codes.CANNOT_KICK_HOST)
        if target_id == actor_id:
            return Result.fail("You cannot kick yourself.", code=error_codes.CANNOT_KICK_SELF)

        if not lobby.contains(target_id):
            return Result.fail(
                "The specified user is not in the lobby or waitlist.",
                code=error_codes.NOT_IN_LOBBY,
            )
        return self.leave(lobby, target_id)

    def reassign_host(
        self, lobby: Lobby, actor_id: int, new_host_id: int, actor_is_manager: bool = False
    ) -> Result[int]:
        """
        Hand the lobby to another user. The new host is not added to members.

        Returns:
            Result with the previous host id.
        """
        if not self.can_manage(lobby, actor_id, actor_is_manager):
            return Result.fail(
                "You do not have permission to reassign the host for this lobby.",
                code=error_codes.FORBIDDEN,
            )
        if new_host_id == lobby.host_id:
            return Result.fail("That user is already the host of this lobby.", code=error_codes.NO_OP)

        old_host_id = lobby.host_id
        lobby.host_id = new_host_id
        lobby.touch(self.clock())
        return Result.ok(old_host_id)

    def resize(
        self, lobby: Lobby, actor_id: int, new_size: int, actor_is_manager: bool = False
    ) -> Result[int]:
        """
        Change the member cap. Growing the lobby does not pull anyone off the waitlist.

        Returns:
            Result with the previous max size.
        """
        if not self.can_manage(lobby, actor_id, actor_is_manager):
            return Result.fail(
                "You do not have permission to resize this lobby.",
                code=error_codes.FORBIDDEN,
            )
        if not MIN_LOBBY_SIZE <= new_size <= MAX_LOBBY_SIZE:
            return Result.fail(
                f"Lobby size must be between {MIN_LOBBY_SIZE} and {MAX_LOBBY_SIZE}.",
                code=error_codes.INVALID_SIZE,
            )
        if new_size < len(lobby.members):
            return Result.fail(
                f"The new maximum size ({new_size}) cannot be less than the current "
                f"number of players ({len(lobby.members)}).",
                code=error_codes.INVALID_SIZE,
            )

        old_size = lobby.max_size
        lobby.max_size = new_size
        lobby.touch(self.clock())
        return Result.ok(old_size)
