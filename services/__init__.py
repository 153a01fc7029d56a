"""
Application services layer.

Services orchestrate lobby operations using the registry and domain services.
"""

from services.idle_reaper import IdleReaper
from services.lobby_registry import LobbyRegistry
from services.lobby_service import LobbyService
from services.map_vote_service import MapVoteService
from services.membership_service import JoinOutcome, MembershipService

# Result type for consistent error handling
from services.result import Result

# Boundary interfaces (ABCs)
from services.interfaces import IMapVotePrompter, ILobbyRenderer, INotifier

__all__ = [
    # Concrete services
    "LobbyRegistry",
    "MembershipService",
    "JoinOutcome",
    "IdleReaper",
    "LobbyService",
    "MapVoteService",
    # Result type
    "Result",
    # Interfaces
    "ILobbyRenderer",
    "INotifier",
    "IMapVotePrompter",
]
