"""
Domain models - pure data structures representing lobby and map vote state.
"""

from domain.models.lobby import JoinPlacement, Lobby, LobbySnapshot
from domain.models.map_catalog import MapCatalog, MapEntry
from domain.models.map_vote import VoteOutcome, VoteSession, VoteStep

__all__ = [
    "JoinPlacement",
    "Lobby",
    "LobbySnapshot",
    "MapCatalog",
    "MapEntry",
    "VoteOutcome",
    "VoteSession",
    "VoteStep",
]
