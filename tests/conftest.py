"""
Pytest fixtures for tests.

This module provides centralized constants and fixtures to reduce duplication
across the test suite. Import TEST_GUILD_ID from here instead of defining it locally.

Lobby state is in-memory, so every fixture builds a fresh registry; nothing
leaks between tests.
"""

import pytest

from domain.models.map_catalog import MapCatalog, MapEntry
from services.interfaces import ILobbyRenderer, INotifier
from services.lobby_registry import LobbyRegistry
from services.lobby_service import LobbyService
from services.membership_service import MembershipService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================
# Use these instead of defining TEST_GUILD_ID locally in each test file.
# This ensures consistency across all tests.

TEST_GUILD_ID = 12345
"""Standard guild ID for single-guild tests. Import and use this constant."""

TEST_GUILD_ID_SECONDARY = 67890
"""Secondary guild ID for multi-guild isolation tests."""

HOST_ID = 1000
"""Default lobby host used by the fixtures."""


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingRenderer(ILobbyRenderer):
    """Renderer fake that records calls. Set ``fail`` to make every call raise."""

    def __init__(self):
        self.rendered = []
        self.updates = []
        self.removed = []
        self.fail = False
        self._next_handle = 0

    async def render(self, lobby):
        if self.fail:
            raise RuntimeError("render failed")
        self._next_handle += 1
        self.rendered.append(lobby.lobby_id)
        return f"message-{self._next_handle}"

    async def update(self, handle, lobby):
        if self.fail:
            raise RuntimeError("update failed")
        self.updates.append((handle, lobby.lobby_id, tuple(lobby.members), tuple(lobby.waitlist)))

    async def remove(self, handle):
        if self.fail:
            raise RuntimeError("remove failed")
        self.removed.append(handle)


class RecordingNotifier(INotifier):
    """Notifier fake. User ids in ``unreachable`` raise like closed DMs."""

    def __init__(self):
        self.sent = []
        self.unreachable = set()

    async def notify(self, user_id, message):
        if user_id in self.unreachable:
            raise RuntimeError("Cannot send messages to this user")
        self.sent.append((user_id, message))

    def messages_for(self, user_id):
        return [message for uid, message in self.sent if uid == user_id]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry():
    return LobbyRegistry()


@pytest.fixture
def membership(registry, clock):
    return MembershipService(registry, clock=clock)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def lobby_service(registry, membership, renderer, notifier):
    """LobbyService with recording adapters and no idle reaper."""
    return LobbyService(
        registry=registry,
        membership=membership,
        renderer=renderer,
        notifier=notifier,
    )


@pytest.fixture
def make_lobby(registry):
    """Register a lobby directly, bypassing host auto-join."""

    def _make(lobby_id="Alpha", guild_id=TEST_GUILD_ID, host_id=HOST_ID, max_size=4, channel_id=None):
        return registry.create(guild_id, lobby_id, host_id, max_size, channel_id=channel_id).value

    return _make


@pytest.fixture
def sample_catalog():
    """Small catalog covering each size and gamemode tag at least once."""
    return MapCatalog(
        [
            MapEntry("Blood Gulch", "Slayer", "Standard", "Medium, Large"),
            MapEntry("Zombie Mall", "Infection", "Infection", "Medium"),
            MapEntry("Mini Golf", "Golf", "Minigame", "Small"),
            MapEntry("Race Track", "Race", "Vehicle", "Any"),
            MapEntry("Hangar", "CTF", "Standard", "Small"),
            MapEntry("Untagged"),
        ]
    )
