"""
discord.py implementations of the lobby boundary interfaces.

DiscordLobbyRenderer posts one message per lobby (embed plus controls) in the
lobby's channel and edits it in place. DiscordNotifier sends direct messages.
Both let discord.py errors propagate; LobbyService logs them and carries on.
"""

import logging

import discord

from domain.models.lobby import Lobby
from services.interfaces import ILobbyRenderer, INotifier
from utils.embeds import create_lobby_embed
from utils.lobby_views import ActionHandler, LobbyControlsView

logger = logging.getLogger("lobby_bot.utils.discord_adapters")


async def resolve_channel(client: discord.Client, channel_id: int | None):
    """Cached channel lookup with an API fallback. None if unknown."""
    if channel_id is None:
        return None
    channel = client.get_channel(channel_id)
    if channel is not None:
        return channel
    try:
        return await client.fetch_channel(channel_id)
    except (discord.NotFound, discord.Forbidden):
        return None


class DiscordLobbyRenderer(ILobbyRenderer):
    """Renders a lobby as an embed with Join / Leave / Kick buttons."""

    def __init__(self, client: discord.Client, action_handler: ActionHandler):
        self.client = client
        self.action_handler = action_handler

    def _view(self, lobby: Lobby) -> LobbyControlsView:
        return LobbyControlsView(lobby, self.action_handler)

    async def render(self, lobby: Lobby) -> discord.Message:
        channel = await resolve_channel(self.client, lobby.channel_id)
        if channel is None:
            raise RuntimeError(f"Channel {lobby.channel_id} for lobby {lobby.lobby_id} is unavailable")
        return await channel.send(embed=create_lobby_embed(lobby), view=self._view(lobby))

    async def update(self, handle: discord.Message, lobby: Lobby) -> None:
        await handle.edit(embed=create_lobby_embed(lobby), view=self._view(lobby))

    async def remove(self, handle: discord.Message) -> None:
        try:
            await handle.delete()
        except discord.NotFound:
            logger.debug(f"Lobby message {handle.id} was already deleted")


class DiscordNotifier(INotifier):
    """Direct messages through the bot account."""

    def __init__(self, client: discord.Client):
        self.client = client

    async def notify(self, user_id: int, message: str) -> None:
        user = self.client.get_user(user_id)
        if user is None:
            user = await self.client.fetch_user(user_id)
        await user.send(message)
