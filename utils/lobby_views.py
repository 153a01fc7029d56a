"""
Discord UI views attached to lobby messages.

Provides:
- LobbyControlsView: Join / Leave / Kick buttons under every lobby embed
- KickSelectView: ephemeral member picker opened by the Kick button

Components carry a LobbyAction custom id and hand it to an async handler
(the lobby cog), so views hold no lobby state of their own.
"""

import logging
from collections.abc import Awaitable, Callable

import discord

from domain.models.lobby import Lobby
from utils.lobby_actions import ActionKind, LobbyAction

logger = logging.getLogger("lobby_bot.utils.lobby_views")

ActionHandler = Callable[[discord.Interaction, LobbyAction], Awaitable[None]]

KICK_SELECT_TIMEOUT_SECONDS = 60
SELECT_OPTION_LIMIT = 25


class LobbyActionButton(discord.ui.Button):
    """Button that forwards its LobbyAction to the view's handler."""

    def __init__(self, action: LobbyAction, label: str, style: discord.ButtonStyle):
        super().__init__(label=label, style=style, custom_id=action.custom_id)
        self.action = action

    async def callback(self, interaction: discord.Interaction):
        await self.view.handler(interaction, self.action)


class LobbyControlsView(discord.ui.View):
    """Join / Leave / Kick buttons for one lobby. Lives as long as the lobby."""

    def __init__(self, lobby: Lobby, handler: ActionHandler):
        super().__init__(timeout=None)
        self.handler = handler
        for kind, label, style in (
            (ActionKind.JOIN, "Join", discord.ButtonStyle.primary),
            (ActionKind.LEAVE, "Leave", discord.ButtonStyle.secondary),
            (ActionKind.KICK, "Kick", discord.ButtonStyle.danger),
        ):
            action = LobbyAction(kind=kind, guild_id=lobby.guild_id, lobby_id=lobby.lobby_id)
            self.add_item(LobbyActionButton(action, label, style))

    async def on_error(self, interaction: discord.Interaction, error: Exception, item) -> None:
        logger.error(
            f"Lobby component {getattr(item, 'custom_id', '?')} failed for user {interaction.user.id}: {error}",
            exc_info=error,
        )
        try:
            if interaction.response.is_done():
                await interaction.followup.send("Something went wrong.", ephemeral=True)
            else:
                await interaction.response.send_message("Something went wrong.", ephemeral=True)
        except discord.HTTPException as exc:
            logger.warning(f"Could not report component failure: {exc}")


class KickTargetSelect(discord.ui.Select):
    """Single-choice picker over a lobby's members and waitlist."""

    def __init__(self, lobby: Lobby, exclude: set[int]):
        options = [
            discord.SelectOption(label=(lobby.gamertag(uid) or str(uid))[:100], value=str(uid))
            for uid in lobby.occupants()
            if uid not in exclude
        ][:SELECT_OPTION_LIMIT]
        action = LobbyAction(
            kind=ActionKind.KICK_SELECT, guild_id=lobby.guild_id, lobby_id=lobby.lobby_id
        )
        super().__init__(
            placeholder="Select a member to kick",
            min_values=1,
            max_values=1,
            options=options,
            custom_id=action.custom_id,
        )
        self.action = action

    async def callback(self, interaction: discord.Interaction):
        target_id = int(self.values[0])
        self.view.stop()
        await self.view.handler(
            interaction,
            LobbyAction(
                kind=self.action.kind,
                guild_id=self.action.guild_id,
                lobby_id=self.action.lobby_id,
                payload=target_id,
            ),
        )


class KickSelectView(discord.ui.View):
    """Ephemeral kick picker. Stops after one selection or on timeout."""

    def __init__(self, lobby: Lobby, handler: ActionHandler, exclude: set[int] | None = None):
        super().__init__(timeout=KICK_SELECT_TIMEOUT_SECONDS)
        self.handler = handler
        self.select = KickTargetSelect(lobby, exclude or {lobby.host_id})
        self.add_item(self.select)

    @property
    def has_targets(self) -> bool:
        return bool(self.select.options)
