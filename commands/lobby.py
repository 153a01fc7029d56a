"""
Lobby commands: /startlobby, /endlobby, /host, /lobbysize, /list.

Also routes the Join / Leave / Kick components on lobby messages.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from config import LOBBY_CREATE_REQUIRES_MANAGER
from domain.models.lobby import MAX_LOBBY_SIZE, MIN_LOBBY_SIZE, JoinPlacement
from services.lobby_service import LobbyService
from services.permissions import has_manager_capability
from utils.command_helpers import handle_result
from utils.discord_adapters import DiscordLobbyRenderer, DiscordNotifier
from utils.embeds import create_lobby_list_embed
from utils.interaction_safety import safe_defer, safe_followup
from utils.lobby_actions import ActionKind, LobbyAction
from utils.lobby_views import KickSelectView

logger = logging.getLogger("lobby_bot.commands.lobby")

LOBBY_NAME_MAX_LENGTH = 60


class LobbyCommands(commands.Cog):
    """Slash commands and component handlers for custom game lobbies."""

    def __init__(
        self,
        bot: commands.Bot,
        lobby_service: LobbyService,
        create_requires_manager: bool = LOBBY_CREATE_REQUIRES_MANAGER,
    ):
        self.bot = bot
        self.lobby_service = lobby_service
        self.create_requires_manager = create_requires_manager

    @app_commands.command(name="startlobby", description="Create a new lobby")
    @app_commands.describe(
        lobbyname="Name of the lobby",
        maxsize="Maximum number of players in the lobby",
    )
    @app_commands.guild_only()
    async def startlobby(
        self,
        interaction: discord.Interaction,
        lobbyname: app_commands.Range[str, 1, LOBBY_NAME_MAX_LENGTH],
        maxsize: app_commands.Range[int, MIN_LOBBY_SIZE, MAX_LOBBY_SIZE] = None,
    ):
        logger.info(f"Startlobby command: User {interaction.user.id} creating '{lobbyname}'")
        if not await safe_defer(interaction, ephemeral=True):
            return

        if self.create_requires_manager and not has_manager_capability(interaction):
            await interaction.followup.send(
                "You do not have permission to use this command.", ephemeral=True
            )
            return

        result = await self.lobby_service.create_lobby(
            guild_id=interaction.guild.id,
            lobby_id=lobbyname,
            host_id=interaction.user.id,
            max_size=maxsize,
            host_tag=interaction.user.name,
            channel_id=interaction.channel_id,
        )
        if not await handle_result(interaction, result):
            return
        await interaction.followup.send(
            f"Lobby **{result.value.lobby_id}** has been created.", ephemeral=True
        )

    @app_commands.command(name="endlobby", description="End the current lobby")
    @app_commands.describe(lobbyname="Name of the lobby")
    @app_commands.guild_only()
    async def endlobby(self, interaction: discord.Interaction, lobbyname: str):
        logger.info(f"Endlobby command: User {interaction.user.id} ending '{lobbyname}'")
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await self.lobby_service.end_lobby(
            interaction.guild.id,
            lobbyname,
            interaction.user.id,
            actor_is_manager=has_manager_capability(interaction),
        )
        if not await handle_result(interaction, result):
            return
        await safe_followup(
            interaction,
            content=f"The lobby **{result.value.lobby_id}** has been ended.",
            ephemeral=False,
        )

    @app_commands.command(
        name="host",
        description="Reassign the host of a specific lobby (host or Custom Games Manager)",
    )
    @app_commands.describe(lobbyname="Name of the lobby to modify", newhost="The new host")
    @app_commands.guild_only()
    async def host(self, interaction: discord.Interaction, lobbyname: str, newhost: discord.Member):
        logger.info(
            f"Host command: User {interaction.user.id} reassigning '{lobbyname}' to {newhost.id}"
        )
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await self.lobby_service.reassign_host(
            interaction.guild.id,
            lobbyname,
            interaction.user.id,
            newhost.id,
            actor_is_manager=has_manager_capability(interaction),
        )
        if not await handle_result(interaction, result):
            return
        await interaction.followup.send(
            f"Host for lobby `{lobbyname}` has been reassigned to {newhost.mention}.",
            ephemeral=True,
        )

    @app_commands.command(name="lobbysize", description="Change the maximum size of a lobby")
    @app_commands.describe(
        lobbyname="Name of the lobby to modify",
        newsize="New maximum number of players",
    )
    @app_commands.guild_only()
    async def lobbysize(
        self,
        interaction: discord.Interaction,
        lobbyname: str,
        newsize: app_commands.Range[int, MIN_LOBBY_SIZE, MAX_LOBBY_SIZE],
    ):
        logger.info(f"Lobbysize command: User {interaction.user.id} resizing '{lobbyname}' to {newsize}")
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await self.lobby_service.resize(
            interaction.guild.id,
            lobbyname,
            interaction.user.id,
            newsize,
            actor_is_manager=has_manager_capability(interaction),
        )
        if not await handle_result(interaction, result):
            return
        await interaction.followup.send(
            f"The maximum size for lobby **{result.value.lobby_id}** has been updated to "
            f"**{newsize}** players.",
            ephemeral=True,
        )

    @app_commands.command(name="list", description="List all active lobbies in this server")
    @app_commands.guild_only()
    async def list_lobbies(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return

        lobbies = self.lobby_service.list_lobbies(interaction.guild.id)
        if not lobbies:
            await interaction.followup.send("There are no active lobbies in this server.", ephemeral=True)
            return
        await interaction.followup.send(embed=create_lobby_list_embed(lobbies))

    # -- Lobby message components --

    async def handle_lobby_action(self, interaction: discord.Interaction, action: LobbyAction):
        """Entry point for every Join / Leave / Kick component."""
        logger.info(
            f"Lobby action {action.kind.value} on '{action.lobby_id}' by {interaction.user.id}"
        )
        if interaction.guild is None or interaction.guild.id != action.guild_id:
            await interaction.response.send_message("Invalid lobby identifier.", ephemeral=True)
            return

        if action.kind is ActionKind.JOIN:
            await self._on_join(interaction, action)
        elif action.kind is ActionKind.LEAVE:
            await self._on_leave(interaction, action)
        elif action.kind is ActionKind.KICK:
            await self._on_kick_requested(interaction, action)
        elif action.kind is ActionKind.KICK_SELECT:
            await self._on_kick_selected(interaction, action)

    async def _on_join(self, interaction: discord.Interaction, action: LobbyAction):
        if not await safe_defer(interaction, ephemeral=True):
            return
        result = await self.lobby_service.join(
            action.guild_id, action.lobby_id, interaction.user.id, interaction.user.name
        )
        if not await handle_result(interaction, result):
            return
        if result.value.placement is JoinPlacement.WAITLIST:
            message = "The lobby is full. You have been added to the waitlist."
        else:
            message = "You have joined the lobby."
        await interaction.followup.send(message, ephemeral=True)

    async def _on_leave(self, interaction: discord.Interaction, action: LobbyAction):
        if not await safe_defer(interaction, ephemeral=True):
            return
        result = await self.lobby_service.leave(action.guild_id, action.lobby_id, interaction.user.id)
        await handle_result(interaction, result, "You have left the lobby.")

    async def _on_kick_requested(self, interaction: discord.Interaction, action: LobbyAction):
        if not await safe_defer(interaction, ephemeral=True):
            return

        lobby = self.lobby_service.get_lobby(action.guild_id, action.lobby_id)
        if lobby is None:
            await interaction.followup.send("Lobby not found.", ephemeral=True)
            return

        actor_id = interaction.user.id
        if not self.lobby_service.membership.can_manage(
            lobby, actor_id, has_manager_capability(interaction)
        ):
            await interaction.followup.send(
                "You do not have permission to kick players from this lobby.", ephemeral=True
            )
            return

        view = KickSelectView(lobby, self.handle_lobby_action, exclude={lobby.host_id, actor_id})
        if not view.has_targets:
            await interaction.followup.send(
                "There are no members to kick in this lobby.", ephemeral=True
            )
            return
        await interaction.followup.send(
            "Select a member to kick from the lobby:", view=view, ephemeral=True
        )

    async def _on_kick_selected(self, interaction: discord.Interaction, action: LobbyAction):
        if action.payload is None:
            await interaction.response.send_message("Unknown action.", ephemeral=True)
            return
        if not await safe_defer(interaction, ephemeral=True):
            return

        result = await self.lobby_service.kick(
            action.guild_id,
            action.lobby_id,
            interaction.user.id,
            action.payload,
            actor_is_manager=has_manager_capability(interaction),
            guild_name=interaction.guild.name,
        )
        if not await handle_result(interaction, result):
            return
        await safe_followup(
            interaction,
            content=f"<@{action.payload}> has been kicked from the lobby.",
            ephemeral=False,
        )


async def setup(bot: commands.Bot):
    lobby_service = getattr(bot, "lobby_service", None)
    cog = LobbyCommands(bot, lobby_service)

    # Lobby messages route their buttons back into this cog
    container = getattr(bot, "service_container", None)
    if container is not None:
        container.bind_adapters(
            DiscordLobbyRenderer(bot, cog.handle_lobby_action),
            DiscordNotifier(bot),
        )
    await bot.add_cog(cog)
