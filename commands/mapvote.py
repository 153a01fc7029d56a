"""
Map vote command: /mapvote.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from services import error_codes
from services.map_vote_service import MapVoteService
from utils.interaction_safety import safe_defer
from utils.map_vote_prompter import DiscordMapVotePrompter

logger = logging.getLogger("lobby_bot.commands.mapvote")


class MapVoteCommands(commands.Cog):
    """Lets a lobby host pick filters and put three maps to a reaction vote."""

    def __init__(self, bot: commands.Bot, map_vote_service: MapVoteService):
        self.bot = bot
        self.map_vote_service = map_vote_service

    @app_commands.command(name="mapvote", description="Initiate a map vote")
    @app_commands.describe(lobbyname="Lobby to vote for (defaults to the one you host)")
    @app_commands.guild_only()
    async def mapvote(self, interaction: discord.Interaction, lobbyname: str | None = None):
        logger.info(f"Mapvote command: User {interaction.user.id} (lobby={lobbyname})")
        if not await safe_defer(interaction, ephemeral=True):
            return

        prompter = DiscordMapVotePrompter(interaction, self.bot)
        result = await self.map_vote_service.run(
            interaction.guild.id,
            interaction.user.id,
            prompter,
            lobby_id=lobbyname,
        )
        if result.success:
            return

        # Steps that never reached the prompter still need a reply
        if result.error_code == error_codes.NO_HOSTED_LOBBIES:
            await interaction.followup.send(result.error, ephemeral=True)
        else:
            logger.info(f"Map vote ended without a result: {result.error_code}")


async def setup(bot: commands.Bot):
    map_vote_service = getattr(bot, "map_vote_service", None)
    await bot.add_cog(MapVoteCommands(bot, map_vote_service))
