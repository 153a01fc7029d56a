"""
Discord implementation of the map vote prompter.

Lobby and filter choices are ephemeral select menus shown to the host; the
ballot is a public message in the lobby's channel that users vote on with
number reactions. The bot seeds one reaction per candidate so users can click
them, which is why this prompter reports ``seeds_markers = True``.
"""

import asyncio
import logging

import discord

from domain.models.lobby import LobbySnapshot
from domain.models.map_catalog import GAMEMODE_OPTIONS, LOBBY_SIZE_OPTIONS
from domain.models.map_vote import NUMBER_MARKERS, VoteSession
from services import error_codes
from services.interfaces import IMapVotePrompter
from utils.discord_adapters import resolve_channel
from utils.embeds import (
    create_filter_selection_embed,
    create_lobby_selection_embed,
    create_map_vote_embed,
    format_vote_outcome,
)

logger = logging.getLogger("lobby_bot.utils.map_vote_prompter")

SELECT_OPTION_LIMIT = 25

ABORT_MESSAGES = {
    error_codes.SELECTION_TIMED_OUT: "Lobby selection timed out. Please try again.",
    error_codes.FILTERS_TIMED_OUT: "Selection timed out. Please try again.",
    error_codes.INVALID_FILTER: "Please select at least one lobby size and one gamemode.",
    error_codes.NO_MATCHING_MAPS: "No maps found matching the selected criteria.",
    error_codes.LOBBY_NOT_FOUND: "That lobby is no longer available.",
    error_codes.VOTE_IN_PROGRESS: "A map vote is already running for that lobby.",
    error_codes.RENDER_FAILURE: "There was an error during the map vote.",
}


class ChoiceView(discord.ui.View):
    """
    One select menu restricted to a single user.

    Has no timeout of its own; MapVoteService enforces the deadline and the
    prompter stops the view when the wait ends either way.
    """

    def __init__(
        self,
        user_id: int,
        placeholder: str,
        options: list[tuple[str, str]],
        multiple: bool = False,
    ):
        super().__init__(timeout=None)
        self.user_id = user_id
        self.choice: asyncio.Future = asyncio.get_running_loop().create_future()
        self.select = discord.ui.Select(
            placeholder=placeholder,
            min_values=1,
            max_values=len(options) if multiple else 1,
            options=[
                discord.SelectOption(label=label[:100], value=value)
                for value, label in options[:SELECT_OPTION_LIMIT]
            ],
        )
        self.select.callback = self._on_select
        self.add_item(self.select)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return interaction.user.id == self.user_id

    async def _on_select(self, interaction: discord.Interaction):
        await interaction.response.defer()
        if not self.choice.done():
            self.choice.set_result(list(self.select.values))
        self.stop()

    async def wait_choice(self) -> list[str]:
        return await self.choice


class DiscordMapVotePrompter(IMapVotePrompter):
    """Prompts the host through an interaction and runs the reaction ballot."""

    seeds_markers = True

    def __init__(self, interaction: discord.Interaction, client: discord.Client):
        self.interaction = interaction
        self.client = client
        self._prompt: discord.WebhookMessage | None = None
        self._ballot: discord.Message | None = None

    async def _show(self, embed: discord.Embed, view: discord.ui.View | None) -> None:
        if self._prompt is None:
            self._prompt = await self.interaction.followup.send(
                embed=embed, view=view, ephemeral=True, wait=True
            )
        else:
            await self._prompt.edit(embed=embed, view=view)

    async def _choose(self, embed: discord.Embed, view: ChoiceView) -> list[str]:
        await self._show(embed, view)
        try:
            return await view.wait_choice()
        finally:
            view.stop()

    async def _channel(self, session: VoteSession):
        channel = await resolve_channel(self.client, session.channel_id)
        return channel or self.interaction.channel

    async def choose_lobby(self, session: VoteSession, lobbies: list[LobbySnapshot]) -> str | None:
        view = ChoiceView(
            session.host_id,
            "Select a lobby",
            [(snapshot.lobby_id, snapshot.lobby_id) for snapshot in lobbies],
        )
        values = await self._choose(create_lobby_selection_embed(), view)
        return values[0] if values else None

    async def choose_sizes(self, session: VoteSession) -> list[str] | None:
        view = ChoiceView(
            session.host_id, "Select lobby size(s)", list(LOBBY_SIZE_OPTIONS), multiple=True
        )
        return await self._choose(create_filter_selection_embed(session), view)

    async def choose_gamemodes(self, session: VoteSession) -> list[str] | None:
        # Show the sizes picked in the previous step
        preview = VoteSession(
            guild_id=session.guild_id,
            host_id=session.host_id,
            lobby_id=session.lobby_id,
            sizes=session.sizes,
        )
        view = ChoiceView(
            session.host_id, "Select gamemode(s)", list(GAMEMODE_OPTIONS), multiple=True
        )
        return await self._choose(create_filter_selection_embed(preview), view)

    async def open_ballot(self, session: VoteSession) -> None:
        if self._prompt is not None:
            await self._prompt.edit(embed=create_filter_selection_embed(session), view=None)

        channel = await self._channel(session)
        self._ballot = await channel.send(
            content=(
                f"React to vote for the next map! {int(self.seconds_left(session))} seconds "
                "until voting closes."
            ),
            embed=create_map_vote_embed(session),
        )
        for i in range(len(session.candidates)):
            await self._ballot.add_reaction(session.marker(i))

    @staticmethod
    def seconds_left(session: VoteSession) -> float:
        """Seconds until the ballot closes, as shown in the announcement."""
        if session.deadline is None:
            return 0
        remaining = session.deadline - discord.utils.utcnow().timestamp()
        return max(0, round(remaining))

    async def close_ballot(self, session: VoteSession) -> dict[int, int]:
        if self._ballot is None:
            return {}
        # Reaction counts on the cached message are stale; fetch it again
        message = await self._ballot.channel.fetch_message(self._ballot.id)
        counts: dict[int, int] = {}
        for reaction in message.reactions:
            if reaction.emoji in NUMBER_MARKERS:
                counts[NUMBER_MARKERS.index(reaction.emoji)] = reaction.count
        return counts

    async def announce(self, session: VoteSession) -> None:
        channel = await self._channel(session)
        await channel.send(content=format_vote_outcome(session))

    async def clear(self, session: VoteSession, reason: str) -> None:
        message = ABORT_MESSAGES.get(reason, "The map vote was cancelled.")
        if session.lobby_id:
            message = f"**Lobby: {session.lobby_id}**\n{message}"
        if self._prompt is not None:
            await self._prompt.edit(content=message, embed=None, view=None)
        else:
            await self.interaction.followup.send(content=message, ephemeral=True)

    async def report_error(self, session: VoteSession) -> None:
        channel = await self._channel(session)
        await channel.send(
            content=f"**Lobby: {session.lobby_id}**\nThere was an error during the map vote."
        )
