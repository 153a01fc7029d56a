"""
Reusable Discord embed builders.
"""

import datetime

import discord

from domain.models.lobby import Lobby, LobbySnapshot
from domain.models.map_catalog import GAMEMODE_OPTIONS, LOBBY_SIZE_OPTIONS
from domain.models.map_vote import VoteSession

LOBBY_COLOR = discord.Color(0x00AE86)
FIELD_VALUE_LIMIT = 1024
MAX_FIELDS = 25


def _truncate(text: str, max_len: int = FIELD_VALUE_LIMIT) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def format_gamertags(lobby: Lobby | LobbySnapshot, user_ids) -> str:
    """One gamertag per line, in join order. 'None' when empty."""
    tags = [lobby.gamertag(uid) or f"<@{uid}>" for uid in user_ids]
    return _truncate("\n".join(tags)) if tags else "None"


def create_lobby_embed(lobby: Lobby) -> discord.Embed:
    """Create the lobby embed with host, fill level, gamertags and waitlist."""
    embed = discord.Embed(
        title=f"Customs Lobby: {lobby.lobby_id}",
        description="Lobby is active!",
        color=LOBBY_COLOR,
        timestamp=datetime.datetime.fromtimestamp(lobby.last_active, tz=datetime.timezone.utc),
    )
    embed.add_field(name="Host", value=f"<@{lobby.host_id}>", inline=True)
    embed.add_field(name="Players", value=f"{len(lobby.members)}/{lobby.max_size}", inline=True)
    embed.add_field(name="Gamertags", value=format_gamertags(lobby, lobby.members), inline=False)
    embed.add_field(name="Waitlist", value=format_gamertags(lobby, lobby.waitlist), inline=False)
    return embed


def create_lobby_list_embed(lobbies: list[LobbySnapshot]) -> discord.Embed:
    """Summary of every open lobby in a guild."""
    embed = discord.Embed(
        title="Active Lobbies",
        description="List of all active lobbies in this server:",
        color=LOBBY_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    for snapshot in lobbies[:MAX_FIELDS]:
        embed.add_field(
            name=f"Lobby: {snapshot.lobby_id}",
            value=(
                f"Host: <@{snapshot.host_id}>\n"
                f"Players: {snapshot.member_count}/{snapshot.max_size}\n"
                f"Waitlist: {len(snapshot.waitlist)}"
            ),
            inline=False,
        )
    if len(lobbies) > MAX_FIELDS:
        embed.set_footer(text=f"Showing {MAX_FIELDS} of {len(lobbies)} lobbies")
    return embed


def create_lobby_selection_embed() -> discord.Embed:
    return discord.Embed(
        title="Initiate Map Vote",
        description="Please select the lobby you want to initiate a map vote for.",
        color=LOBBY_COLOR,
    )


def create_filter_selection_embed(session: VoteSession) -> discord.Embed:
    """Filter prompt; reflects whatever has been picked so far."""
    size_labels = dict(LOBBY_SIZE_OPTIONS)
    mode_labels = dict(GAMEMODE_OPTIONS)
    if session.sizes:
        description = "Lobby sizes selected: " + ", ".join(size_labels.get(s, s) for s in session.sizes)
        if session.gamemodes:
            description += "\nGamemodes selected: " + ", ".join(
                mode_labels.get(g, g) for g in session.gamemodes
            )
        else:
            description += "\nNow select gamemodes."
    else:
        description = "Please select the desired lobby size and gamemode for the map vote."
    return discord.Embed(
        title=f"Map Vote Settings for Lobby: {session.lobby_id}",
        description=description,
        color=LOBBY_COLOR,
    )


def create_map_vote_embed(session: VoteSession) -> discord.Embed:
    """Ballot listing each candidate next to its number marker."""
    lines = [
        f"{session.marker(i)} **{entry.name}** - {entry.game_mode or 'Unknown'}"
        for i, entry in enumerate(session.candidates)
    ]
    return discord.Embed(
        title=f"Map Vote for Lobby: {session.lobby_id}",
        description="\n".join(lines),
        color=LOBBY_COLOR,
        timestamp=discord.utils.utcnow(),
    )


def format_vote_outcome(session: VoteSession) -> str:
    """Announcement text for a resolved vote."""
    outcome = session.outcome
    if outcome is None:
        return f"**Lobby: {session.lobby_id}**\nThere was an error during the map vote."
    if outcome.randomly_chosen:
        return (
            f"**Lobby: {session.lobby_id}**\nNo votes were cast. Randomly selected map: "
            f"**{outcome.map.name}** with gametype **{outcome.map.game_mode or 'Unknown'}**."
        )
    return (
        f"**Lobby: {session.lobby_id}**\n**{outcome.map.name}** has been selected with "
        f"**{outcome.votes}** vote(s)!"
    )
